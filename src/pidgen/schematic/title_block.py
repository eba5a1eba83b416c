"""
Title block generator for schematic diagrams.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date

from .constants import (
    BORDER_COLOR,
    DEFAULT_DATE_FORMAT,
    DEFAULT_SUBTITLE,
    DEFAULT_TITLE,
    LINE_COLOR,
    NAME_COLOR,
    THIN_LINE_WIDTH,
    TITLE_BLOCK_FILL,
    TITLE_BLOCK_GAP,
    TITLE_BLOCK_HEIGHT,
    TITLE_BLOCK_INSET,
    TITLE_BLOCK_WIDTH,
)
from .geometry import Bounds, CanvasTransform
from .markup import fmt, num, text_element


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


@dataclass
class TitleBlockInfo:
    """Information displayed in the title block."""
    title: str = DEFAULT_TITLE
    subtitle: str = DEFAULT_SUBTITLE
    generated_on: str | None = None
    equipment_count: int = 0
    connection_count: int = 0  # Connections actually drawn, not connections requested

    def __post_init__(self):
        if self.generated_on is None:
            self.generated_on = date.today().strftime(DEFAULT_DATE_FORMAT)

    @property
    def counts_text(self) -> str:
        """Summary line, e.g. '2 components, 1 connection'."""
        return (
            f"{_plural(self.equipment_count, 'component')}, "
            f"{_plural(self.connection_count, 'connection')}"
        )


def title_block_bounds(canvas_width: float, canvas_height: float) -> Bounds:
    """Bounds of the title block anchored to the bottom-right canvas corner."""
    x = canvas_width - TITLE_BLOCK_WIDTH - TITLE_BLOCK_INSET
    y = canvas_height - TITLE_BLOCK_HEIGHT - TITLE_BLOCK_INSET
    return Bounds(x, y, x + TITLE_BLOCK_WIDTH, y + TITLE_BLOCK_HEIGHT)


def place_title_block(transform: CanvasTransform, footprints: Iterable[Bounds]) -> CanvasTransform:
    """
    Grow the canvas downwards until the anchored title block clears every
    equipment footprint.

    Footprints cover a symbol plus its tag and parameter labels. The canvas
    width and the canvas offsets never change, so equipment stays put and
    only the bottom edge (and the title block with it) moves.

    Returns:
        The transform, with a larger height if a clash had to be resolved
    """
    footprints = list(footprints)
    height = transform.height

    while True:
        clearance = title_block_bounds(transform.width, height).expand(TITLE_BLOCK_GAP)
        clashing = [fp for fp in footprints if fp.overlaps(clearance)]
        if not clashing:
            break
        lowest = max(fp.max_y for fp in clashing)
        height = lowest + TITLE_BLOCK_GAP + TITLE_BLOCK_HEIGHT + TITLE_BLOCK_INSET

    if height == transform.height:
        return transform
    return transform.with_height(height)


@dataclass
class TitleBlock:
    """
    Generates the diagram title block.

    The block is anchored to the bottom-right corner of the canvas and holds
    the title, the generation date and the equipment/connection counts.
    """
    info: TitleBlockInfo = field(default_factory=TitleBlockInfo)
    canvas_width: float = TITLE_BLOCK_WIDTH + 2 * TITLE_BLOCK_INSET
    canvas_height: float = TITLE_BLOCK_HEIGHT + 2 * TITLE_BLOCK_INSET

    @property
    def area(self) -> Bounds:
        return title_block_bounds(self.canvas_width, self.canvas_height)

    def generate_svg(self) -> str:
        """Generate SVG content for the title block."""
        area = self.area
        tb_x = area.min_x
        tb_y = area.min_y
        center_x = tb_x + TITLE_BLOCK_WIDTH / 2
        info = self.info

        return "\n".join([
            '<g id="title-block">',
            f'<rect x="{fmt(tb_x)}" y="{fmt(tb_y)}" width="{num(TITLE_BLOCK_WIDTH)}" '
            f'height="{num(TITLE_BLOCK_HEIGHT)}" fill="{TITLE_BLOCK_FILL}" '
            f'stroke="{BORDER_COLOR}" stroke-width="{num(THIN_LINE_WIDTH)}"/>',
            f'<line x1="{fmt(tb_x)}" y1="{fmt(tb_y + 20)}" x2="{fmt(tb_x + TITLE_BLOCK_WIDTH)}" '
            f'y2="{fmt(tb_y + 20)}" stroke="{BORDER_COLOR}" stroke-width="0.5"/>',
            text_element(center_x, tb_y + 14, info.title, 11, fill=LINE_COLOR, bold=True),
            text_element(center_x, tb_y + 34, f"{info.subtitle} - {info.generated_on}", 9, fill=NAME_COLOR),
            text_element(center_x, tb_y + 45, info.counts_text, 8, fill="#888"),
            "</g>",
        ])
