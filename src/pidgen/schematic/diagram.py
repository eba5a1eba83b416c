"""
Schematic diagram assembler.

Turns placed equipment and pipe connections into a single P&ID-style SVG
document. The pipeline for one call is:

    positions -> CanvasTransform -> tags -> symbols + pipe routes -> document

Nothing is kept between calls: every generate() builds a fresh tag
allocator and canvas transform from its own input.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .config import SchematicConfig
from .constants import (
    ARROW_COLOR,
    ARROW_MARKER_ID,
    BACKGROUND_COLOR,
    BORDER_COLOR,
    BORDER_INSET,
    BORDER_WIDTH,
    LINE_COLOR,
    NAME_COLOR,
    NAME_FONT_SIZE,
    NAME_OFFSET_Y,
    PARAM_COLOR,
    PARAM_FONT_SIZE,
    PARAM_LINE_HEIGHT,
    PARAM_OFFSET_Y,
    PORT_MARKER_RADIUS,
    SYMBOL_SIZE,
    TAG_FONT_SIZE,
    TAG_OFFSET_Y,
)
from .export import ExportSink, export_document, export_pdf, export_svg
from .geometry import (
    Bounds,
    CanvasTransform,
    compute_canvas_transform,
    rotate_local_offset,
    svg_rotation_transform,
    world_position,
)
from .markup import escape_text, estimate_text_width, fmt, num, text_element
from .pipes import PipeRenderer, PipeRoute
from .symbols import EquipmentClass, symbol_for
from .tags import TagAllocator
from .title_block import TitleBlock, TitleBlockInfo, place_title_block

if TYPE_CHECKING:
    from ..process_model import Equipment, PipeConnection, ProcessModel

logger = logging.getLogger(__name__)


def _svg_header(transform: CanvasTransform) -> str:
    w = fmt(transform.width)
    h = fmt(transform.height)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{w}" height="{h}" viewBox="0 0 {w} {h}">'
    )


def _svg_defs() -> str:
    """Reusable resources: the flow arrowhead referenced by every pipe."""
    return (
        "<defs>"
        f'<marker id="{ARROW_MARKER_ID}" markerWidth="8" markerHeight="6" refX="4" refY="3" orient="auto">'
        f'<polygon points="0,0 8,3 0,6" fill="{ARROW_COLOR}"/>'
        "</marker>"
        "</defs>"
    )


def _svg_background(transform: CanvasTransform) -> str:
    return (
        f'<rect class="background" x="0" y="0" width="{fmt(transform.width)}" '
        f'height="{fmt(transform.height)}" fill="{BACKGROUND_COLOR}"/>'
    )


def _svg_border(transform: CanvasTransform) -> str:
    return (
        f'<rect class="border" x="{num(BORDER_INSET)}" y="{num(BORDER_INSET)}" '
        f'width="{fmt(transform.width - 2 * BORDER_INSET)}" '
        f'height="{fmt(transform.height - 2 * BORDER_INSET)}" '
        f'fill="none" stroke="{BORDER_COLOR}" stroke-width="{num(BORDER_WIDTH)}"/>'
    )


def equipment_labels(
    equipment: "Equipment",
    tag: str,
    config: SchematicConfig,
) -> list[tuple[str, float]]:
    """Text lines drawn around a symbol, as (text, font size) pairs."""
    labels = [(tag, TAG_FONT_SIZE)]
    if equipment.name:
        labels.append((equipment.name, NAME_FONT_SIZE))
    if config.show_parameters:
        labels.extend((param.text, PARAM_FONT_SIZE) for param in equipment.parameters.values())
    return labels


def equipment_footprint(
    center: tuple[float, float],
    label_lines: int,
    label_width: float = 0.0,
) -> Bounds:
    """
    Area covered by a symbol and its labels, used to keep the title block clear.

    Symbols are drawn within one SYMBOL_SIZE of their center (tall columns
    included); tag text sits above, parameter lines stack below. Labels are
    centered on the symbol, so a label wider than the symbol widens the
    footprint on both sides.
    """
    cx, cy = center
    half_width = max(SYMBOL_SIZE, label_width / 2)
    top = cy - max(SYMBOL_SIZE, TAG_OFFSET_Y + TAG_FONT_SIZE)
    bottom = cy + max(SYMBOL_SIZE, PARAM_OFFSET_Y + label_lines * PARAM_LINE_HEIGHT)
    return Bounds(cx - half_width, top, cx + half_width, bottom)


def render_equipment(
    equipment: "Equipment",
    tag: str,
    transform: CanvasTransform,
    config: SchematicConfig,
) -> str:
    """
    Render one equipment group: rotated glyph, tag, display name,
    parameter lines and port markers.
    """
    x, y = world_position(equipment, transform)
    symbol = symbol_for(equipment.equipment_class)

    parts = [
        f'<g class="equipment" data-id="{escape_text(equipment.id)}" '
        f'data-tag="{escape_text(tag)}" transform="translate({fmt(x)}, {fmt(y)})">',
        f'<g class="symbol" transform="{svg_rotation_transform(equipment.rotation)}">',
        symbol.glyph(),
        "</g>",
        text_element(0, -TAG_OFFSET_Y, tag, TAG_FONT_SIZE, fill=LINE_COLOR, bold=True),
    ]

    if equipment.name:
        parts.append(text_element(0, -NAME_OFFSET_Y, equipment.name, NAME_FONT_SIZE, fill=NAME_COLOR))

    if config.show_parameters:
        for i, param in enumerate(equipment.parameters.values()):
            parts.append(text_element(
                0, PARAM_OFFSET_Y + i * PARAM_LINE_HEIGHT, param.text, PARAM_FONT_SIZE, fill=PARAM_COLOR,
            ))

    if config.show_port_markers:
        for port_name, anchor in symbol.ports.items():
            px, py = rotate_local_offset(anchor.dx, anchor.dz, equipment.rotation)
            parts.append(
                f'<circle class="port" data-port="{escape_text(port_name)}" cx="{fmt(px)}" cy="{fmt(py)}" '
                f'r="{num(PORT_MARKER_RADIUS)}" fill="#fff" stroke="{LINE_COLOR}" stroke-width="1.5"/>'
            )

    parts.append("</g>")
    return "".join(parts)


@dataclass
class SchematicDiagram:
    """
    Generates a P&ID-style schematic from placed equipment and pipes.

    Attributes:
        equipment: Placed equipment, in tag-numbering order
        connections: Pipe connections; dangling ones are skipped
        config: Title block text and detail layer settings
        generated_at: Date shown in the title block (defaults to now)

    Usage:
        diagram = SchematicDiagram(equipment, connections)
        svg = diagram.generate()   # None when there is no equipment
        diagram.export_svg("plant.svg")
    """
    equipment: Sequence["Equipment"] = ()
    connections: Sequence["PipeConnection"] = ()
    config: SchematicConfig = field(default_factory=SchematicConfig)
    generated_at: date | datetime | str | None = None

    # Results of the last generate() call
    _svg_content: str | None = field(default=None, init=False, repr=False)
    _tags: list[str] = field(default_factory=list, init=False, repr=False)
    _equipment_count: int = field(default=0, init=False, repr=False)
    _routes: list[PipeRoute] = field(default_factory=list, init=False, repr=False)
    _transform: CanvasTransform | None = field(default=None, init=False, repr=False)
    _generated: bool = field(default=False, init=False, repr=False)

    @classmethod
    def from_model(cls, model: "ProcessModel", **kwargs: Any) -> "SchematicDiagram":
        """Create a diagram for a ProcessModel."""
        return cls(equipment=model.equipment, connections=model.connections, **kwargs)

    @property
    def tags(self) -> list[str]:
        """Tags from the last generate() call, in equipment order."""
        return list(self._tags)

    @property
    def routes(self) -> list[PipeRoute]:
        """Pipe routes drawn by the last generate() call."""
        return list(self._routes)

    @property
    def transform(self) -> CanvasTransform | None:
        """Final canvas transform of the last generate() call."""
        return self._transform

    @property
    def equipment_count(self) -> int:
        return self._equipment_count

    @property
    def connection_count(self) -> int:
        """Connections actually drawn (dangling references excluded)."""
        return len(self._routes)

    def _generated_on(self) -> str:
        stamp = self.generated_at if self.generated_at is not None else datetime.now()
        if isinstance(stamp, str):
            return stamp
        return stamp.strftime(self.config.date_format)

    def generate(self) -> str | None:
        """
        Generate the complete schematic as SVG text.

        Returns:
            The SVG document, or None when there is no equipment to draw
        """
        self._generated = True
        equipment = list(self.equipment or ())
        if not equipment:
            self._svg_content = None
            self._tags = []
            self._equipment_count = 0
            self._routes = []
            self._transform = None
            return None

        transform = compute_canvas_transform(item.position for item in equipment)
        tags = TagAllocator().allocate(equipment)

        unknown = [item.id for item in equipment if item.equipment_class is EquipmentClass.GENERIC]
        if unknown:
            logger.debug("Drawing generic symbols for equipment without a known class: %s", unknown)

        equipment_by_id = {item.id: item for item in equipment}
        routes = PipeRenderer(equipment_by_id, transform).render_all(list(self.connections or ()))
        skipped = len(self.connections or ()) - len(routes)
        if skipped:
            logger.debug("Skipped %d pipe(s) with dangling equipment references", skipped)

        footprints = []
        for item, tag in zip(equipment, tags):
            labels = equipment_labels(item, tag, self.config)
            footprints.append(equipment_footprint(
                world_position(item, transform),
                len(item.parameters) if self.config.show_parameters else 0,
                max(estimate_text_width(text, size) for text, size in labels),
            ))
        transform = place_title_block(transform, footprints)

        title_block = TitleBlock(
            info=TitleBlockInfo(
                title=self.config.title,
                subtitle=self.config.subtitle,
                generated_on=self._generated_on(),
                equipment_count=len(equipment),
                connection_count=len(routes),
            ),
            canvas_width=transform.width,
            canvas_height=transform.height,
        )

        svg_parts = [
            _svg_header(transform),
            _svg_defs(),
            _svg_background(transform),
            _svg_border(transform),
        ]
        svg_parts.extend(
            render_equipment(item, tag, transform, self.config) for item, tag in zip(equipment, tags)
        )
        svg_parts.extend(route.to_svg() for route in routes)
        svg_parts.append(title_block.generate_svg())
        svg_parts.append("</svg>")

        self._tags = tags
        self._equipment_count = len(equipment)
        self._routes = routes
        self._transform = transform
        self._svg_content = "\n".join(svg_parts) + "\n"
        return self._svg_content

    def _document(self) -> str | None:
        if not self._generated:
            self.generate()
        return self._svg_content

    def export(self, sink: ExportSink, filename: str | None = None) -> Any:
        """Hand the document to an export sink (no-op for an empty diagram)."""
        return export_document(self._document(), sink, filename or self.config.filename)

    def export_svg(self, filepath: str | Path) -> Path | None:
        """Export the diagram as an SVG file."""
        return export_svg(self._document(), filepath)

    def export_pdf(self, filepath: str | Path) -> Path | None:
        """Export the diagram as a PDF file using svglib + reportlab."""
        return export_pdf(self._document(), filepath)


def generate_schematic(
    equipment: Sequence["Equipment"] | None,
    connections: Sequence["PipeConnection"] | None = None,
    *,
    config: SchematicConfig | None = None,
    generated_at: date | datetime | str | None = None,
) -> str | None:
    """
    Compile equipment and pipe connections into an SVG schematic.

    Returns:
        The SVG document, or None when there is no equipment to draw
    """
    diagram = SchematicDiagram(
        equipment=equipment or (),
        connections=connections or (),
        config=config or SchematicConfig(),
        generated_at=generated_at,
    )
    return diagram.generate()
