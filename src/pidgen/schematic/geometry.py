"""
Geometry engine for schematic export.

Pure coordinate math, applied in a fixed order:
1. Local symbol frame -> rotated local frame (rotate_local_offset)
2. Rotated local frame -> diagram space (translate by the equipment's world position)
3. Model plan coordinates -> diagram space (CanvasTransform.apply)

Plan coordinates are (x, z) in model units with +z pointing down on the
diagram, matching SVG's y-down screen convention.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from .constants import MARGIN, SCALE, SYMBOL_SIZE
from .markup import fmt
from .symbols import port_anchor

if TYPE_CHECKING:
    from ..process_model import Equipment

Point = tuple[float, float]


# =============================================================================
# CANVAS TRANSFORM
# =============================================================================

@dataclass(frozen=True)
class CanvasTransform:
    """
    Scale + offset mapping model plan coordinates to diagram coordinates,
    together with the canvas size it was derived for.
    """
    scale: float
    offset_x: float
    offset_z: float
    width: float
    height: float

    def apply(self, x: float, z: float) -> Point:
        """Map a plan position (model units) to diagram coordinates."""
        return (x * self.scale + self.offset_x, z * self.scale + self.offset_z)

    def with_height(self, height: float) -> "CanvasTransform":
        """Return a copy with a different canvas height (offsets unchanged)."""
        return CanvasTransform(self.scale, self.offset_x, self.offset_z, self.width, height)


def compute_canvas_transform(
    positions: Iterable[Point],
    scale: float = SCALE,
    margin: float = MARGIN,
    symbol_size: float = SYMBOL_SIZE,
) -> CanvasTransform:
    """
    Derive the canvas transform from the bounding box of plan positions.

    The canvas reserves one margin plus one symbol on every side of the
    bounding box. The minimum corner lands one margin plus half a symbol
    inside the canvas origin, which leaves the extra reserved room at the
    right and bottom edges where the title block is anchored.

    Args:
        positions: (x, z) plan positions in model units
        scale: Diagram units per model unit
        margin: Clear space around the outermost symbols
        symbol_size: Nominal symbol footprint

    Returns:
        CanvasTransform with strictly positive width and height

    Raises:
        ValueError: If no positions are given
    """
    points = np.asarray(list(positions), dtype=float).reshape(-1, 2)
    if points.shape[0] == 0:
        raise ValueError("Cannot compute a canvas transform without positions")

    min_x, min_z = points.min(axis=0)
    max_x, max_z = points.max(axis=0)

    width = (max_x - min_x) * scale + 2 * margin + 2 * symbol_size
    height = (max_z - min_z) * scale + 2 * margin + 2 * symbol_size
    offset_x = -min_x * scale + margin + symbol_size / 2
    offset_z = -min_z * scale + margin + symbol_size / 2

    return CanvasTransform(
        scale=float(scale),
        offset_x=float(offset_x),
        offset_z=float(offset_z),
        width=float(width),
        height=float(height),
    )


# =============================================================================
# ROTATION AND TRANSLATION
# =============================================================================

def rotation_matrix(angle_deg: float) -> np.ndarray:
    """
    Create the 2x2 rotation matrix used for symbols and port anchors.

    The angle is negated before building the counter-clockwise matrix, so
    glyphs, port markers and pipe anchors all share this one definition.
    """
    angle = math.radians(-angle_deg)
    c, s = math.cos(angle), math.sin(angle)
    return np.array([[c, -s], [s, c]])


def rotate_local_offset(dx: float, dz: float, angle_deg: float) -> Point:
    """Rotate a local-frame offset by the equipment rotation."""
    rotated = rotation_matrix(angle_deg) @ np.array([dx, dz], dtype=float)
    return (float(rotated[0]), float(rotated[1]))


def translate(offset: Point, origin: Point) -> Point:
    """Translate a rotated offset to an absolute diagram position."""
    return (origin[0] + offset[0], origin[1] + offset[1])


def svg_rotation_transform(angle_deg: float) -> str:
    """SVG matrix() transform for the same rotation as rotation_matrix()."""
    R = rotation_matrix(angle_deg)
    # SVG matrix(a b c d e f): x' = a*x + c*y + e, y' = b*x + d*y + f
    return (
        f"matrix({fmt(R[0, 0], 6)} {fmt(R[1, 0], 6)} "
        f"{fmt(R[0, 1], 6)} {fmt(R[1, 1], 6)} 0 0)"
    )


# =============================================================================
# EQUIPMENT POSITIONS
# =============================================================================

def world_position(equipment: "Equipment", transform: CanvasTransform) -> Point:
    """Diagram position of an equipment symbol center."""
    x, z = equipment.position
    return transform.apply(x, z)


def port_world_position(
    equipment: "Equipment",
    port_name: str | None,
    transform: CanvasTransform,
) -> Point:
    """
    Diagram position of a named port on a placed equipment.

    Falls back to the bare symbol center when the class has no such port.
    """
    origin = world_position(equipment, transform)
    anchor = port_anchor(equipment.equipment_class, port_name)
    if anchor is None:
        return origin
    return translate(rotate_local_offset(anchor.dx, anchor.dz, equipment.rotation), origin)


# =============================================================================
# BOUNDS
# =============================================================================

@dataclass(frozen=True)
class Bounds:
    """Axis-aligned rectangle in diagram coordinates."""
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    def overlaps(self, other: "Bounds") -> bool:
        """Check if this bounds overlaps with another (touching edges do not count)."""
        return not (
            self.max_x <= other.min_x
            or other.max_x <= self.min_x
            or self.max_y <= other.min_y
            or other.max_y <= self.min_y
        )

    def expand(self, margin: float) -> "Bounds":
        """Return a new bounds expanded by margin on all sides."""
        return Bounds(
            self.min_x - margin,
            self.min_y - margin,
            self.max_x + margin,
            self.max_y + margin,
        )
