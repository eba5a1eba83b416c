"""
Pipe rendering for schematic export.

Resolves each pipe connection into a drawable route:
- Sampled routes (two or more sample points) are drawn verbatim as a
  polyline, transformed with the same canvas transform as the equipment.
- Otherwise a straight segment joins the rotated port anchors of both ends.

A flow arrow is placed at the middle of the route, pointing downstream.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .constants import ARROW_COLOR, LINE_COLOR, PIPE_STROKE_WIDTH
from .geometry import CanvasTransform, Point, port_world_position
from .markup import escape_text, fmt, num

if TYPE_CHECKING:
    from ..process_model import Equipment, PipeConnection

logger = logging.getLogger(__name__)


def arrow_placement(points: Sequence[Point], straight: bool = False) -> tuple[Point, float]:
    """
    Position and angle (degrees) of the flow arrow along a route.

    For polylines the arrow sits on the point at index n // 2, oriented along
    the tangent estimated from its immediate neighbors. For a straight
    segment it sits at the segment midpoint along the segment direction.
    """
    n = len(points)
    if n < 2:
        raise ValueError("A route needs at least two points")

    if straight:
        (x1, y1), (x2, y2) = points[0], points[-1]
        position = ((x1 + x2) / 2, (y1 + y2) / 2)
        return position, math.degrees(math.atan2(y2 - y1, x2 - x1))

    mid = n // 2
    prev_x, prev_y = points[max(0, mid - 1)]
    next_x, next_y = points[min(n - 1, mid + 1)]
    angle = math.degrees(math.atan2(next_y - prev_y, next_x - prev_x))
    return points[mid], angle


@dataclass(frozen=True)
class PipeRoute:
    """A resolved, drawable pipe between two equipment items."""
    from_id: str
    to_id: str
    points: tuple[Point, ...]
    arrow_position: Point
    arrow_angle: float
    straight: bool

    @property
    def path_data(self) -> str:
        """SVG path data (M ... L ...) through all route points."""
        first, *rest = self.points
        parts = [f"M {fmt(first[0])} {fmt(first[1])}"]
        parts.extend(f"L {fmt(x)} {fmt(y)}" for x, y in rest)
        return " ".join(parts)

    def to_svg(self) -> str:
        """Render the route as a pipe group with a single midpoint flow arrow."""
        ax, ay = self.arrow_position
        kind = "straight" if self.straight else "routed"
        return (
            f'<g class="pipe {kind}" data-from="{escape_text(self.from_id)}" '
            f'data-to="{escape_text(self.to_id)}">'
            f'<path d="{self.path_data}" fill="none" stroke="{LINE_COLOR}" '
            f'stroke-width="{num(PIPE_STROKE_WIDTH)}"/>'
            f'<g transform="translate({fmt(ax)}, {fmt(ay)}) rotate({fmt(self.arrow_angle)})">'
            f'<polygon points="-6,-5 6,0 -6,5" fill="{ARROW_COLOR}"/>'
            f"</g>"
            f"</g>"
        )


class PipeRenderer:
    """
    Resolve pipe connections against the equipment placed in one diagram.

    Args:
        equipment_by_id: Equipment placed in this diagram, keyed by id
        transform: Canvas transform shared with the equipment symbols
    """

    def __init__(
        self,
        equipment_by_id: Mapping[str, "Equipment"],
        transform: CanvasTransform,
    ) -> None:
        self.equipment_by_id = equipment_by_id
        self.transform = transform

    def render(self, connection: "PipeConnection") -> PipeRoute | None:
        """
        Resolve one connection into a route.

        Returns:
            PipeRoute, or None when either end references missing equipment
        """
        source = self.equipment_by_id.get(connection.from_id)
        target = self.equipment_by_id.get(connection.to_id)
        if source is None or target is None:
            logger.debug(
                "Skipping pipe %s -> %s: endpoint equipment not in diagram",
                connection.from_id, connection.to_id,
            )
            return None

        samples = connection.sample_points or ()
        if len(samples) >= 2:
            points = tuple(self.transform.apply(x, z) for x, z in samples)
            straight = False
        else:
            points = (
                port_world_position(source, connection.from_port, self.transform),
                port_world_position(target, connection.to_port, self.transform),
            )
            straight = True

        arrow_position, arrow_angle = arrow_placement(points, straight)
        return PipeRoute(
            from_id=connection.from_id,
            to_id=connection.to_id,
            points=points,
            arrow_position=arrow_position,
            arrow_angle=arrow_angle,
            straight=straight,
        )

    def render_all(self, connections: Sequence["PipeConnection"]) -> list[PipeRoute]:
        """Resolve every connection, dropping those with dangling references."""
        routes = []
        for connection in connections:
            route = self.render(connection)
            if route is not None:
                routes.append(route)
        return routes
