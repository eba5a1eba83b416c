"""
Opt-in anomaly report for process models.

Schematic generation is best-effort: unknown classes draw as a generic
square, dangling pipes are dropped and unknown ports fall back to the
symbol center. find_anomalies() lists everything that would be degraded
that way, so a caller can refuse to export an incomplete model. It never
affects what the diagram generator emits.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from .symbols import EquipmentClass, port_anchor

if TYPE_CHECKING:
    from ..process_model import Equipment, PipeConnection


class AnomalyKind(str, Enum):
    UNKNOWN_CLASS = "unknown_class"
    DUPLICATE_ID = "duplicate_id"
    DANGLING_REFERENCE = "dangling_reference"
    UNKNOWN_PORT = "unknown_port"


@dataclass(frozen=True)
class Anomaly:
    """One piece of model data the diagram would silently degrade."""
    kind: AnomalyKind
    subject: str
    message: str

    def __str__(self) -> str:
        return f"[{self.kind.value}] {self.subject}: {self.message}"


def _pipe_name(connection: "PipeConnection") -> str:
    return f"{connection.from_id}:{connection.from_port} -> {connection.to_id}:{connection.to_port}"


def find_anomalies(
    equipment: Iterable["Equipment"],
    connections: Iterable["PipeConnection"] = (),
) -> list[Anomaly]:
    """
    Collect every anomaly in a model, equipment first, then connections.

    Ports are only checked on equipment with a known class; a generic
    symbol has no port table, which is already reported as unknown_class.
    """
    equipment = list(equipment or ())
    anomalies: list[Anomaly] = []

    for item in equipment:
        if item.equipment_class is EquipmentClass.GENERIC:
            anomalies.append(Anomaly(
                AnomalyKind.UNKNOWN_CLASS, item.id,
                "no symbol for this equipment class, drawn as a generic square",
            ))

    counts = Counter(item.id for item in equipment)
    for equipment_id, count in counts.items():
        if count > 1:
            anomalies.append(Anomaly(
                AnomalyKind.DUPLICATE_ID, equipment_id,
                f"id used by {count} equipment items, pipes attach to the last one",
            ))

    by_id = {item.id: item for item in equipment}
    for connection in connections or ():
        name = _pipe_name(connection)
        missing = [eid for eid in (connection.from_id, connection.to_id) if eid not in by_id]
        if missing:
            anomalies.append(Anomaly(
                AnomalyKind.DANGLING_REFERENCE, name,
                f"references missing equipment {', '.join(sorted(set(missing)))}; pipe is not drawn",
            ))
            continue

        # A routed pipe ignores port anchors entirely
        if connection.sample_points and len(connection.sample_points) >= 2:
            continue

        for equipment_id, port_name in (
            (connection.from_id, connection.from_port),
            (connection.to_id, connection.to_port),
        ):
            item = by_id[equipment_id]
            if item.equipment_class is EquipmentClass.GENERIC:
                continue
            if port_anchor(item.equipment_class, port_name) is None:
                anomalies.append(Anomaly(
                    AnomalyKind.UNKNOWN_PORT, name,
                    f"{item.equipment_class.value} '{equipment_id}' has no port {port_name!r}; "
                    "pipe attaches to the symbol center",
                ))

    return anomalies
