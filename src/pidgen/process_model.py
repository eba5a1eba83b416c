"""
Process model consumed by the schematic compiler.

A process model is an ordered list of placed equipment and an ordered list of
pipe connections between equipment ports. Models can be:
- Built directly in Python
- Loaded from the JSON payload the 3D modeling tool exports
  (components/pipes with camelCase keys)
- Loaded from a hand-written YAML file (equipment/connections, snake_case keys)

Coordinates are plan coordinates (x, z) in model units; rotation is in
degrees. Lists coming from YAML/JSON are converted to tuples on construction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .schematic.symbols import EquipmentClass

Point = tuple[float, float]


class ModelFormatError(ValueError):
    """Raised when a model file or mapping is structurally invalid."""


def _pick(data: dict[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the value of the first key present in data."""
    for key in keys:
        if key in data:
            return data[key]
    return default


def _to_point(value: Any, what: str) -> Point:
    """Convert a 2-element list or tuple to a float point."""
    try:
        x, z = value
        return (float(x), float(z))
    except (TypeError, ValueError) as e:
        raise ModelFormatError(f"{what} must be a pair of numbers, got {value!r}") from e


@dataclass
class ProcessParameter:
    """One displayed process parameter (e.g. Flow: 100 m3/h)."""
    label: str
    value: Any
    unit: str = ""

    @property
    def text(self) -> str:
        """Display line 'label: value unit' (no trailing space without a unit)."""
        return f"{self.label}: {self.value} {self.unit}".rstrip()


@dataclass
class Equipment:
    """
    A placed equipment instance.

    Attributes:
        id: Caller-assigned identifier, unique within one diagram
        equipment_class: Symbol library class (unknown keys become GENERIC)
        position: (x, z) plan position in model units
        rotation: Rotation in degrees
        name: Optional display name
        parameters: Ordered parameter key -> ProcessParameter mapping
    """
    id: str
    equipment_class: EquipmentClass = EquipmentClass.GENERIC
    position: Point = (0.0, 0.0)
    rotation: float = 0.0
    name: str | None = None
    parameters: dict[str, ProcessParameter] = field(default_factory=dict)

    def __post_init__(self):
        self.id = str(self.id)
        self.equipment_class = EquipmentClass.parse(self.equipment_class)
        self.position = _to_point(self.position, f"Position of equipment '{self.id}'")
        try:
            self.rotation = float(self.rotation or 0.0)
        except (TypeError, ValueError) as e:
            raise ModelFormatError(
                f"Rotation of equipment '{self.id}' must be a number, got {self.rotation!r}"
            ) from e
        # Handle parameters as dict of dicts (or bare values) from YAML/JSON
        self.parameters = {
            str(key): _to_parameter(key, param) for key, param in (self.parameters or {}).items()
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Equipment":
        """Create equipment from either payload style."""
        if not isinstance(data, dict):
            raise ModelFormatError(f"Equipment entry must be a mapping, got {type(data).__name__}")
        equipment_id = _pick(data, "id")
        if equipment_id is None:
            raise ModelFormatError(f"Equipment entry has no 'id': {data!r}")

        position = _pick(data, "position")
        if position is None:
            position = (_pick(data, "x", default=0.0), _pick(data, "z", default=0.0))

        parameters = _pick(data, "parameters", default={}) or {}
        if not isinstance(parameters, dict):
            raise ModelFormatError(f"Parameters of equipment '{equipment_id}' must be a mapping")

        return cls(
            id=equipment_id,
            equipment_class=_pick(data, "class", "equipment_class", "type"),
            position=position,
            rotation=_pick(data, "rotation", default=0.0),
            name=_pick(data, "name"),
            parameters=parameters,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary suitable for YAML serialization."""
        result: dict[str, Any] = {
            "id": self.id,
            "class": self.equipment_class.value,
            "position": list(self.position),
        }
        if self.rotation:
            result["rotation"] = self.rotation
        if self.name:
            result["name"] = self.name
        if self.parameters:
            result["parameters"] = {
                key: {"label": p.label, "value": p.value, "unit": p.unit}
                for key, p in self.parameters.items()
            }
        return result


def _to_parameter(key: Any, param: Any) -> ProcessParameter:
    if isinstance(param, ProcessParameter):
        return param
    if isinstance(param, dict):
        return ProcessParameter(
            label=str(param.get("label", key)),
            value=param.get("value", ""),
            unit=str(param.get("unit") or ""),
        )
    return ProcessParameter(label=str(key), value=param)


@dataclass
class PipeConnection:
    """
    A pipe between two equipment ports.

    Attributes:
        from_id: Upstream equipment id
        from_port: Port name on the upstream equipment
        to_id: Downstream equipment id
        to_port: Port name on the downstream equipment
        sample_points: Optional routed polyline (x, z) in model units
    """
    from_id: str
    from_port: str | None
    to_id: str
    to_port: str | None
    sample_points: tuple[Point, ...] | None = None

    def __post_init__(self):
        self.from_id = str(self.from_id)
        self.to_id = str(self.to_id)
        if self.sample_points is not None:
            if not isinstance(self.sample_points, (list, tuple)):
                raise ModelFormatError(
                    f"Sample points of pipe {self.from_id} -> {self.to_id} must be a list of points, "
                    f"got {self.sample_points!r}"
                )
            self.sample_points = tuple(
                _to_point(p, f"Sample point of pipe {self.from_id} -> {self.to_id}")
                for p in self.sample_points
            )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PipeConnection":
        """Create a connection from either payload style."""
        if not isinstance(data, dict):
            raise ModelFormatError(f"Connection entry must be a mapping, got {type(data).__name__}")
        from_id = _pick(data, "from_id", "fromId", "from")
        to_id = _pick(data, "to_id", "toId", "to")
        if from_id is None or to_id is None:
            raise ModelFormatError(f"Connection entry needs both ends: {data!r}")
        return cls(
            from_id=from_id,
            from_port=_pick(data, "from_port", "fromPort"),
            to_id=to_id,
            to_port=_pick(data, "to_port", "toPort"),
            sample_points=_pick(data, "sample_points", "points"),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "from_id": self.from_id,
            "from_port": self.from_port,
            "to_id": self.to_id,
            "to_port": self.to_port,
        }
        if self.sample_points:
            result["sample_points"] = [list(p) for p in self.sample_points]
        return result


@dataclass
class ProcessModel:
    """Ordered equipment and connections for one diagram."""
    equipment: list[Equipment] = field(default_factory=list)
    connections: list[PipeConnection] = field(default_factory=list)

    def __post_init__(self):
        # Handle entries as lists of dicts from YAML/JSON
        self.equipment = [
            e if isinstance(e, Equipment) else Equipment.from_dict(e) for e in self.equipment or []
        ]
        self.connections = [
            c if isinstance(c, PipeConnection) else PipeConnection.from_dict(c)
            for c in self.connections or []
        ]

    @property
    def is_empty(self) -> bool:
        return not self.equipment

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "ProcessModel":
        """
        Build a model from a mapping.

        Accepts both the modeling tool's export payload
        ({"components": [...], "pipes": [...]}) and the snake_case file format
        ({"equipment": [...], "connections": [...]}).
        """
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ModelFormatError(f"Model root must be a mapping, got {type(data).__name__}")
        equipment = _pick(data, "equipment", "components", default=[]) or []
        connections = _pick(data, "connections", "pipes", default=[]) or []
        if not isinstance(equipment, list) or not isinstance(connections, list):
            raise ModelFormatError("Model 'equipment' and 'connections' must be lists")
        return cls(equipment=equipment, connections=connections)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "ProcessModel":
        """Load a model from a YAML or JSON file."""
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dictionary suitable for YAML serialization."""
        return {
            "equipment": [e.to_dict() for e in self.equipment],
            "connections": [c.to_dict() for c in self.connections],
        }

    def to_yaml(self, path: str | Path) -> None:
        """Save the model to a YAML file."""
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False, allow_unicode=True)
