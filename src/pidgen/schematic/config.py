"""
User-tunable settings for schematic export.

Layout geometry (scale, margins, symbol size) is fixed in constants.py; this
configuration covers what a user may reasonably change per project: title
block text, date format, default export filename and optional detail layers.

The configuration can be:
- Constructed directly in Python
- Loaded from a YAML file (optionally nested under a top-level "schematic" key)
- Overridden from CLI options
"""

from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml

from .constants import DEFAULT_DATE_FORMAT, DEFAULT_FILENAME, DEFAULT_SUBTITLE, DEFAULT_TITLE


@dataclass(frozen=True)
class SchematicConfig:
    """
    Settings for one schematic export.

    Attributes:
        title: Title block heading
        subtitle: Text shown before the generation date in the title block
        date_format: strftime format for the generation date
        filename: Default filename handed to export sinks
        show_port_markers: Draw small circles at each port anchor
        show_parameters: Draw parameter lines below each symbol
    """

    title: str = DEFAULT_TITLE
    subtitle: str = DEFAULT_SUBTITLE
    date_format: str = DEFAULT_DATE_FORMAT
    filename: str = DEFAULT_FILENAME
    show_port_markers: bool = True
    show_parameters: bool = True

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "SchematicConfig":
        """Build a configuration from a mapping, rejecting unknown keys."""
        if not data:
            return cls()
        if not isinstance(data, dict):
            raise ValueError(f"Schematic config must be a mapping, got {type(data).__name__}")
        if "schematic" in data and isinstance(data["schematic"], dict):
            data = data["schematic"]

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown schematic config keys: {unknown}. Valid keys: {sorted(known)}")
        return cls(**data)

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> "SchematicConfig":
        """Load a schematic configuration from a YAML file."""
        with open(yaml_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data)

    def to_yaml(self, yaml_path: str | Path) -> None:
        """Save the configuration to a YAML file."""
        with open(yaml_path, "w", encoding="utf-8") as f:
            yaml.dump({"schematic": asdict(self)}, f, default_flow_style=False, sort_keys=False)

    def with_overrides(self, **overrides: Any) -> "SchematicConfig":
        """Return a copy with the given settings replaced; None values are ignored."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes)
