"""
pidgen - P&ID schematic generator for process plant models.

Turns a process model (placed equipment plus pipe connections) into a
P&ID-style SVG drawing.
"""

__version__ = "0.1.0"

from .process_model import (
    Equipment,
    ModelFormatError,
    PipeConnection,
    ProcessModel,
    ProcessParameter,
)
from .schematic import (
    EquipmentClass,
    SchematicConfig,
    SchematicDiagram,
    find_anomalies,
    generate_schematic,
)

__all__ = [
    "__version__",
    "Equipment",
    "EquipmentClass",
    "ModelFormatError",
    "PipeConnection",
    "ProcessModel",
    "ProcessParameter",
    "SchematicConfig",
    "SchematicDiagram",
    "find_anomalies",
    "generate_schematic",
]
