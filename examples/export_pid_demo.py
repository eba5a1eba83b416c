#!/usr/bin/env python3
"""
Example: Exporting P&ID schematics

Demonstrates:
1. Building a process model in Python and exporting it to a file
2. Loading the JSON payload the 3D modeling tool exports
3. Sending the document to a custom sink instead of a file
"""

import logging
from pathlib import Path

from pidgen import Equipment, PipeConnection, ProcessModel, ProcessParameter
from pidgen.schematic import MemorySink, SchematicConfig, SchematicDiagram, find_anomalies

EXAMPLES_DIR = Path(__file__).parent
OUTPUT_DIR = EXAMPLES_DIR / "output" / "svg"
OUTPUT_DIR.mkdir(parents=True, exist_ok=True)


# =============================================================================
# EXAMPLE 1: Model built in Python
# =============================================================================

def python_model_example():
    print("=" * 60)
    print("EXAMPLE 1: Model built in Python")
    print("=" * 60)

    model = ProcessModel(
        equipment=[
            Equipment("pump", "centrifugal_pump", (0, 0), name="Transfer pump",
                      parameters={"flow": ProcessParameter("Flow", 45, "m3/h")}),
            Equipment("check", "check_valve", (1.2, 0)),
            Equipment("tank", "storage_tank", (2.5, 0), name="Product tank"),
        ],
        connections=[
            PipeConnection("pump", "outlet", "check", "inlet"),
            PipeConnection("check", "outlet", "tank", "inlet"),
        ],
    )

    diagram = SchematicDiagram.from_model(model, config=SchematicConfig(title="Product Transfer"))
    diagram.generate()
    path = diagram.export_svg(OUTPUT_DIR / "product_transfer.svg")
    print(f"Tags: {diagram.tags}")
    print(f"Saved: {path}")


# =============================================================================
# EXAMPLE 2: YAML model file with an anomaly check first
# =============================================================================

def yaml_model_example():
    print("=" * 60)
    print("EXAMPLE 2: YAML model file")
    print("=" * 60)

    model = ProcessModel.from_yaml(EXAMPLES_DIR / "crude_unit.yaml")
    anomalies = find_anomalies(model.equipment, model.connections)
    for anomaly in anomalies:
        print(f"  warning: {anomaly}")

    diagram = SchematicDiagram.from_model(model, config=SchematicConfig(title="Crude Flash Section"))
    diagram.generate()
    path = diagram.export_svg(OUTPUT_DIR / "crude_unit.svg")
    print(f"Equipment: {diagram.equipment_count}, connections: {diagram.connection_count}")
    print(f"Saved: {path}")


# =============================================================================
# EXAMPLE 3: Modeling tool payload to an in-memory sink
# =============================================================================

def memory_sink_example():
    print("=" * 60)
    print("EXAMPLE 3: Export payload to memory")
    print("=" * 60)

    payload = {
        "components": [
            {"id": "c1", "type": "compressor", "x": 0, "z": 0, "name": "K-100"},
            {"id": "c2", "type": "air_cooler", "x": 1.5, "z": 0},
            {"id": "c3", "type": "knockout_drum", "x": 3, "z": 0.5},
        ],
        "pipes": [
            {"fromId": "c1", "fromPort": "outlet", "toId": "c2", "toPort": "inlet"},
            {"fromId": "c2", "fromPort": "outlet", "toId": "c3", "toPort": "inlet"},
        ],
    }
    sink = MemorySink()
    SchematicDiagram.from_model(ProcessModel.from_dict(payload)).export(sink)
    for filename, data in sink.documents:
        print(f"{filename}: {len(data)} bytes")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    python_model_example()
    print()
    yaml_model_example()
    print()
    memory_sink_example()
