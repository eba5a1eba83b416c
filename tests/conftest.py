"""Shared fixtures for schematic tests."""

import xml.etree.ElementTree as ET

import pytest

from pidgen.process_model import Equipment, PipeConnection, ProcessModel

SVG_NS = {"svg": "http://www.w3.org/2000/svg"}


def parse_svg(svg: str) -> ET.Element:
    """Parse generated SVG text, failing the test if it is not well-formed."""
    return ET.fromstring(svg.encode("utf-8"))


@pytest.fixture
def pump_and_tank() -> ProcessModel:
    """Pump at (0, 0) feeding a storage tank at (2, 0)."""
    return ProcessModel(
        equipment=[
            Equipment("pump-1", "centrifugal_pump", (0, 0)),
            Equipment("tank-1", "storage_tank", (2, 0)),
        ],
        connections=[
            PipeConnection("pump-1", "outlet", "tank-1", "inlet"),
        ],
    )
