"""
Tests for the P&ID symbol library and tag allocation.
"""

import xml.etree.ElementTree as ET

import pytest

from pidgen.process_model import Equipment
from pidgen.schematic.constants import HALF, SYMBOL_SIZE
from pidgen.schematic.symbols import (
    GENERIC_SYMBOL,
    INLINE_PORTS,
    SYMBOLS,
    EquipmentClass,
    PortAnchor,
    port_anchor,
    symbol_for,
    tag_prefix,
)
from pidgen.schematic.tags import TagAllocator


# =============================================================================
# SYMBOL LIBRARY
# =============================================================================

class TestEquipmentClass:
    """Tests for class key resolution."""

    def test_parse_known(self):
        assert EquipmentClass.parse("storage_tank") is EquipmentClass.STORAGE_TANK

    def test_parse_normalizes_case_and_whitespace(self):
        assert EquipmentClass.parse(" Centrifugal_Pump ") is EquipmentClass.CENTRIFUGAL_PUMP

    @pytest.mark.parametrize("value", ["teleporter", "", None, 42])
    def test_parse_unknown_is_generic(self, value):
        assert EquipmentClass.parse(value) is EquipmentClass.GENERIC

    def test_parse_member_passthrough(self):
        assert EquipmentClass.parse(EquipmentClass.REACTOR) is EquipmentClass.REACTOR


class TestSymbols:
    """Tests for glyphs, port tables and prefixes."""

    def test_every_class_has_a_symbol(self):
        assert set(SYMBOLS) == set(EquipmentClass)

    @pytest.mark.parametrize("equipment_class", list(EquipmentClass))
    def test_glyph_is_well_formed(self, equipment_class):
        glyph = symbol_for(equipment_class).glyph()
        assert glyph
        ET.fromstring(f'<g xmlns="http://www.w3.org/2000/svg">{glyph}</g>')

    @pytest.mark.parametrize("equipment_class,prefix", [
        ("centrifugal_pump", "P"),
        ("positive_displacement_pump", "P"),
        ("compressor", "C"),
        ("gate_valve", "V"),
        ("control_valve", "V"),
        ("check_valve", "V"),
        ("globe_valve", "V"),
        ("storage_tank", "T"),
        ("reactor", "R"),
        ("distillation_column", "K"),
        ("heat_exchanger", "E"),
        ("three_phase_separator", "D"),
        ("filter", "F"),
        ("psv", "PSV"),
        ("flow_meter", "FI"),
        ("process_furnace", "H"),
        ("flare_stack", "FL"),
        ("no_such_thing", "?"),
    ])
    def test_prefix(self, equipment_class, prefix):
        assert tag_prefix(equipment_class) == prefix

    def test_inline_ports(self):
        pump = symbol_for("centrifugal_pump")
        assert pump.ports == INLINE_PORTS
        assert pump.ports["inlet"].dx == -HALF
        assert pump.ports["outlet"].dx == HALF

    def test_column_ports(self):
        column = symbol_for("distillation_column")
        assert set(column.ports) == {"feed_in", "top_out", "bottom_out"}
        assert column.ports["top_out"].dz < 0 < column.ports["bottom_out"].dz

    def test_column_port_anchors(self):
        assert port_anchor("distillation_column", "feed_in") == PortAnchor(HALF, 0)
        assert port_anchor("distillation_column", "top_out") == PortAnchor(0, -SYMBOL_SIZE * 0.9)
        assert port_anchor("distillation_column", "bottom_out") == PortAnchor(HALF, SYMBOL_SIZE * 0.6)

    def test_heat_exchanger_ports(self):
        hx = symbol_for("heat_exchanger")
        assert set(hx.ports) == {"shell_in", "shell_out", "tube_in", "tube_out"}

    def test_generic_symbol(self):
        assert symbol_for("mystery") is GENERIC_SYMBOL
        assert GENERIC_SYMBOL.ports == {}
        assert 'width="40"' in GENERIC_SYMBOL.glyph()

    def test_port_anchor_lookup(self):
        assert port_anchor("storage_tank", "inlet").dz < 0
        assert port_anchor("storage_tank", "drain") is None
        assert port_anchor("mystery", "inlet") is None
        assert port_anchor("storage_tank", None) is None


# =============================================================================
# TAG ALLOCATION
# =============================================================================

class TestTagAllocator:
    """Tests for per-prefix tag numbering."""

    def test_sequential_per_prefix(self):
        equipment = [
            Equipment("pumpA", "centrifugal_pump"),
            Equipment("pumpB", "centrifugal_pump"),
            Equipment("valveA", "gate_valve"),
        ]
        assert TagAllocator().allocate(equipment) == ["P-1", "P-2", "V-1"]

    def test_order_determines_numbering(self):
        equipment = [
            Equipment("valveA", "gate_valve"),
            Equipment("pumpB", "centrifugal_pump"),
            Equipment("pumpA", "centrifugal_pump"),
        ]
        assert TagAllocator().allocate(equipment) == ["V-1", "P-1", "P-2"]

    def test_shared_prefix_never_collides(self):
        equipment = [
            Equipment("a", "centrifugal_pump"),
            Equipment("b", "positive_displacement_pump"),
            Equipment("c", "heat_exchanger"),
            Equipment("d", "air_cooler"),
        ]
        tags = TagAllocator().allocate(equipment)
        assert tags == ["P-1", "P-2", "E-1", "E-2"]
        assert len(set(tags)) == len(tags)

    def test_duplicate_ids_get_distinct_tags(self):
        equipment = [Equipment("p", "centrifugal_pump"), Equipment("p", "centrifugal_pump")]
        assert TagAllocator().allocate(equipment) == ["P-1", "P-2"]

    def test_unknown_class(self):
        tags = TagAllocator().allocate([Equipment("x", "warp_core"), Equipment("y", "flux")])
        assert tags == ["?-1", "?-2"]

    def test_fresh_allocator_restarts(self):
        equipment = [Equipment("p", "centrifugal_pump")]
        assert TagAllocator().allocate(equipment) == TagAllocator().allocate(equipment)

    def test_counts(self):
        allocator = TagAllocator()
        allocator.next_tag("gate_valve")
        allocator.next_tag("check_valve")
        allocator.next_tag("reactor")
        assert allocator.counts == {"V": 2, "R": 1}
