"""
Tests for schematic document assembly.

These tests cover:
- Document structure and element order
- Equipment groups (tags, names, parameters, port markers)
- Pipe groups and the title block summary
- Text escaping, empty input and repeatability
"""

from datetime import date

import pytest

from pidgen.process_model import Equipment, PipeConnection, ProcessModel, ProcessParameter
from pidgen.schematic import SchematicConfig, SchematicDiagram, generate_schematic
from pidgen.schematic.constants import ARROW_MARKER_ID
from pidgen.schematic.title_block import title_block_bounds

from conftest import SVG_NS, parse_svg

FIXED_DATE = date(2024, 3, 1)


def render(model: ProcessModel, **kwargs) -> str:
    kwargs.setdefault("generated_at", FIXED_DATE)
    return SchematicDiagram.from_model(model, **kwargs).generate()


def equipment_groups(root):
    return root.findall("svg:g[@class='equipment']", SVG_NS)


def pipe_groups(root):
    return [g for g in root.findall("svg:g", SVG_NS) if g.get("class", "").startswith("pipe")]


# =============================================================================
# DOCUMENT STRUCTURE
# =============================================================================

class TestDocumentStructure:
    """Tests for the overall SVG layout."""

    def test_header(self, pump_and_tank):
        svg = render(pump_and_tank)
        assert svg.startswith('<?xml version="1.0" encoding="UTF-8"?>\n<svg ')
        assert svg.rstrip().endswith("</svg>")

    def test_size_matches_viewbox(self, pump_and_tank):
        root = parse_svg(render(pump_and_tank))
        assert root.get("width") == "560.00"
        assert root.get("height") == "360.00"
        assert root.get("viewBox") == "0 0 560.00 360.00"

    def test_single_arrow_marker(self, pump_and_tank):
        root = parse_svg(render(pump_and_tank))
        defs = root.findall("svg:defs", SVG_NS)
        assert len(defs) == 1
        markers = defs[0].findall("svg:marker", SVG_NS)
        assert [m.get("id") for m in markers] == [ARROW_MARKER_ID]

    def test_element_order(self, pump_and_tank):
        root = parse_svg(render(pump_and_tank))
        children = list(root)
        assert children[0].tag.endswith("defs")
        assert children[1].get("class") == "background"
        assert children[2].get("class") == "border"
        classes = [c.get("class") for c in children[3:-1]]
        assert classes == ["equipment", "equipment", "pipe straight"]
        assert children[-1].get("id") == "title-block"

    def test_border_inset(self, pump_and_tank):
        root = parse_svg(render(pump_and_tank))
        border = root.find("svg:rect[@class='border']", SVG_NS)
        assert border.get("x") == "10"
        assert border.get("width") == "540.00"
        assert border.get("height") == "340.00"


# =============================================================================
# PUMP AND TANK SCENARIO
# =============================================================================

class TestPumpAndTank:
    """Pump at (0, 0) connected to a tank at (2, 0)."""

    def test_tags(self, pump_and_tank):
        root = parse_svg(render(pump_and_tank))
        tags = [g.get("data-tag") for g in equipment_groups(root)]
        assert tags == ["P-1", "T-1"]

    def test_positions(self, pump_and_tank):
        root = parse_svg(render(pump_and_tank))
        transforms = [g.get("transform") for g in equipment_groups(root)]
        assert transforms == ["translate(150.00, 150.00)", "translate(350.00, 150.00)"]

    def test_one_straight_pipe_from_outlet_to_inlet(self, pump_and_tank):
        root = parse_svg(render(pump_and_tank))
        pipes = pipe_groups(root)
        assert len(pipes) == 1
        path = pipes[0].find("svg:path", SVG_NS)
        assert path.get("d") == "M 180.00 150.00 L 350.00 114.00"
        assert path.get("marker-end") is None
        assert len(pipes[0].findall(".//svg:polygon", SVG_NS)) == 1

    def test_title_block_counts(self, pump_and_tank):
        svg = render(pump_and_tank)
        assert "2 components, 1 connection<" in svg
        assert "P&amp;ID Export - 2024-03-01" in svg

    def test_diagram_properties(self, pump_and_tank):
        diagram = SchematicDiagram.from_model(pump_and_tank, generated_at=FIXED_DATE)
        diagram.generate()
        assert diagram.equipment_count == 2
        assert diagram.connection_count == 1
        assert diagram.tags == ["P-1", "T-1"]
        assert len(diagram.routes) == 1


# =============================================================================
# EQUIPMENT GROUPS
# =============================================================================

class TestEquipmentGroups:
    """Tests for per-equipment content."""

    def test_name_and_parameters(self):
        model = ProcessModel(equipment=[
            Equipment(
                "r1", "reactor", (0, 0), name="Main reactor",
                parameters={
                    "temp": ProcessParameter("Temp", 350, "C"),
                    "stages": ProcessParameter("Stages", 3),
                },
            ),
        ])
        root = parse_svg(render(model))
        texts = [t.text for t in equipment_groups(root)[0].findall("svg:text", SVG_NS)]
        assert texts == ["R-1", "Main reactor", "Temp: 350 C", "Stages: 3"]

    def test_no_name_text_without_name(self):
        model = ProcessModel(equipment=[Equipment("v1", "gate_valve", (0, 0))])
        root = parse_svg(render(model))
        texts = [t.text for t in equipment_groups(root)[0].findall("svg:text", SVG_NS)]
        assert texts == ["V-1"]

    def test_port_markers(self):
        model = ProcessModel(equipment=[Equipment("hx", "heat_exchanger", (0, 0))])
        root = parse_svg(render(model))
        circles = equipment_groups(root)[0].findall("svg:circle[@class='port']", SVG_NS)
        assert {c.get("data-port") for c in circles} == {"shell_in", "shell_out", "tube_in", "tube_out"}
        assert all(c.get("r") == "4" for c in circles)

    def test_port_markers_follow_rotation(self):
        model = ProcessModel(equipment=[Equipment("p", "centrifugal_pump", (0, 0), rotation=90)])
        root = parse_svg(render(model))
        outlet = equipment_groups(root)[0].find("svg:circle[@data-port='outlet']", SVG_NS)
        assert (outlet.get("cx"), outlet.get("cy")) == ("0.00", "-30.00")

    def test_glyph_rotation(self):
        model = ProcessModel(equipment=[Equipment("p", "centrifugal_pump", (0, 0), rotation=90)])
        root = parse_svg(render(model))
        symbol = equipment_groups(root)[0].find("svg:g[@class='symbol']", SVG_NS)
        assert symbol.get("transform") == "matrix(0.000000 -1.000000 1.000000 0.000000 0 0)"

    def test_unknown_class_draws_generic_square(self):
        model = ProcessModel(equipment=[Equipment("x", "teleporter", (0, 0))])
        root = parse_svg(render(model))
        group = equipment_groups(root)[0]
        assert group.get("data-tag") == "?-1"
        assert group.find("svg:g/svg:rect[@width='40']", SVG_NS) is not None
        assert group.findall("svg:circle", SVG_NS) == []

    def test_config_hides_detail_layers(self):
        model = ProcessModel(equipment=[
            Equipment("p", "centrifugal_pump", (0, 0), parameters={"flow": {"label": "Flow", "value": 5}}),
        ])
        config = SchematicConfig(show_port_markers=False, show_parameters=False)
        root = parse_svg(render(model, config=config))
        group = equipment_groups(root)[0]
        assert group.findall("svg:circle", SVG_NS) == []
        assert [t.text for t in group.findall("svg:text", SVG_NS)] == ["P-1"]


# =============================================================================
# ROBUSTNESS
# =============================================================================

class TestRobustness:
    """Tests for degraded input and escaping."""

    @pytest.mark.parametrize("equipment", [[], None])
    def test_empty_equipment_returns_none(self, equipment):
        assert generate_schematic(equipment, [PipeConnection("a", "outlet", "b", "inlet")]) is None

    def test_dangling_connection_is_dropped(self, pump_and_tank):
        pump_and_tank.connections.append(PipeConnection("pump-1", "outlet", "ghost", "inlet"))
        svg = render(pump_and_tank)
        root = parse_svg(svg)
        assert len(pipe_groups(root)) == 1
        assert "2 components, 1 connection<" in svg

    def test_unknown_port_still_draws(self, pump_and_tank):
        pump_and_tank.connections[0].to_port = "manway"
        root = parse_svg(render(pump_and_tank))
        path = pipe_groups(root)[0].find("svg:path", SVG_NS)
        assert path.get("d") == "M 180.00 150.00 L 350.00 150.00"

    def test_special_characters_are_escaped(self):
        model = ProcessModel(equipment=[
            Equipment(
                'tank "A"', "storage_tank", (0, 0), name='<Crude> & "Sour"',
                parameters={"p": ProcessParameter("P<max>", "5 & 6", "'bar'")},
            ),
        ])
        svg = render(model, config=SchematicConfig(title="R&D <Unit>"))
        assert "&lt;Crude&gt; &amp; &quot;Sour&quot;" in svg
        assert "R&amp;D &lt;Unit&gt;" in svg
        root = parse_svg(svg)
        group = equipment_groups(root)[0]
        assert group.get("data-id") == 'tank "A"'
        texts = [t.text for t in group.findall("svg:text", SVG_NS)]
        assert '<Crude> & "Sour"' in texts
        assert "P<max>: 5 & 6 'bar'" in texts

    def test_control_characters_are_dropped(self):
        model = ProcessModel(equipment=[
            Equipment(
                "t\x01", "storage_tank", (0, 0), name="Tank\x01A",
                parameters={"p": ProcessParameter("Level", "7\x0b2\x1f", "%")},
            ),
        ])
        svg = render(model, config=SchematicConfig(title="Unit\x02 1"))
        root = parse_svg(svg)
        group = equipment_groups(root)[0]
        assert group.get("data-id") == "t"
        texts = [t.text for t in group.findall("svg:text", SVG_NS)]
        assert "TankA" in texts
        assert "Level: 72 %" in texts
        assert "Unit 1" in svg

    def test_duplicate_ids_get_distinct_tags(self):
        model = ProcessModel(equipment=[
            Equipment("p", "centrifugal_pump", (0, 0)),
            Equipment("p", "centrifugal_pump", (2, 0)),
        ])
        diagram = SchematicDiagram.from_model(model, generated_at=FIXED_DATE)
        svg = diagram.generate()
        root = parse_svg(svg)
        assert [g.get("data-tag") for g in equipment_groups(root)] == ["P-1", "P-2"]
        assert diagram.tags == ["P-1", "P-2"]
        assert diagram.equipment_count == 2
        assert "2 components, 0 connections<" in svg

    def test_repeatable_with_fixed_date(self, pump_and_tank):
        assert render(pump_and_tank) == render(pump_and_tank)

    def test_generate_twice_on_same_diagram(self, pump_and_tank):
        diagram = SchematicDiagram.from_model(pump_and_tank, generated_at="today")
        first = diagram.generate()
        assert diagram.generate() == first
        assert diagram.tags == ["P-1", "T-1"]

    def test_date_uses_config_format(self, pump_and_tank):
        svg = render(pump_and_tank, config=SchematicConfig(date_format="%d.%m.%Y"))
        assert "01.03.2024" in svg

    def test_title_block_clears_crowded_corner(self):
        params = {f"p{i}": ProcessParameter(f"Param {i}", i) for i in range(8)}
        model = ProcessModel(equipment=[
            Equipment("a", "centrifugal_pump", (0, 0)),
            Equipment("b", "storage_tank", (3, 2), parameters=params),
        ])
        diagram = SchematicDiagram.from_model(model, generated_at=FIXED_DATE)
        root = parse_svg(diagram.generate())
        transform = diagram.transform
        assert transform.height > 560

        block = title_block_bounds(transform.width, transform.height)
        assert block.max_y <= transform.height

        rect = root.find("svg:g[@id='title-block']/svg:rect", SVG_NS)
        assert float(rect.get("y")) == pytest.approx(block.min_y)
        # Lowest parameter line of the crowded symbol sits above the block
        lowest_text = max(
            float(t.get("y")) for t in equipment_groups(root)[1].findall("svg:text", SVG_NS)
        )
        assert 350 + lowest_text < block.min_y

    def test_title_block_clears_wide_labels(self):
        """A long parameter line reaching sideways into the corner moves the title block down."""
        params = {f"p{i}": ProcessParameter(f"P{i}", i) for i in range(6)}
        params["note"] = ProcessParameter("Note", "x" * 114)
        model = ProcessModel(equipment=[
            Equipment("a", "centrifugal_pump", (0, 0)),
            Equipment("b", "storage_tank", (0, 2), parameters=params),
            Equipment("c", "storage_tank", (3, 0)),
        ])
        diagram = SchematicDiagram.from_model(model, generated_at=FIXED_DATE)
        root = parse_svg(diagram.generate())
        transform = diagram.transform
        # Symbol and label height alone fit above the block on a 560 high canvas
        assert transform.height == pytest.approx(562)

        block = title_block_bounds(transform.width, transform.height)
        lowest_text = max(
            float(t.get("y")) for t in equipment_groups(root)[1].findall("svg:text", SVG_NS)
        )
        assert 350 + lowest_text < block.min_y
