"""
P&ID Symbol Library

Every equipment class maps to a Symbol carrying:
- a glyph function drawing the symbol centered at the local origin
- named port anchors in the same local, unrotated frame
- the tag prefix used by the tag allocator

================================================================================
LOCAL SYMBOL FRAME
================================================================================

- Origin: symbol center
- +X: right on the diagram, +Z: down on the diagram (SVG y-down)
- Nominal footprint: SYMBOL_SIZE square; tall vessels and columns extend
  vertically beyond it

Ports are attachment points where pipes visually terminate. Inline equipment
(pumps, valves, filters, coolers) shares INLINE_PORTS: inlet on the left,
outlet on the right, at +/- half the symbol width. Compound equipment
(columns, exchangers, separators) defines three or four asymmetric anchors.

Classes not in the library resolve to EquipmentClass.GENERIC, which draws a
bordered square and has no ports.
================================================================================
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum

from .constants import GENERIC_SIZE, HALF, SYMBOL_SIZE
from .markup import num, stroke, text_element


class EquipmentClass(str, Enum):
    """Closed set of equipment classes known to the symbol library."""

    CENTRIFUGAL_PUMP = "centrifugal_pump"
    POSITIVE_DISPLACEMENT_PUMP = "positive_displacement_pump"
    COMPRESSOR = "compressor"
    GATE_VALVE = "gate_valve"
    CONTROL_VALVE = "control_valve"
    CHECK_VALVE = "check_valve"
    GLOBE_VALVE = "globe_valve"
    STORAGE_TANK = "storage_tank"
    REACTOR = "reactor"
    DISTILLATION_COLUMN = "distillation_column"
    HEAT_EXCHANGER = "heat_exchanger"
    SHELL_TUBE_HX = "shell_tube_hx"
    PLATE_HX = "plate_hx"
    THREE_PHASE_SEPARATOR = "three_phase_separator"
    DRUM = "drum"
    KNOCKOUT_DRUM = "knockout_drum"
    FILTER = "filter"
    PSV = "psv"
    FLOW_METER = "flow_meter"
    AIR_COOLER = "air_cooler"
    PROCESS_FURNACE = "process_furnace"
    FLARE_STACK = "flare_stack"
    GENERIC = "generic"

    @classmethod
    def parse(cls, value: "str | EquipmentClass | None") -> "EquipmentClass":
        """Resolve a class key; anything unrecognized becomes GENERIC."""
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.GENERIC
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.GENERIC


@dataclass(frozen=True)
class PortAnchor:
    """Offset of a port from the symbol center, in the local unrotated frame."""
    dx: float
    dz: float


@dataclass(frozen=True)
class Symbol:
    """Glyph, port table and tag prefix for one equipment class."""
    glyph: Callable[[], str]
    ports: Mapping[str, PortAnchor] = field(default_factory=dict)
    prefix: str = "?"
    description: str = ""


# =============================================================================
# SHARED PORT LAYOUTS
# =============================================================================

INLINE_PORTS = {
    "inlet": PortAnchor(-HALF, 0),
    "outlet": PortAnchor(HALF, 0),
}


# =============================================================================
# GLYPH BUILDING BLOCKS
# =============================================================================

def _pump_body() -> str:
    """Circle with an impeller triangle (ISO pump)."""
    return (
        f'<circle cx="0" cy="0" r="{num(HALF)}" {stroke()}/>'
        f'<polygon points="-12,-18 -12,18 20,0" {stroke()}/>'
    )


def _bowtie() -> str:
    """Two opposing triangles meeting at the center (valve body)."""
    h = num(HALF)
    return (
        f'<polygon points="-{h},{h} -{h},-{h} 0,0" {stroke()}/>'
        f'<polygon points="{h},{h} {h},-{h} 0,0" {stroke()}/>'
    )


def _stem(length: float) -> str:
    """Valve stem rising from the body center."""
    return f'<line x1="0" y1="0" x2="0" y2="-{num(length)}" {stroke()}/>'


def _horizontal_vessel(half_height: float) -> str:
    """Horizontal vessel with rounded heads."""
    return (
        f'<rect x="-{num(HALF)}" y="-{num(half_height)}" width="{num(SYMBOL_SIZE)}" '
        f'height="{num(half_height * 2)}" rx="{num(half_height)}" {stroke()}/>'
    )


def _vertical_vessel(half_width: float, half_height: float) -> str:
    """Vertical vessel with rounded heads."""
    return (
        f'<rect x="-{num(half_width)}" y="-{num(half_height)}" width="{num(half_width * 2)}" '
        f'height="{num(half_height * 2)}" rx="{num(half_width)}" {stroke()}/>'
    )


# =============================================================================
# GLYPHS - ROTATING EQUIPMENT
# =============================================================================

def centrifugal_pump_glyph() -> str:
    return _pump_body()


def positive_displacement_pump_glyph() -> str:
    """Pump circle with a vertical stroke at the triangle tip."""
    return _pump_body() + f'<line x1="20" y1="-18" x2="20" y2="18" {stroke()}/>'


def compressor_glyph() -> str:
    """Circle with a converging trapezoid and a 'C' mark."""
    return (
        f'<circle cx="0" cy="0" r="{num(HALF)}" {stroke()}/>'
        f'<polygon points="-22,-18 22,-8 22,8 -22,18" {stroke(1)}/>'
        + text_element(0, 6, "C", 16, bold=True)
    )


# =============================================================================
# GLYPHS - VALVES
# =============================================================================

def gate_valve_glyph() -> str:
    return _bowtie() + _stem(HALF + 10)


def control_valve_glyph() -> str:
    """Valve body with a diaphragm actuator on the stem."""
    return (
        _bowtie()
        + _stem(HALF + 8)
        + f'<rect x="-14" y="-{num(HALF + 28)}" width="28" height="20" {stroke()}/>'
    )


def check_valve_glyph() -> str:
    """Valve body with a filled flow-direction arrow."""
    return _bowtie() + '<polygon points="4,-10 4,10 18,0" fill="#000"/>'


def globe_valve_glyph() -> str:
    return (
        _bowtie()
        + _stem(HALF + 10)
        + f'<circle cx="0" cy="-{num(HALF + 10)}" r="6" {stroke()}/>'
    )


def psv_glyph() -> str:
    """Angle relief valve: inlet triangle from below, outlet triangle to the right, spring on top."""
    h = num(HALF)
    return (
        f'<polygon points="-14,{h} 14,{h} 0,0" {stroke()}/>'
        f'<polygon points="{h},-14 {h},14 0,0" {stroke()}/>'
        f'<polyline points="0,0 0,-8 -8,-12 8,-18 -8,-24 8,-30 0,-34" {stroke(1.5)}/>'
    )


# =============================================================================
# GLYPHS - VESSELS AND COLUMNS
# =============================================================================

def storage_tank_glyph() -> str:
    """Rectangle with open-top tick marks."""
    w = SYMBOL_SIZE
    h = SYMBOL_SIZE * 1.2
    return (
        f'<rect x="-{num(w / 2)}" y="-{num(h / 2)}" width="{num(w)}" height="{num(h)}" {stroke()}/>'
        f'<line x1="-{num(w / 2)}" y1="-{num(h / 2)}" x2="-{num(w / 2 + 6)}" y2="-{num(h / 2 - 6)}" {stroke(1.5)}/>'
        f'<line x1="{num(w / 2)}" y1="-{num(h / 2)}" x2="{num(w / 2 - 6)}" y2="-{num(h / 2 - 6)}" {stroke(1.5)}/>'
    )


def reactor_glyph() -> str:
    """Vessel with an agitator shaft and motor mark."""
    w = SYMBOL_SIZE
    h = SYMBOL_SIZE * 1.2
    return (
        f'<rect x="-{num(w / 2)}" y="-{num(h / 2)}" width="{num(w)}" height="{num(h)}" {stroke()}/>'
        f'<line x1="0" y1="-{num(h / 2)}" x2="0" y2="-{num(h / 2 + 20)}" {stroke()}/>'
        + text_element(0, -(h / 2 + 22), "M", 14, bold=True)
        + f'<line x1="-10" y1="{num(h / 2 - 16)}" x2="10" y2="{num(h / 2 - 16)}" {stroke(1.5)}/>'
        f'<line x1="-6" y1="{num(h / 2 - 10)}" x2="6" y2="{num(h / 2 - 10)}" {stroke(1.5)}/>'
    )


def distillation_column_glyph() -> str:
    """Tall rectangle lined with dashed trays."""
    w = SYMBOL_SIZE * 0.7
    h = SYMBOL_SIZE * 1.8
    trays = "".join(
        f'<line x1="-{num(w / 2 - 2)}" y1="{num(y)}" x2="{num(w / 2 - 2)}" y2="{num(y)}" '
        f'{stroke(1)} stroke-dasharray="4,2"/>'
        for y in (-h * 0.3, -h * 0.15, 0, h * 0.15, h * 0.3)
    )
    return (
        f'<rect x="-{num(w / 2)}" y="-{num(h / 2)}" width="{num(w)}" height="{num(h)}" rx="4" {stroke()}/>'
        + trays
    )


def three_phase_separator_glyph() -> str:
    """Horizontal vessel with a weir plate and dashed interface level."""
    return (
        _horizontal_vessel(20)
        + f'<line x1="12" y1="20" x2="12" y2="0" {stroke(1.5)}/>'
        f'<line x1="-24" y1="8" x2="12" y2="8" {stroke(1)} stroke-dasharray="4,2"/>'
    )


def drum_glyph() -> str:
    return _horizontal_vessel(18) + f'<line x1="-24" y1="6" x2="24" y2="6" {stroke(1)} stroke-dasharray="4,2"/>'


def knockout_drum_glyph() -> str:
    """Vertical vessel with a mist eliminator pad near the top."""
    return (
        _vertical_vessel(18, 36)
        + f'<rect x="-14" y="-24" width="28" height="6" {stroke(1)} stroke-dasharray="2,2"/>'
    )


def flare_stack_glyph() -> str:
    """Tall narrow stack with a flame tip."""
    return (
        f'<rect x="-6" y="-30" width="12" height="66" {stroke()}/>'
        f'<path d="M -6,-30 C -10,-40 -2,-44 0,-52 C 2,-44 10,-40 6,-30" {stroke(1.5)}/>'
    )


# =============================================================================
# GLYPHS - HEAT TRANSFER
# =============================================================================

def heat_exchanger_glyph() -> str:
    """Circle with a crossing curve pair (shell and tube sides)."""
    return (
        f'<circle cx="0" cy="0" r="{num(HALF)}" {stroke()}/>'
        f'<path d="M -18,-15 C -5,-15 5,15 18,15" {stroke()}/>'
        f'<path d="M -18,15 C -5,15 5,-15 18,-15" {stroke(1.5)} stroke-dasharray="4,3"/>'
    )


def shell_tube_hx_glyph() -> str:
    """Horizontal shell with a tube bundle and a channel head on the left."""
    return (
        _horizontal_vessel(18)
        + f'<line x1="-18" y1="-18" x2="-18" y2="18" {stroke(1.5)}/>'
        f'<polyline points="-18,-8 24,-8 24,8 -18,8" {stroke(1)}/>'
    )


def plate_hx_glyph() -> str:
    """Plate pack with alternating diagonal plates."""
    plates = "".join(
        f'<line x1="-14" y1="{num(y)}" x2="14" y2="{num(y + 10)}" {stroke(1)}/>'
        for y in (-22, -10, 2, 14)
    )
    return f'<rect x="-18" y="-{num(HALF)}" width="36" height="{num(SYMBOL_SIZE)}" {stroke()}/>' + plates


def air_cooler_glyph() -> str:
    """Finned tube bundle with a fan above."""
    return (
        f'<rect x="-{num(HALF)}" y="-12" width="{num(SYMBOL_SIZE)}" height="24" {stroke()}/>'
        f'<polyline points="-24,0 -16,-8 -8,8 0,-8 8,8 16,-8 24,0" {stroke(1)}/>'
        f'<circle cx="0" cy="-22" r="8" {stroke(1.5)}/>'
        f'<line x1="-8" y1="-22" x2="8" y2="-22" {stroke(1.5)}/>'
    )


def process_furnace_glyph() -> str:
    """Fired heater box with a roof, stack, coil and burner flame."""
    h = num(HALF)
    return (
        f'<polygon points="-{h},{h} -{h},-10 0,-{h} {h},-10 {h},{h}" {stroke()}/>'
        f'<line x1="0" y1="-{h}" x2="0" y2="-{num(HALF + 14)}" {stroke()}/>'
        f'<polyline points="-{h},0 -12,0 -12,-6 12,-6 12,0 {h},0" {stroke(1.5)}/>'
        f'<path d="M -6,{num(HALF - 4)} C -6,14 0,10 0,6 C 0,10 6,14 6,{num(HALF - 4)} Z" {stroke(1)}/>'
    )


# =============================================================================
# GLYPHS - INSTRUMENTS, FILTRATION, FALLBACK
# =============================================================================

def flow_meter_glyph() -> str:
    """Instrument bubble on the line with an 'FI' function code."""
    h = num(HALF)
    return (
        f'<line x1="-{h}" y1="0" x2="-16" y2="0" {stroke()}/>'
        f'<line x1="16" y1="0" x2="{h}" y2="0" {stroke()}/>'
        f'<circle cx="0" cy="0" r="16" {stroke()}/>'
        + text_element(0, 4, "FI", 11, bold=True)
    )


def filter_glyph() -> str:
    """Housing with a dashed filter element across it."""
    h = num(HALF)
    return (
        f'<polygon points="-{h},0 -16,-18 16,-18 {h},0 16,18 -16,18" {stroke()}/>'
        f'<line x1="0" y1="-18" x2="0" y2="18" {stroke(1.5)} stroke-dasharray="4,3"/>'
    )


def generic_glyph() -> str:
    """Bordered square placeholder for unknown classes."""
    half = num(GENERIC_SIZE / 2)
    size = num(GENERIC_SIZE)
    return f'<rect x="-{half}" y="-{half}" width="{size}" height="{size}" {stroke()}/>'


# =============================================================================
# SYMBOL TABLE
# =============================================================================

GENERIC_SYMBOL = Symbol(generic_glyph, {}, "?", "Unknown equipment")

SYMBOLS: dict[EquipmentClass, Symbol] = {
    EquipmentClass.CENTRIFUGAL_PUMP: Symbol(
        centrifugal_pump_glyph, INLINE_PORTS, "P", "Centrifugal pump"),
    EquipmentClass.POSITIVE_DISPLACEMENT_PUMP: Symbol(
        positive_displacement_pump_glyph, INLINE_PORTS, "P", "Positive displacement pump"),
    EquipmentClass.COMPRESSOR: Symbol(
        compressor_glyph, INLINE_PORTS, "C", "Compressor"),
    EquipmentClass.GATE_VALVE: Symbol(
        gate_valve_glyph, INLINE_PORTS, "V", "Gate valve"),
    EquipmentClass.CONTROL_VALVE: Symbol(
        control_valve_glyph, INLINE_PORTS, "V", "Control valve"),
    EquipmentClass.CHECK_VALVE: Symbol(
        check_valve_glyph, INLINE_PORTS, "V", "Check valve"),
    EquipmentClass.GLOBE_VALVE: Symbol(
        globe_valve_glyph, INLINE_PORTS, "V", "Globe valve"),
    EquipmentClass.STORAGE_TANK: Symbol(
        storage_tank_glyph,
        {
            "inlet": PortAnchor(0, -SYMBOL_SIZE * 0.6),
            "outlet": PortAnchor(HALF, SYMBOL_SIZE * 0.4),
        },
        "T", "Storage tank"),
    EquipmentClass.REACTOR: Symbol(
        reactor_glyph,
        {
            "inlet": PortAnchor(0, -SYMBOL_SIZE * 0.6),
            "outlet": PortAnchor(HALF, SYMBOL_SIZE * 0.1),
        },
        "R", "Stirred reactor"),
    EquipmentClass.DISTILLATION_COLUMN: Symbol(
        distillation_column_glyph,
        {
            "feed_in": PortAnchor(HALF, 0),
            "top_out": PortAnchor(0, -SYMBOL_SIZE * 0.9),
            "bottom_out": PortAnchor(HALF, SYMBOL_SIZE * 0.6),
        },
        "K", "Distillation column"),
    EquipmentClass.HEAT_EXCHANGER: Symbol(
        heat_exchanger_glyph,
        {
            "shell_in": PortAnchor(-HALF, -8),
            "shell_out": PortAnchor(HALF, 8),
            "tube_in": PortAnchor(-HALF, 8),
            "tube_out": PortAnchor(HALF, -8),
        },
        "E", "Heat exchanger"),
    EquipmentClass.SHELL_TUBE_HX: Symbol(
        shell_tube_hx_glyph,
        {
            "shell_in": PortAnchor(-6, -18),
            "shell_out": PortAnchor(12, 18),
            "tube_in": PortAnchor(-HALF, 8),
            "tube_out": PortAnchor(-HALF, -8),
        },
        "E", "Shell-and-tube exchanger"),
    EquipmentClass.PLATE_HX: Symbol(
        plate_hx_glyph,
        {
            "hot_in": PortAnchor(-9, -HALF),
            "cold_in": PortAnchor(9, -HALF),
            "hot_out": PortAnchor(18, 18),
            "cold_out": PortAnchor(-18, 18),
        },
        "E", "Plate exchanger"),
    EquipmentClass.THREE_PHASE_SEPARATOR: Symbol(
        three_phase_separator_glyph,
        {
            "feed_in": PortAnchor(-HALF, -5),
            "gas_out": PortAnchor(0, -20),
            "oil_out": PortAnchor(HALF, 4),
            "water_out": PortAnchor(-4, 20),
        },
        "D", "Three-phase separator"),
    EquipmentClass.DRUM: Symbol(
        drum_glyph,
        {
            "inlet": PortAnchor(-HALF, -6),
            "vapor_out": PortAnchor(0, -18),
            "liquid_out": PortAnchor(HALF, 6),
        },
        "D", "Drum / accumulator"),
    EquipmentClass.KNOCKOUT_DRUM: Symbol(
        knockout_drum_glyph,
        {
            "inlet": PortAnchor(18, 0),
            "gas_out": PortAnchor(0, -36),
            "liquid_out": PortAnchor(0, 36),
        },
        "D", "Knockout drum"),
    EquipmentClass.FILTER: Symbol(
        filter_glyph, INLINE_PORTS, "F", "Filter"),
    EquipmentClass.PSV: Symbol(
        psv_glyph,
        {
            "inlet": PortAnchor(0, HALF),
            "outlet": PortAnchor(HALF, 0),
        },
        "PSV", "Pressure safety valve"),
    EquipmentClass.FLOW_METER: Symbol(
        flow_meter_glyph, INLINE_PORTS, "FI", "Flow indicator"),
    EquipmentClass.AIR_COOLER: Symbol(
        air_cooler_glyph, INLINE_PORTS, "E", "Air cooler"),
    EquipmentClass.PROCESS_FURNACE: Symbol(
        process_furnace_glyph,
        {
            "inlet": PortAnchor(-HALF, 0),
            "outlet": PortAnchor(HALF, 0),
            "fuel_in": PortAnchor(0, HALF),
        },
        "H", "Fired heater"),
    EquipmentClass.FLARE_STACK: Symbol(
        flare_stack_glyph,
        {"inlet": PortAnchor(0, 36)},
        "FL", "Flare stack"),
    EquipmentClass.GENERIC: GENERIC_SYMBOL,
}


def symbol_for(equipment_class: "EquipmentClass | str | None") -> Symbol:
    """Look up the symbol for a class; unknown classes get the generic square."""
    return SYMBOLS.get(EquipmentClass.parse(equipment_class), GENERIC_SYMBOL)


def port_anchor(equipment_class: "EquipmentClass | str | None", port_name: str | None) -> PortAnchor | None:
    """Get a port anchor by name, or None if the class has no such port."""
    if port_name is None:
        return None
    return symbol_for(equipment_class).ports.get(port_name)


def tag_prefix(equipment_class: "EquipmentClass | str | None") -> str:
    """Tag prefix for a class ('?' when the class is unknown)."""
    return symbol_for(equipment_class).prefix
