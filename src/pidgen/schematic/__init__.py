"""
Schematic Module

Generates P&ID-style schematic diagrams (SVG) from a process model of placed
equipment and pipe connections.

Features:
- Symbol library with rotated port anchors for common process equipment
- Bounding-box driven canvas layout
- Per-prefix equipment tags (P-1, V-1, K-1, ...)
- Straight or sampled pipe routes with flow arrows
- Title block that never overlaps equipment
- SVG export to files or custom sinks, optional PDF export

Usage:
    from pidgen.schematic import SchematicDiagram

    diagram = SchematicDiagram(equipment, connections)
    diagram.generate()
    diagram.export_svg("process-pid.svg")
"""

from .config import SchematicConfig
from .constants import (
    ARROW_MARKER_ID,
    DEFAULT_FILENAME,
    MARGIN,
    SCALE,
    SYMBOL_SIZE,
)
from .diagram import SchematicDiagram, generate_schematic
from .export import (
    SVGLIB_AVAILABLE,
    ExportSink,
    FileSink,
    MemorySink,
    export_document,
    export_pdf,
    export_svg,
)
from .geometry import (
    Bounds,
    CanvasTransform,
    compute_canvas_transform,
    port_world_position,
    rotate_local_offset,
    rotation_matrix,
    translate,
    world_position,
)
from .pipes import PipeRenderer, PipeRoute, arrow_placement
from .symbols import (
    SYMBOLS,
    EquipmentClass,
    PortAnchor,
    Symbol,
    port_anchor,
    symbol_for,
    tag_prefix,
)
from .tags import TagAllocator
from .title_block import TitleBlock, TitleBlockInfo, place_title_block
from .validation import Anomaly, AnomalyKind, find_anomalies

__all__ = [
    # Main classes
    'SchematicDiagram',
    'generate_schematic',
    'SchematicConfig',
    # Symbols
    'EquipmentClass',
    'Symbol',
    'PortAnchor',
    'SYMBOLS',
    'symbol_for',
    'port_anchor',
    'tag_prefix',
    # Geometry
    'CanvasTransform',
    'Bounds',
    'compute_canvas_transform',
    'rotation_matrix',
    'rotate_local_offset',
    'translate',
    'world_position',
    'port_world_position',
    # Tags, pipes, title block
    'TagAllocator',
    'PipeRenderer',
    'PipeRoute',
    'arrow_placement',
    'TitleBlock',
    'TitleBlockInfo',
    'place_title_block',
    # Validation
    'Anomaly',
    'AnomalyKind',
    'find_anomalies',
    # Export
    'ExportSink',
    'FileSink',
    'MemorySink',
    'export_document',
    'export_svg',
    'export_pdf',
    'SVGLIB_AVAILABLE',
    # Constants
    'SCALE',
    'MARGIN',
    'SYMBOL_SIZE',
    'ARROW_MARKER_ID',
    'DEFAULT_FILENAME',
]
