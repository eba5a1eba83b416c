"""
Schematic diagram constants.

Canvas scale, margins, symbol footprint and styling constants for P&ID export.
All lengths are SVG user units unless noted otherwise.
"""

# =============================================================================
# CANVAS AND LAYOUT CONSTANTS
# =============================================================================

# Diagram units per model (plan grid) unit
SCALE = 100

# Clear space between the outermost symbols and the canvas edge
MARGIN = 120

# Nominal symbol footprint - every glyph fits a SYMBOL_SIZE square
SYMBOL_SIZE = 60
HALF = SYMBOL_SIZE / 2

# Drawing border is inset from the canvas edge
BORDER_INSET = 10

# Title block - fixed box anchored to the bottom-right corner
TITLE_BLOCK_WIDTH = 220
TITLE_BLOCK_HEIGHT = 50
TITLE_BLOCK_INSET = 15  # Gap between title block and canvas edge
TITLE_BLOCK_GAP = 10    # Minimum clearance above/below equipment footprints

# Label placement relative to the symbol center
TAG_OFFSET_Y = HALF + 18       # Tag text sits above the symbol
NAME_OFFSET_Y = HALF + 6       # Display name sits between tag and symbol
PARAM_OFFSET_Y = HALF + 16     # First parameter line below the symbol
PARAM_LINE_HEIGHT = 13
TEXT_WIDTH_FACTOR = 0.6        # Average glyph advance per font-size unit, for label footprints

# Generic placeholder for classes without a dedicated glyph
GENERIC_SIZE = 40

# Port marker circles
PORT_MARKER_RADIUS = 4


# =============================================================================
# SVG STYLING
# =============================================================================

FONT_FAMILY = "sans-serif"
LINE_COLOR = "#000"
BORDER_COLOR = "#333"
BORDER_WIDTH = 2
SYMBOL_STROKE_WIDTH = 2
THIN_LINE_WIDTH = 1.5
PIPE_STROKE_WIDTH = 2
ARROW_COLOR = "#333"
BACKGROUND_COLOR = "white"
TITLE_BLOCK_FILL = "#f5f5f5"

TAG_FONT_SIZE = 13
NAME_FONT_SIZE = 10
PARAM_FONT_SIZE = 9
NAME_COLOR = "#555"
PARAM_COLOR = "#666"

# Reusable arrowhead marker referenced by every pipe path
ARROW_MARKER_ID = "flow-arrow"


# =============================================================================
# EXPORT DEFAULTS
# =============================================================================

DEFAULT_FILENAME = "process-pid.svg"
DEFAULT_TITLE = "Process Builder 3D"
DEFAULT_SUBTITLE = "P&ID Export"
DEFAULT_DATE_FORMAT = "%Y-%m-%d"
