"""
Planar Layer Compositor - Constants and Configuration

This module contains all constant values used throughout the application:
- Layer creation defaults (grid segments, size, depth spacing)
- Geometry constraints (minimum size, tolerances)
- Transform handle appearance and hit testing
- Camera/viewport limits
- Config file locations

World space convention: X grows to the right, Y grows UP, Z is depth
(higher = in front). Screen space: X right, Y DOWN, origin top-left.
"""

import os

# ======================================================================
# TOOLS
# ======================================================================

TOOL_MOVE = 'move'
TOOL_SCALE = 'scale'
TOOL_ROTATE = 'rotate'
TOOL_DISTORT = 'distort'

TOOL_NAMES = (TOOL_MOVE, TOOL_SCALE, TOOL_ROTATE, TOOL_DISTORT)
DEFAULT_TOOL = TOOL_MOVE

# Pointer button ids delivered by the input source
PRIMARY_BUTTON = 0   # Left button - drives tools
PAN_BUTTON = 1       # Middle button - consumed by camera panning
SECONDARY_BUTTON = 2

# ======================================================================
# LAYER DEFAULTS
# ======================================================================

# Default grid subdivision for new layers (segments per axis)
DEFAULT_SEGMENTS_X = 10
DEFAULT_SEGMENTS_Y = 10

# New layers span a third of the viewport width (height follows image aspect)
DEFAULT_LAYER_VIEWPORT_FRACTION = 1.0 / 3.0

# Depth distance between consecutive layers (z-order * spacing)
LAYER_DEPTH_SPACING = 10.0

DEFAULT_LAYER_NAME = 'Image'

# ======================================================================
# GEOMETRY CONSTRAINTS
# ======================================================================

# Smallest width/height a scale gesture may produce (world units)
MIN_LAYER_SIZE = 1e-3

# Tolerance for parallel ray/plane tests
RAY_PARALLEL_EPSILON = 1e-9

# Tolerance for degenerate matrices during decomposition
MATRIX_EPSILON = 1e-12

# ======================================================================
# TRANSFORM HANDLE CONSTANTS
# ======================================================================

# Unified corner ordering for every corner-based tool
CORNER_TOP_LEFT = 0
CORNER_TOP_RIGHT = 1
CORNER_BOTTOM_RIGHT = 2
CORNER_BOTTOM_LEFT = 3
CORNER_NAMES = ('tl', 'tr', 'br', 'bl')

# Handle visual appearance
TRANSFORM_HANDLE_SIZE = 6  # Handle circle/square radius (pixels)
TRANSFORM_HIT_TOLERANCE = 4  # Extra pixels for handle hit detection

# Rotate ring
ROTATE_RING_OFFSET = 30.0  # Distance above bounding rect top edge (pixels)
ROTATE_RING_RADIUS = 8  # Ring radius (pixels)
ROTATE_RING_HIT_TOLERANCE = 6  # Extra pixels for ring hit detection

# Handle colours (RGBA)
HANDLE_FILL_COLOR = (255, 170, 0, 255)
HANDLE_OUTLINE_COLOR = (255, 255, 255, 255)
BORDER_COLOR = (90, 141, 191, 200)
GIZMO_COLOR = (100, 150, 255, 200)
LAYER_PLACEHOLDER_COLOR = (160, 160, 160, 255)
SELECTION_OUTLINE_COLOR = (90, 141, 191, 255)
CANVAS_BACKGROUND_COLOR = (40, 40, 40)

# Translation gizmo (screen pixels)
GIZMO_ARROW_LENGTH = 40
GIZMO_ORIGIN_RADIUS = 4

# ======================================================================
# CAMERA
# ======================================================================

ZOOM_MIN = 0.1
ZOOM_MAX = 10.0
ZOOM_STEP = 1.25

# Orthographic near/far planes (world depth)
CAMERA_NEAR = -1000.0
CAMERA_FAR = 1000.0

# ======================================================================
# CONFIG
# ======================================================================

CONFIG_DIR = os.path.join(os.path.expanduser('~'), '.planar_compositor')
CONFIG_FILE_NAME = 'config.json'
MAX_RECENT_FILES = 10

# Image formats offered by the import dialog
IMAGE_FILE_FILTER = 'Images (*.png *.jpg *.jpeg *.bmp *.gif *.webp)'
