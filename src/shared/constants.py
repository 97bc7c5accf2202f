from enum import Enum

# --- Tile pyramid

# Lowest and highest zoom level of the quad-tree pyramid
MIN_ZOOM_LEVEL = 1
MAX_ZOOM_LEVEL = 23

# Size of a single tile (px)
TILE_WIDTH = 256
TILE_HEIGHT = 256

# log2(TILE_WIDTH): the level width is TILE_WIDTH << zoom
TILE_SIZE_BITS = 8

# --- Web Mercator (Bing reference projection)

# Earth radius used by the projection (metres)
EARTH_RADIUS_M = 6378137.0

# Latitude range covered by the square Mercator world
MIN_LATITUDE = -85.05112878
MAX_LATITUDE = 85.05112878

MIN_LONGITUDE = -180.0
MAX_LONGITUDE = 180.0
WORLD_LNG_SPAN_DEG = 360.0

# --- Tiles on disk

TILE_FILE_SUFFIX = '.png'

# Pillow mode of tile and pseudo-canvas buffers
TILE_MODE = 'RGBA'

# Background of a freshly created tile (opaque white)
TILE_BACKGROUND = (255, 255, 255, 255)

# Background of a pseudo-canvas and of heat-map tiles (nothing drawn)
TRANSPARENT = (255, 255, 255, 0)

# Default drawing colour when a primitive is called without one
DEFAULT_COLOR = (0, 0, 0, 255)

# --- Pseudo-canvas allocation guard

# Hard cap on the pixel count of one pseudo-canvas (16384 x 16384)
MAX_CANVAS_PIXELS = 16384 * 16384

# Share of available RAM a single canvas may use
MEMORY_SAFETY_RATIO = 0.75

# RAM that must remain free after allocation (MB)
MEMORY_MIN_FREE_MB = 512

# --- Level defaults

# Residency timeout of a loaded tile (seconds, 0 = save and release at once)
DEFAULT_IN_MEMORY = 0

# Name of the default tile implementation
DEFAULT_TILE_CLASS = 'default'

# Number of entries in the heat-map colour lookup table
HEATMAP_LUT_SIZE = 256

# Heat-map colour ramp: (intensity in [0, 1], RGB)
HEATMAP_COLOR_RAMP: list[tuple[float, tuple[int, int, int]]] = [
    (0.0, (0, 0, 255)),
    (0.25, (0, 255, 255)),
    (0.5, (0, 255, 0)),
    (0.75, (255, 255, 0)),
    (1.0, (255, 0, 0)),
]

# Log format shared by console and file handlers
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class CombineMode(str, Enum):
    """Blend operators available when composing onto a tile."""

    NORMAL = 'normal'
    REPLACE = 'replace'
    DARKEN = 'darken'
    LIGHTEN = 'lighten'
    MULTIPLY = 'multiply'
    SCREEN = 'screen'
    ADD = 'add'
    SUBTRACT = 'subtract'
    DIFFERENCE = 'difference'


def default_combine() -> CombineMode:
    """Darken keeps earlier strokes visible under later overlapping ones."""
    return CombineMode.DARKEN
