"""Tile pyramid addressing: Web Mercator pixels, tiles and quad keys."""

from __future__ import annotations

import math

from shared.constants import (
    EARTH_RADIUS_M,
    MAX_LATITUDE,
    MAX_LONGITUDE,
    MAX_ZOOM_LEVEL,
    MIN_LATITUDE,
    MIN_LONGITUDE,
    MIN_ZOOM_LEVEL,
    TILE_HEIGHT,
    TILE_SIZE_BITS,
    TILE_WIDTH,
    WORLD_LNG_SPAN_DEG,
)
from shared.errors import ConfigurationError


def validate_zoom(zoom: int) -> int:
    """Return zoom unchanged or raise ConfigurationError when out of range."""
    if isinstance(zoom, bool) or not isinstance(zoom, int):
        msg = f'zoom level must be an integer, got {zoom!r}'
        raise ConfigurationError(msg)
    if not (MIN_ZOOM_LEVEL <= zoom <= MAX_ZOOM_LEVEL):
        msg = (
            f'zoom level {zoom} is outside '
            f'[{MIN_ZOOM_LEVEL}, {MAX_ZOOM_LEVEL}]'
        )
        raise ConfigurationError(msg)
    return zoom


def width_at_level(zoom: int) -> int:
    """Width of the whole level in pixels (2 ** (8 + zoom))."""
    return 1 << (TILE_SIZE_BITS + zoom)


def height_at_level(zoom: int) -> int:
    """Height of the whole level in pixels; the Mercator world is square."""
    return width_at_level(zoom)


def tiles_per_axis(zoom: int) -> int:
    return 1 << zoom


def _clip(value: float, lo: float, hi: float) -> float:
    return min(max(value, lo), hi)


def latlon_to_pixel(zoom: int, lat: float, lon: float) -> tuple[int, int]:
    """Project WGS84 (lat, lon) to global pixel (x, y) at the zoom level.

    Follows the Bing Maps reference implementation, so that tiles line
    up with externally served tiles of the same quad key.
    """
    lat = _clip(lat, MIN_LATITUDE, MAX_LATITUDE)
    lon = _clip(lon, MIN_LONGITUDE, MAX_LONGITUDE)

    x = (lon + MAX_LONGITUDE) / WORLD_LNG_SPAN_DEG
    sinlat = math.sin(math.radians(lat))
    y = 0.5 - math.log((1 + sinlat) / (1 - sinlat)) / (4 * math.pi)

    size = width_at_level(zoom)
    pixel_x = int(_clip(x * size + 0.5, 0, size - 1))
    pixel_y = int(_clip(y * size + 0.5, 0, size - 1))
    return pixel_x, pixel_y


def pixel_to_latlon(zoom: int, x: float, y: float) -> tuple[float, float]:
    """Inverse of latlon_to_pixel: global pixel (x, y) to WGS84 (lat, lon)."""
    size = width_at_level(zoom)
    px = _clip(x, 0, size - 1) / size - 0.5
    py = 0.5 - _clip(y, 0, size - 1) / size

    lat = 90.0 - 360.0 * math.atan(math.exp(-py * 2 * math.pi)) / math.pi
    lon = WORLD_LNG_SPAN_DEG * px
    return lat, lon


def ground_resolution(zoom: int, lat: float) -> float:
    """Return metres per pixel at the given latitude and zoom level."""
    lat = _clip(lat, MIN_LATITUDE, MAX_LATITUDE)
    return (
        math.cos(math.radians(lat)) * 2 * math.pi * EARTH_RADIUS_M
    ) / width_at_level(zoom)


def pixel_to_tile(x: int, y: int) -> tuple[int, int]:
    """Tile (column, row) containing the global pixel (x, y)."""
    return int(x) // TILE_WIDTH, int(y) // TILE_HEIGHT


def tile_to_pixel(col: int, row: int) -> tuple[int, int]:
    """Global pixel of the top-left corner of tile (col, row)."""
    return col * TILE_WIDTH, row * TILE_HEIGHT


def tile_region(col: int, row: int) -> tuple[int, int, int, int]:
    """Inclusive pixel region (left, top, right, bottom) of tile (col, row)."""
    left, top = tile_to_pixel(col, row)
    return left, top, left + TILE_WIDTH - 1, top + TILE_HEIGHT - 1


def tile_to_quad_key(zoom: int, col: int, row: int) -> str:
    """
    Encode a tile address as a quad key.

    One digit per level, from the root down to zoom: bit i of the column
    adds 1, bit i of the row adds 2.
    """
    digits = []
    for i in range(zoom, 0, -1):
        mask = 1 << (i - 1)
        digit = 0
        if col & mask:
            digit += 1
        if row & mask:
            digit += 2
        digits.append(str(digit))
    return ''.join(digits)


def quad_key_to_tile(quad_key: str) -> tuple[int, int, int]:
    """Decode a quad key into (zoom, column, row)."""
    zoom = len(quad_key)
    col = row = 0
    for i, ch in enumerate(quad_key):
        mask = 1 << (zoom - i - 1)
        if ch == '0':
            continue
        if ch == '1':
            col |= mask
        elif ch == '2':
            row |= mask
        elif ch == '3':
            col |= mask
            row |= mask
        else:
            msg = f'invalid quad key digit {ch!r} in {quad_key!r}'
            raise ConfigurationError(msg)
    return zoom, col, row
