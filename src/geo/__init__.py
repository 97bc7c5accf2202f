"""Geo module - tile pyramid projection and argument translation."""

from .bbox import bounding_box
from .projection import (
    ground_resolution,
    latlon_to_pixel,
    pixel_to_latlon,
    pixel_to_tile,
    quad_key_to_tile,
    tile_to_quad_key,
    width_at_level,
)
from .translate import GeometryTranslator, optimize_points

__all__ = [
    'GeometryTranslator',
    'bounding_box',
    'ground_resolution',
    'latlon_to_pixel',
    'optimize_points',
    'pixel_to_latlon',
    'pixel_to_tile',
    'quad_key_to_tile',
    'tile_to_quad_key',
    'width_at_level',
]
