"""Imaging package - raster canvas, blend operators and heat-map colours."""

from imaging.blend import available_operators, blend, get_operator
from imaging.canvas import RasterCanvas, load_font, text_extent, to_color
from imaging.heatmap import HeatmapColorizer, build_color_lut

__all__ = [
    'HeatmapColorizer',
    'RasterCanvas',
    'available_operators',
    'blend',
    'build_color_lut',
    'get_operator',
    'load_font',
    'text_extent',
    'to_color',
]
