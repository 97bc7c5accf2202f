"""Catalogue of drawing primitives a Level can dispatch to the raster canvas."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from imaging.canvas import RasterCanvas, text_extent
from shared.errors import ConfigurationError

Extent = Callable[[Mapping[str, Any]], 'tuple[int, int, int, int] | None']

_TEXT_ARGS = (
    'string',
    'font',
    'aa',
    'align',
    'channel',
    'color',
    'size',
    'sizew',
    'utf8',
    'vlayout',
    'text',
)


@dataclass(frozen=True)
class Primitive:
    """One drawing primitive.

    Attributes:
        name: RasterCanvas method that draws it.
        args: Non-geographic arguments passed through unchanged.
        extent: Optional function returning extra pixel area the shape
            covers beyond its coordinates (e.g. text glyphs).
        reads_tile: The primitive reads from tiles instead of drawing.
    """

    name: str
    args: tuple[str, ...] = ()
    extent: Extent | None = None
    reads_tile: bool = False


PRIMITIVES: dict[str, Primitive] = {}


def register_primitive(
    name: str,
    args: tuple[str, ...] = (),
    *,
    extent: Extent | None = None,
    reads_tile: bool = False,
) -> Primitive:
    """Add a primitive to the catalogue; the canvas must implement it."""
    if not callable(getattr(RasterCanvas, name, None)):
        msg = f'invalid primitive name: {name!r}'
        raise ConfigurationError(msg)
    primitive = Primitive(name, tuple(args), extent, reads_tile)
    PRIMITIVES[name] = primitive
    return primitive


def get_primitive(name: str) -> Primitive:
    try:
        return PRIMITIVES[name]
    except KeyError:
        msg = f'unknown primitive {name!r}, expected one of {sorted(PRIMITIVES)}'
        raise ConfigurationError(msg) from None


register_primitive('radial_circle', ('color',))
register_primitive('getpixel', reads_tile=True)
register_primitive('setpixel', ('color',))
register_primitive('line', ('color', 'endp', 'aa', 'antialias'))
register_primitive('box', ('color', 'filled', 'fill'))
register_primitive('polyline', ('color', 'aa', 'antialias'))
register_primitive('polygon', ('color', 'fill'))
register_primitive('arc', ('d1', 'd2', 'color', 'fill', 'aa', 'filled'))
register_primitive('circle', ('color', 'fill', 'aa', 'filled'))
register_primitive('flood_fill', ('color', 'border', 'fill'))
register_primitive('string', _TEXT_ARGS, extent=text_extent)
register_primitive(
    'align_string',
    (*_TEXT_ARGS, 'valign', 'halign'),
    extent=text_extent,
)
