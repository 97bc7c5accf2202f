"""Draw geographic shapes onto PNG tile pyramids, one zoom level at a time."""

from maplayer.level import Level
from maplayer.primitives import PRIMITIVES, Primitive, get_primitive, register_primitive

__all__ = [
    'PRIMITIVES',
    'Level',
    'Primitive',
    'get_primitive',
    'register_primitive',
]
