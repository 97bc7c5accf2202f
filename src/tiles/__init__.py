"""Tile handles, residency cache and composition.

This module provides:
- Tile / HeatmapTile: one PNG file per quad key
- TileStore: creates or loads tiles by quad key
- TileCache: lazy load, one-shot overwrite and timed eviction
- Compositor: blends pseudo-canvas crops onto the tiles they cover
"""

from tiles.cache import TileCache
from tiles.compositor import Compositor
from tiles.store import TileStore
from tiles.tile import TILE_CLASSES, HeatmapTile, Tile, resolve_tile_class

__all__ = [
    'TILE_CLASSES',
    'Compositor',
    'HeatmapTile',
    'Tile',
    'TileCache',
    'TileStore',
    'resolve_tile_class',
]
