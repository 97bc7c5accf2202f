"""Split a pseudo-canvas into tile-sized crops and blend them onto tiles."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from geo.projection import pixel_to_tile, tiles_per_axis
from shared.constants import CombineMode

if TYPE_CHECKING:
    from collections.abc import Iterator

    from imaging.canvas import RasterCanvas
    from tiles.cache import TileCache, TileKey
    from tiles.tile import Tile

logger = logging.getLogger(__name__)

BBox = tuple[int, int, int, int]


def intersection(
    bbox: BBox,
    region: BBox,
) -> tuple[int, int, int, int] | None:
    """
    Overlap of two inclusive boxes as (left, top, width, height).

    Returns None if there is no intersection.
    """
    left = max(bbox[0], region[0])
    top = max(bbox[1], region[1])
    right = min(bbox[2], region[2])
    bottom = min(bbox[3], region[3])
    if right < left or bottom < top:
        return None
    return left, top, 1 + right - left, 1 + bottom - top


class Compositor:
    """Blend pseudo-canvases onto the tiles of a TileCache.

    Args:
        cache: Tile cache of the target level.
        combine: Blend operator name used for every composite.
    """

    def __init__(
        self,
        cache: TileCache,
        combine: str | CombineMode = CombineMode.DARKEN,
    ) -> None:
        self.cache = cache
        self.combine = combine

    def tile_range(self, bbox: BBox) -> tuple[int, int, int, int]:
        """
        Tile addresses (tile_left, tile_top, tile_right, tile_bottom) under bbox.

        Clamped to the tiles of the level, so shapes hanging over the
        edge of the world only reach existing tiles.
        """
        left, top, right, bottom = bbox
        last = tiles_per_axis(self.cache.zoom) - 1
        tile_left, tile_top = pixel_to_tile(left, top)
        tile_right, tile_bottom = pixel_to_tile(right, bottom)
        return (
            max(tile_left, 0),
            max(tile_top, 0),
            min(tile_right, last),
            min(tile_bottom, last),
        )

    def iter_addresses(self, bbox: BBox) -> Iterator[TileKey]:
        """Tile addresses under bbox in row-major order."""
        tile_left, tile_top, tile_right, tile_bottom = self.tile_range(bbox)
        for row in range(tile_top, tile_bottom + 1):
            for col in range(tile_left, tile_right + 1):
                yield col, row

    def composite(self, bbox: BBox, canvas: RasterCanvas) -> list[TileKey]:
        """
        Blend the parts of canvas covering each tile under bbox.

        After each tile: refresh its deadline and run the eviction sweep
        when residency is enabled, otherwise save and release it at once.

        Returns:
            Addresses of the tiles written, in the order they were written.
        """
        written: list[TileKey] = []
        for col, row in self.iter_addresses(bbox):
            tile = self.cache.resolve(col, row)
            if self._compose_tile(bbox, canvas, tile):
                written.append((col, row))

            if self.cache.in_memory:
                self.cache.touch(col, row)
                self.cache.cleanup()
            else:
                self.cache.release(col, row)

        logger.debug('Composited bbox %s onto %d tiles', bbox, len(written))
        return written

    def _compose_tile(self, bbox: BBox, canvas: RasterCanvas, tile: Tile) -> bool:
        overlap = intersection(bbox, tile.region())
        if overlap is None:
            return False
        left, top, width, height = overlap
        with canvas.crop(left, top, width, height) as crop:
            tile.compose(crop, left=left, top=top, combine=self.combine)
        return True
