"""In-memory tile residency with lazy load, one-shot overwrite and timed eviction.

This module provides TileCache, which owns the tiles of one zoom level
that have been touched by drawing calls.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from geo.projection import tile_to_quad_key

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from tiles.store import TileStore
    from tiles.tile import Tile

logger = logging.getLogger(__name__)

TileKey = tuple[int, int]


class TileCache:
    """Tiles of one level keyed by (column, row).

    ``tiles`` maps every key touched during the cache's lifetime to its
    loaded Tile, or to None once the tile has been saved and released.
    ``timeouts`` holds the eviction deadline of each resident tile.

    Features:
    - First touch of a key honours the overwrite policy
    - Later touches never overwrite, even after eviction
    - Eviction sweeps run at most once per ``in_memory`` seconds and
      always save the evicted tiles
    - ``in_memory == 0`` disables sweeping; callers release tiles
      immediately instead

    Usage:
        cache = TileCache(zoom=12, store=TileStore('tiles'), in_memory=30)
        tile = cache.resolve(1200, 1500)
        cache.touch(1200, 1500)
        cache.cleanup()
    """

    def __init__(
        self,
        zoom: int,
        store: TileStore,
        in_memory: int = 0,
        overwrite: bool = True,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.zoom = zoom
        self.store = store
        self.in_memory = in_memory
        self.overwrite = overwrite
        self.clock = clock
        self.tiles: dict[TileKey, Tile | None] = {}
        self.timeouts: dict[TileKey, float] = {}
        self.last_cleanup_time = clock()

    def _load(self, col: int, row: int, overwrite: bool) -> Tile:
        quad_key = tile_to_quad_key(self.zoom, col, row)
        return self.store.load_or_create(quad_key, overwrite=overwrite)

    def resolve(self, col: int, row: int) -> Tile:
        """Return the loaded tile at (col, row), loading it when needed."""
        key = (col, row)
        tile = self.tiles.get(key)
        if tile is not None:
            return tile

        # A key seen before was written earlier in this run: never blank it
        overwrite = self.overwrite if key not in self.tiles else False
        tile = self._load(col, row, overwrite)
        logger.debug(
            'Tile (%d, %d) loaded at zoom %d (overwrite=%s)',
            col,
            row,
            self.zoom,
            overwrite,
        )
        self.tiles[key] = tile
        self.timeouts[key] = self.clock() + self.in_memory
        return tile

    def touch(self, col: int, row: int) -> None:
        """Push the eviction deadline of (col, row) to now + in_memory."""
        self.timeouts[(col, row)] = self.clock() + self.in_memory

    def release(self, col: int, row: int) -> None:
        """Save the tile at (col, row) and drop it from memory."""
        key = (col, row)
        tile = self.tiles.get(key)
        if tile is None:
            return
        tile.save()
        tile.close()
        self.tiles[key] = None
        self.timeouts.pop(key, None)

    def cleanup(self) -> int:
        """
        Evict resident tiles whose deadline has passed.

        Does nothing when ``in_memory`` is 0 or when the previous sweep ran
        less than ``in_memory`` seconds ago. Evicted tiles are always saved,
        whatever the autosave setting.

        Returns:
            Number of evicted tiles.
        """
        if not self.in_memory:
            return 0

        now = self.clock()
        if now < self.last_cleanup_time + self.in_memory:
            return 0

        evicted = 0
        for key, tile in self.tiles.items():
            if tile is None or self.timeouts.get(key, now) > now:
                continue
            tile.save()
            tile.close()
            self.tiles[key] = None
            self.timeouts.pop(key, None)
            evicted += 1

        self.last_cleanup_time = now
        if evicted:
            logger.debug('Evicted %d tiles at zoom %d', evicted, self.zoom)
        return evicted

    def keys(self) -> list[TileKey]:
        """Every key touched so far, resident or not."""
        return list(self.tiles)

    def resident_keys(self) -> list[TileKey]:
        return [key for key, tile in self.tiles.items() if tile is not None]

    def iter_tiles(self) -> Iterator[tuple[TileKey, Tile]]:
        """
        Yield every touched tile, reloading evicted ones without overwrite.

        Reloaded tiles are closed again once the caller moves on, so
        memory stays bounded by the resident set.
        """
        for key in list(self.tiles):
            tile = self.tiles[key]
            if tile is not None:
                yield key, tile
                continue
            tile = self._load(*key, overwrite=False)
            try:
                yield key, tile
            finally:
                tile.canvas.close()

    def save_all(self) -> int:
        """Save every resident tile; returns how many were saved."""
        saved = 0
        for tile in self.tiles.values():
            if tile is not None:
                tile.save()
                saved += 1
        return saved

    def close(self) -> None:
        """Release every resident tile (each saves itself if autosave is set)."""
        for key, tile in self.tiles.items():
            if tile is not None:
                tile.close()
                self.tiles[key] = None
        self.timeouts.clear()

    def __contains__(self, key: object) -> bool:
        return key in self.tiles

    def __len__(self) -> int:
        return len(self.tiles)
