"""Tile store: creates or loads tile handles by quad key."""

from __future__ import annotations

from pathlib import Path

from tiles.tile import Tile, resolve_tile_class


class TileStore:
    """Hand out Tile objects for quad keys under one base directory.

    Args:
        base_dir: Directory holding ``<quad_key>.png`` files.
        tile_class: Tile implementation, by name ('default', 'heatmap') or class.
        autosave: Passed to every tile.
    """

    def __init__(
        self,
        base_dir: str | Path = '.',
        tile_class: str | type[Tile] = Tile,
        autosave: bool = True,
    ) -> None:
        self.base_dir = Path(base_dir)
        self.tile_class = resolve_tile_class(tile_class)
        self.autosave = autosave

    def load_or_create(self, quad_key: str, overwrite: bool) -> Tile:
        """
        Return the tile for quad_key.

        With overwrite the tile starts blank even if a file exists;
        without it the existing file is loaded, or a blank tile is created.
        """
        return self.tile_class(
            quad_key=quad_key,
            base_dir=self.base_dir,
            overwrite=overwrite,
            autosave=self.autosave,
        )
