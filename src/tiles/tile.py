"""Tile handles: one PNG file per quad key in a base directory."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

from PIL import Image, UnidentifiedImageError

from geo.projection import quad_key_to_tile, tile_region
from imaging.canvas import RasterCanvas
from shared.constants import (
    TILE_BACKGROUND,
    TILE_FILE_SUFFIX,
    TILE_HEIGHT,
    TILE_MODE,
    TILE_WIDTH,
    TRANSPARENT,
    CombineMode,
)
from shared.errors import ConfigurationError, StoreError

logger = logging.getLogger(__name__)


class Tile:
    """A 256x256 tile of one zoom level, backed by ``<base_dir>/<quad_key>.png``.

    On construction the tile loads its file when it exists and
    ``overwrite`` is false; otherwise it starts from a blank background.
    The tile keeps a dirty flag so that ``close()`` only writes tiles
    that changed when ``autosave`` is set.

    Usage:
        tile = Tile(quad_key='0231', base_dir='tiles', overwrite=False)
        tile.compose(crop, combine='darken')
        tile.save()
    """

    background: tuple[int, int, int, int] = TILE_BACKGROUND

    def __init__(
        self,
        quad_key: str,
        base_dir: str | Path = '.',
        overwrite: bool = True,
        autosave: bool = True,
    ) -> None:
        self.quad_key = quad_key
        self.base_dir = Path(base_dir)
        self.overwrite = overwrite
        self.autosave = autosave
        self.zoom, self.col, self.row = quad_key_to_tile(quad_key)
        self.left, self.top, self.right, self.bottom = tile_region(self.col, self.row)
        self.dirty = False
        self.canvas = self._load()

    @property
    def path(self) -> Path:
        return self.base_dir / f'{self.quad_key}{TILE_FILE_SUFFIX}'

    def region(self) -> tuple[int, int, int, int]:
        """Inclusive pixel region (left, top, right, bottom) in level space."""
        return self.left, self.top, self.right, self.bottom

    @property
    def image(self) -> Image.Image:
        return self.canvas.image

    def _load(self) -> RasterCanvas:
        if not self.overwrite and self.path.exists():
            try:
                with Image.open(self.path) as img:
                    img.load()
                    image = img.convert(TILE_MODE)
            except (OSError, UnidentifiedImageError) as exc:
                msg = f'unable to load tile {self.path}: {exc}'
                raise StoreError(msg) from exc
            if image.size != (TILE_WIDTH, TILE_HEIGHT):
                msg = f'tile {self.path} has size {image.size}'
                raise StoreError(msg)
            logger.debug('Loaded tile %s', self.path)
            return RasterCanvas(image, pixel_origin=(self.left, self.top))

        logger.debug('New blank tile %s (overwrite=%s)', self.quad_key, self.overwrite)
        self.dirty = True
        return RasterCanvas.create(
            TILE_WIDTH,
            TILE_HEIGHT,
            pixel_origin=(self.left, self.top),
            background=self.background,
        )

    def compose(
        self,
        src: RasterCanvas,
        left: int | None = None,
        top: int | None = None,
        combine: str | CombineMode = CombineMode.DARKEN,
    ) -> bool:
        """Blend a canvas onto the tile at global (left, top)."""
        result = self.canvas.compose(src, left=left, top=top, combine=combine)
        self.dirty = True
        return result

    def getpixel(self, x: int, y: int):
        return self.canvas.getpixel(x, y)

    def filter(self, **args: Any) -> bool:
        result = self.canvas.apply_filter(**args)
        self.dirty = True
        return result

    def colourise(self, **args: Any) -> None:
        self.canvas.colourise(**args)
        self.dirty = True

    def save(self) -> bool:
        """Write the tile atomically; raise StoreError on failure."""
        tmp_path = self.path.with_name(f'.{self.path.name}.tmp')
        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
            self.image.save(tmp_path, format='PNG')
            # Ensure data is written to disk
            fd = os.open(tmp_path, os.O_RDONLY)
            try:
                os.fsync(fd)
            finally:
                os.close(fd)
            os.replace(tmp_path, self.path)
        except OSError as exc:
            if tmp_path.exists():
                tmp_path.unlink()
            msg = f'unable to save tile {self.path}: {exc}'
            raise StoreError(msg) from exc
        self.dirty = False
        logger.debug('Saved tile %s', self.path)
        return True

    def close(self) -> None:
        """Release the raster, saving first when autosave is set and it changed."""
        if self.canvas.closed:
            return
        if self.autosave and self.dirty:
            self.save()
        self.canvas.close()

    def __enter__(self) -> Tile:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f'{type(self).__name__}(quad_key={self.quad_key!r}, base_dir={str(self.base_dir)!r})'


class HeatmapTile(Tile):
    """Tile with a transparent background, meant to be colourised at the end."""

    background = TRANSPARENT


TILE_CLASSES: dict[str, type[Tile]] = {
    'default': Tile,
    'heatmap': HeatmapTile,
}


def resolve_tile_class(tile_class: str | type[Tile]) -> type[Tile]:
    """Look up a tile implementation by name, or validate a Tile subclass."""
    if isinstance(tile_class, str):
        try:
            return TILE_CLASSES[tile_class]
        except KeyError:
            msg = (
                f'unknown tile class {tile_class!r}, '
                f'expected one of {sorted(TILE_CLASSES)}'
            )
            raise ConfigurationError(msg) from None
    if isinstance(tile_class, type) and issubclass(tile_class, Tile):
        return tile_class
    msg = f'tile class must be a Tile subclass or name, got {tile_class!r}'
    raise ConfigurationError(msg)
