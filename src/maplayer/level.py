"""Level: draw geographic primitives onto the tile pyramid of one zoom level.

Every drawing call goes through the same four states:

1. filtered - calls outside ``min_level``/``max_level`` are dropped
2. translated - lat/lon and metre arguments become level pixels
3. rasterized - the primitive is drawn on a pseudo-canvas sized to
   its bounding box
4. composited - the pseudo-canvas is split over the tiles it covers
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from domain.models import LevelSettings
from geo.bbox import bounding_box
from geo.projection import height_at_level, pixel_to_tile, width_at_level
from geo.translate import GeometryTranslator
from imaging.canvas import RasterCanvas
from maplayer.primitives import get_primitive
from shared.errors import AllocationError, ConfigurationError
from tiles.cache import TileCache
from tiles.compositor import Compositor
from tiles.store import TileStore

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from tiles.cache import TileKey
    from tiles.tile import Tile

logger = logging.getLogger(__name__)

BBox = tuple[int, int, int, int]

_MIN_LEVEL_KEYS = ('-min_level', 'min_level')
_MAX_LEVEL_KEYS = ('-max_level', 'max_level')


def _first(args: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if args.get(key) is not None:
            return args[key]
    return None


def _union(a: BBox, b: BBox | None) -> BBox:
    if b is None:
        return a
    return min(a[0], b[0]), min(a[1], b[1]), max(a[2], b[2]), max(a[3], b[3])


class Level:
    """One zoom level of a tile pyramid.

    Args:
        settings: Validated LevelSettings. When omitted, keyword
            overrides are validated into new settings.
        clock: Time source for tile eviction deadlines.
        **overrides: LevelSettings fields (level, base_dir, overwrite,
            autosave, in_memory, combine, tile_class, centroid_latitude,
            centroid_longitude).

    Usage:
        with Level(level=12, base_dir='tiles', in_memory=30) as level:
            level.line(x1=13.40, y1=52.52, x2=13.45, y2=52.50, color='red')
            level.circle(x=13.41, y=52.51, r=250, fill='blue')
    """

    def __init__(
        self,
        settings: LevelSettings | None = None,
        *,
        clock: Callable[[], float] = time.time,
        **overrides: Any,
    ) -> None:
        try:
            if settings is None:
                settings = LevelSettings.model_validate(overrides)
            elif overrides:
                settings = LevelSettings.model_validate(
                    {**settings.model_dump(), **overrides}
                )
        except ValidationError as exc:
            msg = f'invalid level settings: {exc}'
            raise ConfigurationError(msg) from exc

        self.settings = settings
        self.translator = GeometryTranslator(
            settings.level,
            centroid_latitude=settings.centroid_latitude,
            centroid_longitude=settings.centroid_longitude,
        )
        self.store = TileStore(
            settings.base_dir,
            tile_class=settings.tile_class,
            autosave=settings.autosave,
        )
        self.cache = TileCache(
            settings.level,
            self.store,
            in_memory=settings.in_memory,
            overwrite=settings.overwrite,
            clock=clock,
        )
        self.compositor = Compositor(self.cache, combine=settings.combine)
        logger.info(
            'Level %d ready: base_dir=%s, in_memory=%ds, combine=%s, overwrite=%s',
            settings.level,
            settings.base_dir,
            settings.in_memory,
            settings.combine.value,
            settings.overwrite,
        )

    # --- properties ---------------------------------------------------

    @property
    def level(self) -> int:
        return self.settings.level

    zoom = level

    @property
    def width(self) -> int:
        """Pixel width of the whole level."""
        return width_at_level(self.level)

    @property
    def height(self) -> int:
        return height_at_level(self.level)

    @property
    def tiles(self) -> dict[TileKey, Tile | None]:
        return self.cache.tiles

    @property
    def timeouts(self) -> dict[TileKey, float]:
        return self.cache.timeouts

    def latlon_to_pixel(self, lat: float, lon: float) -> tuple[int, int]:
        return self.translator.latlon_to_pixel(lat, lon)

    # --- drawing ------------------------------------------------------

    def in_level_range(self, args: Mapping[str, Any]) -> bool:
        """False when the call restricts itself to other zoom levels."""
        min_level = _first(args, _MIN_LEVEL_KEYS)
        max_level = _first(args, _MAX_LEVEL_KEYS)
        if min_level is not None and self.level < min_level:
            return False
        return not (max_level is not None and self.level > max_level)

    def draw(self, name: str, **args: Any) -> Any:
        """
        Draw primitive ``name`` with geographic arguments.

        x/y are longitude/latitude, ``points`` are (lat, lon) pairs,
        ``box`` is [lat, lon, lat, lon] and ``r`` is a radius in metres.

        Returns:
            The primitive's result, or None when the call was filtered
            out by its level range.

        Raises:
            ConfigurationError: Unknown primitive or malformed arguments.
            AllocationError: The pseudo-canvas is too large to allocate.
            StoreError: A tile could not be read or written.
        """
        primitive = get_primitive(name)
        if not self.in_level_range(args):
            logger.debug('Skipped %s outside level range at level %d', name, self.level)
            return None

        imager_args = self.translator.translate_arguments(args)
        for arg in primitive.args:
            if arg in args:
                imager_args[arg] = args[arg]

        if primitive.reads_tile:
            return self._read_pixel(imager_args)

        bbox = bounding_box(imager_args)
        if primitive.extent is not None:
            bbox = _union(bbox, primitive.extent(imager_args))
        left, top, right, bottom = bbox

        try:
            canvas = RasterCanvas.create(
                1 + right - left,
                1 + bottom - top,
                pixel_origin=(left, top),
            )
        except AllocationError:
            logger.error('Cannot draw %s at level %d: bbox %s too large', name, self.level, bbox)
            raise

        try:
            try:
                result = getattr(canvas, name)(**imager_args)
            except TypeError as exc:
                msg = f'bad arguments for {name}: {exc}'
                raise ConfigurationError(msg) from exc
            self.compositor.composite(bbox, canvas)
        finally:
            canvas.close()
        return result

    def _read_pixel(self, imager_args: Mapping[str, Any]) -> Any:
        x, y = imager_args.get('x'), imager_args.get('y')
        if x is None or y is None:
            msg = 'getpixel requires x and y'
            raise ConfigurationError(msg)

        col, row = pixel_to_tile(x, y)
        tile = self.cache.resolve(col, row)
        color = tile.getpixel(x, y)
        if self.cache.in_memory:
            self.cache.touch(col, row)
            self.cache.cleanup()
        else:
            self.cache.release(col, row)
        return color

    def radial_circle(self, **args: Any) -> Any:
        return self.draw('radial_circle', **args)

    def getpixel(self, **args: Any) -> Any:
        """Colour of the level pixel under (x=lon, y=lat)."""
        return self.draw('getpixel', **args)

    def setpixel(self, **args: Any) -> Any:
        return self.draw('setpixel', **args)

    def line(self, **args: Any) -> Any:
        return self.draw('line', **args)

    def box(self, **args: Any) -> Any:
        return self.draw('box', **args)

    def polyline(self, **args: Any) -> Any:
        return self.draw('polyline', **args)

    def polygon(self, **args: Any) -> Any:
        return self.draw('polygon', **args)

    def arc(self, **args: Any) -> Any:
        return self.draw('arc', **args)

    def circle(self, **args: Any) -> Any:
        return self.draw('circle', **args)

    def flood_fill(self, **args: Any) -> Any:
        return self.draw('flood_fill', **args)

    def string(self, **args: Any) -> Any:
        return self.draw('string', **args)

    def align_string(self, **args: Any) -> Any:
        return self.draw('align_string', **args)

    # --- whole-level operations ---------------------------------------

    def filter(self, **args: Any) -> int:
        """Apply an image filter to every tile touched so far and save them."""
        count = 0
        for _key, tile in self.cache.iter_tiles():
            tile.filter(**args)
            tile.save()
            count += 1
        logger.info('Filtered %d tiles at level %d (%s)', count, self.level, args)
        return count

    def colourise(self, **args: Any) -> int:
        """Map every touched tile through the heatmap colour ramp and save it."""
        count = 0
        for _key, tile in self.cache.iter_tiles():
            tile.colourise(**args)
            tile.save()
            count += 1
        logger.info('Colourised %d tiles at level %d', count, self.level)
        return count

    colorize = colourise

    def save(self) -> int:
        """Run the eviction sweep, then save every resident tile."""
        self.cache.cleanup()
        saved = self.cache.save_all()
        logger.info('Saved %d resident tiles at level %d', saved, self.level)
        return saved

    def close(self) -> None:
        """Release every resident tile; tiles save themselves when autosave is set."""
        self.cache.close()
        logger.debug('Level %d closed', self.level)

    def __enter__(self) -> Level:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f'Level(level={self.level}, base_dir={str(self.settings.base_dir)!r})'
