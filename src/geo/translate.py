"""Translation of geographic drawing arguments into level pixel space."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from typing import Any

from geo.projection import ground_resolution, latlon_to_pixel
from shared.errors import ConfigurationError

logger = logging.getLogger(__name__)

# Suffixes of x/y argument pairs understood by the drawing primitives
COORD_SUFFIXES = ('', '1', '2', 'min', 'max')

Point = tuple[int, int]


def optimize_points(points: Sequence[Sequence[int]]) -> list[Point]:
    """
    Drop consecutive duplicate points.

    At low zoom levels many geographic points collapse onto one pixel.
    Order and both endpoints are kept, and running it twice gives the
    same list.
    """
    result: list[Point] = []
    for point in points:
        pt = (point[0], point[1])
        if not result or result[-1] != pt:
            result.append(pt)
    return result


def _is_list(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def pair_coordinate_lists(
    xs: Sequence[float],
    ys: Sequence[float],
) -> list[tuple[float, float]]:
    """
    Reassemble parallel x (longitude) and y (latitude) lists into points.

    When one list is shorter, its last value is repeated, the same way
    the drawing library pairs x and y lists. Points come back as
    (lat, lon).
    """
    if not xs or not ys:
        msg = 'x and y coordinate lists must not be empty'
        raise ConfigurationError(msg)

    points = []
    last_x = last_y = None
    for i in range(max(len(xs), len(ys))):
        last_x = xs[i] if i < len(xs) else last_x
        last_y = ys[i] if i < len(ys) else last_y
        points.append((last_y, last_x))
    return points


class GeometryTranslator:
    """Translate named geographic arguments into pixel-space arguments.

    Args:
        zoom: Zoom level of the target pixel space.
        centroid_latitude: Latitude used for metre to pixel radius conversion.
        centroid_longitude: Kept alongside the latitude as the level centroid.
    """

    def __init__(
        self,
        zoom: int,
        centroid_latitude: float = 0.0,
        centroid_longitude: float = 0.0,
    ) -> None:
        self.zoom = zoom
        self.centroid_latitude = centroid_latitude
        self.centroid_longitude = centroid_longitude

    def latlon_to_pixel(self, lat: float, lon: float) -> Point:
        return latlon_to_pixel(self.zoom, lat, lon)

    def translate_points(self, points: Sequence[Sequence[float]]) -> list[Point]:
        """Project a list of (lat, lon) points and drop collapsed duplicates."""
        return optimize_points(
            [self.latlon_to_pixel(lat, lon) for lat, lon in points]
        )

    def translate_coords(self, coords: Sequence[float]) -> list[int]:
        """
        Project a flat [lat, lon, lat, lon, ...] list pairwise.

        For two corners the result is ordered [left, top, right, bottom],
        whichever corners were given, since latitude grows northwards while
        pixel y grows southwards.
        """
        if len(coords) % 2:
            msg = f'coordinate list needs lat/lon pairs, got {len(coords)} values'
            raise ConfigurationError(msg)

        pixels: list[int] = []
        for i in range(0, len(coords), 2):
            pixels.extend(self.latlon_to_pixel(coords[i], coords[i + 1]))

        if len(pixels) == 4:
            x1, y1, x2, y2 = pixels
            return [min(x1, x2), min(y1, y2), max(x1, x2), max(y1, y2)]
        return pixels

    def translate_radius(self, meters: float, min_pixels: int | None = None) -> int:
        """
        Convert a radius in metres to pixels, floored at min_pixels.

        Halves round up, so 2.5 px becomes 3.
        """
        resolution = ground_resolution(self.zoom, self.centroid_latitude)
        return max(math.floor(meters / resolution + 0.5), min_pixels or 0)

    def translate_arguments(self, args: Mapping[str, Any]) -> dict[str, Any]:
        """
        Translate the geographic arguments of one drawing call.

        Only coordinate slots are returned; the caller merges in the
        primitive's own pass-through arguments. An x/y pair is translated
        only when both halves are present; a lone half is passed through
        unchanged.
        """
        i_args: dict[str, Any] = {}

        if 'points' in args:
            i_args['points'] = self.translate_points(args['points'])
        if 'box' in args:
            i_args['box'] = self.translate_coords(args['box'])
        if 'r' in args:
            i_args['r'] = self.translate_radius(
                args['r'], args.get('-min_r', args.get('min_r'))
            )

        for suffix in COORD_SUFFIXES:
            x = args.get(f'x{suffix}')
            y = args.get(f'y{suffix}')

            if x is None or y is None:
                # half a pair cannot be projected
                if x is not None:
                    i_args[f'x{suffix}'] = x
                if y is not None:
                    i_args[f'y{suffix}'] = y
                continue

            x_is_list, y_is_list = _is_list(x), _is_list(y)
            if x_is_list or y_is_list:
                if suffix:
                    msg = (
                        f'x{suffix} and y{suffix} as coordinate lists '
                        'are not supported'
                    )
                    raise ConfigurationError(msg)
                if x_is_list != y_is_list:
                    msg = (
                        'x and y must both be coordinate lists or both be '
                        f'scalars, got x={x!r} and y={y!r}'
                    )
                    raise ConfigurationError(msg)
                points = pair_coordinate_lists(x, y)
                logger.debug('Reassembled %d points from x/y lists', len(points))
                i_args['points'] = self.translate_points(points)
            else:
                pixel_x, pixel_y = self.latlon_to_pixel(y, x)
                i_args[f'x{suffix}'] = pixel_x
                i_args[f'y{suffix}'] = pixel_y

        return i_args
