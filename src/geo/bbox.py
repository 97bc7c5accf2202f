"""Bounding boxes of pixel-space drawing arguments."""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from geo.translate import COORD_SUFFIXES
from shared.errors import ConfigurationError


def bounding_box(args: Mapping[str, Any]) -> tuple[int, int, int, int]:
    """
    Return the inclusive (left, top, right, bottom) box of a drawing call.

    Covers points, a box, every complete x/y pair and, when r is given,
    the circle of radius r around (x, y). A lone x or y is not a pixel
    position and is ignored. The result is at least 1x1.
    """
    xs: list[float] = []
    ys: list[float] = []

    for x, y in args.get('points') or ():
        xs.append(x)
        ys.append(y)

    box = args.get('box')
    if box:
        xs.extend(box[0::2])
        ys.extend(box[1::2])

    for suffix in COORD_SUFFIXES:
        x = args.get(f'x{suffix}')
        y = args.get(f'y{suffix}')
        if x is None or y is None:
            continue
        xs.append(x)
        ys.append(y)

    if not xs or not ys:
        msg = f'no pixel coordinates in drawing arguments {sorted(args)}'
        raise ConfigurationError(msg)

    left, top = math.floor(min(xs)), math.floor(min(ys))
    right, bottom = math.ceil(max(xs)), math.ceil(max(ys))

    r = args.get('r')
    if r and args.get('x') is not None and args.get('y') is not None:
        r = math.ceil(r)
        left = min(left, args['x'] - r)
        top = min(top, args['y'] - r)
        right = max(right, args['x'] + r)
        bottom = max(bottom, args['y'] + r)

    return int(left), int(top), int(right), int(bottom)
