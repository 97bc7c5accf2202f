"""Blend operators used when composing a crop onto a tile."""

from __future__ import annotations

from collections.abc import Callable

from PIL import Image, ImageChops

from shared.constants import CombineMode
from shared.errors import ConfigurationError

BlendFunc = Callable[[Image.Image, Image.Image], Image.Image]


def _normal(dest: Image.Image, src: Image.Image) -> Image.Image:
    return Image.alpha_composite(dest, src)


def _replace(dest: Image.Image, src: Image.Image) -> Image.Image:
    return src.copy()


def _channel_op(op: Callable[[Image.Image, Image.Image], Image.Image]) -> BlendFunc:
    """
    Build a blend operator from a per-channel ImageChops function.

    The source is first laid over the destination, so that antialiased
    edges count with their coverage, then op combines the colour channels
    of the destination and that result. Pixels where the source is fully
    transparent keep the destination value.
    """

    def blend(dest: Image.Image, src: Image.Image) -> Image.Image:
        over = Image.alpha_composite(dest, src)
        combined = op(dest.convert('RGB'), over.convert('RGB'))
        combined.putalpha(over.getchannel('A'))

        # Only pixels the source actually drew on are affected
        mask = src.getchannel('A').point(lambda a: 255 if a else 0)
        return Image.composite(combined, dest, mask)

    return blend


_OPERATORS: dict[str, BlendFunc] = {
    CombineMode.NORMAL.value: _normal,
    CombineMode.REPLACE.value: _replace,
    CombineMode.DARKEN.value: _channel_op(ImageChops.darker),
    CombineMode.LIGHTEN.value: _channel_op(ImageChops.lighter),
    CombineMode.MULTIPLY.value: _channel_op(ImageChops.multiply),
    CombineMode.SCREEN.value: _channel_op(ImageChops.screen),
    CombineMode.ADD.value: _channel_op(ImageChops.add),
    CombineMode.SUBTRACT.value: _channel_op(ImageChops.subtract),
    CombineMode.DIFFERENCE.value: _channel_op(ImageChops.difference),
}


def available_operators() -> list[str]:
    return sorted(_OPERATORS)


def get_operator(name: str | CombineMode) -> BlendFunc:
    """Return the blend function registered under name."""
    key = name.value if isinstance(name, CombineMode) else str(name).lower()
    try:
        return _OPERATORS[key]
    except KeyError:
        msg = (
            f'unknown combine operator {name!r}, '
            f'expected one of {available_operators()}'
        )
        raise ConfigurationError(msg) from None


def blend(dest: Image.Image, src: Image.Image, combine: str | CombineMode) -> Image.Image:
    """Blend src over dest (both RGBA, same size) with the named operator."""
    if dest.size != src.size:
        msg = f'blend size mismatch: {dest.size} vs {src.size}'
        raise ValueError(msg)
    return get_operator(combine)(dest, src)
