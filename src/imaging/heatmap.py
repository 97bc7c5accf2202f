"""Colour ramps for heat-map post-processing of tiles."""

from __future__ import annotations

import numpy as np
from PIL import Image

from shared.constants import HEATMAP_COLOR_RAMP, HEATMAP_LUT_SIZE


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation between a and b."""
    return a + (b - a) * t


def build_color_lut(
    ramp: list[tuple[float, tuple[int, int, int]]],
    lut_size: int = HEATMAP_LUT_SIZE,
) -> list[tuple[int, int, int]]:
    """
    Build a lookup table (LUT) from a color ramp.

    Args:
        ramp: List of (t, (R, G, B)) tuples where t is in [0, 1]
        lut_size: Size of the resulting LUT

    Returns:
        List of RGB tuples

    """
    lut: list[tuple[int, int, int]] = []
    for i in range(lut_size):
        t = i / (lut_size - 1) if lut_size > 1 else 0.0
        # find segment
        for j in range(1, len(ramp)):
            t0, c0 = ramp[j - 1]
            t1, c1 = ramp[j]
            if t <= t1 or j == len(ramp) - 1:
                local = 0.0 if t1 == t0 else (t - t0) / (t1 - t0)
                local = min(max(local, 0.0), 1.0)
                r = round(lerp(c0[0], c1[0], local))
                g = round(lerp(c0[1], c1[1], local))
                b = round(lerp(c0[2], c1[2], local))
                lut.append((r, g, b))
                break
    return lut


def intensity(img: Image.Image) -> np.ndarray:
    """
    Per-pixel drawing intensity in [0, 1] of an RGBA image.

    Dark opaque pixels are intense, white or transparent ones are not:
    (255 - luminance) * alpha, normalised.
    """
    rgba = img.convert('RGBA')
    lum = np.asarray(rgba.convert('L'), dtype=np.float32)
    alpha = np.asarray(rgba.getchannel('A'), dtype=np.float32)
    return (255.0 - lum) * alpha / (255.0 * 255.0)


class HeatmapColorizer:
    """Map drawing intensity to colours through a LUT.

    Pixels with zero intensity become fully transparent; the others get
    the ramp colour and an alpha proportional to their intensity.
    """

    def __init__(
        self,
        ramp: list[tuple[float, tuple[int, int, int]]] | None = None,
        lut_size: int = HEATMAP_LUT_SIZE,
    ) -> None:
        self._lut = np.array(
            build_color_lut(ramp or HEATMAP_COLOR_RAMP, lut_size), dtype=np.uint8
        )

    @property
    def lut(self) -> np.ndarray:
        """Access the underlying LUT as numpy array."""
        return self._lut

    def colourise(self, img: Image.Image) -> Image.Image:
        t = intensity(img)
        idx = np.clip((t * (len(self._lut) - 1)).round(), 0, len(self._lut) - 1)
        rgb = self._lut[idx.astype(np.intp)]
        alpha = np.where(t > 0, np.clip(t * 255.0, 1, 255), 0).astype(np.uint8)
        out = np.dstack([rgb, alpha])
        return Image.fromarray(out)
