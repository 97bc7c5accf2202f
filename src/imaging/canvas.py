"""Pillow raster canvas addressed in global level pixel coordinates.

A canvas is a Pillow RGBA image plus the global pixel of its top-left
corner. Drawing methods take global coordinates and shift them into the
image, so the same call works on a pseudo-canvas sized to one drawing
command and on a 256x256 tile.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any

import numpy as np
from PIL import Image, ImageColor, ImageDraw, ImageFilter, ImageFont

from imaging.blend import blend
from imaging.heatmap import HeatmapColorizer
from shared.constants import DEFAULT_COLOR, TILE_MODE, TRANSPARENT, CombineMode
from shared.errors import AllocationError, ConfigurationError
from shared.memory_estimation import ensure_canvas_fits

logger = logging.getLogger(__name__)

Color = tuple[int, int, int, int]

# Horizontal and vertical text alignment names mapped to Pillow anchors
_HALIGN_ANCHORS = {'left': 'l', 'start': 'l', 'center': 'm', 'right': 'r', 'end': 'r'}
_VALIGN_ANCHORS = {
    'top': 't',
    'center': 'm',
    'bottom': 'b',
    'baseline': 's',
}

_FILTERS: dict[str, Callable[..., ImageFilter.Filter]] = {
    'gaussian': lambda stddev=1.0, **_: ImageFilter.GaussianBlur(radius=stddev),
    'blur': lambda **_: ImageFilter.BLUR,
    'box_blur': lambda radius=1, **_: ImageFilter.BoxBlur(radius),
    'sharpen': lambda **_: ImageFilter.SHARPEN,
    'smooth': lambda **_: ImageFilter.SMOOTH,
    'contour': lambda **_: ImageFilter.CONTOUR,
    'edge_enhance': lambda **_: ImageFilter.EDGE_ENHANCE,
    'emboss': lambda **_: ImageFilter.EMBOSS,
    'median': lambda size=3, **_: ImageFilter.MedianFilter(size),
    'min': lambda size=3, **_: ImageFilter.MinFilter(size),
    'max': lambda size=3, **_: ImageFilter.MaxFilter(size),
    'unsharp': lambda radius=2, percent=150, threshold=3, **_: ImageFilter.UnsharpMask(
        radius, percent, threshold
    ),
}


def to_color(color: Any, default: Color = DEFAULT_COLOR) -> Color:
    """Normalise a colour given as name, '#rrggbb' or RGB(A) tuple to RGBA."""
    if color is None:
        return default
    if isinstance(color, str):
        color = ImageColor.getrgb(color)
    values = tuple(int(c) for c in color)
    if len(values) == 3:
        return (*values, 255)
    if len(values) == 4:
        return values  # type: ignore[return-value]
    msg = f'invalid colour {color!r}'
    raise ConfigurationError(msg)


def load_font(
    font: Any = None,
    size: float | None = None,
) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """Return a Pillow font from a font object, a TTF/OTF path or the default."""
    if isinstance(font, (ImageFont.FreeTypeFont, ImageFont.ImageFont)):
        return font
    if font is not None:
        try:
            return ImageFont.truetype(str(font), int(size or 12))
        except OSError as exc:
            msg = f'cannot load font {font!r}: {exc}'
            raise ConfigurationError(msg) from exc
    return ImageFont.load_default(size or 12)


def text_anchor(args: Mapping[str, Any]) -> str:
    """Pillow anchor for string (align) and align_string (halign/valign)."""
    if 'halign' in args or 'valign' in args:
        h = _HALIGN_ANCHORS.get(str(args.get('halign', 'start')), 'l')
        v = _VALIGN_ANCHORS.get(str(args.get('valign', 'baseline')), 's')
        return h + v
    # align true: (x, y) is the left end of the baseline
    return 'ls' if args.get('align', 1) else 'lt'


def text_extent(args: Mapping[str, Any]) -> tuple[int, int, int, int] | None:
    """Global (left, top, right, bottom) covered by a text call, if any."""
    text = args.get('string', args.get('text'))
    if not text or args.get('x') is None or args.get('y') is None:
        return None
    font = load_font(args.get('font'), args.get('size'))
    left, top, right, bottom = font.getbbox(
        str(text), anchor=text_anchor(args)
    )
    x, y = int(args['x']), int(args['y'])
    return x + int(left), y + int(top), x + int(right), y + int(bottom)


class RasterCanvas:
    """RGBA raster whose top-left pixel sits at pixel_origin in level space."""

    def __init__(
        self,
        image: Image.Image,
        pixel_origin: tuple[int, int] = (0, 0),
    ) -> None:
        if image.mode != TILE_MODE:
            image = image.convert(TILE_MODE)
        self._image: Image.Image | None = image
        self.pixel_origin = (int(pixel_origin[0]), int(pixel_origin[1]))

    @classmethod
    def create(
        cls,
        width: int,
        height: int,
        pixel_origin: tuple[int, int] = (0, 0),
        background: Color = TRANSPARENT,
    ) -> RasterCanvas:
        """Allocate a blank canvas or raise AllocationError."""
        ensure_canvas_fits(width, height)
        try:
            image = Image.new(TILE_MODE, (width, height), background)
        except (MemoryError, ValueError) as exc:
            msg = f'unable to create {width}x{height} canvas at {pixel_origin}: {exc}'
            raise AllocationError(msg) from exc
        return cls(image, pixel_origin)

    # ------------------------------------------------------------------
    @property
    def image(self) -> Image.Image:
        if self._image is None:
            msg = 'canvas has been closed'
            raise ValueError(msg)
        return self._image

    @property
    def left(self) -> int:
        return self.pixel_origin[0]

    @property
    def top(self) -> int:
        return self.pixel_origin[1]

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def right(self) -> int:
        return self.left + self.width - 1

    @property
    def bottom(self) -> int:
        return self.top + self.height - 1

    def _local(self, x: float, y: float) -> tuple[float, float]:
        return x - self.left, y - self.top

    def _local_points(self, points: Sequence[Sequence[float]]) -> list[tuple[float, float]]:
        return [self._local(x, y) for x, y in points]

    def _draw(self) -> ImageDraw.ImageDraw:
        return ImageDraw.Draw(self.image)

    # --- primitives ---------------------------------------------------
    #
    # aa/antialias are accepted for every primitive that takes them; Pillow
    # draws these shapes without antialiasing.

    def setpixel(self, x=None, y=None, points=None, color=None, **_) -> bool:
        fill = to_color(color)
        targets = points if points else [(x, y)]
        for px, py in self._local_points(targets):
            if 0 <= px < self.width and 0 <= py < self.height:
                self.image.putpixel((int(px), int(py)), fill)
        return True

    def getpixel(self, x, y, **_) -> Color | None:
        px, py = self._local(x, y)
        if not (0 <= px < self.width and 0 <= py < self.height):
            return None
        return self.image.getpixel((int(px), int(py)))

    def line(self, x1, y1, x2, y2, color=None, endp=True, **_) -> bool:
        fill = to_color(color)
        start, end = self._local(x1, y1), self._local(x2, y2)
        end_px = (int(end[0]), int(end[1]))
        keep_end = (
            not endp
            and start != end
            and 0 <= end_px[0] < self.width
            and 0 <= end_px[1] < self.height
        )
        # Pillow always paints the end point
        saved = self.image.getpixel(end_px) if keep_end else None
        self._draw().line([start, end], fill=fill)
        if keep_end:
            self.image.putpixel(end_px, saved)
        return True

    def box(
        self,
        box=None,
        xmin=None,
        ymin=None,
        xmax=None,
        ymax=None,
        color=None,
        filled=False,
        fill=None,
        **_,
    ) -> bool:
        if box is None:
            box = [xmin, ymin, xmax, ymax]
        left, top = self._local(box[0], box[1])
        right, bottom = self._local(box[2], box[3])
        rect = [min(left, right), min(top, bottom), max(left, right), max(top, bottom)]
        draw = self._draw()
        if fill is not None or filled:
            draw.rectangle(rect, fill=to_color(fill if fill is not None else color))
        else:
            draw.rectangle(rect, outline=to_color(color))
        return True

    def polyline(self, points, color=None, **_) -> bool:
        local = self._local_points(points)
        draw = self._draw()
        if len(local) == 1:
            draw.point(local, fill=to_color(color))
        else:
            draw.line(local, fill=to_color(color))
        return True

    def polygon(self, points, color=None, fill=None, **_) -> bool:
        local = self._local_points(points)
        draw = self._draw()
        if len(local) < 3:
            draw.line(local, fill=to_color(fill if fill is not None else color))
        else:
            draw.polygon(local, fill=to_color(fill if fill is not None else color))
        return True

    def arc(
        self,
        x,
        y,
        r,
        d1=0,
        d2=361,
        color=None,
        fill=None,
        filled=True,
        **_,
    ) -> bool:
        cx, cy = self._local(x, y)
        bounds = [cx - r, cy - r, cx + r, cy + r]
        draw = self._draw()
        if d2 - d1 >= 360:
            return self.circle(x, y, r, color=color, fill=fill, filled=filled)
        if fill is not None or filled:
            draw.pieslice(bounds, d1, d2, fill=to_color(fill if fill is not None else color))
        else:
            draw.arc(bounds, d1, d2, fill=to_color(color))
        return True

    def circle(self, x, y, r, color=None, fill=None, filled=True, **_) -> bool:
        cx, cy = self._local(x, y)
        bounds = [cx - r, cy - r, cx + r, cy + r]
        draw = self._draw()
        if fill is not None or filled:
            draw.ellipse(bounds, fill=to_color(fill if fill is not None else color))
        else:
            draw.ellipse(bounds, outline=to_color(color))
        return True

    def flood_fill(self, x, y, color=None, border=None, fill=None, **_) -> bool:
        px, py = self._local(x, y)
        if not (0 <= px < self.width and 0 <= py < self.height):
            return False
        ImageDraw.floodfill(
            self.image,
            (int(px), int(py)),
            to_color(fill if fill is not None else color),
            border=to_color(border) if border is not None else None,
        )
        return True

    def string(self, x, y, string=None, text=None, font=None, size=None, color=None, **args) -> bool:
        text = string if string is not None else text
        if text is None:
            msg = 'string requires a string or text argument'
            raise ConfigurationError(msg)
        pil_font = load_font(font, size)
        self._draw().text(
            self._local(x, y),
            str(text),
            font=pil_font,
            fill=to_color(color),
            anchor=text_anchor(args),
        )
        return True

    def align_string(self, x, y, halign='start', valign='baseline', **args) -> bool:
        return self.string(x, y, halign=halign, valign=valign, **args)

    def radial_circle(self, x, y, r, color=None, **_) -> bool:
        """Disc whose opacity falls off linearly from the centre to radius r."""
        r = int(r)
        red, green, blue, alpha = to_color(color)
        if r <= 0:
            return self.setpixel(x=x, y=y, color=(red, green, blue, alpha))

        yy, xx = np.mgrid[-r : r + 1, -r : r + 1]
        dist = np.sqrt(xx * xx + yy * yy)
        falloff = np.clip(1.0 - dist / r, 0.0, 1.0)

        layer = np.zeros((2 * r + 1, 2 * r + 1, 4), dtype=np.uint8)
        layer[..., 0] = red
        layer[..., 1] = green
        layer[..., 2] = blue
        layer[..., 3] = (falloff * alpha).round().astype(np.uint8)

        cx, cy = self._local(x, y)
        self.image.alpha_composite(
            Image.fromarray(layer), dest=(int(cx) - r, int(cy) - r)
        )
        return True

    # --- composition --------------------------------------------------

    def crop(self, left: int, top: int, width: int, height: int) -> RasterCanvas:
        """Copy of the global rectangle (left, top, width, height)."""
        lx, ly = self._local(left, top)
        region = self.image.crop((int(lx), int(ly), int(lx) + width, int(ly) + height))
        return RasterCanvas(region, pixel_origin=(left, top))

    def compose(
        self,
        src: RasterCanvas,
        left: int | None = None,
        top: int | None = None,
        combine: str | CombineMode = CombineMode.NORMAL,
    ) -> bool:
        """Blend src onto this canvas with its top-left at global (left, top)."""
        if left is None:
            left = src.left
        if top is None:
            top = src.top
        lx, ly = (int(v) for v in self._local(left, top))
        box = (lx, ly, lx + src.width, ly + src.height)
        region = self.image.crop(box)
        try:
            self.image.paste(blend(region, src.image, combine), box[:2])
        finally:
            region.close()
        return True

    def apply_filter(self, type: str = 'gaussian', **args) -> bool:
        try:
            factory = _FILTERS[type]
        except KeyError:
            msg = f'unknown filter {type!r}, expected one of {sorted(_FILTERS)}'
            raise ConfigurationError(msg) from None
        filtered = self.image.filter(factory(**args))
        self._replace(filtered)
        return True

    def colourise(self, ramp=None, **_) -> None:
        self._replace(HeatmapColorizer(ramp).colourise(self.image))

    def _replace(self, image: Image.Image) -> None:
        old = self._image
        self._image = image if image.mode == TILE_MODE else image.convert(TILE_MODE)
        if old is not None and old is not self._image:
            old.close()

    # ------------------------------------------------------------------
    def close(self) -> None:
        """Release the pixel buffer."""
        if self._image is not None:
            self._image.close()
            self._image = None

    @property
    def closed(self) -> bool:
        return self._image is None

    def __enter__(self) -> RasterCanvas:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
