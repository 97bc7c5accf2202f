"""Memory estimation for pseudo-canvas allocation (OOM prevention)."""

import logging

import psutil

from shared.constants import (
    MAX_CANVAS_PIXELS,
    MEMORY_MIN_FREE_MB,
    MEMORY_SAFETY_RATIO,
)
from shared.errors import AllocationError

logger = logging.getLogger(__name__)

# Bytes per pixel for different buffer types
_BYTES_PER_PX_RGBA = 4      # PIL RGBA image
_MB = 1024 * 1024


def estimate_canvas_memory_mb(width: int, height: int) -> dict:
    """
    Estimate peak memory needed to draw one primitive and compose it.

    Accounts for:
    - the pseudo-canvas itself (PIL RGBA)
    - the largest crop taken from it (at most one tile, bounded by the canvas)
    - the temporary result of the blend operator (same size as the crop)

    Returns dict with component breakdown and peak estimate in MB.
    """
    pixels = width * height
    canvas_mb = pixels * _BYTES_PER_PX_RGBA / _MB

    # Crops are never larger than the canvas; blending needs source,
    # destination and result at once.
    crop_mb = canvas_mb
    blend_mb = 2 * crop_mb

    base_mb = canvas_mb + crop_mb + blend_mb

    # Overhead: ImageDraw state, Python objects
    overhead_mb = base_mb * 0.1

    peak_mb = base_mb + overhead_mb

    return {
        'pixels': pixels,
        'canvas_mb': round(canvas_mb, 1),
        'crop_mb': round(crop_mb, 1),
        'blend_mb': round(blend_mb, 1),
        'overhead_mb': round(overhead_mb, 1),
        'peak_mb': round(peak_mb, 1),
    }


def get_available_memory_mb() -> float:
    """Return available system memory in MB."""
    return psutil.virtual_memory().available / _MB


def ensure_canvas_fits(
    width: int,
    height: int,
    safety_ratio: float = MEMORY_SAFETY_RATIO,
    min_free_mb: float = MEMORY_MIN_FREE_MB,
    max_pixels: int = MAX_CANVAS_PIXELS,
) -> dict:
    """
    Refuse canvases that cannot be allocated safely.

    Raises AllocationError when the size is not positive, exceeds
    max_pixels, or the peak estimate exceeds the share of available
    RAM given by safety_ratio minus min_free_mb.
    Returns the estimate on success.
    """
    if width <= 0 or height <= 0:
        msg = f'invalid canvas size {width}x{height}'
        raise AllocationError(msg)

    if width * height > max_pixels:
        msg = (
            f'canvas {width}x{height} exceeds the limit of '
            f'{max_pixels} pixels'
        )
        raise AllocationError(msg)

    mem_est = estimate_canvas_memory_mb(width, height)
    available_mb = get_available_memory_mb()
    budget_mb = available_mb * safety_ratio - min_free_mb

    if mem_est['peak_mb'] > budget_mb:
        logger.warning(
            'Canvas %dx%d needs ~%.0f MB, budget ~%.0f MB (available ~%.0f MB)',
            width,
            height,
            mem_est['peak_mb'],
            budget_mb,
            available_mb,
        )
        msg = (
            f'canvas {width}x{height} needs ~{mem_est["peak_mb"]:.0f} MB, '
            f'only ~{max(budget_mb, 0):.0f} MB available'
        )
        raise AllocationError(msg)

    return {
        **mem_est,
        'available_mb': round(available_mb, 0),
        'budget_mb': round(budget_mb, 0),
    }
