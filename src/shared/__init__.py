"""Shared constants, errors and helpers."""
from shared.errors import (
    AllocationError,
    ConfigurationError,
    MapLayerError,
    StoreError,
)
from shared.logging_setup import setup_logging
from shared.memory_estimation import ensure_canvas_fits, estimate_canvas_memory_mb

__all__ = [
    'AllocationError',
    'ConfigurationError',
    'MapLayerError',
    'StoreError',
    'ensure_canvas_fits',
    'estimate_canvas_memory_mb',
    'setup_logging',
]
