"""Error taxonomy for the tile rendering engine."""

from __future__ import annotations


class MapLayerError(Exception):
    """Base class of all errors raised by this package."""


class ConfigurationError(MapLayerError, ValueError):
    """Invalid zoom level, unknown primitive/operator or unsupported arguments.

    Fatal for the call that raises it and never retried.
    """


class AllocationError(MapLayerError, MemoryError):
    """A pseudo-canvas or tile buffer could not be created.

    Tiles committed by earlier drawing calls stay valid.
    """


class StoreError(MapLayerError, OSError):
    """A tile could not be loaded from or saved to the tile store."""
