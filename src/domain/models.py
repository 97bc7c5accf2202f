from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

from geo.projection import validate_zoom
from shared.constants import (
    DEFAULT_IN_MEMORY,
    DEFAULT_TILE_CLASS,
    MAX_LATITUDE,
    MAX_LONGITUDE,
    MIN_LATITUDE,
    MIN_LONGITUDE,
    CombineMode,
    default_combine,
)
from tiles.tile import resolve_tile_class


class LevelSettings(BaseModel):
    """
    Construction parameters of one zoom level.

    Immutable once the level is built; unknown keys (e.g. from a shared
    TOML profile) are ignored.
    """

    model_config = {
        'extra': 'ignore',
        'frozen': True,
        'arbitrary_types_allowed': True,
    }

    # Zoom level
    level: int
    # Directory the tile files are read from and written to
    base_dir: Path = Field(default_factory=Path.cwd)
    # Start from blank tiles instead of editing existing files
    overwrite: bool = True
    # Save changed tiles when they are released
    autosave: bool = True
    # Seconds a tile stays in memory after its last write (0 = save at once)
    in_memory: int = DEFAULT_IN_MEMORY
    # Blend operator used to compose drawings onto tiles
    combine: CombineMode = default_combine()
    # Tile implementation: 'default', 'heatmap' or a Tile subclass
    tile_class: Any = DEFAULT_TILE_CLASS
    # Latitude used for metre to pixel conversion of radii
    centroid_latitude: float = 0.0
    centroid_longitude: float = 0.0

    @field_validator('level', mode='before')
    @classmethod
    def validate_level(cls, v: Any) -> int:
        return validate_zoom(v)

    @field_validator('base_dir')
    @classmethod
    def validate_base_dir(cls, v: Path) -> Path:
        if not v.is_dir():
            msg = f'base_dir {v} is not a directory'
            raise ValueError(msg)
        return v

    @field_validator('in_memory')
    @classmethod
    def validate_in_memory(cls, v: int) -> int:
        if v < 0:
            msg = 'in_memory must not be negative'
            raise ValueError(msg)
        return v

    @field_validator('combine', mode='before')
    @classmethod
    def validate_combine(cls, v: Any) -> Any:
        return v.lower() if isinstance(v, str) else v

    @field_validator('tile_class')
    @classmethod
    def validate_tile_class(cls, v: Any) -> Any:
        resolve_tile_class(v)
        return v

    @field_validator('centroid_latitude')
    @classmethod
    def validate_centroid_latitude(cls, v: float) -> float:
        if not (MIN_LATITUDE <= v <= MAX_LATITUDE):
            msg = f'centroid_latitude must be in [{MIN_LATITUDE}, {MAX_LATITUDE}]'
            raise ValueError(msg)
        return v

    @field_validator('centroid_longitude')
    @classmethod
    def validate_centroid_longitude(cls, v: float) -> float:
        if not (MIN_LONGITUDE <= v <= MAX_LONGITUDE):
            msg = f'centroid_longitude must be in [{MIN_LONGITUDE}, {MAX_LONGITUDE}]'
            raise ValueError(msg)
        return v
