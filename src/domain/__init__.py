"""Domain layer - level settings and profiles."""
from domain.models import LevelSettings
from domain.profiles import (
    load_level_settings,
    save_level_settings,
    settings_from_mapping,
)

__all__ = [
    'LevelSettings',
    'load_level_settings',
    'save_level_settings',
    'settings_from_mapping',
]
