import logging
from pathlib import Path
from typing import Any

import tomlkit
from tomlkit.exceptions import ParseError
from pydantic import ValidationError

from domain.models import LevelSettings
from domain.toml_sections import flat_to_sectioned, sectioned_to_flat
from shared.errors import ConfigurationError

logger = logging.getLogger(__name__)


def settings_from_mapping(data: dict[str, Any]) -> LevelSettings:
    """Validate a (possibly sectioned) mapping into LevelSettings."""
    try:
        return LevelSettings.model_validate(sectioned_to_flat(data))
    except ValidationError as exc:
        msg = f'invalid level settings: {exc}'
        raise ConfigurationError(msg) from exc


def load_level_settings(path: str | Path, **overrides: Any) -> LevelSettings:
    """
    Load and validate a TOML profile -> LevelSettings.

    Keyword overrides replace values from the file (e.g. level=12 to
    reuse one profile for several zoom levels).
    """
    path = Path(path)
    if not path.exists():
        msg = f'Profile not found: {path}'
        raise FileNotFoundError(msg)

    text = path.read_text(encoding='utf-8')
    try:
        data = tomlkit.parse(text).unwrap()
    except ParseError as exc:
        msg = f'cannot parse profile {path}: {exc}'
        raise ConfigurationError(msg) from exc

    flat = sectioned_to_flat(data)
    flat.update(overrides)
    settings = settings_from_mapping(flat)
    logger.info('Loaded level settings from %s: level=%d', path, settings.level)
    return settings


def save_level_settings(path: str | Path, settings: LevelSettings) -> None:
    """Write LevelSettings as a sectioned TOML profile."""
    if not isinstance(settings.tile_class, str):
        msg = 'only named tile classes can be saved to a profile'
        raise ConfigurationError(msg)
    flat = settings.model_dump(mode='json')

    doc = tomlkit.document()
    for section, values in flat_to_sectioned(flat).items():
        table = tomlkit.table()
        for key, value in values.items():
            table.add(key, value)
        doc.add(section, table)

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(tomlkit.dumps(doc), encoding='utf-8')
    logger.info('Saved level settings to %s', path)
