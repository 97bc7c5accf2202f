"""Sectioned TOML layout of LevelSettings profiles.

LevelSettings stays a flat Pydantic model; on disk its fields are grouped
into tables::

    [common]
    level = 12

    [storage]
    base_dir = "tiles"
    overwrite = false

    [cache]
    in_memory_s = 30

Fields without a section go to ``[common]``. Flat profiles (keys at the
top level) are read as well.
"""

from __future__ import annotations

COMMON_SECTION = 'common'

# {section_name: {flat_field_name: short_name_in_toml}}
SECTION_MAP: dict[str, dict[str, str]] = {
    'storage': {
        'base_dir': 'base_dir',
        'overwrite': 'overwrite',
        'autosave': 'autosave',
        'tile_class': 'tile_class',
    },
    'cache': {
        'in_memory': 'in_memory_s',
    },
    'render': {
        'combine': 'combine',
    },
    'centroid': {
        'centroid_latitude': 'latitude',
        'centroid_longitude': 'longitude',
    },
}

# flat_field -> (section, short_name)
_FIELD_INDEX: dict[str, tuple[str, str]] = {
    flat: (section, short)
    for section, fields in SECTION_MAP.items()
    for flat, short in fields.items()
}

# section -> {short_name: flat_field}
_SHORT_INDEX: dict[str, dict[str, str]] = {
    section: {short: flat for flat, short in fields.items()}
    for section, fields in SECTION_MAP.items()
}


def flat_to_sectioned(flat: dict) -> dict:
    """Group flat LevelSettings fields into TOML tables."""
    result: dict = {COMMON_SECTION: {}}
    for key, value in flat.items():
        section, short_name = _FIELD_INDEX.get(key, (COMMON_SECTION, key))
        result.setdefault(section, {})[short_name] = value
    return result


def sectioned_to_flat(data: dict) -> dict:
    """Flatten a parsed profile back into LevelSettings field names."""
    flat: dict = {}
    for key, value in data.items():
        if not isinstance(value, dict):
            flat[key] = value
            continue
        # unknown tables and [common] keep their key names
        names = _SHORT_INDEX.get(key, {})
        for short_name, field_value in value.items():
            flat[names.get(short_name, short_name)] = field_value
    return flat
