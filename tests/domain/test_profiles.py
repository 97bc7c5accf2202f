"""Tests for TOML level profiles."""

import pytest
import tomlkit

from domain.models import LevelSettings
from domain.profiles import (
    load_level_settings,
    save_level_settings,
    settings_from_mapping,
)
from domain.toml_sections import SECTION_MAP, flat_to_sectioned, sectioned_to_flat
from shared.constants import CombineMode
from shared.errors import ConfigurationError
from tiles.tile import HeatmapTile


def _write_profile(path, tiles_dir, **extra):
    doc = {
        'common': {'level': 7},
        'storage': {'base_dir': str(tiles_dir), 'overwrite': False},
        'cache': {'in_memory_s': 15},
        'render': {'combine': 'multiply'},
        'centroid': {'latitude': 52.5, 'longitude': 13.4},
    }
    doc.update(extra)
    path.write_text(tomlkit.dumps(doc), encoding='utf-8')
    return path


class TestTomlSections:
    """Tests for the sectioned profile mapping."""

    def test_every_section_field_is_a_setting(self):
        for fields in SECTION_MAP.values():
            for flat_name in fields:
                assert flat_name in LevelSettings.model_fields

    def test_flat_to_sectioned(self):
        result = flat_to_sectioned({'level': 3, 'in_memory': 10, 'centroid_latitude': 1.0})
        assert result['common'] == {'level': 3}
        assert result['cache'] == {'in_memory_s': 10}
        assert result['centroid'] == {'latitude': 1.0}

    def test_sectioned_to_flat(self):
        flat = sectioned_to_flat({'common': {'level': 3}, 'cache': {'in_memory_s': 10}})
        assert flat == {'level': 3, 'in_memory': 10}

    def test_flat_toml_still_accepted(self):
        assert sectioned_to_flat({'level': 4, 'overwrite': False}) == {
            'level': 4,
            'overwrite': False,
        }


class TestLoadLevelSettings:
    """Tests for load_level_settings."""

    def test_load(self, tmp_path, tiles_dir):
        path = _write_profile(tmp_path / 'level.toml', tiles_dir)
        settings = load_level_settings(path)
        assert settings.level == 7
        assert settings.base_dir == tiles_dir
        assert settings.overwrite is False
        assert settings.in_memory == 15
        assert settings.combine is CombineMode.MULTIPLY
        assert settings.centroid_latitude == 52.5

    def test_overrides(self, tmp_path, tiles_dir):
        path = _write_profile(tmp_path / 'level.toml', tiles_dir)
        assert load_level_settings(path, level=9).level == 9

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_level_settings(tmp_path / 'missing.toml')

    def test_invalid_toml(self, tmp_path):
        path = tmp_path / 'broken.toml'
        path.write_text('level = = 3', encoding='utf-8')
        with pytest.raises(ConfigurationError):
            load_level_settings(path)

    def test_invalid_values(self, tmp_path, tiles_dir):
        path = _write_profile(tmp_path / 'level.toml', tiles_dir, common={'level': 40})
        with pytest.raises(ConfigurationError):
            load_level_settings(path)

    def test_settings_from_mapping(self, tiles_dir):
        settings = settings_from_mapping(
            {'common': {'level': 2}, 'storage': {'base_dir': str(tiles_dir)}}
        )
        assert settings.level == 2


class TestSaveLevelSettings:
    """Tests for save_level_settings."""

    def test_round_trip(self, tmp_path, tiles_dir):
        original = LevelSettings(
            level=11,
            base_dir=tiles_dir,
            in_memory=30,
            combine='lighten',
            tile_class='heatmap',
            centroid_latitude=-33.9,
        )
        path = tmp_path / 'profiles' / 'saved.toml'
        save_level_settings(path, original)

        assert load_level_settings(path) == original

    def test_sections_written(self, tmp_path, tiles_dir):
        path = tmp_path / 'saved.toml'
        save_level_settings(path, LevelSettings(level=3, base_dir=tiles_dir))
        data = tomlkit.parse(path.read_text(encoding='utf-8')).unwrap()
        assert data['common']['level'] == 3
        assert data['cache']['in_memory_s'] == 0
        assert data['render']['combine'] == 'darken'

    def test_tile_class_object_cannot_be_saved(self, tmp_path, tiles_dir):
        settings = LevelSettings(level=3, base_dir=tiles_dir, tile_class=HeatmapTile)
        with pytest.raises(ConfigurationError):
            save_level_settings(tmp_path / 'saved.toml', settings)
