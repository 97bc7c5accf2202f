"""Tests for LevelSettings model."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from domain.models import LevelSettings
from shared.constants import CombineMode
from tiles.tile import HeatmapTile


class TestLevelSettingsDefaults:
    """Tests for default values."""

    def test_defaults(self, tiles_dir):
        settings = LevelSettings(level=5, base_dir=tiles_dir)
        assert settings.overwrite is True
        assert settings.autosave is True
        assert settings.in_memory == 0
        assert settings.combine is CombineMode.DARKEN
        assert settings.tile_class == 'default'
        assert settings.centroid_latitude == 0.0

    def test_base_dir_defaults_to_cwd(self):
        assert LevelSettings(level=1).base_dir == Path.cwd()

    def test_extra_keys_ignored(self, tiles_dir):
        settings = LevelSettings(level=5, base_dir=tiles_dir, unknown_key=1)
        assert not hasattr(settings, 'unknown_key')

    def test_frozen(self, tiles_dir):
        settings = LevelSettings(level=5, base_dir=tiles_dir)
        with pytest.raises(ValidationError):
            settings.level = 6


class TestLevelSettingsValidators:
    """Tests for LevelSettings validators."""

    @pytest.mark.parametrize('level', [0, 24, -3])
    def test_level_out_of_range(self, level, tiles_dir):
        with pytest.raises(ValidationError):
            LevelSettings(level=level, base_dir=tiles_dir)

    @pytest.mark.parametrize('level', [1, 12, 23])
    def test_level_in_range(self, level, tiles_dir):
        assert LevelSettings(level=level, base_dir=tiles_dir).level == level

    def test_level_error_names_zoom_range(self, tiles_dir):
        with pytest.raises(ValidationError, match=r'zoom level 30 is outside \[1, 23\]'):
            LevelSettings(level=30, base_dir=tiles_dir)

    @pytest.mark.parametrize('level', [True, 3.0, '3'])
    def test_level_must_be_int(self, level, tiles_dir):
        with pytest.raises(ValidationError):
            LevelSettings(level=level, base_dir=tiles_dir)

    def test_base_dir_must_exist(self, tmp_path):
        with pytest.raises(ValidationError):
            LevelSettings(level=3, base_dir=tmp_path / 'missing')

    def test_base_dir_must_be_directory(self, tmp_path):
        file_path = tmp_path / 'file.txt'
        file_path.write_text('x')
        with pytest.raises(ValidationError):
            LevelSettings(level=3, base_dir=file_path)

    def test_negative_in_memory(self, tiles_dir):
        with pytest.raises(ValidationError):
            LevelSettings(level=3, base_dir=tiles_dir, in_memory=-1)

    def test_combine_case_insensitive(self, tiles_dir):
        settings = LevelSettings(level=3, base_dir=tiles_dir, combine='Multiply')
        assert settings.combine is CombineMode.MULTIPLY

    def test_unknown_combine(self, tiles_dir):
        with pytest.raises(ValidationError):
            LevelSettings(level=3, base_dir=tiles_dir, combine='overlay')

    def test_tile_class_by_name_or_class(self, tiles_dir):
        assert LevelSettings(level=3, base_dir=tiles_dir, tile_class='heatmap').tile_class == 'heatmap'
        assert LevelSettings(level=3, base_dir=tiles_dir, tile_class=HeatmapTile).tile_class is HeatmapTile

    def test_unknown_tile_class(self, tiles_dir):
        with pytest.raises(ValidationError):
            LevelSettings(level=3, base_dir=tiles_dir, tile_class='vector')

    def test_centroid_range(self, tiles_dir):
        with pytest.raises(ValidationError):
            LevelSettings(level=3, base_dir=tiles_dir, centroid_latitude=89.0)
        with pytest.raises(ValidationError):
            LevelSettings(level=3, base_dir=tiles_dir, centroid_longitude=181.0)
