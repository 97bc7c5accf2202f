"""Tests for geo.translate module."""

import pytest

from geo.projection import ground_resolution, latlon_to_pixel
from geo.translate import (
    GeometryTranslator,
    optimize_points,
    pair_coordinate_lists,
)
from shared.errors import ConfigurationError


@pytest.fixture
def translator():
    return GeometryTranslator(10)


class TestOptimizePoints:
    """Tests for optimize_points."""

    def test_removes_consecutive_duplicates(self):
        points = [(1, 1), (1, 1), (2, 2), (2, 2), (2, 2), (3, 3)]
        assert optimize_points(points) == [(1, 1), (2, 2), (3, 3)]

    def test_keeps_non_consecutive_repeats(self):
        points = [(1, 1), (2, 2), (1, 1)]
        assert optimize_points(points) == [(1, 1), (2, 2), (1, 1)]

    def test_idempotent(self):
        points = [(0, 0), (0, 0), (5, 1), (5, 1), (0, 0)]
        once = optimize_points(points)
        assert optimize_points(once) == once

    def test_keeps_endpoints(self):
        points = [(4, 4), (4, 4), (9, 9)]
        result = optimize_points(points)
        assert result[0] == (4, 4)
        assert result[-1] == (9, 9)

    def test_empty(self):
        assert optimize_points([]) == []

    def test_accepts_lists(self):
        assert optimize_points([[1, 2], [1, 2]]) == [(1, 2)]


class TestPairCoordinateLists:
    """Tests for pair_coordinate_lists."""

    def test_equal_lengths(self):
        assert pair_coordinate_lists([10, 11], [50, 51]) == [(50, 10), (51, 11)]

    def test_shorter_list_repeats_last_value(self):
        assert pair_coordinate_lists([10, 11, 12], [50]) == [
            (50, 10),
            (50, 11),
            (50, 12),
        ]

    def test_empty_list_rejected(self):
        with pytest.raises(ConfigurationError):
            pair_coordinate_lists([], [1.0])


class TestTranslateScalars:
    """Tests for scalar x/y translation."""

    def test_x_is_longitude_y_is_latitude(self, translator):
        result = translator.translate_arguments({'x': 13.4, 'y': 52.5})
        assert (result['x'], result['y']) == latlon_to_pixel(10, 52.5, 13.4)

    @pytest.mark.parametrize('suffix', ['1', '2', 'min', 'max'])
    def test_suffixed_pairs(self, translator, suffix):
        args = {f'x{suffix}': 2.35, f'y{suffix}': 48.85}
        result = translator.translate_arguments(args)
        assert (result[f'x{suffix}'], result[f'y{suffix}']) == latlon_to_pixel(
            10, 48.85, 2.35
        )

    def test_lone_half_passes_through(self, translator):
        result = translator.translate_arguments({'x1': 5.0, 'x': 1.0, 'y': 2.0})
        assert result['x1'] == 5.0
        assert 'y1' not in result

    def test_non_geographic_arguments_are_not_returned(self, translator):
        result = translator.translate_arguments({'x': 1.0, 'y': 2.0, 'color': 'red'})
        assert 'color' not in result


class TestTranslateLists:
    """Tests for list-valued coordinates."""

    def test_points(self, translator):
        points = [(52.5, 13.4), (52.5, 13.4), (48.85, 2.35)]
        result = translator.translate_arguments({'points': points})
        assert result['points'] == [
            latlon_to_pixel(10, 52.5, 13.4),
            latlon_to_pixel(10, 48.85, 2.35),
        ]

    def test_unsuffixed_lists_become_points(self, translator):
        result = translator.translate_arguments({'x': [13.4, 2.35], 'y': [52.5, 48.85]})
        assert result['points'] == [
            latlon_to_pixel(10, 52.5, 13.4),
            latlon_to_pixel(10, 48.85, 2.35),
        ]
        assert 'x' not in result

    def test_mixed_list_and_scalar_rejected(self, translator):
        with pytest.raises(ConfigurationError):
            translator.translate_arguments({'x': [13.4, 2.35], 'y': 52.5})

    def test_suffixed_list_rejected(self, translator):
        with pytest.raises(ConfigurationError):
            translator.translate_arguments({'x1': [1.0], 'y1': [2.0]})


class TestTranslateBox:
    """Tests for box translation."""

    def test_box_is_ordered_left_top_right_bottom(self, translator):
        # south-west corner first
        result = translator.translate_arguments({'box': [48.0, 2.0, 52.0, 13.0]})
        left, top = latlon_to_pixel(10, 52.0, 2.0)
        right, bottom = latlon_to_pixel(10, 48.0, 13.0)
        assert result['box'] == [left, top, right, bottom]

    def test_corner_order_does_not_matter(self, translator):
        a = translator.translate_coords([48.0, 2.0, 52.0, 13.0])
        b = translator.translate_coords([52.0, 13.0, 48.0, 2.0])
        assert a == b

    def test_odd_length_rejected(self, translator):
        with pytest.raises(ConfigurationError):
            translator.translate_coords([1.0, 2.0, 3.0])


class TestTranslateRadius:
    """Tests for metre to pixel radius conversion."""

    def test_radius_in_pixels(self):
        translator = GeometryTranslator(15, centroid_latitude=45.0)
        resolution = ground_resolution(15, 45.0)
        result = translator.translate_arguments({'r': 1000.0})
        assert result['r'] == round(1000.0 / resolution)

    def test_min_radius_floor(self):
        """A tiny radius at a low level is raised to -min_r."""
        translator = GeometryTranslator(2)
        result = translator.translate_arguments({'r': 1.0, '-min_r': 5})
        assert result['r'] == 5

    def test_min_radius_alias(self):
        translator = GeometryTranslator(2)
        assert translator.translate_arguments({'r': 1.0, 'min_r': 3})['r'] == 3

    def test_min_radius_does_not_shrink(self):
        translator = GeometryTranslator(18)
        result = translator.translate_arguments({'r': 500.0, '-min_r': 1})
        assert result['r'] == translator.translate_radius(500.0)
        assert result['r'] > 1

    @pytest.mark.parametrize(('pixels', 'expected'), [(0.5, 1), (2.5, 3), (4.5, 5), (2.49, 2)])
    def test_halves_round_up(self, monkeypatch, pixels, expected):
        monkeypatch.setattr('geo.translate.ground_resolution', lambda zoom, lat: 1.0)
        assert GeometryTranslator(3).translate_radius(pixels) == expected

