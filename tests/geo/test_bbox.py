"""Tests for geo.bbox module."""

import pytest

from geo.bbox import bounding_box
from shared.errors import ConfigurationError


class TestBoundingBox:
    """Tests for bounding_box."""

    def test_single_point_is_one_pixel(self):
        assert bounding_box({'x': 10, 'y': 20}) == (10, 20, 10, 20)

    def test_line_endpoints(self):
        assert bounding_box({'x1': 500, 'y1': 10, 'x2': 10, 'y2': 30}) == (10, 10, 500, 30)

    def test_points(self):
        args = {'points': [(5, 9), (1, 30), (12, 2)]}
        assert bounding_box(args) == (1, 2, 12, 30)

    def test_box(self):
        assert bounding_box({'box': [3, 4, 40, 50]}) == (3, 4, 40, 50)

    def test_min_max_pairs(self):
        args = {'xmin': 3, 'ymin': 4, 'xmax': 40, 'ymax': 50}
        assert bounding_box(args) == (3, 4, 40, 50)

    def test_radius_extends_around_centre(self):
        assert bounding_box({'x': 100, 'y': 100, 'r': 5}) == (95, 95, 105, 105)

    def test_fractional_coordinates_are_widened(self):
        assert bounding_box({'x1': 1.5, 'y1': 2.2, 'x2': 3.1, 'y2': 4.9}) == (1, 2, 4, 5)

    def test_no_coordinates(self):
        with pytest.raises(ConfigurationError):
            bounding_box({'color': 'red'})

    def test_lone_half_ignored(self):
        """A scalar without its partner is not a pixel position."""
        assert bounding_box({'points': [(600, 600), (700, 610)], 'x': 3}) == (600, 600, 700, 610)
        assert bounding_box({'x1': 10, 'y1': 20, 'y2': 5000}) == (10, 20, 10, 20)

    def test_only_lone_halves(self):
        with pytest.raises(ConfigurationError):
            bounding_box({'x': 3, 'y1': 4})
