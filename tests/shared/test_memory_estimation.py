"""Tests for pseudo-canvas memory estimation (OOM prevention)."""

import logging

import pytest

from shared import memory_estimation
from shared.errors import AllocationError, MapLayerError
from shared.memory_estimation import ensure_canvas_fits, estimate_canvas_memory_mb


class TestEstimateCanvasMemory:
    """Tests for estimate_canvas_memory_mb."""

    def test_keys(self):
        est = estimate_canvas_memory_mb(256, 256)
        for key in ('pixels', 'canvas_mb', 'crop_mb', 'blend_mb', 'overhead_mb', 'peak_mb'):
            assert key in est

    def test_canvas_size(self):
        est = estimate_canvas_memory_mb(1024, 1024)
        assert est['pixels'] == 1024 * 1024
        assert est['canvas_mb'] == 4.0

    def test_peak_exceeds_canvas(self):
        est = estimate_canvas_memory_mb(2000, 1000)
        assert est['peak_mb'] > est['canvas_mb']

    def test_scales_with_area(self):
        small = estimate_canvas_memory_mb(1000, 1000)['peak_mb']
        large = estimate_canvas_memory_mb(2000, 2000)['peak_mb']
        assert large == pytest.approx(4 * small, rel=0.01)


class TestEnsureCanvasFits:
    """Tests for ensure_canvas_fits."""

    def test_small_canvas_fits(self):
        result = ensure_canvas_fits(256, 256)
        assert result['available_mb'] == 8192
        assert result['budget_mb'] > result['peak_mb']

    @pytest.mark.parametrize('size', [(0, 10), (10, 0), (-5, 5)])
    def test_non_positive_size(self, size):
        with pytest.raises(AllocationError):
            ensure_canvas_fits(*size)

    def test_pixel_cap(self):
        with pytest.raises(AllocationError):
            ensure_canvas_fits(1000, 1000, max_pixels=999_999)

    def test_low_memory(self, monkeypatch, caplog):
        monkeypatch.setattr(memory_estimation, 'get_available_memory_mb', lambda: 600.0)
        with caplog.at_level(logging.WARNING, logger='shared.memory_estimation'):
            with pytest.raises(AllocationError):
                ensure_canvas_fits(4096, 4096)
        assert 'budget' in caplog.text

    def test_error_hierarchy(self):
        with pytest.raises(MapLayerError):
            ensure_canvas_fits(0, 0)
        with pytest.raises(MemoryError):
            ensure_canvas_fits(0, 0)


class TestAvailableMemory:
    """Tests for the psutil probe."""

    def test_positive(self, monkeypatch):
        monkeypatch.undo()
        assert memory_estimation.get_available_memory_mb() > 0
