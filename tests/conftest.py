"""Pytest configuration and fixtures for map layer tests."""

import sys
from pathlib import Path

import pytest

# Add src directory to path for imports
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))


class FakeClock:
    """Manually advanced time source for cache eviction tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    """Fake clock starting at t=1000."""
    return FakeClock()


@pytest.fixture
def tiles_dir(tmp_path):
    """Empty directory for tile files."""
    path = tmp_path / 'tiles'
    path.mkdir()
    return path


@pytest.fixture(autouse=True)
def plenty_of_memory(monkeypatch):
    """Make canvas allocation independent of the RAM of the test machine."""
    monkeypatch.setattr(
        'shared.memory_estimation.get_available_memory_mb', lambda: 8192.0
    )
