"""Pytest configuration and shared fixtures."""

import numpy as np
import pytest

from heartbeat.config import HeartbeatConfig
from heartbeat.render.surface import DrawingSurface

TEST_SEED = 1234


class RecordingSurface(DrawingSurface):
    """Surface that records every drawing call instead of rasterizing."""

    def __init__(self, width: int, height: int):
        self._width = width
        self._height = height
        self.calls = []

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def resize(self, width, height):
        self._width, self._height = width, height
        self.calls.append(("resize", width, height))

    def set_blend_mode(self, mode):
        self.calls.append(("blend", mode))

    def fill_rect(self, x, y, w, h, color, alpha):
        self.calls.append(("rect", x, y, w, h, color, alpha))

    def fill_circle(self, cx, cy, radius, color, alpha):
        self.calls.append(("circle", cx, cy, radius, color, alpha))

    def radial_gradient_fill(self, cx, cy, radius, stops):
        self.calls.append(("gradient", cx, cy, radius, list(stops)))

    def ops(self, name: str) -> list:
        return [c for c in self.calls if c[0] == name]


@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded generator for reproducible draws."""
    return np.random.default_rng(TEST_SEED)


@pytest.fixture
def small_config() -> HeartbeatConfig:
    """Config with few particles and short, round timings."""
    return HeartbeatConfig(
        total_particles=100,
        beat_interval=1000.0,
        double_beat_offset=300.0,
        wave_duration_ms=600.0,
    )


@pytest.fixture
def short_lived_config() -> HeartbeatConfig:
    """Particles expire within a few frames."""
    return HeartbeatConfig(
        total_particles=200,
        particle_life_min=30.0,
        particle_life_max=60.0,
    )


@pytest.fixture
def recording_surface():
    """Factory for recording surfaces."""
    def _make(width: int = 320, height: int = 240) -> RecordingSurface:
        return RecordingSurface(width, height)
    return _make
