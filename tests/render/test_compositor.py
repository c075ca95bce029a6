"""Tests for the frame compositor."""

import math

import pytest

from heartbeat.config import HeartbeatConfig
from heartbeat.core.particles import Particle
from heartbeat.engine import HeartbeatEngine
from heartbeat.render.compositor import FrameCompositor
from heartbeat.render.surface import BlendMode

CENTER = (100.0, 100.0)
MAX_DIST = 300.0


def _particle(x=100.0, y=100.0, size=2.0, life=0.0, flicker_seed=0.0, color=(200, 230, 255)):
    return Particle(
        x=x, y=y, vx=0.0, vy=0.0, size=size, life=life,
        max_life=10_000.0, color=color, flicker_seed=flicker_seed,
    )


@pytest.fixture
def compositor():
    return FrameCompositor(HeartbeatConfig())


class TestParticleStyle:
    def test_at_center_without_wave(self, compositor):
        size, color, alpha = compositor.particle_style(_particle(), CENTER, MAX_DIST, 0.0, 0.48)
        assert size == pytest.approx(2.0 * (0.8 + 0.4 + 0.2 * 0.48))
        # flicker = 0.5 at phase 0
        assert alpha == pytest.approx(0.45 * (0.65 + 0.35 * 0.5))
        assert color == (200, 230, 255)

    def test_beyond_max_dist(self, compositor):
        p = _particle(x=100.0 + 400.0)
        size, _, alpha = compositor.particle_style(p, CENTER, MAX_DIST, 0.0, 1.05)
        assert size == pytest.approx(2.0 * 0.8)
        assert alpha == pytest.approx(0.2 * (0.65 + 0.35 * 0.5))

    def test_flicker_peak(self, compositor):
        p = _particle(flicker_seed=math.pi / 2)
        _, _, alpha = compositor.particle_style(p, CENTER, MAX_DIST, 0.0, 0.48)
        assert alpha == pytest.approx(0.45)

    def test_flicker_follows_age(self, compositor):
        p = _particle(life=400.0 * math.pi / 2)
        _, _, alpha = compositor.particle_style(p, CENTER, MAX_DIST, 0.0, 0.48)
        assert alpha == pytest.approx(0.45)

    def test_wavefront_shrinks_brightens_and_whitens(self, compositor):
        calm = compositor.particle_style(_particle(), CENTER, MAX_DIST, 0.0, 0.48)
        size, color, alpha = compositor.particle_style(_particle(), CENTER, MAX_DIST, 1.0, 0.48)
        assert size == pytest.approx(calm[0] * 0.2)
        assert alpha == pytest.approx(calm[2] * (1 + 1.6))
        assert color == (255, 255, 255)

    def test_partial_wave(self, compositor):
        calm = compositor.particle_style(_particle(), CENTER, MAX_DIST, 0.0, 0.48)
        size, color, _ = compositor.particle_style(_particle(), CENTER, MAX_DIST, 0.5, 0.48)
        assert size == pytest.approx(calm[0] * (1 - 0.5 * 1.15))
        assert color == (230, 244, 255)

    def test_zero_max_dist(self, compositor):
        size, _, _ = compositor.particle_style(_particle(), CENTER, 0.0, 0.0, 0.48)
        assert size == pytest.approx(2.0 * 0.8)


class TestCompose:
    def _engine(self, config):
        return HeartbeatEngine(config, width=320, height=240, seed=5)

    def test_draw_order(self, small_config, recording_surface):
        engine = self._engine(small_config)
        surface = recording_surface(320, 240)
        engine.compositor.compose(surface, engine.pool, engine.waves, engine.radiance, 0.0)

        assert surface.calls[0] == ("blend", BlendMode.NORMAL)
        assert surface.calls[1] == ("rect", 0, 0, 320, 240, small_config.background_color, 0.24)
        assert surface.calls[2] == ("blend", BlendMode.ADDITIVE)
        assert surface.calls[3][0] == "gradient"
        assert all(c[0] == "circle" for c in surface.calls[4:])
        assert len(surface.ops("circle")) == len(engine.pool)

    def test_gradient_geometry(self, small_config, recording_surface):
        engine = self._engine(small_config)
        surface = recording_surface(320, 240)
        engine.compositor.compose(surface, engine.pool, engine.waves, engine.radiance, 0.0)
        _, cx, cy, radius, stops = surface.ops("gradient")[0]
        assert (cx, cy) == (160, 120)
        assert radius == pytest.approx(240 * 0.32)
        assert stops[0][2] == pytest.approx(0.6 * engine.radiance.pulse)

    def test_circles_at_particle_positions(self, small_config, recording_surface):
        engine = self._engine(small_config)
        surface = recording_surface(320, 240)
        engine.compositor.compose(surface, engine.pool, engine.waves, engine.radiance, 0.0)
        drawn = [(c[1], c[2]) for c in surface.ops("circle")]
        assert drawn == [(p.x, p.y) for p in engine.pool]

    def test_wave_whitens_some_particles(self, small_config, recording_surface):
        engine = self._engine(small_config)
        surface = recording_surface(320, 240)
        engine.waves.emit(0.0, 1.0)
        engine.compositor.compose(surface, engine.pool, engine.waves, engine.radiance, 300.0)
        colors = [c[4] for c in surface.ops("circle")]
        assert any(color not in small_config.color_palette for color in colors)

    def test_compose_leaves_pulse_alone(self, small_config, recording_surface):
        engine = self._engine(small_config)
        before = engine.radiance.pulse
        engine.compositor.compose(recording_surface(), engine.pool, engine.waves, engine.radiance, 0.0)
        assert engine.radiance.pulse == before
