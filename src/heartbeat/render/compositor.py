"""
Per-frame compositor.

Draws, in order:
1. A translucent background wash that leaves short trails of older frames.
2. The center radiance gradient (additive).
3. Every particle (additive), with size, opacity and tint modulated by its
   distance from the center, its flicker phase and the wave intensity at
   its radius.
"""

import math
from typing import Tuple

from heartbeat.config import Color, HeartbeatConfig
from heartbeat.core.palette import ColorPalette
from heartbeat.core.particles import Particle, ParticlePool
from heartbeat.core.radiance import CenterRadiance
from heartbeat.core.waves import WaveField
from heartbeat.render.surface import BlendMode, DrawingSurface

MIN_WAVE_SIZE_SCALE = 0.2


class FrameCompositor:
    def __init__(self, config: HeartbeatConfig):
        self.cfg = config

    def particle_style(
        self,
        particle: Particle,
        center: Tuple[float, float],
        max_dist: float,
        wave_amp: float,
        pulse: float,
    ) -> Tuple[float, Color, float]:
        """
        Derived (radius, color, alpha) of a particle for this frame.

        ``wave_amp`` must be the wave intensity sampled at the particle's
        distance from ``center``.
        """
        cfg = self.cfg
        dist = math.hypot(particle.x - center[0], particle.y - center[1])
        dist_factor = 1.0 - min(dist / max_dist, 1.0) if max_dist > 0 else 0.0

        base_alpha = 0.2 + 0.25 * dist_factor
        flicker = 0.5 + 0.5 * math.sin(particle.life / cfg.flicker_period + particle.flicker_seed)

        # At the wavefront particles get much smaller and noticeably brighter
        wave_size_scale = max(MIN_WAVE_SIZE_SCALE, 1.0 - wave_amp * cfg.wave_size_boost)
        wave_alpha_scale = 1.0 + wave_amp * cfg.wave_alpha_boost

        alpha = base_alpha * (0.65 + 0.35 * flicker) * wave_alpha_scale
        size = particle.size * (0.8 + 0.4 * dist_factor + 0.2 * pulse * dist_factor) * wave_size_scale
        color = ColorPalette.whiten(particle.color, wave_amp * cfg.whiten_gain)
        return size, color, alpha

    def draw_radiance(self, surface: DrawingSurface, radiance: CenterRadiance):
        cx, cy = surface.width / 2, surface.height / 2
        radius = radiance.radius(surface.width, surface.height)
        surface.radial_gradient_fill(cx, cy, radius, radiance.gradient_stops())

    def compose(
        self,
        surface: DrawingSurface,
        pool: ParticlePool,
        waves: WaveField,
        radiance: CenterRadiance,
        now: float,
    ):
        """Draw one frame onto ``surface``. The radiance pulse is drawn as-is."""
        cfg = self.cfg
        width, height = surface.width, surface.height

        surface.set_blend_mode(BlendMode.NORMAL)
        surface.fill_rect(0, 0, width, height, cfg.background_color, cfg.trail_alpha)

        surface.set_blend_mode(BlendMode.ADDITIVE)
        self.draw_radiance(surface, radiance)

        center = (width / 2, height / 2)
        max_dist = waves.max_dist
        pulse = radiance.pulse
        for p in pool:
            dist = math.hypot(p.x - center[0], p.y - center[1])
            wave_amp = waves.sample_intensity(dist, now)
            size, color, alpha = self.particle_style(p, center, max_dist, wave_amp, pulse)
            surface.fill_circle(p.x, p.y, size, color, alpha)
