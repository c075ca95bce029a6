"""
Particle pool for the drifting heartbeat cloud.

Particles are never destroyed: once a particle outlives its lifespan it is
regenerated in place, so the pool keeps a constant size for the whole run.
Motion is a slow wander (a small random turn of the velocity each step)
and positions wrap toroidally a fixed margin beyond the canvas.
"""

import logging
import math
from dataclasses import dataclass
from typing import Iterator, List, Tuple

import numpy as np

from heartbeat.config import Color, HeartbeatConfig
from heartbeat.core.palette import ColorPalette

logger = logging.getLogger(__name__)

MAX_TURN = 0.2  # rad per second
FLICKER_PHASE_RANGE = 10.0


@dataclass
class Particle:
    """A single glowing mote."""
    x: float
    y: float
    vx: float  # px/s
    vy: float  # px/s
    size: float  # base radius
    life: float  # ms since creation or last reset
    max_life: float  # ms
    color: Color
    flicker_seed: float

    def reset_from(self, fresh: "Particle"):
        """Overwrite every attribute with those of ``fresh``."""
        self.x, self.y = fresh.x, fresh.y
        self.vx, self.vy = fresh.vx, fresh.vy
        self.size = fresh.size
        self.life = 0.0
        self.max_life = fresh.max_life
        self.color = fresh.color
        self.flicker_seed = fresh.flicker_seed


class ParticlePool:
    """
    Owns every particle and advances their lifecycle and motion.
    """

    def __init__(
        self,
        config: HeartbeatConfig,
        palette: ColorPalette,
        rng: np.random.Generator,
        width: float,
        height: float,
    ):
        self.cfg = config
        self.palette = palette
        self.rng = rng
        self.particles: List[Particle] = []
        self.resize(width, height)

    def __len__(self) -> int:
        return len(self.particles)

    def __iter__(self) -> Iterator[Particle]:
        return iter(self.particles)

    @property
    def center(self) -> Tuple[float, float]:
        return (self.width / 2, self.height / 2)

    def resize(self, width: float, height: float):
        """Adopt new canvas bounds. Existing positions are left untouched."""
        self.width = max(0.0, float(width))
        self.height = max(0.0, float(height))

    def spawn(self, random_position: bool = True) -> Particle:
        """
        Generate a fresh particle.

        With ``random_position`` the particle lands anywhere on the canvas;
        otherwise it starts inside a small disc around the center, heading
        outward along its spawn angle.
        """
        cfg = self.cfg
        rng = self.rng
        angle = rng.uniform(0.0, 2 * math.pi)
        speed = rng.uniform(cfg.min_speed, cfg.max_speed)

        if random_position:
            x = rng.random() * self.width
            y = rng.random() * self.height
        else:
            cx, cy = self.center
            radius = rng.uniform(0.0, min(self.width, self.height) * cfg.core_spawn_radius)
            x = cx + math.cos(angle) * radius
            y = cy + math.sin(angle) * radius

        return Particle(
            x=x,
            y=y,
            vx=math.cos(angle) * speed,
            vy=math.sin(angle) * speed,
            size=rng.uniform(cfg.particle_base_size * 0.6, cfg.particle_base_size * 1.4),
            life=0.0,
            max_life=rng.uniform(cfg.particle_life_min, cfg.particle_life_max),
            color=self.palette.pick(),
            flicker_seed=rng.random() * FLICKER_PHASE_RANGE,
        )

    def initialize(self, count: int | None = None):
        """Replace the pool with ``count`` particles scattered over the canvas."""
        if count is None:
            count = self.cfg.total_particles
        self.particles = [self.spawn(random_position=True) for _ in range(count)]
        logger.debug(f"Particle pool initialized with {count} particles on {self.width:.0f}x{self.height:.0f}")

    def advance(self, dt_ms: float):
        """
        Age, steer and move every particle by ``dt_ms`` milliseconds.

        Non-positive steps are ignored.
        """
        if dt_ms <= 0 or not self.particles:
            return

        dt = dt_ms / 1000.0
        margin = self.cfg.wrap_margin
        width, height = self.width, self.height
        scatter = self.cfg.respawn_mode == "scatter"
        turns = self.rng.uniform(-MAX_TURN, MAX_TURN, size=len(self.particles)) * dt

        recycled = 0
        for p, turn in zip(self.particles, turns):
            p.life += dt_ms
            if p.life > p.max_life:
                p.reset_from(self.spawn(random_position=scatter))
                recycled += 1
                continue

            cos_t = math.cos(turn)
            sin_t = math.sin(turn)
            vx, vy = p.vx, p.vy
            p.vx = vx * cos_t - vy * sin_t
            p.vy = vx * sin_t + vy * cos_t

            p.x += p.vx * dt
            p.y += p.vy * dt

            # Wrap around the edges to keep density consistent
            if p.x < -margin:
                p.x = width + margin
            elif p.x > width + margin:
                p.x = -margin

            if p.y < -margin:
                p.y = height + margin
            elif p.y > height + margin:
                p.y = -margin

        if recycled:
            logger.debug(f"Recycled {recycled} expired particles")
