"""
Heartbeat simulation engine.

Owns the whole simulation state (particles, beat clock, waves, radiance)
for one view and advances it one frame per ``tick``. The host supplies
monotonically increasing timestamps in milliseconds and, optionally, a
surface to draw on.
"""

import logging
from typing import Callable, Iterator, List, Optional, Tuple

import numpy as np

from heartbeat.config import HeartbeatConfig
from heartbeat.core.beat import BeatClock, BeatEvent
from heartbeat.core.palette import ColorPalette
from heartbeat.core.particles import ParticlePool
from heartbeat.core.radiance import CenterRadiance
from heartbeat.core.waves import WaveField
from heartbeat.render.compositor import FrameCompositor
from heartbeat.render.surface import DrawingSurface, RasterSurface

logger = logging.getLogger(__name__)


class HeartbeatEngine:
    """
    Drives one heartbeat view.

    Per tick: clamp the elapsed time, update the beat clock, feed beats to
    the radiance and wave field, drop finished waves, move the particles,
    relax the radiance pulse and draw.
    """

    def __init__(
        self,
        config: HeartbeatConfig | None = None,
        width: int = 1920,
        height: int = 1080,
        seed: int | None = None,
        rng: np.random.Generator | None = None,
    ):
        self.cfg = config or HeartbeatConfig()
        # All randomness flows from one generator so runs can be replayed
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.width = max(0, int(width))
        self.height = max(0, int(height))

        self.palette = ColorPalette(self.cfg.color_palette, self.rng)
        self.pool = ParticlePool(self.cfg, self.palette, self.rng, self.width, self.height)
        self.clock = BeatClock(self.cfg)
        self.waves = WaveField(self.cfg, self.width, self.height)
        self.radiance = CenterRadiance(self.cfg)
        self.compositor = FrameCompositor(self.cfg)

        self.last_frame_time: Optional[float] = None
        self.frame_count = 0

        self.pool.initialize()
        logger.info(
            f"Heartbeat engine ready: {len(self.pool)} particles, "
            f"{self.width}x{self.height}, beat every {self.cfg.beat_interval:.0f}ms"
        )

    @property
    def center(self) -> Tuple[float, float]:
        return (self.width / 2, self.height / 2)

    def resize(self, width: int, height: int):
        """Adopt a new canvas size. Particles keep their positions."""
        self.width = max(0, int(width))
        self.height = max(0, int(height))
        self.pool.resize(self.width, self.height)
        self.waves.resize(self.width, self.height)
        logger.info(f"Canvas resized to {self.width}x{self.height}")

    def start(self, now: float):
        """Prime the frame clock so the first tick measures from ``now``."""
        self.last_frame_time = now

    def reset(self):
        """Return to a freshly initialized state."""
        self.clock.reset()
        self.waves.clear()
        self.radiance.reset()
        self.pool.initialize()
        self.last_frame_time = None
        self.frame_count = 0

    def _elapsed(self, now: float) -> float:
        if self.last_frame_time is None:
            dt_ms = 0.0
        else:
            dt_ms = now - self.last_frame_time
        self.last_frame_time = now

        if dt_ms > self.cfg.max_frame_dt:
            logger.debug(f"Frame gap of {dt_ms:.0f}ms clamped to {self.cfg.max_frame_dt:.0f}ms")
            return self.cfg.max_frame_dt
        return max(0.0, dt_ms)

    def tick(self, now: float, surface: DrawingSurface | None = None) -> List[BeatEvent]:
        """
        Advance the simulation to ``now`` (ms) and draw onto ``surface``.

        A surface of a different size resizes the engine first, so particles,
        waves and the drawing share one geometry.

        Returns the beats emitted during this tick.
        """
        if surface is not None and (surface.width, surface.height) != (self.width, self.height):
            self.resize(surface.width, surface.height)

        safe_dt = self._elapsed(now)

        events = self.clock.update(now, safe_dt)
        for event in events:
            self.radiance.strike(event)
            self.waves.emit(event.time, event.strength)

        self.waves.prune(now)
        self.pool.advance(safe_dt)
        self.radiance.decay()

        if surface is not None:
            self.compositor.compose(surface, self.pool, self.waves, self.radiance, now)

        self.frame_count += 1
        return events

    def render_frames(
        self,
        n_frames: int,
        fps: int = 60,
        surface: RasterSurface | None = None,
        start: float = 0.0,
        progress_callback: Callable[[int, int], None] | None = None,
    ) -> Iterator[np.ndarray]:
        """
        Yield ``n_frames`` (H, W, 3) uint8 frames on a fixed timestep.

        Used for offline rendering where no display clock exists. A clock
        that already ran continues from its last timestamp.
        """
        if fps <= 0:
            raise ValueError(f"fps must be positive, got {fps}")
        if surface is None:
            surface = RasterSurface(self.width, self.height)
        frame_ms = 1000.0 / fps
        if self.last_frame_time is None:
            self.start(start)
        else:
            start = self.last_frame_time

        for i in range(n_frames):
            self.tick(start + (i + 1) * frame_ms, surface)
            yield surface.to_array()
            if progress_callback:
                progress_callback(i + 1, n_frames)
