"""
Radial wavefronts travelling from the center to the edge.

Each beat leaves a burst whose Gaussian ring sweeps linearly outward over
``wave_duration_ms``. Sampling returns the strongest ring at a distance.
"""

import math
from dataclasses import dataclass
from typing import List, Tuple

from heartbeat.config import HeartbeatConfig


@dataclass(frozen=True)
class WaveBurst:
    time: float  # ms, driver clock
    strength: float


class WaveField:
    """Active wave bursts for a canvas of a given size."""

    def __init__(self, config: HeartbeatConfig, width: float, height: float):
        self.cfg = config
        self._bursts: List[WaveBurst] = []
        self.resize(width, height)

    def __len__(self) -> int:
        return len(self._bursts)

    @property
    def bursts(self) -> Tuple[WaveBurst, ...]:
        return tuple(self._bursts)

    @property
    def max_dist(self) -> float:
        return self._max_dist

    def resize(self, width: float, height: float):
        self._max_dist = math.hypot(max(0.0, width), max(0.0, height)) * self.cfg.wave_reach

    def emit(self, time: float, strength: float) -> WaveBurst:
        burst = WaveBurst(time, strength)
        self._bursts.append(burst)
        return burst

    def clear(self):
        self._bursts.clear()

    def prune(self, now: float):
        """Drop bursts that have finished their sweep."""
        duration = self.cfg.wave_duration_ms
        self._bursts = [b for b in self._bursts if now - b.time < duration]

    def radius_at(self, age: float) -> float:
        """Wavefront radius ``age`` ms after a burst."""
        return (age / self.cfg.wave_duration_ms) * self._max_dist

    def sample_intensity(self, distance: float, now: float) -> float:
        """Strongest ring intensity at ``distance`` px from the center."""
        duration = self.cfg.wave_duration_ms
        sigma = self.cfg.wave_width_factor * self._max_dist
        if sigma <= 0:
            return 0.0

        two_sigma_sq = 2 * sigma * sigma
        amp = 0.0
        for burst in self._bursts:
            age = now - burst.time
            if age < 0 or age > duration:
                continue
            diff = distance - self.radius_at(age)
            local = math.exp(-(diff * diff) / two_sigma_sq) * burst.strength
            if local > amp:
                amp = local
        return amp
