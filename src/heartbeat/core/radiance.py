"""
Center radiance: a single pulse value struck by beats and relaxing back
to a baseline glow.
"""

from typing import List, Tuple

from heartbeat.config import HeartbeatConfig
from heartbeat.core.beat import BeatEvent, BeatKind

# (offset, (r, g, b), opacity multiplier of the pulse)
GRADIENT_STOPS = (
    (0.0, (235, 245, 255), 0.6),
    (0.45, (180, 220, 255), 0.3),
    (1.0, (0, 0, 0), 0.0),
)

GradientStop = Tuple[float, Tuple[int, int, int], float]


class CenterRadiance:
    def __init__(self, config: HeartbeatConfig):
        self.cfg = config
        self.pulse = config.center_base_opacity

    def reset(self):
        self.pulse = self.cfg.center_base_opacity

    def strike(self, event: BeatEvent):
        """Raise the pulse for a beat."""
        peak = self.cfg.center_peak_opacity
        if event.kind is BeatKind.PRIMARY:
            self.pulse = peak
        else:
            self.pulse = max(self.pulse, peak * self.cfg.secondary_pulse_ratio)

    def decay(self):
        """
        Relax one step toward the base opacity.

        Applied once per frame regardless of elapsed time, so the visible
        decay speed follows the frame rate.
        """
        self.pulse += (self.cfg.center_base_opacity - self.pulse) * self.cfg.pulse_decay

    def gradient_stops(self) -> List[GradientStop]:
        """Radial gradient stops as (offset, rgb, alpha)."""
        return [(offset, rgb, scale * self.pulse) for offset, rgb, scale in GRADIENT_STOPS]

    def radius(self, width: float, height: float) -> float:
        return min(width, height) * self.cfg.radiance_radius
