"""
Two-beat ("ba-dum") clock.

A primary beat fires every ``beat_interval`` ms of accumulated frame time,
and schedules a single weaker secondary beat ``double_beat_offset`` ms
later. A new primary beat replaces any secondary beat still pending.
"""

import enum
import logging
from dataclasses import dataclass
from typing import List, Optional

from heartbeat.config import HeartbeatConfig

logger = logging.getLogger(__name__)


class BeatKind(enum.Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"


@dataclass(frozen=True)
class BeatEvent:
    kind: BeatKind
    time: float  # ms, driver clock
    strength: float


class BeatClock:
    """
    Tracks beat phase across ticks.

    The accumulator is reduced by the interval on overflow rather than
    zeroed, so the sub-interval remainder carries into the next beat.
    At most one primary beat is emitted per update, even after a stall.
    """

    def __init__(self, config: HeartbeatConfig):
        self.cfg = config
        self.time_since_last_main_beat = 0.0
        self.pending_secondary_beat_at: Optional[float] = None

    def reset(self):
        self.time_since_last_main_beat = 0.0
        self.pending_secondary_beat_at = None

    def update(self, now: float, dt_ms: float) -> List[BeatEvent]:
        """
        Advance the clock by ``dt_ms`` and return the beats due at ``now``.

        ``dt_ms`` is expected to be already clamped by the caller.
        """
        cfg = self.cfg
        events: List[BeatEvent] = []
        self.time_since_last_main_beat += dt_ms

        # Main beat
        if self.time_since_last_main_beat >= cfg.beat_interval:
            self.time_since_last_main_beat -= cfg.beat_interval
            self.pending_secondary_beat_at = now + cfg.double_beat_offset
            events.append(BeatEvent(BeatKind.PRIMARY, now, 1.0))
            logger.debug(f"Primary beat at {now:.1f}ms, secondary due at {self.pending_secondary_beat_at:.1f}ms")

        # Second "ba-dum"
        if self.pending_secondary_beat_at is not None and now >= self.pending_secondary_beat_at:
            self.pending_secondary_beat_at = None
            events.append(BeatEvent(BeatKind.SECONDARY, now, cfg.secondary_strength))
            logger.debug(f"Secondary beat at {now:.1f}ms")

        return events
