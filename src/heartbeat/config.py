"""
Tunable constants for the heartbeat renderer.

Every value is fixed at construction; the engine and its components only
ever read from the config.
"""

import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Tuple

logger = logging.getLogger(__name__)

Color = Tuple[int, int, int]

DEFAULT_PALETTE: Tuple[Color, ...] = (
    (235, 245, 255),  # soft white
    (200, 230, 255),  # pale icy blue
    (180, 220, 255),  # light cyan
    (220, 250, 255),  # almost white
)

RESPAWN_MODES = ("scatter", "center")

# Render presets: resolution, frame rate and encoder quality
PROFILES = {
    "low": {"width": 1280, "height": 720, "fps": 30, "quality": "fast"},
    "medium": {"width": 1920, "height": 1080, "fps": 60, "quality": "medium"},
    "high": {"width": 3840, "height": 2160, "fps": 60, "quality": "high"},
}


@dataclass(frozen=True)
class HeartbeatConfig:
    """Configuration for the heartbeat simulation and compositor."""

    # Particles
    total_particles: int = 1600
    min_speed: float = 9.0  # px/s (slow drift)
    max_speed: float = 18.0  # px/s
    particle_base_size: float = 1.6
    particle_life_min: float = 11000.0  # ms
    particle_life_max: float = 22000.0  # ms
    wrap_margin: float = 40.0  # px beyond the canvas before wrapping
    respawn_mode: str = "scatter"  # "scatter", "center"
    core_spawn_radius: float = 0.15  # x min(width, height), for "center"

    # Timing
    beat_interval: float = 2600.0  # ms between main beats
    double_beat_offset: float = 320.0  # ms after main beat for the "dum"
    max_frame_dt: float = 200.0  # ms, elapsed time ceiling per tick

    # Center radiance
    center_base_opacity: float = 0.48
    center_peak_opacity: float = 1.05
    secondary_pulse_ratio: float = 0.95
    pulse_decay: float = 0.02
    radiance_radius: float = 0.32  # x min(width, height)

    # Waves
    wave_duration_ms: float = 1800.0
    wave_width_factor: float = 0.1  # sigma as a fraction of max_dist
    wave_reach: float = 0.6  # max_dist = hypot(width, height) * wave_reach
    wave_size_boost: float = 1.15
    wave_alpha_boost: float = 1.6
    secondary_strength: float = 0.7

    # Look
    trail_alpha: float = 0.24
    background_color: Color = (2, 6, 20)
    flicker_period: float = 400.0  # ms per radian of flicker phase
    whiten_gain: float = 1.1
    color_palette: Tuple[Color, ...] = DEFAULT_PALETTE

    def __post_init__(self):
        for f in fields(self):
            if f.type not in (int, float):
                continue
            value = getattr(self, f.name)
            allowed = int if f.type is int else (int, float)
            # bool is an int subclass but never a valid tunable
            if isinstance(value, bool) or not isinstance(value, allowed):
                raise ValueError(f"{f.name} must be {f.type.__name__}, got {value!r}")
        if not isinstance(self.color_palette, tuple):
            raise ValueError(f"color_palette must be a sequence of RGB colors, got {self.color_palette!r}")
        if not isinstance(self.respawn_mode, str):
            raise ValueError(f"respawn_mode must be a string, got {self.respawn_mode!r}")
        for color in (*self.color_palette, self.background_color):
            if (
                not isinstance(color, tuple)
                or len(color) != 3
                or any(isinstance(c, bool) or not isinstance(c, int) or not 0 <= c <= 255 for c in color)
            ):
                raise ValueError(f"Invalid RGB color {color!r}")

        if self.total_particles < 0:
            raise ValueError(f"total_particles must be >= 0, got {self.total_particles}")
        if self.min_speed < 0 or self.min_speed > self.max_speed:
            raise ValueError(
                f"Invalid speed range [{self.min_speed}, {self.max_speed}]"
            )
        if self.particle_base_size <= 0:
            raise ValueError("particle_base_size must be positive")
        if self.particle_life_min <= 0 or self.particle_life_min > self.particle_life_max:
            raise ValueError(
                f"Invalid life range [{self.particle_life_min}, {self.particle_life_max}]"
            )
        for name in ("beat_interval", "wave_duration_ms", "max_frame_dt", "flicker_period"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")
        if self.double_beat_offset < 0:
            raise ValueError("double_beat_offset must be >= 0")
        for name in ("trail_alpha", "pulse_decay"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {value}")
        if self.respawn_mode not in RESPAWN_MODES:
            raise ValueError(
                f"Unknown respawn_mode {self.respawn_mode!r}, expected one of {RESPAWN_MODES}"
            )
        if not self.color_palette:
            raise ValueError("color_palette must contain at least one color")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HeartbeatConfig":
        """Build a config from a plain mapping, e.g. parsed JSON."""
        if not isinstance(data, dict):
            raise ValueError(f"Config must be a JSON object, got {type(data).__name__}")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")

        values = dict(data)
        if "color_palette" in values:
            values["color_palette"] = _as_tuple(values["color_palette"])
            if isinstance(values["color_palette"], tuple):
                values["color_palette"] = tuple(_as_tuple(c) for c in values["color_palette"])
        if "background_color" in values:
            values["background_color"] = _as_tuple(values["background_color"])
        return cls(**values)


def _as_tuple(value):
    """JSON arrays become tuples; anything else is left for validation."""
    return tuple(value) if isinstance(value, (list, tuple)) else value


def load_config(path) -> HeartbeatConfig:
    """Loads a JSON configuration file."""
    path = Path(path)
    logger.info(f"Loading configuration from {path}...")
    try:
        with open(path, "r") as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.error(f"Configuration file not found at {path}.")
        raise
    except json.JSONDecodeError:
        logger.error(f"Error decoding JSON from {path}.")
        raise

    config = HeartbeatConfig.from_dict(data)
    logger.info("Configuration loaded successfully.")
    return config
