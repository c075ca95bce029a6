"""Frame output: video encoding."""

from heartbeat.io.encoder import QUALITY_PRESETS, encode_video
