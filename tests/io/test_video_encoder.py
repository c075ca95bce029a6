"""Tests for the FFmpeg video encoder."""

import shutil
from pathlib import Path

import numpy as np
import pytest

from heartbeat.engine import HeartbeatEngine
from heartbeat.io.encoder import QUALITY_PRESETS, build_command, encode_video

needs_ffmpeg = pytest.mark.skipif(shutil.which("ffmpeg") is None, reason="ffmpeg not installed")


def _solid_frames(n: int, width: int, height: int, color=(128, 64, 200)):
    """Generate N solid-color frames."""
    frame = np.full((height, width, 3), color, dtype=np.uint8)
    for _ in range(n):
        yield frame.copy()


class TestBuildCommand:
    def test_raw_pipe_input(self):
        cmd = build_command(Path("out.mp4"), 320, 240, 30, "fast")
        assert cmd[0] == "ffmpeg"
        assert cmd[cmd.index("-f") + 1] == "rawvideo"
        assert cmd[cmd.index("-s") + 1] == "320x240"
        assert cmd[cmd.index("-i") + 1] == "pipe:0"
        assert cmd[-1] == "out.mp4"

    def test_silent_output(self):
        cmd = build_command(Path("out.mp4"), 320, 240, 30)
        assert "-an" in cmd

    def test_quality_preset(self):
        cmd = build_command(Path("out.mp4"), 320, 240, 30, "medium")
        preset, crf, _ = QUALITY_PRESETS["medium"]
        assert cmd[cmd.index("-preset") + 1] == preset
        assert cmd[cmd.index("-crf") + 1] == crf

    def test_unknown_quality_falls_back_to_high(self):
        cmd = build_command(Path("out.mp4"), 320, 240, 30, "ludicrous")
        assert cmd[cmd.index("-preset") + 1] == QUALITY_PRESETS["high"][0]


@needs_ffmpeg
class TestEncoder:
    def test_produces_mp4(self, tmp_path):
        output = tmp_path / "solid.mp4"
        result = encode_video(_solid_frames(30, 320, 240), output, width=320, height=240, fps=30, quality="fast")
        assert result == output
        assert result.stat().st_size > 0

    def test_progress_callback(self, tmp_path):
        progress = []
        encode_video(
            _solid_frames(15, 160, 120),
            tmp_path / "progress.mp4",
            width=160,
            height=120,
            fps=30,
            quality="fast",
            total_frames=15,
            progress_callback=lambda c, t: progress.append((c, t)),
        )
        assert len(progress) == 15
        assert progress[-1] == (15, 15)

    def test_engine_frames(self, tmp_path, small_config):
        engine = HeartbeatEngine(small_config, width=160, height=120, seed=2)
        output = encode_video(engine.render_frames(20, fps=30), tmp_path / "nested" / "beat.mp4",
                              width=160, height=120, fps=30, quality="fast")
        assert output.exists()

    def test_bad_dimensions_raise(self, tmp_path):
        # ffmpeg rejects a 0x0 frame size and exits non-zero
        with pytest.raises(RuntimeError):
            encode_video(_solid_frames(3, 16, 16), tmp_path / "bad.mp4", width=0, height=0, fps=30, quality="fast")
