"""
FFmpeg video encoder.

Pipes raw RGB frames to ffmpeg via stdin. No intermediate files: frames go
straight from numpy arrays to the encoder.
"""

import logging
import subprocess
from pathlib import Path
from typing import Callable, Iterator

import numpy as np

logger = logging.getLogger(__name__)

# Quality presets: (preset, crf, pix_fmt)
QUALITY_PRESETS = {
    "high": ("slow", "18", "yuv444p"),
    "medium": ("medium", "23", "yuv420p"),
    "fast": ("ultrafast", "28", "yuv420p"),
}


def build_command(
    output_path: Path,
    width: int,
    height: int,
    fps: int,
    quality: str = "high",
) -> list[str]:
    """ffmpeg arguments for encoding a raw rgb24 stream from stdin."""
    preset, crf, pix_fmt = QUALITY_PRESETS.get(quality, QUALITY_PRESETS["high"])
    return [
        "ffmpeg", "-y", "-loglevel", "error",
        # Raw video input from pipe
        "-f", "rawvideo",
        "-pix_fmt", "rgb24",
        "-s", f"{width}x{height}",
        "-r", str(fps),
        "-i", "pipe:0",
        # Video encoding
        "-c:v", "libx264",
        "-preset", preset,
        "-crf", crf,
        "-pix_fmt", pix_fmt,
        "-an",
        str(output_path),
    ]


def encode_video(
    frame_iterator: Iterator[np.ndarray],
    output_path: Path,
    width: int = 1920,
    height: int = 1080,
    fps: int = 60,
    quality: str = "high",
    total_frames: int | None = None,
    progress_callback: Callable[[int, int], None] | None = None,
) -> Path:
    """
    Encode frames to a silent MP4.

    Args:
        frame_iterator: Yields (H, W, 3) uint8 numpy arrays.
        output_path: Output MP4 path.
        width: Frame width.
        height: Frame height.
        fps: Frames per second.
        quality: "high", "medium", or "fast".
        total_frames: Total frame count for progress reporting.
        progress_callback: Optional callback(current_frame, total_frames).

    Returns:
        Path to the output file.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    cmd = build_command(output_path, width, height, fps, quality)
    logger.info(f"Encoding {width}x{height} @ {fps}fps ({quality}) to {output_path}")

    proc = subprocess.Popen(
        cmd,
        stdin=subprocess.PIPE,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
    )

    frame_count = 0
    try:
        for frame in frame_iterator:
            # Ensure contiguous C-order array
            proc.stdin.write(np.ascontiguousarray(frame).tobytes())
            frame_count += 1

            if progress_callback and total_frames:
                progress_callback(frame_count, total_frames)

    except BrokenPipeError:
        logger.warning(f"ffmpeg closed its input after {frame_count} frames")
    finally:
        if proc.stdin:
            try:
                proc.stdin.close()
            except BrokenPipeError:
                logger.warning("ffmpeg closed its input before the last frames were flushed")

    proc.wait()

    if proc.returncode != 0:
        stderr = proc.stderr.read().decode("utf-8", errors="replace")
        # Filter out common non-error ffmpeg messages
        error_lines = [
            line for line in stderr.split("\n")
            if "error" in line.lower() or "invalid" in line.lower()
        ]
        error_msg = "\n".join(error_lines[-5:]) if error_lines else stderr[-500:]
        raise RuntimeError(
            f"ffmpeg exited with code {proc.returncode}: {error_msg}"
        )

    logger.info(f"Encoded {frame_count} frames")
    return output_path
