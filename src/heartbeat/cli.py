"""
CLI entry point.

Usage:
    heartbeat live [--width W --height H --fps N]
    heartbeat render -o heartbeat.mp4 [--profile medium --duration 10]
    heartbeat snapshot -o frame.png [--time 3000]
"""

import argparse
import logging
import sys
import time
from pathlib import Path

from PIL import Image

from heartbeat.config import PROFILES, HeartbeatConfig, load_config
from heartbeat.engine import HeartbeatEngine
from heartbeat.utils import progress_bar, setup_logging

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="heartbeat",
        description="Particle cloud heartbeat visualizer",
    )
    parser.add_argument("--config", type=Path, default=None, help="JSON file overriding config defaults")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for a reproducible run")
    parser.add_argument(
        "--log-level", type=str, default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: INFO)",
    )
    parser.add_argument("--log-file", type=str, default=None, help="Also log to a rotating file")

    sub = parser.add_subparsers(dest="command", required=True)

    live = sub.add_parser("live", help="Open a window and play the heartbeat")
    live.add_argument("--width", type=int, default=1280, help="Window width (default: 1280)")
    live.add_argument("--height", type=int, default=720, help="Window height (default: 720)")
    live.add_argument("-f", "--fps", type=_positive_int, default=60, help="Target frame rate (default: 60)")
    live.add_argument("--max-frames", type=int, default=None, help="Close after N frames")

    render = sub.add_parser("render", help="Render a silent MP4 with ffmpeg")
    render.add_argument("-o", "--output", type=Path, default=Path("heartbeat.mp4"), help="Output MP4 path")
    render.add_argument(
        "-p", "--profile", type=str, default="medium", choices=sorted(PROFILES),
        help="Target profile (low: 720p 30fps, medium: 1080p 60fps, high: 4k 60fps)",
    )
    render.add_argument("--width", type=int, default=None, help="Video width (overrides profile)")
    render.add_argument("--height", type=int, default=None, help="Video height (overrides profile)")
    render.add_argument("-f", "--fps", type=_positive_int, default=None, help="Frames per second (overrides profile)")
    render.add_argument("-d", "--duration", type=float, default=10.0, help="Length in seconds (default: 10)")
    render.add_argument(
        "-q", "--quality", type=str, default=None, choices=["high", "medium", "fast"],
        help="Encoding quality (defaults to profile quality)",
    )

    snapshot = sub.add_parser("snapshot", help="Save a single frame as PNG")
    snapshot.add_argument("-o", "--output", type=Path, default=Path("heartbeat.png"), help="Output image path")
    snapshot.add_argument("--width", type=int, default=1280, help="Image width (default: 1280)")
    snapshot.add_argument("--height", type=int, default=720, help="Image height (default: 720)")
    snapshot.add_argument("-f", "--fps", type=_positive_int, default=60, help="Simulation frame rate (default: 60)")
    snapshot.add_argument(
        "-t", "--time", type=float, default=3000.0,
        help="Simulated milliseconds before the capture (default: 3000)",
    )
    return parser


def _run_live(args, config: HeartbeatConfig) -> int:
    from heartbeat.live import run_window

    engine = HeartbeatEngine(config, width=args.width, height=args.height, seed=args.seed)
    run_window(engine, fps=args.fps, max_frames=args.max_frames)
    return 0


def _run_render(args, config: HeartbeatConfig) -> int:
    from heartbeat.io.encoder import encode_video

    p_cfg = PROFILES[args.profile]
    width = args.width or p_cfg["width"]
    height = args.height or p_cfg["height"]
    fps = args.fps or p_cfg["fps"]
    quality = args.quality or p_cfg["quality"]
    total_frames = max(1, int(args.duration * fps))

    print(f"Rendering {total_frames} frames at {width}x{height} @ {fps}fps")
    engine = HeartbeatEngine(config, width=width, height=height, seed=args.seed)
    frame_gen = engine.render_frames(total_frames, fps=fps, progress_callback=progress_bar)

    t0 = time.time()
    output = encode_video(
        frame_iterator=frame_gen,
        output_path=args.output,
        width=width,
        height=height,
        fps=fps,
        quality=quality,
        total_frames=total_frames,
    )
    elapsed = time.time() - t0
    file_size_mb = output.stat().st_size / 1024 / 1024

    print(f"\nDone! {file_size_mb:.1f} MB")
    print(f"  Render+encode took {elapsed:.1f}s ({total_frames / max(elapsed, 0.01):.1f} fps)")
    print(f"  Output: {output}")
    return 0


def _run_snapshot(args, config: HeartbeatConfig) -> int:
    engine = HeartbeatEngine(config, width=args.width, height=args.height, seed=args.seed)
    n_frames = max(1, int(args.time * args.fps / 1000.0))
    frame = None
    for frame in engine.render_frames(n_frames, fps=args.fps):
        pass

    args.output.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(frame).save(args.output)
    print(f"Saved frame {n_frames} to {args.output}")
    return 0


COMMANDS = {
    "live": _run_live,
    "render": _run_render,
    "snapshot": _run_snapshot,
}


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, args.log_file)

    try:
        config = load_config(args.config) if args.config else HeartbeatConfig()
        return COMMANDS[args.command](args, config)
    except (ValueError, OSError, RuntimeError) as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
