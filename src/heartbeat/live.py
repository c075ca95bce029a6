"""
Live pygame window driver.

Plays the role of the browser's animation-frame loop: it owns the window,
supplies millisecond timestamps from ``pygame.time.get_ticks`` and hands
the engine a raster surface that is blitted to the display every frame.
"""

import logging

import pygame

from heartbeat.engine import HeartbeatEngine
from heartbeat.render.surface import RasterSurface

logger = logging.getLogger(__name__)

TITLE = "Heartbeat"


def present(screen: pygame.Surface, surface: RasterSurface):
    """Copy the raster onto the display surface."""
    if surface.width == 0 or surface.height == 0:
        return
    if screen.get_size() != (surface.width, surface.height):
        return
    # pygame indexes (x, y) while the raster is (y, x)
    frame = pygame.surfarray.make_surface(surface.to_array().transpose(1, 0, 2))
    screen.blit(frame, (0, 0))


def run_window(
    engine: HeartbeatEngine,
    fps: int = 60,
    max_frames: int | None = None,
    log_every: int = 300,
) -> int:
    """
    Run the engine in a resizable window until it is closed.

    Returns the number of frames shown.
    """
    pygame.init()
    screen = pygame.display.set_mode((engine.width, engine.height), pygame.RESIZABLE)
    pygame.display.set_caption(TITLE)
    clock = pygame.time.Clock()
    surface = RasterSurface(engine.width, engine.height)

    logger.info(f"Window opened at {engine.width}x{engine.height}, target {fps}fps")
    engine.start(float(pygame.time.get_ticks()))

    frames = 0
    running = True
    try:
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                    running = False
                elif event.type == pygame.VIDEORESIZE:
                    screen = pygame.display.get_surface()
                    width, height = screen.get_size()
                    engine.resize(width, height)
                    surface.resize(width, height)

            engine.tick(float(pygame.time.get_ticks()), surface)
            present(screen, surface)
            pygame.display.flip()
            clock.tick(fps)
            frames += 1

            # Hot loop: throttle logs
            if frames % log_every == 0:
                logger.info(
                    f"Frame {frames} | {clock.get_fps():.1f}fps | "
                    f"pulse={engine.radiance.pulse:.3f} | waves={len(engine.waves)}"
                )

            if max_frames is not None and frames >= max_frames:
                running = False
    finally:
        pygame.quit()
        logger.info(f"Window closed after {frames} frames")

    return frames
