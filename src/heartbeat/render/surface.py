"""
Drawing surfaces for the compositor.

``DrawingSurface`` is the minimal capability set the compositor draws
through. ``RasterSurface`` implements it on a NumPy RGB buffer so frames
can be shown in a window, piped to ffmpeg or saved as images.
"""

import abc
import enum
import math
from typing import Sequence, Tuple

import numpy as np

Color = Tuple[int, int, int]
GradientStop = Tuple[float, Color, float]


class BlendMode(enum.Enum):
    NORMAL = "source-over"
    ADDITIVE = "lighter"


class DrawingSurface(abc.ABC):
    """
    Abstract 2D surface of known pixel size.

    Colors are 0-255 RGB tuples, alphas are 0-1 opacities applied with the
    current blend mode.
    """

    @property
    @abc.abstractmethod
    def width(self) -> int:
        pass

    @property
    @abc.abstractmethod
    def height(self) -> int:
        pass

    @abc.abstractmethod
    def resize(self, width: int, height: int):
        pass

    @abc.abstractmethod
    def set_blend_mode(self, mode: BlendMode):
        pass

    @abc.abstractmethod
    def fill_rect(self, x: float, y: float, w: float, h: float, color: Color, alpha: float):
        pass

    @abc.abstractmethod
    def fill_circle(self, cx: float, cy: float, radius: float, color: Color, alpha: float):
        pass

    @abc.abstractmethod
    def radial_gradient_fill(
        self, cx: float, cy: float, radius: float, stops: Sequence[GradientStop]
    ):
        """Fill a disc with a gradient running from the center (offset 0) to the rim (offset 1)."""
        pass


class RasterSurface(DrawingSurface):
    """
    Float32 RGB raster with canvas-style blending.

    NORMAL: dst = dst * (1 - a) + src * a
    ADDITIVE: dst = min(1, dst + src * a)
    """

    def __init__(self, width: int, height: int, background: Color = (0, 0, 0)):
        self.background = background
        self.blend_mode = BlendMode.NORMAL
        self.resize(width, height)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def resize(self, width: int, height: int):
        """Reallocate the buffer. Like a canvas resize, this clears the surface."""
        self._width = max(0, int(width))
        self._height = max(0, int(height))
        self.buffer = np.zeros((self._height, self._width, 3), dtype=np.float32)
        self.clear()

    def clear(self, color: Color | None = None):
        color = self.background if color is None else color
        self.buffer[:] = np.asarray(color, dtype=np.float32) / 255.0

    def set_blend_mode(self, mode: BlendMode):
        self.blend_mode = mode

    def _bounds(self, x0: float, y0: float, x1: float, y1: float) -> Tuple[int, int, int, int]:
        """Clip a float box to integer pixel bounds."""
        ix0 = max(0, int(math.floor(x0)))
        iy0 = max(0, int(math.floor(y0)))
        ix1 = min(self._width, int(math.ceil(x1)))
        iy1 = min(self._height, int(math.ceil(y1)))
        return ix0, iy0, ix1, iy1

    def _composite(self, ix0: int, iy0: int, ix1: int, iy1: int,
                   premult: np.ndarray, alpha: np.ndarray):
        """Blend premultiplied color with per-pixel alpha into a buffer region."""
        region = self.buffer[iy0:iy1, ix0:ix1]
        if self.blend_mode is BlendMode.ADDITIVE:
            np.minimum(region + premult, 1.0, out=region)
        else:
            region *= 1.0 - alpha
            region += premult

    def fill_rect(self, x, y, w, h, color, alpha):
        if alpha <= 0:
            return
        ix0, iy0, ix1, iy1 = self._bounds(x, y, x + w, y + h)
        if ix0 >= ix1 or iy0 >= iy1:
            return
        alpha = min(1.0, alpha)
        src = np.asarray(color, dtype=np.float32) / 255.0
        self._composite(ix0, iy0, ix1, iy1, src * alpha, np.float32(alpha))

    def _disc_coverage(self, cx, cy, radius) -> Tuple[Tuple[int, int, int, int], np.ndarray, np.ndarray] | None:
        """Anti-aliased coverage and center distance for a disc, or None if off-surface."""
        if radius <= 0:
            return None
        bounds = self._bounds(cx - radius - 1, cy - radius - 1, cx + radius + 1, cy + radius + 1)
        ix0, iy0, ix1, iy1 = bounds
        if ix0 >= ix1 or iy0 >= iy1:
            return None

        xs = np.arange(ix0, ix1, dtype=np.float32) + 0.5 - cx
        ys = np.arange(iy0, iy1, dtype=np.float32) + 0.5 - cy
        dist = np.hypot(xs[np.newaxis, :], ys[:, np.newaxis])
        if radius < 0.6:
            # Sub-pixel disc: spread its area over the nearest pixels
            weights = np.clip(1.0 - dist, 0.0, 1.0)
            total = float(weights.sum())
            if total <= 0:
                return None
            coverage = np.minimum(weights * (math.pi * radius * radius / total), 1.0)
        else:
            coverage = np.clip(radius + 0.5 - dist, 0.0, 1.0)
        return bounds, coverage, dist

    def fill_circle(self, cx, cy, radius, color, alpha):
        if alpha <= 0:
            return
        disc = self._disc_coverage(cx, cy, radius)
        if disc is None:
            return
        bounds, coverage, _ = disc
        a = (coverage * min(1.0, alpha))[:, :, np.newaxis]
        src = np.asarray(color, dtype=np.float32) / 255.0
        self._composite(*bounds, a * src, a)

    def radial_gradient_fill(self, cx, cy, radius, stops):
        if not stops:
            return
        disc = self._disc_coverage(cx, cy, radius)
        if disc is None:
            return
        bounds, coverage, dist = disc

        offsets = [s[0] for s in stops]
        t = np.clip(dist / radius, 0.0, 1.0)
        alpha = np.interp(t, offsets, [min(1.0, max(0.0, s[2])) for s in stops]) * coverage
        premult = np.stack(
            [np.interp(t, offsets, [s[1][ch] / 255.0 * min(1.0, max(0.0, s[2])) for s in stops])
             for ch in range(3)],
            axis=-1,
        ) * coverage[:, :, np.newaxis]
        self._composite(*bounds, premult.astype(np.float32), alpha[:, :, np.newaxis].astype(np.float32))

    def to_array(self) -> np.ndarray:
        """(H, W, 3) uint8 RGB copy of the surface."""
        return (np.clip(self.buffer, 0.0, 1.0) * 255.0 + 0.5).astype(np.uint8)
