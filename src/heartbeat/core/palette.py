"""
Tint colors for particles.
"""

from typing import Sequence

import numpy as np

from heartbeat.config import Color

WHITE: Color = (255, 255, 255)


class ColorPalette:
    """A fixed set of RGB tints, sampled uniformly."""

    def __init__(self, colors: Sequence[Color], rng: np.random.Generator | None = None):
        if not colors:
            raise ValueError("A palette needs at least one color")
        self.colors = tuple(tuple(c) for c in colors)
        self.rng = rng or np.random.default_rng()

    def __len__(self) -> int:
        return len(self.colors)

    def pick(self) -> Color:
        return self.colors[int(self.rng.integers(len(self.colors)))]

    @staticmethod
    def whiten(color: Color, amount: float) -> Color:
        """Linearly push ``color`` toward pure white by ``amount`` (0-1)."""
        amount = min(1.0, max(0.0, amount))
        return tuple(int(c + (255 - c) * amount + 0.5) for c in color)
