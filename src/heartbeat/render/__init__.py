"""Drawing surfaces and the frame compositor."""

from heartbeat.render.compositor import FrameCompositor
from heartbeat.render.surface import BlendMode, DrawingSurface, RasterSurface
