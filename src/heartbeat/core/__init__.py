"""Simulation state: palette, particles, beat timing, waves and radiance."""

from heartbeat.core.beat import BeatClock, BeatEvent, BeatKind
from heartbeat.core.palette import ColorPalette
from heartbeat.core.particles import Particle, ParticlePool
from heartbeat.core.radiance import CenterRadiance
from heartbeat.core.waves import WaveBurst, WaveField
