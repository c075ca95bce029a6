"""
Heartbeat field: a drifting particle cloud lit by a pulsing core and
radial "ba-dum" wavefronts.
"""

from heartbeat.config import HeartbeatConfig, load_config
from heartbeat.engine import HeartbeatEngine

__version__ = "0.1.0"
