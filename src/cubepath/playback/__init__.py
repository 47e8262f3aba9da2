"""
Playback of generated paths: timed marker engine and reveal schedule.
"""

from .engine import IDLE, PAUSED, PLAYING, PlaybackEngine, PlaybackFrame, default_speed
from .reveal import RevealStep, reveal_delay_ms, reveal_from_config, reveal_schedule

__all__ = [
    "IDLE",
    "PAUSED",
    "PLAYING",
    "PlaybackEngine",
    "PlaybackFrame",
    "default_speed",
    "RevealStep",
    "reveal_delay_ms",
    "reveal_from_config",
    "reveal_schedule",
]
