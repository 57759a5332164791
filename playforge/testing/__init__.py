"""Testing utilities for PlayForge."""

from ..clock import FrozenClock
from .factory import LevelFactory, PlayerRecordFactory
from .fixtures import app_fixture, frozen_clock, memory_app

__all__ = [
    "FrozenClock",
    "LevelFactory",
    "PlayerRecordFactory",
    "app_fixture",
    "frozen_clock",
    "memory_app",
]
