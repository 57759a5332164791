"""Storage backends for PlayForge."""

from .base import ActiveBoost, LevelStore, PlayerRecord, PlayerStore
from .memory import InMemoryLevelStore, InMemoryPlayerStore
from .notifier import SnapshotNotifier, deferred_snapshots
from .sqlalchemy import AsyncSQLAlchemyStorage

__all__ = [
    "ActiveBoost",
    "LevelStore",
    "PlayerRecord",
    "PlayerStore",
    "InMemoryLevelStore",
    "InMemoryPlayerStore",
    "SnapshotNotifier",
    "AsyncSQLAlchemyStorage",
    "deferred_snapshots",
]
