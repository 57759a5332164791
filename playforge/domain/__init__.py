"""Domain models and services."""

from .assets import AssetKind
from .engine import EconomyEngine
from .events import EventBus
from .levels import LevelDefinition, LevelService
from .locks import PlayerLocks
from .outcomes import Outcome, OutcomeStatus, SkipReason
from .exceptions import (
    InsufficientAsset,
    InsufficientFunds,
    InvalidLevelTransition,
    LevelNotFound,
    PlayerAlreadyExists,
    PlayerNotFound,
    PlayForgeError,
)

__all__ = [
    "AssetKind",
    "EconomyEngine",
    "EventBus",
    "LevelDefinition",
    "LevelService",
    "PlayerLocks",
    "Outcome",
    "OutcomeStatus",
    "SkipReason",
    "InsufficientAsset",
    "InsufficientFunds",
    "InvalidLevelTransition",
    "LevelNotFound",
    "PlayerAlreadyExists",
    "PlayerNotFound",
    "PlayForgeError",
]
