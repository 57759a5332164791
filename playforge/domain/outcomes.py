"""Tagged results of engine operations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .exceptions import (
    InsufficientAsset,
    InsufficientFunds,
    InvalidLevelTransition,
    LevelNotFound,
    PlayerAlreadyExists,
    PlayerNotFound,
    PlayForgeError,
)


class OutcomeStatus(str, Enum):
    APPLIED = "applied"
    SKIPPED = "skipped"


class SkipReason(str, Enum):
    NOT_FOUND = "not_found"
    UNKNOWN_LEVEL = "unknown_level"
    ALREADY_EXISTS = "already_exists"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    INSUFFICIENT_ASSET = "insufficient_asset"
    INVALID_TRANSITION = "invalid_transition"
    ENERGY_FULL = "energy_full"


# Skips that still count as success for the caller.
BENIGN_SKIPS = frozenset({SkipReason.ENERGY_FULL})


@dataclass(slots=True, frozen=True)
class Outcome:
    """``Applied`` or ``Skipped(reason)`` with an optional result value."""

    status: OutcomeStatus
    reason: SkipReason | None = None
    value: Any = None
    detail: str = ""

    @classmethod
    def applied(cls, value: Any = None) -> "Outcome":
        return cls(OutcomeStatus.APPLIED, value=value)

    @classmethod
    def skipped(cls, reason: SkipReason, *, value: Any = None, detail: str = "") -> "Outcome":
        return cls(OutcomeStatus.SKIPPED, reason=reason, value=value, detail=detail)

    @property
    def is_applied(self) -> bool:
        return self.status is OutcomeStatus.APPLIED

    @property
    def succeeded(self) -> bool:
        return self.is_applied or self.reason in BENIGN_SKIPS

    def unwrap(self) -> Any:
        """Return the value, raising the matching domain error for failed skips."""
        if self.succeeded:
            return self.value
        raise self._error()

    def _error(self) -> PlayForgeError:
        detail = self.detail or (self.reason.value if self.reason else "skipped")
        if self.reason is SkipReason.NOT_FOUND:
            return PlayerNotFound(self.detail or "unknown")
        if self.reason is SkipReason.UNKNOWN_LEVEL:
            return LevelNotFound(detail)
        if self.reason is SkipReason.ALREADY_EXISTS:
            return PlayerAlreadyExists(detail)
        if self.reason is SkipReason.INSUFFICIENT_FUNDS:
            return InsufficientFunds(detail)
        if self.reason is SkipReason.INSUFFICIENT_ASSET:
            return InsufficientAsset(detail)
        if self.reason is SkipReason.INVALID_TRANSITION:
            return InvalidLevelTransition(detail)
        return PlayForgeError(detail)
