"""Clocks used by the engine, simulations and tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime | None = None) -> None:
        self._now = start or datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self._now

    def advance(self, *, seconds: float = 0, milliseconds: float = 0, minutes: float = 0) -> datetime:
        self._now += timedelta(seconds=seconds, milliseconds=milliseconds, minutes=minutes)
        return self._now

    def set(self, moment: datetime) -> None:
        self._now = moment
