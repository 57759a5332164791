"""Time-limited boosts granted by consuming an asset."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Mapping

from .energy import ensure_utc
from ..storage.base import ActiveBoost


def is_active(boost: ActiveBoost | None, now: datetime) -> bool:
    return boost is not None and ensure_utc(boost.expires_at) > ensure_utc(now)


def filter_active(boosts: Mapping[str, ActiveBoost], now: datetime) -> dict[str, ActiveBoost]:
    """Drop expired entries from a read; storage keeps them until overwritten."""
    return {kind: boost for kind, boost in boosts.items() if is_active(boost, now)}


def with_boost(
    boosts: Mapping[str, ActiveBoost], kind: str, now: datetime, duration_seconds: int
) -> dict[str, ActiveBoost]:
    merged = dict(boosts)
    merged[kind] = ActiveBoost(expires_at=ensure_utc(now) + timedelta(seconds=duration_seconds))
    return merged
