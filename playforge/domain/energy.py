"""Energy regeneration helpers.

Energy is never ticked by a background timer. Every operation that reads or
mutates energy derives the regenerated amount from the elapsed time since
``last_energy_update`` at the moment of use.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..storage.base import PlayerRecord


def ensure_utc(moment: datetime) -> datetime:
    """Return ``moment`` as an aware UTC datetime, treating naive values as UTC."""
    if moment.tzinfo is None or moment.tzinfo.utcoffset(moment) is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def elapsed_ms(since: datetime, now: datetime) -> int:
    """Whole milliseconds between ``since`` and ``now``, floored."""
    return (ensure_utc(now) - ensure_utc(since)) // timedelta(milliseconds=1)


def compute_energy_refill(record: "PlayerRecord", now: datetime) -> int:
    """Number of whole energy units regenerated since the last energy update."""
    if record.energy_refill_rate_ms <= 0:
        raise ValueError("Energy refill rate must be positive")
    elapsed = elapsed_ms(record.last_energy_update, now)
    # Clock skew can put the baseline in the future.
    if elapsed <= 0:
        return 0
    return elapsed // record.energy_refill_rate_ms


def clamp_energy(value: int, max_energy: int) -> int:
    return max(0, min(max_energy, value))


def regenerated_energy(record: "PlayerRecord", now: datetime, max_energy: int) -> int:
    return clamp_energy(record.energy + compute_energy_refill(record, now), max_energy)
