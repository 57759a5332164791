"""Referral multiplier arithmetic."""

from __future__ import annotations

from decimal import Decimal

from .economy import to_decimal

BASE_MULTIPLIER = Decimal(1)


def stepped_multiplier(current: float, step: float, maximum: float) -> float:
    """Raise ``current`` by one referral step without passing ``maximum``."""
    raised = to_decimal(current) + to_decimal(step)
    return float(min(raised, to_decimal(maximum)))


def initial_multiplier(referred: bool, step: float, maximum: float) -> float:
    if not referred:
        return float(BASE_MULTIPLIER)
    return stepped_multiplier(float(BASE_MULTIPLIER), step, maximum)


def normalize_referral_code(code: str | None) -> str | None:
    if code is None:
        return None
    code = code.strip()
    return code or None
