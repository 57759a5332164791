"""Validation utilities for PlayForge applications."""

from __future__ import annotations

from .app import EconomyApp
from .domain.assets import AssetKind


def validate_app(app: EconomyApp) -> list[str]:
    """Return list of validation errors discovered in configured app."""
    errors: list[str] = []

    economy = app.config.economy
    if economy.max_energy <= 0:
        errors.append(f"Economy 'max_energy' must be positive, got {economy.max_energy}.")
    if economy.default_energy_refill_rate_ms <= 0:
        errors.append(
            "Economy 'default_energy_refill_rate_ms' must be positive, "
            f"got {economy.default_energy_refill_rate_ms}."
        )
    if economy.cost_per_energy < 0:
        errors.append(f"Economy 'cost_per_energy' cannot be negative, got {economy.cost_per_energy}.")
    if economy.boost_duration_seconds <= 0:
        errors.append(
            f"Economy 'boost_duration_seconds' must be positive, got {economy.boost_duration_seconds}."
        )
    if economy.referral_multiplier_step <= 0:
        errors.append(
            f"Economy 'referral_multiplier_step' must be positive, got {economy.referral_multiplier_step}."
        )
    if economy.max_referral_multiplier < 1:
        errors.append(
            f"Economy 'max_referral_multiplier' must be at least 1, got {economy.max_referral_multiplier}."
        )

    known = {kind.value for kind in AssetKind}
    for kind in AssetKind:
        if kind.value not in economy.asset_costs:
            errors.append(f"Asset '{kind.value}' has no configured cost.")
    for name, cost in economy.asset_costs.items():
        if name not in known:
            errors.append(f"Asset cost configured for unknown asset '{name}'.")
        if cost is None or cost < 0:
            errors.append(f"Asset '{name}' has invalid cost '{cost}'.")

    return errors


__all__ = ["validate_app"]
