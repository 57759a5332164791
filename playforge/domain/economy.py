"""Economy primitives."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal


def to_decimal(value: float | int | Decimal) -> Decimal:
    # str() keeps 1.1 as 1.1 instead of its binary expansion.
    return value if isinstance(value, Decimal) else Decimal(str(value))


def scaled_reward(reward: int, multiplier: float | Decimal) -> int:
    """Reward times multiplier, rounded half-up to whole coins."""
    product = to_decimal(reward) * to_decimal(multiplier)
    return int(product.quantize(Decimal(1), rounding=ROUND_HALF_UP))


@dataclass(slots=True)
class Wallet:
    """Mutable coin balance used by services."""

    balance: int = 0

    def can_afford(self, amount: int) -> bool:
        return self.balance >= amount

    def credit(self, amount: int) -> None:
        if amount < 0:
            raise ValueError("Cannot credit negative amount")
        self.balance += amount

    def debit(self, amount: int) -> None:
        if amount < 0:
            raise ValueError("Cannot debit negative amount")
        if self.balance < amount:
            raise ValueError(f"Insufficient coins: have {self.balance}, need {amount}")
        self.balance -= amount
