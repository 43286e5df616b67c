"""Economy primitives."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class PointsWallet:
    """Mutable points balance used by services."""

    balance: float = 0.0

    def credit(self, amount: float) -> None:
        if amount < 0:
            raise ValueError("Cannot credit negative amount")
        self.balance += amount

    def debit(self, amount: float) -> None:
        if amount < 0:
            raise ValueError("Cannot debit negative amount")
        if self.balance < amount:
            raise ValueError(f"Insufficient points: have {self.balance:g}, need {amount:g}")
        self.balance -= amount

    def can_afford(self, amount: float) -> bool:
        return self.balance >= amount
