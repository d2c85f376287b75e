"""
Player state schemas — health and gold.

Both models clamp on construction and only change through their own
operations, so the invariants (0 <= current <= total, coins >= 0) hold
after every call.
"""

from pydantic import BaseModel, model_validator


class HealthState(BaseModel):
    """Hit points. `current` stays within [0, total] and `total` is at least 1."""

    current: int = 100
    total: int = 100

    @model_validator(mode="after")
    def clamp(self):
        self.total = max(1, self.total)
        self.current = min(max(0, self.current), self.total)
        return self

    @property
    def is_depleted(self) -> bool:
        return self.current == 0

    def apply_damage(self, amount: int) -> int:
        """Subtract `amount` HP, never going below zero.

        Returns the HP actually lost.
        """
        if amount <= 0:
            return 0
        before = self.current
        self.current = max(0, self.current - amount)
        return before - self.current

    def heal(self, amount: int) -> int:
        """Add `amount` HP, never exceeding `total`. Returns the HP gained."""
        if amount <= 0:
            return 0
        before = self.current
        self.current = min(self.total, self.current + amount)
        return self.current - before

    def set_total(self, new_total: int, preserve_percentage: bool = False):
        clamped = max(1, new_total)
        if preserve_percentage:
            ratio = self.current / self.total
            self.total = clamped
            self.current = max(0, min(self.total, round(ratio * self.total)))
        else:
            self.total = clamped
            self.current = min(self.current, self.total)

    def restore(self):
        self.current = self.total


class GoldState(BaseModel):
    """Coin purse. Never negative."""

    coins: int = 0

    @model_validator(mode="after")
    def clamp(self):
        self.coins = max(0, self.coins)
        return self

    def set(self, value: int):
        self.coins = max(0, value)

    def add(self, amount: int):
        """Add a signed amount of coins. Losses stop at zero."""
        if amount == 0:
            return
        self.coins = max(0, self.coins + amount)

    def spend(self, amount: int) -> bool:
        """Debit `amount` coins if the purse can cover it.

        Returns False (and changes nothing) when funds are insufficient.
        Spending zero or a negative amount always succeeds.
        """
        if amount <= 0:
            return True
        if self.coins < amount:
            return False
        self.coins -= amount
        return True
