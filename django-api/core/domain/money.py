"""Money and order pricing.

All ledger amounts are integer cents. The legacy ticket tables still store
prices as decimal currency; ``Money.from_decimal`` is the one place they are
converted.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Self

CENTS_PER_UNIT = 100


def round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class Money:
    """Non-negative amount in minor units (cents)."""

    cents: int

    def __post_init__(self) -> None:
        if self.cents < 0:
            raise ValueError("Money amount cannot be negative")

    @classmethod
    def from_decimal(cls, amount: Decimal) -> Self:
        return cls(cents=round_half_up(Decimal(amount) * CENTS_PER_UNIT))

    def to_decimal(self) -> Decimal:
        return (Decimal(self.cents) / CENTS_PER_UNIT).quantize(Decimal("0.01"))

    def __add__(self, other: "Money") -> "Money":
        return Money(self.cents + other.cents)

    def __mul__(self, quantity: int) -> "Money":
        return Money(self.cents * quantity)

    def __str__(self) -> str:
        return f"{self.to_decimal():.2f}"


@dataclass(frozen=True)
class FeeSchedule:
    """Platform fee: a rate applied to the subtotal plus a fixed amount."""

    rate: Decimal
    fixed: Money

    def fee_for(self, subtotal: Money) -> Money:
        return Money(round_half_up(Decimal(subtotal.cents) * self.rate) + self.fixed.cents)


@dataclass(frozen=True)
class PriceLine:
    unit_price: Money
    quantity: int

    def __post_init__(self) -> None:
        if self.quantity <= 0:
            raise ValueError("Quantity must be positive")

    @property
    def amount(self) -> Money:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class PricedTotals:
    subtotal: Money
    fees: Money
    donation: Money
    total: Money


def price(lines: Iterable[PriceLine], donation: Money, schedule: FeeSchedule) -> PricedTotals:
    """Price an order: subtotal, platform fee and grand total."""
    subtotal = Money(0)
    for line in lines:
        subtotal = subtotal + line.amount
    fees = schedule.fee_for(subtotal)
    return PricedTotals(
        subtotal=subtotal,
        fees=fees,
        donation=donation,
        total=subtotal + fees + donation,
    )

