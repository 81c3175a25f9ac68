"""Data models for the expense tracker domain."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Context, Decimal, getcontext
from typing import Any, Dict

__all__ = ["Expense", "to_money", "money_value", "amount_in_range"]

CENTS = Decimal("0.01")
# Largest accepted power of ten for a single amount.
MAX_AMOUNT_EXPONENT = 100


def amount_in_range(amount: Decimal) -> bool:
    return amount.is_finite() and amount.adjusted() <= MAX_AMOUNT_EXPONENT


def to_money(amount: Decimal) -> Decimal:
    """Round an amount to two decimal places.

    Precision grows with the magnitude so large amounts and totals keep every
    integer digit instead of overflowing the default 28-digit context.
    """
    context = Context(prec=max(getcontext().prec, amount.adjusted() + 3), rounding=ROUND_HALF_UP)
    return amount.quantize(CENTS, context=context)


def money_value(amount: Decimal) -> float:
    """Return the JSON-friendly number used on the wire for an amount."""
    return float(to_money(amount))


@dataclass(frozen=True)
class Expense:
    id: int
    category: str
    amount: Decimal
    date: str
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the expense to JSON-friendly natives."""
        return {
            "id": self.id,
            "category": self.category,
            "amount": money_value(self.amount),
            "date": self.date,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Expense":
        """Hydrate an Expense from stored data."""
        amount = Decimal(str(data["amount"]))
        if not amount_in_range(amount):
            raise ValueError(f"amount out of range: {data['amount']}")
        return cls(
            id=int(data["id"]),
            category=str(data["category"]),
            amount=amount,
            date=str(data["date"]),
            description=str(data.get("description") or ""),
        )
