"""Framework-agnostic business services for the expense tracker."""

from __future__ import annotations

import logging
import threading
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from .exceptions import PersistenceError, RecordNotFoundError
from .models import Expense, money_value
from .storage import ExpenseStorage

logger = logging.getLogger(__name__)

CategoryTotal = Tuple[str, Decimal]


class ExpenseManager:
    """Owns the in-memory expense collection and mediates persistence.

    Every public method holds the manager lock, so one instance can be shared
    by request handlers running on different threads.
    """

    def __init__(self, storage: ExpenseStorage) -> None:
        self._storage = storage
        self._lock = threading.RLock()
        self._expenses: List[Expense] = []
        self._next_id = 1
        self.load()  # Hydrate in-memory collection from persistence on construction.

    # Public API -----------------------------------------------------------
    def add(self, category: str, amount: Decimal, date: str, description: Optional[str] = None) -> Expense:
        with self._lock:
            expense = Expense(
                id=self._next_id,
                category=category,
                amount=amount,
                date=date,
                description=description or "",
            )
            self._next_id += 1
            self._expenses.append(expense)
            self._persist()
            return expense

    def delete(self, expense_id: int) -> bool:
        with self._lock:
            for index, expense in enumerate(self._expenses):
                if expense.id == expense_id:
                    del self._expenses[index]
                    self._persist()
                    return True
            return False

    def get(self, expense_id: int) -> Expense:
        """Return an expense or raise if it does not exist."""
        with self._lock:
            for expense in self._expenses:
                if expense.id == expense_id:
                    return expense
        raise RecordNotFoundError(f"Expense {expense_id} not found")

    def list(self) -> List[Expense]:
        with self._lock:
            return list(self._expenses)

    def total_amount(self) -> Decimal:
        with self._lock:
            return sum((expense.amount for expense in self._expenses), start=Decimal("0.00"))

    def totals_by_category(self) -> Dict[str, Decimal]:
        # Keys keep the order in which each category first appeared.
        with self._lock:
            totals: Dict[str, Decimal] = {}
            for expense in self._expenses:
                totals[expense.category] = totals.get(expense.category, Decimal("0.00")) + expense.amount
            return totals

    def highest_category(self) -> Optional[CategoryTotal]:
        totals = self.totals_by_category()
        if not totals:
            return None
        # max() keeps the first of equal items, so ties go to the earliest category.
        return max(totals.items(), key=lambda item: item[1])

    def lowest_category(self) -> Optional[CategoryTotal]:
        totals = self.totals_by_category()
        if not totals:
            return None
        return min(totals.items(), key=lambda item: item[1])

    def trend_by_date(self) -> List[Tuple[str, Decimal]]:
        with self._lock:
            totals: Dict[str, Decimal] = {}
            for expense in self._expenses:
                totals[expense.date] = totals.get(expense.date, Decimal("0.00")) + expense.amount
        return sorted(totals.items(), key=lambda item: item[0])

    def analytics(self) -> Dict[str, object]:
        """Return the analytics snapshot in its JSON-ready shape."""
        with self._lock:
            total = self.total_amount()
            by_category = self.totals_by_category()
            highest = self.highest_category()
            lowest = self.lowest_category()
            trend = self.trend_by_date()

        return {
            "total": money_value(total),
            "byCategory": {category: money_value(amount) for category, amount in by_category.items()},
            "highest": _category_payload(highest),
            "lowest": _category_payload(lowest),
            "trend": [{"date": date, "amount": money_value(amount)} for date, amount in trend],
        }

    def load(self) -> None:
        """Load existing expenses from persistence."""
        with self._lock:
            try:
                self._expenses = self._storage.load()
            except PersistenceError as exc:
                logger.error("Error loading expenses: %s", exc)
                self._expenses = []
            self._next_id = max((expense.id for expense in self._expenses), default=0) + 1

    # Internal helpers -----------------------------------------------------
    def _persist(self) -> None:
        # Failures are logged only; the in-memory change stands.
        try:
            self._storage.save(self._expenses)
        except PersistenceError as exc:
            logger.error("Error saving expenses: %s", exc)


def _category_payload(entry: Optional[CategoryTotal]) -> Optional[Dict[str, object]]:
    if entry is None:
        return None
    category, amount = entry
    return {"category": category, "amount": money_value(amount)}
