"""Core business logic package for the expense tracker."""

from .models import Expense
from .services import ExpenseManager
from .storage import ExpenseStorage
from .exceptions import PersistenceError, ValidationError, RecordNotFoundError

__all__ = [
    "Expense",
    "ExpenseManager",
    "ExpenseStorage",
    "PersistenceError",
    "ValidationError",
    "RecordNotFoundError",
]
