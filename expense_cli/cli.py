"""Console interface for the expense tracker."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from expense_core.exceptions import RecordNotFoundError, ValidationError
from expense_core.services import ExpenseManager
from expense_core.storage import DATA_FILE_NAME, DEFAULT_DATA_DIR, ExpenseStorage
from expense_core.validators import (
    parse_amount,
    parse_expense_id,
    validate_optional_str,
    validate_required_str,
)


def _load_manager(data_dir: Path) -> ExpenseManager:
    return ExpenseManager(ExpenseStorage(data_dir / DATA_FILE_NAME))


def _format_expense(expense: Dict[str, Any]) -> str:
    return (
        f"[{expense['id']}] {expense['date']} {expense['amount']:.2f}\n"
        f"  Category: {expense['category']}\n"
        f"  Description: {expense.get('description') or '-'}\n"
    )


def _format_extreme(label: str, entry: Optional[Dict[str, Any]]) -> str:
    if entry is None:
        return f"{label}: -"
    return f"{label}: {entry['category']} ({entry['amount']:.2f})"


def handle_expense(args: argparse.Namespace, manager: ExpenseManager) -> int:
    if args.command == "add":
        expense = manager.add(
            validate_required_str(args.category, "category"),
            parse_amount(args.amount, "amount"),
            validate_required_str(args.date, "date"),
            validate_optional_str(args.description, "description"),
        )
        print("Expense added:\n" + _format_expense(expense.to_dict()))
    elif args.command == "list":
        expenses = manager.list()
        if not expenses:
            print("No expenses found.")
            return 0
        print(f"Found {len(expenses)} expenses (total {manager.total_amount():.2f}):")
        for expense in expenses:
            print(_format_expense(expense.to_dict()))
    elif args.command == "delete":
        expense_id = parse_expense_id(args.id)
        if not manager.delete(expense_id):
            raise RecordNotFoundError(f"Expense {expense_id} not found")
        print(f"Expense {expense_id} deleted.")
    return 0


def handle_analytics(manager: ExpenseManager) -> int:
    summary = manager.analytics()
    print(f"Total: {summary['total']:.2f}")
    print(_format_extreme("Highest", summary["highest"]))
    print(_format_extreme("Lowest", summary["lowest"]))
    if summary["byCategory"]:
        print("By category:")
        for category, amount in summary["byCategory"].items():
            print(f"  {category}: {amount:.2f}")
    if summary["trend"]:
        print("Trend:")
        for point in summary["trend"]:
            print(f"  {point['date']}: {point['amount']:.2f}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Expense Tracker CLI")
    parser.add_argument(
        "--data-dir",
        default=DEFAULT_DATA_DIR,
        type=Path,
        help="Directory holding the expense store (default: ./data)",
    )

    subparsers = parser.add_subparsers(dest="entity", required=True)

    expense_parser = subparsers.add_parser("expense", help="Manage expenses")
    expense_sub = expense_parser.add_subparsers(dest="command", required=True)

    expense_add = expense_sub.add_parser("add", help="Add a new expense")
    expense_add.add_argument("category")
    expense_add.add_argument("amount")
    expense_add.add_argument("date", help="Date as YYYY-MM-DD")
    expense_add.add_argument("--description")

    expense_sub.add_parser("list", help="List expenses in insertion order")

    expense_delete = expense_sub.add_parser("delete", help="Delete an expense")
    expense_delete.add_argument("id")

    subparsers.add_parser("analytics", help="Show totals, category extremes and the date trend")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API and front end")
    serve_parser.add_argument("--host", default=None)
    serve_parser.add_argument("--port", type=int, default=None)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.entity == "serve":
        # Imported lazily so console commands do not need Flask loaded.
        from expense_api.app import DEFAULT_HOST, DEFAULT_PORT, serve

        serve(args.host or DEFAULT_HOST, args.port or DEFAULT_PORT, args.data_dir)
        return 0

    manager = _load_manager(args.data_dir)
    try:
        if args.entity == "expense":
            return handle_expense(args, manager)
        if args.entity == "analytics":
            return handle_analytics(manager)
        parser.error(f"Unknown entity: {args.entity}")  # pragma: no cover - argparse should prevent this
    except ValidationError as exc:
        print(f"Validation error: {exc}", file=sys.stderr)
        return 1
    except RecordNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
