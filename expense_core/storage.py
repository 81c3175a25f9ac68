"""Persistence utilities for the expense tracker core services."""

from __future__ import annotations

import json
import logging
import re
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from .exceptions import PersistenceError
from .models import Expense, to_money

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path("data")
DATA_FILE_NAME = "expenses.json"
EMPTY_STORE = "[]"

FIELD_ORDER = ("id", "category", "amount", "date", "description")
RECORD_SEPARATOR = re.compile(r"\},\s*\{")
NUMERIC_CHARS = set("0123456789.-")


class ExpenseStorage:
    """Whole-file store for the expense collection with crash-safe writes."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = Path(path) if path is not None else DEFAULT_DATA_DIR / DATA_FILE_NAME
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.error("Unable to create data directory %s: %s", self._path.parent, exc)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> List[Expense]:
        if not self._path.exists():
            return []
        try:
            content = self._path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise PersistenceError(f"Unable to read from {self._path}") from exc

        if not content or content == EMPTY_STORE:
            return []

        try:
            payload = json.loads(content, parse_float=Decimal)
        except json.JSONDecodeError:
            logger.warning("%s is not valid JSON; reading it with the legacy scanner", self._path)
            records = parse_legacy_records(content)
        else:
            if not isinstance(payload, list):
                raise PersistenceError(f"Expected list payload in {self._path}")
            records = payload

        expenses: List[Expense] = []
        for record in records:
            try:
                expenses.append(Expense.from_dict(record))
            except (KeyError, TypeError, ValueError, AttributeError, InvalidOperation) as exc:
                logger.warning("Skipping unreadable expense record %r: %s", record, exc)
        return expenses

    def save(self, expenses: Iterable[Expense]) -> None:
        temp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            with temp_path.open("w", encoding="utf-8") as handle:
                handle.write(render_records(expenses))
                handle.flush()
            # Path.replace is an atomic rename on POSIX.
            temp_path.replace(self._path)
        except OSError as exc:
            raise PersistenceError(f"Unable to write to {self._path}") from exc


def render_record(expense: Expense) -> str:
    """Render one expense as a single-line JSON object in fixed key order."""
    values = {
        "id": str(expense.id),
        "category": json.dumps(expense.category, ensure_ascii=False),
        "amount": f"{to_money(expense.amount):.2f}",
        "date": json.dumps(expense.date, ensure_ascii=False),
        "description": json.dumps(expense.description or "", ensure_ascii=False),
    }
    return "{" + ",".join(f'"{key}":{values[key]}' for key in FIELD_ORDER) + "}"


def render_records(expenses: Iterable[Expense]) -> str:
    lines = ["  " + render_record(expense) for expense in expenses]
    if not lines:
        return EMPTY_STORE
    return "[\n" + ",\n".join(lines) + "\n]"


def parse_legacy_records(content: str) -> List[Dict[str, str]]:
    """Scan the pre-JSON store layout into raw field mappings.

    Strings end at the next quote (no escapes) and numbers are runs of
    digits, dots and minus signs. Missing keys are left out of the mapping.
    """
    body = content.strip()
    if body.startswith("["):
        body = body[1:]
    if body.endswith("]"):
        body = body[:-1]
    body = body.strip()
    if not body:
        return []

    records: List[Dict[str, str]] = []
    for chunk in RECORD_SEPARATOR.split(body):
        chunk = chunk.strip()
        if not chunk.startswith("{"):
            chunk = "{" + chunk
        if not chunk.endswith("}"):
            chunk = chunk + "}"
        record: Dict[str, str] = {}
        for key in FIELD_ORDER:
            value = _extract_value(chunk, key)
            if value is not None:
                record[key] = value
        records.append(record)
    return records


def _extract_value(chunk: str, key: str) -> Optional[str]:
    marker = f'"{key}":'
    start = chunk.find(marker)
    if start == -1:
        return None
    start += len(marker)
    while start < len(chunk) and chunk[start].isspace():
        start += 1
    if start >= len(chunk):
        return None

    if chunk[start] == '"':
        end = chunk.find('"', start + 1)
        if end == -1:
            return None
        return chunk[start + 1:end]

    end = start
    while end < len(chunk) and chunk[end] in NUMERIC_CHARS:
        end += 1
    return chunk[start:end]
