from decimal import Decimal

import pytest

from expense_core.exceptions import ValidationError
from expense_core.validators import (
    parse_amount,
    parse_expense_id,
    validate_optional_str,
    validate_required_str,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        (10, Decimal("10.00")),
        (12.345, Decimal("12.345")),
        (1e30, Decimal("1E+30")),
        ("7.1", Decimal("7.10")),
        (-3, Decimal("-3.00")),
        ("0", Decimal("0.00")),
    ],
)
def test_parse_amount(raw, expected):
    assert parse_amount(raw) == expected


@pytest.mark.parametrize("raw", [None, "abc", "", True, "NaN", "Infinity", [1], "1e101"])
def test_parse_amount_rejects(raw):
    with pytest.raises(ValidationError):
        parse_amount(raw)


def test_required_str_is_kept_verbatim():
    assert validate_required_str(" Food ", "category") == " Food "
    assert validate_required_str("   ", "category") == "   "


def test_required_str_coerces_scalars():
    assert validate_required_str(5, "category") == "5"
    assert validate_required_str(2.5, "date") == "2.5"


@pytest.mark.parametrize("raw", [None, "", {"name": "Food"}, ["Food"]])
def test_required_str_rejects(raw):
    with pytest.raises(ValidationError):
        validate_required_str(raw, "category")


def test_optional_str():
    assert validate_optional_str(None, "description") == ""
    assert validate_optional_str("", "description") == ""
    assert validate_optional_str("Lunch", "description") == "Lunch"
    assert validate_optional_str(3, "description") == "3"
    with pytest.raises(ValidationError):
        validate_optional_str({"text": "x"}, "description")


def test_parse_expense_id():
    assert parse_expense_id("12") == 12
    assert parse_expense_id(" 4 ") == 4
    for raw in (None, "", "abc", "1.5"):
        with pytest.raises(ValidationError):
            parse_expense_id(raw)
