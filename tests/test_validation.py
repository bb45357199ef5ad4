"""Tests for expense input validation."""

from datetime import date
from decimal import Decimal

import pytest

from expense_ledger.validation import (
    ExpenseInputValidator,
    ExpenseValidationError,
    clean_text,
    parse_amount,
)


TODAY = date(2024, 3, 15)


@pytest.fixture
def validator():
    return ExpenseInputValidator()


class TestParseAmount:
    """Tests for parse_amount()."""

    def test_parses_strings(self):
        assert parse_amount("12.50") == 12.5
        assert parse_amount("  7 ") == 7.0

    def test_passes_numbers_through(self):
        assert parse_amount(3) == 3.0
        assert parse_amount(Decimal("4.25")) == 4.25

    def test_rejects_non_numbers(self):
        for raw in ("", "   ", "abc", "12abc", "12.50 USD", None, True, [], object()):
            assert parse_amount(raw) is None

    def test_returns_non_finite_as_is(self):
        assert parse_amount("inf") == float("inf")

    def test_oversized_int_is_infinite(self):
        assert parse_amount(10**400) == float("inf")


class TestCleanText:
    """Tests for clean_text()."""

    def test_trims(self):
        assert clean_text("  Food \n") == "Food"

    def test_none_is_empty(self):
        assert clean_text(None) == ""


class TestExpenseInputValidator:
    """Tests for ExpenseInputValidator."""

    def test_valid_input(self, validator):
        result = validator.validate("12.50", "  Food ", "  lunch  ", today=TODAY)
        assert result.is_valid is True
        assert result.issues == []
        assert result.expense.amount == 12.5
        assert result.expense.category == "Food"
        assert result.expense.note == "lunch"
        assert result.expense.date == TODAY

    def test_blank_note_becomes_none(self, validator):
        result = validator.validate("1", "Food", "   ", today=TODAY)
        assert result.expense.note is None

    def test_missing_note_becomes_none(self, validator):
        result = validator.validate("1", "Food", today=TODAY)
        assert result.expense.note is None

    def test_date_defaults_to_today(self, validator):
        result = validator.validate("1", "Food")
        assert result.expense.date == date.today()

    @pytest.mark.parametrize(
        "raw_amount, issue_type",
        [
            ("-5", "not_positive"),
            ("0", "not_positive"),
            ("abc", "not_a_number"),
            ("", "not_a_number"),
            ("nan", "not_finite"),
            ("inf", "not_finite"),
            (10**400, "not_finite"),
            (-(10**400), "not_finite"),
        ],
    )
    def test_bad_amounts_rejected(self, validator, raw_amount, issue_type):
        result = validator.validate(raw_amount, "Food", "", today=TODAY)
        assert result.is_valid is False
        assert result.expense is None
        assert [i.issue_type for i in result.issues] == [issue_type]
        assert result.issues[0].field == "amount"

    def test_empty_category_rejected(self, validator):
        result = validator.validate("5", "   ", "", today=TODAY)
        assert result.is_valid is False
        assert [i.field for i in result.issues] == ["category"]

    def test_reports_every_issue(self, validator):
        result = validator.validate("-1", "", "", today=TODAY)
        assert {i.field for i in result.issues} == {"amount", "category"}
        assert len(result.issues) == 2

    def test_validate_or_raise(self, validator):
        expense = validator.validate_or_raise("7.00", "Books", "pen", today=TODAY)
        assert expense.amount == 7.0

        with pytest.raises(ExpenseValidationError, match="greater than zero") as exc_info:
            validator.validate_or_raise(-5, "Food", "", today=TODAY)
        assert exc_info.value.result.is_valid is False

    def test_user_friendly_summary(self, validator):
        ok = validator.validate("1", "Food", today=TODAY)
        assert validator.get_user_friendly_summary(ok) == "Expense looks good."

        bad = validator.validate("x", "", today=TODAY)
        summary = validator.get_user_friendly_summary(bad)
        assert "Amount must be a number" in summary
        assert "Category is required" in summary
