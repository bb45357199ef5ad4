"""Expense input validation."""

from expense_ledger.validation.validator import (
    ExpenseInputValidator,
    ExpenseValidationError,
    clean_text,
    parse_amount,
)

__all__ = [
    "ExpenseInputValidator",
    "ExpenseValidationError",
    "clean_text",
    "parse_amount",
]
