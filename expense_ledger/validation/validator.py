"""
Expense Input Validation

Turns raw form input (amount, category, note) into a NewExpense, or into
a list of issues explaining why it cannot be saved.

Checks, in order:
1. Amount parses to a finite number greater than zero
2. Category is non-empty after trimming
3. Note is trimmed; an empty note becomes no note

IMPORTANT: Validation NEVER silently fixes issues.
A bad amount is refused, not rounded, clamped or guessed.
"""

import datetime as dt
import math
from decimal import Decimal
from typing import Any, Optional

from expense_ledger.models.expense import (
    NewExpense,
    ValidationIssue,
    ValidationResult,
)


class ExpenseValidationError(ValueError):
    """Raw expense input that cannot be saved."""

    def __init__(self, result: ValidationResult):
        self.result = result
        messages = "; ".join(issue.message for issue in result.issues)
        super().__init__(f"Invalid expense: {messages}")


def parse_amount(raw: Any) -> Optional[float]:
    """
    Parse a raw amount into a float.

    Returns None when the value is not a number at all. Non-finite
    values come back as-is so the caller can report them; integers too
    large for a float come back as infinity.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float, Decimal)):
        try:
            return float(raw)
        except OverflowError:
            # ints past the float range
            return math.inf
    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            return None
        try:
            return float(text)
        except ValueError:
            return None
    return None


def clean_text(raw: Any) -> str:
    """Trim a raw text field; None becomes an empty string."""
    if raw is None:
        return ""
    return str(raw).strip()


class ExpenseInputValidator:
    """
    Validates raw expense input.

    Stateless; one instance can be shared across a session.
    """

    def validate(
        self,
        raw_amount: Any,
        raw_category: Any,
        raw_note: Any = None,
        today: Optional[dt.date] = None,
    ) -> ValidationResult:
        """
        Validate one submission.

        Args:
            raw_amount: Amount as typed (string) or already numeric
            raw_category: Category as typed
            raw_note: Optional note as typed
            today: Date to stamp on the expense (defaults to today)

        Returns:
            ValidationResult with `expense` set only when valid
        """
        issues = []

        amount = parse_amount(raw_amount)
        if amount is None:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="not_a_number",
                message="Amount must be a number",
                suggested_fix="Enter an amount like 12.50",
            ))
        elif not math.isfinite(amount):
            issues.append(ValidationIssue(
                field="amount",
                issue_type="not_finite",
                message="Amount must be a finite number",
                suggested_fix="Enter an amount like 12.50",
            ))
        elif amount <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="not_positive",
                message="Amount must be greater than zero",
                suggested_fix="Enter what you spent as a positive number",
            ))

        category = clean_text(raw_category)
        if not category:
            issues.append(ValidationIssue(
                field="category",
                issue_type="missing",
                message="Category is required",
                suggested_fix="Enter a category such as Food, Books or Rent",
            ))

        if issues:
            return ValidationResult(is_valid=False, issues=issues)

        note = clean_text(raw_note) or None

        return ValidationResult(
            is_valid=True,
            expense=NewExpense(
                amount=amount,
                category=category,
                note=note,
                date=today or dt.date.today(),
            ),
        )

    def validate_or_raise(
        self,
        raw_amount: Any,
        raw_category: Any,
        raw_note: Any = None,
        today: Optional[dt.date] = None,
    ) -> NewExpense:
        """
        Like validate(), but raise instead of returning a failed result.

        Raises:
            ExpenseValidationError: If the input cannot be saved
        """
        result = self.validate(raw_amount, raw_category, raw_note, today)
        if not result.is_valid:
            raise ExpenseValidationError(result)
        return result.expense

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """
        Generate a user-friendly summary of validation results.
        """
        if result.is_valid:
            return "Expense looks good."

        lines = ["This expense can't be saved yet:"]
        for issue in result.issues:
            line = f"- {issue.message}"
            if issue.suggested_fix:
                line += f" ({issue.suggested_fix})"
            lines.append(line)
        return "\n".join(lines)
