"""Time-window filtering."""

from expense_ledger.filters.engine import (
    UnhandledFilterWindowError,
    apply_filter,
    coerce_window,
    sunday_weekday,
    week_start,
)

__all__ = [
    "UnhandledFilterWindowError",
    "apply_filter",
    "coerce_window",
    "sunday_weekday",
    "week_start",
]
