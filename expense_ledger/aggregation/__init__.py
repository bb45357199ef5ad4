"""Totals and per-category breakdowns."""

from expense_ledger.aggregation.aggregator import (
    category_totals,
    format_amount,
    to_chart_series,
    total,
)

__all__ = [
    "category_totals",
    "format_amount",
    "to_chart_series",
    "total",
]
