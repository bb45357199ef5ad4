"""
Spending Aggregation

Deterministic sums over an already filtered set of expenses.
Nothing here reads the store or the clock.
"""

from typing import Iterable, Mapping

from expense_ledger.models.expense import CHART_COLORS, ChartSlice, ExpenseRecord


def total(filtered: Iterable[ExpenseRecord]) -> float:
    """Sum of amounts; 0 for no expenses."""
    return float(sum(record.amount for record in filtered))


def category_totals(filtered: Iterable[ExpenseRecord]) -> dict[str, float]:
    """
    Sum amounts per category.

    Only categories that appear in `filtered` are present, in order of
    their first appearance.
    """
    totals: dict[str, float] = {}
    for record in filtered:
        if record.category not in totals:
            totals[record.category] = 0.0
        totals[record.category] += record.amount
    return totals


def to_chart_series(totals: Mapping[str, float]) -> list[ChartSlice]:
    """
    Project category totals into ordered {label, value} chart slices.

    Colours cycle through the chart palette by position.
    """
    return [
        ChartSlice(
            label=label,
            value=value,
            color=CHART_COLORS[index % len(CHART_COLORS)],
        )
        for index, (label, value) in enumerate(totals.items())
    ]


def format_amount(amount: float, currency_symbol: str = "$") -> str:
    """Two-decimal display form, e.g. ``$12.50``."""
    return f"{currency_symbol}{amount:.2f}"
