"""
Time-Window Filter Engine

DESIGN DECISION: Filtering is a PURE function of (records, window, now).
The only notion of "today" it has is the `now` it is handed, so the same
inputs always give the same output.

Week windows start on Sunday: the start date is `now`'s calendar date
minus its Sunday-based day-of-week number.
"""

import datetime as dt
from typing import Iterable, Union

from expense_ledger.models.expense import ExpenseRecord, FilterWindow


class UnhandledFilterWindowError(ValueError):
    """A window value the filter engine has no rule for."""

    def __init__(self, window: object):
        self.window = window
        super().__init__(f"Unhandled filter window: {window!r}")


def sunday_weekday(day: dt.date) -> int:
    """Day-of-week number with Sunday as 0 and Saturday as 6."""
    return (day.weekday() + 1) % 7


def week_start(now: Union[dt.datetime, dt.date]) -> dt.date:
    """First day (Sunday) of the week containing `now`."""
    today = now.date() if isinstance(now, dt.datetime) else now
    return today - dt.timedelta(days=sunday_weekday(today))


def coerce_window(window: Union[FilterWindow, str]) -> FilterWindow:
    """
    Turn a window or its string value into a FilterWindow.

    Raises:
        UnhandledFilterWindowError: If the value names no known window
    """
    if isinstance(window, FilterWindow):
        return window
    try:
        return FilterWindow(window)
    except ValueError:
        raise UnhandledFilterWindowError(window) from None


def apply_filter(
    records: Iterable[ExpenseRecord],
    window: Union[FilterWindow, str],
    now: Union[dt.datetime, dt.date],
) -> list[ExpenseRecord]:
    """
    Select the records that fall inside `window` as seen from `now`.

    Order of the input is preserved.

    Raises:
        UnhandledFilterWindowError: For any window other than the three
            known ones. Callers that must not fail treat this as an empty
            result, never as "everything".
    """
    window = coerce_window(window)
    records = list(records)

    if window == FilterWindow.ALL:
        return records

    today = now.date() if isinstance(now, dt.datetime) else now

    if window == FilterWindow.THIS_WEEK:
        start = week_start(today)
        return [r for r in records if r.date >= start]

    if window == FilterWindow.THIS_MONTH:
        return [
            r for r in records
            if r.date.month == today.month and r.date.year == today.year
        ]

    raise UnhandledFilterWindowError(window)
