"""
Core Data Models for the Expense Ledger

These models define the schemas for everything that flows between the
store, the filter engine, the aggregator and the presentation layer.

DESIGN DECISION: Records are frozen once built.
The ledger has no update operation, so an ExpenseRecord can only be created
by the store and later deleted; nothing mutates it in between.
"""

import datetime as dt
from enum import Enum
from typing import Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class FilterWindow(str, Enum):
    """
    Time windows the ledger can be viewed through.

    Weeks start on Sunday (day 0).
    """
    ALL = "all"
    THIS_WEEK = "week"
    THIS_MONTH = "month"

    @property
    def label(self) -> str:
        return {
            FilterWindow.ALL: "All",
            FilterWindow.THIS_WEEK: "This Week",
            FilterWindow.THIS_MONTH: "This Month",
        }[self]


class LedgerStatus(str, Enum):
    """Lifecycle of one ledger session."""
    IDLE = "idle"        # Store not read yet
    LOADED = "loaded"    # Working set mirrors the store


class ActionOutcome(str, Enum):
    """Result of a controller action as seen by presentation."""
    SUCCESS = "success"
    REJECTED = "rejected"   # Input refused, nothing changed
    FAILED = "failed"       # Store call failed


# =============================================================================
# CORE EXPENSE MODEL
# =============================================================================

class ExpenseRecord(BaseModel):
    """
    One recorded spending event, as read back from the store.

    CRITICAL: `id` and `date` are always assigned by the ledger,
    never by the person entering the expense.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: int = Field(
        ...,
        ge=1,
        description="Store-assigned identifier"
    )
    amount: float = Field(
        ...,
        gt=0,
        description="Amount spent in currency units"
    )
    category: str = Field(
        ...,
        min_length=1,
        description="Free-form category label"
    )
    note: Optional[str] = Field(
        default=None,
        description="Optional note, absent rather than empty"
    )
    date: dt.date = Field(
        ...,
        description="Calendar date the expense was recorded"
    )

    @field_validator('note')
    @classmethod
    def blank_note_is_absent(cls, v: Optional[str]) -> Optional[str]:
        """An empty note is stored as no note at all."""
        if v is not None and not v.strip():
            return None
        return v

    @property
    def date_iso(self) -> str:
        return self.date.isoformat()


class NewExpense(BaseModel):
    """
    A validated expense that is ready to be written to the store.

    Produced only by the input validator.
    """
    model_config = ConfigDict(frozen=True)

    amount: float = Field(..., gt=0)
    category: str = Field(..., min_length=1)
    note: Optional[str] = None
    date: dt.date


# =============================================================================
# DERIVED VIEW MODELS
# =============================================================================

# Palette used by the spending-by-category chart
CHART_COLORS = (
    "#FF6384",
    "#36A2EB",
    "#FFCE56",
    "#4BC0C0",
    "#9966FF",
    "#FF9F40",
)


class ChartSlice(BaseModel):
    """One {label, value} pair handed to the chart widget."""
    model_config = ConfigDict(frozen=True)

    label: str
    value: float
    color: str = CHART_COLORS[0]


class LedgerView(BaseModel):
    """
    The derived view: visible records, their total, and per-category totals.

    Rebuilt from scratch every time the working set or window changes.
    """
    model_config = ConfigDict(frozen=True)

    window: Union[FilterWindow, str] = FilterWindow.ALL
    reference_time: dt.datetime
    visible_records: tuple[ExpenseRecord, ...] = ()
    total_spend: float = 0.0
    by_category: dict[str, float] = Field(default_factory=dict)
    error: Optional[str] = Field(
        default=None,
        description="Set when the window could not be applied"
    )

    @property
    def record_count(self) -> int:
        return len(self.visible_records)

    @property
    def is_empty(self) -> bool:
        return not self.visible_records

    def chart_series(self) -> list[ChartSlice]:
        """Project category totals into chart slices."""
        from expense_ledger.aggregation import to_chart_series

        return to_chart_series(self.by_category)


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single problem found in raw expense input."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'not_a_number', 'not_positive')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        default="error",
        pattern="^(error|warning|info)$",
    )
    suggested_fix: Optional[str] = None


class ValidationResult(BaseModel):
    """Outcome of validating one raw submission."""

    is_valid: bool
    issues: list[ValidationIssue] = Field(default_factory=list)
    expense: Optional[NewExpense] = None


# =============================================================================
# ACTION RESULT
# =============================================================================

class ActionResult(BaseModel):
    """
    What a controller action hands back to presentation.

    Presentation decides how (or whether) to surface a rejection or failure.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    outcome: ActionOutcome
    expense_id: Optional[int] = None
    issues: list[ValidationIssue] = Field(default_factory=list)
    error_message: Optional[str] = None
    error: Optional[Exception] = Field(default=None, exclude=True, repr=False)

    @property
    def ok(self) -> bool:
        return self.outcome == ActionOutcome.SUCCESS

    @property
    def rejected(self) -> bool:
        return self.outcome == ActionOutcome.REJECTED

    @property
    def failed(self) -> bool:
        return self.outcome == ActionOutcome.FAILED

    def raise_for_outcome(self) -> None:
        """Re-raise the store error carried by a failed result."""
        if self.failed and self.error is not None:
            raise self.error
