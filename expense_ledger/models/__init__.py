"""
Data Models Package

This package contains all Pydantic models used by the expense ledger.
All data flowing through the ledger must conform to these schemas.
"""

from expense_ledger.models.expense import (
    CHART_COLORS,
    ActionOutcome,
    ActionResult,
    ChartSlice,
    ExpenseRecord,
    FilterWindow,
    LedgerStatus,
    LedgerView,
    NewExpense,
    ValidationIssue,
    ValidationResult,
)
from expense_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Expense models
    "CHART_COLORS",
    "ActionOutcome",
    "ActionResult",
    "ChartSlice",
    "ExpenseRecord",
    "FilterWindow",
    "LedgerStatus",
    "LedgerView",
    "NewExpense",
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
