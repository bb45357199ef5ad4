"""
Audit Models for the Expense Ledger

Every significant ledger action is recorded as an audit event.
This provides:
1. A readable trail of what was added, refused or removed
2. Debugging information when the store misbehaves
3. Visibility into rejected input, which the UI itself keeps quiet about

DESIGN DECISION: Audit events go to the structured local log only.
The expenses table stays the single on-disk contract.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Session
    LEDGER_LOADED = "ledger_loaded"

    # Entry
    EXPENSE_CREATED = "expense_created"
    EXPENSE_REJECTED = "expense_rejected"
    EXPENSE_DELETED = "expense_deleted"

    # Viewing
    FILTER_WINDOW_CHANGED = "filter_window_changed"
    FILTER_WINDOW_REJECTED = "filter_window_rejected"
    UNHANDLED_FILTER_WINDOW = "unhandled_filter_window"

    # Failures
    PERSISTENCE_FAILED = "persistence_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Which expense (if any) this is about
    expense_id: Optional[int] = Field(
        default=None,
        description="ID of the expense this event relates to"
    )

    # Correlation - one id per user action
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate the events of one user action"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "expense_id": self.expense_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.expense_created(expense_id, amount, category, correlation_id)
        event = AuditEventBuilder.expense_deleted(expense_id, correlation_id)
    """

    @staticmethod
    def ledger_loaded(record_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_LOADED,
            description=f"Ledger loaded with {record_count} expenses",
            details={
                "record_count": record_count,
            },
        )

    @staticmethod
    def expense_created(
        expense_id: int,
        amount: float,
        category: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_CREATED,
            expense_id=expense_id,
            correlation_id=correlation_id,
            description=f"Expense saved: {category} - {amount:.2f}",
            details={
                "amount": amount,
                "category": category,
            },
            is_user_action=True,
        )

    @staticmethod
    def expense_rejected(
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_REJECTED,
            severity=AuditSeverity.WARNING,
            correlation_id=correlation_id,
            description=f"Expense input rejected with {len(issues)} issues",
            details={
                "issues": issues,
            },
            is_user_action=True,
        )

    @staticmethod
    def expense_deleted(
        expense_id: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_DELETED,
            expense_id=expense_id,
            correlation_id=correlation_id,
            description=f"Expense {expense_id} deleted",
            is_user_action=True,
        )

    @staticmethod
    def filter_window_changed(previous: str, current: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FILTER_WINDOW_CHANGED,
            severity=AuditSeverity.DEBUG,
            description=f"Filter window changed to {current}",
            details={
                "previous": previous,
                "current": current,
            },
            is_user_action=True,
        )

    @staticmethod
    def filter_window_rejected(requested: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FILTER_WINDOW_REJECTED,
            severity=AuditSeverity.WARNING,
            description=f"Unknown filter window requested: {requested}",
            details={
                "requested": requested,
            },
            is_user_action=True,
        )

    @staticmethod
    def unhandled_filter_window(window: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.UNHANDLED_FILTER_WINDOW,
            severity=AuditSeverity.ERROR,
            description="Filter window could not be applied; showing no expenses",
            error_message=f"Unhandled filter window: {window}",
            details={
                "window": window,
            },
        )

    @staticmethod
    def persistence_failed(
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PERSISTENCE_FAILED,
            severity=AuditSeverity.ERROR,
            correlation_id=correlation_id,
            description=f"Store operation failed: {operation}",
            error_message=error_message,
            details={
                "operation": operation,
            },
        )
