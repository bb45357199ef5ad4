"""
Audit Logger

DESIGN DECISION: Every ledger mutation and every refused input is logged.
This provides:
1. Traceability of what was added and removed
2. A record of rejected input the UI deliberately keeps quiet about
3. Debugging capability when the store fails

The audit logger:
- Writes structured JSON lines through structlog
- Never lets a logging failure break the action being logged
- Supports correlation IDs to tie the events of one action together
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from expense_ledger.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route stdlib logging (and therefore structlog) at `level`."""
    logging.basicConfig(format="%(message)s", level=level)
    logging.getLogger().setLevel(level)


class AuditLogger:
    """
    Central audit logging service.

    Events are written to the structured local log only.
    """

    def __init__(self, logger_name: str = "expense_ledger.audit"):
        self._logger = structlog.get_logger(logger_name)

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns False if the event could not be written.
        """
        try:
            log_dict = event.to_log_dict()
            if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception as e:
            logging.getLogger(__name__).warning("audit logging failed: %s", e)
            return False
        return True

    def log_ledger_loaded(self, record_count: int) -> None:
        """Log a completed reload."""
        self.log(AuditEventBuilder.ledger_loaded(record_count=record_count))

    def log_expense_created(
        self,
        expense_id: int,
        amount: float,
        category: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a saved expense."""
        event = AuditEventBuilder.expense_created(
            expense_id=expense_id,
            amount=amount,
            category=category,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_expense_rejected(
        self,
        issues: list[dict],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log refused input."""
        event = AuditEventBuilder.expense_rejected(
            issues=issues,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_expense_deleted(
        self,
        expense_id: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a deletion."""
        event = AuditEventBuilder.expense_deleted(
            expense_id=expense_id,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_filter_window_changed(self, previous: str, current: str) -> None:
        self.log(AuditEventBuilder.filter_window_changed(previous, current))

    def log_filter_window_rejected(self, requested: str) -> None:
        self.log(AuditEventBuilder.filter_window_rejected(requested))

    def log_unhandled_filter_window(self, window: str) -> None:
        self.log(AuditEventBuilder.unhandled_filter_window(window))

    def log_persistence_failed(
        self,
        operation: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a store failure."""
        event = AuditEventBuilder.persistence_failed(
            operation=operation,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        self.log(event)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a user action and pass it through.
    """
    return uuid4()
