"""
Ledger Controller for the Expense Ledger

This module ties the store, the validator, the filter engine and the
aggregator together into one session-scoped controller.

Flows:
1. Startup  (initialize store → reload → Loaded)
2. Submit   (validate → create → reload)
3. Delete   (delete → reload)
4. Window   (re-derive only, no store access)

DESIGN DECISION: The working set is a read-through cache.
After every create or delete it is replaced wholesale by a fresh
`list_all()`; there is no partial-update path. The derived view
(visible records, total, category totals) is rebuilt from scratch whenever
the working set or the window changes.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Callable, Optional, Union
from uuid import UUID

from expense_ledger.aggregation import category_totals, total
from expense_ledger.audit import AuditLogger, configure_logging, create_correlation_id
from expense_ledger.config import get_settings
from expense_ledger.filters import UnhandledFilterWindowError, apply_filter, coerce_window
from expense_ledger.models.expense import (
    ActionOutcome,
    ActionResult,
    ExpenseRecord,
    FilterWindow,
    LedgerStatus,
    LedgerView,
    ValidationIssue,
)
from expense_ledger.services.storage import (
    ExpenseStorageInterface,
    PersistenceError,
    SQLiteDatabase,
    SQLiteExpenseStorage,
)
from expense_ledger.validation import ExpenseInputValidator, ExpenseValidationError


class LedgerStateError(RuntimeError):
    """A controller action was issued in a state that cannot accept it."""
    pass


@dataclass
class LedgerState:
    """
    Everything one ledger session knows.

    Owned by a LedgerController; presentation reads it, never writes it.
    """
    status: LedgerStatus = LedgerStatus.IDLE
    working_set: tuple[ExpenseRecord, ...] = ()
    window: Union[FilterWindow, str] = FilterWindow.ALL
    view: Optional[LedgerView] = field(default=None, repr=False)


class LedgerController:
    """
    Orchestrates one ledger session.

    Mutating actions (submit, delete) are serialized: each one finishes
    its store call and the reload that follows before the next one starts.
    Changing the window never waits on the store.

    Every action returns an ActionResult:
    - SUCCESS:  the store was changed (or the window was switched)
    - REJECTED: input was refused, nothing changed
    - FAILED:   the store raised; the working set keeps its last loaded value
    """

    def __init__(
        self,
        storage: ExpenseStorageInterface,
        validator: Optional[ExpenseInputValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._storage = storage
        self._validator = validator or ExpenseInputValidator()
        self._audit_logger = audit_logger
        self._clock = clock or datetime.now
        self._state = LedgerState()
        self._lock: Optional[asyncio.Lock] = None
        self._lock_loop: Optional[asyncio.AbstractEventLoop] = None
        self._rederive()

    # -------------------------------------------------------------------------
    # Read side
    # -------------------------------------------------------------------------

    @property
    def state(self) -> LedgerState:
        return self._state

    @property
    def status(self) -> LedgerStatus:
        return self._state.status

    @property
    def working_set(self) -> tuple[ExpenseRecord, ...]:
        return self._state.working_set

    @property
    def window(self) -> Union[FilterWindow, str]:
        return self._state.window

    @property
    def view(self) -> LedgerView:
        return self._state.view

    @property
    def visible_records(self) -> tuple[ExpenseRecord, ...]:
        return self._state.view.visible_records

    @property
    def total_spend(self) -> float:
        return self._state.view.total_spend

    @property
    def by_category(self) -> dict[str, float]:
        return self._state.view.by_category

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    async def startup(self) -> None:
        """
        Prepare the store and load the working set.

        Raises:
            PersistenceError: If the store cannot be initialized or read
        """
        async with self._action_lock():
            try:
                await self._storage.initialize()
                await self._reload()
            except PersistenceError as e:
                if self._audit_logger:
                    self._audit_logger.log_persistence_failed(
                        operation="startup",
                        error_message=str(e),
                    )
                raise

    async def submit_new(
        self,
        raw_amount: Any,
        raw_category: Any,
        raw_note: Any = None,
    ) -> ActionResult:
        """
        Validate raw input and, if valid, save it as a new expense.

        The expense is dated with today's date from the controller clock.
        """
        self._require_loaded("submit_new")
        correlation_id = create_correlation_id()

        try:
            expense = self._validator.validate_or_raise(
                raw_amount,
                raw_category,
                raw_note,
                today=self._today(),
            )
        except ExpenseValidationError as e:
            if self._audit_logger:
                self._audit_logger.log_expense_rejected(
                    issues=[issue.model_dump() for issue in e.result.issues],
                    correlation_id=correlation_id,
                )
            return ActionResult(
                outcome=ActionOutcome.REJECTED,
                issues=e.result.issues,
            )

        async with self._action_lock():
            try:
                expense_id = await self._storage.create(
                    amount=expense.amount,
                    category=expense.category,
                    note=expense.note,
                    date=expense.date,
                )
            except PersistenceError as e:
                return self._failed("create", e, correlation_id)

            if self._audit_logger:
                self._audit_logger.log_expense_created(
                    expense_id=expense_id,
                    amount=expense.amount,
                    category=expense.category,
                    correlation_id=correlation_id,
                )

            try:
                await self._reload()
            except PersistenceError as e:
                return self._failed("reload", e, correlation_id, expense_id=expense_id)

        return ActionResult(outcome=ActionOutcome.SUCCESS, expense_id=expense_id)

    async def request_delete(self, expense_id: Any) -> ActionResult:
        """
        Delete an expense by id and reload.

        An id that is not in the store is not an error.
        """
        self._require_loaded("request_delete")
        correlation_id = create_correlation_id()

        if isinstance(expense_id, bool) or not isinstance(expense_id, int):
            return ActionResult(
                outcome=ActionOutcome.REJECTED,
                issues=[ValidationIssue(
                    field="id",
                    issue_type="invalid_value",
                    message=f"Expense id must be an integer, got {expense_id!r}",
                )],
            )

        async with self._action_lock():
            try:
                await self._storage.delete_by_id(expense_id)
            except PersistenceError as e:
                return self._failed("delete", e, correlation_id, expense_id=expense_id)

            if self._audit_logger:
                self._audit_logger.log_expense_deleted(
                    expense_id=expense_id,
                    correlation_id=correlation_id,
                )

            try:
                await self._reload()
            except PersistenceError as e:
                return self._failed("reload", e, correlation_id, expense_id=expense_id)

        return ActionResult(outcome=ActionOutcome.SUCCESS, expense_id=expense_id)

    def set_window(self, window: Union[FilterWindow, str]) -> ActionResult:
        """
        Switch the time window and re-derive the view.

        Unknown windows are refused and leave the current window in place.
        """
        try:
            new_window = coerce_window(window)
        except UnhandledFilterWindowError as e:
            if self._audit_logger:
                self._audit_logger.log_filter_window_rejected(requested=str(window))
            return ActionResult(
                outcome=ActionOutcome.REJECTED,
                issues=[ValidationIssue(
                    field="window",
                    issue_type="unknown_window",
                    message=str(e),
                    suggested_fix="Choose all, week or month",
                )],
            )

        previous = self._state.window
        self._state.window = new_window
        self._rederive()

        if self._audit_logger:
            self._audit_logger.log_filter_window_changed(
                previous=getattr(previous, "value", str(previous)),
                current=new_window.value,
            )
        return ActionResult(outcome=ActionOutcome.SUCCESS)

    def refresh(self) -> LedgerView:
        """Re-derive the view against the current clock (e.g. after midnight)."""
        return self._rederive()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    async def _reload(self) -> None:
        """Replace the working set with the store's current contents."""
        records = await self._storage.list_all()
        self._state.working_set = tuple(
            sorted(records, key=lambda record: record.id, reverse=True)
        )
        self._state.status = LedgerStatus.LOADED
        self._rederive()

        if self._audit_logger:
            self._audit_logger.log_ledger_loaded(record_count=len(records))

    def _rederive(self) -> LedgerView:
        """Rebuild the derived view from the working set and window."""
        now = self._clock()
        error = None
        try:
            visible = apply_filter(self._state.working_set, self._state.window, now)
        except UnhandledFilterWindowError as e:
            visible = []
            error = str(e)
            if self._audit_logger:
                self._audit_logger.log_unhandled_filter_window(window=str(e.window))

        self._state.view = LedgerView(
            window=self._state.window,
            reference_time=now,
            visible_records=tuple(visible),
            total_spend=total(visible),
            by_category=category_totals(visible),
            error=error,
        )
        return self._state.view

    def _today(self) -> date:
        return self._clock().date()

    def _action_lock(self) -> asyncio.Lock:
        """
        Lock serializing store calls and their reloads.

        An asyncio.Lock belongs to one event loop, and callers such as the
        Streamlit page run each action on a fresh loop. The lock is created
        inside the running loop and replaced when the loop changes.
        """
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    def _require_loaded(self, action: str) -> None:
        if self._state.status != LedgerStatus.LOADED:
            raise LedgerStateError(
                f"Cannot {action} before the ledger is loaded; call startup() first"
            )

    def _failed(
        self,
        operation: str,
        error: PersistenceError,
        correlation_id: UUID,
        expense_id: Optional[int] = None,
    ) -> ActionResult:
        if self._audit_logger:
            self._audit_logger.log_persistence_failed(
                operation=operation,
                error_message=str(error),
                correlation_id=correlation_id,
            )
        return ActionResult(
            outcome=ActionOutcome.FAILED,
            expense_id=expense_id,
            error_message=str(error),
            error=error,
        )


def create_ledger_controller(
    database_url: Optional[str] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> LedgerController:
    """
    Factory function to create a controller over the local SQLite store.

    Args:
        database_url: Overrides LEDGER_DB_URL when given
        clock: Source of "now"; defaults to the local wall clock

    Returns:
        A controller in the Idle state; await startup() before use
    """
    app_settings = get_settings().app
    configure_logging(app_settings.effective_log_level)

    database = SQLiteDatabase(url=database_url)
    storage = SQLiteExpenseStorage(database)

    return LedgerController(
        storage=storage,
        audit_logger=AuditLogger(),
        clock=clock,
    )
