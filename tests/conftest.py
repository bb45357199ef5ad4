"""
Shared fixtures for the expense ledger tests.

Every storage-backed test gets its own SQLite file under tmp_path, and
the controller runs against a fixed clock: Friday 2024-03-15, noon.
"""

import asyncio
from datetime import date, datetime
from typing import Optional

import pytest
import pytest_asyncio

from expense_ledger.audit import AuditLogger
from expense_ledger.models.audit import AuditEvent
from expense_ledger.models.expense import ExpenseRecord
from expense_ledger.orchestrator import LedgerController
from expense_ledger.services.storage import (
    ConnectionError,
    ExpenseStorageInterface,
    PersistenceError,
    SQLiteDatabase,
    SQLiteExpenseStorage,
)


FIXED_NOW = datetime(2024, 3, 15, 12, 0, 0)


class RecordingAuditLogger(AuditLogger):
    """Keeps every event in memory instead of only writing it out."""

    def __init__(self):
        super().__init__()
        self.events: list[AuditEvent] = []

    def log(self, event: AuditEvent) -> bool:
        self.events.append(event)
        return True

    def event_types(self) -> list[str]:
        return [event.event_type.value for event in self.events]


class FlakyStorage(ExpenseStorageInterface):
    """
    Wraps a real store and fails selected operations on demand.

    Set `fail_create`, `fail_list` or `fail_delete` to True to make the
    next calls raise PersistenceError. `create_gate`, when set, holds
    every create until the event fires.
    """

    def __init__(self, inner: ExpenseStorageInterface):
        self._inner = inner
        self.fail_create = False
        self.fail_list = False
        self.fail_delete = False
        self.create_gate: Optional[asyncio.Event] = None
        self.create_calls = 0

    async def initialize(self) -> None:
        await self._inner.initialize()

    async def create(self, amount, category, note, date) -> int:
        self.create_calls += 1
        if self.create_gate is not None:
            await self.create_gate.wait()
        if self.fail_create:
            raise PersistenceError("disk full")
        return await self._inner.create(amount, category, note, date)

    async def list_all(self) -> list[ExpenseRecord]:
        if self.fail_list:
            raise ConnectionError("database is locked")
        return await self._inner.list_all()

    async def delete_by_id(self, expense_id: int) -> bool:
        if self.fail_delete:
            raise PersistenceError("database is read-only")
        return await self._inner.delete_by_id(expense_id)


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def db_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'expenses.db'}"


@pytest_asyncio.fixture
async def storage(db_url):
    store = SQLiteExpenseStorage(SQLiteDatabase(url=db_url, connect_retries=1))
    await store.initialize()
    yield store
    await store.close()


@pytest.fixture
def audit_logger() -> RecordingAuditLogger:
    return RecordingAuditLogger()


@pytest_asyncio.fixture
async def controller(storage, audit_logger, fixed_clock) -> LedgerController:
    ledger = LedgerController(
        storage=storage,
        audit_logger=audit_logger,
        clock=fixed_clock,
    )
    await ledger.startup()
    return ledger


@pytest_asyncio.fixture
async def flaky_storage(storage) -> FlakyStorage:
    return FlakyStorage(storage)


@pytest_asyncio.fixture
async def flaky_controller(flaky_storage, audit_logger, fixed_clock) -> LedgerController:
    ledger = LedgerController(
        storage=flaky_storage,
        audit_logger=audit_logger,
        clock=fixed_clock,
    )
    await ledger.startup()
    return ledger


def make_record(
    expense_id: int,
    day: date,
    amount: float = 10.0,
    category: str = "Food",
    note: Optional[str] = None,
) -> ExpenseRecord:
    return ExpenseRecord(
        id=expense_id,
        amount=amount,
        category=category,
        note=note,
        date=day,
    )
