"""
SQLite Storage Implementation

DESIGN DECISION: A single local SQLite file is the storage backend because:
1. Expenses are personal and never leave the device
2. No database server to set up
3. One table, one row per expense

SQLAlchemy's async engine (aiosqlite driver) is used only as a connection
and statement runner; the SQL itself is plain and lives in this module.

TRADEOFFS:
- NullPool opens a connection per operation. Slower, but the engine can be
  driven from a fresh event loop on every UI interaction.
- No multi-statement transactions (the ledger never needs one)
"""

import datetime as dt
from dataclasses import dataclass
from typing import Any, Optional

import structlog
from pydantic import ValidationError
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from expense_ledger.config import get_settings
from expense_ledger.models.expense import ExpenseRecord
from expense_ledger.services.storage.interface import (
    ConnectionError,
    ExpenseStorageInterface,
    PersistenceError,
)


EXPENSES_SCHEMA = """
CREATE TABLE IF NOT EXISTS expenses (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    amount REAL NOT NULL,
    category TEXT NOT NULL,
    note TEXT,
    date TEXT NOT NULL
)
"""

INSERT_EXPENSE = (
    "INSERT INTO expenses (amount, category, note, date) "
    "VALUES (:amount, :category, :note, :date)"
)
SELECT_ALL_EXPENSES = (
    "SELECT id, amount, category, note, date FROM expenses ORDER BY id DESC"
)
DELETE_EXPENSE = "DELETE FROM expenses WHERE id = :id"


logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ExecuteAck:
    """Acknowledgement of a write statement."""
    rowcount: int
    lastrowid: Optional[int] = None


class SQLiteDatabase:
    """
    Low-level SQLite client wrapper.

    Provides the three capabilities the store needs: schema creation,
    write statements and read queries. Driver errors are translated to
    storage exceptions here and nowhere else.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        echo: Optional[bool] = None,
        connect_retries: Optional[int] = None,
    ):
        if url is None:
            settings = get_settings().storage
            url = settings.url
            echo = settings.echo if echo is None else echo
            connect_retries = connect_retries or settings.connect_retries

        self._url = url
        self._echo = bool(echo)
        self._connect_retries = connect_retries or 3
        self._engine: Optional[AsyncEngine] = None

    @property
    def url(self) -> str:
        return self._url

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            self._engine = create_async_engine(
                self._url,
                echo=self._echo,
                poolclass=NullPool,
            )
        return self._engine

    async def initialize_schema(self) -> None:
        """
        Create the expenses table if it does not exist.

        Retries with exponential backoff while the file is locked or
        cannot be opened.
        """
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self._connect_retries),
                wait=wait_exponential(multiplier=1, min=1, max=8),
                retry=retry_if_exception_type(OperationalError),
                reraise=True,
            ):
                with attempt:
                    async with self.engine.begin() as conn:
                        await conn.execute(text(EXPENSES_SCHEMA))
        except OperationalError as e:
            raise ConnectionError(f"Failed to open expense database: {e}") from e
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to create expenses table: {e}") from e

        logger.debug("schema_ready", url=self._url)

    async def execute(self, sql: str, params: Optional[dict[str, Any]] = None) -> ExecuteAck:
        """Run one write statement in its own transaction."""
        try:
            async with self.engine.begin() as conn:
                result = await conn.execute(text(sql), params or {})
                return ExecuteAck(
                    rowcount=result.rowcount,
                    lastrowid=result.lastrowid,
                )
        except IntegrityError as e:
            raise PersistenceError(f"Constraint violated: {e.orig}") from e
        except OperationalError as e:
            raise ConnectionError(f"Expense database unavailable: {e.orig}") from e
        except SQLAlchemyError as e:
            raise PersistenceError(f"Write failed: {e}") from e

    async def query(
        self,
        sql: str,
        params: Optional[dict[str, Any]] = None,
    ) -> list[dict[str, Any]]:
        """Run one read query and return its rows as dictionaries."""
        try:
            async with self.engine.connect() as conn:
                result = await conn.execute(text(sql), params or {})
                return [dict(row) for row in result.mappings().all()]
        except OperationalError as e:
            raise ConnectionError(f"Expense database unavailable: {e.orig}") from e
        except SQLAlchemyError as e:
            raise PersistenceError(f"Read failed: {e}") from e

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None


class SQLiteExpenseStorage(ExpenseStorageInterface):
    """
    SQLite implementation of expense storage.

    Rows map one-to-one onto ExpenseRecord; dates are stored as ISO text.
    """

    def __init__(self, database: SQLiteDatabase):
        self._db = database

    async def initialize(self) -> None:
        await self._db.initialize_schema()

    async def create(
        self,
        amount: float,
        category: str,
        note: Optional[str],
        date: dt.date,
    ) -> int:
        ack = await self._db.execute(
            INSERT_EXPENSE,
            {
                "amount": amount,
                "category": category,
                "note": note,
                "date": date.isoformat() if date is not None else None,
            },
        )
        if ack.lastrowid is None:
            raise PersistenceError("Store did not assign an id to the new expense")

        logger.debug("expense_inserted", expense_id=ack.lastrowid)
        return ack.lastrowid

    async def list_all(self) -> list[ExpenseRecord]:
        rows = await self._db.query(SELECT_ALL_EXPENSES)
        try:
            return [self._row_to_record(row) for row in rows]
        except ValidationError as e:
            raise PersistenceError(f"Corrupt expense row in store: {e}") from e

    async def delete_by_id(self, expense_id: int) -> bool:
        ack = await self._db.execute(DELETE_EXPENSE, {"id": expense_id})
        return ack.rowcount > 0

    async def close(self) -> None:
        await self._db.dispose()

    def _row_to_record(self, row: dict[str, Any]) -> ExpenseRecord:
        """Convert a table row to an ExpenseRecord."""
        return ExpenseRecord(
            id=row["id"],
            amount=row["amount"],
            category=row["category"],
            note=row["note"],
            date=dt.date.fromisoformat(row["date"]),
        )
