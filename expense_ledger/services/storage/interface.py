"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Swap SQLite for another local database later
2. Use a fake store in tests to simulate an unavailable medium
3. Keep the ledger controller decoupled from SQL

The interface is intentionally tiny. The ledger only ever creates,
lists and deletes; there is no update.
"""

import datetime as dt
from abc import ABC, abstractmethod
from typing import Optional

from expense_ledger.models.expense import ExpenseRecord


class ExpenseStorageInterface(ABC):
    """
    Abstract interface for expense storage operations.

    Every method is a single atomic statement against the store, so no
    partially written state is ever observable.
    """

    @abstractmethod
    async def initialize(self) -> None:
        """
        Make sure the expenses table exists.

        Idempotent: safe to call on every startup.

        Raises:
            ConnectionError: If the medium cannot be opened
        """
        pass

    @abstractmethod
    async def create(
        self,
        amount: float,
        category: str,
        note: Optional[str],
        date: dt.date,
    ) -> int:
        """
        Insert one expense.

        Args:
            amount: Positive amount, already validated
            category: Trimmed, non-empty category
            note: Trimmed note or None
            date: Calendar date of the expense

        Returns:
            The id assigned by the store

        Raises:
            PersistenceError: If the insert fails
        """
        pass

    @abstractmethod
    async def list_all(self) -> list[ExpenseRecord]:
        """
        Snapshot of every stored expense, newest id first.

        Raises:
            PersistenceError: If the read fails
        """
        pass

    @abstractmethod
    async def delete_by_id(self, expense_id: int) -> bool:
        """
        Delete an expense by ID.

        Deleting an id that does not exist is not an error.

        Returns:
            True if a row was removed
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class PersistenceError(StorageError):
    """A store operation failed; nothing was changed by it."""
    pass


class ConnectionError(PersistenceError):
    """Could not open the storage medium."""
    pass
