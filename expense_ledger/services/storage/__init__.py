"""
Storage Services Package

Provides the abstract interface and the SQLite implementation for the
expenses table.
"""

from expense_ledger.services.storage.interface import (
    ConnectionError,
    ExpenseStorageInterface,
    PersistenceError,
    StorageError,
)
from expense_ledger.services.storage.sqlite import (
    ExecuteAck,
    SQLiteDatabase,
    SQLiteExpenseStorage,
)

__all__ = [
    # Interfaces
    "ExpenseStorageInterface",
    # Exceptions
    "ConnectionError",
    "PersistenceError",
    "StorageError",
    # SQLite implementation
    "ExecuteAck",
    "SQLiteDatabase",
    "SQLiteExpenseStorage",
]
