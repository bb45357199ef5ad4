"""Services package."""

from expense_ledger.services.storage import (
    ConnectionError,
    ExecuteAck,
    ExpenseStorageInterface,
    PersistenceError,
    SQLiteDatabase,
    SQLiteExpenseStorage,
    StorageError,
)

__all__ = [
    "ConnectionError",
    "ExecuteAck",
    "ExpenseStorageInterface",
    "PersistenceError",
    "SQLiteDatabase",
    "SQLiteExpenseStorage",
    "StorageError",
]
