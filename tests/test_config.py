"""Tests for settings and the audit logger."""

import pytest
from pydantic import ValidationError

from expense_ledger.audit import AuditLogger, create_correlation_id
from expense_ledger.config import AppSettings, StorageSettings, validate_all_settings
from expense_ledger.models.audit import AuditEventBuilder


class TestStorageSettings:
    """Tests for StorageSettings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("LEDGER_DB_URL", raising=False)
        settings = StorageSettings()
        assert settings.url == "sqlite+aiosqlite:///./expenses.db"
        assert settings.connect_retries == 3

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("LEDGER_DB_URL", "sqlite+aiosqlite:////tmp/ledger.db")
        monkeypatch.setenv("LEDGER_DB_ECHO", "true")
        settings = StorageSettings()
        assert settings.url == "sqlite+aiosqlite:////tmp/ledger.db"
        assert settings.echo is True

    def test_rejects_non_sqlite_url(self, monkeypatch):
        monkeypatch.setenv("LEDGER_DB_URL", "postgresql://localhost/ledger")
        with pytest.raises(ValidationError, match="Unsupported database URL"):
            StorageSettings()

    def test_validate_all_settings_reports_errors(self, monkeypatch):
        monkeypatch.setenv("LEDGER_DB_URL", "mysql://nope")
        results = validate_all_settings()
        assert results["storage"] is False
        assert "storage_error" in results
        assert results["app"] is True


class TestAppSettings:
    """Tests for AppSettings."""

    def test_log_level_normalized(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", " warning ")
        monkeypatch.delenv("DEBUG_MODE", raising=False)
        settings = AppSettings()
        assert settings.log_level == "WARNING"
        assert settings.effective_log_level == "WARNING"

    def test_debug_mode_forces_debug_level(self, monkeypatch):
        monkeypatch.setenv("DEBUG_MODE", "true")
        assert AppSettings().effective_log_level == "DEBUG"

    def test_rejects_unknown_log_level(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "chatty")
        with pytest.raises(ValidationError):
            AppSettings()


class TestAuditLogger:
    """Tests for AuditLogger."""

    def test_log_returns_true(self):
        logger = AuditLogger()
        event = AuditEventBuilder.expense_deleted(
            expense_id=1,
            correlation_id=create_correlation_id(),
        )
        assert logger.log(event) is True

    def test_helpers_do_not_raise(self):
        logger = AuditLogger()
        logger.log_expense_created(expense_id=1, amount=2.0, category="Food")
        logger.log_expense_rejected(issues=[])
        logger.log_persistence_failed(operation="create", error_message="boom")
        logger.log_filter_window_changed(previous="all", current="week")
