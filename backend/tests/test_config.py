"""
Tests for settings and logging configuration
"""
import json
import logging

from webcalc.core.config import Settings, get_settings
from webcalc.core.logging_config import ContextualFormatter, LoggingConfig, SensitiveDataFilter
from webcalc.core.middleware_metrics import normalize_endpoint


def test_database_dsn_overrides_postgres(monkeypatch):
    monkeypatch.setenv("DATABASE_DSN", "sqlite:///./other.db")
    assert Settings().database_url == "sqlite:///./other.db"


def test_postgres_url(monkeypatch):
    monkeypatch.delenv("DATABASE_DSN", raising=False)
    monkeypatch.setenv("POSTGRES_HOST", "db")
    monkeypatch.setenv("POSTGRES_USER", "calc")
    monkeypatch.setenv("POSTGRES_PASSWORD", "pw")
    monkeypatch.setenv("POSTGRES_DB", "calcdb")
    assert Settings().database_url == "postgresql://calc:pw@db:5432/calcdb"


def test_defaults():
    settings = get_settings()
    assert settings.history_display_limit == 10
    assert settings.window_key_prefix == "calc_"
    assert settings.enable_tracing is False


def test_allowed_origins_list(monkeypatch):
    monkeypatch.setenv("ALLOWED_ORIGINS", "http://a.test, http://b.test,")
    assert Settings().allowed_origins_list == ["http://a.test", "http://b.test"]


def test_sensitive_data_is_masked():
    record = logging.LogRecord("webcalc", logging.INFO, __file__, 1,
                               "connecting to postgresql://calc:hunter2@db/calc", None, None)
    SensitiveDataFilter().filter(record)
    assert "hunter2" not in record.getMessage()


def test_json_formatter_includes_context_and_extra():
    LoggingConfig.set_context(request_id="req-1")
    try:
        record = logging.LogRecord("webcalc", logging.INFO, __file__, 1, "Calculation completed", None, None)
        record.window_id = "w1"
        payload = json.loads(ContextualFormatter().format(record))
    finally:
        LoggingConfig.clear_context()

    assert payload["message"] == "Calculation completed"
    assert payload["request_id"] == "req-1"
    assert payload["window_id"] == "w1"


def test_normalize_endpoint():
    path = "/api/calculator/windows/0b8f6a4e-2c1d-4e5f-9a7b-3c2d1e0f9a8b/press"
    assert normalize_endpoint(path) == "/api/calculator/windows/{id}/press"
