"""Tests for settings and logging setup."""

import logging

from feature_admin_api.app.core.config import reload_settings, settings
from feature_admin_api.app.core.logging_config import setup_logging


def test_defaults_are_production_safe(monkeypatch):
    monkeypatch.delenv("PROJECT_NAME", raising=False)
    reload_settings()

    assert settings.project_name == "Feature Admin API"
    assert settings.environment == "production"
    assert settings.detailed_errors is False


def test_development_environment_enables_detailed_errors(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "Development")
    reload_settings()

    assert settings.is_development is True
    assert settings.detailed_errors is True


def test_detailed_errors_flag(monkeypatch):
    monkeypatch.setenv("DETAILED_ERRORS", "yes")
    monkeypatch.setenv("PORT", "9001")
    reload_settings()

    assert settings.detailed_errors is True
    assert settings.port == 9001


def test_setup_logging_adds_rotating_file_handler(tmp_path, monkeypatch):
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    monkeypatch.setattr(root, "level", root.level)
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        named = logging.getLogger(name)
        monkeypatch.setattr(named, "level", named.level)
    logfile = tmp_path / "app.log"

    setup_logging("debug", str(logfile))
    logging.getLogger("feature_admin_api.test").debug("hello log")
    for handler in root.handlers:
        handler.flush()

    assert len(root.handlers) == 2
    assert "hello log" in logfile.read_text(encoding="utf-8")
    assert logging.getLogger("uvicorn.access").level == logging.DEBUG

    for handler in root.handlers:
        handler.close()
