# tests/test_settings.py
"""Tests for environment configuration (config/settings.py)."""

import logging
from datetime import timedelta

import pytest

from config.settings import BotConfig

ENV_VARS = [
    "TELEGRAM_BOT_TOKEN", "BOT_TOKEN", "GOOGLE_SHEETS_ID", "GOOGLE_CREDENTIALS_JSON",
    "GOOGLE_SERVICE_ACCOUNT_PATH", "REGISTRATION_SHEET", "MEMBERSHIP_SHEET",
    "MEMBERSHIP_INITIAL_STATUS", "SESSION_IDLE_MINUTES", "CLEANUP_INTERVAL_MINUTES",
    "STORE_READ_RETRIES", "ADMIN_GROUP_ID", "LOCATION_URL", "WEBHOOK_URL", "HOST",
    "PORT", "HEALTH_PORT", "LOG_LEVEL", "LOG_DIR",
]


@pytest.fixture
def env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "123:abc")
    monkeypatch.setenv("GOOGLE_SHEETS_ID", "sheet-id")
    monkeypatch.setenv("GOOGLE_CREDENTIALS_JSON", '{"type": "service_account"}')
    return monkeypatch


def test_defaults(env):
    config = BotConfig()

    assert config.registration_sheet == "Registration"
    assert config.membership_sheet == "WORKERS"
    assert config.membership_initial_status == "WAITING"
    assert config.session_idle_timeout == timedelta(hours=24)
    assert config.cleanup_interval == timedelta(minutes=30)
    assert config.admin_group_id is None
    assert config.use_webhook is False
    assert config.log_level_value == logging.INFO
    assert config.validate() == []


def test_bot_token_fallback(env):
    env.delenv("TELEGRAM_BOT_TOKEN")
    env.setenv("BOT_TOKEN", "456:def")
    assert BotConfig().telegram_token == "456:def"


def test_admin_group_and_webhook(env):
    env.setenv("ADMIN_GROUP_ID", "-100123")
    env.setenv("WEBHOOK_URL", "https://bot.example.com")

    config = BotConfig()

    assert config.admin_group_id == -100123
    assert config.use_webhook is True
    assert config.to_log_dict()["mode"] == "webhook"


def test_non_numeric_value_raises(env):
    env.setenv("SESSION_IDLE_MINUTES", "a day")
    with pytest.raises(ValueError):
        BotConfig()


def test_validate_reports_every_problem(env):
    env.delenv("TELEGRAM_BOT_TOKEN")
    env.delenv("GOOGLE_CREDENTIALS_JSON")
    env.setenv("SESSION_IDLE_MINUTES", "0")
    env.setenv("LOG_LEVEL", "chatty")

    errors = BotConfig().validate()

    assert "TELEGRAM_BOT_TOKEN is not set" in errors
    assert "GOOGLE_CREDENTIALS_JSON or GOOGLE_SERVICE_ACCOUNT_PATH must be set" in errors
    assert "SESSION_IDLE_MINUTES must be positive" in errors
    assert "Unknown LOG_LEVEL: chatty" in errors


def test_missing_service_account_file(env, tmp_path):
    env.delenv("GOOGLE_CREDENTIALS_JSON")
    env.setenv("GOOGLE_SERVICE_ACCOUNT_PATH", str(tmp_path / "missing.json"))
    errors = BotConfig().validate()
    assert any(error.startswith("Service account file not found") for error in errors)
