#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Bot configuration
"""

import logging
import os
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional

CONFIG_DIR = Path(__file__).resolve().parent


def _env_int(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


def _env_optional_int(name: str) -> Optional[int]:
    value = os.getenv(name, "").strip()
    return int(value) if value else None


@dataclass
class BotConfig:
    """Bot configuration, read from the environment"""

    # Tokens and credentials
    telegram_token: str = field(
        default_factory=lambda: os.getenv('TELEGRAM_BOT_TOKEN') or os.getenv('BOT_TOKEN', '')
    )
    google_sheets_id: str = field(default_factory=lambda: os.getenv('GOOGLE_SHEETS_ID', ''))
    google_credentials_json: str = field(default_factory=lambda: os.getenv('GOOGLE_CREDENTIALS_JSON', ''))
    google_service_account_path: str = field(
        default_factory=lambda: os.getenv('GOOGLE_SERVICE_ACCOUNT_PATH', '')
    )

    # Spreadsheet layout
    registration_sheet: str = field(default_factory=lambda: os.getenv('REGISTRATION_SHEET', 'Registration'))
    membership_sheet: str = field(default_factory=lambda: os.getenv('MEMBERSHIP_SHEET', 'WORKERS'))
    membership_initial_status: str = field(
        default_factory=lambda: os.getenv('MEMBERSHIP_INITIAL_STATUS', 'WAITING')
    )

    # Sessions
    session_idle_minutes: int = field(default_factory=lambda: _env_int('SESSION_IDLE_MINUTES', 1440))
    cleanup_interval_minutes: int = field(default_factory=lambda: _env_int('CLEANUP_INTERVAL_MINUTES', 30))
    store_read_retries: int = field(default_factory=lambda: _env_int('STORE_READ_RETRIES', 2))

    # Notifications
    admin_group_id: Optional[int] = field(default_factory=lambda: _env_optional_int('ADMIN_GROUP_ID'))
    location_url: str = field(default_factory=lambda: os.getenv('LOCATION_URL', ''))

    # Server settings
    webhook_url: str = field(default_factory=lambda: os.getenv('WEBHOOK_URL', ''))
    host: str = field(default_factory=lambda: os.getenv('HOST', '0.0.0.0'))
    port: int = field(default_factory=lambda: _env_int('PORT', 8443))
    health_port: int = field(default_factory=lambda: _env_int('HEALTH_PORT', 10000))

    # Logging
    log_level: str = field(default_factory=lambda: os.getenv('LOG_LEVEL', 'INFO'))
    log_dir: str = field(default_factory=lambda: os.getenv('LOG_DIR', 'logs'))

    messages_file: Path = field(default_factory=lambda: CONFIG_DIR / 'messages.yaml')

    @property
    def session_idle_timeout(self) -> timedelta:
        return timedelta(minutes=self.session_idle_minutes)

    @property
    def cleanup_interval(self) -> timedelta:
        return timedelta(minutes=self.cleanup_interval_minutes)

    @property
    def log_level_value(self) -> int:
        level = logging.getLevelName(self.log_level.upper())
        return level if isinstance(level, int) else logging.INFO

    @property
    def use_webhook(self) -> bool:
        return bool(self.webhook_url)

    def validate(self) -> List[str]:
        """Configuration problems; an empty list means the bot can start"""
        errors = []

        if not self.telegram_token:
            errors.append("TELEGRAM_BOT_TOKEN is not set")
        if not self.google_sheets_id:
            errors.append("GOOGLE_SHEETS_ID is not set")
        if not self.google_credentials_json and not self.google_service_account_path:
            errors.append("GOOGLE_CREDENTIALS_JSON or GOOGLE_SERVICE_ACCOUNT_PATH must be set")
        elif self.google_service_account_path and not self.google_credentials_json:
            if not Path(self.google_service_account_path).is_file():
                errors.append(f"Service account file not found: {self.google_service_account_path}")

        if not self.registration_sheet or not self.membership_sheet:
            errors.append("Sheet names must not be empty")
        if self.session_idle_minutes <= 0:
            errors.append("SESSION_IDLE_MINUTES must be positive")
        if self.cleanup_interval_minutes <= 0:
            errors.append("CLEANUP_INTERVAL_MINUTES must be positive")
        if self.store_read_retries < 0:
            errors.append("STORE_READ_RETRIES must not be negative")
        if not 0 <= self.health_port <= 65535:
            errors.append(f"HEALTH_PORT out of range: {self.health_port}")
        if not 0 < self.port <= 65535:
            errors.append(f"PORT out of range: {self.port}")
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            errors.append(f"Unknown LOG_LEVEL: {self.log_level}")
        if not Path(self.messages_file).is_file():
            errors.append(f"Messages file not found: {self.messages_file}")

        return errors

    def to_log_dict(self) -> Dict[str, Any]:
        """Configuration summary for the start-up log"""
        return {
            'telegram_token': self.telegram_token,
            'google_sheets_id': self.google_sheets_id,
            'google_credentials_json': self.google_credentials_json,
            'google_service_account_path': self.google_service_account_path or 'NOT SET',
            'registration_sheet': self.registration_sheet,
            'membership_sheet': self.membership_sheet,
            'session_idle_minutes': self.session_idle_minutes,
            'cleanup_interval_minutes': self.cleanup_interval_minutes,
            'admin_group_id': self.admin_group_id,
            'mode': 'webhook' if self.use_webhook else 'polling',
            'health_port': self.health_port or 'disabled',
        }
