#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Logging setup
"""

import logging
import sys
from pathlib import Path
from datetime import datetime
from typing import Any, Optional

SECRET_SUFFIXES = ("key", "token", "json", "credentials")


def mask_value(value: Any, visible: int = 2) -> str:
    """Keep the first characters of a value and hide the rest"""
    if value is None or value == "":
        return "NOT SET"
    text = str(value)
    if len(text) <= visible:
        return "*" * len(text)
    return text[:visible] + "*" * min(len(text) - visible, 8)


class BotLogger:
    """Logging configuration of the bot"""

    def __init__(self, log_dir: str = "logs", log_level: int = logging.INFO):
        self.log_dir = Path(log_dir)
        self.log_level = log_level
        self._setup_done = False

    def setup(self, bot_name: str = "registration_bot"):
        """Console + daily file handlers on the root logger"""
        if self._setup_done:
            return

        self.log_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d")
        log_file = self.log_dir / f"{bot_name}_{timestamp}.log"

        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(formatter)
        file_handler.setLevel(self.log_level)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        console_handler.setLevel(self.log_level)

        root_logger = logging.getLogger()
        root_logger.setLevel(self.log_level)
        root_logger.handlers.clear()
        root_logger.addHandler(file_handler)
        root_logger.addHandler(console_handler)

        # third-party noise
        logging.getLogger('telegram').setLevel(logging.WARNING)
        logging.getLogger('httpx').setLevel(logging.WARNING)
        logging.getLogger('googleapiclient').setLevel(logging.WARNING)
        logging.getLogger('aiohttp.access').setLevel(logging.WARNING)
        logging.getLogger('asyncio').setLevel(logging.WARNING)

        self._setup_done = True

        logging.info("=" * 60)
        logging.info(f"🚀 Bot started: {bot_name}")
        logging.info(f"📁 Logs are written to: {log_file}")
        logging.info(f"📊 Log level: {logging.getLevelName(self.log_level)}")
        logging.info("=" * 60)

    def get_logger(self, name: str) -> logging.Logger:
        return logging.getLogger(name)

    def log_startup_info(self, config_info: dict):
        """Log the configuration, hiding secrets"""
        logger = self.get_logger(__name__)
        logger.info("📋 BOT CONFIGURATION:")
        for key, value in config_info.items():
            if key.lower().endswith(SECRET_SUFFIXES):
                logger.info(f"  {key}: {'***' + str(value)[-4:] if value else 'NOT SET'}")
            else:
                logger.info(f"  {key}: {value}")
        logger.info("=" * 60)

    def log_session_event(self, user_id: int, event: str, details: str = ""):
        logger = self.get_logger("session")
        message = f"👤 User {user_id}: {event}"
        if details:
            message += f" - {details}"
        logger.info(message)

    def log_step_event(self, user_id: int, field_name: str, value: Any = None):
        """Record an accepted answer; the value itself is masked"""
        logger = self.get_logger("registration")
        logger.info(f"📝 User {user_id}: {field_name} = {mask_value(value)}")

    def log_error(self, error_type: str, error_message: str, user_id: Optional[int] = None):
        logger = self.get_logger("error")
        if user_id:
            logger.error(f"💥 User {user_id}: {error_type} - {error_message}")
        else:
            logger.error(f"💥 {error_type} - {error_message}")


bot_logger = BotLogger()


def setup_logging(log_level: int = logging.INFO, bot_name: str = "registration_bot",
                  log_dir: str = "logs") -> BotLogger:
    bot_logger.log_level = log_level
    bot_logger.log_dir = Path(log_dir)
    bot_logger.setup(bot_name)
    return bot_logger


def get_logger(name: str) -> logging.Logger:
    return bot_logger.get_logger(name)


def log_session_event(user_id: int, event: str, details: str = ""):
    bot_logger.log_session_event(user_id, event, details)


def log_step_event(user_id: int, field_name: str, value: Any = None):
    bot_logger.log_step_event(user_id, field_name, value)


def log_error(error_type: str, error_message: str, user_id: Optional[int] = None):
    bot_logger.log_error(error_type, error_message, user_id)
