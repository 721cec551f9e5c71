#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Entry point of the registration bot
"""
import logging

from dotenv import load_dotenv

from config.settings import BotConfig
from core.bot import RegistrationBot
from core.exceptions import ConfigurationError
from core.registration_flow import RegistrationFlow
from core.review import ReviewController
from core.step_engine import StepEngine
from handlers.ui_components import DirectiveRenderer
from services.localization import Messages
from services.session_store import SessionStore
from services.sheets_client import GoogleSheetsClient
from services.submission import SubmissionPipeline
from utils.logger import setup_logging

logger = logging.getLogger(__name__)


def create_config() -> BotConfig:
    try:
        return BotConfig()
    except ValueError as e:
        raise ConfigurationError(f"Invalid numeric setting: {e}") from e


def check_config(config: BotConfig) -> None:
    errors = config.validate()
    if errors:
        for error in errors:
            logger.error(f"❌ {error}")
        raise ConfigurationError("; ".join(errors))
    logger.info("✅ Configuration is valid")


def build_bot(config: BotConfig) -> RegistrationBot:
    """Connect to the spreadsheet and assemble the bot"""
    sheets = GoogleSheetsClient(
        spreadsheet_id=config.google_sheets_id,
        credentials_json=config.google_credentials_json,
        credentials_path=config.google_service_account_path,
        read_retries=config.store_read_retries,
    )
    sheets.initialize()
    sheets.verify_connection()

    store = SessionStore(idle_timeout=config.session_idle_timeout)
    pipeline = SubmissionPipeline(
        sheets,
        registration_sheet=config.registration_sheet,
        membership_sheet=config.membership_sheet,
        membership_status=config.membership_initial_status,
    )
    flow = RegistrationFlow(store, StepEngine(), ReviewController(pipeline), pipeline)
    renderer = DirectiveRenderer(Messages(config.messages_file), location_url=config.location_url)
    return RegistrationBot(config, flow, renderer)


def main() -> None:
    """Start the bot"""
    load_dotenv()
    config = create_config()

    bot_logger = setup_logging(config.log_level_value, log_dir=config.log_dir)
    bot_logger.log_startup_info(config.to_log_dict())
    check_config(config)

    bot = build_bot(config)
    bot.run()


if __name__ == '__main__':
    main()
