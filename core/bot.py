#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Main bot class of the registration bot
"""

import logging
from typing import Optional

from telegram import Update
from telegram.ext import (
    Application,
    CommandHandler,
    CallbackQueryHandler,
    MessageHandler,
    filters
)

from config.settings import BotConfig
from core.registration_flow import RegistrationFlow
from handlers.callbacks import CallbackHandlers
from handlers.commands import CommandHandlers
from handlers.registration import RegistrationHandler
from handlers.ui_components import DirectiveRenderer
from services.admin_notifier import AdminNotifier
from services.health_check import HealthCheckServer

logger = logging.getLogger(__name__)


class RegistrationBot:
    """Wires the registration flow into a python-telegram-bot Application"""

    def __init__(self, config: BotConfig, flow: RegistrationFlow, renderer: DirectiveRenderer):
        """
        Args:
            config: BotConfig instance
            flow: Registration flow shared by every handler
            renderer: Directive renderer
        """
        self.config = config
        self.flow = flow
        self.store = flow.store

        self.registration = RegistrationHandler(flow, renderer)
        self.commands = CommandHandlers(flow, self.registration, config.admin_group_id)
        self.callbacks = CallbackHandlers(flow, self.registration)

        self.health_server: Optional[HealthCheckServer] = None
        if config.health_port:
            self.health_server = HealthCheckServer(
                host=config.host,
                port=config.health_port,
                session_store=self.store,
                mode="webhook" if config.use_webhook else "polling",
            )

        self.application = Application.builder() \
            .token(config.telegram_token) \
            .post_init(self._post_init) \
            .post_shutdown(self._post_shutdown) \
            .build()
        self.flow.attach_notifier(AdminNotifier(self.application.bot, config.admin_group_id, renderer.messages))
        self._setup_handlers()

        logger.info(f"🤖 Bot initialized. Mode: {'webhook' if config.use_webhook else 'polling'}")

    def _setup_handlers(self):
        """Register command, button and text handlers"""
        app = self.application
        app.add_handler(CommandHandler("start", self.commands.start_command))
        app.add_handler(CommandHandler("restart", self.commands.restart_command))
        app.add_handler(CommandHandler("cancel", self.commands.cancel_command))
        app.add_handler(CommandHandler("help", self.commands.help_command))
        app.add_handler(CommandHandler("status", self.commands.status_command))
        app.add_handler(CommandHandler("stats", self.commands.stats_command))

        app.add_handler(CallbackQueryHandler(self.callbacks.handle_callback_query))

        app.add_handler(MessageHandler(
            filters.TEXT & ~filters.COMMAND & filters.ChatType.PRIVATE,
            self.registration.handle_text
        ))

        app.add_error_handler(self.registration.error_handler)
        logger.info("✅ Handlers registered")

    async def _post_init(self, application: Application):
        """Called once the application is initialized"""
        self.store.start_cleanup(self.config.cleanup_interval)
        if self.health_server is not None:
            await self.health_server.start()
        logger.info("✅ Bot is ready")

    async def _post_shutdown(self, application: Application):
        """Called when the application shuts down"""
        logger.info("🛑 Bot is shutting down...")
        await self.store.stop_cleanup()
        if self.health_server is not None:
            await self.health_server.stop()
        logger.info(f"📊 Sessions dropped at shutdown: {self.store.get_session_count()}")

    def run(self):
        """Run in webhook mode when WEBHOOK_URL is set, polling otherwise"""
        if self.config.use_webhook:
            webhook_url = f"{self.config.webhook_url.rstrip('/')}/{self.config.telegram_token}"
            logger.info(f"🌐 Starting webhook on {self.config.host}:{self.config.port}")
            self.application.run_webhook(
                listen=self.config.host,
                port=self.config.port,
                url_path=self.config.telegram_token,
                webhook_url=webhook_url,
                allowed_updates=[Update.MESSAGE, Update.CALLBACK_QUERY],
                drop_pending_updates=True,
            )
        else:
            logger.info("🔄 Starting bot in polling mode...")
            self.application.run_polling(
                allowed_updates=[Update.MESSAGE, Update.CALLBACK_QUERY],
                drop_pending_updates=True,
            )
