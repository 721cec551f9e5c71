"""
Bot command handlers
"""
import logging
from typing import Optional

from telegram import Update
from telegram.ext import ContextTypes

from core.registration_flow import RegistrationFlow
from handlers.registration import RegistrationHandler
from models.enums import FieldKey, Language

logger = logging.getLogger(__name__)


class CommandHandlers:
    """/start, /restart, /cancel, /help, /status and /stats"""

    def __init__(self, flow: RegistrationFlow, registration: RegistrationHandler,
                 admin_group_id: Optional[int] = None):
        self.flow = flow
        self.registration = registration
        self.admin_group_id = admin_group_id

    @property
    def messages(self):
        return self.registration.renderer.messages

    async def start_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Handler for /start"""
        user = update.effective_user
        chat = update.effective_chat
        logger.info(f"▶️ /start from user {user.id}")

        directive = await self.flow.start(user.id, chat.id)
        await self.registration.send_directive(context, chat.id, directive)

    async def restart_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Handler for /restart: drop the answers and begin again"""
        user = update.effective_user
        chat = update.effective_chat
        logger.info(f"🔄 /restart from user {user.id}")

        directive = await self.flow.restart(user.id, chat.id)
        await self.registration.send_directive(context, chat.id, directive)

    async def cancel_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        user = update.effective_user
        directive = await self.flow.cancel(user.id)
        await self.registration.send_directive(context, update.effective_chat.id, directive)

    async def help_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        await update.message.reply_text(self.messages.get_message("HELP", self._language(update)))

    async def status_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Progress of the caller's registration"""
        session = self.flow.get_session(update.effective_user.id)
        if session is None:
            await update.message.reply_text(self.messages.get_message("NOT_STARTED", Language.EN))
            return

        text = self.messages.get_message(
            "STATUS",
            session.language,
            answered=session.answered_count,
            total=len(FieldKey),
            step=session.current_step.name,
        )
        await update.message.reply_text(text)

    async def stats_command(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Funnel counters; restricted to the admin group when one is configured"""
        if self.admin_group_id is not None and update.effective_chat.id != self.admin_group_id:
            logger.warning(f"⚠️ /stats refused in chat {update.effective_chat.id}")
            return

        store = self.flow.store
        text = (
            f"📊 Active sessions: {store.get_session_count()}\n\n"
            f"{store.stats.get_stats_str()}"
        )
        await update.message.reply_text(text)

    def _language(self, update: Update) -> Language:
        session = self.flow.get_session(update.effective_user.id)
        return session.language if session else Language.EN
