"""
Registration text handler and delivery of directives
"""
import logging
from typing import Optional

from telegram import Update
from telegram.error import TelegramError
from telegram.ext import ContextTypes

from core.registration_flow import RegistrationFlow
from handlers.ui_components import DirectiveRenderer
from models.directives import Directive
from models.enums import Language
from utils.logger import log_error

logger = logging.getLogger(__name__)


class RegistrationHandler:
    """Free-text answers and the shared reply path"""

    def __init__(self, flow: RegistrationFlow, renderer: DirectiveRenderer):
        self.flow = flow
        self.renderer = renderer

    async def send_directive(self, context: ContextTypes.DEFAULT_TYPE, chat_id: int, directive: Directive):
        for message in self.renderer.render(directive):
            await context.bot.send_message(
                chat_id=chat_id,
                text=message.text,
                reply_markup=message.reply_markup,
            )

    async def handle_text(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Answer to the current step, or a field being edited"""
        if update.message is None or update.effective_user is None:
            return

        user_id = update.effective_user.id
        text = update.message.text or ""
        directive = await self.flow.handle_input(user_id, text)
        await self.send_directive(context, update.effective_chat.id, directive)

    async def error_handler(self, update: Optional[object], context: ContextTypes.DEFAULT_TYPE):
        """Log unexpected errors; the session is left as it was"""
        user_id = None
        if isinstance(update, Update) and update.effective_user:
            user_id = update.effective_user.id
        log_error(type(context.error).__name__, str(context.error), user_id)
        logger.error("Exception while handling an update", exc_info=context.error)

        if not isinstance(update, Update) or update.effective_chat is None:
            return

        language = Language.EN
        if user_id is not None:
            session = self.flow.get_session(user_id)
            if session is not None:
                language = session.language
        try:
            await context.bot.send_message(
                chat_id=update.effective_chat.id,
                text=self.renderer.messages.get_message("UNEXPECTED_ERROR", language),
            )
        except TelegramError as e:
            logger.error(f"❌ Could not report the error to the user: {e}")
