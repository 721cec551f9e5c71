"""
Callback query (button) handlers
"""
import logging
from typing import Optional, Tuple

from telegram import Update
from telegram.error import BadRequest
from telegram.ext import ContextTypes

from core.registration_flow import RegistrationFlow
from handlers.registration import RegistrationHandler
from models.directives import ErrorNotice
from models.enums import Language

logger = logging.getLogger(__name__)


def parse_callback_data(data: str) -> Optional[Tuple[str, ...]]:
    """
    Split callback data into (action, *args).

    lang:<code>, ans:<FIELD>:<VALUE>, edit:<FIELD> and confirm are
    recognised; anything else returns None.
    """
    if not data:
        return None
    if data == "confirm":
        return ("confirm",)

    action, _, rest = data.partition(":")
    if action == "lang" and rest:
        return ("lang", rest)
    if action == "edit" and rest:
        return ("edit", rest)
    if action == "ans":
        field_key, _, value = rest.partition(":")
        if field_key and value:
            return ("ans", field_key, value)
    return None


class CallbackHandlers:
    """Handlers of inline keyboard buttons"""

    def __init__(self, flow: RegistrationFlow, registration: RegistrationHandler):
        self.flow = flow
        self.registration = registration

    async def handle_callback_query(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Main callback handler"""
        query = update.callback_query
        user_id = query.from_user.id
        parsed = parse_callback_data(query.data)

        if parsed is None:
            logger.warning(f"⚠️ User {user_id}: unknown callback data {query.data!r}")
            await self._answer_outdated(query, user_id)
            return

        action, *args = parsed
        if action == "lang":
            directive = await self.flow.select_language(user_id, args[0])
        elif action == "ans":
            directive = await self.flow.answer_choice(user_id, args[0], args[1])
        elif action == "edit":
            directive = await self.flow.begin_edit(user_id, args[0])
        else:
            directive = await self.flow.confirm(user_id)

        if directive is None:
            await self._answer_outdated(query, user_id)
            return

        await query.answer()
        if not isinstance(directive, ErrorNotice):
            # drop the keyboard that was just used; an error keeps it for a retry
            try:
                await query.edit_message_reply_markup(reply_markup=None)
            except BadRequest as e:
                logger.debug(f"Keyboard not removed: {e}")
        await self.registration.send_directive(context, query.message.chat_id, directive)

    async def _answer_outdated(self, query, user_id: int):
        session = self.flow.get_session(user_id)
        language = session.language if session else Language.EN
        text = self.registration.renderer.messages.get_message("OUTDATED_BUTTON", language)
        await query.answer(text=text, show_alert=False)
