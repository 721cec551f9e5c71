"""
Notifications to the admin group about new candidates
"""
import logging
from typing import Optional

from telegram.error import TelegramError

from models.directives import RegistrationComplete
from services.localization import Messages

logger = logging.getLogger(__name__)


class AdminNotifier:
    """Posts a short note to the admin chat after each registration"""

    def __init__(self, bot, admin_group_id: Optional[int] = None, messages: Optional[Messages] = None):
        self.bot = bot
        self.admin_group_id = admin_group_id
        self.messages = messages or Messages()

    @property
    def enabled(self) -> bool:
        return self.admin_group_id is not None

    def format_notification(self, user_id: int, outcome: RegistrationComplete) -> str:
        """Written in the candidate's language"""
        language = outcome.language
        text = self.messages.get_message(
            "ADMIN_NEW_CANDIDATE",
            language,
            name=outcome.name,
            user_id=user_id,
            lang=language.value,
            row=outcome.row_index or "?",
        )
        if not outcome.membership_synced:
            text += "\n" + self.messages.get_message("ADMIN_MEMBERSHIP_MISSING", language)
        return text

    async def notify_new_candidate(self, user_id: int, outcome: RegistrationComplete) -> bool:
        """Returns False when nothing was delivered; never raises"""
        if not self.enabled:
            logger.debug("ADMIN_GROUP_ID not set, admin notification skipped")
            return False

        try:
            await self.bot.send_message(
                chat_id=self.admin_group_id,
                text=self.format_notification(user_id, outcome),
            )
        except TelegramError as e:
            logger.error(f"❌ Admin notification for user {user_id} failed: {e}")
            return False

        logger.info(f"📣 Admins notified about user {user_id}")
        return True
