"""
UI components: render directives as Telegram messages
"""
from dataclasses import dataclass
from typing import List, Optional

from telegram import InlineKeyboardButton, InlineKeyboardMarkup

from models.directives import (
    AlreadyRegistered,
    Directive,
    ErrorNotice,
    NotStarted,
    PromptChoices,
    PromptField,
    RegistrationComplete,
    SessionCancelled,
    ShowReview,
)
from models.enums import CHOICE_FIELDS, FieldKey, Language, RegistrationStep
from services.localization import Messages

# buttons per keyboard row for each choice field
CHOICE_ROW_WIDTH = {
    FieldKey.TRANSPORT: 3,
    FieldKey.BANK: 2,
    FieldKey.LICENSE: 2,
}


@dataclass
class RenderedMessage:
    text: str
    reply_markup: Optional[InlineKeyboardMarkup] = None


class UIComponents:
    """Helpers for building the UI"""

    @staticmethod
    def create_progress_bar(current: int, total: int, length: int = 10) -> str:
        """
        Create a progress bar

        Args:
            current: Current value
            total: Maximum value
            length: Bar length

        Returns:
            Progress bar string
        """
        if total <= 0:
            return ""
        current = max(0, min(current, total))
        filled = int((current / total) * length)
        bar = "█" * filled + "░" * (length - filled)
        percentage = int((current / total) * 100)
        return f"{bar} {percentage}%"

    @staticmethod
    def create_button_grid(buttons: List[InlineKeyboardButton], row_width: int) -> List[List[InlineKeyboardButton]]:
        """Split buttons into rows of ``row_width``"""
        return [buttons[i:i + row_width] for i in range(0, len(buttons), row_width)]


class DirectiveRenderer:
    """Turns directives into text and inline keyboards"""

    def __init__(self, messages: Messages, location_url: str = ""):
        self.messages = messages
        self.location_url = location_url

    def render(self, directive: Directive) -> List[RenderedMessage]:
        if isinstance(directive, PromptChoices) and directive.field is None:
            return [self._render_language_choice(directive)]
        if isinstance(directive, (PromptField, PromptChoices)):
            return [self._render_prompt(directive)]
        if isinstance(directive, ShowReview):
            return self._render_review(directive)
        if isinstance(directive, RegistrationComplete):
            return self._render_complete(directive)
        if isinstance(directive, ErrorNotice):
            return [RenderedMessage(self.messages.get_message(directive.message_key, directive.language))]
        if isinstance(directive, AlreadyRegistered):
            return [RenderedMessage(self.messages.get_message("ALREADY_REGISTERED", directive.language))]
        if isinstance(directive, SessionCancelled):
            return [RenderedMessage(self.messages.get_message("CANCELLED", directive.language))]
        if isinstance(directive, NotStarted):
            return [RenderedMessage(self.messages.get_message("NOT_STARTED", directive.language))]
        raise TypeError(f"Unknown directive: {directive!r}")

    # -------------------------------------------------
    # Prompts
    # -------------------------------------------------
    def _render_language_choice(self, directive: PromptChoices) -> RenderedMessage:
        # shown before a language is known, so both languages are used
        text = "\n".join(self.messages.get_message("LANGUAGE_SELECTION", language) for language in Language)
        buttons = [
            InlineKeyboardButton(self.messages.get_button_text(code, directive.language), callback_data=f"lang:{code}")
            for code in directive.choices
        ]
        return RenderedMessage(text, InlineKeyboardMarkup([buttons]))

    def _render_prompt(self, directive) -> RenderedMessage:
        language = directive.language
        field_key = directive.field
        lines = []

        if directive.reason_key:
            lines.append(self.messages.get_message(directive.reason_key, language))
        if directive.editing:
            header = self.messages.get_message("EDITING_HEADER", language)
            lines.append(f"{header} {self.messages.get_field_name(field_key, language)}")

        lines.append(self.messages.get_message(f"{field_key.value}_PROMPT", language))

        if not directive.editing:
            total = len(RegistrationStep.data_steps())
            progress = self.messages.get_message("PROGRESS", language)
            lines.append("")
            lines.append(f"{progress} {int(directive.step)}/{total}")
            lines.append(UIComponents.create_progress_bar(int(directive.step) - 1, total))

        reply_markup = None
        if isinstance(directive, PromptChoices):
            reply_markup = self.choice_keyboard(field_key, directive.choices, language)
        return RenderedMessage("\n".join(lines), reply_markup)

    def choice_keyboard(self, field_key: FieldKey, choices, language: Language) -> InlineKeyboardMarkup:
        buttons = [
            InlineKeyboardButton(
                self.messages.get_button_text(choice, language),
                callback_data=f"ans:{field_key.value}:{choice}",
            )
            for choice in choices
        ]
        row_width = CHOICE_ROW_WIDTH.get(field_key, len(buttons) or 1)
        return InlineKeyboardMarkup(UIComponents.create_button_grid(buttons, row_width))

    # -------------------------------------------------
    # Review
    # -------------------------------------------------
    def _render_review(self, directive: ShowReview) -> List[RenderedMessage]:
        language = directive.language
        rendered = []
        if directive.notice_key:
            rendered.append(RenderedMessage(self.messages.get_message(directive.notice_key, language)))

        lines = [self.messages.get_message("REVIEW_TITLE", language), ""]
        keyboard = []
        for field_key, value in directive.summary:
            name = self.messages.get_field_name(field_key, language)
            shown = self.display_value(field_key, value, language)
            lines.append(f"{name}: {shown}")
            keyboard.append([InlineKeyboardButton(f"✏️ {name}", callback_data=f"edit:{field_key.value}")])
        lines.append("")
        lines.append(self.messages.get_message("REVIEW_CLICK_TO_EDIT", language))

        keyboard.append([
            InlineKeyboardButton(self.messages.get_message("CONFIRM_REGISTRATION", language), callback_data="confirm")
        ])
        rendered.append(RenderedMessage("\n".join(lines), InlineKeyboardMarkup(keyboard)))
        return rendered

    def display_value(self, field_key: FieldKey, value: str, language: Language) -> str:
        if field_key in CHOICE_FIELDS and value != "-":
            return self.messages.get_button_text(value, language)
        return value

    # -------------------------------------------------
    # Outcome
    # -------------------------------------------------
    def _render_complete(self, directive: RegistrationComplete) -> List[RenderedMessage]:
        language = directive.language
        rendered = [RenderedMessage(self.messages.get_message("SAVE_SUCCESS", language))]

        reply_markup = None
        if self.location_url:
            reply_markup = InlineKeyboardMarkup([[
                InlineKeyboardButton(self.messages.get_message("LOCATION", language), url=self.location_url)
            ]])
        rendered.append(RenderedMessage(self.messages.get_message("NEXT_STEPS", language), reply_markup))
        rendered.append(RenderedMessage(self.messages.get_message("DOCUMENT_INSTRUCTIONS", language)))
        rendered.append(RenderedMessage(self.messages.get_message("THANK_YOU", language)))
        return rendered
