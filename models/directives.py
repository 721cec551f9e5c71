"""
Directives: what the chat adapter should show next.

The registration core never talks to Telegram; it returns one of these
values and handlers/ui_components.py renders it.
"""
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from models.enums import FieldKey, Language, RegistrationStep


@dataclass(frozen=True)
class PromptField:
    """Ask for a free-text field"""
    step: RegistrationStep
    field: FieldKey
    language: Language
    reason_key: Optional[str] = None
    editing: bool = False


@dataclass(frozen=True)
class PromptChoices:
    """Ask the user to pick one of a fixed set of values"""
    step: RegistrationStep
    choices: Tuple[str, ...]
    language: Language
    field: Optional[FieldKey] = None  # None for the language choice
    reason_key: Optional[str] = None
    editing: bool = False


@dataclass(frozen=True)
class ShowReview:
    """Show every answer with edit buttons and a confirm button"""
    summary: Tuple[Tuple[FieldKey, str], ...]
    language: Language
    notice_key: Optional[str] = None


@dataclass(frozen=True)
class ErrorNotice:
    """Something went wrong; tell the user, session is untouched"""
    message_key: str
    language: Language = Language.EN


@dataclass(frozen=True)
class RegistrationComplete:
    name: str
    language: Language
    row_index: int
    membership_synced: bool = True


@dataclass(frozen=True)
class AlreadyRegistered:
    language: Language = Language.EN


@dataclass(frozen=True)
class SessionCancelled:
    language: Language = Language.EN


@dataclass(frozen=True)
class NotStarted:
    language: Language = Language.EN


Directive = Union[
    PromptField,
    PromptChoices,
    ShowReview,
    ErrorNotice,
    RegistrationComplete,
    AlreadyRegistered,
    SessionCancelled,
    NotStarted,
]
