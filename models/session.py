from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from models.enums import (
    Bank,
    FieldKey,
    Language,
    LicenseFlag,
    RegistrationStep,
    TransportMode,
)


@dataclass
class RegistrationData:
    """Answers collected so far; a field stays None until it is validated"""
    name: Optional[str] = None
    age: Optional[int] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    transport: Optional[TransportMode] = None
    bank: Optional[Bank] = None
    license: Optional[LicenseFlag] = None

    def get(self, field_key: FieldKey) -> Any:
        return getattr(self, field_key.attr)

    def set(self, field_key: FieldKey, value: Any) -> None:
        setattr(self, field_key.attr, value)

    def missing_fields(self) -> List[FieldKey]:
        return [key for key in FieldKey if self.get(key) is None]

    def is_complete(self) -> bool:
        return not self.missing_fields()

    def display_value(self, field_key: FieldKey) -> str:
        value = self.get(field_key)
        if value is None:
            return "-"
        if isinstance(value, Enum):
            return value.value
        return str(value)

    def summary(self) -> Tuple[Tuple[FieldKey, str], ...]:
        """Ordered (field, display value) pairs for the review screen"""
        return tuple((key, self.display_value(key)) for key in FieldKey)


@dataclass
class UserSession:
    user_id: int
    chat_id: int

    language: Language = Language.EN
    current_step: RegistrationStep = RegistrationStep.LANGUAGE_SELECTION
    data: RegistrationData = field(default_factory=RegistrationData)

    # review / edit sub-flow
    reviewing: bool = False
    editing_field: Optional[FieldKey] = None

    # meta
    created_at: datetime = field(default_factory=datetime.now)
    last_activity_at: datetime = field(default_factory=datetime.now)

    # -------------------------
    # lifecycle helpers
    # -------------------------
    def touch(self, now: Optional[datetime] = None) -> None:
        self.last_activity_at = now or datetime.now()

    def idle_for(self, now: datetime) -> float:
        """Seconds since the last activity"""
        return (now - self.last_activity_at).total_seconds()

    @property
    def answered_count(self) -> int:
        return len(FieldKey) - len(self.data.missing_fields())

    # -------------------------
    # serialization helpers
    # -------------------------
    def to_dict(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id,
            "chat_id": self.chat_id,
            "language": self.language.value,
            "current_step": self.current_step.name,
            "reviewing": self.reviewing,
            "editing_field": self.editing_field.value if self.editing_field else None,
            "data": {key.value: self.data.display_value(key) for key in FieldKey},
            "created_at": self.created_at.isoformat(),
            "last_activity_at": self.last_activity_at.isoformat(),
        }


@dataclass
class RegistrationStats:
    """Counters of the registration funnel"""
    sessions_started: int = 0
    completed: int = 0
    cancelled: int = 0
    expired: int = 0
    submission_failures: int = 0
    started_at: datetime = field(default_factory=datetime.now)

    def get_stats_str(self) -> str:
        uptime = datetime.now() - self.started_at
        hours = int(uptime.total_seconds() // 3600)
        return (
            f"📝 Registrations started: {self.sessions_started}\n"
            f"✅ Completed: {self.completed}\n"
            f"🚫 Cancelled: {self.cancelled}\n"
            f"⌛ Expired: {self.expired}\n"
            f"❌ Failed submissions: {self.submission_failures}\n"
            f"⏱️ Uptime: {hours} h"
        )
