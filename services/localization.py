"""
Localized message tables
"""
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from models.enums import FieldKey, Language

logger = logging.getLogger(__name__)

DEFAULT_MESSAGES_FILE = Path(__file__).resolve().parent.parent / "config" / "messages.yaml"


def _code(language: Union[Language, str]) -> str:
    return language.value if isinstance(language, Language) else str(language)


class Messages:
    """
    Lookup of localized strings by key.

    Missing keys fall back to the key itself, missing translations fall back
    to English, so a lookup never raises.
    """

    def __init__(self, messages_file: Union[str, Path] = DEFAULT_MESSAGES_FILE,
                 table: Optional[Dict[str, Dict[str, str]]] = None):
        self.messages_file = Path(messages_file)
        self.table: Dict[str, Dict[str, str]] = table if table is not None else {}
        if table is None:
            self.load()

    def load(self) -> None:
        try:
            with open(self.messages_file, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"❌ Cannot load messages from {self.messages_file}: {e}")
            data = {}

        self.table = {str(key): value for key, value in data.items() if isinstance(value, dict)}
        logger.info(f"✅ Loaded {len(self.table)} messages from {self.messages_file.name}")

    def get_message(self, key: str, language: Language = Language.EN, **kwargs: Any) -> str:
        entry = self.table.get(key)
        if not entry:
            logger.warning(f"⚠️ Message not found: {key}")
            return key

        text = entry.get(_code(language)) or entry.get(Language.EN.value) or key
        if kwargs:
            try:
                text = text.format(**kwargs)
            except (KeyError, IndexError, ValueError):
                logger.warning(f"⚠️ Cannot format message {key} with {sorted(kwargs)}")
        return text

    def get_button_text(self, option: str, language: Language = Language.EN) -> str:
        """Button label for an option value, e.g. VEHICLE -> ΟΧΗΜΑ"""
        entry = self.table.get(f"BUTTON_{option}")
        if not entry:
            return option
        return entry.get(_code(language)) or option

    def get_field_name(self, field_key: Union[FieldKey, str], language: Language = Language.EN) -> str:
        key = field_key.value if isinstance(field_key, FieldKey) else str(field_key)
        entry = self.table.get(f"FIELD_{key}")
        if not entry:
            return key
        return entry.get(_code(language)) or key
