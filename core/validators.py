"""
Field validators.

Each validator is a pure function ``(raw_input, language) -> ValidationResult``.
An accepted result carries the normalized value that goes into the session,
a rejected one carries the message key explaining why.
"""
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Type

from models.enums import CHOICE_FIELDS, FieldKey, Language

MIN_AGE = 1
MAX_AGE = 120
MIN_PHONE_DIGITS = 7
MAX_PHONE_DIGITS = 15
MIN_ADDRESS_LENGTH = 3
MAX_TEXT_LENGTH = 200

_PHONE_ALLOWED = re.compile(r"^\+?[0-9\s\-().]+$")
_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s.]+$")
_WHITESPACE = re.compile(r"\s+")
_DIGITS = re.compile(r"^[0-9]+$")


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    value: Any = None
    reason_key: Optional[str] = None

    @classmethod
    def accept(cls, value: Any) -> "ValidationResult":
        return cls(ok=True, value=value)

    @classmethod
    def reject(cls, reason_key: str) -> "ValidationResult":
        return cls(ok=False, reason_key=reason_key)


Validator = Callable[[str, Language], ValidationResult]


def _clean(raw: Optional[str]) -> str:
    return _WHITESPACE.sub(" ", (raw or "").strip())


def validate_name(raw: str, language: Language) -> ValidationResult:
    name = _clean(raw)
    if len(name.split(" ")) < 2 or len(name) > MAX_TEXT_LENGTH:
        return ValidationResult.reject("INVALID_NAME")
    return ValidationResult.accept(name)


def validate_age(raw: str, language: Language) -> ValidationResult:
    text = _clean(raw)
    if not _DIGITS.match(text):
        return ValidationResult.reject("INVALID_AGE")
    age = int(text)
    if not MIN_AGE <= age <= MAX_AGE:
        return ValidationResult.reject("INVALID_AGE")
    return ValidationResult.accept(age)


def validate_phone(raw: str, language: Language) -> ValidationResult:
    text = _clean(raw)
    if not text or not _PHONE_ALLOWED.match(text):
        return ValidationResult.reject("INVALID_PHONE")
    digits = re.sub(r"[^0-9]", "", text)
    if not MIN_PHONE_DIGITS <= len(digits) <= MAX_PHONE_DIGITS:
        return ValidationResult.reject("INVALID_PHONE")
    prefix = "+" if text.startswith("+") else ""
    return ValidationResult.accept(prefix + digits)


def validate_email(raw: str, language: Language) -> ValidationResult:
    email = (raw or "").strip().lower()
    if len(email) > MAX_TEXT_LENGTH or not _EMAIL.match(email):
        return ValidationResult.reject("INVALID_EMAIL")
    return ValidationResult.accept(email)


def validate_address(raw: str, language: Language) -> ValidationResult:
    address = _clean(raw)
    if len(address) < MIN_ADDRESS_LENGTH or len(address) > MAX_TEXT_LENGTH:
        return ValidationResult.reject("INVALID_ADDRESS")
    return ValidationResult.accept(address)


def _choice_validator(enum_cls: Type[Enum], reason_key: str) -> Validator:
    def validate(raw: str, language: Language) -> ValidationResult:
        # "alpha bank" and "Alpha_Bank" both select ALPHA_BANK
        candidate = _clean(raw).upper().replace(" ", "_")
        try:
            return ValidationResult.accept(enum_cls(candidate))
        except ValueError:
            return ValidationResult.reject(reason_key)

    validate.__name__ = f"validate_{enum_cls.__name__.lower()}"
    return validate


validate_transport = _choice_validator(CHOICE_FIELDS[FieldKey.TRANSPORT], "INVALID_TRANSPORT")
validate_bank = _choice_validator(CHOICE_FIELDS[FieldKey.BANK], "INVALID_BANK")
validate_license = _choice_validator(CHOICE_FIELDS[FieldKey.LICENSE], "INVALID_LICENSE")


VALIDATORS: Dict[FieldKey, Validator] = {
    FieldKey.NAME: validate_name,
    FieldKey.AGE: validate_age,
    FieldKey.PHONE: validate_phone,
    FieldKey.EMAIL: validate_email,
    FieldKey.ADDRESS: validate_address,
    FieldKey.TRANSPORT: validate_transport,
    FieldKey.BANK: validate_bank,
    FieldKey.LICENSE: validate_license,
}


def validate_field(field_key: FieldKey, raw: str, language: Language) -> ValidationResult:
    """Run the validator registered for ``field_key``"""
    return VALIDATORS[field_key](raw, language)
