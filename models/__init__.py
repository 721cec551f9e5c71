"""Data models"""
from .enums import (
    Language,
    FieldKey,
    RegistrationStep,
    TransportMode,
    Bank,
    LicenseFlag,
    CHOICE_FIELDS,
)
from .session import UserSession, RegistrationData, RegistrationStats

__all__ = [
    'Language',
    'FieldKey',
    'RegistrationStep',
    'TransportMode',
    'Bank',
    'LicenseFlag',
    'CHOICE_FIELDS',
    'UserSession',
    'RegistrationData',
    'RegistrationStats',
]
