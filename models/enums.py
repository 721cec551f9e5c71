"""
Enumerations for the registration bot
"""
from enum import Enum, IntEnum
from typing import Optional


class Language(str, Enum):
    """Languages a candidate can register in"""
    EN = "en"
    GR = "gr"


class FieldKey(str, Enum):
    """Keys of the registration form fields, in form order"""
    NAME = "NAME"
    AGE = "AGE"
    PHONE = "PHONE"
    EMAIL = "EMAIL"
    ADDRESS = "ADDRESS"
    TRANSPORT = "TRANSPORT"
    BANK = "BANK"
    LICENSE = "LICENSE"

    @property
    def attr(self) -> str:
        """Attribute name on RegistrationData"""
        return self.value.lower()


class RegistrationStep(IntEnum):
    """
    Steps of the registration dialog.

    The integer value is the position in the sequence, so steps can be
    compared and advanced directly.
    """
    LANGUAGE_SELECTION = 0
    NAME = 1
    AGE = 2
    PHONE = 3
    EMAIL = 4
    ADDRESS = 5
    TRANSPORT = 6
    BANK = 7
    LICENSE = 8
    REVIEW = 9
    COMPLETE = 10

    @property
    def field(self) -> Optional[FieldKey]:
        """Form field collected at this step (None for non-data steps)"""
        try:
            return FieldKey[self.name]
        except KeyError:
            return None

    @property
    def is_data_step(self) -> bool:
        return self.field is not None

    def next(self) -> "RegistrationStep":
        if self is RegistrationStep.COMPLETE:
            return self
        return RegistrationStep(self + 1)

    @classmethod
    def for_field(cls, field_key: FieldKey) -> "RegistrationStep":
        return cls[field_key.name]

    @classmethod
    def data_steps(cls):
        return [step for step in cls if step.is_data_step]


class TransportMode(str, Enum):
    """How the candidate gets to work"""
    MMM = "MMM"  # public transport
    VEHICLE = "VEHICLE"
    BOTH = "BOTH"


class Bank(str, Enum):
    """Banks accepted for salary payment"""
    EURO_BANK = "EURO_BANK"
    ALPHA_BANK = "ALPHA_BANK"
    PIRAEUS_BANK = "PIRAEUS_BANK"
    NATION_ALBANK = "NATION_ALBANK"


class LicenseFlag(str, Enum):
    """Whether the candidate holds a driving license"""
    YES = "YES"
    NO = "NO"


# Fields answered with buttons and the enum their value must belong to
CHOICE_FIELDS = {
    FieldKey.TRANSPORT: TransportMode,
    FieldKey.BANK: Bank,
    FieldKey.LICENSE: LicenseFlag,
}
