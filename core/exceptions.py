"""
Exceptions of the registration bot
"""


class RegistrationBotError(Exception):
    """Base class for all bot errors"""


class ConfigurationError(RegistrationBotError):
    """Missing or invalid configuration; fatal at start-up"""


class StoreError(RegistrationBotError):
    """The spreadsheet could not be read or written; the user may retry"""

    def __init__(self, message: str, operation: str = ""):
        super().__init__(message)
        self.operation = operation


class SessionNotFoundError(RegistrationBotError):
    """A session was expected for the user but none is live"""

    def __init__(self, user_id: int):
        super().__init__(f"No active session for user {user_id}")
        self.user_id = user_id


class InvalidStateError(RegistrationBotError):
    """An operation does not fit the session state (programming error)"""
