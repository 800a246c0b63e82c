# ABOUTME: Custom exception hierarchy for mailthread error handling
# ABOUTME: Provides specialized exceptions with recovery hints for the ambient layers
"""Custom exceptions for mailthread"""


class MailthreadError(Exception):
    """Base exception for all mailthread errors"""

    def __init__(self, message: str, recovery_hint: str | None = None):
        super().__init__(message)
        self.recovery_hint = recovery_hint

    def __str__(self):
        base = super().__str__()
        if self.recovery_hint:
            return f"{base}\nHint: {self.recovery_hint}"
        return base


class ConfigError(MailthreadError):
    """Configuration related errors"""

    pass


class DataError(MailthreadError):
    """Record batch loading errors"""

    pass


class ValidationError(MailthreadError):
    """Validation errors"""

    pass
