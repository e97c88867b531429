"""
Exceptions raised by the Splendor rules engine.

Rule violations are reported through ValidationResult and never raised. These
exceptions cover integration errors: bad setup input, or an invalid action
handed to apply_action anyway.
"""
from typing import Optional


class SplendorError(ValueError):
    """Base class for errors raised by the rules engine."""


class GameSetupError(SplendorError):
    """Raised when create_game receives inconsistent players or configuration."""


class InvalidActionError(SplendorError):
    """
    Raised when apply_action is called with an action that fails validation.

    Attributes:
        error_code: The ValidationErrorCode reported by the validator
    """

    def __init__(self, message: str, error_code: Optional[str] = None):
        super().__init__(message)
        self.error_code = error_code
