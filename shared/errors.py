"""
Shared error handling for the LDAP Group Access layer.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format."""

    code: str
    message: str
    details: Dict[str, Any] = {}


class GroupAccessException(Exception):
    """Base exception for the group access layer."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            code=self.code,
            message=self.message,
            details=self.details
        )


class SettingNotFoundError(GroupAccessException):
    """Raised when a setting name is not registered."""

    def __init__(self, setting_name: str):
        super().__init__(
            "SETTING_NOT_FOUND",
            f"No setting with name: {setting_name}",
            {"setting": setting_name}
        )


class InvalidModeError(GroupAccessException):
    """Raised for a mutation mode outside add/set/remove/reset."""

    def __init__(self, mode: str):
        super().__init__("INVALID_MODE", f"No valid mode: {mode}", {"mode": mode})


class UnsupportedOperationError(GroupAccessException):
    """Raised when a mode cannot be applied to a setting type."""

    def __init__(self, mode: str, setting_type: str):
        super().__init__(
            "UNSUPPORTED_OPERATION",
            f"unable to {mode} for type: {setting_type}",
            {"mode": mode, "type": setting_type}
        )


class MissingValueError(GroupAccessException):
    """Raised when a set operation receives no value."""

    def __init__(self, message: str = "unable to set if no value is given"):
        super().__init__("MISSING_VALUE", message)


class ValidationFailedError(GroupAccessException):
    """Raised when a value violates a setting's constraints."""

    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("VALIDATION_FAILED", message, details)


class PersistenceError(GroupAccessException):
    """Raised when the settings store cannot load or save."""

    def __init__(self, message: str = "Persistence error", details: Optional[Dict[str, Any]] = None):
        super().__init__("PERSISTENCE_ERROR", message, details)


class DirectoryUnavailableError(GroupAccessException):
    """Raised by directory collaborators when groups cannot be listed."""

    def __init__(self, message: str = "Directory unavailable", details: Optional[Dict[str, Any]] = None):
        super().__init__("DIRECTORY_UNAVAILABLE", message, details)
