"""Custom exceptions for GamerMatch."""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """
    Machine-readable error codes.

    Returned in outcome values at the engine boundary so callers can tell benign
    conditions (already decided, already blocked) from real faults.
    """

    DUPLICATE_SWIPE = "duplicate_swipe"
    ALREADY_BLOCKED = "already_blocked"
    PROFILE_NOT_FOUND = "profile_not_found"
    NOT_FOUND = "not_found"
    NOT_ELIGIBLE = "not_eligible"
    PERSISTENCE_FAILURE = "persistence_failure"
    INVALID_FILTER = "invalid_filter"
    VALIDATION_ERROR = "validation_error"
    RATE_LIMITED = "rate_limited"
    UNAUTHORIZED = "unauthorized"
    CONFIGURATION_ERROR = "configuration_error"


class GamerMatchError(Exception):
    """Base exception for all GamerMatch errors."""

    code: ErrorCode = ErrorCode.PERSISTENCE_FAILURE

    def __init__(self, message: str, status_code: int = 500, details: Optional[Dict[str, Any]] = None) -> None:
        """
        Initialize the error with a message and optional details.

        Args:
            message (str): Error message describing what went wrong.
            status_code (int): HTTP status code associated with the error (default 500).
            details (Optional[Dict[str, Any]]): Additional context or debug information.
        """
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(GamerMatchError):
    """Raised when there's an issue with the application configuration."""

    code = ErrorCode.CONFIGURATION_ERROR

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, 500, details)


class DatabaseError(GamerMatchError):
    """Raised when there's an issue with the database operations."""

    code = ErrorCode.PERSISTENCE_FAILURE

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, 500, details)


class PersistenceError(DatabaseError):
    """
    Raised when a persistence call fails transiently.

    The caller may retry the whole operation: every step the engine performs is
    idempotent or safely repeatable.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, details)
        self.status_code = 503


class ValidationError(GamerMatchError):
    """Raised when data validation fails."""

    code = ErrorCode.VALIDATION_ERROR

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, 400, details)


class InvalidFilterError(ValidationError):
    """Raised when discovery filters or pagination values are malformed."""

    code = ErrorCode.INVALID_FILTER


class AuthenticationError(GamerMatchError):
    """Raised when the acting user is not allowed to perform an operation."""

    code = ErrorCode.UNAUTHORIZED

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, 401, details)


class NotFoundError(GamerMatchError):
    """Raised when a requested resource is not found."""

    code = ErrorCode.NOT_FOUND

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, 404, details)


class ProfileNotFoundError(NotFoundError):
    """Raised when a profile does not exist."""

    code = ErrorCode.PROFILE_NOT_FOUND


class NotEligibleError(GamerMatchError):
    """Raised when a profile exists but is no longer available for the action."""

    code = ErrorCode.NOT_ELIGIBLE

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, 422, details)


class DuplicateSwipeError(GamerMatchError):
    """Raised when the ordered (swiper, swiped) pair has already been decided."""

    code = ErrorCode.DUPLICATE_SWIPE

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, 409, details)


class AlreadyBlockedError(GamerMatchError):
    """Raised on a repeated block of the same user."""

    code = ErrorCode.ALREADY_BLOCKED

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, 409, details)


class RateLimitError(GamerMatchError):
    """Raised when rate limiting is triggered."""

    code = ErrorCode.RATE_LIMITED

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, 429, details)
