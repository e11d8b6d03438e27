"""Utils package for GamerMatch."""

from gamermatch.utils.cache import delete_cache, get_cache, get_cache_model, set_cache
from gamermatch.utils.errors import (
    AlreadyBlockedError,
    AuthenticationError,
    ConfigurationError,
    DatabaseError,
    DuplicateSwipeError,
    ErrorCode,
    GamerMatchError,
    InvalidFilterError,
    NotEligibleError,
    NotFoundError,
    PersistenceError,
    ProfileNotFoundError,
    RateLimitError,
    ValidationError,
)
from gamermatch.utils.logging import configure_logging, get_logger, log_error

__all__ = [
    "AlreadyBlockedError",
    "AuthenticationError",
    "ConfigurationError",
    "DatabaseError",
    "DuplicateSwipeError",
    "ErrorCode",
    "GamerMatchError",
    "InvalidFilterError",
    "NotEligibleError",
    "NotFoundError",
    "PersistenceError",
    "ProfileNotFoundError",
    "RateLimitError",
    "ValidationError",
    "configure_logging",
    "delete_cache",
    "get_cache",
    "get_cache_model",
    "get_logger",
    "log_error",
    "set_cache",
]
