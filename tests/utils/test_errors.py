import pytest

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


def test_gamermatch_error_base():
    err = GamerMatchError("test error", 503, {"foo": "bar"})
    assert str(err) == "test error"
    assert err.message == "test error"
    assert err.status_code == 503
    assert err.details == {"foo": "bar"}


def test_gamermatch_error_defaults():
    err = GamerMatchError("test error")
    assert err.status_code == 500
    assert err.details == {}


@pytest.mark.parametrize(
    "error_class, code, status_code",
    [
        (DuplicateSwipeError, ErrorCode.DUPLICATE_SWIPE, 409),
        (AlreadyBlockedError, ErrorCode.ALREADY_BLOCKED, 409),
        (ProfileNotFoundError, ErrorCode.PROFILE_NOT_FOUND, 404),
        (NotFoundError, ErrorCode.NOT_FOUND, 404),
        (NotEligibleError, ErrorCode.NOT_ELIGIBLE, 422),
        (DatabaseError, ErrorCode.PERSISTENCE_FAILURE, 500),
        (PersistenceError, ErrorCode.PERSISTENCE_FAILURE, 503),
        (InvalidFilterError, ErrorCode.INVALID_FILTER, 400),
        (ValidationError, ErrorCode.VALIDATION_ERROR, 400),
        (RateLimitError, ErrorCode.RATE_LIMITED, 429),
        (AuthenticationError, ErrorCode.UNAUTHORIZED, 401),
        (ConfigurationError, ErrorCode.CONFIGURATION_ERROR, 500),
    ],
)
def test_error_codes_and_status(error_class, code, status_code):
    err = error_class("boom", details={"key": "value"})
    assert isinstance(err, GamerMatchError)
    assert err.code == code
    assert err.status_code == status_code
    assert err.details == {"key": "value"}


def test_subclass_relationships():
    assert issubclass(ProfileNotFoundError, NotFoundError)
    assert issubclass(InvalidFilterError, ValidationError)
    assert issubclass(PersistenceError, DatabaseError)
