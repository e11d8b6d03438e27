"""Profile service for GamerMatch."""

from typing import Any, Dict, Union

import sentry_sdk
from pydantic import ValidationError as PydanticValidationError

from gamermatch.config import settings
from gamermatch.custom_types import Env
from gamermatch.models.profile import Profile, ProfileUpdate
from gamermatch.utils.cache import delete_cache, get_cache_model, set_cache
from gamermatch.utils.database import utcnow
from gamermatch.utils.errors import ProfileNotFoundError, ValidationError
from gamermatch.utils.logging import get_logger

logger = get_logger(__name__)

# Cache keys
PROFILE_CACHE_KEY = "profile:{profile_id}"


def _validation_error(e: PydanticValidationError, profile_id: str) -> ValidationError:
    errors = [f"{'.'.join(str(p) for p in err['loc']) or 'profile'}: {err['msg']}" for err in e.errors()]
    return ValidationError("Invalid profile data", details={"profile_id": profile_id, "errors": errors})


def get_profile(env: Env, profile_id: str) -> Profile:
    """Get a profile by ID.

    Args:
        env: Ledger bundle
        profile_id: Profile ID

    Returns:
        Profile object

    Raises:
        ProfileNotFoundError: If the profile does not exist
    """
    with sentry_sdk.start_span(op="profile.get", name=profile_id) as span:
        cache_key = PROFILE_CACHE_KEY.format(profile_id=profile_id)
        cached = get_cache_model(cache_key, Profile, extend_ttl=settings.PROFILE_CACHE_TTL)
        if cached:
            logger.debug("Profile retrieved from cache", profile_id=profile_id)
            span.set_data("source", "cache")
            return cached

        profile = env.profiles.get_profile(profile_id)
        if profile is None:
            logger.warning("Profile not found", profile_id=profile_id)
            span.set_status("not_found")
            raise ProfileNotFoundError(f"Profile not found: {profile_id}", details={"profile_id": profile_id})

        set_cache(cache_key, profile, expiration=settings.PROFILE_CACHE_TTL)
        span.set_data("source", "database")
        return profile


def create_profile(env: Env, data: Union[Profile, Dict[str, Any]]) -> Profile:
    """Create a profile at signup or onboarding completion.

    Raises:
        ValidationError: If the data is invalid or the profile already exists
    """
    if isinstance(data, Profile):
        profile = data
    else:
        try:
            profile = Profile.model_validate(data)
        except PydanticValidationError as e:
            raise _validation_error(e, str(data.get("id", ""))) from e

    now = utcnow()
    profile = profile.model_copy(update={"created_at": now, "updated_at": now})
    env.profiles.add_profile(profile)
    logger.info("Profile created", profile_id=profile.id, onboarding_completed=profile.onboarding_completed)
    return profile


def update_profile(env: Env, profile_id: str, update: Union[ProfileUpdate, Dict[str, Any]]) -> Profile:
    """Apply a partial edit and re-validate the whole profile.

    Raises:
        ProfileNotFoundError: If the profile does not exist
        ValidationError: If the edited profile is invalid
    """
    try:
        if not isinstance(update, ProfileUpdate):
            update = ProfileUpdate.model_validate(update)
    except PydanticValidationError as e:
        raise _validation_error(e, profile_id) from e

    current = env.profiles.get_profile(profile_id)
    if current is None:
        raise ProfileNotFoundError(f"Profile not found: {profile_id}", details={"profile_id": profile_id})

    merged = current.model_dump()
    merged.update(update.model_dump(exclude_unset=True))
    try:
        profile = Profile.model_validate(merged)
    except PydanticValidationError as e:
        raise _validation_error(e, profile_id) from e

    saved = env.profiles.save_profile(profile)
    invalidate_profile_cache(profile_id)
    logger.info("Profile updated", profile_id=profile_id, fields=sorted(update.model_fields_set))
    return saved


def set_profile_flags(env: Env, profile_id: str, **flags: bool) -> Profile:
    """Change status flags (is_active, is_banned) without re-running the edit flow."""
    current = env.profiles.get_profile(profile_id)
    if current is None:
        raise ProfileNotFoundError(f"Profile not found: {profile_id}", details={"profile_id": profile_id})
    saved = env.profiles.save_profile(current.model_copy(update=flags))
    invalidate_profile_cache(profile_id)
    return saved


def invalidate_profile_cache(profile_id: str) -> None:
    delete_cache(PROFILE_CACHE_KEY.format(profile_id=profile_id))
