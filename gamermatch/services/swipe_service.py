"""Swipe service for GamerMatch: records like/pass decisions and detects mutual likes."""

from datetime import timedelta
from typing import Union

import sentry_sdk

from gamermatch.config import settings
from gamermatch.custom_types import Env
from gamermatch.models.match import CanonicalPair, UnmatchReason
from gamermatch.models.swipe import SwipeAction, SwipeResult
from gamermatch.utils.database import utcnow
from gamermatch.utils.errors import (
    NotEligibleError,
    PersistenceError,
    ProfileNotFoundError,
    RateLimitError,
    ValidationError,
)
from gamermatch.utils.logging import get_logger, log_error

logger = get_logger(__name__)


def _parse_action(action: Union[SwipeAction, str]) -> SwipeAction:
    try:
        return SwipeAction(action)
    except ValueError as e:
        raise ValidationError(f"Invalid swipe action: {action}", details={"action": str(action)}) from e


def _check_eligibility(env: Env, swiper_id: str, swiped_id: str) -> None:
    if swiper_id == swiped_id:
        raise NotEligibleError("You cannot swipe on yourself", details={"swiper_id": swiper_id})

    swiper = env.profiles.get_profile(swiper_id)
    if swiper is None:
        raise ProfileNotFoundError(f"Profile not found: {swiper_id}", details={"profile_id": swiper_id})
    if not swiper.is_discoverable():
        raise NotEligibleError("Your profile cannot swipe right now", details={"swiper_id": swiper_id})

    swiped = env.profiles.get_profile(swiped_id)
    if swiped is None:
        raise ProfileNotFoundError(f"Profile not found: {swiped_id}", details={"profile_id": swiped_id})
    if not swiped.is_discoverable():
        raise NotEligibleError("This profile is no longer available", details={"swiped_id": swiped_id})

    if env.blocks.is_blocked(swiper_id, swiped_id):
        raise NotEligibleError("This profile is no longer available", details={"swiped_id": swiped_id})


def _blocker_of(env: Env, swiper_id: str, swiped_id: str) -> str:
    if any(b.blocked_id == swiper_id for b in env.blocks.list_by_blocker(swiped_id)):
        return swiped_id
    return swiper_id


def _check_rate_limit(env: Env, swiper_id: str) -> None:
    recent = env.swipes.count_since(swiper_id, utcnow() - timedelta(hours=1))
    if recent >= settings.MAX_SWIPES_PER_HOUR:
        logger.warning("Swipe rate limit reached", swiper_id=swiper_id, recent=recent)
        raise RateLimitError(
            "You've reached the hourly swipe limit. Please try again later.",
            details={"limit": settings.MAX_SWIPES_PER_HOUR},
        )


def record_swipe(env: Env, swiper_id: str, swiped_id: str, action: Union[SwipeAction, str]) -> SwipeResult:
    """
    Record a like or pass and materialise the match on a mutual like.

    The swipe insert is the commit point: once it succeeds the swipe is never
    rolled back. If the match step then fails, the error is logged and the
    result reports no match; `reconcile_matches` creates the missing row later.

    When both profiles like each other concurrently, the unique pair key on
    matches makes exactly one insert win; the other call reads the same row, so
    both callers see `is_match=True` with the same match ID.

    Args:
        env (Env): Ledger bundle.
        swiper_id (str): Profile making the decision.
        swiped_id (str): Profile being decided on.
        action: "like" or "pass".

    Returns:
        SwipeResult: What was recorded and whether it produced a match.

    Raises:
        ValidationError: If the action is unknown.
        NotEligibleError: On a self-swipe, or when either side is not discoverable or the pair is blocked.
        ProfileNotFoundError: If either profile does not exist.
        RateLimitError: If the swiper exceeded MAX_SWIPES_PER_HOUR.
        DuplicateSwipeError: If this ordered pair was already decided.
        PersistenceError: If the swipe itself could not be stored.
    """
    swipe_action = _parse_action(action)

    with sentry_sdk.start_span(op="swipe.record", name=f"{swiper_id} -> {swiped_id}") as span:
        span.set_data("action", swipe_action.value)
        _check_eligibility(env, swiper_id, swiped_id)
        _check_rate_limit(env, swiper_id)

        swipe = env.swipes.insert_swipe(swiper_id, swiped_id, swipe_action)
        logger.info("Swipe recorded", swiper_id=swiper_id, swiped_id=swiped_id, action=swipe_action.value)

        if swipe_action == SwipeAction.PASS:
            return SwipeResult(created=True, is_match=False)

        try:
            if not env.swipes.exists_swipe(swiped_id, swiper_id, SwipeAction.LIKE):
                return SwipeResult(created=True, is_match=False)

            # A block may have landed between the eligibility check and now
            if env.blocks.is_blocked(swiper_id, swiped_id):
                logger.info("Mutual like skipped for blocked pair", swiper_id=swiper_id, swiped_id=swiped_id)
                return SwipeResult(created=True, is_match=False)

            pair = CanonicalPair.of(swiper_id, swiped_id)
            upsert = env.matches.upsert_match_if_absent(pair)

            # A block committed during the upsert found no match to end
            if env.blocks.is_blocked(swiper_id, swiped_id):
                env.matches.deactivate_match(pair, UnmatchReason.BLOCK, _blocker_of(env, swiper_id, swiped_id))
                logger.info("Match ended for pair blocked mid-swipe", match_id=upsert.match_id)
                return SwipeResult(created=True, is_match=False)
        except PersistenceError as e:
            log_error(
                logger,
                e,
                "Swipe stored but match step failed; left for reconciliation",
                {"swipe_id": swipe.id, "swiper_id": swiper_id, "swiped_id": swiped_id},
            )
            span.set_status("internal_error")
            return SwipeResult(created=True, is_match=False)

        span.set_data("match_id", upsert.match_id)
        logger.info(
            "Mutual like detected",
            match_id=upsert.match_id,
            created=upsert.created,
            swiper_id=swiper_id,
            swiped_id=swiped_id,
        )
        return SwipeResult(created=True, is_match=True, match_id=upsert.match_id)
