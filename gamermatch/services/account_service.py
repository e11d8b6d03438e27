"""Account lifecycle for GamerMatch: soft deletion, scheduled deletion and GDPR export."""

from datetime import timedelta

import sentry_sdk

from gamermatch.config import settings
from gamermatch.custom_types import Env
from gamermatch.models.account import DeletionRequest, DeletionStatus, UserDataExport
from gamermatch.models.match import UnmatchReason
from gamermatch.services.profile_service import get_profile, set_profile_flags
from gamermatch.utils.database import utcnow
from gamermatch.utils.errors import ProfileNotFoundError
from gamermatch.utils.logging import get_logger

logger = get_logger(__name__)


def delete_account(env: Env, user_id: str) -> int:
    """
    Soft-delete an account.

    The profile is deactivated (so it leaves discovery and can no longer
    swipe) and every active match is ended with reason `account_deleted`.

    Returns:
        int: Number of matches ended.
    """
    with sentry_sdk.start_span(op="account.delete", name=user_id):
        set_profile_flags(env, user_id, is_active=False)
        ended = env.matches.deactivate_all_for_user(user_id, UnmatchReason.ACCOUNT_DELETED, user_id)
        logger.info("Account deactivated", user_id=user_id, matches_ended=ended)
        return ended


def request_account_deletion(env: Env, user_id: str) -> DeletionRequest:
    """
    Schedule an account for deletion after the grace period.

    The account is deactivated right away. Asking again while a request is
    pending returns the existing schedule unchanged.

    Raises:
        ProfileNotFoundError: If the profile does not exist.
    """
    get_profile(env, user_id)
    existing = env.deletions.get_request(user_id)
    if existing is not None and existing.is_pending:
        logger.info("Deletion already scheduled", user_id=user_id)
        return existing

    now = utcnow()
    request = DeletionRequest(
        user_id=user_id,
        requested_at=now,
        scheduled_deletion_at=now + timedelta(days=settings.ACCOUNT_DELETION_GRACE_DAYS),
    )
    env.deletions.save_request(request)
    delete_account(env, user_id)
    logger.info(
        "Account deletion requested",
        user_id=user_id,
        scheduled_deletion_at=request.scheduled_deletion_at.isoformat(),
    )
    return request


def cancel_account_deletion(env: Env, user_id: str) -> bool:
    """Cancel a pending deletion and re-activate the profile. Ended matches stay ended."""
    existing = env.deletions.get_request(user_id)
    if existing is None or not existing.is_pending:
        return False

    env.deletions.save_request(existing.model_copy(update={"cancelled_at": utcnow()}))
    set_profile_flags(env, user_id, is_active=True)
    logger.info("Account deletion cancelled", user_id=user_id)
    return True


def get_deletion_status(env: Env, user_id: str) -> DeletionStatus:
    request = env.deletions.get_request(user_id)
    if request is None or not request.is_pending:
        return DeletionStatus(has_pending_request=False)

    remaining = request.scheduled_deletion_at - utcnow()
    return DeletionStatus(
        has_pending_request=True,
        requested_at=request.requested_at,
        scheduled_deletion_at=request.scheduled_deletion_at,
        days_remaining=max(0, remaining.days),
    )


def export_user_data(env: Env, user_id: str) -> UserDataExport:
    """
    Collect everything stored about a user.

    Args:
        env (Env): Ledger bundle.
        user_id (str): Profile ID.

    Returns:
        UserDataExport: Profile, swipes made, matches, blocks made and reports made.

    Raises:
        ProfileNotFoundError: If the profile does not exist.
    """
    with sentry_sdk.start_span(op="account.export", name=user_id):
        profile = env.profiles.get_profile(user_id)
        if profile is None:
            raise ProfileNotFoundError(f"Profile not found: {user_id}", details={"profile_id": user_id})

        export = UserDataExport(
            export_date=utcnow(),
            user_id=user_id,
            profile=profile.model_dump(mode="json"),
            swipes=[s.model_dump(mode="json") for s in env.swipes.list_for_user(user_id)],
            matches=[m.model_dump(mode="json") for m in env.matches.list_for_user(user_id)],
            blocks=[b.model_dump(mode="json") for b in env.blocks.list_by_blocker(user_id)],
            reports_made=[r.model_dump(mode="json") for r in env.reports.list_by_reporter(user_id)],
        )
        logger.info("User data exported", user_id=user_id)
        return export
