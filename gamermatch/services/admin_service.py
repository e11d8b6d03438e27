"""Admin operations: report review, bans and platform statistics."""

from typing import List, Optional, Union

from gamermatch.config import settings
from gamermatch.custom_types import Env
from gamermatch.models.match import UnmatchReason
from gamermatch.models.profile import Profile
from gamermatch.models.report import AdminStats, Report, ReportStatus
from gamermatch.services.profile_service import set_profile_flags
from gamermatch.utils.database import utcnow
from gamermatch.utils.errors import AuthenticationError, NotFoundError, ValidationError
from gamermatch.utils.logging import get_logger

logger = get_logger(__name__)


def is_admin(user_id: str) -> bool:
    return user_id in settings.get_admin_ids()


def require_admin(user_id: str) -> None:
    """
    Raises:
        AuthenticationError: If `user_id` is not listed in ADMIN_IDS.
    """
    if not is_admin(user_id):
        logger.warning("Admin operation refused", user_id=user_id)
        raise AuthenticationError("Admin privileges required", details={"user_id": user_id})


def get_pending_reports(env: Env, admin_id: str) -> List[Report]:
    require_admin(admin_id)
    return env.reports.list_by_status(ReportStatus.PENDING)


def update_report_status(
    env: Env,
    admin_id: str,
    report_id: str,
    status: Union[ReportStatus, str],
    admin_notes: Optional[str] = None,
) -> Report:
    """Mark a report as reviewed, resolved or dismissed."""
    require_admin(admin_id)
    try:
        new_status = ReportStatus(status)
    except ValueError as e:
        raise ValidationError(f"Invalid report status: {status}", details={"status": str(status)}) from e

    report = env.reports.get_report(report_id)
    if report is None:
        raise NotFoundError("Report not found", details={"report_id": report_id})

    updated = report.model_copy(
        update={
            "status": new_status,
            "admin_notes": admin_notes if admin_notes is not None else report.admin_notes,
            "reviewed_by": admin_id,
            "reviewed_at": utcnow(),
        }
    )
    env.reports.save_report(updated)
    logger.info("Report status updated", report_id=report_id, status=new_status.value, admin_id=admin_id)
    return updated


def ban_user(env: Env, admin_id: str, user_id: str) -> Profile:
    """
    Ban a profile and end every active match it has.

    The banned profile drops out of discovery immediately and its partners no
    longer see the match.
    """
    require_admin(admin_id)
    profile = set_profile_flags(env, user_id, is_banned=True)
    ended = env.matches.deactivate_all_for_user(user_id, UnmatchReason.BANNED, admin_id)
    logger.info("User banned", user_id=user_id, admin_id=admin_id, matches_ended=ended)
    return profile


def unban_user(env: Env, admin_id: str, user_id: str) -> Profile:
    require_admin(admin_id)
    profile = set_profile_flags(env, user_id, is_banned=False)
    logger.info("User unbanned", user_id=user_id, admin_id=admin_id)
    return profile


def get_recent_users(env: Env, admin_id: str, limit: int = 20) -> List[Profile]:
    require_admin(admin_id)
    return env.profiles.list_recent(limit)


def get_admin_stats(env: Env, admin_id: str) -> AdminStats:
    require_admin(admin_id)
    return AdminStats(
        total_users=env.profiles.count_profiles(),
        active_users=env.profiles.count_profiles(is_active=True, is_banned=False),
        banned_users=env.profiles.count_profiles(is_banned=True),
        pending_reports=len(env.reports.list_by_status(ReportStatus.PENDING)),
        total_matches=env.matches.count_matches(),
        active_matches=env.matches.count_matches(is_active=True),
    )
