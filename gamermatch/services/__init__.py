"""Services package for GamerMatch."""

from gamermatch.services.account_service import (
    cancel_account_deletion,
    delete_account,
    export_user_data,
    get_deletion_status,
    request_account_deletion,
)
from gamermatch.services.admin_service import (
    ban_user,
    get_admin_stats,
    get_pending_reports,
    get_recent_users,
    unban_user,
    update_report_status,
)
from gamermatch.services.block_service import block_user, get_blocked_users, unblock_user
from gamermatch.services.discovery_service import (
    compatibility_score,
    get_discovery_profiles,
    matches_filters,
    rank_candidates,
)
from gamermatch.services.match_service import get_match, get_matches, reconcile_matches, unmatch
from gamermatch.services.profile_service import create_profile, get_profile, update_profile
from gamermatch.services.report_service import report_user
from gamermatch.services.swipe_service import record_swipe

__all__ = [
    "ban_user",
    "block_user",
    "cancel_account_deletion",
    "compatibility_score",
    "create_profile",
    "delete_account",
    "export_user_data",
    "get_admin_stats",
    "get_blocked_users",
    "get_deletion_status",
    "get_discovery_profiles",
    "get_match",
    "get_matches",
    "get_pending_reports",
    "get_profile",
    "get_recent_users",
    "matches_filters",
    "rank_candidates",
    "reconcile_matches",
    "record_swipe",
    "report_user",
    "unban_user",
    "unblock_user",
    "update_profile",
    "update_report_status",
]
