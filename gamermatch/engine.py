"""Entry point for callers of the GamerMatch core.

`MatchEngine` wraps the services: every method returns an outcome model
instead of raising, with a machine-readable `ErrorCode` on failure.
"""

from typing import Any, Callable, Dict, List, Optional, Type, TypeVar, Union

from gamermatch.custom_types import Env
from gamermatch.models.account import DeletionRequest, DeletionStatus, UserDataExport
from gamermatch.models.block import Block, BlockedUser
from gamermatch.models.filters import DiscoveryFilters
from gamermatch.models.match import Match, MatchView
from gamermatch.models.outcomes import DiscoveryOutcome, Outcome, RankedCandidate, SwipeOutcome, ValueOutcome
from gamermatch.models.profile import Profile, ProfileUpdate
from gamermatch.models.report import AdminStats, Report
from gamermatch.models.swipe import SwipeAction
from gamermatch.repositories import SqlEnv
from gamermatch.services import (
    account_service,
    admin_service,
    block_service,
    discovery_service,
    match_service,
    profile_service,
    report_service,
    swipe_service,
)
from gamermatch.utils.errors import ErrorCode, GamerMatchError
from gamermatch.utils.logging import get_logger, log_error

logger = get_logger(__name__)

O = TypeVar("O", bound=Outcome)

GENERIC_FAILURE_MESSAGE = "Something went wrong. Please try again."


def failure(error: Exception, outcome_class: Type[O], operation: str) -> O:
    """
    Turn an exception into a failed outcome.

    Our own errors keep their code and message. Anything else is logged with
    its traceback and reported as a persistence failure.
    """
    if isinstance(error, GamerMatchError):
        if error.code in (ErrorCode.DUPLICATE_SWIPE, ErrorCode.ALREADY_BLOCKED):
            logger.info("Benign failure", operation=operation, error_code=error.code.value)
        else:
            logger.warning(
                "Operation failed",
                operation=operation,
                error_code=error.code.value,
                error_message=error.message,
                error_details=error.details,
            )
        return outcome_class(ok=False, error=error.code, message=error.message)

    log_error(logger, error, f"Unexpected error in {operation}")
    return outcome_class(ok=False, error=ErrorCode.PERSISTENCE_FAILURE, message=GENERIC_FAILURE_MESSAGE)


class MatchEngine:
    """
    Facade over the GamerMatch services.

    Args:
        env (Optional[Env]): Ledger bundle. Defaults to the SQL ledgers on the
            configured database.
    """

    def __init__(self, env: Optional[Env] = None) -> None:
        self.env: Env = env if env is not None else SqlEnv()

    def _call(self, operation: str, func: Callable[..., Any], *args: Any, **kwargs: Any) -> ValueOutcome:
        try:
            return ValueOutcome(value=func(self.env, *args, **kwargs))
        except Exception as e:
            return failure(e, ValueOutcome, operation)

    def _run(self, operation: str, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Outcome:
        try:
            func(self.env, *args, **kwargs)
        except Exception as e:
            return failure(e, Outcome, operation)
        return Outcome()

    # Discovery

    @staticmethod
    def rank_candidates(
        viewer: Profile,
        candidates: List[Profile],
        filters: Optional[DiscoveryFilters] = None,
        excluded_ids: Optional[set] = None,
    ) -> List[RankedCandidate]:
        return discovery_service.rank_candidates(viewer, candidates, filters, excluded_ids or set())

    def discover(
        self,
        viewer_id: str,
        filters: Union[DiscoveryFilters, Dict[str, Any], None] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> DiscoveryOutcome:
        try:
            page = discovery_service.get_discovery_profiles(self.env, viewer_id, filters, limit, offset)
        except Exception as e:
            return failure(e, DiscoveryOutcome, "discover")
        return DiscoveryOutcome(profiles=page)

    # Swipes and matches

    def record_swipe(self, swiper_id: str, swiped_id: str, action: Union[SwipeAction, str]) -> SwipeOutcome:
        """
        Record a like or pass.

        A repeated decision on the same profile comes back with
        `error=DUPLICATE_SWIPE`, which callers treat as "already done".
        """
        try:
            result = swipe_service.record_swipe(self.env, swiper_id, swiped_id, action)
        except Exception as e:
            return failure(e, SwipeOutcome, "record_swipe")
        return SwipeOutcome(created=result.created, is_match=result.is_match, match_id=result.match_id)

    def get_matches(self, user_id: str) -> ValueOutcome[List[MatchView]]:
        return self._call("get_matches", match_service.get_matches, user_id)

    def unmatch(self, user_id: str, match_id: str) -> ValueOutcome[Match]:
        return self._call("unmatch", match_service.unmatch, user_id, match_id)

    def reconcile_matches(self) -> ValueOutcome[int]:
        return self._call("reconcile_matches", match_service.reconcile_matches)

    # Blocking

    def block_user(self, blocker_id: str, blocked_id: str) -> ValueOutcome[Block]:
        return self._call("block_user", block_service.block_user, blocker_id, blocked_id)

    def unblock_user(self, blocker_id: str, blocked_id: str) -> Outcome:
        return self._run("unblock_user", block_service.unblock_user, blocker_id, blocked_id)

    def get_blocked_users(self, blocker_id: str) -> ValueOutcome[List[BlockedUser]]:
        return self._call("get_blocked_users", block_service.get_blocked_users, blocker_id)

    # Profiles

    def create_profile(self, data: Union[Profile, Dict[str, Any]]) -> ValueOutcome[Profile]:
        return self._call("create_profile", profile_service.create_profile, data)

    def get_profile(self, profile_id: str) -> ValueOutcome[Profile]:
        return self._call("get_profile", profile_service.get_profile, profile_id)

    def update_profile(self, profile_id: str, update: Union[ProfileUpdate, Dict[str, Any]]) -> ValueOutcome[Profile]:
        return self._call("update_profile", profile_service.update_profile, profile_id, update)

    # Moderation

    def report_user(
        self, reporter_id: str, reported_id: str, category: str, description: Optional[str] = None
    ) -> ValueOutcome[Report]:
        return self._call("report_user", report_service.report_user, reporter_id, reported_id, category, description)

    def get_pending_reports(self, admin_id: str) -> ValueOutcome[List[Report]]:
        return self._call("get_pending_reports", admin_service.get_pending_reports, admin_id)

    def update_report_status(
        self, admin_id: str, report_id: str, status: str, admin_notes: Optional[str] = None
    ) -> ValueOutcome[Report]:
        return self._call(
            "update_report_status", admin_service.update_report_status, admin_id, report_id, status, admin_notes
        )

    def ban_user(self, admin_id: str, user_id: str) -> ValueOutcome[Profile]:
        return self._call("ban_user", admin_service.ban_user, admin_id, user_id)

    def unban_user(self, admin_id: str, user_id: str) -> ValueOutcome[Profile]:
        return self._call("unban_user", admin_service.unban_user, admin_id, user_id)

    def get_admin_stats(self, admin_id: str) -> ValueOutcome[AdminStats]:
        return self._call("get_admin_stats", admin_service.get_admin_stats, admin_id)

    # Account lifecycle

    def delete_account(self, user_id: str) -> ValueOutcome[int]:
        return self._call("delete_account", account_service.delete_account, user_id)

    def request_account_deletion(self, user_id: str) -> ValueOutcome[DeletionRequest]:
        return self._call("request_account_deletion", account_service.request_account_deletion, user_id)

    def cancel_account_deletion(self, user_id: str) -> ValueOutcome[bool]:
        return self._call("cancel_account_deletion", account_service.cancel_account_deletion, user_id)

    def get_deletion_status(self, user_id: str) -> ValueOutcome[DeletionStatus]:
        return self._call("get_deletion_status", account_service.get_deletion_status, user_id)

    def export_user_data(self, user_id: str) -> ValueOutcome[UserDataExport]:
        return self._call("export_user_data", account_service.export_user_data, user_id)
