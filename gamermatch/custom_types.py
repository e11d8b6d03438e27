"""Repository interfaces the GamerMatch services depend on.

Services never talk to the database directly; they receive an `Env` bundle of
these ledgers as their first argument.
"""

from datetime import datetime
from typing import Callable, Iterable, List, Optional, Protocol, Set

from gamermatch.models.account import DeletionRequest
from gamermatch.models.block import Block
from gamermatch.models.match import CanonicalPair, Match, MatchUpsert, UnmatchReason
from gamermatch.models.profile import Profile
from gamermatch.models.report import Report, ReportStatus
from gamermatch.models.swipe import Swipe, SwipeAction

ProfilePredicate = Callable[[Profile], bool]


class ProfileStore(Protocol):
    def get_profile(self, profile_id: str) -> Optional[Profile]: ...

    def get_profiles(self, profile_ids: Iterable[str]) -> List[Profile]: ...

    def query_profiles(
        self,
        exclude_ids: Iterable[str],
        predicate: Optional[ProfilePredicate] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Profile]: ...

    def add_profile(self, profile: Profile) -> Profile: ...

    def save_profile(self, profile: Profile) -> Profile: ...

    def list_recent(self, limit: int) -> List[Profile]: ...

    def count_profiles(self, is_active: Optional[bool] = None, is_banned: Optional[bool] = None) -> int: ...


class SwipeLedger(Protocol):
    def insert_swipe(self, swiper_id: str, swiped_id: str, action: SwipeAction) -> Swipe: ...

    def exists_swipe(self, swiper_id: str, swiped_id: str, action: SwipeAction) -> bool: ...

    def swiped_ids(self, swiper_id: str) -> Set[str]: ...

    def count_since(self, swiper_id: str, since: datetime) -> int: ...

    def list_for_user(self, swiper_id: str) -> List[Swipe]: ...

    def mutual_like_pairs(self) -> List[CanonicalPair]: ...


class MatchLedger(Protocol):
    def upsert_match_if_absent(self, pair: CanonicalPair, reactivate: bool = True) -> MatchUpsert: ...

    def deactivate_match(self, pair: CanonicalPair, reason: UnmatchReason, actor_id: Optional[str]) -> bool: ...

    def deactivate_all_for_user(
        self, user_id: str, reason: UnmatchReason, actor_id: Optional[str] = None
    ) -> int: ...

    def get_match(self, match_id: str) -> Optional[Match]: ...

    def get_by_pair(self, pair: CanonicalPair) -> Optional[Match]: ...

    def list_active_for_user(self, user_id: str) -> List[Match]: ...

    def list_for_user(self, user_id: str) -> List[Match]: ...

    def count_matches(self, is_active: Optional[bool] = None) -> int: ...


class BlockLedger(Protocol):
    def is_blocked(self, a: str, b: str) -> bool: ...

    def create_block(self, blocker_id: str, blocked_id: str) -> Block: ...

    def delete_block(self, blocker_id: str, blocked_id: str) -> bool: ...

    def blocked_ids(self, user_id: str) -> Set[str]: ...

    def list_by_blocker(self, blocker_id: str) -> List[Block]: ...


class ReportLedger(Protocol):
    def add_report(self, report: Report) -> Report: ...

    def count_since(self, reporter_id: str, since: datetime) -> int: ...

    def get_report(self, report_id: str) -> Optional[Report]: ...

    def list_by_status(self, status: ReportStatus) -> List[Report]: ...

    def list_by_reporter(self, reporter_id: str) -> List[Report]: ...

    def save_report(self, report: Report) -> Report: ...


class DeletionLedger(Protocol):
    def get_request(self, user_id: str) -> Optional[DeletionRequest]: ...

    def save_request(self, request: DeletionRequest) -> DeletionRequest: ...


class Env(Protocol):
    """Bundle of every ledger a service may need."""

    profiles: ProfileStore
    swipes: SwipeLedger
    matches: MatchLedger
    blocks: BlockLedger
    reports: ReportLedger
    deletions: DeletionLedger
