"""Models package for GamerMatch."""

from gamermatch.models.account import DeletionRequest, DeletionStatus, UserDataExport
from gamermatch.models.block import Block, BlockedUser
from gamermatch.models.filters import DiscoveryFilters
from gamermatch.models.match import CanonicalPair, Match, MatchUpsert, MatchView, UnmatchReason
from gamermatch.models.outcomes import DiscoveryOutcome, Outcome, RankedCandidate, SwipeOutcome, ValueOutcome
from gamermatch.models.profile import Genre, Platform, Playstyle, PlayTime, Profile, ProfileUpdate, Pronoun, Region
from gamermatch.models.report import AdminStats, Report, ReportCategory, ReportStatus
from gamermatch.models.swipe import Swipe, SwipeAction, SwipeResult

__all__ = [
    "AdminStats",
    "Block",
    "BlockedUser",
    "CanonicalPair",
    "DeletionRequest",
    "DeletionStatus",
    "DiscoveryFilters",
    "DiscoveryOutcome",
    "Genre",
    "Match",
    "MatchUpsert",
    "MatchView",
    "Outcome",
    "Platform",
    "PlayTime",
    "Playstyle",
    "Profile",
    "ProfileUpdate",
    "Pronoun",
    "RankedCandidate",
    "Region",
    "Report",
    "ReportCategory",
    "ReportStatus",
    "Swipe",
    "SwipeAction",
    "SwipeOutcome",
    "SwipeResult",
    "UnmatchReason",
    "UserDataExport",
    "ValueOutcome",
]
