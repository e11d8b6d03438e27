"""Outcome values returned across the engine boundary.

Every engine call returns one of these instead of raising. `ok` tells success
from failure; on failure `error` carries the machine-readable code and
`message` a text fit for the user.
"""

from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

from gamermatch.models.profile import Profile
from gamermatch.utils.errors import ErrorCode

T = TypeVar("T")


class Outcome(BaseModel):
    ok: bool = True
    error: Optional[ErrorCode] = None
    message: Optional[str] = None

    @property
    def is_benign(self) -> bool:
        """Failures that only mean "already done" and need no user-facing error."""
        return self.error in (ErrorCode.DUPLICATE_SWIPE, ErrorCode.ALREADY_BLOCKED)


class ValueOutcome(Outcome, Generic[T]):
    value: Optional[T] = None


class RankedCandidate(BaseModel):
    profile: Profile
    compatibility_score: int


class DiscoveryOutcome(Outcome):
    profiles: List[RankedCandidate] = Field(default_factory=list)


class SwipeOutcome(Outcome):
    created: bool = False
    is_match: bool = False
    match_id: Optional[str] = None
