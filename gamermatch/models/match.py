"""Match model for GamerMatch."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from gamermatch.models.profile import Profile


class UnmatchReason(str, Enum):
    """Why a match was deactivated."""

    UNMATCH = "unmatch"
    BLOCK = "block"
    ACCOUNT_DELETED = "account_deleted"
    BANNED = "banned"


class CanonicalPair(BaseModel):
    """
    Order-independent key of a pair of profiles.

    The lexicographically smaller ID is always `user1_id`, so (A, B) and (B, A)
    resolve to the same key and therefore the same match row.
    """

    user1_id: str
    user2_id: str

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def check_order(self) -> "CanonicalPair":
        if self.user1_id == self.user2_id:
            raise ValueError("A pair needs two different profiles")
        if self.user1_id > self.user2_id:
            raise ValueError("user1_id must sort before user2_id; use CanonicalPair.of()")
        return self

    @classmethod
    def of(cls, a: str, b: str) -> "CanonicalPair":
        """Build the key for two profile IDs given in any order."""
        if a == b:
            raise ValueError("A pair needs two different profiles")
        return cls(user1_id=min(a, b), user2_id=max(a, b))

    def other(self, user_id: str) -> str:
        """Return the partner of `user_id` in this pair."""
        if user_id == self.user1_id:
            return self.user2_id
        if user_id == self.user2_id:
            return self.user1_id
        raise ValueError(f"{user_id} is not part of this pair")

    def __contains__(self, user_id: object) -> bool:
        return user_id in (self.user1_id, self.user2_id)


class Match(BaseModel):
    """
    A mutual connection materialised from two opposing likes.

    Matches are never deleted; blocking, unmatching, bans and account deletion
    only deactivate them and record who did it and why.
    """

    id: str
    user1_id: str
    user2_id: str
    matched_at: datetime = Field(default_factory=datetime.now)
    is_active: bool = True
    unmatched_at: Optional[datetime] = None
    unmatched_by: Optional[str] = None
    unmatch_reason: Optional[UnmatchReason] = None

    model_config = ConfigDict(from_attributes=True)

    @property
    def pair(self) -> CanonicalPair:
        return CanonicalPair(user1_id=self.user1_id, user2_id=self.user2_id)

    def has_member(self, user_id: str) -> bool:
        return user_id in self.pair


class MatchUpsert(BaseModel):
    """What `upsert_match_if_absent` did: `created` is false when the row was already active."""

    created: bool
    match_id: str


class MatchView(BaseModel):
    """An active match seen from one member, with the partner's profile."""

    match_id: str
    matched_at: datetime
    profile: Profile
