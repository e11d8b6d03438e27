"""Swipe model for GamerMatch."""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class SwipeAction(str, Enum):
    LIKE = "like"
    PASS = "pass"


class Swipe(BaseModel):
    """A directed, immutable like/pass decision by one profile about another."""

    id: Optional[str] = None
    swiper_id: str = Field(..., description="ID of the profile making the decision.")
    swiped_id: str = Field(..., description="ID of the profile being decided on.")
    action: SwipeAction
    created_at: datetime = Field(default_factory=datetime.now)

    @model_validator(mode="before")
    @classmethod
    def check_self_swipe(cls, values: Dict[str, Any]) -> Dict[str, Any]:
        swiper_id = values.get("swiper_id")
        swiped_id = values.get("swiped_id")
        if swiper_id and swiped_id and swiper_id == swiped_id:
            raise ValueError("Swiper and swiped profile cannot be the same.")
        return values

    @field_validator("swiper_id", "swiped_id")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("Profile IDs cannot be empty")
        return v

    model_config = ConfigDict(frozen=True, extra="forbid")


class SwipeResult(BaseModel):
    """
    Result of recording a swipe.

    `is_match` is true for whichever request observes or creates the match,
    which under a mutual-like race means both of them.
    """

    created: bool
    is_match: bool
    match_id: Optional[str] = None
