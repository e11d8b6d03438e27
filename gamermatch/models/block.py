"""Block model for GamerMatch."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from gamermatch.models.profile import Profile


class Block(BaseModel):
    """One profile hiding another. Checked in both directions."""

    id: str
    blocker_id: str
    blocked_id: str
    created_at: datetime = Field(default_factory=datetime.now)

    model_config = ConfigDict(from_attributes=True)


class BlockedUser(BaseModel):
    block_id: str
    blocked_id: str
    created_at: datetime
    blocked_user: Profile
