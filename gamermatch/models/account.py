"""Account lifecycle models: deletion scheduling and data export."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class DeletionRequest(BaseModel):
    user_id: str
    requested_at: datetime
    scheduled_deletion_at: datetime
    cancelled_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @property
    def is_pending(self) -> bool:
        return self.cancelled_at is None


class DeletionStatus(BaseModel):
    has_pending_request: bool
    requested_at: Optional[datetime] = None
    scheduled_deletion_at: Optional[datetime] = None
    days_remaining: Optional[int] = None


class UserDataExport(BaseModel):
    """Everything stored about one user, as returned by a GDPR export."""

    export_date: datetime = Field(default_factory=datetime.now)
    user_id: str
    profile: Dict[str, Any]
    swipes: List[Dict[str, Any]] = Field(default_factory=list)
    matches: List[Dict[str, Any]] = Field(default_factory=list)
    blocks: List[Dict[str, Any]] = Field(default_factory=list)
    reports_made: List[Dict[str, Any]] = Field(default_factory=list)
