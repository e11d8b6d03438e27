"""Report model for GamerMatch moderation."""

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_REPORT_DESCRIPTION_LENGTH = 1000


class ReportCategory(str, Enum):
    HARASSMENT = "harassment"
    SPAM = "spam"
    INAPPROPRIATE_CONTENT = "inappropriate_content"
    FAKE_PROFILE = "fake_profile"
    UNDERAGE = "underage"
    OTHER = "other"


class ReportStatus(str, Enum):
    PENDING = "pending"
    REVIEWED = "reviewed"
    RESOLVED = "resolved"
    DISMISSED = "dismissed"


class Report(BaseModel):
    """Represents a user report record."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    reporter_id: str
    reported_id: str
    category: ReportCategory
    description: Optional[str] = None
    status: ReportStatus = ReportStatus.PENDING
    admin_notes: Optional[str] = None
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=datetime.now)

    @field_validator("description")
    @classmethod
    def trim_description(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if len(v) > MAX_REPORT_DESCRIPTION_LENGTH:
            raise ValueError(f"Description must be less than {MAX_REPORT_DESCRIPTION_LENGTH} characters")
        return v or None

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "f47ac10b-58cc-4372-a567-0e02b2c3d479",
                "reporter_id": "user_abc_123",
                "reported_id": "user_def_456",
                "category": "spam",
                "description": "Keeps sending links to a gold-selling site",
                "status": "pending",
                "created_at": "2025-10-27T10:00:00Z",
            }
        },
    )


class AdminStats(BaseModel):
    total_users: int
    active_users: int
    banned_users: int
    pending_reports: int
    total_matches: int
    active_matches: int
