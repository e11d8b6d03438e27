"""Report service for GamerMatch moderation."""

from datetime import timedelta
from typing import Optional, Union

import sentry_sdk

from gamermatch.config import settings
from gamermatch.custom_types import Env
from gamermatch.models.report import Report, ReportCategory
from gamermatch.utils.database import utcnow
from gamermatch.utils.errors import NotEligibleError, ProfileNotFoundError, RateLimitError, ValidationError
from gamermatch.utils.logging import get_logger

logger = get_logger(__name__)


def report_user(
    env: Env,
    reporter_id: str,
    reported_id: str,
    category: Union[ReportCategory, str],
    description: Optional[str] = None,
) -> Report:
    """
    File a report against another profile.

    Args:
        env (Env): Ledger bundle.
        reporter_id (str): Profile filing the report.
        reported_id (str): Profile being reported.
        category: One of the ReportCategory values.
        description (Optional[str]): Free-text detail.

    Returns:
        Report: The stored report, in `pending` status.

    Raises:
        NotEligibleError: On a self-report.
        ProfileNotFoundError: If the reported profile does not exist.
        ValidationError: If the category or description is invalid.
        RateLimitError: If the reporter exceeded MAX_REPORTS_PER_DAY.
    """
    with sentry_sdk.start_span(op="report.create", name=f"{reporter_id} -> {reported_id}"):
        if reporter_id == reported_id:
            raise NotEligibleError("You cannot report yourself", details={"reporter_id": reporter_id})
        if env.profiles.get_profile(reported_id) is None:
            raise ProfileNotFoundError(f"Profile not found: {reported_id}", details={"profile_id": reported_id})

        now = utcnow()
        recent = env.reports.count_since(reporter_id, now - timedelta(days=1))
        if recent >= settings.MAX_REPORTS_PER_DAY:
            logger.warning("Report rate limit reached", reporter_id=reporter_id, recent=recent)
            raise RateLimitError(
                "You've reached the daily report limit. Please try again tomorrow.",
                details={"limit": settings.MAX_REPORTS_PER_DAY},
            )

        try:
            report = Report(
                reporter_id=reporter_id,
                reported_id=reported_id,
                category=category,
                description=description,
                created_at=now,
            )
        except ValueError as e:
            raise ValidationError("Invalid report", details={"error": str(e)}) from e

        env.reports.add_report(report)
        logger.info(
            "User reported",
            report_id=report.id,
            reporter_id=reporter_id,
            reported_id=reported_id,
            category=report.category.value,
        )
        return report
