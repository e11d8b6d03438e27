"""Report and deletion-request ledgers."""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, select

from gamermatch.models.account import DeletionRequest
from gamermatch.models.report import Report, ReportStatus
from gamermatch.repositories.base import SqlRepository
from gamermatch.utils.database import DeletionRequestDB, ReportDB, model_to_dict


def _report_values(report: Report) -> dict:
    values = report.model_dump()
    values["category"] = report.category.value
    values["status"] = report.status.value
    return values


class SqlReportLedger(SqlRepository):
    table = "reports"

    def add_report(self, report: Report) -> Report:
        with self.transaction("insert", reporter_id=report.reporter_id) as session:
            session.add(ReportDB(**_report_values(report)))
        return report

    def count_since(self, reporter_id: str, since: datetime) -> int:
        query = select(func.count()).select_from(ReportDB).where(
            ReportDB.reporter_id == reporter_id, ReportDB.created_at >= since
        )
        with self.transaction("count", reporter_id=reporter_id) as session:
            return int(session.scalar(query) or 0)

    def get_report(self, report_id: str) -> Optional[Report]:
        with self.transaction("select", report_id=report_id) as session:
            row = session.get(ReportDB, report_id)
            return Report.model_validate(model_to_dict(row)) if row else None

    def list_by_status(self, status: ReportStatus) -> List[Report]:
        # Oldest first so moderators work the queue in order
        query = select(ReportDB).where(ReportDB.status == status.value).order_by(ReportDB.created_at.asc())
        with self.transaction("select", status=status.value) as session:
            return [Report.model_validate(model_to_dict(row)) for row in session.scalars(query).all()]

    def list_by_reporter(self, reporter_id: str) -> List[Report]:
        query = select(ReportDB).where(ReportDB.reporter_id == reporter_id).order_by(ReportDB.created_at.asc())
        with self.transaction("select", reporter_id=reporter_id) as session:
            return [Report.model_validate(model_to_dict(row)) for row in session.scalars(query).all()]

    def save_report(self, report: Report) -> Report:
        with self.transaction("update", report_id=report.id) as session:
            session.merge(ReportDB(**_report_values(report)))
        return report


class SqlDeletionLedger(SqlRepository):
    table = "deletion_requests"

    def get_request(self, user_id: str) -> Optional[DeletionRequest]:
        with self.transaction("select", user_id=user_id) as session:
            row = session.get(DeletionRequestDB, user_id)
            return DeletionRequest.model_validate(model_to_dict(row)) if row else None

    def save_request(self, request: DeletionRequest) -> DeletionRequest:
        with self.transaction("upsert", user_id=request.user_id) as session:
            session.merge(DeletionRequestDB(**request.model_dump()))
        return request
