"""
Roster Backend — Report Service
================================

What:  Roster statistics and stored text reports.
How:   Department and position head counts come from GROUP BY queries;
       report content is rendered by report_templates from a RosterSnapshot
       and stored once, at generation time.
Who:   Called by the report routes.
"""

import logging
from datetime import datetime, timezone
from typing import List, Tuple
from uuid import UUID, uuid4

from sqlalchemy import desc, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from roster.exceptions import DatabaseError, NotFoundError, ValidationError
from roster.models.employee import Employee
from roster.models.report import Report
from roster.schemas.report import ReportResponse, StatisticsResponse
from roster.services.report_templates import (
    GroupCounts,
    RosterSnapshot,
    normalize_report_type,
    render_report,
)

logger = logging.getLogger(__name__)

DOWNLOAD_URL_TEMPLATE = "/api/reports/download/{report_id}"


def parse_report_id(report_id: str) -> UUID:
    """
    Raises:
        ValidationError: report_id is not a UUID
    """
    try:
        return UUID(report_id)
    except (ValueError, TypeError, AttributeError):
        raise ValidationError(message="Invalid report ID", field="id")


def to_response(report: Report) -> ReportResponse:
    return ReportResponse(
        id=str(report.id),
        title=report.title,
        type=report.type,
        content=report.content,
        created_at=report.created_at,
        created_by=report.created_by,
        download_url=report.download_url,
    )


class ReportService:
    """
    Error Handling Strategy:
        Invalid ids and unknown report types raise ValidationError (400);
        missing reports raise NotFoundError (404); SQLAlchemy failures are
        wrapped in DatabaseError (500).
    """

    async def _group_counts(self, db: AsyncSession, column) -> GroupCounts:
        count = func.count(Employee.id)
        result = await db.execute(
            select(column, count).group_by(column).order_by(desc(count), column)
        )
        return [(name, int(total)) for name, total in result.all()]

    async def _snapshot(self, db: AsyncSession) -> RosterSnapshot:
        try:
            result = await db.execute(
                select(Employee).order_by(Employee.last_name, Employee.first_name)
            )
            employees = list(result.scalars().all())
            departments = await self._group_counts(db, Employee.department)
            positions = await self._group_counts(db, Employee.position)
        except SQLAlchemyError as e:
            logger.error("Database error aggregating roster: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not aggregate roster data. Please try again.",
                context={"error_type": type(e).__name__},
            )

        return RosterSnapshot(
            employees=employees,
            department_counts=departments,
            position_counts=positions,
            generated_at=datetime.now(timezone.utc),
        )

    async def get_statistics(self, db: AsyncSession) -> StatisticsResponse:
        try:
            total_result = await db.execute(select(func.count(Employee.id)))
            total = int(total_result.scalar() or 0)
            departments = await self._group_counts(db, Employee.department)
            positions = await self._group_counts(db, Employee.position)
        except SQLAlchemyError as e:
            logger.error("Database error computing statistics: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not compute statistics. Please try again.",
                context={"error_type": type(e).__name__},
            )

        return StatisticsResponse(
            total_employees=total,
            total_departments=len(departments),
            total_positions=len(positions),
            department_breakdown=dict(departments),
            position_breakdown=dict(positions),
            average_employees_per_department=(total / len(departments)) if departments else 0.0,
            largest_department=departments[0][0] if departments else None,
            most_popular_position=positions[0][0] if positions else None,
        )

    async def create_report(
        self,
        db: AsyncSession,
        title: str,
        report_type: str,
        created_by: str,
    ) -> Report:
        normalized = normalize_report_type(report_type)
        snapshot = await self._snapshot(db)

        report_id = uuid4()
        report = Report(
            id=report_id,
            title=title,
            type=normalized,
            content=render_report(normalized, snapshot),
            created_at=snapshot.generated_at,
            created_by=created_by,
            download_url=DOWNLOAD_URL_TEMPLATE.format(report_id=report_id),
        )
        try:
            db.add(report)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error saving report: %s", str(e), exc_info=True)
            raise DatabaseError(context={"operation": "create_report"})

        logger.info(
            "Report %s generated (type=%s, %d employees) by %s",
            report_id, normalized, snapshot.total, created_by,
        )
        return report

    async def list_reports(self, db: AsyncSession) -> List[Report]:
        try:
            result = await db.execute(select(Report).order_by(desc(Report.created_at)))
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing reports: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve reports. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def get_report(self, db: AsyncSession, report_id: str) -> Report:
        rid = parse_report_id(report_id)
        try:
            result = await db.execute(select(Report).where(Report.id == rid))
            report = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching report %s: %s", report_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the report. Please try again.",
                context={"report_id": report_id},
            )

        if report is None:
            raise NotFoundError(resource="report", resource_id=report_id)
        return report

    async def delete_report(self, db: AsyncSession, report_id: str) -> None:
        report = await self.get_report(db, report_id)
        try:
            await db.delete(report)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting report %s: %s", report_id, str(e))
            raise DatabaseError(context={"operation": "delete_report"})

        logger.info("Report %s deleted", report_id)

    async def download_report(self, db: AsyncSession, report_id: str) -> Tuple[str, bytes]:
        """Returns (filename, utf-8 content) for a text/plain attachment."""
        report = await self.get_report(db, report_id)
        filename = f"{report.title}_{report.created_at:%Y-%m-%d}.txt"
        return filename, report.content.encode("utf-8")


report_service = ReportService()
