"""
WellBloom Backend: Report Service
==================================

What:  Back-office Q&A reports authored by administrators.
Who:   Called by routes/reports.py.

"Answered" means answer IS NOT NULL. The list filter and the per-role
statistics share that definition.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from wellbloom.exceptions import NotFoundError, ValidationError
from wellbloom.models.admin import Administrator, Report
from wellbloom.schemas.admin import (
    ReportAnswerUpdate,
    ReportCreate,
    ReportDetail,
    ReportResponse,
    RoleReportStats,
)
from wellbloom.schemas.common import OffsetPage, OffsetPagination
from wellbloom.services.base import storage_guard
from wellbloom.services.query import Criteria, Page, fetch_page

logger = logging.getLogger(__name__)


class ReportService:

    def _joined_query(self):
        return select(Report).options(joinedload(Report.admin))

    async def _load(self, db: AsyncSession, report_id: int) -> Optional[Report]:
        stmt = (
            self._joined_query()
            .where(Report.id == report_id)
            .execution_options(populate_existing=True)
        )
        return (await db.execute(stmt)).scalar_one_or_none()

    async def _load_or_404(self, db: AsyncSession, report_id: int) -> Report:
        report = await self._load(db, report_id)
        if report is None:
            raise NotFoundError(resource="Report", resource_id=report_id)
        return report

    @staticmethod
    def _to_response(report: Report) -> ReportResponse:
        return ReportResponse(
            id=report.id,
            admin_id=report.admin_id,
            admin_name=report.admin.name,
            admin_role=report.admin.role,
            question=report.question,
            answer=report.answer,
            note=report.note,
            created_at=report.created_at,
            updated_at=report.updated_at,
        )

    @staticmethod
    def _to_detail(report: Report) -> ReportDetail:
        return ReportDetail(
            **ReportService._to_response(report).model_dump(),
            admin_email=report.admin.email,
        )

    @storage_guard("create report")
    async def create_report(self, db: AsyncSession, data: ReportCreate) -> ReportResponse:
        """
        File a report authored by an administrator.

        Raises:
            ValidationError: admin_id names no administrator (400)
        """
        if await db.get(Administrator, data.admin_id) is None:
            raise ValidationError(message="Administrator does not exist", field="admin_id")

        report = Report(**data.model_dump())
        db.add(report)
        await db.flush()
        logger.info("Report created: id=%d admin_id=%d", report.id, data.admin_id)
        return self._to_response(await self._load(db, report.id))

    @storage_guard("list reports")
    async def list_reports(
        self,
        db: AsyncSession,
        page: Page,
        answered: Optional[bool] = None,
        admin_id: Optional[int] = None,
    ) -> OffsetPage[ReportResponse]:
        criteria = Criteria().where_if(admin_id is not None, Report.admin_id == admin_id)
        if answered is True:
            criteria.where(Report.answer.is_not(None))
        elif answered is False:
            criteria.where(Report.answer.is_(None))

        rows, total = await fetch_page(
            db,
            self._joined_query().order_by(Report.created_at.desc(), Report.id.desc()),
            criteria,
            page,
            count_from=Report,
        )
        return OffsetPage[ReportResponse](
            data=[self._to_response(r) for r in rows],
            pagination=OffsetPagination(total=total, limit=page.limit, offset=page.offset),
        )

    @storage_guard("get report")
    async def get_report(self, db: AsyncSession, report_id: int) -> ReportDetail:
        return self._to_detail(await self._load_or_404(db, report_id))

    @storage_guard("answer report")
    async def update_answer(
        self, db: AsyncSession, report_id: int, data: ReportAnswerUpdate
    ) -> ReportResponse:
        report = await self._load_or_404(db, report_id)
        for field, value in data.changes().items():
            setattr(report, field, value)
        report.updated_at = datetime.now(timezone.utc)
        await db.flush()
        return self._to_response(await self._load(db, report_id))

    @storage_guard("delete report")
    async def delete_report(self, db: AsyncSession, report_id: int) -> None:
        """Hard delete; NotFoundError when absent."""
        report = await db.get(Report, report_id)
        if report is None:
            raise NotFoundError(resource="Report", resource_id=report_id)
        await db.delete(report)
        await db.flush()
        logger.info("Report deleted: id=%d", report_id)

    @storage_guard("report stats")
    async def stats_by_role(self, db: AsyncSession) -> List[RoleReportStats]:
        """Totals per author role; roles without reports are omitted."""
        stmt = (
            select(
                Administrator.role,
                func.count(Report.id).label("total"),
                func.count(Report.answer).label("answered"),
            )
            .join(Report, Report.admin_id == Administrator.id)
            .group_by(Administrator.role)
            .order_by(Administrator.role)
        )
        result = await db.execute(stmt)
        return [
            RoleReportStats(
                role=row.role,
                total=row.total,
                answered=row.answered,
                pending=row.total - row.answered,
            )
            for row in result.all()
        ]


# Module-level singleton
report_service = ReportService()
