"""
WellBloom Backend: Report Route Handlers
=========================================

What:  /api/reports: back-office Q&A reports.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from wellbloom.config import settings
from wellbloom.database import get_db_session
from wellbloom.schemas.admin import (
    ReportAnswerUpdate,
    ReportCreate,
    ReportDetail,
    ReportResponse,
    RoleReportStats,
)
from wellbloom.schemas.common import ErrorResponse, MessageResponse, OffsetPage
from wellbloom.services.query import Page
from wellbloom.services.report_service import report_service

router = APIRouter(prefix="/api", tags=["Reports"])


@router.post(
    "/reports",
    response_model=ReportResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "Invalid fields or unknown administrator", "model": ErrorResponse}},
    summary="Create a report",
)
async def create_report(
    data: ReportCreate, db: AsyncSession = Depends(get_db_session)
) -> ReportResponse:
    return await report_service.create_report(db, data)


@router.get(
    "/reports",
    response_model=OffsetPage[ReportResponse],
    summary="List reports, newest first",
    description="Filter with answered=true|false and admin_id.",
)
async def list_reports(
    answered: Optional[bool] = Query(default=None, description="true: answered only, false: pending only"),
    admin_id: Optional[int] = Query(default=None),
    limit: int = Query(default=settings.default_page_limit, ge=1, le=settings.max_page_limit),
    offset: int = Query(default=0, ge=0),
    db: AsyncSession = Depends(get_db_session),
) -> OffsetPage[ReportResponse]:
    return await report_service.list_reports(
        db, Page(limit=limit, offset=offset), answered=answered, admin_id=admin_id
    )


@router.get(
    "/reports/stats",
    response_model=List[RoleReportStats],
    summary="Report totals per administrator role",
)
async def report_stats(db: AsyncSession = Depends(get_db_session)) -> List[RoleReportStats]:
    return await report_service.stats_by_role(db)


@router.get(
    "/reports/{report_id}",
    response_model=ReportDetail,
    responses={404: {"description": "Report not found", "model": ErrorResponse}},
    summary="Get a report",
)
async def get_report(report_id: int, db: AsyncSession = Depends(get_db_session)) -> ReportDetail:
    return await report_service.get_report(db, report_id)


@router.put(
    "/reports/{report_id}/answer",
    response_model=ReportResponse,
    responses={404: {"description": "Report not found", "model": ErrorResponse}},
    summary="Answer a report",
    description="Sets answer and/or note; updated_at is bumped.",
)
async def update_answer(
    report_id: int,
    data: ReportAnswerUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> ReportResponse:
    return await report_service.update_answer(db, report_id, data)


@router.delete(
    "/reports/{report_id}",
    response_model=MessageResponse,
    responses={404: {"description": "Report not found", "model": ErrorResponse}},
    summary="Delete a report",
)
async def delete_report(report_id: int, db: AsyncSession = Depends(get_db_session)) -> MessageResponse:
    await report_service.delete_report(db, report_id)
    return MessageResponse(message="Report deleted successfully")
