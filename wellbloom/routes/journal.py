"""
WellBloom Backend: Journal (Bitácora) Route Handlers
=====================================================

What:  /api/journal: notes on emotion records and the emotional summary.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from wellbloom.config import settings
from wellbloom.database import get_db_session
from wellbloom.schemas.common import ErrorResponse, MessageResponse, OffsetPage
from wellbloom.schemas.journal import (
    JournalEntryCreate,
    JournalEntryDetail,
    JournalEntryResponse,
    JournalListItem,
    JournalNoteUpdate,
    JournalSummaryResponse,
)
from wellbloom.services.journal_service import journal_service
from wellbloom.services.query import Page

router = APIRouter(prefix="/api", tags=["Journal"])


@router.post(
    "/journal",
    response_model=JournalEntryResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "User or emotion record does not exist", "model": ErrorResponse},
        403: {"description": "The emotion record belongs to another user", "model": ErrorResponse},
    },
    summary="Write a journal entry about an emotion record",
)
async def create_entry(
    data: JournalEntryCreate, db: AsyncSession = Depends(get_db_session)
) -> JournalEntryResponse:
    return await journal_service.create_entry(db, data)


@router.get(
    "/journal/user/{user_id}",
    response_model=OffsetPage[JournalListItem],
    summary="A user's journal, newest capture first",
)
async def list_by_user(
    user_id: int,
    limit: int = Query(default=settings.default_page_limit, ge=1, le=settings.max_page_limit),
    offset: int = Query(default=0, ge=0),
    db: AsyncSession = Depends(get_db_session),
) -> OffsetPage[JournalListItem]:
    return await journal_service.list_by_user(db, user_id, Page(limit=limit, offset=offset))


@router.get(
    "/journal/summary/user/{user_id}",
    response_model=JournalSummaryResponse,
    summary="Emotional summary of a user's journal",
    description="Per emotion within the last `days` days (default 30): entries, average score, "
    "first and last capture. Most frequent first.",
)
async def summary_by_user(
    user_id: int,
    days: Optional[int] = Query(default=None, ge=1, le=3650),
    db: AsyncSession = Depends(get_db_session),
) -> JournalSummaryResponse:
    return await journal_service.summary_by_user(db, user_id, days)


@router.get(
    "/journal/{entry_id}",
    response_model=JournalEntryDetail,
    responses={404: {"description": "Journal entry not found", "model": ErrorResponse}},
    summary="Get a journal entry",
)
async def get_entry(entry_id: int, db: AsyncSession = Depends(get_db_session)) -> JournalEntryDetail:
    return await journal_service.get_entry(db, entry_id)


@router.put(
    "/journal/{entry_id}/note",
    response_model=JournalEntryDetail,
    responses={404: {"description": "Journal entry not found", "model": ErrorResponse}},
    summary="Replace the note of a journal entry",
)
async def update_note(
    entry_id: int,
    data: JournalNoteUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> JournalEntryDetail:
    return await journal_service.update_note(db, entry_id, data)


@router.delete(
    "/journal/{entry_id}",
    response_model=MessageResponse,
    responses={404: {"description": "Journal entry not found", "model": ErrorResponse}},
    summary="Delete a journal entry",
)
async def delete_entry(entry_id: int, db: AsyncSession = Depends(get_db_session)) -> MessageResponse:
    await journal_service.delete_entry(db, entry_id)
    return MessageResponse(message="Journal entry deleted successfully")
