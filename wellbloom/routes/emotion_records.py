"""
WellBloom Backend: Emotion Record Route Handlers
=================================================

What:  /api/emotion-records: log an emotion, browse a user's history,
       per-user statistics.
"""

from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from wellbloom.config import settings
from wellbloom.database import get_db_session
from wellbloom.schemas.common import ErrorResponse, MessageResponse, OffsetPage
from wellbloom.schemas.emotion import EmotionRecordCreate, EmotionRecordResponse, EmotionStat
from wellbloom.services.emotion_record_service import emotion_record_service
from wellbloom.services.query import Page

router = APIRouter(prefix="/api", tags=["Emotion records"])


@router.get(
    "/emotion-records",
    response_model=List[EmotionRecordResponse],
    summary="List every emotion record, newest first",
)
async def list_records(db: AsyncSession = Depends(get_db_session)) -> List[EmotionRecordResponse]:
    return await emotion_record_service.list_records(db)


@router.post(
    "/emotion-records",
    response_model=EmotionRecordResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"description": "User or emotion not found", "model": ErrorResponse}},
    summary="Log an emotion for a user",
)
async def create_record(
    data: EmotionRecordCreate, db: AsyncSession = Depends(get_db_session)
) -> EmotionRecordResponse:
    return await emotion_record_service.create_record(db, data)


@router.get(
    "/emotion-records/user/{user_id}",
    response_model=OffsetPage[EmotionRecordResponse],
    summary="A user's emotion history, newest first",
)
async def list_by_user(
    user_id: int,
    limit: int = Query(default=settings.default_page_limit, ge=1, le=settings.max_page_limit),
    offset: int = Query(default=0, ge=0),
    db: AsyncSession = Depends(get_db_session),
) -> OffsetPage[EmotionRecordResponse]:
    return await emotion_record_service.list_by_user(db, user_id, Page(limit=limit, offset=offset))


@router.get(
    "/emotion-records/stats/{user_id}",
    response_model=List[EmotionStat],
    summary="Per-emotion totals and average score for a user",
)
async def stats_by_user(user_id: int, db: AsyncSession = Depends(get_db_session)) -> List[EmotionStat]:
    return await emotion_record_service.stats_by_user(db, user_id)


@router.delete(
    "/emotion-records/{record_id}",
    response_model=MessageResponse,
    responses={
        400: {"description": "Journal entries still reference it", "model": ErrorResponse},
        404: {"description": "Emotion record not found", "model": ErrorResponse},
    },
    summary="Delete an emotion record",
)
async def delete_record(record_id: int, db: AsyncSession = Depends(get_db_session)) -> MessageResponse:
    await emotion_record_service.delete_record(db, record_id)
    return MessageResponse(message="Emotion record deleted successfully")
