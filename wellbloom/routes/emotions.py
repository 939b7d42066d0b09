"""
WellBloom Backend: Emotion Route Handlers
==========================================

What:  /api/emotions: the emotion catalogue, paginated by page number.

Example:
    GET /api/emotions?page=2&limit=10
    {
        "data": [...],
        "pagination": {"total": 15, "page": 2, "limit": 10, "total_pages": 2}
    }
"""

from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from wellbloom.config import settings
from wellbloom.database import get_db_session
from wellbloom.schemas.common import ErrorResponse, MessageResponse, NumberedPage
from wellbloom.schemas.emotion import (
    EmotionCreate,
    EmotionResponse,
    EmotionUpdate,
    PhraseResponse,
)
from wellbloom.services.emotion_service import emotion_service
from wellbloom.services.query import Page

router = APIRouter(prefix="/api", tags=["Emotions"])


@router.get(
    "/emotions",
    response_model=NumberedPage[EmotionResponse],
    summary="List emotions, page by page",
)
async def list_emotions(
    page: int = Query(default=1, ge=1, description="1-based page number"),
    limit: int = Query(default=settings.default_page_limit, ge=1, le=settings.max_page_limit),
    db: AsyncSession = Depends(get_db_session),
) -> NumberedPage[EmotionResponse]:
    return await emotion_service.list_emotions(db, Page.from_number(page, limit))


@router.get(
    "/emotions/{emotion_id}",
    response_model=EmotionResponse,
    responses={404: {"description": "Emotion not found", "model": ErrorResponse}},
    summary="Get an emotion",
)
async def get_emotion(emotion_id: int, db: AsyncSession = Depends(get_db_session)) -> EmotionResponse:
    return await emotion_service.get_emotion(db, emotion_id)


@router.post(
    "/emotions",
    response_model=EmotionResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid fields", "model": ErrorResponse},
        409: {"description": "Name already in use", "model": ErrorResponse},
    },
    summary="Create an emotion",
)
async def create_emotion(
    data: EmotionCreate, db: AsyncSession = Depends(get_db_session)
) -> EmotionResponse:
    return await emotion_service.create_emotion(db, data)


@router.put(
    "/emotions/{emotion_id}",
    response_model=EmotionResponse,
    responses={
        400: {"description": "Invalid fields", "model": ErrorResponse},
        404: {"description": "Emotion not found", "model": ErrorResponse},
        409: {"description": "Name already in use", "model": ErrorResponse},
    },
    summary="Update an emotion",
)
async def update_emotion(
    emotion_id: int,
    data: EmotionUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> EmotionResponse:
    return await emotion_service.update_emotion(db, emotion_id, data)


@router.delete(
    "/emotions/{emotion_id}",
    response_model=MessageResponse,
    responses={
        400: {"description": "Emotion records still reference it", "model": ErrorResponse},
        404: {"description": "Emotion not found", "model": ErrorResponse},
    },
    summary="Delete an emotion and its phrases",
)
async def delete_emotion(
    emotion_id: int, db: AsyncSession = Depends(get_db_session)
) -> MessageResponse:
    await emotion_service.delete_emotion(db, emotion_id)
    return MessageResponse(message="Emotion deleted successfully")


@router.get(
    "/emotions/{emotion_id}/phrases",
    response_model=List[PhraseResponse],
    responses={404: {"description": "Emotion not found", "model": ErrorResponse}},
    summary="List the phrases of an emotion",
    description="Returns [] when the emotion exists but has no phrases yet.",
)
async def list_emotion_phrases(
    emotion_id: int, db: AsyncSession = Depends(get_db_session)
) -> List[PhraseResponse]:
    return await emotion_service.list_phrases(db, emotion_id)
