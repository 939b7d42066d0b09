"""
WellBloom Backend: Phrase Route Handlers
=========================================

What:  /api/phrases: motivational phrases per emotion, search, and a
       random pick.
"""

from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from wellbloom.database import get_db_session
from wellbloom.schemas.common import ErrorResponse, MessageResponse
from wellbloom.schemas.emotion import PhraseCreate, PhraseResponse, PhraseUpdate
from wellbloom.services.phrase_service import phrase_service

router = APIRouter(prefix="/api", tags=["Phrases"])


@router.get("/phrases", response_model=List[PhraseResponse], summary="List phrases")
async def list_phrases(db: AsyncSession = Depends(get_db_session)) -> List[PhraseResponse]:
    return await phrase_service.list_phrases(db)


@router.get(
    "/phrases/search",
    response_model=List[PhraseResponse],
    summary="Search phrases by text or author",
)
async def search_phrases(
    q: str = Query(min_length=1, description="Case-insensitive text to look for"),
    db: AsyncSession = Depends(get_db_session),
) -> List[PhraseResponse]:
    return await phrase_service.search_phrases(db, q)


@router.post(
    "/phrases",
    response_model=PhraseResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "Invalid fields or unknown emotion", "model": ErrorResponse}},
    summary="Create a phrase",
)
async def create_phrase(
    data: PhraseCreate, db: AsyncSession = Depends(get_db_session)
) -> PhraseResponse:
    return await phrase_service.create_phrase(db, data)


@router.get(
    "/phrases/emotion/{emotion_id}",
    response_model=List[PhraseResponse],
    summary="List the phrases of an emotion",
)
async def list_by_emotion(
    emotion_id: int, db: AsyncSession = Depends(get_db_session)
) -> List[PhraseResponse]:
    return await phrase_service.list_by_emotion(db, emotion_id)


@router.get(
    "/phrases/random/emotion/{emotion_id}",
    response_model=PhraseResponse,
    responses={404: {"description": "The emotion has no phrases", "model": ErrorResponse}},
    summary="Pick a random phrase for an emotion",
)
async def random_by_emotion(
    emotion_id: int, db: AsyncSession = Depends(get_db_session)
) -> PhraseResponse:
    return await phrase_service.random_by_emotion(db, emotion_id)


@router.put(
    "/phrases/{phrase_id}",
    response_model=PhraseResponse,
    responses={
        400: {"description": "Invalid fields or unknown emotion", "model": ErrorResponse},
        404: {"description": "Phrase not found", "model": ErrorResponse},
    },
    summary="Update a phrase",
)
async def update_phrase(
    phrase_id: int,
    data: PhraseUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> PhraseResponse:
    return await phrase_service.update_phrase(db, phrase_id, data)


@router.delete(
    "/phrases/{phrase_id}",
    response_model=MessageResponse,
    responses={404: {"description": "Phrase not found", "model": ErrorResponse}},
    summary="Delete a phrase",
)
async def delete_phrase(phrase_id: int, db: AsyncSession = Depends(get_db_session)) -> MessageResponse:
    await phrase_service.delete_phrase(db, phrase_id)
    return MessageResponse(message="Phrase deleted successfully")
