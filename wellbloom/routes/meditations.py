"""
WellBloom Backend: Meditation Route Handlers
=============================================

What:  /api/meditations. "/meditations/completed" and
       "/meditations/activity/{id}" are declared before "/meditations/{id}".
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from wellbloom.database import get_db_session
from wellbloom.schemas.activity import MeditationCreate, MeditationResponse, MeditationUpdate
from wellbloom.schemas.common import ErrorResponse, MessageResponse
from wellbloom.services.meditation_service import meditation_service

router = APIRouter(prefix="/api", tags=["Meditations"])


@router.post(
    "/meditations",
    response_model=MeditationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid fields or unknown activity", "model": ErrorResponse},
        409: {"description": "The activity already has a meditation", "model": ErrorResponse},
    },
    summary="Create the meditation of an activity",
)
async def create_meditation(
    data: MeditationCreate, db: AsyncSession = Depends(get_db_session)
) -> MeditationResponse:
    return await meditation_service.create_meditation(db, data)


@router.get(
    "/meditations/completed",
    response_model=List[MeditationResponse],
    summary="List completed meditations",
)
async def list_completed(db: AsyncSession = Depends(get_db_session)) -> List[MeditationResponse]:
    return await meditation_service.list_completed(db)


@router.get(
    "/meditations/activity/{activity_id}",
    response_model=MeditationResponse,
    responses={404: {"description": "The activity has no meditation", "model": ErrorResponse}},
    summary="Get the meditation of an activity",
)
async def get_by_activity(
    activity_id: int, db: AsyncSession = Depends(get_db_session)
) -> MeditationResponse:
    return await meditation_service.get_by_activity(db, activity_id)


@router.get(
    "/meditations/{meditation_id}",
    response_model=MeditationResponse,
    responses={404: {"description": "Meditation not found", "model": ErrorResponse}},
    summary="Get a meditation with its activity name and description",
)
async def get_meditation(
    meditation_id: int, db: AsyncSession = Depends(get_db_session)
) -> MeditationResponse:
    return await meditation_service.get_meditation(db, meditation_id)


@router.put(
    "/meditations/{meditation_id}",
    response_model=MeditationResponse,
    responses={
        400: {"description": "Invalid fields", "model": ErrorResponse},
        404: {"description": "Meditation not found", "model": ErrorResponse},
    },
    summary="Update a meditation's duration",
)
async def update_meditation(
    meditation_id: int,
    data: MeditationUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> MeditationResponse:
    return await meditation_service.update_meditation(db, meditation_id, data)


@router.put(
    "/meditations/{meditation_id}/complete",
    response_model=MeditationResponse,
    responses={404: {"description": "Meditation not found", "model": ErrorResponse}},
    summary="Mark a meditation as completed (idempotent)",
)
async def complete_meditation(
    meditation_id: int, db: AsyncSession = Depends(get_db_session)
) -> MeditationResponse:
    return await meditation_service.complete_meditation(db, meditation_id)


@router.delete(
    "/meditations/{meditation_id}",
    response_model=MessageResponse,
    responses={404: {"description": "Meditation not found", "model": ErrorResponse}},
    summary="Delete a meditation",
)
async def delete_meditation(
    meditation_id: int, db: AsyncSession = Depends(get_db_session)
) -> MessageResponse:
    await meditation_service.delete_meditation(db, meditation_id)
    return MessageResponse(message="Meditation deleted successfully")
