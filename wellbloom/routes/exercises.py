"""
WellBloom Backend: Exercise Route Handlers
===========================================

What:  /api/exercises: create, list by activity or shift, update,
       mark complete, delete.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from wellbloom.database import get_db_session
from wellbloom.schemas.activity import ExerciseCreate, ExerciseResponse, ExerciseUpdate
from wellbloom.schemas.common import ErrorResponse, MessageResponse
from wellbloom.services.exercise_service import exercise_service

router = APIRouter(prefix="/api", tags=["Exercises"])


@router.post(
    "/exercises",
    response_model=ExerciseResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "Invalid fields or unknown activity", "model": ErrorResponse}},
    summary="Create an exercise",
)
async def create_exercise(
    data: ExerciseCreate, db: AsyncSession = Depends(get_db_session)
) -> ExerciseResponse:
    return await exercise_service.create_exercise(db, data)


@router.get(
    "/exercises/activity/{activity_id}",
    response_model=List[ExerciseResponse],
    summary="List the exercises of an activity",
)
async def list_by_activity(
    activity_id: int, db: AsyncSession = Depends(get_db_session)
) -> List[ExerciseResponse]:
    return await exercise_service.list_by_activity(db, activity_id)


@router.get(
    "/exercises/shift/{shift}",
    response_model=List[ExerciseResponse],
    responses={400: {"description": "Unknown shift", "model": ErrorResponse}},
    summary="List exercises of a shift, longest first",
    description=(
        "shift is one of morning, afternoon, evening. "
        "With limit, only the top-N longest exercises are returned."
    ),
)
async def list_by_shift(
    shift: str,
    limit: Optional[int] = Query(default=None, ge=1, description="Return only the N longest"),
    db: AsyncSession = Depends(get_db_session),
) -> List[ExerciseResponse]:
    return await exercise_service.list_by_shift(db, shift, limit)


@router.put(
    "/exercises/{exercise_id}",
    response_model=ExerciseResponse,
    responses={
        400: {"description": "Invalid fields", "model": ErrorResponse},
        404: {"description": "Exercise not found", "model": ErrorResponse},
    },
    summary="Update an exercise's shift or duration",
)
async def update_exercise(
    exercise_id: int,
    data: ExerciseUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> ExerciseResponse:
    return await exercise_service.update_exercise(db, exercise_id, data)


@router.put(
    "/exercises/{exercise_id}/complete",
    response_model=ExerciseResponse,
    responses={404: {"description": "Exercise not found", "model": ErrorResponse}},
    summary="Mark an exercise as completed",
    description="Idempotent: completing an already completed exercise returns it unchanged.",
)
async def complete_exercise(
    exercise_id: int, db: AsyncSession = Depends(get_db_session)
) -> ExerciseResponse:
    return await exercise_service.complete_exercise(db, exercise_id)


@router.delete(
    "/exercises/{exercise_id}",
    response_model=MessageResponse,
    responses={404: {"description": "Exercise not found", "model": ErrorResponse}},
    summary="Delete an exercise",
)
async def delete_exercise(
    exercise_id: int, db: AsyncSession = Depends(get_db_session)
) -> MessageResponse:
    await exercise_service.delete_exercise(db, exercise_id)
    return MessageResponse(message="Exercise deleted successfully")
