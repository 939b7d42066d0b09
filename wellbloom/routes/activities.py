"""
WellBloom Backend: Activity Route Handlers
===========================================

What:  /api/activities: catalogue listing, search, detail and CRUD.
How:   Thin handlers; ActivityService owns every rule (delete guard,
       patch semantics, not-found handling).

Route order:
    /activities/search is declared before /activities/{activity_id} so
    "search" is never parsed as an id.
"""

from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from wellbloom.database import get_db_session
from wellbloom.schemas.activity import (
    ActivityCreate,
    ActivityDetail,
    ActivityListItem,
    ActivityResponse,
    ActivityUpdate,
)
from wellbloom.schemas.common import ErrorResponse, MessageResponse
from wellbloom.services.activity_service import activity_service


# ── Router Configuration ──────────────────────────────────────────────────
router = APIRouter(prefix="/api", tags=["Activities"])


@router.get(
    "/activities",
    response_model=List[ActivityListItem],
    summary="List activities",
    description="Every activity with its exercise count and meditation id (null when none).",
)
async def list_activities(db: AsyncSession = Depends(get_db_session)) -> List[ActivityListItem]:
    return await activity_service.list_activities(db)


@router.get(
    "/activities/search",
    response_model=List[ActivityResponse],
    summary="Search activities by name",
    description="Case-insensitive substring match on the activity name. No match returns [].",
)
async def search_activities(
    q: str = Query(min_length=1, description="Text to look for in the activity name"),
    db: AsyncSession = Depends(get_db_session),
) -> List[ActivityResponse]:
    return await activity_service.search_activities(db, q)


@router.get(
    "/activities/{activity_id}",
    response_model=ActivityDetail,
    responses={404: {"description": "Activity not found", "model": ErrorResponse}},
    summary="Get an activity with its exercises and meditation",
)
async def get_activity(
    activity_id: int, db: AsyncSession = Depends(get_db_session)
) -> ActivityDetail:
    return await activity_service.get_activity(db, activity_id)


@router.post(
    "/activities",
    response_model=ActivityDetail,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "Invalid fields", "model": ErrorResponse}},
    summary="Create an activity",
)
async def create_activity(
    data: ActivityCreate, db: AsyncSession = Depends(get_db_session)
) -> ActivityDetail:
    return await activity_service.create_activity(db, data)


@router.put(
    "/activities/{activity_id}",
    response_model=ActivityDetail,
    responses={
        400: {"description": "Invalid fields", "model": ErrorResponse},
        404: {"description": "Activity not found", "model": ErrorResponse},
    },
    summary="Update an activity",
    description="Only the fields present in the body change.",
)
async def update_activity(
    activity_id: int,
    data: ActivityUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> ActivityDetail:
    return await activity_service.update_activity(db, activity_id, data)


@router.delete(
    "/activities/{activity_id}",
    response_model=MessageResponse,
    responses={
        400: {"description": "Exercises or a meditation still reference it", "model": ErrorResponse},
        404: {"description": "Activity not found", "model": ErrorResponse},
    },
    summary="Delete an activity",
)
async def delete_activity(
    activity_id: int, db: AsyncSession = Depends(get_db_session)
) -> MessageResponse:
    await activity_service.delete_activity(db, activity_id)
    return MessageResponse(message="Activity deleted successfully")
