"""
WellBloom Backend: User Route Handlers
=======================================

What:  /api/users: registration and profile updates.
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from wellbloom.database import get_db_session
from wellbloom.schemas.common import ErrorResponse
from wellbloom.schemas.user import UserCreate, UserResponse, UserSectionUpdate
from wellbloom.services.user_service import user_service

router = APIRouter(prefix="/api", tags=["Users"])

_NOT_FOUND = {404: {"description": "User not found", "model": ErrorResponse}}


@router.get("/users", response_model=List[UserResponse], summary="List users")
async def list_users(db: AsyncSession = Depends(get_db_session)) -> List[UserResponse]:
    return await user_service.list_users(db)


@router.get("/users/{user_id}", response_model=UserResponse, responses=_NOT_FOUND, summary="Get a user")
async def get_user(user_id: int, db: AsyncSession = Depends(get_db_session)) -> UserResponse:
    return await user_service.get_user(db, user_id)


@router.post(
    "/users",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid fields", "model": ErrorResponse},
        409: {"description": "Email already registered", "model": ErrorResponse},
    },
    summary="Register a user",
)
async def create_user(data: UserCreate, db: AsyncSession = Depends(get_db_session)) -> UserResponse:
    return await user_service.create_user(db, data)


@router.put(
    "/users/{user_id}/last-login",
    response_model=UserResponse,
    responses=_NOT_FOUND,
    summary="Record a login for the user (sets last_login_at to now)",
)
async def update_last_login(user_id: int, db: AsyncSession = Depends(get_db_session)) -> UserResponse:
    return await user_service.update_last_login(db, user_id)


@router.put(
    "/users/{user_id}/section",
    response_model=UserResponse,
    responses={**_NOT_FOUND, 400: {"description": "Blank section", "model": ErrorResponse}},
    summary="Change the user's section",
)
async def update_section(
    user_id: int,
    data: UserSectionUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    return await user_service.update_section(db, user_id, data)
