"""
WellBloom Backend: Administrator Route Handlers
================================================

What:  /api/admins: registration, login and account management.

Access:
    POST /admins/register   public
    POST /admins/login      public
    GET  /admins            bearer token, superadmin
    GET  /admins/{id}       bearer token, superadmin
    PUT  /admins/{id}       bearer token (any role)
    DELETE /admins/{id}     bearer token, superadmin
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from wellbloom.database import get_db_session
from wellbloom.models.admin import AdminRole
from wellbloom.schemas.admin import (
    AdminLogin,
    AdminRegister,
    AdminResponse,
    AdminUpdate,
    LoginResponse,
)
from wellbloom.schemas.common import ErrorResponse, MessageResponse
from wellbloom.security import TokenClaims, authorize, get_current_admin
from wellbloom.services.admin_service import admin_service

router = APIRouter(prefix="/api", tags=["Administrators"])

SUPERADMIN_ONLY = {AdminRole.SUPERADMIN}

_AUTH_ERRORS = {
    401: {"description": "Missing or invalid bearer token", "model": ErrorResponse},
    403: {"description": "Role not allowed", "model": ErrorResponse},
}


@router.post(
    "/admins/register",
    response_model=AdminResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid fields", "model": ErrorResponse},
        409: {"description": "Email already registered", "model": ErrorResponse},
    },
    summary="Register an administrator",
)
async def register(data: AdminRegister, db: AsyncSession = Depends(get_db_session)) -> AdminResponse:
    return await admin_service.register(db, data)


@router.post(
    "/admins/login",
    response_model=LoginResponse,
    responses={401: {"description": "Invalid credentials", "model": ErrorResponse}},
    summary="Log in and obtain a bearer token",
)
async def login(data: AdminLogin, db: AsyncSession = Depends(get_db_session)) -> LoginResponse:
    return await admin_service.login(db, data)


@router.get(
    "/admins",
    response_model=List[AdminResponse],
    responses=_AUTH_ERRORS,
    summary="List administrators (superadmin)",
)
async def list_admins(
    claims: TokenClaims = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
) -> List[AdminResponse]:
    authorize(claims, SUPERADMIN_ONLY)
    return await admin_service.list_admins(db)


@router.get(
    "/admins/{admin_id}",
    response_model=AdminResponse,
    responses={**_AUTH_ERRORS, 404: {"description": "Administrator not found", "model": ErrorResponse}},
    summary="Get an administrator (superadmin)",
)
async def get_admin(
    admin_id: int,
    claims: TokenClaims = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
) -> AdminResponse:
    authorize(claims, SUPERADMIN_ONLY)
    return await admin_service.get_admin(db, admin_id)


@router.put(
    "/admins/{admin_id}",
    response_model=AdminResponse,
    responses={
        **_AUTH_ERRORS,
        404: {"description": "Administrator not found", "model": ErrorResponse},
        409: {"description": "Email already registered", "model": ErrorResponse},
    },
    summary="Update an administrator",
    description="Only supplied fields change; the password is rehashed only when given.",
)
async def update_admin(
    admin_id: int,
    data: AdminUpdate,
    claims: TokenClaims = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
) -> AdminResponse:
    return await admin_service.update_admin(db, admin_id, data)


@router.delete(
    "/admins/{admin_id}",
    response_model=MessageResponse,
    responses={
        **_AUTH_ERRORS,
        400: {"description": "Sole superadmin, or reports still reference it", "model": ErrorResponse},
        404: {"description": "Administrator not found", "model": ErrorResponse},
    },
    summary="Delete an administrator (superadmin)",
)
async def delete_admin(
    admin_id: int,
    claims: TokenClaims = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    authorize(claims, SUPERADMIN_ONLY)
    await admin_service.delete_admin(db, admin_id)
    return MessageResponse(message="Administrator deleted successfully")
