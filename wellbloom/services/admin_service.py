"""
WellBloom Backend: Administrator Service
=========================================

What:  Back-office accounts: registration, login, management.
Who:   Called by routes/admins.py. Role checks happen in the route via
       security.authorize(); this service only enforces data rules.

Rules:
    - email is unique (ConflictError, 409)
    - passwords are stored as bcrypt digests and rehashed only when the
      update actually supplies a new one
    - login failures never reveal whether the email exists
      (InvalidCredentialsError for both cases)
    - delete is refused for the sole superadmin and for administrators
      that still author reports (DependencyConflictError, 400)
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from wellbloom.exceptions import (
    ConflictError,
    DependencyConflictError,
    InvalidCredentialsError,
    NotFoundError,
)
from wellbloom.models.admin import Administrator, AdminRole, Report
from wellbloom.schemas.admin import (
    AdminLogin,
    AdminRegister,
    AdminResponse,
    AdminUpdate,
    LoginResponse,
)
from wellbloom.security import create_access_token, hash_password_async, verify_password_async
from wellbloom.services.base import storage_guard

logger = logging.getLogger(__name__)


class AdminService:

    async def _get_or_404(self, db: AsyncSession, admin_id: int) -> Administrator:
        admin = await db.get(Administrator, admin_id)
        if admin is None:
            raise NotFoundError(resource="Administrator", resource_id=admin_id)
        return admin

    async def _find_by_email(self, db: AsyncSession, email: str) -> Optional[Administrator]:
        result = await db.execute(select(Administrator).where(Administrator.email == email))
        return result.scalar_one_or_none()

    def _email_taken(self, email: str) -> ConflictError:
        return ConflictError(
            message=f"An administrator with email '{email}' already exists",
            context={"email": email},
        )

    @storage_guard("register administrator")
    async def register(self, db: AsyncSession, data: AdminRegister) -> AdminResponse:
        """
        Create an administrator account.

        What:    The email arrives lowercased from AdminRegister, so the
                 uniqueness check is case-insensitive. The password is hashed
                 on the threadpool.
        Who:     Called by POST /api/admins/register.

        Raises:
            ConflictError: The email is already registered (409)
        """
        if await self._find_by_email(db, data.email) is not None:
            raise self._email_taken(data.email)

        admin = Administrator(
            name=data.name,
            email=data.email,
            password_hash=await hash_password_async(data.password),
            role=data.role,
        )
        db.add(admin)
        await db.flush()
        await db.refresh(admin)
        logger.info("Administrator registered: id=%d role=%s", admin.id, admin.role.value)
        return AdminResponse.model_validate(admin)

    @storage_guard("administrator login")
    async def login(self, db: AsyncSession, data: AdminLogin) -> LoginResponse:
        """
        Check credentials, stamp last_access_at and issue a bearer token.

        Unknown email and wrong password raise the same
        InvalidCredentialsError (401) so callers cannot tell them apart.
        """
        admin = await self._find_by_email(db, data.email)
        if admin is None or not await verify_password_async(data.password, admin.password_hash):
            logger.info("Failed login attempt")
            raise InvalidCredentialsError()

        admin.last_access_at = datetime.now(timezone.utc)
        await db.flush()
        logger.info("Administrator logged in: id=%d", admin.id)

        return LoginResponse(
            id=admin.id,
            name=admin.name,
            email=admin.email,
            role=admin.role,
            token=create_access_token(admin.id, admin.role),
        )

    @storage_guard("list administrators")
    async def list_admins(self, db: AsyncSession) -> List[AdminResponse]:
        result = await db.execute(select(Administrator).order_by(Administrator.id))
        return [AdminResponse.model_validate(a) for a in result.scalars().all()]

    @storage_guard("get administrator")
    async def get_admin(self, db: AsyncSession, admin_id: int) -> AdminResponse:
        return AdminResponse.model_validate(await self._get_or_404(db, admin_id))

    @storage_guard("update administrator")
    async def update_admin(
        self, db: AsyncSession, admin_id: int, data: AdminUpdate
    ) -> AdminResponse:
        admin = await self._get_or_404(db, admin_id)
        changes = data.changes()

        new_email = changes.get("email")
        if new_email is not None and new_email != admin.email:
            other = await self._find_by_email(db, new_email)
            if other is not None and other.id != admin_id:
                raise self._email_taken(new_email)

        password = changes.pop("password", None)
        if password is not None:
            admin.password_hash = await hash_password_async(password)

        for field, value in changes.items():
            setattr(admin, field, value)
        await db.flush()
        await db.refresh(admin)
        return AdminResponse.model_validate(admin)

    @storage_guard("delete administrator")
    async def delete_admin(self, db: AsyncSession, admin_id: int) -> None:
        """
        Delete an administrator that has no reports.

        Args:
            db: Request session
            admin_id: Administrator to delete

        Raises:
            NotFoundError: No such administrator (404)
            DependencyConflictError: The last superadmin, or an author of
                reports (400)
        """
        admin = await self._get_or_404(db, admin_id)

        if admin.role == AdminRole.SUPERADMIN:
            n_superadmins = (
                await db.execute(
                    select(func.count(Administrator.id)).where(
                        Administrator.role == AdminRole.SUPERADMIN
                    )
                )
            ).scalar_one()
            if n_superadmins <= 1:
                raise DependencyConflictError(
                    message="Cannot delete the only superadmin",
                    dependents=["superadmin role"],
                    context={"admin_id": admin_id},
                )

        n_reports = (
            await db.execute(select(func.count(Report.id)).where(Report.admin_id == admin_id))
        ).scalar_one()
        if n_reports:
            raise DependencyConflictError(
                message="Reassign the reports before deleting this administrator",
                dependents=["reports"],
                context={"admin_id": admin_id, "report_count": n_reports},
            )

        await db.delete(admin)
        await db.flush()
        logger.info("Administrator deleted: id=%d", admin_id)


# Module-level singleton
admin_service = AdminService()
