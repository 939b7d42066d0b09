"""
WellBloom Backend: User Service
================================

What:  Registration and profile maintenance for the people who log emotions.
Who:   Called by routes/users.py.

Rules:
    - email is unique (ConflictError, 409); the unique index backstops
      concurrent registrations
    - the plaintext password is hashed before it reaches the session and is
      never returned
"""

import logging
from datetime import datetime, timezone
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wellbloom.exceptions import ConflictError, NotFoundError
from wellbloom.models.user import User
from wellbloom.schemas.user import UserCreate, UserResponse, UserSectionUpdate
from wellbloom.security import hash_password_async
from wellbloom.services.base import storage_guard

logger = logging.getLogger(__name__)


class UserService:

    async def _get_or_404(self, db: AsyncSession, user_id: int) -> User:
        user = await db.get(User, user_id)
        if user is None:
            raise NotFoundError(resource="User", resource_id=user_id)
        return user

    @storage_guard("list users")
    async def list_users(self, db: AsyncSession) -> List[UserResponse]:
        result = await db.execute(select(User).order_by(User.id))
        return [UserResponse.model_validate(u) for u in result.scalars().all()]

    @storage_guard("get user")
    async def get_user(self, db: AsyncSession, user_id: int) -> UserResponse:
        return UserResponse.model_validate(await self._get_or_404(db, user_id))

    @storage_guard("create user")
    async def create_user(self, db: AsyncSession, data: UserCreate) -> UserResponse:
        """
        Register a user. Emails are unique regardless of case.

        Raises:
            ConflictError: The email is already taken (409); nothing is written
        """
        existing = await db.execute(select(User.id).where(User.email == data.email))
        if existing.scalar_one_or_none() is not None:
            raise ConflictError(
                message=f"A user with email '{data.email}' already exists",
                context={"email": data.email},
            )

        user = User(
            name=data.name,
            email=data.email,
            password_hash=await hash_password_async(data.password),
            section=data.section,
        )
        db.add(user)
        await db.flush()
        await db.refresh(user)
        logger.info("User created: id=%d", user.id)
        return UserResponse.model_validate(user)

    @storage_guard("update user last login")
    async def update_last_login(self, db: AsyncSession, user_id: int) -> UserResponse:
        user = await self._get_or_404(db, user_id)
        user.last_login_at = datetime.now(timezone.utc)
        await db.flush()
        await db.refresh(user)
        return UserResponse.model_validate(user)

    @storage_guard("update user section")
    async def update_section(
        self, db: AsyncSession, user_id: int, data: UserSectionUpdate
    ) -> UserResponse:
        user = await self._get_or_404(db, user_id)
        user.section = data.section
        await db.flush()
        await db.refresh(user)
        return UserResponse.model_validate(user)


# Module-level singleton
user_service = UserService()
