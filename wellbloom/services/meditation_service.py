"""
WellBloom Backend: Meditation Service
======================================

What:  The (at most one) meditation of each activity.
Who:   Called by routes/meditations.py.

Rules:
    - activity must exist on create (ValidationError on activity_id)
    - an activity with a meditation cannot get a second one (ConflictError);
      the unique constraint on meditations.activity_id covers the race
      between two concurrent creates
    - complete() is idempotent; update() only changes duration_minutes
"""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from wellbloom.exceptions import ConflictError, NotFoundError, ValidationError
from wellbloom.models.activity import Activity, Meditation
from wellbloom.schemas.activity import MeditationCreate, MeditationResponse, MeditationUpdate
from wellbloom.services.base import storage_guard

logger = logging.getLogger(__name__)


class MeditationService:

    async def _load(self, db: AsyncSession, meditation_id: int) -> Optional[Meditation]:
        stmt = (
            select(Meditation)
            .options(joinedload(Meditation.activity))
            .where(Meditation.id == meditation_id)
            .execution_options(populate_existing=True)
        )
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    async def _load_or_404(self, db: AsyncSession, meditation_id: int) -> Meditation:
        meditation = await self._load(db, meditation_id)
        if meditation is None:
            raise NotFoundError(resource="Meditation", resource_id=meditation_id)
        return meditation

    @staticmethod
    def _to_response(meditation: Meditation) -> MeditationResponse:
        return MeditationResponse(
            id=meditation.id,
            activity_id=meditation.activity_id,
            activity_name=meditation.activity.name,
            activity_description=meditation.activity.description,
            duration_minutes=meditation.duration_minutes,
            completed=meditation.completed,
        )

    @storage_guard("create meditation")
    async def create_meditation(
        self, db: AsyncSession, data: MeditationCreate
    ) -> MeditationResponse:
        """
        Attach the meditation of an activity.

        What:    An activity has at most one meditation; the unique index on
                 meditations.activity_id backstops concurrent creates.
        Who:     Called by POST /api/meditations.

        Raises:
            ValidationError: activity_id names no activity (400)
            ConflictError: The activity already has a meditation (409)
        """
        if await db.get(Activity, data.activity_id) is None:
            raise ValidationError(message="Activity does not exist", field="activity_id")

        existing = await db.execute(
            select(Meditation.id).where(Meditation.activity_id == data.activity_id)
        )
        if existing.scalar_one_or_none() is not None:
            raise ConflictError(
                message="This activity already has a meditation",
                context={"activity_id": data.activity_id},
            )

        meditation = Meditation(
            activity_id=data.activity_id,
            duration_minutes=data.duration_minutes,
            completed=False,
        )
        db.add(meditation)
        await db.flush()
        logger.info("Meditation created: id=%d activity_id=%d", meditation.id, data.activity_id)

        return self._to_response(await self._load(db, meditation.id))

    @storage_guard("get meditation")
    async def get_meditation(self, db: AsyncSession, meditation_id: int) -> MeditationResponse:
        return self._to_response(await self._load_or_404(db, meditation_id))

    @storage_guard("get meditation by activity")
    async def get_by_activity(self, db: AsyncSession, activity_id: int) -> MeditationResponse:
        stmt = (
            select(Meditation)
            .options(joinedload(Meditation.activity))
            .where(Meditation.activity_id == activity_id)
        )
        meditation = (await db.execute(stmt)).scalar_one_or_none()
        if meditation is None:
            raise NotFoundError(
                resource="Meditation",
                message=f"Activity with ID '{activity_id}' has no meditation",
                context={"activity_id": activity_id},
            )
        return self._to_response(meditation)

    @storage_guard("list completed meditations")
    async def list_completed(self, db: AsyncSession) -> List[MeditationResponse]:
        stmt = (
            select(Meditation)
            .options(joinedload(Meditation.activity))
            .where(Meditation.completed.is_(True))
            .order_by(Meditation.id)
        )
        result = await db.execute(stmt)
        return [self._to_response(m) for m in result.scalars().all()]

    @storage_guard("update meditation")
    async def update_meditation(
        self, db: AsyncSession, meditation_id: int, data: MeditationUpdate
    ) -> MeditationResponse:
        meditation = await self._load_or_404(db, meditation_id)
        for field, value in data.changes().items():
            setattr(meditation, field, value)
        await db.flush()
        return self._to_response(await self._load(db, meditation_id))

    @storage_guard("complete meditation")
    async def complete_meditation(
        self, db: AsyncSession, meditation_id: int
    ) -> MeditationResponse:
        """Idempotent: an already completed meditation is returned unchanged."""
        meditation = await self._load_or_404(db, meditation_id)
        if not meditation.completed:
            meditation.completed = True
            await db.flush()
            logger.info("Meditation completed: id=%d", meditation_id)
        return self._to_response(await self._load(db, meditation_id))

    @storage_guard("delete meditation")
    async def delete_meditation(self, db: AsyncSession, meditation_id: int) -> None:
        """Hard delete; NotFoundError when absent."""
        meditation = await db.get(Meditation, meditation_id)
        if meditation is None:
            raise NotFoundError(resource="Meditation", resource_id=meditation_id)
        await db.delete(meditation)
        await db.flush()
        logger.info("Meditation deleted: id=%d", meditation_id)


# Module-level singleton
meditation_service = MeditationService()
