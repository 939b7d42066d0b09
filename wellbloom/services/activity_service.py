"""
WellBloom Backend: Activity Service
====================================

What:  CRUD and search for wellness activities.
Who:   Called by routes/activities.py.

Delete guard:
    An activity referenced by any exercise or by its meditation cannot be
    deleted. The DependencyConflictError names which dependents block it so
    the client can remove them first.
"""

import logging
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from wellbloom.exceptions import DependencyConflictError, NotFoundError
from wellbloom.models.activity import Activity, Exercise, Meditation
from wellbloom.schemas.activity import (
    ActivityCreate,
    ActivityDetail,
    ActivityListItem,
    ActivityResponse,
    ActivityUpdate,
    ExerciseSummary,
    MeditationSummary,
)
from wellbloom.services.base import storage_guard

logger = logging.getLogger(__name__)


class ActivityService:

    async def _load(self, db: AsyncSession, activity_id: int) -> Optional[Activity]:
        """Activity with exercises and meditation eagerly loaded, or None."""
        stmt = (
            select(Activity)
            .options(selectinload(Activity.exercises), selectinload(Activity.meditation))
            .where(Activity.id == activity_id)
            .execution_options(populate_existing=True)
        )
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    def _to_detail(activity: Activity) -> ActivityDetail:
        return ActivityDetail(
            id=activity.id,
            name=activity.name,
            description=activity.description,
            duration_minutes=activity.duration_minutes,
            exercises=[ExerciseSummary.model_validate(e) for e in activity.exercises],
            meditation=(
                MeditationSummary.model_validate(activity.meditation)
                if activity.meditation is not None
                else None
            ),
        )

    @storage_guard("list activities")
    async def list_activities(self, db: AsyncSession) -> List[ActivityListItem]:
        """
        Every activity with the number of exercises and its meditation id.

        What:    One query; both figures are correlated scalar subqueries, so
                 activities without children still appear (count 0, id null).
        Who:     Called by GET /api/activities.
        """
        exercise_count = (
            select(func.count(Exercise.id))
            .where(Exercise.activity_id == Activity.id)
            .correlate(Activity)
            .scalar_subquery()
        )
        meditation_id = (
            select(Meditation.id)
            .where(Meditation.activity_id == Activity.id)
            .correlate(Activity)
            .scalar_subquery()
        )
        stmt = select(
            Activity,
            exercise_count.label("exercise_count"),
            meditation_id.label("meditation_id"),
        ).order_by(Activity.id)

        result = await db.execute(stmt)
        return [
            ActivityListItem(
                id=activity.id,
                name=activity.name,
                description=activity.description,
                duration_minutes=activity.duration_minutes,
                exercise_count=n_exercises or 0,
                meditation_id=med_id,
            )
            for activity, n_exercises, med_id in result.all()
        ]

    @storage_guard("search activities")
    async def search_activities(self, db: AsyncSession, text: str) -> List[ActivityResponse]:
        stmt = (
            select(Activity)
            .where(Activity.name.icontains(text, autoescape=True))
            .order_by(Activity.name, Activity.id)
        )
        result = await db.execute(stmt)
        return [ActivityResponse.model_validate(a) for a in result.scalars().all()]

    @storage_guard("get activity")
    async def get_activity(self, db: AsyncSession, activity_id: int) -> ActivityDetail:
        activity = await self._load(db, activity_id)
        if activity is None:
            raise NotFoundError(resource="Activity", resource_id=activity_id)
        return self._to_detail(activity)

    @storage_guard("create activity")
    async def create_activity(self, db: AsyncSession, data: ActivityCreate) -> ActivityDetail:
        """Insert an activity and return it re-read with its (empty) children."""
        activity = Activity(**data.model_dump())
        db.add(activity)
        await db.flush()
        logger.info("Activity created: id=%d", activity.id)

        return self._to_detail(await self._load(db, activity.id))

    @storage_guard("update activity")
    async def update_activity(
        self, db: AsyncSession, activity_id: int, data: ActivityUpdate
    ) -> ActivityDetail:
        activity = await db.get(Activity, activity_id)
        if activity is None:
            raise NotFoundError(resource="Activity", resource_id=activity_id)

        for field, value in data.changes().items():
            setattr(activity, field, value)
        await db.flush()

        return self._to_detail(await self._load(db, activity_id))

    @storage_guard("delete activity")
    async def delete_activity(self, db: AsyncSession, activity_id: int) -> None:
        """
        Hard-delete an activity that has no exercises and no meditation.

        Args:
            db: Request session
            activity_id: Activity to delete

        Raises:
            NotFoundError: No such activity (404)
            DependencyConflictError: Exercises or a meditation still reference
                it; `dependents` names which (400)
        """
        activity = await db.get(Activity, activity_id)
        if activity is None:
            raise NotFoundError(resource="Activity", resource_id=activity_id)

        n_exercises = (
            await db.execute(
                select(func.count(Exercise.id)).where(Exercise.activity_id == activity_id)
            )
        ).scalar_one()
        has_meditation = (
            await db.execute(select(Meditation.id).where(Meditation.activity_id == activity_id))
        ).scalar_one_or_none() is not None

        dependents = []
        if n_exercises:
            dependents.append("exercises")
        if has_meditation:
            dependents.append("meditation")
        if dependents:
            raise DependencyConflictError(
                message=(
                    "Cannot delete the activity: it still has "
                    f"{' and '.join(dependents)}"
                ),
                dependents=dependents,
                context={"activity_id": activity_id, "exercise_count": n_exercises},
            )

        await db.delete(activity)
        await db.flush()
        logger.info("Activity deleted: id=%d", activity_id)


# Module-level singleton
activity_service = ActivityService()
