"""
WellBloom Backend: Exercise Service
====================================

What:  Exercises attached to an activity, tagged with an optional shift.
Who:   Called by routes/exercises.py.

State machine:
    pending ──complete()──▶ completed
    complete() on an already completed exercise is a no-op that still
    returns the record. update() never touches `completed`.
"""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from wellbloom.exceptions import NotFoundError, ValidationError
from wellbloom.models.activity import Activity, Exercise, Shift
from wellbloom.schemas.activity import ExerciseCreate, ExerciseResponse, ExerciseUpdate
from wellbloom.services.base import storage_guard

logger = logging.getLogger(__name__)


def parse_shift(value: str) -> Shift:
    """Validate a raw shift string against the enumeration."""
    try:
        return Shift(value.lower())
    except ValueError:
        raise ValidationError(
            message=f"Invalid shift '{value}'. Must be one of: "
            + ", ".join(s.value for s in Shift),
            field="shift",
        )


class ExerciseService:

    async def _load(self, db: AsyncSession, exercise_id: int) -> Optional[Exercise]:
        stmt = (
            select(Exercise)
            .options(joinedload(Exercise.activity))
            .where(Exercise.id == exercise_id)
            .execution_options(populate_existing=True)
        )
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    async def _load_or_404(self, db: AsyncSession, exercise_id: int) -> Exercise:
        exercise = await self._load(db, exercise_id)
        if exercise is None:
            raise NotFoundError(resource="Exercise", resource_id=exercise_id)
        return exercise

    @staticmethod
    def _to_response(exercise: Exercise) -> ExerciseResponse:
        return ExerciseResponse(
            id=exercise.id,
            activity_id=exercise.activity_id,
            activity_name=exercise.activity.name,
            shift=exercise.shift,
            duration_minutes=exercise.duration_minutes,
            completed=exercise.completed,
        )

    @storage_guard("create exercise")
    async def create_exercise(self, db: AsyncSession, data: ExerciseCreate) -> ExerciseResponse:
        """
        Create a pending exercise under an existing activity.

        Raises:
            ValidationError: activity_id names no activity (400); nothing is written
        """
        if await db.get(Activity, data.activity_id) is None:
            raise ValidationError(message="Activity does not exist", field="activity_id")

        exercise = Exercise(
            activity_id=data.activity_id,
            shift=data.shift,
            duration_minutes=data.duration_minutes,
            completed=False,
        )
        db.add(exercise)
        await db.flush()
        logger.info("Exercise created: id=%d activity_id=%d", exercise.id, data.activity_id)

        return self._to_response(await self._load(db, exercise.id))

    @storage_guard("list exercises by activity")
    async def list_by_activity(self, db: AsyncSession, activity_id: int) -> List[ExerciseResponse]:
        stmt = (
            select(Exercise)
            .options(joinedload(Exercise.activity))
            .where(Exercise.activity_id == activity_id)
            .order_by(Exercise.id)
        )
        result = await db.execute(stmt)
        return [self._to_response(e) for e in result.scalars().all()]

    @storage_guard("list exercises by shift")
    async def list_by_shift(
        self, db: AsyncSession, shift: str, limit: Optional[int] = None
    ) -> List[ExerciseResponse]:
        """
        Exercises of one shift, longest first.

        Args:
            shift: raw path value; rejected with ValidationError unless it is
                   morning, afternoon or evening
            limit: when given, only the top-N longest exercises
        """
        wanted = parse_shift(shift)
        stmt = (
            select(Exercise)
            .options(joinedload(Exercise.activity))
            .where(Exercise.shift == wanted)
            .order_by(Exercise.duration_minutes.desc().nulls_last(), Exercise.id)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await db.execute(stmt)
        return [self._to_response(e) for e in result.scalars().all()]

    @storage_guard("update exercise")
    async def update_exercise(
        self, db: AsyncSession, exercise_id: int, data: ExerciseUpdate
    ) -> ExerciseResponse:
        exercise = await self._load_or_404(db, exercise_id)
        for field, value in data.changes().items():
            setattr(exercise, field, value)
        await db.flush()
        return self._to_response(await self._load(db, exercise_id))

    @storage_guard("complete exercise")
    async def complete_exercise(self, db: AsyncSession, exercise_id: int) -> ExerciseResponse:
        """Mark an exercise completed. Completing it again is a no-op that still succeeds."""
        exercise = await self._load_or_404(db, exercise_id)
        if not exercise.completed:
            exercise.completed = True
            await db.flush()
            logger.info("Exercise completed: id=%d", exercise_id)
        return self._to_response(await self._load(db, exercise_id))

    @storage_guard("delete exercise")
    async def delete_exercise(self, db: AsyncSession, exercise_id: int) -> None:
        """Hard delete; NotFoundError when absent."""
        exercise = await db.get(Exercise, exercise_id)
        if exercise is None:
            raise NotFoundError(resource="Exercise", resource_id=exercise_id)
        await db.delete(exercise)
        await db.flush()
        logger.info("Exercise deleted: id=%d", exercise_id)


# Module-level singleton
exercise_service = ExerciseService()
