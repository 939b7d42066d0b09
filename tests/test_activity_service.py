"""
WellBloom Backend: Activity, Exercise and Meditation Service Tests
===================================================================

What we test:
    ✅ Activity listing with exercise counts and meditation ids
    ✅ Case-insensitive search
    ✅ Patch semantics (unset fields unchanged)
    ✅ Delete guard while exercises or a meditation exist
    ✅ Exercise/meditation creation against a missing activity
    ✅ Idempotent mark-complete
    ✅ Shift listing: validation, ordering, top-N
    ✅ One meditation per activity
"""

import pytest
from sqlalchemy import func, select

from wellbloom.exceptions import (
    ConflictError,
    DependencyConflictError,
    NotFoundError,
    ValidationError,
)
from wellbloom.models.activity import Activity, Exercise, Meditation, Shift
from wellbloom.schemas.activity import (
    ActivityUpdate,
    ExerciseCreate,
    ExerciseUpdate,
    MeditationCreate,
    MeditationUpdate,
)
from wellbloom.services.activity_service import ActivityService
from wellbloom.services.exercise_service import ExerciseService
from wellbloom.services.meditation_service import MeditationService


class TestActivityService:

    def setup_method(self):
        self.service = ActivityService()
        self.exercises = ExerciseService()
        self.meditations = MeditationService()

    @pytest.mark.asyncio
    async def test_list_includes_exercise_count_and_meditation(self, db_session, make_activity):
        """Listing reports how many exercises hang off each activity."""
        yoga = await make_activity("Yoga")
        walk = await make_activity("Caminata")
        for _ in range(2):
            await self.exercises.create_exercise(db_session, ExerciseCreate(activity_id=yoga.id))
        meditation = await self.meditations.create_meditation(
            db_session, MeditationCreate(activity_id=yoga.id, duration_minutes=10)
        )

        items = {a.id: a for a in await self.service.list_activities(db_session)}

        assert items[yoga.id].exercise_count == 2
        assert items[yoga.id].meditation_id == meditation.id
        assert items[walk.id].exercise_count == 0
        assert items[walk.id].meditation_id is None

    @pytest.mark.asyncio
    async def test_search_is_case_insensitive(self, db_session, make_activity):
        await make_activity("Yoga matutino")
        await make_activity("Pilates")

        results = await self.service.search_activities(db_session, "YOGA")

        assert [a.name for a in results] == ["Yoga matutino"]
        assert await self.service.search_activities(db_session, "natación") == []

    @pytest.mark.asyncio
    async def test_get_activity_includes_children(self, db_session, make_activity):
        activity = await make_activity("Yoga")
        await self.exercises.create_exercise(
            db_session, ExerciseCreate(activity_id=activity.id, shift=Shift.MORNING)
        )

        detail = await self.service.get_activity(db_session, activity.id)

        assert len(detail.exercises) == 1
        assert detail.exercises[0].shift == Shift.MORNING
        assert detail.meditation is None

    @pytest.mark.asyncio
    async def test_get_missing_activity_raises_not_found(self, db_session):
        with pytest.raises(NotFoundError):
            await self.service.get_activity(db_session, 999)

    @pytest.mark.asyncio
    async def test_update_only_changes_supplied_fields(self, db_session, make_activity):
        """Fields absent from the patch keep their stored values."""
        activity = await make_activity("Yoga", description="Posturas básicas", duration_minutes=30)

        updated = await self.service.update_activity(
            db_session, activity.id, ActivityUpdate(duration_minutes=45)
        )

        assert updated.duration_minutes == 45
        assert updated.name == "Yoga"
        assert updated.description == "Posturas básicas"

    @pytest.mark.asyncio
    async def test_update_can_clear_optional_field(self, db_session, make_activity):
        activity = await make_activity("Yoga", description="Posturas básicas")

        updated = await self.service.update_activity(
            db_session, activity.id, ActivityUpdate(description=None)
        )

        assert updated.description is None

    @pytest.mark.asyncio
    async def test_delete_blocked_by_exercise(self, db_session, make_activity):
        """An activity with exercises survives a delete attempt."""
        activity = await make_activity("Yoga")
        await self.exercises.create_exercise(db_session, ExerciseCreate(activity_id=activity.id))

        with pytest.raises(DependencyConflictError) as exc_info:
            await self.service.delete_activity(db_session, activity.id)

        assert "exercises" in exc_info.value.context["dependents"]
        assert await db_session.get(Activity, activity.id) is not None

    @pytest.mark.asyncio
    async def test_delete_blocked_by_meditation(self, db_session, make_activity):
        activity = await make_activity("Yoga")
        await self.meditations.create_meditation(
            db_session, MeditationCreate(activity_id=activity.id, duration_minutes=15)
        )

        with pytest.raises(DependencyConflictError) as exc_info:
            await self.service.delete_activity(db_session, activity.id)

        assert exc_info.value.context["dependents"] == ["meditation"]

    @pytest.mark.asyncio
    async def test_delete_without_dependents(self, db_session, make_activity):
        activity = await make_activity("Yoga")

        await self.service.delete_activity(db_session, activity.id)

        assert await db_session.get(Activity, activity.id) is None
        with pytest.raises(NotFoundError):
            await self.service.delete_activity(db_session, activity.id)


class TestExerciseService:

    def setup_method(self):
        self.service = ExerciseService()

    @pytest.mark.asyncio
    async def test_create_returns_activity_name(self, db_session, make_activity):
        activity = await make_activity("Estiramientos")

        exercise = await self.service.create_exercise(
            db_session,
            ExerciseCreate(activity_id=activity.id, shift=Shift.EVENING, duration_minutes=20),
        )

        assert exercise.activity_name == "Estiramientos"
        assert exercise.completed is False

    @pytest.mark.asyncio
    async def test_create_with_missing_activity_is_validation_error(self, db_session):
        """Nothing is written when the parent activity does not exist."""
        with pytest.raises(ValidationError) as exc_info:
            await self.service.create_exercise(db_session, ExerciseCreate(activity_id=42))

        assert exc_info.value.errors[0]["field"] == "activity_id"
        count = (await db_session.execute(select(func.count(Exercise.id)))).scalar_one()
        assert count == 0

    @pytest.mark.asyncio
    async def test_complete_is_idempotent(self, db_session, make_activity):
        activity = await make_activity()
        exercise = await self.service.create_exercise(
            db_session, ExerciseCreate(activity_id=activity.id)
        )

        first = await self.service.complete_exercise(db_session, exercise.id)
        second = await self.service.complete_exercise(db_session, exercise.id)

        assert first.completed is True
        assert second.completed is True
        assert second.id == exercise.id

    @pytest.mark.asyncio
    async def test_update_does_not_touch_completion(self, db_session, make_activity):
        activity = await make_activity()
        exercise = await self.service.create_exercise(
            db_session, ExerciseCreate(activity_id=activity.id, duration_minutes=10)
        )
        await self.service.complete_exercise(db_session, exercise.id)

        updated = await self.service.update_exercise(
            db_session, exercise.id, ExerciseUpdate(shift=Shift.AFTERNOON)
        )

        assert updated.completed is True
        assert updated.shift == Shift.AFTERNOON
        assert updated.duration_minutes == 10

    @pytest.mark.asyncio
    async def test_update_missing_exercise_raises_not_found(self, db_session):
        with pytest.raises(NotFoundError):
            await self.service.update_exercise(db_session, 7, ExerciseUpdate(duration_minutes=5))

    @pytest.mark.asyncio
    async def test_list_by_shift_orders_longest_first_and_limits(self, db_session, make_activity):
        activity = await make_activity()
        for minutes in (10, 30, None, 20):
            await self.service.create_exercise(
                db_session,
                ExerciseCreate(activity_id=activity.id, shift=Shift.MORNING, duration_minutes=minutes),
            )
        await self.service.create_exercise(
            db_session,
            ExerciseCreate(activity_id=activity.id, shift=Shift.EVENING, duration_minutes=60),
        )

        everything = await self.service.list_by_shift(db_session, "morning")
        top_two = await self.service.list_by_shift(db_session, "morning", limit=2)

        assert [e.duration_minutes for e in everything] == [30, 20, 10, None]
        assert [e.duration_minutes for e in top_two] == [30, 20]

    @pytest.mark.asyncio
    async def test_list_by_unknown_shift_is_validation_error(self, db_session):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.list_by_shift(db_session, "midnight")

        assert exc_info.value.field == "shift"

    @pytest.mark.asyncio
    async def test_list_by_activity(self, db_session, make_activity):
        yoga = await make_activity("Yoga")
        other = await make_activity("Pilates")
        await self.service.create_exercise(db_session, ExerciseCreate(activity_id=yoga.id))
        await self.service.create_exercise(db_session, ExerciseCreate(activity_id=other.id))

        exercises = await self.service.list_by_activity(db_session, yoga.id)

        assert [e.activity_id for e in exercises] == [yoga.id]


class TestMeditationService:

    def setup_method(self):
        self.service = MeditationService()

    @pytest.mark.asyncio
    async def test_second_meditation_for_activity_conflicts(self, db_session, make_activity):
        activity = await make_activity()
        await self.service.create_meditation(
            db_session, MeditationCreate(activity_id=activity.id, duration_minutes=10)
        )

        with pytest.raises(ConflictError):
            await self.service.create_meditation(
                db_session, MeditationCreate(activity_id=activity.id, duration_minutes=20)
            )

        count = (await db_session.execute(select(func.count(Meditation.id)))).scalar_one()
        assert count == 1

    @pytest.mark.asyncio
    async def test_create_with_missing_activity_is_validation_error(self, db_session):
        with pytest.raises(ValidationError):
            await self.service.create_meditation(
                db_session, MeditationCreate(activity_id=99, duration_minutes=10)
            )

    @pytest.mark.asyncio
    async def test_get_includes_activity_description(self, db_session, make_activity):
        activity = await make_activity("Body scan", description="Recorrido por el cuerpo")
        created = await self.service.create_meditation(
            db_session, MeditationCreate(activity_id=activity.id, duration_minutes=12)
        )

        meditation = await self.service.get_meditation(db_session, created.id)

        assert meditation.activity_name == "Body scan"
        assert meditation.activity_description == "Recorrido por el cuerpo"

    @pytest.mark.asyncio
    async def test_get_by_activity_without_meditation_is_not_found(self, db_session, make_activity):
        activity = await make_activity()

        with pytest.raises(NotFoundError):
            await self.service.get_by_activity(db_session, activity.id)

    @pytest.mark.asyncio
    async def test_completed_listing_and_idempotent_complete(self, db_session, make_activity):
        first = await make_activity("Uno")
        second = await make_activity("Dos")
        done = await self.service.create_meditation(
            db_session, MeditationCreate(activity_id=first.id, duration_minutes=5)
        )
        await self.service.create_meditation(
            db_session, MeditationCreate(activity_id=second.id, duration_minutes=5)
        )

        await self.service.complete_meditation(db_session, done.id)
        again = await self.service.complete_meditation(db_session, done.id)
        completed = await self.service.list_completed(db_session)

        assert again.completed is True
        assert [m.id for m in completed] == [done.id]

    @pytest.mark.asyncio
    async def test_update_duration(self, db_session, make_activity):
        activity = await make_activity()
        meditation = await self.service.create_meditation(
            db_session, MeditationCreate(activity_id=activity.id, duration_minutes=5)
        )

        updated = await self.service.update_meditation(
            db_session, meditation.id, MeditationUpdate(duration_minutes=25)
        )

        assert updated.duration_minutes == 25
        assert updated.completed is False
