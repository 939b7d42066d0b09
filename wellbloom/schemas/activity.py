"""
WellBloom Backend: Activity, Exercise and Meditation Schemas
=============================================================

What:  Request bodies and response shapes for the activity catalogue.
Who:   routes/activities.py, routes/exercises.py, routes/meditations.py.

Completion:
    `completed` appears on responses only. Update bodies reject it
    (extra fields are forbidden); the only way to complete an exercise or
    meditation is its mark-complete endpoint.
"""

from typing import ClassVar, FrozenSet, List, Optional

from pydantic import BaseModel, Field

from wellbloom.models.activity import Shift
from wellbloom.schemas.common import PatchModel


# ══════════════════════════════════════════════════════════════════════════
# Activities
# ══════════════════════════════════════════════════════════════════════════


class ActivityCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    duration_minutes: Optional[int] = Field(default=None, ge=1)


class ActivityUpdate(PatchModel):
    required_if_present: ClassVar[FrozenSet[str]] = frozenset({"name"})

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    duration_minutes: Optional[int] = Field(default=None, ge=1)


class ActivityResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    duration_minutes: Optional[int] = None

    model_config = {"from_attributes": True}


class ActivityListItem(ActivityResponse):
    """
    What:  Row of GET /api/activities.
    Why these extra fields:
        - exercise_count: how many exercises hang off the activity
        - meditation_id: the activity's meditation, or null when it has none
    """

    exercise_count: int = Field(description="Number of exercises for this activity")
    meditation_id: Optional[int] = Field(default=None, description="Attached meditation, if any")


class ExerciseSummary(BaseModel):
    id: int
    shift: Optional[Shift] = None
    duration_minutes: Optional[int] = None
    completed: bool

    model_config = {"from_attributes": True}


class MeditationSummary(BaseModel):
    id: int
    duration_minutes: int
    completed: bool

    model_config = {"from_attributes": True}


class ActivityDetail(ActivityResponse):
    """Activity with its exercises and (optional) meditation."""

    exercises: List[ExerciseSummary] = Field(default_factory=list)
    meditation: Optional[MeditationSummary] = None


# ══════════════════════════════════════════════════════════════════════════
# Exercises
# ══════════════════════════════════════════════════════════════════════════


class ExerciseCreate(BaseModel):
    activity_id: int
    shift: Optional[Shift] = Field(default=None, description="morning, afternoon or evening")
    duration_minutes: Optional[int] = Field(default=None, ge=1)


class ExerciseUpdate(PatchModel):
    shift: Optional[Shift] = None
    duration_minutes: Optional[int] = Field(default=None, ge=1)


class ExerciseResponse(BaseModel):
    id: int
    activity_id: int
    activity_name: str
    shift: Optional[Shift] = None
    duration_minutes: Optional[int] = None
    completed: bool


# ══════════════════════════════════════════════════════════════════════════
# Meditations
# ══════════════════════════════════════════════════════════════════════════


class MeditationCreate(BaseModel):
    activity_id: int
    duration_minutes: int = Field(ge=1)


class MeditationUpdate(PatchModel):
    required_if_present: ClassVar[FrozenSet[str]] = frozenset({"duration_minutes"})

    duration_minutes: Optional[int] = Field(default=None, ge=1)


class MeditationResponse(BaseModel):
    id: int
    activity_id: int
    activity_name: str
    activity_description: Optional[str] = None
    duration_minutes: int
    completed: bool
