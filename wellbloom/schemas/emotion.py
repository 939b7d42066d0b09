"""
WellBloom Backend: Emotion, Phrase and Emotion Record Schemas
==============================================================

What:  API contract for the emotion catalogue, its motivational phrases,
       and the per-user capture events.
"""

from datetime import datetime
from typing import ClassVar, FrozenSet, Optional

from pydantic import BaseModel, Field

from wellbloom.schemas.common import PatchModel


# ══════════════════════════════════════════════════════════════════════════
# Emotions
# ══════════════════════════════════════════════════════════════════════════


class EmotionCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None
    score: Optional[int] = Field(default=None, ge=1, le=10, description="1 (worst) to 10 (best)")


class EmotionUpdate(PatchModel):
    required_if_present: ClassVar[FrozenSet[str]] = frozenset({"name"})

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = None
    score: Optional[int] = Field(default=None, ge=1, le=10)


class EmotionResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    score: Optional[int] = None

    model_config = {"from_attributes": True}


# ══════════════════════════════════════════════════════════════════════════
# Phrases
# ══════════════════════════════════════════════════════════════════════════


class PhraseCreate(BaseModel):
    text: str = Field(min_length=1, max_length=255)
    author: Optional[str] = Field(default=None, max_length=255)
    emotion_id: int


class PhraseUpdate(PatchModel):
    required_if_present: ClassVar[FrozenSet[str]] = frozenset({"text", "emotion_id"})

    text: Optional[str] = Field(default=None, min_length=1, max_length=255)
    author: Optional[str] = Field(default=None, max_length=255)
    emotion_id: Optional[int] = None


class PhraseResponse(BaseModel):
    id: int
    text: str
    author: Optional[str] = None
    emotion_id: int
    emotion_name: str


# ══════════════════════════════════════════════════════════════════════════
# Emotion records
# ══════════════════════════════════════════════════════════════════════════


class EmotionRecordCreate(BaseModel):
    """captured_at is assigned by the server."""

    user_id: int
    emotion_id: int


class EmotionRecordResponse(BaseModel):
    id: int
    user_id: int
    user_name: str
    emotion_id: int
    emotion_name: str
    captured_at: datetime


class EmotionStat(BaseModel):
    """
    What:  One row of GET /api/emotion-records/stats/{user_id}.
    Order: most frequently logged emotion first.
    """

    emotion_id: int
    emotion_name: str
    total: int = Field(description="Times the user logged this emotion")
    average_score: Optional[float] = Field(
        default=None, description="Mean emotion score (null when the emotion is unscored)"
    )
