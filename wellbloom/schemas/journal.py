"""
WellBloom Backend: Journal (Bitácora) Schemas
==============================================

What:  Journal entries annotate one emotion capture event. Each view joins
       a different slice of the user / record / emotion context:

    JournalEntryResponse  create result: user name, capture time, emotion name
    JournalListItem       per-user listing: capture time, emotion name and score
    JournalEntryDetail    single entry: user name/email, emotion name,
                          description and score
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class JournalEntryCreate(BaseModel):
    user_id: int
    record_id: int = Field(description="Emotion record the note refers to; must belong to user_id")
    note: Optional[str] = Field(default=None, max_length=1000)


class JournalNoteUpdate(BaseModel):
    note: Optional[str] = Field(default=None, max_length=1000)


class JournalEntryResponse(BaseModel):
    id: int
    user_id: int
    user_name: str
    record_id: int
    note: Optional[str] = None
    captured_at: datetime
    emotion_name: str


class JournalListItem(BaseModel):
    id: int
    record_id: int
    note: Optional[str] = None
    captured_at: datetime
    emotion_name: str
    emotion_score: Optional[int] = None


class JournalEntryDetail(BaseModel):
    id: int
    user_id: int
    user_name: str
    user_email: str
    record_id: int
    note: Optional[str] = None
    captured_at: datetime
    emotion_name: str
    emotion_description: Optional[str] = None
    emotion_score: Optional[int] = None


class EmotionSummaryItem(BaseModel):
    emotion_id: int
    emotion_name: str
    total_entries: int
    average_score: Optional[float] = None
    first_captured_at: datetime
    last_captured_at: datetime


class JournalSummaryResponse(BaseModel):
    """
    Emotional summary of a user's journal over a trailing window.

    `emotions` is ordered by total_entries, most frequent first; it is empty
    when the user wrote nothing in the window.
    """

    user_id: int
    days: int
    since: datetime = Field(description="Start of the window (UTC)")
    emotions: List[EmotionSummaryItem]
