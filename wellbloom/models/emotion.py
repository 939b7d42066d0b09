"""
WellBloom Backend: Emotion, EmotionRecord and Phrase Models
============================================================

What:  The emotion catalogue, the capture events that reference it, and the
       motivational phrases attached to each emotion.

Relationships:
    Emotion 1──N EmotionRecord N──1 User
    Emotion 1──N Phrase

Consistency rules (enforced in the service layer):
    - Emotion.name is unique
    - An Emotion cannot be deleted while any EmotionRecord references it
    - An EmotionRecord cannot be deleted while a JournalEntry references it
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from wellbloom.database import Base

if TYPE_CHECKING:
    from wellbloom.models.journal import JournalEntry
    from wellbloom.models.user import User


class Emotion(Base):
    """An emotion users can log, scored 1 (worst) to 10 (best)."""

    __tablename__ = "emotions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    score: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    records: Mapped[List["EmotionRecord"]] = relationship(back_populates="emotion")
    # Phrases have no meaning without their emotion
    phrases: Mapped[List["Phrase"]] = relationship(
        back_populates="emotion", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Emotion(id={self.id}, name='{self.name}')>"


class EmotionRecord(Base):
    """
    A single emotion capture event for a user.

    captured_at is assigned by the store at insert time; clients never
    supply it.
    """

    __tablename__ = "emotion_records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    emotion_id: Mapped[int] = mapped_column(ForeignKey("emotions.id"), nullable=False)
    captured_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    user: Mapped["User"] = relationship(back_populates="emotion_records")
    emotion: Mapped["Emotion"] = relationship(back_populates="records")
    journal_entries: Mapped[List["JournalEntry"]] = relationship(back_populates="record")

    # Listing by user newest-first is the dominant query
    __table_args__ = (
        Index("idx_emotion_records_user_captured", "user_id", "captured_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<EmotionRecord(id={self.id}, user_id={self.user_id}, "
            f"emotion_id={self.emotion_id})>"
        )


class Phrase(Base):
    __tablename__ = "phrases"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    text: Mapped[str] = mapped_column(String(255), nullable=False)
    author: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    emotion_id: Mapped[int] = mapped_column(ForeignKey("emotions.id", ondelete="CASCADE"), nullable=False)

    emotion: Mapped["Emotion"] = relationship(back_populates="phrases")

    def __repr__(self) -> str:
        return f"<Phrase(id={self.id}, emotion_id={self.emotion_id})>"
