"""
WellBloom Backend: Activity, Exercise and Meditation Models
============================================================

What:  Guided wellness activities and their two specializations.

Relationships:
    Activity 1──N Exercise
    Activity 1──0/1 Meditation

State machine (Exercise and Meditation):
    pending (completed=False) ──mark complete──▶ completed (completed=True)
    There is no transition back to pending.

Consistency rules:
    - An Activity cannot be deleted while any Exercise or Meditation
      references it (checked by ActivityService)
    - An Activity has at most one Meditation: checked by MeditationService
      and backstopped by the unique constraint on meditations.activity_id
"""

import enum
from typing import List, Optional

from sqlalchemy import Boolean, Enum, ForeignKey, Integer, String, Text, false
from sqlalchemy.orm import Mapped, mapped_column, relationship

from wellbloom.database import Base


class Shift(str, enum.Enum):
    """Time-of-day category tagging an exercise."""

    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"


class Activity(Base):
    __tablename__ = "activities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    duration_minutes: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    exercises: Mapped[List["Exercise"]] = relationship(
        back_populates="activity", order_by="Exercise.id"
    )
    meditation: Mapped[Optional["Meditation"]] = relationship(
        back_populates="activity", uselist=False
    )

    def __repr__(self) -> str:
        return f"<Activity(id={self.id}, name='{self.name}')>"


class Exercise(Base):
    __tablename__ = "exercises"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    activity_id: Mapped[int] = mapped_column(
        ForeignKey("activities.id"), nullable=False, index=True
    )
    # Stored as the enum value ("morning", ...) in a plain VARCHAR
    shift: Mapped[Optional[Shift]] = mapped_column(
        Enum(
            Shift,
            native_enum=False,
            length=20,
            values_callable=lambda members: [m.value for m in members],
            name="exercise_shift",
        ),
        nullable=True,
    )
    duration_minutes: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    completed: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )

    activity: Mapped["Activity"] = relationship(back_populates="exercises")

    def __repr__(self) -> str:
        return f"<Exercise(id={self.id}, activity_id={self.activity_id}, shift={self.shift})>"


class Meditation(Base):
    __tablename__ = "meditations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    activity_id: Mapped[int] = mapped_column(
        ForeignKey("activities.id"), nullable=False, unique=True
    )
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    completed: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )

    activity: Mapped["Activity"] = relationship(back_populates="meditation")

    def __repr__(self) -> str:
        return f"<Meditation(id={self.id}, activity_id={self.activity_id})>"
