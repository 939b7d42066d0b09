"""
WellBloom Backend: User Model
==============================

What:  ORM model for the `users` table (people tracking their wellbeing).
Who:   Used by UserService, and joined into emotion-record and journal views.

Table Design:
    - email is unique: enforced by the service (409) and backstopped by a
      unique constraint
    - password_hash is never serialized by any response schema
    - last_login_at is null until the client reports the first login
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import DateTime, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from wellbloom.database import Base

if TYPE_CHECKING:
    from wellbloom.models.emotion import EmotionRecord
    from wellbloom.models.journal import JournalEntry


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    section: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )
    last_login_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    emotion_records: Mapped[List["EmotionRecord"]] = relationship(back_populates="user")
    journal_entries: Mapped[List["JournalEntry"]] = relationship(back_populates="user")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
