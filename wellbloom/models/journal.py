"""
WellBloom Backend: Journal Entry Model
=======================================

What:  A user-authored note attached to one emotion capture event.
Rule:  The referenced EmotionRecord must belong to the same user the entry
       names. The schema cannot express that cross-table check, so
       JournalService performs it before inserting.
"""

from typing import TYPE_CHECKING, Optional

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from wellbloom.database import Base

if TYPE_CHECKING:
    from wellbloom.models.emotion import EmotionRecord
    from wellbloom.models.user import User


class JournalEntry(Base):
    __tablename__ = "journal_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    record_id: Mapped[int] = mapped_column(ForeignKey("emotion_records.id"), nullable=False)
    note: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)

    user: Mapped["User"] = relationship(back_populates="journal_entries")
    record: Mapped["EmotionRecord"] = relationship(back_populates="journal_entries")

    def __repr__(self) -> str:
        return f"<JournalEntry(id={self.id}, user_id={self.user_id}, record_id={self.record_id})>"
