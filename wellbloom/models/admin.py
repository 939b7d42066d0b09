"""
WellBloom Backend: Administrator and Report Models
===================================================

What:  Back-office accounts and the Q&A reports they author.

Consistency rules (enforced by AdminService before deleting):
    - The last remaining superadmin cannot be deleted
    - An administrator referenced by any report cannot be deleted; the
      reports must be reassigned first
"""

import enum
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import DateTime, Enum, ForeignKey, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from wellbloom.database import Base


class AdminRole(str, enum.Enum):
    SUPERADMIN = "superadmin"
    MODERATOR = "moderator"
    EDITOR = "editor"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Administrator(Base):
    __tablename__ = "administrators"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[AdminRole] = mapped_column(
        Enum(
            AdminRole,
            native_enum=False,
            length=20,
            values_callable=lambda members: [m.value for m in members],
            name="admin_role",
        ),
        nullable=False,
        default=AdminRole.MODERATOR,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )
    # Updated as a side effect of every successful login
    last_access_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    reports: Mapped[List["Report"]] = relationship(back_populates="admin")

    def __repr__(self) -> str:
        return f"<Administrator(id={self.id}, email='{self.email}', role='{self.role}')>"


class Report(Base):
    """
    Internal feedback record: a question, optionally answered later.

    A report is "answered" when answer is not null; the list filter and
    the per-role statistics both rely on that definition.
    """

    __tablename__ = "reports"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    admin_id: Mapped[int] = mapped_column(
        ForeignKey("administrators.id"), nullable=False, index=True
    )
    question: Mapped[str] = mapped_column(String(255), nullable=False)
    answer: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    note: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    admin: Mapped["Administrator"] = relationship(back_populates="reports")

    def __repr__(self) -> str:
        return f"<Report(id={self.id}, admin_id={self.admin_id})>"
