"""
WellBloom Backend: Administrator and Report Schemas
====================================================

What:  Back-office account management, login, and the Q&A reports.

Security:
    No response model declares a password or password_hash field, so the
    digest can never be serialized even if a service passes the ORM row.
"""

from datetime import datetime
from typing import ClassVar, FrozenSet, Optional

from pydantic import BaseModel, Field

from wellbloom.models.admin import AdminRole
from wellbloom.schemas.common import Email, Password, PatchModel


# ══════════════════════════════════════════════════════════════════════════
# Administrators
# ══════════════════════════════════════════════════════════════════════════


class AdminRegister(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: Email
    password: Password
    role: AdminRole = Field(default=AdminRole.MODERATOR, description="superadmin, moderator or editor")


class AdminLogin(BaseModel):
    email: Email
    password: str = Field(min_length=1)


class AdminUpdate(PatchModel):
    required_if_present: ClassVar[FrozenSet[str]] = frozenset({"name", "email", "password", "role"})

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    email: Optional[Email] = None
    password: Optional[Password] = None
    role: Optional[AdminRole] = None


class AdminResponse(BaseModel):
    id: int
    name: str
    email: str
    role: AdminRole
    created_at: datetime
    last_access_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class LoginResponse(BaseModel):
    id: int
    name: str
    email: str
    role: AdminRole
    token: str = Field(description="Bearer token for the Authorization header")
    token_type: str = "bearer"


# ══════════════════════════════════════════════════════════════════════════
# Reports
# ══════════════════════════════════════════════════════════════════════════


class ReportCreate(BaseModel):
    admin_id: int
    question: str = Field(min_length=1, max_length=255)
    answer: Optional[str] = Field(default=None, max_length=1000)
    note: Optional[str] = Field(default=None, max_length=1000)


class ReportAnswerUpdate(PatchModel):
    answer: Optional[str] = Field(default=None, max_length=1000)
    note: Optional[str] = Field(default=None, max_length=1000)


class ReportResponse(BaseModel):
    id: int
    admin_id: int
    admin_name: str
    admin_role: AdminRole
    question: str
    answer: Optional[str] = None
    note: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class ReportDetail(ReportResponse):
    admin_email: str


class RoleReportStats(BaseModel):
    """Answered means answer is not null; pending is total minus answered."""

    role: AdminRole
    total: int
    answered: int
    pending: int
