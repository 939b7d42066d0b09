"""
WellBloom Backend: User Schemas
================================

What:  Request/response models for the people who log emotions.
Note:  UserResponse has no password field; the bcrypt digest stays in the
       database.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from wellbloom.schemas.common import Email, Password


class UserCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: Email
    password: Password
    section: Optional[str] = Field(default=None, max_length=255)


class UserSectionUpdate(BaseModel):
    section: str = Field(min_length=1, max_length=255)

    @field_validator("section")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("section must not be blank")
        return v.strip()


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    section: Optional[str] = None
    created_at: datetime
    last_login_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
