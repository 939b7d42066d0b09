"""
WellBloom Backend: Shared Request/Response Schemas
===================================================

What:  Envelopes reused by every resource: pagination wrappers, error and
       message bodies, the health payload, and the base class for
       partial-update (patch) requests.

Pagination shapes:
    Offset-based (most lists):
        {"data": [...], "pagination": {"total": 15, "limit": 10, "offset": 10}}
    Page-number based (emotions):
        {"data": [...], "pagination": {"total": 15, "page": 2, "limit": 10, "total_pages": 2}}
"""

from typing import Annotated, Any, ClassVar, Dict, FrozenSet, Generic, List, Optional, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field, model_validator

ItemT = TypeVar("ItemT")


# ── Credentials ───────────────────────────────────────────────────────────

# bcrypt only reads the first 72 bytes of its input and recent releases
# refuse anything longer
BCRYPT_MAX_BYTES = 72


def _fits_bcrypt(value: str) -> str:
    if len(value.encode("utf-8")) > BCRYPT_MAX_BYTES:
        raise ValueError(f"password must be at most {BCRYPT_MAX_BYTES} bytes when UTF-8 encoded")
    return value


# New passwords: 8 characters minimum, 72 UTF-8 bytes maximum
Password = Annotated[str, Field(min_length=8, max_length=BCRYPT_MAX_BYTES), AfterValidator(_fits_bcrypt)]

# Emails compare case-insensitively, so they are stored lowercased
Email = Annotated[EmailStr, AfterValidator(str.lower)]


class OffsetPagination(BaseModel):
    total: int = Field(description="Rows matching the filter, ignoring the page window")
    limit: int
    offset: int


class OffsetPage(BaseModel, Generic[ItemT]):
    data: List[ItemT]
    pagination: OffsetPagination


class NumberedPagination(BaseModel):
    total: int = Field(description="Rows matching the filter, ignoring the page window")
    page: int
    limit: int
    total_pages: int


class NumberedPage(BaseModel, Generic[ItemT]):
    data: List[ItemT]
    pagination: NumberedPagination


class MessageResponse(BaseModel):
    """Body returned by delete endpoints."""

    message: str


class FieldError(BaseModel):
    field: str
    message: str


class ErrorResponse(BaseModel):
    """
    Standardized error body for all API errors.

    Example:
        {
            "error": "conflict",
            "message": "An emotion named 'alegría' already exists",
            "request_id": "a1b2c3d4"
        }
    """

    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[Dict[str, Any]] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str
    database: str = Field(description="Database connectivity: connected, disconnected")
    database_latency_ms: Optional[float] = Field(default=None, description="SELECT 1 round trip; null when unreachable")
    environment: str
    uptime_seconds: float


class PatchModel(BaseModel):
    """
    Base for partial-update request bodies.

    Fields left out of the JSON body stay unset (`model_fields_set`) and are
    not touched by the update; fields listed in `required_if_present` may
    be omitted but cannot be sent as an explicit null. Unknown fields are
    rejected.
    """

    model_config = ConfigDict(extra="forbid")

    required_if_present: ClassVar[FrozenSet[str]] = frozenset()

    @model_validator(mode="after")
    def reject_explicit_nulls(self) -> "PatchModel":
        nulled = sorted(
            name
            for name in self.required_if_present & self.model_fields_set
            if getattr(self, name) is None
        )
        if nulled:
            raise ValueError(f"Fields may not be null: {', '.join(nulled)}")
        return self

    def changes(self) -> Dict[str, Any]:
        """Only the fields the client explicitly supplied."""
        return self.model_dump(exclude_unset=True)
