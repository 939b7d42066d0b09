"""
WellBloom Backend: Custom Exception Hierarchy
==============================================

What:  Defines application-specific exceptions for every business-rule and
       infrastructure failure the API can report.
Why:   Services raise a precise exception; global handlers (registered in
       main.py) turn it into a consistent JSON error with the right status.
How:   Each exception class carries a user-facing message and an optional
       context dict that is logged but only partially exposed.
Who:   Raised by services and security helpers; caught by global handlers.

Exception Hierarchy:
    WellBloomError (base)
    ├── ValidationError            → 400 Bad Request (per-field errors)
    ├── NotFoundError              → 404 Not Found
    ├── ConflictError              → 409 Conflict (uniqueness)
    ├── DependencyConflictError    → 400 Bad Request (delete blocked)
    ├── UnauthorizedError          → 401 Unauthorized
    │   └── InvalidCredentialsError
    ├── ForbiddenError             → 403 Forbidden
    │   └── OwnershipError
    └── StorageUnavailableError    → 503 Service Unavailable
"""

from typing import Any, Dict, Iterable, List, Optional


class WellBloomError(Exception):
    """
    Base exception for all WellBloom application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged; not returned for storage faults)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(WellBloomError):
    """
    Raised when client input fails a business validation rule.

    What:    Carries every violated field, not just the first one.
    When:    Referenced parent missing (activity, emotion, administrator...),
             invalid enum value in a path parameter, empty patch values.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "Validation failed",
            "details": {"errors": [{"field": "activity_id", "message": "Activity does not exist"}]}
        }
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        errors: Optional[Iterable[Dict[str, str]]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        collected: List[Dict[str, str]] = list(errors or [])
        if field and not collected:
            collected.append({"field": field, "message": message})
        ctx = context or {}
        ctx["errors"] = collected
        super().__init__(message=message, context=ctx)
        self.field = field
        self.errors = collected


class NotFoundError(WellBloomError):
    """
    Raised when a requested resource does not exist.

    The store returns None for missing rows; services convert that into
    this exception so the HTTP layer can answer 404.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if message is None:
            message = f"The requested {resource} was not found"
            if resource_id is not None:
                message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = str(resource_id)
        super().__init__(message=message, context=ctx)


class ConflictError(WellBloomError):
    """
    Raised when a write would violate a uniqueness rule.

    When:    Duplicate user/administrator email, duplicate emotion name,
             second meditation for the same activity.
    HTTP:    409 Conflict
    """

    def __init__(
        self,
        message: str = "The resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DependencyConflictError(WellBloomError):
    """
    Raised when a delete is blocked by dependent rows.

    The message names the dependents that block the deletion so the
    client knows what to remove or reassign first.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "Cannot delete: dependent records exist",
        dependents: Optional[Iterable[str]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if dependents:
            ctx["dependents"] = list(dependents)
        super().__init__(message=message, context=ctx)


class UnauthorizedError(WellBloomError):
    """Missing, malformed, or expired bearer token (HTTP 401)."""

    def __init__(
        self,
        message: str = "Unauthorized access",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InvalidCredentialsError(UnauthorizedError):
    """Unknown email or wrong password on login."""

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Invalid credentials", context=context)


class ForbiddenError(WellBloomError):
    """Authenticated, but not allowed to perform this action (HTTP 403)."""

    def __init__(
        self,
        message: str = "You do not have permission to perform this action",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class OwnershipError(ForbiddenError):
    """A referenced record belongs to a different user."""

    def __init__(
        self,
        message: str = "The emotion record does not belong to this user",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StorageUnavailableError(WellBloomError):
    """
    Raised when the backing store is unreachable or fails unexpectedly.

    What:    Connection lost, pool timeout, driver error.
    HTTP:    503 Service Unavailable

    Security Note:
        The message returned to the client is always generic. Driver and
        SQL details are logged server-side only. Callers must treat the
        operation as not applied; retrying is their decision.
    """

    def __init__(
        self,
        message: str = "The data store is temporarily unavailable. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
