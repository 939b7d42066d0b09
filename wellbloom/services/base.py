"""
WellBloom Backend: Shared Service Error Handling
=================================================

What:  Translates storage-layer failures into application exceptions.
Why:   Every service method follows the same policy, so it lives in one
       decorator instead of a try/except block per method:

    WellBloomError      → re-raised unchanged (business rule already named)
    IntegrityError      → ConflictError (unique constraint lost a race with
                          a concurrent request that passed the same pre-check)
    SQLAlchemyError     → StorageUnavailableError (logged with traceback;
                          generic message to the client)
    anything else       → propagates to the global 500 handler
"""

import functools
import logging
from typing import Any, Awaitable, Callable, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from wellbloom.exceptions import ConflictError, StorageUnavailableError, WellBloomError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def storage_guard(
    operation: str,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """
    Decorate an async service method with the storage error policy.

    Args:
        operation: human-readable name used in log lines and error context
                   (e.g. "create activity")
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            try:
                return await func(*args, **kwargs)
            except WellBloomError:
                raise
            except IntegrityError as e:
                logger.warning("Integrity violation during %s: %s", operation, e.orig)
                raise ConflictError(
                    message="The operation conflicts with an existing record",
                    context={"operation": operation},
                )
            except SQLAlchemyError as e:
                logger.error("Storage error during %s: %s", operation, str(e), exc_info=True)
                raise StorageUnavailableError(
                    context={"operation": operation, "error_type": type(e).__name__},
                )

        return wrapper

    return decorator
