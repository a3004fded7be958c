"""
Flush helpers translating store errors into domain exceptions.
"""

import logging
from collections.abc import Callable

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_booking.core.domain import DomainException, PersistenceException

logger = logging.getLogger(__name__)


async def flush_or_raise(
    session: AsyncSession,
    operation: str,
    on_integrity_error: Callable[[], DomainException] | None = None,
) -> None:
    """
    Flush pending changes.

    Raises:
        DomainException: built by ``on_integrity_error`` when a constraint rejects the write
        PersistenceException: any other store failure
    """
    try:
        await session.flush()
    except IntegrityError as e:
        if on_integrity_error is not None:
            logger.info(f"Constraint rejected {operation}: {e.orig}")
            raise on_integrity_error() from e
        logger.error(f"Integrity error during {operation}: {e}")
        raise PersistenceException(operation, e) from e
    except SQLAlchemyError as e:
        logger.error(f"Database error during {operation}: {e}", exc_info=True)
        raise PersistenceException(operation, e) from e
