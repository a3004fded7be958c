from clinic_booking.database.async_db import (
    dispose_engine,
    get_async_db,
    get_async_engine,
    get_session_factory,
)
from clinic_booking.database.base import Base, TimestampMixin

__all__ = [
    "Base",
    "TimestampMixin",
    "dispose_engine",
    "get_async_db",
    "get_async_engine",
    "get_session_factory",
]
