"""
Domain Layer - Core DDD building blocks

This module provides base classes for Domain-Driven Design:
- Entities: Objects with identity and lifecycle
- Value Objects: Immutable objects compared by value
- Events: Domain events for communication
- Exceptions: Domain-specific error handling
"""

from clinic_booking.core.domain.entities import AggregateRoot, Entity
from clinic_booking.core.domain.events import DomainEvent
from clinic_booking.core.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    BadRequestException,
    DomainException,
    EntityNotFoundException,
    InvalidOperationException,
    InvalidRangeException,
    PersistenceException,
    ScheduleConflictException,
    SlotAlreadyBookedException,
    ValidationException,
)
from clinic_booking.core.domain.value_objects import PhoneNumber, StatusEnum, ValueObject

__all__ = [
    # Entities
    "Entity",
    "AggregateRoot",
    # Value Objects
    "ValueObject",
    "PhoneNumber",
    "StatusEnum",
    # Events
    "DomainEvent",
    # Exceptions
    "DomainException",
    "ValidationException",
    "InvalidRangeException",
    "BadRequestException",
    "EntityNotFoundException",
    "InvalidOperationException",
    "AuthenticationException",
    "AuthorizationException",
    "ScheduleConflictException",
    "SlotAlreadyBookedException",
    "PersistenceException",
]
