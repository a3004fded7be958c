"""
Domain Exceptions

These exceptions represent business rule violations and domain-specific errors.
They are caught and translated to HTTP responses in the API layer
(see clinic_booking.api.exception_handlers).
"""

from typing import Any


class DomainException(Exception):
    """
    Base exception for all domain-related errors.

    Provides a standardized way to communicate business rule violations.
    """

    def __init__(self, message: str, code: str | None = None, details: dict[str, Any] | None = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code (e.g., "SLOT_ALREADY_BOOKED")
            details: Additional context about the error
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__.upper()
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(DomainException):
    """
    Raised when domain validation fails.

    Use for invalid entity states, value object creation failures, etc.
    """

    def __init__(self, message: str, field: str | None = None, details: dict[str, Any] | None = None):
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, "VALIDATION_ERROR", details)
        self.field = field


class InvalidRangeException(DomainException):
    """Raised when a time range does not start strictly before it ends."""

    def __init__(self, start_time: str, end_time: str, message: str | None = None):
        self.start_time = start_time
        self.end_time = end_time
        super().__init__(
            message or "Start time must be before end time",
            "INVALID_RANGE",
            {"start_time": start_time, "end_time": end_time},
        )


class BadRequestException(DomainException):
    """Raised when required identifiers cannot be resolved from a request."""

    def __init__(self, message: str, missing: list[str] | None = None):
        self.missing = missing or []
        details: dict[str, Any] = {}
        if self.missing:
            details["missing"] = self.missing
        super().__init__(message, "BAD_REQUEST", details)


class EntityNotFoundException(DomainException):
    """
    Raised when an entity is not found.
    """

    def __init__(
        self,
        entity_type: str,
        entity_id: Any,
        message: str | None = None,
    ):
        self.entity_type = entity_type
        self.entity_id = entity_id
        msg = message or f"{entity_type} with ID {entity_id} not found"
        super().__init__(
            msg,
            "ENTITY_NOT_FOUND",
            {"entity_type": entity_type, "entity_id": str(entity_id)},
        )


class InvalidOperationException(DomainException):
    """Raised when an operation is not valid in the current state."""

    def __init__(self, operation: str, current_state: str, message: str | None = None):
        self.operation = operation
        self.current_state = current_state
        msg = message or f"Cannot perform '{operation}' in state '{current_state}'"
        super().__init__(
            msg,
            "INVALID_OPERATION",
            {"operation": operation, "current_state": current_state},
        )


class AuthenticationException(DomainException):
    """Raised when a request carries no usable identity."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(DomainException):
    """Raised when a user is not authorized to perform an operation."""

    def __init__(self, operation: str, resource: str | None = None, user_id: str | None = None):
        self.operation = operation
        self.resource = resource
        self.user_id = user_id
        msg = f"Not authorized to perform '{operation}'"
        if resource:
            msg += f" on '{resource}'"
        super().__init__(
            msg,
            "AUTHORIZATION_ERROR",
            {
                "operation": operation,
                "resource": resource,
            },
        )


class ScheduleConflictException(DomainException):
    """Raised when a schedule entry overlaps another entry of the same doctor."""

    def __init__(
        self,
        doctor_id: int,
        day_name: str,
        time_range: str,
        conflicting_schedule_id: int | None = None,
    ):
        self.doctor_id = doctor_id
        self.day_name = day_name
        self.time_range = time_range
        self.conflicting_schedule_id = conflicting_schedule_id
        details: dict[str, Any] = {
            "doctor_id": doctor_id,
            "day": day_name,
            "time_range": time_range,
        }
        if conflicting_schedule_id is not None:
            details["conflicting_schedule_id"] = conflicting_schedule_id
        super().__init__(
            f"Schedule overlaps with an existing slot on {day_name} ({time_range})",
            "SCHEDULE_CONFLICT",
            details,
        )


class SlotAlreadyBookedException(DomainException):
    """Raised when a booking loses the race for a doctor/clinic/date/time."""

    def __init__(
        self,
        doctor_id: int | None = None,
        clinic_id: int | None = None,
        appointment_date: str | None = None,
        time_slot: str | None = None,
        message: str | None = None,
    ):
        self.doctor_id = doctor_id
        self.clinic_id = clinic_id
        self.appointment_date = appointment_date
        self.time_slot = time_slot
        msg = message or "Time slot is already booked"
        details: dict[str, Any] = {}
        if doctor_id is not None:
            details["doctor_id"] = doctor_id
        if clinic_id is not None:
            details["clinic_id"] = clinic_id
        if appointment_date:
            details["date"] = appointment_date
        if time_slot:
            details["time_slot"] = time_slot
        super().__init__(msg, "SLOT_ALREADY_BOOKED", details)


class PersistenceException(DomainException):
    """Raised when the store fails unexpectedly. Surfaced to callers generically."""

    def __init__(self, operation: str, original_error: Exception | None = None):
        self.operation = operation
        self.original_error = original_error
        details: dict[str, Any] = {"operation": operation}
        if original_error:
            details["original_error"] = str(original_error)
        super().__init__(f"Persistence failure during '{operation}'", "INTERNAL_ERROR", details)
