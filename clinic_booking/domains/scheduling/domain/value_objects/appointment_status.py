"""
Scheduling Domain Status Enums

Status and role enums for the scheduling domain.
"""

from clinic_booking.core.domain import StatusEnum


class AppointmentStatus(StatusEnum):
    """
    Appointment lifecycle states.

    Valid transitions:
    - PENDING -> CONFIRMED, CANCELLED, REJECTED
    - CONFIRMED -> COMPLETED, CANCELLED, REJECTED
    - COMPLETED, CANCELLED, REJECTED -> (terminal)
    """

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    REJECTED = "REJECTED"

    def can_transition_to(self, new_status: "AppointmentStatus") -> bool:
        """Check if transition to new status is valid."""
        return new_status in _APPOINTMENT_TRANSITIONS.get(self, ())

    def is_terminal(self) -> bool:
        """Check if this is a terminal state."""
        return not _APPOINTMENT_TRANSITIONS.get(self)

    def is_live(self) -> bool:
        """Live appointments occupy their doctor/clinic/date/time."""
        return self not in RELEASING_STATUSES

    def releases_slot(self) -> bool:
        """Entering this state frees a materialized slot."""
        return self in RELEASING_STATUSES


_APPOINTMENT_TRANSITIONS: dict[AppointmentStatus, tuple[AppointmentStatus, ...]] = {
    AppointmentStatus.PENDING: (
        AppointmentStatus.CONFIRMED,
        AppointmentStatus.CANCELLED,
        AppointmentStatus.REJECTED,
    ),
    AppointmentStatus.CONFIRMED: (
        AppointmentStatus.COMPLETED,
        AppointmentStatus.CANCELLED,
        AppointmentStatus.REJECTED,
    ),
    AppointmentStatus.COMPLETED: (),
    AppointmentStatus.CANCELLED: (),
    AppointmentStatus.REJECTED: (),
}

RELEASING_STATUSES = frozenset({AppointmentStatus.CANCELLED, AppointmentStatus.REJECTED})


class SlotStatus(StatusEnum):
    """Materialized slot state."""

    AVAILABLE = "AVAILABLE"
    BOOKED = "BOOKED"


class PatientType(StatusEnum):
    """Patient classification. Lazily created patients start as NEW."""

    NEW = "NEW"
    RETURNING = "RETURNING"


class ClinicStatus(StatusEnum):
    """Clinic availability."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class UserRole(StatusEnum):
    """Roles carried by authenticated identities."""

    SUPER_ADMIN = "SUPER_ADMIN"
    ADMIN = "ADMIN"
    DOCTOR = "DOCTOR"
    PATIENT = "PATIENT"
    STAFF = "STAFF"


class MessageSender(StatusEnum):
    """Who wrote a chat message."""

    DOCTOR = "DOCTOR"
    PATIENT = "PATIENT"
