"""
Appointment Repository Port

Interface for appointment data access.
"""

from datetime import date
from typing import Protocol, runtime_checkable

from clinic_booking.domains.scheduling.domain.entities import Appointment


@runtime_checkable
class IAppointmentRepository(Protocol):
    """
    Appointment repository interface.

    ``add`` is where the uniqueness of live appointments per
    doctor/clinic/date/start time is enforced; implementations raise
    SlotAlreadyBookedException when the store rejects a duplicate.
    """

    async def get(self, appointment_id: int) -> Appointment | None:
        """Find appointment by ID."""
        ...

    async def add(self, appointment: Appointment) -> Appointment:
        """
        Insert an appointment.

        Raises:
            SlotAlreadyBookedException: a live appointment already holds the time
        """
        ...

    async def update(self, appointment: Appointment) -> Appointment:
        """Persist status and note changes. Returns the same instance, events intact."""
        ...

    async def delete(self, appointment_id: int) -> bool:
        """Delete an appointment. Returns False when it does not exist."""
        ...

    async def list_appointments(
        self,
        doctor_id: int | None = None,
        admin_id: int | None = None,
        clinic_id: int | None = None,
        patient_id: int | None = None,
        appointment_date: date | None = None,
    ) -> list[Appointment]:
        """List appointments, newest first."""
        ...

    async def live_start_minutes(self, clinic_id: int, appointment_date: date) -> set[int]:
        """Start minutes of live appointments at a clinic on a date."""
        ...
