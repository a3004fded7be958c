"""
Appointment Entity

A concrete booking of a doctor at a clinic on a date and time.
"""

from dataclasses import dataclass
from datetime import date

from clinic_booking.core.domain import AggregateRoot, InvalidOperationException

from ..events import AppointmentCreated, AppointmentStatusChanged
from ..value_objects.appointment_status import AppointmentStatus
from ..value_objects.time_of_day import from_minutes


@dataclass
class Appointment(AggregateRoot[int]):
    """
    Appointment aggregate root.

    Rows written by the older slot-based flow have no times of their own;
    repositories fill date and times from the referenced slot so callers only
    ever see this shape.

    Example:
        ```python
        appointment = Appointment(
            patient_id=7,
            doctor_id=3,
            clinic_id=1,
            appointment_date=date(2025, 3, 10),
            start_time=540,
            end_time=570,
        )
        appointment.change_status(AppointmentStatus.CONFIRMED)
        ```
    """

    # References
    patient_id: int = 0
    doctor_id: int = 0
    clinic_id: int = 0
    admin_id: int | None = None
    slot_id: int | None = None

    # Scheduling
    appointment_date: date | None = None
    start_time: int | None = None
    end_time: int | None = None

    status: AppointmentStatus = AppointmentStatus.PENDING
    notes: str | None = None

    @property
    def start_label(self) -> str | None:
        return from_minutes(self.start_time) if self.start_time is not None else None

    @property
    def end_label(self) -> str | None:
        return from_minutes(self.end_time) if self.end_time is not None else None

    @property
    def is_live(self) -> bool:
        return self.status.is_live()

    def record_created(self) -> None:
        """Record the creation event once the appointment has an id."""
        self._record_event(
            AppointmentCreated(
                appointment_id=self.id or 0,
                patient_id=self.patient_id,
                doctor_id=self.doctor_id,
                clinic_id=self.clinic_id,
                appointment_date=self.appointment_date,
                start_time=self.start_label,
                end_time=self.end_label,
                status=self.status.value,
            )
        )

    def change_status(self, new_status: AppointmentStatus) -> bool:
        """
        Move to a new status.

        Setting the current status again is a no-op and returns False.

        Raises:
            InvalidOperationException: transition not allowed from current state
        """
        if new_status == self.status:
            return False
        if not self.status.can_transition_to(new_status):
            raise InvalidOperationException(
                operation=f"change status to {new_status.value}",
                current_state=self.status.value,
            )
        old_status = self.status
        self.status = new_status
        self.touch()
        self._record_event(
            AppointmentStatusChanged(
                appointment_id=self.id or 0,
                patient_id=self.patient_id,
                doctor_id=self.doctor_id,
                old_status=old_status.value,
                new_status=new_status.value,
            )
        )
        return True
