"""
Scheduling Domain Events

Events fanned out to the patient/doctor room after a commit.
"""

from dataclasses import dataclass
from datetime import date
from typing import ClassVar

from clinic_booking.core.domain import DomainEvent


@dataclass(frozen=True)
class AppointmentCreated(DomainEvent):
    """A booking was persisted."""

    event_name: ClassVar[str] = "appointment_created"

    appointment_id: int = 0
    patient_id: int = 0
    doctor_id: int = 0
    clinic_id: int = 0
    appointment_date: date | None = None
    start_time: str | None = None
    end_time: str | None = None
    status: str = "PENDING"


@dataclass(frozen=True)
class AppointmentStatusChanged(DomainEvent):
    """An appointment moved to a new status."""

    event_name: ClassVar[str] = "appointment_status_changed"

    appointment_id: int = 0
    patient_id: int = 0
    doctor_id: int = 0
    old_status: str = ""
    new_status: str = ""


@dataclass(frozen=True)
class MessageReceived(DomainEvent):
    """A chat message was stored for a patient/doctor pair."""

    event_name: ClassVar[str] = "receive_message"

    message_id: int = 0
    patient_id: int = 0
    doctor_id: int = 0
    sender: str = ""
    content: str = ""
