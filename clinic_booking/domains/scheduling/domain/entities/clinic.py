"""
Clinic, Doctor and ChatMessage entities.
"""

from dataclasses import dataclass
from typing import Any

from clinic_booking.core.domain import Entity

from ..value_objects.appointment_status import ClinicStatus, MessageSender


@dataclass
class Clinic(Entity[int]):
    """A clinic owned by an admin tenant, optionally by a single doctor."""

    clinic_name: str = ""
    phone: str | None = None
    location: str | None = None
    admin_id: int | None = None
    doctor_id: int | None = None
    status: ClinicStatus = ClinicStatus.ACTIVE

    def apply_changes(self, changes: dict[str, Any]) -> None:
        """Apply a partial update of editable fields."""
        for key in ("clinic_name", "phone", "location", "status"):
            if key in changes and changes[key] is not None:
                setattr(self, key, changes[key])
        self.touch()

    def to_dict(self) -> dict[str, Any]:
        return {
            "clinic_id": self.id,
            "clinic_name": self.clinic_name,
            "phone": self.phone,
            "location": self.location,
            "admin_id": self.admin_id,
            "doctor_id": self.doctor_id,
            "status": self.status.value,
        }


@dataclass
class Doctor(Entity[int]):
    """Reference data for existence checks and tenant resolution."""

    admin_id: int | None = None
    user_id: int | None = None
    doctor_name: str = ""
    status: str = "ACTIVE"


@dataclass
class ChatMessage(Entity[int]):
    """A message exchanged between a patient and a doctor."""

    patient_id: int = 0
    doctor_id: int = 0
    sender: MessageSender = MessageSender.PATIENT
    content: str = ""
