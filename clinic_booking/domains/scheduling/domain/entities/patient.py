"""
Patient Entity
"""

from dataclasses import dataclass

from clinic_booking.core.domain import Entity

from ..value_objects.appointment_status import PatientType


@dataclass
class Patient(Entity[int]):
    """
    Patient identified by phone or by an external chat id.

    Patients are created lazily on their first booking.
    """

    full_name: str = ""
    phone: str | None = None
    telegram_chat_id: str | None = None
    admin_id: int | None = None
    patient_type: PatientType = PatientType.NEW

    @classmethod
    def register(
        cls,
        full_name: str,
        phone: str | None = None,
        telegram_chat_id: str | None = None,
        admin_id: int | None = None,
    ) -> "Patient":
        """Factory for a first-time patient."""
        return cls(
            full_name=full_name,
            phone=phone,
            telegram_chat_id=telegram_chat_id,
            admin_id=admin_id,
            patient_type=PatientType.NEW,
        )
