"""
Patient Repository Port
"""

from typing import Protocol, runtime_checkable

from clinic_booking.domains.scheduling.domain.entities import Patient


@runtime_checkable
class IPatientRepository(Protocol):
    """Patient lookup and lazy registration."""

    async def get(self, patient_id: int) -> Patient | None:
        ...

    async def find_by_phone(self, phone: str) -> Patient | None:
        """Find by normalized phone number."""
        ...

    async def find_by_chat_id(self, telegram_chat_id: str) -> Patient | None:
        """Find by external chat identifier."""
        ...

    async def add(self, patient: Patient) -> Patient:
        ...
