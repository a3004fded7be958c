"""
Chat Repository Port
"""

from typing import Protocol, runtime_checkable

from clinic_booking.domains.scheduling.domain.entities import ChatMessage


@runtime_checkable
class IChatRepository(Protocol):
    async def add(self, message: ChatMessage) -> ChatMessage:
        ...

    async def list_for_pair(self, patient_id: int, doctor_id: int) -> list[ChatMessage]:
        """Messages between a patient and a doctor, oldest first."""
        ...
