"""
Slot Repository Port
"""

from datetime import date
from typing import Protocol, runtime_checkable

from clinic_booking.domains.scheduling.domain.entities import Slot


@runtime_checkable
class ISlotRepository(Protocol):
    """Materialized slot access."""

    async def get(self, slot_id: int) -> Slot | None:
        ...

    async def get_or_create(
        self,
        doctor_id: int,
        clinic_id: int,
        slot_date: date,
        start_time: int,
        end_time: int,
        schedule_id: int | None = None,
    ) -> Slot:
        """
        Return the slot for the doctor/clinic/date/start, creating it AVAILABLE if absent.

        Raises:
            SlotAlreadyBookedException: a concurrent writer created it first
        """
        ...

    async def mark_booked(self, slot_id: int) -> bool:
        """Flip AVAILABLE to BOOKED. Returns False if the slot was not AVAILABLE."""
        ...

    async def release(self, slot_id: int) -> None:
        """Set a slot back to AVAILABLE."""
        ...

    async def booked_start_minutes(self, clinic_id: int, slot_date: date) -> set[int]:
        """Start minutes of BOOKED slots at a clinic on a date."""
        ...
