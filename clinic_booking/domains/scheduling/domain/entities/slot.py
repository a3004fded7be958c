"""
Slot Entity

A materialized bookable unit, created on first booking of a date/time.
"""

from dataclasses import dataclass
from datetime import date

from clinic_booking.core.domain import Entity

from ..value_objects.appointment_status import SlotStatus


@dataclass
class Slot(Entity[int]):
    """Materialized slot. A BOOKED slot backs exactly one live appointment."""

    doctor_id: int = 0
    clinic_id: int = 0
    schedule_id: int | None = None
    slot_date: date | None = None
    start_time: int = 0
    end_time: int = 0
    status: SlotStatus = SlotStatus.AVAILABLE

    @property
    def is_booked(self) -> bool:
        return self.status == SlotStatus.BOOKED
