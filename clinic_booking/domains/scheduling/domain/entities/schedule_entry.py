"""
Schedule Entry Entity

A recurring weekly availability rule for a doctor at a clinic.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any

from clinic_booking.core.domain import Entity, InvalidRangeException, ValidationException

from ..value_objects.time_of_day import MINUTES_PER_DAY, TimeRange, day_name, from_minutes


@dataclass
class ScheduleEntry(Entity[int]):
    """
    Weekly availability for one (doctor, clinic, day-of-week).

    Times are canonical minute-of-day values. ``clinic_id`` may be None for a
    doctor's default schedule that is not tied to a clinic yet.
    """

    doctor_id: int = 0
    clinic_id: int | None = None
    admin_id: int | None = None
    day_of_week: int = 0
    start_time: int = 0
    end_time: int = 0
    slot_duration: int = 30
    effective_from: date | None = None
    effective_to: date | None = None

    @property
    def time_range(self) -> TimeRange:
        """Half-open interval covered by this entry. Raises on an invalid range."""
        return TimeRange(self.start_time, self.end_time)

    @property
    def day_name(self) -> str:
        return day_name(self.day_of_week)

    def validate(self) -> None:
        """
        Check entry invariants.

        Raises:
            InvalidRangeException: start is not strictly before end
            ValidationException: any other invalid attribute
        """
        if not 0 <= self.day_of_week <= 6:
            raise ValidationException(
                f"day_of_week must be between 0 and 6, got {self.day_of_week}", field="day_of_week"
            )
        for name in ("start_time", "end_time"):
            if not 0 <= getattr(self, name) < MINUTES_PER_DAY:
                raise ValidationException(f"{name} is outside the day", field=name)
        if self.start_time >= self.end_time:
            raise InvalidRangeException(from_minutes(self.start_time), from_minutes(self.end_time))
        if self.slot_duration <= 0:
            raise ValidationException("slot_duration must be positive", field="slot_duration")
        if self.effective_from and self.effective_to and self.effective_from > self.effective_to:
            raise ValidationException(
                "effective_from must not be after effective_to", field="effective_from"
            )

    def is_effective_on(self, target: date) -> bool:
        """Entries without a validity window apply on every date."""
        if self.effective_from and target < self.effective_from:
            return False
        if self.effective_to and target > self.effective_to:
            return False
        return True

    def candidate_minutes(self) -> range:
        """Slot start minutes, stepping by duration while strictly before end."""
        return range(self.start_time, self.end_time, self.slot_duration)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "schedule_id": self.id,
            "doctor_id": self.doctor_id,
            "clinic_id": self.clinic_id,
            "admin_id": self.admin_id,
            "day_of_week": self.day_of_week,
            "start_time": from_minutes(self.start_time),
            "end_time": from_minutes(self.end_time),
            "slot_duration": self.slot_duration,
            "effective_from": self.effective_from.isoformat() if self.effective_from else None,
            "effective_to": self.effective_to.isoformat() if self.effective_to else None,
        }
