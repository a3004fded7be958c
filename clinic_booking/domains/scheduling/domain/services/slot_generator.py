"""
Slot Generator

Turns recurring weekly schedule entries into the bookable time labels of one
calendar date. Pure computation: callers fetch entries and booked times and
pass the current local time in.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from ..entities.schedule_entry import ScheduleEntry
from ..value_objects.time_of_day import day_of_week, from_minutes


@dataclass
class GeneratedSlots:
    """Ordered "HH:MM" labels plus the slot duration they were cut with."""

    slots: list[str] = field(default_factory=list)
    slot_duration: int = 30

    def to_dict(self) -> dict[str, Any]:
        return {"slots": list(self.slots), "slot_duration": self.slot_duration}


class SlotGenerator:
    """
    Domain service producing free slots for a date.

    A candidate is dropped when its start is already booked, when the date is
    before today, or when the date is today and the start is at or before the
    current minute. The final slot of an entry is not truncated to fit before
    ``end_time``.

    Example:
        ```python
        generator = SlotGenerator(default_slot_duration=30)
        result = generator.generate(entries, booked_minutes={540}, target_date=monday, now=datetime.now())
        result.slots  # ["09:30"]
        ```
    """

    def __init__(self, default_slot_duration: int = 30):
        self.default_slot_duration = default_slot_duration

    def generate(
        self,
        entries: Iterable[ScheduleEntry],
        booked_minutes: Iterable[int],
        target_date: date,
        now: datetime,
    ) -> GeneratedSlots:
        dow = day_of_week(target_date)
        matching = [e for e in entries if e.day_of_week == dow and e.is_effective_on(target_date)]
        if not matching:
            return GeneratedSlots(slots=[], slot_duration=self.default_slot_duration)

        booked = set(booked_minutes)
        today = now.date()
        now_minute = now.hour * 60 + now.minute

        free: set[int] = set()
        if target_date >= today:
            for entry in matching:
                for minute in entry.candidate_minutes():
                    if minute in booked:
                        continue
                    if target_date == today and minute <= now_minute:
                        continue
                    free.add(minute)

        return GeneratedSlots(
            slots=[from_minutes(m) for m in sorted(free)],
            slot_duration=matching[0].slot_duration,
        )
