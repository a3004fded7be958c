"""
Overlap Validator

Decides whether a schedule entry may be written for a doctor and weekday.
The check is doctor-wide: a doctor cannot be available at two clinics at the
same time, even though each clinic's schedule is stored as its own row.
"""

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from clinic_booking.core.domain import ScheduleConflictException

from ..entities.schedule_entry import ScheduleEntry
from ..value_objects.time_of_day import TimeRange, day_name

if TYPE_CHECKING:
    from clinic_booking.domains.scheduling.application.ports.schedule_repository import (
        IScheduleRepository,
    )

logger = logging.getLogger(__name__)


def find_overlapping_entry(
    entries: Iterable[ScheduleEntry],
    candidate: TimeRange,
    exclude_schedule_id: int | None = None,
) -> ScheduleEntry | None:
    """Return the first entry whose half-open interval intersects ``candidate``."""
    for entry in entries:
        if exclude_schedule_id is not None and entry.id == exclude_schedule_id:
            continue
        if candidate.start < entry.end_time and candidate.end > entry.start_time:
            return entry
    return None


class OverlapValidator:
    """
    Guards every schedule write against overlapping entries.

    Example:
        ```python
        validator = OverlapValidator(schedule_repository)
        await validator.ensure_available(doctor_id=3, day_of_week=1, start_min=510, end_min=555)
        ```
    """

    def __init__(self, schedule_repository: "IScheduleRepository"):
        self.schedule_repo = schedule_repository

    async def find_conflict(
        self,
        doctor_id: int,
        day_of_week: int,
        start_min: int,
        end_min: int,
        exclude_schedule_id: int | None = None,
    ) -> ScheduleEntry | None:
        """
        Find an existing entry that overlaps the candidate range.

        Raises:
            InvalidRangeException: start is not strictly before end
        """
        candidate = TimeRange(start_min, end_min)
        existing = await self.schedule_repo.list_entries(doctor_id=doctor_id, day_of_week=day_of_week)
        return find_overlapping_entry(existing, candidate, exclude_schedule_id)

    async def check_overlap(
        self,
        doctor_id: int,
        day_of_week: int,
        start_min: int,
        end_min: int,
        exclude_schedule_id: int | None = None,
    ) -> bool:
        """True when the candidate range intersects another entry of the doctor on that day."""
        conflict = await self.find_conflict(doctor_id, day_of_week, start_min, end_min, exclude_schedule_id)
        return conflict is not None

    async def ensure_available(
        self,
        doctor_id: int,
        day_of_week: int,
        start_min: int,
        end_min: int,
        exclude_schedule_id: int | None = None,
    ) -> None:
        """
        Raise unless the candidate range is free for the doctor.

        Raises:
            InvalidRangeException: start is not strictly before end
            ScheduleConflictException: candidate overlaps an existing entry
        """
        conflict = await self.find_conflict(doctor_id, day_of_week, start_min, end_min, exclude_schedule_id)
        if conflict is None:
            return

        candidate = TimeRange(start_min, end_min)
        logger.info(
            f"Schedule overlap for doctor {doctor_id} on day {day_of_week}: "
            f"{candidate} intersects entry {conflict.id} ({conflict.time_range})"
        )
        raise ScheduleConflictException(
            doctor_id=doctor_id,
            day_name=day_name(day_of_week),
            time_range=str(candidate),
            conflicting_schedule_id=conflict.id,
        )
