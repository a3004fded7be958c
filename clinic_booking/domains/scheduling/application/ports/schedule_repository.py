"""
Schedule Repository Port

Interface for schedule entry data access.
"""

from typing import Protocol, runtime_checkable

from clinic_booking.domains.scheduling.domain.entities import ScheduleEntry


@runtime_checkable
class IScheduleRepository(Protocol):
    """
    Schedule entry repository interface.

    Writes flush but never commit; the unit of work owns the transaction.
    """

    async def get(self, schedule_id: int) -> ScheduleEntry | None:
        """Find an entry by ID."""
        ...

    async def list_entries(
        self,
        doctor_id: int | None = None,
        clinic_id: int | None = None,
        day_of_week: int | None = None,
    ) -> list[ScheduleEntry]:
        """
        List entries matching every given filter.

        Args:
            doctor_id: Optional doctor filter
            clinic_id: Optional clinic filter
            day_of_week: Optional weekday filter (Sunday=0)

        Returns:
            Entries ordered by day of week, then start time
        """
        ...

    async def add(self, entry: ScheduleEntry) -> ScheduleEntry:
        """Insert an entry and return it with its assigned ID."""
        ...

    async def update(self, entry: ScheduleEntry) -> ScheduleEntry:
        """Persist changes to an existing entry."""
        ...

    async def delete(self, schedule_id: int) -> bool:
        """Delete an entry. Returns False when it does not exist."""
        ...

    async def delete_day_except(
        self,
        doctor_id: int,
        clinic_id: int | None,
        day_of_week: int,
        keep_ids: set[int],
    ) -> int:
        """Delete a doctor's entries for one clinic and weekday, keeping ``keep_ids``."""
        ...
