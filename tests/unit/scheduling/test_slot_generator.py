"""
Unit tests for the slot generator.
"""

from datetime import date, datetime

import pytest

from clinic_booking.domains.scheduling.domain.entities import ScheduleEntry
from clinic_booking.domains.scheduling.domain.services import SlotGenerator
from clinic_booking.domains.scheduling.domain.value_objects import from_minutes

MONDAY = date(2025, 3, 10)
BEFORE_MONDAY = datetime(2025, 3, 3, 8, 0)


def _entry(start: int, end: int, duration: int = 30, day: int = 1, **kwargs) -> ScheduleEntry:
    return ScheduleEntry(
        doctor_id=3, clinic_id=1, day_of_week=day, start_time=start, end_time=end, slot_duration=duration, **kwargs
    )


@pytest.fixture
def generator() -> SlotGenerator:
    return SlotGenerator(default_slot_duration=30)


# ============================================================================
# Scenarios
# ============================================================================


@pytest.mark.unit
class TestSlotGeneration:
    def test_weekly_entry_produces_slots(self, generator):
        """Monday 09:00-10:00 every 30 minutes."""
        result = generator.generate([_entry(540, 600)], set(), MONDAY, BEFORE_MONDAY)

        assert result.slots == ["09:00", "09:30"]
        assert result.slot_duration == 30

    def test_booked_time_is_removed(self, generator):
        result = generator.generate([_entry(540, 600)], {540}, MONDAY, BEFORE_MONDAY)

        assert result.slots == ["09:30"]

    def test_past_times_today_are_suppressed(self, generator):
        """At 09:15 on the same Monday only 09:30 is still bookable."""
        now = datetime(2025, 3, 10, 9, 15)

        result = generator.generate([_entry(540, 600)], set(), MONDAY, now)

        assert result.slots == ["09:30"]

    def test_current_minute_counts_as_past(self, generator):
        now = datetime(2025, 3, 10, 9, 30)

        result = generator.generate([_entry(540, 600)], set(), MONDAY, now)

        assert result.slots == []

    def test_past_dates_have_no_slots(self, generator):
        result = generator.generate([_entry(540, 600)], set(), date(2025, 3, 3), datetime(2025, 3, 4, 7, 0))

        assert result.slots == []

    def test_other_weekday_has_no_slots_and_default_duration(self, generator):
        result = generator.generate([_entry(540, 600, duration=20)], set(), date(2025, 3, 11), BEFORE_MONDAY)

        assert result.slots == []
        assert result.slot_duration == 30

    def test_final_slot_is_not_truncated(self, generator):
        """09:00-10:00 every 45 minutes offers 09:45 even though it ends past 10:00."""
        result = generator.generate([_entry(540, 600, duration=45)], set(), MONDAY, BEFORE_MONDAY)

        assert result.slots == ["09:00", "09:45"]
        assert result.slot_duration == 45

    def test_multiple_entries_are_merged_sorted_and_deduplicated(self, generator):
        entries = [_entry(840, 900), _entry(540, 600), _entry(570, 630)]

        result = generator.generate(entries, set(), MONDAY, BEFORE_MONDAY)

        assert result.slots == ["09:00", "09:30", "10:00", "14:00", "14:30"]

    def test_entries_outside_effective_window_are_ignored(self, generator):
        expired = _entry(540, 600, effective_from=date(2024, 1, 1), effective_to=date(2025, 3, 9))
        upcoming = _entry(600, 660, effective_from=date(2025, 3, 10), effective_to=date(2026, 3, 10))

        result = generator.generate([expired, upcoming], set(), MONDAY, BEFORE_MONDAY)

        assert result.slots == ["10:00", "10:30"]


# ============================================================================
# Properties
# ============================================================================


@pytest.mark.unit
@pytest.mark.parametrize("duration", [5, 10, 15, 20, 25, 30, 45, 60, 90])
@pytest.mark.parametrize("start,end", [(0, 60), (540, 600), (480, 1020), (1380, 1439)])
def test_slot_count_and_positions(generator, start, end, duration):
    """ceil((end - start) / duration) slots at start + k * duration."""
    result = generator.generate([_entry(start, end, duration)], set(), MONDAY, BEFORE_MONDAY)

    expected_count = -(-(end - start) // duration)
    assert len(result.slots) == expected_count
    assert result.slots == [from_minutes(start + k * duration) for k in range(expected_count)]


@pytest.mark.unit
def test_generation_is_idempotent(generator):
    entries = [_entry(540, 720, 20), _entry(780, 840, 15)]

    first = generator.generate(entries, {560, 800}, MONDAY, BEFORE_MONDAY)
    second = generator.generate(entries, {560, 800}, MONDAY, BEFORE_MONDAY)

    assert first == second
    assert "09:20" not in first.slots
    assert "13:20" not in first.slots


@pytest.mark.unit
def test_to_dict_shape(generator):
    result = generator.generate([_entry(540, 600)], set(), MONDAY, BEFORE_MONDAY)

    assert result.to_dict() == {"slots": ["09:00", "09:30"], "slot_duration": 30}
