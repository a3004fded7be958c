"""
Time-of-day helpers.

Every time value in the scheduling domain is reduced to a canonical
minute-of-day integer (0-1439). Inputs arrive as 24-hour strings, 12-hour
strings with AM/PM, stored timestamps anchored to an epoch date, or
``datetime.time`` values from the database.
"""

import re
from dataclasses import dataclass
from datetime import UTC, date, datetime, time

from clinic_booking.core.domain import InvalidRangeException, ValidationException, ValueObject

MINUTES_PER_DAY = 24 * 60

DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")

_TWELVE_HOUR = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?\s*([AaPp][Mm])$")
_TWENTY_FOUR_HOUR = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2})(?:\.\d{1,6})?)?$")
# Date followed by a time part; a bare date is not a time of day
_TIMESTAMP = re.compile(r"^\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}")


def _from_parts(hour: int, minute: int) -> int | None:
    if 0 <= hour <= 23 and 0 <= minute <= 59:
        return hour * 60 + minute
    return None


def _parse_string(value: str) -> int | None:
    text = value.strip()
    if not text:
        return None

    match = _TWELVE_HOUR.match(text)
    if match:
        hour, minute = int(match.group(1)), int(match.group(2))
        if not 1 <= hour <= 12:
            return None
        meridiem = match.group(4).upper()
        hour = hour % 12
        if meridiem == "PM":
            hour += 12
        return _from_parts(hour, minute)

    match = _TWENTY_FOUR_HOUR.match(text)
    if match:
        return _from_parts(int(match.group(1)), int(match.group(2)))

    # Stored timestamps such as "1970-01-01T09:00:00.000Z"
    if not _TIMESTAMP.match(text):
        return None
    try:
        return _from_datetime(datetime.fromisoformat(text))
    except ValueError:
        return None


def _from_datetime(value: datetime) -> int:
    if value.tzinfo is not None:
        value = value.astimezone(UTC)
    return value.hour * 60 + value.minute


def to_minutes(value: object) -> int | None:
    """
    Convert a time value to minute-of-day.

    Returns None for anything that is not a recognisable time of day.
    Timestamps are read as UTC wall-clock; naive ones are taken as-is.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if 0 <= value < MINUTES_PER_DAY else None
    if isinstance(value, datetime):
        return _from_datetime(value)
    if isinstance(value, time):
        return value.hour * 60 + value.minute
    if isinstance(value, str):
        return _parse_string(value)
    return None


def require_minutes(value: object, field: str) -> int:
    """Like to_minutes, but raises ValidationException for invalid input."""
    minutes = to_minutes(value)
    if minutes is None:
        raise ValidationException(f"Invalid time value for '{field}': {value!r}", field=field)
    return minutes


def from_minutes(minutes: int) -> str:
    """Format minute-of-day as zero-padded 24-hour "HH:MM"."""
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise ValueError(f"Minute of day out of range: {minutes}")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def to_12_hour(value: object) -> str:
    """Format a time as "H:MM AM/PM"."""
    minutes = to_minutes(value)
    if minutes is None:
        raise ValueError(f"Invalid time: {value!r}")
    hour, minute = divmod(minutes, 60)
    meridiem = "AM" if hour < 12 else "PM"
    display_hour = hour % 12 or 12
    return f"{display_hour}:{minute:02d} {meridiem}"


def to_24_hour(value: object) -> str:
    """Format a time as "HH:MM"."""
    minutes = to_minutes(value)
    if minutes is None:
        raise ValueError(f"Invalid time: {value!r}")
    return from_minutes(minutes)


def to_time(minutes: int) -> time:
    """Convert minute-of-day to ``datetime.time`` for storage."""
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise ValueError(f"Minute of day out of range: {minutes}")
    return time(minutes // 60, minutes % 60)


def day_of_week(value: date) -> int:
    """Day of week with Sunday=0 .. Saturday=6, from the calendar date."""
    return (value.weekday() + 1) % 7


def day_name(dow: int) -> str:
    """English name for a Sunday-based day-of-week index."""
    return DAY_NAMES[dow]


@dataclass(frozen=True)
class TimeRange(ValueObject):
    """
    Half-open interval [start, end) of minutes within a day.

    Ranges that merely touch (one ends at 12:00, the next starts at 12:00)
    do not overlap.
    """

    start: int
    end: int

    def _validate(self) -> None:
        for value in (self.start, self.end):
            if not 0 <= value < MINUTES_PER_DAY:
                raise ValidationException(f"Minute of day out of range: {value}")
        if self.start >= self.end:
            raise InvalidRangeException(from_minutes(self.start), from_minutes(self.end))

    @classmethod
    def parse(cls, start: object, end: object) -> "TimeRange":
        """Build a range from any supported time encodings."""
        return cls(require_minutes(start, "start_time"), require_minutes(end, "end_time"))

    def overlaps(self, other: "TimeRange") -> bool:
        return self.start < other.end and self.end > other.start

    def __str__(self) -> str:
        return f"{from_minutes(self.start)} - {from_minutes(self.end)}"
