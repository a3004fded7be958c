"""
Scheduling Domain Value Objects
"""

from .appointment_status import (
    AppointmentStatus,
    ClinicStatus,
    MessageSender,
    PatientType,
    SlotStatus,
    UserRole,
)
from .time_of_day import (
    DAY_NAMES,
    TimeRange,
    day_name,
    day_of_week,
    from_minutes,
    require_minutes,
    to_12_hour,
    to_24_hour,
    to_minutes,
    to_time,
)

__all__ = [
    # Statuses
    "AppointmentStatus",
    "ClinicStatus",
    "MessageSender",
    "PatientType",
    "SlotStatus",
    "UserRole",
    # Time of day
    "DAY_NAMES",
    "TimeRange",
    "day_name",
    "day_of_week",
    "from_minutes",
    "require_minutes",
    "to_12_hour",
    "to_24_hour",
    "to_minutes",
    "to_time",
]
