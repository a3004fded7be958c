"""
Scheduling Domain Entities
"""

from .appointment import Appointment
from .clinic import ChatMessage, Clinic, Doctor
from .patient import Patient
from .schedule_entry import ScheduleEntry
from .slot import Slot

__all__ = [
    "Appointment",
    "ChatMessage",
    "Clinic",
    "Doctor",
    "Patient",
    "ScheduleEntry",
    "Slot",
]
