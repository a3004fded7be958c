"""
Scheduling Domain Services
"""

from .overlap_validator import OverlapValidator, find_overlapping_entry
from .slot_generator import GeneratedSlots, SlotGenerator

__all__ = [
    "GeneratedSlots",
    "OverlapValidator",
    "SlotGenerator",
    "find_overlapping_entry",
]
