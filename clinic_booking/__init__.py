"""Clinic booking service: schedules, slot availability and appointments."""

__version__ = "0.1.0"
