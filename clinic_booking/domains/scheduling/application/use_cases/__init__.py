"""
Scheduling Application Use Cases
"""

from .book_appointment import (
    BookAppointmentRequest,
    BookAppointmentUseCase,
    BookingTarget,
    GeneratedTarget,
    SlotTarget,
    TimeRangeTarget,
)
from .chat_messages import ChatMessagesUseCase
from .get_available_slots import GetAvailableSlotsUseCase
from .manage_appointments import ManageAppointmentsUseCase
from .manage_clinic import ClinicInput, ManageClinicUseCase
from .manage_schedule import (
    ManageScheduleUseCase,
    ScheduleEntryFactory,
    ScheduleEntryInput,
    ScheduleEntryPatch,
)
from .update_appointment_status import UpdateAppointmentStatusUseCase

__all__ = [
    # Booking
    "BookAppointmentRequest",
    "BookAppointmentUseCase",
    "BookingTarget",
    "GeneratedTarget",
    "SlotTarget",
    "TimeRangeTarget",
    "UpdateAppointmentStatusUseCase",
    "ManageAppointmentsUseCase",
    # Slots
    "GetAvailableSlotsUseCase",
    # Schedules
    "ManageScheduleUseCase",
    "ScheduleEntryFactory",
    "ScheduleEntryInput",
    "ScheduleEntryPatch",
    # Clinics and chat
    "ClinicInput",
    "ManageClinicUseCase",
    "ChatMessagesUseCase",
]
