"""
Scheduling Repository Implementations
"""

from .appointment_repository import SQLAlchemyAppointmentRepository
from .chat_repository import SQLAlchemyChatRepository
from .clinic_repository import SQLAlchemyClinicRepository, SQLAlchemyDoctorRepository
from .patient_repository import SQLAlchemyPatientRepository
from .schedule_repository import SQLAlchemyScheduleRepository
from .slot_repository import SQLAlchemySlotRepository

__all__ = [
    "SQLAlchemyAppointmentRepository",
    "SQLAlchemyChatRepository",
    "SQLAlchemyClinicRepository",
    "SQLAlchemyDoctorRepository",
    "SQLAlchemyPatientRepository",
    "SQLAlchemyScheduleRepository",
    "SQLAlchemySlotRepository",
]
