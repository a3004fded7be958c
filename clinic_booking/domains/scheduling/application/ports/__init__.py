"""
Scheduling Application Ports

Interfaces implemented by the infrastructure layer.
"""

from .appointment_repository import IAppointmentRepository
from .chat_repository import IChatRepository
from .clinic_repository import IClinicRepository, IDoctorRepository
from .notification_emitter import INotificationEmitter, room_key
from .patient_repository import IPatientRepository
from .schedule_repository import IScheduleRepository
from .slot_repository import ISlotRepository
from .unit_of_work import IUnitOfWork

__all__ = [
    "IAppointmentRepository",
    "IChatRepository",
    "IClinicRepository",
    "IDoctorRepository",
    "INotificationEmitter",
    "IPatientRepository",
    "IScheduleRepository",
    "ISlotRepository",
    "IUnitOfWork",
    "room_key",
]
