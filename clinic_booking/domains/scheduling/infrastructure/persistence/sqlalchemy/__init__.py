from .models import (
    AppointmentModel,
    ChatMessageModel,
    ClinicModel,
    DoctorModel,
    PatientModel,
    ScheduleModel,
    SlotModel,
)

__all__ = [
    "AppointmentModel",
    "ChatMessageModel",
    "ClinicModel",
    "DoctorModel",
    "PatientModel",
    "ScheduleModel",
    "SlotModel",
]
