"""
Scheduling API Schemas

Pydantic schemas for request/response validation.
"""

from datetime import date, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from clinic_booking.domains.scheduling.application.use_cases import (
    GeneratedTarget,
    ScheduleEntryInput,
    ScheduleEntryPatch,
    SlotTarget,
    TimeRangeTarget,
)
from clinic_booking.domains.scheduling.domain.entities import (
    Appointment,
    ChatMessage,
    Clinic,
    ScheduleEntry,
)

# ============================================================================
# Slots
# ============================================================================


class SlotsResponse(BaseModel):
    """Free slot labels for a date."""

    slots: list[str]
    slot_duration: int


# ============================================================================
# Schedules
# ============================================================================


class ScheduleEntryPayload(BaseModel):
    """One weekly entry. Times accept "HH:MM", "H:MM AM/PM" or stored timestamps."""

    day_of_week: int = Field(..., ge=0, le=6, description="Sunday=0 .. Saturday=6")
    start_time: str
    end_time: str
    slot_duration: int | None = Field(default=None, gt=0)
    schedule_id: int | None = None
    effective_from: date | None = None
    effective_to: date | None = None

    def to_input(self) -> ScheduleEntryInput:
        return ScheduleEntryInput(
            day_of_week=self.day_of_week,
            start_time=self.start_time,
            end_time=self.end_time,
            slot_duration=self.slot_duration,
            schedule_id=self.schedule_id,
            effective_from=self.effective_from,
            effective_to=self.effective_to,
        )


class ScheduleCreateRequest(ScheduleEntryPayload):
    doctor_id: int | None = None
    clinic_id: int | None = None
    admin_id: int | None = None


class ScheduleReplaceRequest(BaseModel):
    """Bulk replace of a doctor's clinic schedule, by weekday."""

    doctor_id: int | None = None
    clinic_id: int | None = None
    admin_id: int | None = None
    schedules: list[ScheduleEntryPayload]


class ScheduleUpdateRequest(BaseModel):
    day_of_week: int | None = Field(default=None, ge=0, le=6)
    start_time: str | None = None
    end_time: str | None = None
    slot_duration: int | None = Field(default=None, gt=0)
    clinic_id: int | None = None
    effective_from: date | None = None
    effective_to: date | None = None

    def to_patch(self) -> ScheduleEntryPatch:
        return ScheduleEntryPatch(**self.model_dump())


class ScheduleResponse(BaseModel):
    schedule_id: int
    doctor_id: int
    clinic_id: int | None = None
    admin_id: int | None = None
    day_of_week: int
    day_name: str
    start_time: str
    end_time: str
    slot_duration: int
    effective_from: date | None = None
    effective_to: date | None = None

    @classmethod
    def from_entity(cls, entry: ScheduleEntry) -> "ScheduleResponse":
        data = entry.to_dict()
        data["schedule_id"] = entry.id or 0
        data["day_name"] = entry.day_name
        return cls(**data)


# ============================================================================
# Appointments
# ============================================================================


class _BookingBase(BaseModel):
    doctor_id: int
    clinic_id: int
    patient_id: int | None = None
    patient_phone: str | None = None
    patient_name: str | None = None
    telegram_chat_id: str | None = None
    admin_id: int | None = None
    notes: str | None = None


class SlotBooking(_BookingBase):
    """Book a materialized slot; date/times create it if the id is unknown."""

    mode: Literal["slot"]
    slot_id: int
    appointment_date: date | None = Field(default=None, alias="date")
    start_time: str | None = None
    end_time: str | None = None

    def to_target(self) -> SlotTarget:
        return SlotTarget(
            slot_id=self.slot_id,
            appointment_date=self.appointment_date,
            start_time=self.start_time,
            end_time=self.end_time,
        )


class TimeRangeBooking(_BookingBase):
    """Book an explicit date and time range without a schedule."""

    mode: Literal["time_range"]
    appointment_date: date = Field(..., alias="date")
    start_time: str
    end_time: str

    def to_target(self) -> TimeRangeTarget:
        return TimeRangeTarget(
            appointment_date=self.appointment_date,
            start_time=self.start_time,
            end_time=self.end_time,
        )


class GeneratedBooking(_BookingBase):
    """Book one of the generated free slots of a date."""

    mode: Literal["generated"]
    appointment_date: date = Field(..., alias="date")
    time: str

    def to_target(self) -> GeneratedTarget:
        return GeneratedTarget(appointment_date=self.appointment_date, time=self.time)


AppointmentCreateRequest = SlotBooking | TimeRangeBooking | GeneratedBooking


class AppointmentStatusRequest(BaseModel):
    status: str
    notes: str | None = None


class AppointmentResponse(BaseModel):
    appointment_id: int
    patient_id: int
    doctor_id: int
    clinic_id: int
    admin_id: int | None = None
    slot_id: int | None = None
    status: str
    appointment_date: date | None = None
    start_time: str | None = None
    end_time: str | None = None
    notes: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_entity(cls, appointment: Appointment) -> "AppointmentResponse":
        return cls(
            appointment_id=appointment.id or 0,
            patient_id=appointment.patient_id,
            doctor_id=appointment.doctor_id,
            clinic_id=appointment.clinic_id,
            admin_id=appointment.admin_id,
            slot_id=appointment.slot_id,
            status=appointment.status.value,
            appointment_date=appointment.appointment_date,
            start_time=appointment.start_label,
            end_time=appointment.end_label,
            notes=appointment.notes,
            created_at=appointment.created_at,
        )


# ============================================================================
# Clinics
# ============================================================================


class ClinicCreateRequest(BaseModel):
    clinic_name: str = Field(..., min_length=1, max_length=200)
    phone: str | None = None
    location: str | None = None
    admin_id: int | None = None
    doctor_id: int | None = None
    schedule: list[ScheduleEntryPayload] = Field(default_factory=list)


class ClinicUpdateRequest(BaseModel):
    clinic_name: str | None = Field(default=None, min_length=1, max_length=200)
    phone: str | None = None
    location: str | None = None
    status: str | None = None

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class ClinicResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    clinic_id: int
    clinic_name: str
    phone: str | None = None
    location: str | None = None
    admin_id: int | None = None
    doctor_id: int | None = None
    status: str

    @classmethod
    def from_entity(cls, clinic: Clinic) -> "ClinicResponse":
        data = clinic.to_dict()
        data["clinic_id"] = clinic.id or 0
        return cls(**data)


# ============================================================================
# Chat
# ============================================================================


class ChatMessageRequest(BaseModel):
    patient_id: int
    doctor_id: int
    sender: str = Field(..., description="DOCTOR or PATIENT")
    content: str


class ChatMessageResponse(BaseModel):
    message_id: int
    patient_id: int
    doctor_id: int
    sender: str
    content: str
    created_at: datetime

    @classmethod
    def from_entity(cls, message: ChatMessage) -> "ChatMessageResponse":
        return cls(
            message_id=message.id or 0,
            patient_id=message.patient_id,
            doctor_id=message.doctor_id,
            sender=message.sender.value,
            content=message.content,
            created_at=message.created_at,
        )
