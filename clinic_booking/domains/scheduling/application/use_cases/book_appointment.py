"""
Book Appointment Use Case

Turns a booking request into a persisted PENDING appointment.

The free-slot check is a snapshot read and can go stale before the write.
The store's uniqueness of live appointments per doctor/clinic/date/start is
what finally decides a race; losing it surfaces as SlotAlreadyBookedException.
"""

import logging
from dataclasses import dataclass
from datetime import date

from clinic_booking.core.domain import (
    BadRequestException,
    EntityNotFoundException,
    PhoneNumber,
    SlotAlreadyBookedException,
    ValidationException,
)
from clinic_booking.domains.scheduling.application.events import publish_events
from clinic_booking.domains.scheduling.application.identity import Identity
from clinic_booking.domains.scheduling.application.ports import (
    IAppointmentRepository,
    IClinicRepository,
    IDoctorRepository,
    INotificationEmitter,
    IPatientRepository,
    ISlotRepository,
    IUnitOfWork,
    room_key,
)
from clinic_booking.domains.scheduling.application.use_cases.get_available_slots import (
    GetAvailableSlotsUseCase,
)
from clinic_booking.domains.scheduling.domain.entities import Appointment, Patient, Slot
from clinic_booking.domains.scheduling.domain.value_objects import (
    AppointmentStatus,
    TimeRange,
    from_minutes,
    require_minutes,
)
from clinic_booking.domains.scheduling.domain.value_objects.time_of_day import MINUTES_PER_DAY

logger = logging.getLogger(__name__)


@dataclass
class SlotTarget:
    """Book a materialized slot. Date and times materialize it when the id is unknown."""

    slot_id: int
    appointment_date: date | None = None
    start_time: object = None
    end_time: object = None


@dataclass
class TimeRangeTarget:
    """Schedule-less booking of an explicit range."""

    appointment_date: date
    start_time: object
    end_time: object


@dataclass
class GeneratedTarget:
    """Book a time that must appear among the generated free slots."""

    appointment_date: date
    time: object


BookingTarget = SlotTarget | TimeRangeTarget | GeneratedTarget


@dataclass
class BookAppointmentRequest:
    """Request for booking an appointment."""

    doctor_id: int
    clinic_id: int
    target: BookingTarget
    patient_id: int | None = None
    patient_phone: str | None = None
    patient_name: str | None = None
    telegram_chat_id: str | None = None
    admin_id: int | None = None
    notes: str | None = None


class BookAppointmentUseCase:
    """
    Booking coordinator.

    Patient registration, slot materialization and the appointment insert
    share one transaction, so a rejected booking leaves nothing behind.
    """

    def __init__(
        self,
        unit_of_work: IUnitOfWork,
        doctor_repository: IDoctorRepository,
        clinic_repository: IClinicRepository,
        patient_repository: IPatientRepository,
        slot_repository: ISlotRepository,
        appointment_repository: IAppointmentRepository,
        notification_emitter: INotificationEmitter,
        available_slots: GetAvailableSlotsUseCase,
        default_patient_name: str = "New Patient",
        default_slot_duration: int = 30,
    ):
        self.uow = unit_of_work
        self.doctor_repo = doctor_repository
        self.clinic_repo = clinic_repository
        self.patient_repo = patient_repository
        self.slot_repo = slot_repository
        self.appointment_repo = appointment_repository
        self.emitter = notification_emitter
        self.available_slots = available_slots
        self.default_patient_name = default_patient_name
        self.default_slot_duration = default_slot_duration

    async def execute(self, request: BookAppointmentRequest, identity: Identity | None = None) -> Appointment:
        """
        Book an appointment.

        Raises:
            EntityNotFoundException: doctor, clinic, patient or slot missing
            BadRequestException: tenant or patient cannot be resolved
            InvalidRangeException: explicit range does not start before it ends
            SlotAlreadyBookedException: the time is taken
            PersistenceException: unexpected store failure
        """
        doctor = await self.doctor_repo.get(request.doctor_id)
        if doctor is None:
            raise EntityNotFoundException("Doctor", request.doctor_id)
        clinic = await self.clinic_repo.get(request.clinic_id)
        if clinic is None:
            raise EntityNotFoundException("Clinic", request.clinic_id)

        admin_id = (
            request.admin_id
            or (identity.admin_id if identity else None)
            or clinic.admin_id
            or doctor.admin_id
        )
        if admin_id is None:
            raise BadRequestException("Admin context could not be resolved", missing=["admin_id"])

        generated_minute: int | None = None
        generated_duration = 0
        if isinstance(request.target, GeneratedTarget):
            generated_minute = require_minutes(request.target.time, "time")
            free = await self.available_slots.execute(
                request.clinic_id, request.target.appointment_date, request.doctor_id
            )
            if from_minutes(generated_minute) not in free.slots:
                raise self._conflict(request, request.target.appointment_date, generated_minute)
            generated_duration = free.slot_duration

        async with self.uow.transaction():
            patient = await self._resolve_patient(request, admin_id, identity)
            appointment = Appointment(
                patient_id=patient.id or 0,
                doctor_id=request.doctor_id,
                clinic_id=request.clinic_id,
                admin_id=admin_id,
                status=AppointmentStatus.PENDING,
                notes=request.notes,
            )

            target = request.target
            if isinstance(target, SlotTarget):
                slot = await self._slot_for_target(request, target)
                await self._book_slot(request, slot)
                appointment.slot_id = slot.id
                appointment.appointment_date = slot.slot_date
                appointment.start_time = slot.start_time
                appointment.end_time = slot.end_time
            elif isinstance(target, GeneratedTarget):
                start_minute = require_minutes(target.time, "time")
                end_minute = min(start_minute + generated_duration, MINUTES_PER_DAY - 1)
                slot = await self.slot_repo.get_or_create(
                    request.doctor_id, request.clinic_id, target.appointment_date, start_minute, end_minute
                )
                await self._book_slot(request, slot)
                appointment.slot_id = slot.id
                appointment.appointment_date = target.appointment_date
                appointment.start_time = start_minute
                appointment.end_time = end_minute
            else:
                time_range = TimeRange.parse(target.start_time, target.end_time)
                appointment.appointment_date = target.appointment_date
                appointment.start_time = time_range.start
                appointment.end_time = time_range.end

            saved = await self.appointment_repo.add(appointment)
            saved.record_created()

        logger.info(
            f"Appointment {saved.id} booked: patient {saved.patient_id} with doctor {saved.doctor_id} "
            f"at clinic {saved.clinic_id} on {saved.appointment_date} {saved.start_label}"
        )
        await publish_events(self.emitter, room_key(saved.patient_id, saved.doctor_id), saved.get_domain_events())
        saved.clear_domain_events()
        return saved

    async def _resolve_patient(
        self,
        request: BookAppointmentRequest,
        admin_id: int,
        identity: Identity | None,
    ) -> Patient:
        if request.patient_id is not None:
            patient = await self.patient_repo.get(request.patient_id)
            if patient is None:
                raise EntityNotFoundException("Patient", request.patient_id)
            return patient

        phone: str | None = None
        if request.patient_phone:
            try:
                phone = PhoneNumber(request.patient_phone).number
            except ValueError as e:
                raise ValidationException(str(e), field="patient_phone") from e
            patient = await self.patient_repo.find_by_phone(phone)
            if patient is not None:
                return patient

        if request.telegram_chat_id:
            patient = await self.patient_repo.find_by_chat_id(request.telegram_chat_id)
            if patient is not None:
                return patient

        if phone is None and request.telegram_chat_id is None:
            if identity is not None and identity.patient_id is not None:
                patient = await self.patient_repo.get(identity.patient_id)
                if patient is not None:
                    return patient
            raise BadRequestException(
                "Patient phone or chat id is required", missing=["patient_phone"]
            )

        patient = await self.patient_repo.add(
            Patient.register(
                full_name=request.patient_name or self.default_patient_name,
                phone=phone,
                telegram_chat_id=request.telegram_chat_id,
                admin_id=admin_id,
            )
        )
        logger.info(f"Registered new patient {patient.id} for admin {admin_id}")
        return patient

    async def _slot_for_target(self, request: BookAppointmentRequest, target: SlotTarget) -> Slot:
        slot = await self.slot_repo.get(target.slot_id)
        if slot is not None:
            if slot.doctor_id != request.doctor_id or slot.clinic_id != request.clinic_id:
                raise BadRequestException("Slot does not belong to this doctor and clinic")
            return slot

        if target.appointment_date is None or target.start_time is None:
            raise EntityNotFoundException("Slot", target.slot_id)

        start = require_minutes(target.start_time, "start_time")
        if target.end_time is not None:
            end = TimeRange(start, require_minutes(target.end_time, "end_time")).end
        else:
            end = min(start + self.default_slot_duration, MINUTES_PER_DAY - 1)
        logger.debug(f"Materializing slot for unknown id {target.slot_id}")
        return await self.slot_repo.get_or_create(
            request.doctor_id, request.clinic_id, target.appointment_date, start, end
        )

    async def _book_slot(self, request: BookAppointmentRequest, slot: Slot) -> None:
        if slot.is_booked or not await self.slot_repo.mark_booked(slot.id or 0):
            raise self._conflict(request, slot.slot_date, slot.start_time)

    @staticmethod
    def _conflict(
        request: BookAppointmentRequest,
        appointment_date: date | None,
        start_minute: int,
    ) -> SlotAlreadyBookedException:
        return SlotAlreadyBookedException(
            doctor_id=request.doctor_id,
            clinic_id=request.clinic_id,
            appointment_date=appointment_date.isoformat() if appointment_date else None,
            time_slot=from_minutes(start_minute),
        )
