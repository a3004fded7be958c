"""
Scheduling API Dependencies

FastAPI dependency providers that assemble use cases from a request-scoped
session. Tests override ``get_async_db``, ``get_clock`` and
``get_notification_emitter``.
"""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_booking.config.settings import Settings, get_settings
from clinic_booking.database.async_db import get_async_db
from clinic_booking.domains.scheduling.application.clock import Clock, local_now
from clinic_booking.domains.scheduling.application.ports import INotificationEmitter
from clinic_booking.domains.scheduling.application.use_cases import (
    BookAppointmentUseCase,
    ChatMessagesUseCase,
    GetAvailableSlotsUseCase,
    ManageAppointmentsUseCase,
    ManageClinicUseCase,
    ManageScheduleUseCase,
    ScheduleEntryFactory,
    UpdateAppointmentStatusUseCase,
)
from clinic_booking.domains.scheduling.domain.services import SlotGenerator
from clinic_booking.domains.scheduling.infrastructure.repositories import (
    SQLAlchemyAppointmentRepository,
    SQLAlchemyChatRepository,
    SQLAlchemyClinicRepository,
    SQLAlchemyDoctorRepository,
    SQLAlchemyPatientRepository,
    SQLAlchemyScheduleRepository,
    SQLAlchemySlotRepository,
)
from clinic_booking.domains.scheduling.infrastructure.unit_of_work import SQLAlchemyUnitOfWork

DbSession = Annotated[AsyncSession, Depends(get_async_db)]
AppSettings = Annotated[Settings, Depends(get_settings)]


def get_clock() -> Clock:
    return local_now


def get_notification_emitter(request: Request) -> INotificationEmitter:
    """Emitter created by the application lifespan."""
    return request.app.state.notification_emitter


AppClock = Annotated[Clock, Depends(get_clock)]
Emitter = Annotated[INotificationEmitter, Depends(get_notification_emitter)]


def _entry_factory(settings: Settings, clock: Clock) -> ScheduleEntryFactory:
    return ScheduleEntryFactory(
        default_slot_duration=settings.DEFAULT_SLOT_DURATION,
        validity_days=settings.SCHEDULE_VALIDITY_DAYS,
        clock=clock,
    )


def _available_slots(session: AsyncSession, settings: Settings, clock: Clock) -> GetAvailableSlotsUseCase:
    return GetAvailableSlotsUseCase(
        schedule_repository=SQLAlchemyScheduleRepository(session),
        appointment_repository=SQLAlchemyAppointmentRepository(session),
        slot_repository=SQLAlchemySlotRepository(session),
        slot_generator=SlotGenerator(settings.DEFAULT_SLOT_DURATION),
        clock=clock,
    )


# ============================================================================
# Use case providers
# ============================================================================


def get_available_slots_use_case(
    session: DbSession, settings: AppSettings, clock: AppClock
) -> GetAvailableSlotsUseCase:
    return _available_slots(session, settings, clock)


def get_manage_schedule_use_case(
    session: DbSession, settings: AppSettings, clock: AppClock
) -> ManageScheduleUseCase:
    return ManageScheduleUseCase(
        schedule_repository=SQLAlchemyScheduleRepository(session),
        unit_of_work=SQLAlchemyUnitOfWork(session),
        doctor_repository=SQLAlchemyDoctorRepository(session),
        clinic_repository=SQLAlchemyClinicRepository(session),
        entry_factory=_entry_factory(settings, clock),
    )


def get_book_appointment_use_case(
    session: DbSession, settings: AppSettings, clock: AppClock, emitter: Emitter
) -> BookAppointmentUseCase:
    return BookAppointmentUseCase(
        unit_of_work=SQLAlchemyUnitOfWork(session),
        doctor_repository=SQLAlchemyDoctorRepository(session),
        clinic_repository=SQLAlchemyClinicRepository(session),
        patient_repository=SQLAlchemyPatientRepository(session),
        slot_repository=SQLAlchemySlotRepository(session),
        appointment_repository=SQLAlchemyAppointmentRepository(session),
        notification_emitter=emitter,
        available_slots=_available_slots(session, settings, clock),
        default_patient_name=settings.DEFAULT_PATIENT_NAME,
        default_slot_duration=settings.DEFAULT_SLOT_DURATION,
    )


def get_update_status_use_case(session: DbSession, emitter: Emitter) -> UpdateAppointmentStatusUseCase:
    return UpdateAppointmentStatusUseCase(
        unit_of_work=SQLAlchemyUnitOfWork(session),
        appointment_repository=SQLAlchemyAppointmentRepository(session),
        slot_repository=SQLAlchemySlotRepository(session),
        notification_emitter=emitter,
    )


def get_manage_appointments_use_case(session: DbSession) -> ManageAppointmentsUseCase:
    return ManageAppointmentsUseCase(
        unit_of_work=SQLAlchemyUnitOfWork(session),
        appointment_repository=SQLAlchemyAppointmentRepository(session),
        slot_repository=SQLAlchemySlotRepository(session),
    )


def get_manage_clinic_use_case(
    session: DbSession, settings: AppSettings, clock: AppClock
) -> ManageClinicUseCase:
    return ManageClinicUseCase(
        unit_of_work=SQLAlchemyUnitOfWork(session),
        clinic_repository=SQLAlchemyClinicRepository(session),
        schedule_repository=SQLAlchemyScheduleRepository(session),
        entry_factory=_entry_factory(settings, clock),
    )


def get_chat_messages_use_case(session: DbSession, emitter: Emitter) -> ChatMessagesUseCase:
    return ChatMessagesUseCase(
        unit_of_work=SQLAlchemyUnitOfWork(session),
        chat_repository=SQLAlchemyChatRepository(session),
        notification_emitter=emitter,
    )
