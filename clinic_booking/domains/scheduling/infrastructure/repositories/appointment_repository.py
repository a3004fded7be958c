"""
Appointment Repository Implementation

SQLAlchemy implementation of IAppointmentRepository.
"""

import logging
from datetime import UTC, date, datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_booking.core.domain import EntityNotFoundException, SlotAlreadyBookedException
from clinic_booking.domains.scheduling.application.ports import IAppointmentRepository
from clinic_booking.domains.scheduling.domain.entities import Appointment
from clinic_booking.domains.scheduling.domain.value_objects import (
    AppointmentStatus,
    to_minutes,
    to_time,
)
from clinic_booking.domains.scheduling.domain.value_objects.appointment_status import RELEASING_STATUSES
from clinic_booking.domains.scheduling.infrastructure.persistence.sqlalchemy.models import (
    AppointmentModel,
    SlotModel,
)

from .errors import flush_or_raise

logger = logging.getLogger(__name__)

# Slot-based rows keep date and times on the slot only
_EFFECTIVE_DATE = func.coalesce(AppointmentModel.appointment_date, SlotModel.slot_date)
_EFFECTIVE_START = func.coalesce(AppointmentModel.start_time, SlotModel.start_time)


class SQLAlchemyAppointmentRepository(IAppointmentRepository):
    """
    SQLAlchemy implementation of appointment repository.

    The partial unique index on live appointments turns a lost booking race
    into an IntegrityError at flush, reported as SlotAlreadyBookedException.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, appointment_id: int) -> Appointment | None:
        """Find appointment by ID."""
        model = await self.session.get(AppointmentModel, appointment_id)
        return self._to_entity(model) if model else None

    async def add(self, appointment: Appointment) -> Appointment:
        model = self._to_model(appointment)
        self.session.add(model)
        await flush_or_raise(
            self.session,
            "create appointment",
            on_integrity_error=lambda: SlotAlreadyBookedException(
                doctor_id=appointment.doctor_id,
                clinic_id=appointment.clinic_id,
                appointment_date=appointment.appointment_date.isoformat() if appointment.appointment_date else None,
                time_slot=appointment.start_label,
            ),
        )
        appointment.id = model.appointment_id
        appointment.created_at = model.created_at
        appointment.updated_at = model.updated_at
        return appointment

    async def update(self, appointment: Appointment) -> Appointment:
        model = await self.session.get(AppointmentModel, appointment.id)
        if model is None:
            raise EntityNotFoundException("Appointment", appointment.id)
        model.status = appointment.status
        model.notes = appointment.notes
        model.updated_at = datetime.now(UTC)
        await flush_or_raise(self.session, "update appointment")
        return appointment

    async def delete(self, appointment_id: int) -> bool:
        model = await self.session.get(AppointmentModel, appointment_id)
        if model is None:
            return False
        await self.session.delete(model)
        await flush_or_raise(self.session, "delete appointment")
        return True

    async def list_appointments(
        self,
        doctor_id: int | None = None,
        admin_id: int | None = None,
        clinic_id: int | None = None,
        patient_id: int | None = None,
        appointment_date: date | None = None,
    ) -> list[Appointment]:
        query = select(AppointmentModel).outerjoin(SlotModel, AppointmentModel.slot_id == SlotModel.slot_id)

        if doctor_id is not None:
            query = query.where(AppointmentModel.doctor_id == doctor_id)
        if admin_id is not None:
            query = query.where(AppointmentModel.admin_id == admin_id)
        if clinic_id is not None:
            query = query.where(AppointmentModel.clinic_id == clinic_id)
        if patient_id is not None:
            query = query.where(AppointmentModel.patient_id == patient_id)
        if appointment_date is not None:
            query = query.where(_EFFECTIVE_DATE == appointment_date)

        query = query.order_by(
            _EFFECTIVE_DATE.desc(),
            _EFFECTIVE_START.desc(),
            AppointmentModel.appointment_id.desc(),
        )

        result = await self.session.execute(query)
        return [self._to_entity(m) for m in result.scalars().all()]

    async def live_start_minutes(self, clinic_id: int, appointment_date: date) -> set[int]:
        query = (
            select(_EFFECTIVE_START)
            .select_from(AppointmentModel)
            .outerjoin(SlotModel, AppointmentModel.slot_id == SlotModel.slot_id)
            .where(
                AppointmentModel.clinic_id == clinic_id,
                _EFFECTIVE_DATE == appointment_date,
                AppointmentModel.status.notin_(list(RELEASING_STATUSES)),
            )
        )
        result = await self.session.execute(query)
        minutes = {to_minutes(value) for value in result.scalars().all()}
        return {m for m in minutes if m is not None}

    # Mapping methods

    def _to_entity(self, model: AppointmentModel) -> Appointment:
        """Build the canonical appointment, filling legacy rows from their slot."""
        appointment_date = model.appointment_date
        start_time = model.start_time
        end_time = model.end_time
        if start_time is None and model.slot is not None:
            appointment_date = appointment_date or model.slot.slot_date
            start_time = model.slot.start_time
            end_time = model.slot.end_time

        return Appointment(
            id=model.appointment_id,
            patient_id=model.patient_id,
            doctor_id=model.doctor_id,
            clinic_id=model.clinic_id,
            admin_id=model.admin_id,
            slot_id=model.slot_id,
            appointment_date=appointment_date,
            start_time=to_minutes(start_time),
            end_time=to_minutes(end_time),
            status=AppointmentStatus(model.status),
            notes=model.notes,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, appointment: Appointment) -> AppointmentModel:
        return AppointmentModel(
            patient_id=appointment.patient_id,
            doctor_id=appointment.doctor_id,
            clinic_id=appointment.clinic_id,
            admin_id=appointment.admin_id,
            slot_id=appointment.slot_id,
            appointment_date=appointment.appointment_date,
            start_time=to_time(appointment.start_time) if appointment.start_time is not None else None,
            end_time=to_time(appointment.end_time) if appointment.end_time is not None else None,
            status=appointment.status,
            notes=appointment.notes,
        )

