"""
Clinic and Doctor Repository Implementations
"""

import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_booking.core.domain import EntityNotFoundException
from clinic_booking.domains.scheduling.application.ports import IClinicRepository, IDoctorRepository
from clinic_booking.domains.scheduling.domain.entities import Clinic, Doctor
from clinic_booking.domains.scheduling.domain.value_objects import ClinicStatus
from clinic_booking.domains.scheduling.infrastructure.persistence.sqlalchemy.models import (
    ClinicModel,
    DoctorModel,
    ScheduleModel,
)

from .errors import flush_or_raise

logger = logging.getLogger(__name__)


class SQLAlchemyClinicRepository(IClinicRepository):
    """SQLAlchemy implementation of clinic repository."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, clinic_id: int) -> Clinic | None:
        model = await self.session.get(ClinicModel, clinic_id)
        return self._to_entity(model) if model else None

    async def add(self, clinic: Clinic) -> Clinic:
        model = ClinicModel()
        self._update_model(model, clinic)
        self.session.add(model)
        await flush_or_raise(self.session, "create clinic")
        return self._to_entity(model)

    async def update(self, clinic: Clinic) -> Clinic:
        model = await self.session.get(ClinicModel, clinic.id)
        if model is None:
            raise EntityNotFoundException("Clinic", clinic.id)
        self._update_model(model, clinic)
        await flush_or_raise(self.session, "update clinic")
        return self._to_entity(model)

    async def delete(self, clinic_id: int) -> bool:
        model = await self.session.get(ClinicModel, clinic_id)
        if model is None:
            return False
        result = await self.session.execute(
            delete(ScheduleModel)
            .where(ScheduleModel.clinic_id == clinic_id)
            .execution_options(synchronize_session="fetch")
        )
        logger.debug(f"Deleted {result.rowcount} schedule entries of clinic {clinic_id}")
        await self.session.delete(model)
        await flush_or_raise(self.session, "delete clinic")
        return True

    async def list_clinics(
        self,
        admin_id: int | None = None,
        doctor_id: int | None = None,
    ) -> list[Clinic]:
        query = select(ClinicModel)
        if admin_id is not None:
            query = query.where(ClinicModel.admin_id == admin_id)
        if doctor_id is not None:
            query = query.where(ClinicModel.doctor_id == doctor_id)
        query = query.order_by(ClinicModel.clinic_name, ClinicModel.clinic_id)

        result = await self.session.execute(query)
        return [self._to_entity(m) for m in result.scalars().all()]

    def _to_entity(self, model: ClinicModel) -> Clinic:
        return Clinic(
            id=model.clinic_id,
            clinic_name=model.clinic_name,
            phone=model.phone,
            location=model.location,
            admin_id=model.admin_id,
            doctor_id=model.doctor_id,
            status=ClinicStatus(model.status),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _update_model(self, model: ClinicModel, clinic: Clinic) -> None:
        model.clinic_name = clinic.clinic_name
        model.phone = clinic.phone
        model.location = clinic.location
        model.admin_id = clinic.admin_id
        model.doctor_id = clinic.doctor_id
        model.status = clinic.status


class SQLAlchemyDoctorRepository(IDoctorRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, doctor_id: int) -> Doctor | None:
        model = await self.session.get(DoctorModel, doctor_id)
        if model is None:
            return None
        return Doctor(
            id=model.doctor_id,
            admin_id=model.admin_id,
            user_id=model.user_id,
            doctor_name=model.doctor_name,
            status=model.status,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
