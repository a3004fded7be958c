"""
Patient Repository Implementation
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_booking.domains.scheduling.application.ports import IPatientRepository
from clinic_booking.domains.scheduling.domain.entities import Patient
from clinic_booking.domains.scheduling.domain.value_objects import PatientType
from clinic_booking.domains.scheduling.infrastructure.persistence.sqlalchemy.models import PatientModel

from .errors import flush_or_raise


class SQLAlchemyPatientRepository(IPatientRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, patient_id: int) -> Patient | None:
        model = await self.session.get(PatientModel, patient_id)
        return self._to_entity(model) if model else None

    async def find_by_phone(self, phone: str) -> Patient | None:
        """Phone is not unique; the oldest matching patient wins."""
        result = await self.session.execute(
            select(PatientModel).where(PatientModel.phone == phone).order_by(PatientModel.patient_id).limit(1)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def find_by_chat_id(self, telegram_chat_id: str) -> Patient | None:
        result = await self.session.execute(
            select(PatientModel)
            .where(PatientModel.telegram_chat_id == telegram_chat_id)
            .order_by(PatientModel.patient_id)
            .limit(1)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def add(self, patient: Patient) -> Patient:
        model = PatientModel(
            full_name=patient.full_name,
            phone=patient.phone,
            telegram_chat_id=patient.telegram_chat_id,
            admin_id=patient.admin_id,
            patient_type=patient.patient_type,
        )
        self.session.add(model)
        await flush_or_raise(self.session, "create patient")
        return self._to_entity(model)

    def _to_entity(self, model: PatientModel) -> Patient:
        return Patient(
            id=model.patient_id,
            full_name=model.full_name,
            phone=model.phone,
            telegram_chat_id=model.telegram_chat_id,
            admin_id=model.admin_id,
            patient_type=PatientType(model.patient_type),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
