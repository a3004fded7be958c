"""
Schedule Repository Implementation

SQLAlchemy implementation of IScheduleRepository.
"""

import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_booking.core.domain import EntityNotFoundException
from clinic_booking.domains.scheduling.application.ports import IScheduleRepository
from clinic_booking.domains.scheduling.domain.entities import ScheduleEntry
from clinic_booking.domains.scheduling.domain.value_objects import to_minutes, to_time
from clinic_booking.domains.scheduling.infrastructure.persistence.sqlalchemy.models import ScheduleModel

from .errors import flush_or_raise

logger = logging.getLogger(__name__)


class SQLAlchemyScheduleRepository(IScheduleRepository):
    """
    SQLAlchemy implementation of schedule repository.

    Times are stored as SQL TIME columns and exposed as minute-of-day.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, schedule_id: int) -> ScheduleEntry | None:
        model = await self.session.get(ScheduleModel, schedule_id)
        return self._to_entity(model) if model else None

    async def list_entries(
        self,
        doctor_id: int | None = None,
        clinic_id: int | None = None,
        day_of_week: int | None = None,
    ) -> list[ScheduleEntry]:
        query = select(ScheduleModel)

        if doctor_id is not None:
            query = query.where(ScheduleModel.doctor_id == doctor_id)
        if clinic_id is not None:
            query = query.where(ScheduleModel.clinic_id == clinic_id)
        if day_of_week is not None:
            query = query.where(ScheduleModel.day_of_week == day_of_week)

        query = query.order_by(ScheduleModel.day_of_week, ScheduleModel.start_time, ScheduleModel.schedule_id)

        result = await self.session.execute(query)
        return [self._to_entity(m) for m in result.scalars().all()]

    async def add(self, entry: ScheduleEntry) -> ScheduleEntry:
        model = self._to_model(entry)
        self.session.add(model)
        await flush_or_raise(self.session, "create schedule")
        return self._to_entity(model)

    async def update(self, entry: ScheduleEntry) -> ScheduleEntry:
        model = await self.session.get(ScheduleModel, entry.id)
        if model is None:
            raise EntityNotFoundException("Schedule", entry.id)
        self._update_model(model, entry)
        await flush_or_raise(self.session, "update schedule")
        return self._to_entity(model)

    async def delete(self, schedule_id: int) -> bool:
        model = await self.session.get(ScheduleModel, schedule_id)
        if model is None:
            return False
        await self.session.delete(model)
        await flush_or_raise(self.session, "delete schedule")
        return True

    async def delete_day_except(
        self,
        doctor_id: int,
        clinic_id: int | None,
        day_of_week: int,
        keep_ids: set[int],
    ) -> int:
        stmt = delete(ScheduleModel).where(
            ScheduleModel.doctor_id == doctor_id,
            ScheduleModel.day_of_week == day_of_week,
        )
        if clinic_id is None:
            stmt = stmt.where(ScheduleModel.clinic_id.is_(None))
        else:
            stmt = stmt.where(ScheduleModel.clinic_id == clinic_id)
        if keep_ids:
            stmt = stmt.where(ScheduleModel.schedule_id.notin_(sorted(keep_ids)))

        result = await self.session.execute(stmt.execution_options(synchronize_session="fetch"))
        return result.rowcount or 0

    # Mapping methods

    def _to_entity(self, model: ScheduleModel) -> ScheduleEntry:
        return ScheduleEntry(
            id=model.schedule_id,
            doctor_id=model.doctor_id,
            clinic_id=model.clinic_id,
            admin_id=model.admin_id,
            day_of_week=model.day_of_week,
            start_time=to_minutes(model.start_time) or 0,
            end_time=to_minutes(model.end_time) or 0,
            slot_duration=model.slot_duration,
            effective_from=model.effective_from,
            effective_to=model.effective_to,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entry: ScheduleEntry) -> ScheduleModel:
        model = ScheduleModel(schedule_id=entry.id)
        self._update_model(model, entry)
        return model

    def _update_model(self, model: ScheduleModel, entry: ScheduleEntry) -> None:
        model.doctor_id = entry.doctor_id
        model.clinic_id = entry.clinic_id
        model.admin_id = entry.admin_id
        model.day_of_week = entry.day_of_week
        model.start_time = to_time(entry.start_time)
        model.end_time = to_time(entry.end_time)
        model.slot_duration = entry.slot_duration
        model.effective_from = entry.effective_from
        model.effective_to = entry.effective_to
