"""
Slot Repository Implementation
"""

import logging
from datetime import UTC, date, datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_booking.core.domain import SlotAlreadyBookedException
from clinic_booking.domains.scheduling.application.ports import ISlotRepository
from clinic_booking.domains.scheduling.domain.entities import Slot
from clinic_booking.domains.scheduling.domain.value_objects import (
    SlotStatus,
    from_minutes,
    to_minutes,
    to_time,
)
from clinic_booking.domains.scheduling.infrastructure.persistence.sqlalchemy.models import SlotModel

from .errors import flush_or_raise

logger = logging.getLogger(__name__)


class SQLAlchemySlotRepository(ISlotRepository):
    """
    SQLAlchemy implementation of slot repository.

    Booking a slot is a conditional update from AVAILABLE to BOOKED, so two
    writers can never both win the same slot.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, slot_id: int) -> Slot | None:
        # Status changes are bulk updates, so reload instead of trusting the identity map
        model = await self.session.get(SlotModel, slot_id, populate_existing=True)
        return self._to_entity(model) if model else None

    async def get_or_create(
        self,
        doctor_id: int,
        clinic_id: int,
        slot_date: date,
        start_time: int,
        end_time: int,
        schedule_id: int | None = None,
    ) -> Slot:
        result = await self.session.execute(
            select(SlotModel).where(
                SlotModel.doctor_id == doctor_id,
                SlotModel.clinic_id == clinic_id,
                SlotModel.slot_date == slot_date,
                SlotModel.start_time == to_time(start_time),
            )
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        if model is not None:
            return self._to_entity(model)

        model = SlotModel(
            doctor_id=doctor_id,
            clinic_id=clinic_id,
            schedule_id=schedule_id,
            slot_date=slot_date,
            start_time=to_time(start_time),
            end_time=to_time(end_time),
            slot_status=SlotStatus.AVAILABLE,
        )
        self.session.add(model)
        # A concurrent writer materialized the same slot first and is booking it
        await flush_or_raise(
            self.session,
            "create slot",
            on_integrity_error=lambda: SlotAlreadyBookedException(
                doctor_id=doctor_id,
                clinic_id=clinic_id,
                appointment_date=slot_date.isoformat(),
                time_slot=from_minutes(start_time),
            ),
        )
        logger.debug(f"Slot {model.slot_id} materialized for doctor {doctor_id} on {slot_date}")
        return self._to_entity(model)

    async def mark_booked(self, slot_id: int) -> bool:
        result = await self.session.execute(
            update(SlotModel)
            .where(SlotModel.slot_id == slot_id, SlotModel.slot_status == SlotStatus.AVAILABLE)
            .values(slot_status=SlotStatus.BOOKED, updated_at=datetime.now(UTC))
            .returning(SlotModel.slot_id)
            .execution_options(synchronize_session=False)
        )
        return result.scalar_one_or_none() is not None

    async def release(self, slot_id: int) -> None:
        await self.session.execute(
            update(SlotModel)
            .where(SlotModel.slot_id == slot_id)
            .values(slot_status=SlotStatus.AVAILABLE, updated_at=datetime.now(UTC))
            .execution_options(synchronize_session="fetch")
        )

    async def booked_start_minutes(self, clinic_id: int, slot_date: date) -> set[int]:
        result = await self.session.execute(
            select(SlotModel.start_time).where(
                SlotModel.clinic_id == clinic_id,
                SlotModel.slot_date == slot_date,
                SlotModel.slot_status == SlotStatus.BOOKED,
            )
        )
        minutes = {to_minutes(value) for value in result.scalars().all()}
        return {m for m in minutes if m is not None}

    def _to_entity(self, model: SlotModel) -> Slot:
        return Slot(
            id=model.slot_id,
            doctor_id=model.doctor_id,
            clinic_id=model.clinic_id,
            schedule_id=model.schedule_id,
            slot_date=model.slot_date,
            start_time=to_minutes(model.start_time) or 0,
            end_time=to_minutes(model.end_time) or 0,
            status=SlotStatus(model.slot_status),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
