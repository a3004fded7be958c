"""
Get Available Slots Use Case

Bookable time labels for a clinic (and optionally a doctor) on one date.
"""

import logging
from datetime import date

from clinic_booking.core.domain import BadRequestException
from clinic_booking.domains.scheduling.application.clock import Clock, local_now
from clinic_booking.domains.scheduling.application.identity import Identity
from clinic_booking.domains.scheduling.application.ports import (
    IAppointmentRepository,
    IScheduleRepository,
    ISlotRepository,
)
from clinic_booking.domains.scheduling.domain.services import GeneratedSlots, SlotGenerator
from clinic_booking.domains.scheduling.domain.value_objects import day_of_week

logger = logging.getLogger(__name__)


class GetAvailableSlotsUseCase:
    """
    Read-only slot computation, recomputed on every call.

    Booked times are the start times of live appointments and BOOKED slots
    at the clinic on that date.
    """

    def __init__(
        self,
        schedule_repository: IScheduleRepository,
        appointment_repository: IAppointmentRepository,
        slot_repository: ISlotRepository,
        slot_generator: SlotGenerator | None = None,
        clock: Clock = local_now,
    ):
        self.schedule_repo = schedule_repository
        self.appointment_repo = appointment_repository
        self.slot_repo = slot_repository
        self.generator = slot_generator or SlotGenerator()
        self.clock = clock

    async def execute(
        self,
        clinic_id: int | None,
        target_date: date | None,
        doctor_id: int | None = None,
        identity: Identity | None = None,
    ) -> GeneratedSlots:
        """
        Compute free slots.

        Raises:
            BadRequestException: clinic_id or date missing
        """
        if clinic_id is None or target_date is None:
            missing = [name for name, value in (("clinic_id", clinic_id), ("date", target_date)) if value is None]
            raise BadRequestException("clinic_id and date are required", missing=missing)

        # Doctors only ever see their own slots
        if identity is not None and identity.is_doctor:
            doctor_id = identity.doctor_id

        entries = await self.schedule_repo.list_entries(
            doctor_id=doctor_id,
            clinic_id=clinic_id,
            day_of_week=day_of_week(target_date),
        )
        if not entries:
            return GeneratedSlots(slots=[], slot_duration=self.generator.default_slot_duration)

        booked = await self.appointment_repo.live_start_minutes(clinic_id, target_date)
        booked |= await self.slot_repo.booked_start_minutes(clinic_id, target_date)

        result = self.generator.generate(entries, booked, target_date, self.clock())
        logger.debug(
            f"Generated {len(result.slots)} slots for clinic {clinic_id} "
            f"doctor {doctor_id} on {target_date.isoformat()}"
        )
        return result
