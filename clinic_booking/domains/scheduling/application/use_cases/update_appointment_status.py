"""
Update Appointment Status Use Case
"""

import logging

from clinic_booking.core.domain import BadRequestException, EntityNotFoundException
from clinic_booking.domains.scheduling.application.events import publish_events
from clinic_booking.domains.scheduling.application.identity import Identity, ensure_can_manage_doctor
from clinic_booking.domains.scheduling.application.ports import (
    IAppointmentRepository,
    INotificationEmitter,
    ISlotRepository,
    IUnitOfWork,
    room_key,
)
from clinic_booking.domains.scheduling.domain.entities import Appointment
from clinic_booking.domains.scheduling.domain.value_objects import AppointmentStatus

logger = logging.getLogger(__name__)


class UpdateAppointmentStatusUseCase:
    """
    Doctor/admin status changes.

    Cancelling or rejecting an appointment that holds a materialized slot
    frees that slot in the same transaction.
    """

    def __init__(
        self,
        unit_of_work: IUnitOfWork,
        appointment_repository: IAppointmentRepository,
        slot_repository: ISlotRepository,
        notification_emitter: INotificationEmitter,
    ):
        self.uow = unit_of_work
        self.appointment_repo = appointment_repository
        self.slot_repo = slot_repository
        self.emitter = notification_emitter

    async def execute(
        self,
        appointment_id: int,
        status: str,
        identity: Identity | None = None,
        notes: str | None = None,
    ) -> Appointment:
        """
        Change an appointment's status.

        Raises:
            BadRequestException: unknown status value
            EntityNotFoundException: no appointment with this id
            AuthorizationException: a doctor targets another doctor's appointment
            InvalidOperationException: transition not allowed from the current status
        """
        try:
            new_status = AppointmentStatus.from_string(status)
        except ValueError as e:
            raise BadRequestException(
                f"Invalid status '{status}'. Expected one of: {', '.join(AppointmentStatus.values())}"
            ) from e

        async with self.uow.transaction():
            appointment = await self.appointment_repo.get(appointment_id)
            if appointment is None:
                raise EntityNotFoundException("Appointment", appointment_id)
            ensure_can_manage_doctor(identity, appointment.doctor_id, "update appointment")

            changed = appointment.change_status(new_status)
            if notes is not None:
                appointment.notes = notes
            if changed and new_status.releases_slot() and appointment.slot_id is not None:
                await self.slot_repo.release(appointment.slot_id)
                logger.info(f"Slot {appointment.slot_id} released by appointment {appointment_id}")
            if changed or notes is not None:
                await self.appointment_repo.update(appointment)

        if changed:
            logger.info(f"Appointment {appointment_id} is now {new_status.value}")
            await publish_events(
                self.emitter,
                room_key(appointment.patient_id, appointment.doctor_id),
                appointment.get_domain_events(),
            )
            appointment.clear_domain_events()
        return appointment

