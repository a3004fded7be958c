"""
List and delete appointments.
"""

import logging
from datetime import date

from clinic_booking.core.domain import EntityNotFoundException
from clinic_booking.domains.scheduling.application.identity import Identity, ensure_can_manage_doctor
from clinic_booking.domains.scheduling.application.ports import (
    IAppointmentRepository,
    ISlotRepository,
    IUnitOfWork,
)
from clinic_booking.domains.scheduling.domain.entities import Appointment
from clinic_booking.domains.scheduling.domain.value_objects import UserRole

logger = logging.getLogger(__name__)


class ManageAppointmentsUseCase:
    def __init__(
        self,
        unit_of_work: IUnitOfWork,
        appointment_repository: IAppointmentRepository,
        slot_repository: ISlotRepository,
    ):
        self.uow = unit_of_work
        self.appointment_repo = appointment_repository
        self.slot_repo = slot_repository

    async def list_appointments(
        self,
        identity: Identity | None = None,
        doctor_id: int | None = None,
        admin_id: int | None = None,
        clinic_id: int | None = None,
        appointment_date: date | None = None,
    ) -> list[Appointment]:
        """List appointments newest first, scoped to the caller's role."""
        patient_id = None
        if identity is not None:
            if identity.role == UserRole.DOCTOR:
                doctor_id = identity.doctor_id
            elif identity.role == UserRole.PATIENT:
                patient_id = identity.patient_id
            elif identity.role in (UserRole.ADMIN, UserRole.STAFF):
                admin_id = identity.admin_id
        return await self.appointment_repo.list_appointments(
            doctor_id=doctor_id,
            admin_id=admin_id,
            clinic_id=clinic_id,
            patient_id=patient_id,
            appointment_date=appointment_date,
        )

    async def delete_appointment(self, appointment_id: int, identity: Identity | None = None) -> None:
        """
        Delete an appointment, freeing its slot.

        Raises:
            EntityNotFoundException: no appointment with this id
        """
        async with self.uow.transaction():
            appointment = await self.appointment_repo.get(appointment_id)
            if appointment is None:
                raise EntityNotFoundException("Appointment", appointment_id)
            ensure_can_manage_doctor(identity, appointment.doctor_id, "delete appointment")
            if appointment.slot_id is not None and appointment.is_live:
                await self.slot_repo.release(appointment.slot_id)
            await self.appointment_repo.delete(appointment_id)

        logger.info(f"Appointment {appointment_id} deleted")
