"""
Manage Clinic Use Case

Clinic CRUD. A clinic and its initial schedule are created atomically.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from clinic_booking.core.domain import (
    AuthorizationException,
    BadRequestException,
    EntityNotFoundException,
    ValidationException,
)
from clinic_booking.domains.scheduling.application.identity import Identity
from clinic_booking.domains.scheduling.application.ports import (
    IClinicRepository,
    IScheduleRepository,
    IUnitOfWork,
)
from clinic_booking.domains.scheduling.application.use_cases.manage_schedule import (
    ScheduleEntryFactory,
    ScheduleEntryInput,
)
from clinic_booking.domains.scheduling.domain.entities import Clinic
from clinic_booking.domains.scheduling.domain.services import OverlapValidator
from clinic_booking.domains.scheduling.domain.value_objects import ClinicStatus, UserRole

logger = logging.getLogger(__name__)


@dataclass
class ClinicInput:
    clinic_name: str
    phone: str | None = None
    location: str | None = None
    admin_id: int | None = None
    doctor_id: int | None = None
    schedule: list[ScheduleEntryInput] = field(default_factory=list)


class ManageClinicUseCase:
    """
    Clinic management scoped by the caller's role.

    Doctors own the clinics they create and only see their own; admins see
    their tenant's clinics; super admins see everything.
    """

    def __init__(
        self,
        unit_of_work: IUnitOfWork,
        clinic_repository: IClinicRepository,
        schedule_repository: IScheduleRepository,
        entry_factory: ScheduleEntryFactory | None = None,
    ):
        self.uow = unit_of_work
        self.clinic_repo = clinic_repository
        self.schedule_repo = schedule_repository
        self.factory = entry_factory or ScheduleEntryFactory()
        self.validator = OverlapValidator(schedule_repository)

    async def create_clinic(self, data: ClinicInput, identity: Identity | None = None) -> Clinic:
        """
        Create a clinic with its initial weekly schedule.

        The schedule is only written when a doctor owns the clinic.

        Raises:
            BadRequestException: admin context cannot be resolved
            InvalidRangeException: a schedule entry does not start before it ends
            ScheduleConflictException: a schedule entry overlaps the doctor's existing entries
        """
        admin_id = data.admin_id or (identity.admin_id if identity else None)
        if admin_id is None:
            raise BadRequestException("Admin context could not be resolved", missing=["admin_id"])
        doctor_id = identity.doctor_id if identity is not None and identity.is_doctor else data.doctor_id

        async with self.uow.transaction():
            clinic = await self.clinic_repo.add(
                Clinic(
                    clinic_name=data.clinic_name,
                    phone=data.phone,
                    location=data.location,
                    admin_id=admin_id,
                    doctor_id=doctor_id,
                    status=ClinicStatus.ACTIVE,
                )
            )

            if data.schedule and doctor_id is None:
                logger.warning(f"Clinic {clinic.id} created without a doctor; initial schedule ignored")
            elif doctor_id is not None:
                for item in data.schedule:
                    entry = self.factory.build(item, doctor_id, clinic.id, admin_id)
                    entry.id = None
                    await self.validator.ensure_available(
                        doctor_id, entry.day_of_week, entry.start_time, entry.end_time
                    )
                    await self.schedule_repo.add(entry)

        logger.info(f"Clinic {clinic.id} '{clinic.clinic_name}' created for admin {admin_id}")
        return clinic

    async def list_clinics(self, identity: Identity | None = None) -> list[Clinic]:
        if identity is None or identity.is_super_admin:
            return await self.clinic_repo.list_clinics()
        if identity.is_doctor:
            return await self.clinic_repo.list_clinics(doctor_id=identity.doctor_id)
        return await self.clinic_repo.list_clinics(admin_id=identity.admin_id)

    async def update_clinic(
        self,
        clinic_id: int,
        changes: dict[str, Any],
        identity: Identity | None = None,
    ) -> Clinic:
        """
        Raises:
            EntityNotFoundException: no clinic with this id
            AuthorizationException: the caller does not own the clinic
        """
        async with self.uow.transaction():
            clinic = await self._get_owned(clinic_id, identity, "update clinic")
            if changes.get("status") is not None:
                try:
                    status = ClinicStatus.from_string(str(changes["status"]))
                except ValueError as e:
                    raise ValidationException(str(e), field="status") from e
                changes = {**changes, "status": status}
            clinic.apply_changes(changes)
            await self.clinic_repo.update(clinic)

        logger.info(f"Clinic {clinic_id} updated")
        return clinic

    async def delete_clinic(self, clinic_id: int, identity: Identity | None = None) -> None:
        """
        Delete a clinic and its schedule entries.

        Raises:
            EntityNotFoundException: no clinic with this id
            AuthorizationException: the caller does not own the clinic
        """
        async with self.uow.transaction():
            await self._get_owned(clinic_id, identity, "delete clinic")
            await self.clinic_repo.delete(clinic_id)

        logger.info(f"Clinic {clinic_id} deleted")

    async def _get_owned(self, clinic_id: int, identity: Identity | None, operation: str) -> Clinic:
        clinic = await self.clinic_repo.get(clinic_id)
        if clinic is None:
            raise EntityNotFoundException("Clinic", clinic_id)
        if identity is None or identity.is_super_admin:
            return clinic

        owns = (
            clinic.doctor_id == identity.doctor_id
            if identity.role == UserRole.DOCTOR
            else clinic.admin_id == identity.admin_id
        )
        if not owns:
            raise AuthorizationException(operation=operation, resource=f"clinic:{clinic_id}", user_id=identity.user_id)
        return clinic
