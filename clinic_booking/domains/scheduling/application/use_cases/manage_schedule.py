"""
Manage Schedule Use Case

Create, update, delete and bulk-replace recurring weekly schedule entries.
Every write is approved by the overlap validator first.
"""

import logging
from dataclasses import dataclass
from datetime import date, timedelta

from clinic_booking.core.domain import EntityNotFoundException
from clinic_booking.domains.scheduling.application.clock import Clock, local_now
from clinic_booking.domains.scheduling.application.identity import Identity, ensure_can_manage_doctor
from clinic_booking.domains.scheduling.application.ports import (
    IClinicRepository,
    IDoctorRepository,
    IScheduleRepository,
    IUnitOfWork,
)
from clinic_booking.domains.scheduling.domain.entities import ScheduleEntry
from clinic_booking.domains.scheduling.domain.services import OverlapValidator
from clinic_booking.domains.scheduling.domain.value_objects import require_minutes

logger = logging.getLogger(__name__)


@dataclass
class ScheduleEntryInput:
    """
    One schedule entry as received from a caller.

    Times may use any supported encoding ("09:00", "9:00 AM", stored
    timestamps). ``schedule_id`` marks an update inside a bulk replace.
    """

    day_of_week: int
    start_time: object
    end_time: object
    slot_duration: int | None = None
    schedule_id: int | None = None
    effective_from: date | None = None
    effective_to: date | None = None


@dataclass
class ScheduleEntryPatch:
    """Partial update of a single entry. None leaves a field unchanged."""

    day_of_week: int | None = None
    start_time: object = None
    end_time: object = None
    slot_duration: int | None = None
    clinic_id: int | None = None
    effective_from: date | None = None
    effective_to: date | None = None


class ScheduleEntryFactory:
    """Builds validated entries with configured defaults."""

    def __init__(self, default_slot_duration: int = 30, validity_days: int = 365, clock: Clock = local_now):
        self.default_slot_duration = default_slot_duration
        self.validity_days = validity_days
        self.clock = clock

    def build(
        self,
        data: ScheduleEntryInput,
        doctor_id: int,
        clinic_id: int | None,
        admin_id: int | None,
    ) -> ScheduleEntry:
        """
        Convert caller input into an entry.

        Raises:
            ValidationException: malformed time or attribute
            InvalidRangeException: start is not strictly before end
        """
        today = self.clock().date()
        effective_from = data.effective_from or today
        entry = ScheduleEntry(
            id=data.schedule_id,
            doctor_id=doctor_id,
            clinic_id=clinic_id,
            admin_id=admin_id,
            day_of_week=data.day_of_week,
            start_time=require_minutes(data.start_time, "start_time"),
            end_time=require_minutes(data.end_time, "end_time"),
            slot_duration=data.slot_duration or self.default_slot_duration,
            effective_from=effective_from,
            effective_to=data.effective_to or effective_from + timedelta(days=self.validity_days),
        )
        entry.validate()
        return entry


class ManageScheduleUseCase:
    """
    Schedule store operations.

    Single-entry writes and the bulk replace each run in one transaction.
    """

    def __init__(
        self,
        schedule_repository: IScheduleRepository,
        unit_of_work: IUnitOfWork,
        doctor_repository: IDoctorRepository,
        clinic_repository: IClinicRepository,
        entry_factory: ScheduleEntryFactory | None = None,
    ):
        self.schedule_repo = schedule_repository
        self.uow = unit_of_work
        self.doctor_repo = doctor_repository
        self.clinic_repo = clinic_repository
        self.factory = entry_factory or ScheduleEntryFactory()
        self.validator = OverlapValidator(schedule_repository)

    async def _ensure_references(self, doctor_id: int | None, clinic_id: int | None) -> None:
        """Referenced doctor and clinic must exist before anything is written."""
        if doctor_id is not None and await self.doctor_repo.get(doctor_id) is None:
            raise EntityNotFoundException("Doctor", doctor_id)
        if clinic_id is not None and await self.clinic_repo.get(clinic_id) is None:
            raise EntityNotFoundException("Clinic", clinic_id)

    async def list_entries(
        self,
        doctor_id: int | None = None,
        clinic_id: int | None = None,
        day_of_week: int | None = None,
    ) -> list[ScheduleEntry]:
        return await self.schedule_repo.list_entries(
            doctor_id=doctor_id, clinic_id=clinic_id, day_of_week=day_of_week
        )

    async def create_entry(
        self,
        data: ScheduleEntryInput,
        doctor_id: int,
        clinic_id: int | None,
        admin_id: int | None = None,
        identity: Identity | None = None,
    ) -> ScheduleEntry:
        """
        Create one entry.

        Raises:
            EntityNotFoundException: the doctor or clinic does not exist
            AuthorizationException: a doctor targets another doctor's schedule
            InvalidRangeException: start is not strictly before end
            ScheduleConflictException: the range overlaps another entry of the doctor
        """
        ensure_can_manage_doctor(identity, doctor_id, "create schedule")
        admin_id = admin_id or (identity.admin_id if identity else None)

        entry = self.factory.build(data, doctor_id, clinic_id, admin_id)
        entry.id = None
        async with self.uow.transaction():
            await self._ensure_references(doctor_id, clinic_id)
            await self.validator.ensure_available(
                doctor_id, entry.day_of_week, entry.start_time, entry.end_time
            )
            saved = await self.schedule_repo.add(entry)

        logger.info(f"Schedule {saved.id} created for doctor {doctor_id} on {saved.day_name}")
        return saved

    async def update_entry(
        self,
        schedule_id: int,
        patch: ScheduleEntryPatch,
        identity: Identity | None = None,
    ) -> ScheduleEntry:
        """
        Update one entry.

        Raises:
            EntityNotFoundException: no entry with this id, or the new clinic does not exist
        """
        async with self.uow.transaction():
            entry = await self.schedule_repo.get(schedule_id)
            if entry is None:
                raise EntityNotFoundException("Schedule", schedule_id)
            ensure_can_manage_doctor(identity, entry.doctor_id, "update schedule")
            await self._ensure_references(None, patch.clinic_id)

            if patch.day_of_week is not None:
                entry.day_of_week = patch.day_of_week
            if patch.start_time is not None:
                entry.start_time = require_minutes(patch.start_time, "start_time")
            if patch.end_time is not None:
                entry.end_time = require_minutes(patch.end_time, "end_time")
            if patch.slot_duration is not None:
                entry.slot_duration = patch.slot_duration
            if patch.clinic_id is not None:
                entry.clinic_id = patch.clinic_id
            if patch.effective_from is not None:
                entry.effective_from = patch.effective_from
            if patch.effective_to is not None:
                entry.effective_to = patch.effective_to
            entry.validate()

            await self.validator.ensure_available(
                entry.doctor_id, entry.day_of_week, entry.start_time, entry.end_time,
                exclude_schedule_id=schedule_id,
            )
            entry.touch()
            saved = await self.schedule_repo.update(entry)

        logger.info(f"Schedule {schedule_id} updated")
        return saved

    async def delete_entry(self, schedule_id: int, identity: Identity | None = None) -> None:
        """
        Raises:
            EntityNotFoundException: no entry with this id
        """
        async with self.uow.transaction():
            entry = await self.schedule_repo.get(schedule_id)
            if entry is None:
                raise EntityNotFoundException("Schedule", schedule_id)
            ensure_can_manage_doctor(identity, entry.doctor_id, "delete schedule")
            await self.schedule_repo.delete(schedule_id)

        logger.info(f"Schedule {schedule_id} deleted")

    async def replace_entries(
        self,
        doctor_id: int,
        clinic_id: int | None,
        entries: list[ScheduleEntryInput],
        admin_id: int | None = None,
        identity: Identity | None = None,
    ) -> list[ScheduleEntry]:
        """
        Replace a doctor's clinic schedule for every weekday present in ``entries``.

        Entries of those days whose id is not referenced anywhere in the
        payload are removed; incoming entries are then validated and
        written one by one. Updates are applied before new entries. Any
        failure rolls the whole batch back.

        Raises:
            EntityNotFoundException: the doctor or clinic does not exist, or an incoming
                schedule_id does not belong to this doctor/clinic
            InvalidRangeException: an entry's start is not before its end
            ScheduleConflictException: an entry overlaps another entry of the doctor
        """
        ensure_can_manage_doctor(identity, doctor_id, "replace schedule")
        admin_id = admin_id or (identity.admin_id if identity else None)

        days = sorted({item.day_of_week for item in entries})
        ordered = sorted(entries, key=lambda item: item.schedule_id is None)

        # An entry may move to another day and keep its id
        keep_ids = {item.schedule_id for item in entries if item.schedule_id is not None}

        async with self.uow.transaction():
            await self._ensure_references(doctor_id, clinic_id)
            for day in days:
                removed = await self.schedule_repo.delete_day_except(doctor_id, clinic_id, day, keep_ids)
                if removed:
                    logger.debug(f"Removed {removed} schedule entries for doctor {doctor_id} day {day}")

            saved: list[ScheduleEntry] = []
            for item in ordered:
                entry = self.factory.build(item, doctor_id, clinic_id, admin_id)

                if item.schedule_id is not None:
                    current = await self.schedule_repo.get(item.schedule_id)
                    if current is None or current.doctor_id != doctor_id or current.clinic_id != clinic_id:
                        raise EntityNotFoundException("Schedule", item.schedule_id)
                    if item.effective_from is None:
                        entry.effective_from = current.effective_from
                    if item.effective_to is None:
                        entry.effective_to = current.effective_to
                    entry.validate()
                    await self.validator.ensure_available(
                        doctor_id, entry.day_of_week, entry.start_time, entry.end_time,
                        exclude_schedule_id=item.schedule_id,
                    )
                    entry.created_at = current.created_at
                    entry.touch()
                    saved.append(await self.schedule_repo.update(entry))
                else:
                    await self.validator.ensure_available(
                        doctor_id, entry.day_of_week, entry.start_time, entry.end_time
                    )
                    saved.append(await self.schedule_repo.add(entry))

        logger.info(
            f"Schedule replaced for doctor {doctor_id} clinic {clinic_id}: "
            f"{len(saved)} entries across {len(days)} days"
        )
        return saved
