"""
Repository tests against SQLite.

Exercise the mapping between stored rows and domain entities, including
appointments written by the older slot-based flow.
"""

from datetime import time

import pytest
import pytest_asyncio
from conftest import NEXT_MONDAY

from clinic_booking.core.domain import SlotAlreadyBookedException
from clinic_booking.domains.scheduling.domain.entities import Appointment, Patient
from clinic_booking.domains.scheduling.domain.value_objects import AppointmentStatus, SlotStatus
from clinic_booking.domains.scheduling.infrastructure.persistence.sqlalchemy.models import (
    AppointmentModel,
    SlotModel,
)
from clinic_booking.domains.scheduling.infrastructure.repositories import (
    SQLAlchemyAppointmentRepository,
    SQLAlchemyPatientRepository,
    SQLAlchemySlotRepository,
)

# ============================================================================
# FIXTURES
# ============================================================================


@pytest_asyncio.fixture
async def legacy_appointment_id(async_session_factory, seed) -> int:
    """An appointment row that only references its slot."""
    async with async_session_factory() as session:
        slot = SlotModel(
            doctor_id=seed.doctor_id,
            clinic_id=seed.clinic_id,
            slot_date=NEXT_MONDAY,
            start_time=time(10, 0),
            end_time=time(10, 30),
            slot_status=SlotStatus.BOOKED,
        )
        session.add(slot)
        await session.flush()
        appointment = AppointmentModel(
            patient_id=seed.patient_id,
            doctor_id=seed.doctor_id,
            clinic_id=seed.clinic_id,
            admin_id=10,
            slot_id=slot.slot_id,
            status=AppointmentStatus.CONFIRMED,
        )
        session.add(appointment)
        await session.commit()
        return appointment.appointment_id


# ============================================================================
# Appointment repository
# ============================================================================


@pytest.mark.integration
@pytest.mark.repository
@pytest.mark.asyncio
async def test_legacy_row_is_read_with_slot_date_and_times(db_session, legacy_appointment_id):
    repo = SQLAlchemyAppointmentRepository(db_session)

    appointment = await repo.get(legacy_appointment_id)

    assert appointment.appointment_date == NEXT_MONDAY
    assert (appointment.start_label, appointment.end_label) == ("10:00", "10:30")
    assert appointment.status == AppointmentStatus.CONFIRMED


@pytest.mark.integration
@pytest.mark.repository
@pytest.mark.asyncio
async def test_legacy_rows_count_as_booked_and_match_date_filters(db_session, seed, legacy_appointment_id):
    repo = SQLAlchemyAppointmentRepository(db_session)

    booked = await repo.live_start_minutes(seed.clinic_id, NEXT_MONDAY)
    listed = await repo.list_appointments(appointment_date=NEXT_MONDAY)

    assert booked == {600}
    assert [a.id for a in listed] == [legacy_appointment_id]
    assert listed[0].start_time == 600


@pytest.mark.integration
@pytest.mark.repository
@pytest.mark.asyncio
async def test_released_appointments_do_not_hold_their_time(db_session, seed):
    repo = SQLAlchemyAppointmentRepository(db_session)
    for start, status in ((540, AppointmentStatus.CANCELLED), (570, AppointmentStatus.REJECTED), (600, None)):
        appointment = Appointment(
            patient_id=seed.patient_id,
            doctor_id=seed.doctor_id,
            clinic_id=seed.clinic_id,
            appointment_date=NEXT_MONDAY,
            start_time=start,
            end_time=start + 30,
        )
        if status is not None:
            appointment.status = status
        await repo.add(appointment)
    await db_session.commit()

    assert await repo.live_start_minutes(seed.clinic_id, NEXT_MONDAY) == {600}


@pytest.mark.integration
@pytest.mark.repository
@pytest.mark.asyncio
async def test_live_duplicate_is_rejected_but_cancelled_duplicate_is_allowed(db_session, seed):
    repo = SQLAlchemyAppointmentRepository(db_session)

    def _at_nine(status=AppointmentStatus.PENDING) -> Appointment:
        return Appointment(
            patient_id=seed.patient_id,
            doctor_id=seed.doctor_id,
            clinic_id=seed.clinic_id,
            appointment_date=NEXT_MONDAY,
            start_time=540,
            end_time=570,
            status=status,
        )

    await repo.add(_at_nine(AppointmentStatus.CANCELLED))
    await repo.add(_at_nine())
    await db_session.commit()

    with pytest.raises(SlotAlreadyBookedException):
        await repo.add(_at_nine())


# ============================================================================
# Slot repository
# ============================================================================


@pytest.mark.integration
@pytest.mark.repository
@pytest.mark.asyncio
async def test_slot_is_booked_only_once(db_session, seed):
    repo = SQLAlchemySlotRepository(db_session)
    slot = await repo.get_or_create(seed.doctor_id, seed.clinic_id, NEXT_MONDAY, 540, 570)
    same = await repo.get_or_create(seed.doctor_id, seed.clinic_id, NEXT_MONDAY, 540, 570)

    assert same.id == slot.id
    assert await repo.mark_booked(slot.id) is True
    assert await repo.mark_booked(slot.id) is False
    assert await repo.booked_start_minutes(seed.clinic_id, NEXT_MONDAY) == {540}
    assert (await repo.get(slot.id)).status == SlotStatus.BOOKED

    await repo.release(slot.id)

    assert (await repo.get(slot.id)).status == SlotStatus.AVAILABLE
    assert await repo.booked_start_minutes(seed.clinic_id, NEXT_MONDAY) == set()


# ============================================================================
# Patient repository
# ============================================================================


@pytest.mark.integration
@pytest.mark.repository
@pytest.mark.asyncio
async def test_oldest_patient_wins_for_shared_phone(db_session, seed):
    repo = SQLAlchemyPatientRepository(db_session)
    await repo.add(Patient.register(full_name="Maria Lopez (2)", phone="+5491112345678", admin_id=10))

    found = await repo.find_by_phone("+5491112345678")

    assert found.id == seed.patient_id
    assert found.full_name == "Maria Lopez"
