"""
Integration tests for slot availability and booking.

Covers the three booking modes, lazy patient registration and the race
between two sessions booking the same time.
"""

import asyncio
from datetime import datetime

import pytest
import pytest_asyncio
from conftest import NEXT_MONDAY, TODAY

from clinic_booking.core.domain import (
    BadRequestException,
    EntityNotFoundException,
    InvalidRangeException,
    SlotAlreadyBookedException,
    ValidationException,
)
from clinic_booking.domains.scheduling.application.identity import Identity
from clinic_booking.domains.scheduling.application.use_cases import (
    BookAppointmentRequest,
    GeneratedTarget,
    ScheduleEntryInput,
    SlotTarget,
    TimeRangeTarget,
)
from clinic_booking.domains.scheduling.domain.value_objects import AppointmentStatus, PatientType, SlotStatus, UserRole

# ============================================================================
# FIXTURES
# ============================================================================


@pytest_asyncio.fixture
async def monday_schedule(services, seed):
    """Doctor works Mondays 09:00-10:00 at the main clinic in 30 minute slots."""
    return await services.schedules.create_entry(
        ScheduleEntryInput(day_of_week=1, start_time="09:00", end_time="10:00", slot_duration=30),
        doctor_id=seed.doctor_id,
        clinic_id=seed.clinic_id,
        admin_id=10,
    )


def _request(seed, target, **kwargs) -> BookAppointmentRequest:
    kwargs.setdefault("patient_id", seed.patient_id)
    return BookAppointmentRequest(doctor_id=seed.doctor_id, clinic_id=seed.clinic_id, target=target, **kwargs)


# ============================================================================
# Availability
# ============================================================================


@pytest.mark.integration
@pytest.mark.use_case
@pytest.mark.asyncio
class TestAvailableSlots:
    async def test_weekly_schedule_produces_slots(self, services, seed, monday_schedule):
        result = await services.slots.execute(seed.clinic_id, NEXT_MONDAY, seed.doctor_id)

        assert result.slots == ["09:00", "09:30"]
        assert result.slot_duration == 30

    async def test_booked_time_disappears(self, services, seed, monday_schedule):
        await services.booking.execute(_request(seed, GeneratedTarget(NEXT_MONDAY, "09:00")))

        result = await services.slots.execute(seed.clinic_id, NEXT_MONDAY, seed.doctor_id)

        assert result.slots == ["09:30"]

    async def test_past_times_today_are_hidden(self, services, seed, monday_schedule, clock):
        clock.now = datetime(2025, 3, 3, 9, 15)

        result = await services.slots.execute(seed.clinic_id, TODAY, seed.doctor_id)

        assert result.slots == ["09:30"]

    async def test_booked_times_are_clinic_wide(self, services, seed, monday_schedule):
        """A schedule-less booking of another doctor at the same clinic still blocks the time."""
        await services.booking.execute(
            BookAppointmentRequest(
                doctor_id=seed.other_doctor_id,
                clinic_id=seed.clinic_id,
                target=TimeRangeTarget(NEXT_MONDAY, "09:30", "10:00"),
                patient_id=seed.patient_id,
            )
        )

        result = await services.slots.execute(seed.clinic_id, NEXT_MONDAY, seed.doctor_id)

        assert result.slots == ["09:00"]

    async def test_missing_clinic_or_date(self, services, seed):
        with pytest.raises(BadRequestException) as exc_info:
            await services.slots.execute(None, NEXT_MONDAY)

        assert exc_info.value.details["missing"] == ["clinic_id"]

    async def test_doctor_identity_always_sees_own_slots(self, services, seed, monday_schedule):
        identity = Identity(user_id="doc", role=UserRole.DOCTOR, admin_id=10, doctor_id=seed.other_doctor_id)

        result = await services.slots.execute(seed.clinic_id, NEXT_MONDAY, seed.doctor_id, identity=identity)

        assert result.slots == []

    async def test_no_schedule_returns_default_duration(self, services, seed):
        result = await services.slots.execute(seed.clinic_id, NEXT_MONDAY, seed.doctor_id)

        assert result.to_dict() == {"slots": [], "slot_duration": 30}


# ============================================================================
# Booking modes
# ============================================================================


@pytest.mark.integration
@pytest.mark.use_case
@pytest.mark.asyncio
class TestBookingModes:
    async def test_generated_booking_materializes_a_booked_slot(self, services, seed, monday_schedule, emitter):
        appointment = await services.booking.execute(_request(seed, GeneratedTarget(NEXT_MONDAY, "9:00 AM")))

        assert appointment.id is not None
        assert appointment.status == AppointmentStatus.PENDING
        assert appointment.appointment_date == NEXT_MONDAY
        assert (appointment.start_label, appointment.end_label) == ("09:00", "09:30")
        assert appointment.admin_id == 10

        slot = await services.slot_repo.get(appointment.slot_id)
        assert slot.status == SlotStatus.BOOKED
        assert slot.start_time == 540

        room = f"chat_patient_{seed.patient_id}_doctor_{seed.doctor_id}"
        events = emitter.events_for(room)
        assert [e.event_name for e in events] == ["appointment_created"]
        assert events[0].payload["appointment_id"] == appointment.id
        assert events[0].payload["start_time"] == "09:00"

    async def test_generated_booking_of_a_taken_time_conflicts(self, services, seed, monday_schedule, emitter):
        await services.booking.execute(_request(seed, GeneratedTarget(NEXT_MONDAY, "09:00")))

        with pytest.raises(SlotAlreadyBookedException) as exc_info:
            await services.booking.execute(_request(seed, GeneratedTarget(NEXT_MONDAY, "09:00")))

        assert exc_info.value.code == "SLOT_ALREADY_BOOKED"
        assert exc_info.value.details["time_slot"] == "09:00"
        assert len(emitter.published) == 1

    async def test_generated_booking_outside_schedule_conflicts(self, services, seed, monday_schedule):
        with pytest.raises(SlotAlreadyBookedException):
            await services.booking.execute(_request(seed, GeneratedTarget(NEXT_MONDAY, "11:00")))

    async def test_time_range_booking_needs_no_schedule(self, services, seed):
        appointment = await services.booking.execute(
            _request(seed, TimeRangeTarget(NEXT_MONDAY, "2:00 PM", "14:45"), notes="first visit")
        )

        assert appointment.slot_id is None
        assert (appointment.start_time, appointment.end_time) == (840, 885)
        assert appointment.notes == "first visit"

    async def test_time_range_booking_twice_conflicts(self, services, seed):
        await services.booking.execute(_request(seed, TimeRangeTarget(NEXT_MONDAY, "14:00", "14:30")))

        with pytest.raises(SlotAlreadyBookedException):
            await services.booking.execute(_request(seed, TimeRangeTarget(NEXT_MONDAY, "14:00", "14:30")))

    async def test_time_range_must_start_before_end(self, services, seed):
        with pytest.raises(InvalidRangeException):
            await services.booking.execute(_request(seed, TimeRangeTarget(NEXT_MONDAY, "15:00", "14:00")))

    async def test_unknown_slot_id_with_time_materializes_slot(self, services, seed):
        appointment = await services.booking.execute(
            _request(seed, SlotTarget(slot_id=999, appointment_date=NEXT_MONDAY, start_time="16:00"))
        )

        assert appointment.slot_id is not None
        assert appointment.slot_id != 999
        assert (appointment.start_label, appointment.end_label) == ("16:00", "16:30")

    async def test_unknown_slot_id_without_time_is_not_found(self, services, seed):
        with pytest.raises(EntityNotFoundException):
            await services.booking.execute(_request(seed, SlotTarget(slot_id=999)))

    async def test_booked_slot_id_conflicts(self, services, seed):
        first = await services.booking.execute(
            _request(seed, SlotTarget(slot_id=0, appointment_date=NEXT_MONDAY, start_time="16:00", end_time="16:20"))
        )

        with pytest.raises(SlotAlreadyBookedException):
            await services.booking.execute(_request(seed, SlotTarget(slot_id=first.slot_id)))

    async def test_slot_of_another_clinic_is_rejected(self, services, seed):
        first = await services.booking.execute(
            _request(seed, SlotTarget(slot_id=0, appointment_date=NEXT_MONDAY, start_time="16:00"))
        )

        with pytest.raises(BadRequestException):
            await services.booking.execute(
                BookAppointmentRequest(
                    doctor_id=seed.doctor_id,
                    clinic_id=seed.other_clinic_id,
                    target=SlotTarget(slot_id=first.slot_id),
                    patient_id=seed.patient_id,
                )
            )

    async def test_unknown_doctor_or_clinic(self, services, seed):
        with pytest.raises(EntityNotFoundException):
            await services.booking.execute(
                BookAppointmentRequest(
                    doctor_id=999,
                    clinic_id=seed.clinic_id,
                    target=TimeRangeTarget(NEXT_MONDAY, "14:00", "14:30"),
                    patient_id=seed.patient_id,
                )
            )
        with pytest.raises(EntityNotFoundException):
            await services.booking.execute(
                BookAppointmentRequest(
                    doctor_id=seed.doctor_id,
                    clinic_id=999,
                    target=TimeRangeTarget(NEXT_MONDAY, "14:00", "14:30"),
                    patient_id=seed.patient_id,
                )
            )


# ============================================================================
# Patients
# ============================================================================


@pytest.mark.integration
@pytest.mark.use_case
@pytest.mark.asyncio
class TestPatientResolution:
    async def test_known_phone_reuses_patient_after_normalization(self, services, seed):
        appointment = await services.booking.execute(
            _request(
                seed,
                TimeRangeTarget(NEXT_MONDAY, "14:00", "14:30"),
                patient_id=None,
                patient_phone="+54 9 11-1234-5678",
            )
        )

        assert appointment.patient_id == seed.patient_id

    async def test_unknown_phone_registers_new_patient(self, services, seed):
        appointment = await services.booking.execute(
            _request(
                seed,
                TimeRangeTarget(NEXT_MONDAY, "14:00", "14:30"),
                patient_id=None,
                patient_phone="+5491199998888",
            )
        )

        patient = await services.patient_repo.get(appointment.patient_id)
        assert appointment.patient_id != seed.patient_id
        assert patient.full_name == "New Patient"
        assert patient.phone == "+5491199998888"
        assert patient.patient_type == PatientType.NEW
        assert patient.admin_id == 10

    async def test_chat_id_registers_and_then_reuses_patient(self, services, seed):
        first = await services.booking.execute(
            _request(
                seed,
                TimeRangeTarget(NEXT_MONDAY, "14:00", "14:30"),
                patient_id=None,
                telegram_chat_id="tg-77",
                patient_name="Juan Diaz",
            )
        )
        second = await services.booking.execute(
            _request(seed, TimeRangeTarget(NEXT_MONDAY, "15:00", "15:30"), patient_id=None, telegram_chat_id="tg-77")
        )

        assert first.patient_id == second.patient_id
        patient = await services.patient_repo.get(first.patient_id)
        assert patient.full_name == "Juan Diaz"

    async def test_patient_identity_is_required(self, services, seed):
        with pytest.raises(BadRequestException):
            await services.booking.execute(
                _request(seed, TimeRangeTarget(NEXT_MONDAY, "14:00", "14:30"), patient_id=None)
            )

    async def test_invalid_phone(self, services, seed):
        with pytest.raises(ValidationException) as exc_info:
            await services.booking.execute(
                _request(seed, TimeRangeTarget(NEXT_MONDAY, "14:00", "14:30"), patient_id=None, patient_phone="abc")
            )

        assert exc_info.value.field == "patient_phone"

    async def test_failed_booking_leaves_no_patient_behind(self, services, seed):
        await services.booking.execute(_request(seed, TimeRangeTarget(NEXT_MONDAY, "14:00", "14:30")))

        with pytest.raises(SlotAlreadyBookedException):
            await services.booking.execute(
                _request(
                    seed,
                    TimeRangeTarget(NEXT_MONDAY, "14:00", "14:30"),
                    patient_id=None,
                    patient_phone="+5491177776666",
                )
            )

        assert await services.patient_repo.find_by_phone("+5491177776666") is None


# ============================================================================
# Concurrency
# ============================================================================


async def _book_in_own_session(async_session_factory, build_services, request):
    async with async_session_factory() as session:
        services = build_services(session)
        return await services.booking.execute(request)


@pytest.mark.integration
@pytest.mark.use_case
@pytest.mark.asyncio
async def test_concurrent_generated_bookings_have_one_winner(
    async_session_factory, build_services, services, seed, monday_schedule, emitter
):
    request = _request(seed, GeneratedTarget(NEXT_MONDAY, "09:00"))

    results = await asyncio.gather(
        _book_in_own_session(async_session_factory, build_services, request),
        _book_in_own_session(async_session_factory, build_services, request),
        return_exceptions=True,
    )

    winners = [r for r in results if not isinstance(r, BaseException)]
    losers = [r for r in results if isinstance(r, BaseException)]
    assert len(winners) == 1
    assert len(losers) == 1
    assert isinstance(losers[0], SlotAlreadyBookedException)

    appointments = await services.appointments.list_appointments(appointment_date=NEXT_MONDAY)
    assert [a.id for a in appointments] == [winners[0].id]
    assert len(emitter.published) == 1


@pytest.mark.integration
@pytest.mark.use_case
@pytest.mark.asyncio
async def test_concurrent_time_range_bookings_have_one_winner(async_session_factory, build_services, seed):
    request = _request(seed, TimeRangeTarget(NEXT_MONDAY, "11:00", "11:30"))

    results = await asyncio.gather(
        *(_book_in_own_session(async_session_factory, build_services, request) for _ in range(3)),
        return_exceptions=True,
    )

    assert sum(1 for r in results if not isinstance(r, BaseException)) == 1
    assert all(isinstance(r, SlotAlreadyBookedException) for r in results if isinstance(r, BaseException))
