"""
HTTP tests for the scheduling API.

The app runs in-process over httpx's ASGI transport with the database
session, clock and notification emitter replaced by test doubles.
"""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from conftest import ADMIN_ID, NEXT_MONDAY
from httpx import ASGITransport, AsyncClient

from clinic_booking.api.security import TokenService
from clinic_booking.core.app_factory import create_app
from clinic_booking.database.async_db import get_async_db
from clinic_booking.domains.scheduling.api.dependencies import get_clock
from clinic_booking.domains.scheduling.application.identity import Identity
from clinic_booking.domains.scheduling.domain.value_objects import UserRole

# ============================================================================
# FIXTURES
# ============================================================================


@pytest_asyncio.fixture
async def client(async_session_factory, clock, emitter, seed) -> AsyncGenerator[AsyncClient, None]:
    app = create_app()
    app.state.notification_emitter = emitter

    async def _override_db():
        async with async_session_factory() as session:
            yield session

    app.dependency_overrides[get_async_db] = _override_db
    app.dependency_overrides[get_clock] = lambda: clock

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


def _auth(identity: Identity) -> dict[str, str]:
    return {"Authorization": f"Bearer {TokenService().create_access_token(identity)}"}


@pytest.fixture
def doctor_headers(seed) -> dict[str, str]:
    return _auth(Identity(user_id="doc-1", role=UserRole.DOCTOR, admin_id=ADMIN_ID, doctor_id=seed.doctor_id))


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return _auth(Identity(user_id="adm-1", role=UserRole.ADMIN, admin_id=ADMIN_ID))


@pytest_asyncio.fixture
async def monday_schedule(client, seed, doctor_headers) -> dict:
    response = await client.post(
        "/api/v1/schedules",
        json={"clinic_id": seed.clinic_id, "day_of_week": 1, "start_time": "09:00", "end_time": "10:00"},
        headers=doctor_headers,
    )
    assert response.status_code == 201
    return response.json()


def _generated_booking(seed, time: str = "09:00") -> dict:
    return {
        "mode": "generated",
        "doctor_id": seed.doctor_id,
        "clinic_id": seed.clinic_id,
        "patient_id": seed.patient_id,
        "date": NEXT_MONDAY.isoformat(),
        "time": time,
    }


# ============================================================================
# Health and auth
# ============================================================================


@pytest.mark.api
@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "environment": "test"}


@pytest.mark.api
@pytest.mark.asyncio
async def test_protected_route_requires_token(client):
    response = await client.get("/api/v1/schedules")

    assert response.status_code == 401
    assert response.json()["code"] == "AUTHENTICATION_ERROR"
    assert response.headers["WWW-Authenticate"] == "Bearer"


@pytest.mark.api
@pytest.mark.asyncio
async def test_invalid_token_is_rejected(client):
    response = await client.get("/api/v1/clinics", headers={"Authorization": "Bearer not-a-token"})

    assert response.status_code == 401


@pytest.mark.api
@pytest.mark.asyncio
async def test_token_cookie_is_accepted(client, admin_headers):
    token = admin_headers["Authorization"].removeprefix("Bearer ")

    client.cookies.set("token", token)
    response = await client.get("/api/v1/clinics")

    assert response.status_code == 200
    assert [c["clinic_name"] for c in response.json()] == ["Centro", "Norte"]


# ============================================================================
# Slots and schedules
# ============================================================================


@pytest.mark.api
@pytest.mark.asyncio
async def test_slots_require_clinic_and_date(client):
    response = await client.get("/api/v1/slots", params={"date": NEXT_MONDAY.isoformat()})

    body = response.json()
    assert response.status_code == 400
    assert body["code"] == "BAD_REQUEST"
    assert body["details"]["missing"] == ["clinic_id"]


@pytest.mark.api
@pytest.mark.asyncio
async def test_slots_with_malformed_date(client, seed):
    response = await client.get("/api/v1/slots", params={"clinic_id": seed.clinic_id, "date": "next monday"})

    assert response.status_code == 422


@pytest.mark.api
@pytest.mark.asyncio
async def test_schedule_then_slots(client, seed, monday_schedule):
    assert monday_schedule["day_name"] == "Monday"
    assert monday_schedule["doctor_id"] == seed.doctor_id
    assert (monday_schedule["start_time"], monday_schedule["end_time"]) == ("09:00", "10:00")

    response = await client.get(
        "/api/v1/slots", params={"clinic_id": seed.clinic_id, "date": NEXT_MONDAY.isoformat()}
    )

    assert response.status_code == 200
    assert response.json() == {"slots": ["09:00", "09:30"], "slot_duration": 30}


@pytest.mark.api
@pytest.mark.asyncio
async def test_overlapping_schedule_conflicts(client, seed, doctor_headers, monday_schedule):
    response = await client.post(
        "/api/v1/schedules",
        json={"clinic_id": seed.other_clinic_id, "day_of_week": 1, "start_time": "08:30", "end_time": "09:15"},
        headers=doctor_headers,
    )

    body = response.json()
    assert response.status_code == 409
    assert body["code"] == "SCHEDULE_CONFLICT"
    assert body["message"] == "Schedule overlaps with an existing slot on Monday (08:30 - 09:15)"


@pytest.mark.api
@pytest.mark.asyncio
async def test_inverted_schedule_range(client, seed, doctor_headers):
    response = await client.post(
        "/api/v1/schedules",
        json={"clinic_id": seed.clinic_id, "day_of_week": 1, "start_time": "10:00", "end_time": "09:00"},
        headers=doctor_headers,
    )

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_RANGE"


@pytest.mark.api
@pytest.mark.asyncio
async def test_admin_must_name_the_doctor(client, seed, admin_headers):
    response = await client.post(
        "/api/v1/schedules",
        json={"clinic_id": seed.clinic_id, "day_of_week": 1, "start_time": "09:00", "end_time": "10:00"},
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert response.json()["details"]["missing"] == ["doctor_id"]


@pytest.mark.api
@pytest.mark.asyncio
async def test_schedule_for_unknown_doctor_or_clinic_is_404(client, seed, admin_headers):
    unknown_doctor = await client.post(
        "/api/v1/schedules",
        json={
            "doctor_id": 999,
            "clinic_id": seed.clinic_id,
            "day_of_week": 1,
            "start_time": "09:00",
            "end_time": "10:00",
        },
        headers=admin_headers,
    )
    assert unknown_doctor.status_code == 404
    assert unknown_doctor.json()["code"] == "ENTITY_NOT_FOUND"

    unknown_clinic = await client.post(
        "/api/v1/schedules",
        json={"doctor_id": seed.doctor_id, "clinic_id": 999, "day_of_week": 1, "start_time": "09:00", "end_time": "10:00"},
        headers=admin_headers,
    )
    assert unknown_clinic.status_code == 404
    assert unknown_clinic.json()["details"]["entity_type"] == "Clinic"


@pytest.mark.api
@pytest.mark.asyncio
async def test_bulk_replace_update_and_delete_schedule(client, seed, doctor_headers, monday_schedule):
    schedule_id = monday_schedule["schedule_id"]

    replaced = await client.patch(
        "/api/v1/schedules",
        json={
            "clinic_id": seed.clinic_id,
            "schedules": [
                {"schedule_id": schedule_id, "day_of_week": 1, "start_time": "9:00 AM", "end_time": "11:00 AM"},
                {"day_of_week": 3, "start_time": "14:00", "end_time": "16:00", "slot_duration": 60},
            ],
        },
        headers=doctor_headers,
    )
    assert replaced.status_code == 200
    assert [(s["day_of_week"], s["end_time"]) for s in replaced.json()] == [(1, "11:00"), (3, "16:00")]

    updated = await client.put(
        f"/api/v1/schedules/{schedule_id}", json={"slot_duration": 20}, headers=doctor_headers
    )
    assert updated.status_code == 200
    assert updated.json()["slot_duration"] == 20

    deleted = await client.delete(f"/api/v1/schedules/{schedule_id}", headers=doctor_headers)
    assert deleted.status_code == 204

    listed = await client.get("/api/v1/schedules", headers=doctor_headers)
    assert [s["day_name"] for s in listed.json()] == ["Wednesday"]


@pytest.mark.api
@pytest.mark.asyncio
async def test_unknown_schedule_is_404(client, doctor_headers):
    response = await client.delete("/api/v1/schedules/999", headers=doctor_headers)

    assert response.status_code == 404
    assert response.json()["code"] == "ENTITY_NOT_FOUND"


# ============================================================================
# Appointments
# ============================================================================


@pytest.mark.api
@pytest.mark.asyncio
async def test_book_then_double_book(client, seed, monday_schedule, emitter):
    created = await client.post("/api/v1/appointments", json=_generated_booking(seed))

    body = created.json()
    assert created.status_code == 201
    assert body["status"] == "PENDING"
    assert body["appointment_date"] == NEXT_MONDAY.isoformat()
    assert (body["start_time"], body["end_time"]) == ("09:00", "09:30")
    assert [e.event_name for e in emitter.published] == ["appointment_created"]

    again = await client.post("/api/v1/appointments", json=_generated_booking(seed))

    assert again.status_code == 409
    assert again.json()["code"] == "SLOT_ALREADY_BOOKED"

    slots = await client.get("/api/v1/slots", params={"clinic_id": seed.clinic_id, "date": NEXT_MONDAY.isoformat()})
    assert slots.json()["slots"] == ["09:30"]


@pytest.mark.api
@pytest.mark.asyncio
async def test_time_range_booking_by_phone(client, seed):
    response = await client.post(
        "/api/v1/appointments",
        json={
            "mode": "time_range",
            "doctor_id": seed.doctor_id,
            "clinic_id": seed.clinic_id,
            "patient_phone": "+54 9 11 1234-5678",
            "date": NEXT_MONDAY.isoformat(),
            "start_time": "2:00 PM",
            "end_time": "2:30 PM",
        },
    )

    assert response.status_code == 201
    assert response.json()["patient_id"] == seed.patient_id
    assert response.json()["start_time"] == "14:00"


@pytest.mark.api
@pytest.mark.asyncio
async def test_booking_without_mode_is_a_validation_error(client, seed):
    payload = _generated_booking(seed)
    del payload["mode"]

    response = await client.post("/api/v1/appointments", json=payload)

    assert response.status_code == 422
    assert response.json()["message"] == "Validation error"


@pytest.mark.api
@pytest.mark.asyncio
async def test_status_update_list_and_delete(client, seed, monday_schedule, doctor_headers, admin_headers):
    created = (await client.post("/api/v1/appointments", json=_generated_booking(seed))).json()
    appointment_id = created["appointment_id"]

    confirmed = await client.patch(
        f"/api/v1/appointments/{appointment_id}", json={"status": "CONFIRMED"}, headers=doctor_headers
    )
    assert confirmed.status_code == 200
    assert confirmed.json()["status"] == "CONFIRMED"

    back = await client.patch(
        f"/api/v1/appointments/{appointment_id}", json={"status": "PENDING"}, headers=doctor_headers
    )
    assert back.status_code == 409
    assert back.json()["code"] == "INVALID_OPERATION"

    bogus = await client.patch(
        f"/api/v1/appointments/{appointment_id}", json={"status": "LOST"}, headers=doctor_headers
    )
    assert bogus.status_code == 400

    listed = await client.get(
        "/api/v1/appointments", params={"date": NEXT_MONDAY.isoformat()}, headers=admin_headers
    )
    assert [a["appointment_id"] for a in listed.json()] == [appointment_id]

    deleted = await client.delete(f"/api/v1/appointments/{appointment_id}", headers=admin_headers)
    assert deleted.status_code == 204

    slots = await client.get("/api/v1/slots", params={"clinic_id": seed.clinic_id, "date": NEXT_MONDAY.isoformat()})
    assert slots.json()["slots"] == ["09:00", "09:30"]


@pytest.mark.api
@pytest.mark.asyncio
async def test_other_doctor_cannot_touch_appointment(client, seed, monday_schedule):
    created = (await client.post("/api/v1/appointments", json=_generated_booking(seed))).json()
    other = _auth(Identity(user_id="doc-2", role=UserRole.DOCTOR, doctor_id=seed.other_doctor_id))

    response = await client.patch(
        f"/api/v1/appointments/{created['appointment_id']}", json={"status": "CONFIRMED"}, headers=other
    )

    assert response.status_code == 403
    assert response.json()["code"] == "AUTHORIZATION_ERROR"


# ============================================================================
# Clinics and chat
# ============================================================================


@pytest.mark.api
@pytest.mark.asyncio
async def test_clinic_lifecycle(client, seed, doctor_headers):
    created = await client.post(
        "/api/v1/clinics",
        json={
            "clinic_name": "Oeste",
            "schedule": [{"day_of_week": 4, "start_time": "08:00", "end_time": "12:00"}],
        },
        headers=doctor_headers,
    )
    assert created.status_code == 201
    clinic = created.json()
    assert clinic["doctor_id"] == seed.doctor_id
    assert clinic["status"] == "ACTIVE"

    updated = await client.put(
        f"/api/v1/clinics/{clinic['clinic_id']}", json={"status": "INACTIVE"}, headers=doctor_headers
    )
    assert updated.json()["status"] == "INACTIVE"

    deleted = await client.delete(f"/api/v1/clinics/{clinic['clinic_id']}", headers=doctor_headers)
    assert deleted.status_code == 204

    schedules = await client.get("/api/v1/schedules", headers=doctor_headers)
    assert schedules.json() == []


@pytest.mark.api
@pytest.mark.asyncio
async def test_chat_round_trip(client, seed, doctor_headers, emitter):
    sent = await client.post(
        "/api/v1/chat/messages",
        json={"patient_id": seed.patient_id, "doctor_id": seed.doctor_id, "sender": "DOCTOR", "content": "Hola"},
        headers=doctor_headers,
    )
    assert sent.status_code == 201
    assert emitter.published[-1].event_name == "receive_message"

    listed = await client.get(
        "/api/v1/chat/messages",
        params={"patient_id": seed.patient_id, "doctor_id": seed.doctor_id},
        headers=doctor_headers,
    )
    assert [m["content"] for m in listed.json()] == ["Hola"]

    missing = await client.get("/api/v1/chat/messages", params={"patient_id": seed.patient_id}, headers=doctor_headers)
    assert missing.status_code == 422
