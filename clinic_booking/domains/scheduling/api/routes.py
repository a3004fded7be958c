"""
Scheduling API Routes

Slots, schedules, appointments, clinics and chat messages.

API Prefix: /api/v1
"""

import logging
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Body, Depends, Query, Response, status

from clinic_booking.api.security import CurrentIdentity, OptionalIdentity
from clinic_booking.core.domain import BadRequestException
from clinic_booking.domains.scheduling.api.dependencies import (
    get_available_slots_use_case,
    get_book_appointment_use_case,
    get_chat_messages_use_case,
    get_manage_appointments_use_case,
    get_manage_clinic_use_case,
    get_manage_schedule_use_case,
    get_update_status_use_case,
)
from clinic_booking.domains.scheduling.api.schemas import (
    AppointmentCreateRequest,
    AppointmentResponse,
    AppointmentStatusRequest,
    ChatMessageRequest,
    ChatMessageResponse,
    ClinicCreateRequest,
    ClinicResponse,
    ClinicUpdateRequest,
    ScheduleCreateRequest,
    ScheduleReplaceRequest,
    ScheduleResponse,
    ScheduleUpdateRequest,
    SlotsResponse,
)
from clinic_booking.domains.scheduling.application.identity import Identity
from clinic_booking.domains.scheduling.application.use_cases import (
    BookAppointmentRequest,
    BookAppointmentUseCase,
    ChatMessagesUseCase,
    ClinicInput,
    GetAvailableSlotsUseCase,
    ManageAppointmentsUseCase,
    ManageClinicUseCase,
    ManageScheduleUseCase,
    UpdateAppointmentStatusUseCase,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _resolve_doctor_id(doctor_id: int | None, identity: Identity) -> int:
    """Body/query doctor id, else the caller's own."""
    resolved = doctor_id if doctor_id is not None else identity.doctor_id
    if resolved is None:
        raise BadRequestException("doctor_id is required", missing=["doctor_id"])
    return resolved


# ============================================================================
# SLOTS
# ============================================================================


@router.get("/slots", response_model=SlotsResponse, tags=["slots"])
async def get_available_slots(
    use_case: Annotated[GetAvailableSlotsUseCase, Depends(get_available_slots_use_case)],
    identity: OptionalIdentity,
    clinic_id: int | None = Query(None, description="Clinic to generate slots for"),
    slot_date: date | None = Query(None, alias="date", description="Calendar date (YYYY-MM-DD)"),
    doctor_id: int | None = Query(None, description="Restrict to one doctor"),
):
    """Free bookable times for a clinic on a date."""
    result = await use_case.execute(clinic_id, slot_date, doctor_id, identity)
    return SlotsResponse(slots=result.slots, slot_duration=result.slot_duration)


# ============================================================================
# SCHEDULES
# ============================================================================


@router.get("/schedules", response_model=list[ScheduleResponse], tags=["schedules"])
async def list_schedules(
    use_case: Annotated[ManageScheduleUseCase, Depends(get_manage_schedule_use_case)],
    identity: CurrentIdentity,
    doctor_id: int | None = Query(None),
    clinic_id: int | None = Query(None),
    day_of_week: int | None = Query(None, ge=0, le=6),
):
    if identity.is_doctor:
        doctor_id = identity.doctor_id
    entries = await use_case.list_entries(doctor_id=doctor_id, clinic_id=clinic_id, day_of_week=day_of_week)
    return [ScheduleResponse.from_entity(entry) for entry in entries]


@router.post(
    "/schedules",
    response_model=ScheduleResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["schedules"],
)
async def create_schedule(
    payload: ScheduleCreateRequest,
    use_case: Annotated[ManageScheduleUseCase, Depends(get_manage_schedule_use_case)],
    identity: CurrentIdentity,
):
    entry = await use_case.create_entry(
        payload.to_input(),
        doctor_id=_resolve_doctor_id(payload.doctor_id, identity),
        clinic_id=payload.clinic_id,
        admin_id=payload.admin_id,
        identity=identity,
    )
    return ScheduleResponse.from_entity(entry)


@router.patch("/schedules", response_model=list[ScheduleResponse], tags=["schedules"])
async def replace_schedules(
    payload: ScheduleReplaceRequest,
    use_case: Annotated[ManageScheduleUseCase, Depends(get_manage_schedule_use_case)],
    identity: CurrentIdentity,
):
    """Replace the doctor's clinic schedule for every weekday in the payload."""
    entries = await use_case.replace_entries(
        doctor_id=_resolve_doctor_id(payload.doctor_id, identity),
        clinic_id=payload.clinic_id,
        entries=[item.to_input() for item in payload.schedules],
        admin_id=payload.admin_id,
        identity=identity,
    )
    return [ScheduleResponse.from_entity(entry) for entry in entries]


@router.put("/schedules/{schedule_id}", response_model=ScheduleResponse, tags=["schedules"])
async def update_schedule(
    schedule_id: int,
    payload: ScheduleUpdateRequest,
    use_case: Annotated[ManageScheduleUseCase, Depends(get_manage_schedule_use_case)],
    identity: CurrentIdentity,
):
    entry = await use_case.update_entry(schedule_id, payload.to_patch(), identity)
    return ScheduleResponse.from_entity(entry)


@router.delete("/schedules/{schedule_id}", status_code=status.HTTP_204_NO_CONTENT, tags=["schedules"])
async def delete_schedule(
    schedule_id: int,
    use_case: Annotated[ManageScheduleUseCase, Depends(get_manage_schedule_use_case)],
    identity: CurrentIdentity,
):
    await use_case.delete_entry(schedule_id, identity)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ============================================================================
# APPOINTMENTS
# ============================================================================


@router.post(
    "/appointments",
    response_model=AppointmentResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["appointments"],
)
async def book_appointment(
    payload: Annotated[AppointmentCreateRequest, Body(discriminator="mode")],
    use_case: Annotated[BookAppointmentUseCase, Depends(get_book_appointment_use_case)],
    identity: OptionalIdentity,
):
    """
    Book an appointment.

    Anonymous bookings are allowed (messaging channels); the patient is
    resolved from phone or chat id and created on first contact.
    """
    request = BookAppointmentRequest(
        doctor_id=payload.doctor_id,
        clinic_id=payload.clinic_id,
        target=payload.to_target(),
        patient_id=payload.patient_id,
        patient_phone=payload.patient_phone,
        patient_name=payload.patient_name,
        telegram_chat_id=payload.telegram_chat_id,
        admin_id=payload.admin_id,
        notes=payload.notes,
    )
    appointment = await use_case.execute(request, identity)
    return AppointmentResponse.from_entity(appointment)


@router.get("/appointments", response_model=list[AppointmentResponse], tags=["appointments"])
async def list_appointments(
    use_case: Annotated[ManageAppointmentsUseCase, Depends(get_manage_appointments_use_case)],
    identity: CurrentIdentity,
    doctor_id: int | None = Query(None),
    admin_id: int | None = Query(None),
    clinic_id: int | None = Query(None),
    appointment_date: date | None = Query(None, alias="date"),
):
    appointments = await use_case.list_appointments(
        identity=identity,
        doctor_id=doctor_id,
        admin_id=admin_id,
        clinic_id=clinic_id,
        appointment_date=appointment_date,
    )
    return [AppointmentResponse.from_entity(item) for item in appointments]


@router.patch("/appointments/{appointment_id}", response_model=AppointmentResponse, tags=["appointments"])
async def update_appointment_status(
    appointment_id: int,
    payload: AppointmentStatusRequest,
    use_case: Annotated[UpdateAppointmentStatusUseCase, Depends(get_update_status_use_case)],
    identity: CurrentIdentity,
):
    appointment = await use_case.execute(appointment_id, payload.status, identity, payload.notes)
    return AppointmentResponse.from_entity(appointment)


@router.delete(
    "/appointments/{appointment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["appointments"],
)
async def delete_appointment(
    appointment_id: int,
    use_case: Annotated[ManageAppointmentsUseCase, Depends(get_manage_appointments_use_case)],
    identity: CurrentIdentity,
):
    await use_case.delete_appointment(appointment_id, identity)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ============================================================================
# CLINICS
# ============================================================================


@router.post(
    "/clinics",
    response_model=ClinicResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["clinics"],
)
async def create_clinic(
    payload: ClinicCreateRequest,
    use_case: Annotated[ManageClinicUseCase, Depends(get_manage_clinic_use_case)],
    identity: CurrentIdentity,
):
    clinic = await use_case.create_clinic(
        ClinicInput(
            clinic_name=payload.clinic_name,
            phone=payload.phone,
            location=payload.location,
            admin_id=payload.admin_id,
            doctor_id=payload.doctor_id,
            schedule=[item.to_input() for item in payload.schedule],
        ),
        identity,
    )
    return ClinicResponse.from_entity(clinic)


@router.get("/clinics", response_model=list[ClinicResponse], tags=["clinics"])
async def list_clinics(
    use_case: Annotated[ManageClinicUseCase, Depends(get_manage_clinic_use_case)],
    identity: CurrentIdentity,
):
    clinics = await use_case.list_clinics(identity)
    return [ClinicResponse.from_entity(clinic) for clinic in clinics]


@router.put("/clinics/{clinic_id}", response_model=ClinicResponse, tags=["clinics"])
async def update_clinic(
    clinic_id: int,
    payload: ClinicUpdateRequest,
    use_case: Annotated[ManageClinicUseCase, Depends(get_manage_clinic_use_case)],
    identity: CurrentIdentity,
):
    clinic = await use_case.update_clinic(clinic_id, payload.changes(), identity)
    return ClinicResponse.from_entity(clinic)


@router.delete("/clinics/{clinic_id}", status_code=status.HTTP_204_NO_CONTENT, tags=["clinics"])
async def delete_clinic(
    clinic_id: int,
    use_case: Annotated[ManageClinicUseCase, Depends(get_manage_clinic_use_case)],
    identity: CurrentIdentity,
):
    await use_case.delete_clinic(clinic_id, identity)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ============================================================================
# CHAT
# ============================================================================


@router.post(
    "/chat/messages",
    response_model=ChatMessageResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["chat"],
)
async def send_chat_message(
    payload: ChatMessageRequest,
    use_case: Annotated[ChatMessagesUseCase, Depends(get_chat_messages_use_case)],
    identity: CurrentIdentity,
):
    message = await use_case.send_message(payload.patient_id, payload.doctor_id, payload.sender, payload.content)
    logger.debug(f"Message {message.id} sent by {identity.user_id}")
    return ChatMessageResponse.from_entity(message)


@router.get("/chat/messages", response_model=list[ChatMessageResponse], tags=["chat"])
async def list_chat_messages(
    use_case: Annotated[ChatMessagesUseCase, Depends(get_chat_messages_use_case)],
    identity: CurrentIdentity,
    patient_id: int = Query(...),
    doctor_id: int = Query(...),
):
    messages = await use_case.list_messages(patient_id, doctor_id)
    return [ChatMessageResponse.from_entity(message) for message in messages]
