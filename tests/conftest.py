"""
Shared pytest fixtures for all tests.

Database tests run against a SQLite file per test (``sqlite+aiosqlite``) so
that two sessions can race on real constraints. The clinic clock is frozen
at Monday 2025-03-03 08:00 unless a test overrides it.
"""

import os
from collections.abc import AsyncGenerator, Callable
from dataclasses import dataclass
from datetime import date, datetime
from types import SimpleNamespace

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

# Ensure test environment before settings are read
os.environ["ENVIRONMENT"] = "test"
os.environ["NOTIFICATIONS_BACKEND"] = "memory"
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["LOG_FORMAT"] = "plain"

from clinic_booking.config.settings import reset_settings  # noqa: E402
from clinic_booking.database.async_db import create_async_database_engine  # noqa: E402
from clinic_booking.database.base import Base  # noqa: E402
from clinic_booking.domains.scheduling.application.use_cases import (  # noqa: E402
    BookAppointmentUseCase,
    ChatMessagesUseCase,
    GetAvailableSlotsUseCase,
    ManageAppointmentsUseCase,
    ManageClinicUseCase,
    ManageScheduleUseCase,
    ScheduleEntryFactory,
    UpdateAppointmentStatusUseCase,
)
from clinic_booking.domains.scheduling.domain.services import SlotGenerator  # noqa: E402
from clinic_booking.domains.scheduling.domain.value_objects import ClinicStatus  # noqa: E402
from clinic_booking.domains.scheduling.infrastructure.notifications import (  # noqa: E402
    InMemoryNotificationEmitter,
)
from clinic_booking.domains.scheduling.infrastructure.persistence.sqlalchemy.models import (  # noqa: E402
    ClinicModel,
    DoctorModel,
    PatientModel,
)
from clinic_booking.domains.scheduling.infrastructure.repositories import (  # noqa: E402
    SQLAlchemyAppointmentRepository,
    SQLAlchemyChatRepository,
    SQLAlchemyClinicRepository,
    SQLAlchemyDoctorRepository,
    SQLAlchemyPatientRepository,
    SQLAlchemyScheduleRepository,
    SQLAlchemySlotRepository,
)
from clinic_booking.domains.scheduling.infrastructure.unit_of_work import SQLAlchemyUnitOfWork  # noqa: E402

reset_settings()

# Monday
TODAY = date(2025, 3, 3)
NEXT_MONDAY = date(2025, 3, 10)
NOW = datetime(2025, 3, 3, 8, 0)

ADMIN_ID = 10
OTHER_ADMIN_ID = 20


class FrozenClock:
    """Callable clock whose time tests can move."""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@dataclass
class SeedData:
    doctor_id: int
    other_doctor_id: int
    clinic_id: int
    other_clinic_id: int
    foreign_clinic_id: int
    patient_id: int


# ============================================================================
# DATABASE FIXTURES
# ============================================================================


@pytest.fixture
def db_url(tmp_path) -> str:
    """SQLite file database, one per test."""
    return f"sqlite+aiosqlite:///{tmp_path / 'clinic_booking.db'}"


@pytest_asyncio.fixture
async def async_engine(db_url: str) -> AsyncGenerator[AsyncEngine, None]:
    """Create the engine and schema for one test."""
    engine = create_async_database_engine(db_url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def async_session_factory(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def db_session(async_session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Fresh session per test, rolled back on teardown."""
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()
            await session.close()


@pytest_asyncio.fixture
async def seed(async_session_factory) -> SeedData:
    """
    Two doctors and three clinics.

    Clinics 1 and 2 belong to admin 10; the third belongs to another admin.
    """
    async with async_session_factory() as session:
        doctor = DoctorModel(admin_id=ADMIN_ID, doctor_name="Dr. Ana Ruiz")
        other_doctor = DoctorModel(admin_id=ADMIN_ID, doctor_name="Dr. Luis Pena")
        session.add_all([doctor, other_doctor])
        await session.flush()

        clinic = ClinicModel(
            clinic_name="Centro", admin_id=ADMIN_ID, doctor_id=doctor.doctor_id, status=ClinicStatus.ACTIVE
        )
        other_clinic = ClinicModel(
            clinic_name="Norte", admin_id=ADMIN_ID, doctor_id=doctor.doctor_id, status=ClinicStatus.ACTIVE
        )
        foreign_clinic = ClinicModel(
            clinic_name="Sur", admin_id=OTHER_ADMIN_ID, doctor_id=None, status=ClinicStatus.ACTIVE
        )
        patient = PatientModel(full_name="Maria Lopez", phone="+5491112345678", admin_id=ADMIN_ID)
        session.add_all([clinic, other_clinic, foreign_clinic, patient])
        await session.commit()

        return SeedData(
            doctor_id=doctor.doctor_id,
            other_doctor_id=other_doctor.doctor_id,
            clinic_id=clinic.clinic_id,
            other_clinic_id=other_clinic.clinic_id,
            foreign_clinic_id=foreign_clinic.clinic_id,
            patient_id=patient.patient_id,
        )


# ============================================================================
# SERVICE FIXTURES
# ============================================================================


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def emitter() -> InMemoryNotificationEmitter:
    return InMemoryNotificationEmitter()


@pytest.fixture
def build_services(clock, emitter) -> Callable[[AsyncSession], SimpleNamespace]:
    """Wire every use case onto one session, the way the API dependencies do."""

    def _build(session: AsyncSession) -> SimpleNamespace:
        uow = SQLAlchemyUnitOfWork(session)
        schedules = SQLAlchemyScheduleRepository(session)
        appointments = SQLAlchemyAppointmentRepository(session)
        slots = SQLAlchemySlotRepository(session)
        factory = ScheduleEntryFactory(default_slot_duration=30, validity_days=365, clock=clock)
        available = GetAvailableSlotsUseCase(schedules, appointments, slots, SlotGenerator(30), clock)

        return SimpleNamespace(
            session=session,
            schedule_repo=schedules,
            appointment_repo=appointments,
            slot_repo=slots,
            patient_repo=SQLAlchemyPatientRepository(session),
            slots=available,
            schedules=ManageScheduleUseCase(
                schedules, uow, SQLAlchemyDoctorRepository(session), SQLAlchemyClinicRepository(session), factory
            ),
            booking=BookAppointmentUseCase(
                unit_of_work=uow,
                doctor_repository=SQLAlchemyDoctorRepository(session),
                clinic_repository=SQLAlchemyClinicRepository(session),
                patient_repository=SQLAlchemyPatientRepository(session),
                slot_repository=slots,
                appointment_repository=appointments,
                notification_emitter=emitter,
                available_slots=available,
            ),
            status=UpdateAppointmentStatusUseCase(uow, appointments, slots, emitter),
            appointments=ManageAppointmentsUseCase(uow, appointments, slots),
            clinics=ManageClinicUseCase(uow, SQLAlchemyClinicRepository(session), schedules, factory),
            chat=ChatMessagesUseCase(uow, SQLAlchemyChatRepository(session), emitter),
        )

    return _build


@pytest.fixture
def services(db_session, build_services) -> SimpleNamespace:
    return build_services(db_session)
