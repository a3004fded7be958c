"""
Scheduling SQLAlchemy Models

Database models for scheduling domain persistence.
"""

from sqlalchemy import (
    Column,
    Date,
    Enum as SQLEnum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Time,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import relationship

from clinic_booking.database.base import Base, TimestampMixin
from clinic_booking.domains.scheduling.domain.value_objects import (
    AppointmentStatus,
    ClinicStatus,
    MessageSender,
    PatientType,
    SlotStatus,
)

# Appointments in these states no longer hold their time
_LIVE_APPOINTMENT = text("status NOT IN ('CANCELLED', 'REJECTED')")


class DoctorModel(Base, TimestampMixin):
    """SQLAlchemy model for Doctor entity."""

    __tablename__ = "doctors"

    doctor_id = Column(Integer, primary_key=True, autoincrement=True)
    admin_id = Column(Integer, nullable=True, index=True)
    user_id = Column(Integer, nullable=True, index=True)
    doctor_name = Column(String(200), nullable=False, default="")
    status = Column(String(20), nullable=False, default="ACTIVE")


class ClinicModel(Base, TimestampMixin):
    """SQLAlchemy model for Clinic entity."""

    __tablename__ = "clinics"

    clinic_id = Column(Integer, primary_key=True, autoincrement=True)
    clinic_name = Column(String(200), nullable=False)
    phone = Column(String(30), nullable=True)
    location = Column(String(255), nullable=True)
    admin_id = Column(Integer, nullable=True, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.doctor_id", ondelete="SET NULL"), nullable=True, index=True)
    status = Column(SQLEnum(ClinicStatus), nullable=False, default=ClinicStatus.ACTIVE)

    schedules = relationship("ScheduleModel", back_populates="clinic", passive_deletes=True)


class ScheduleModel(Base, TimestampMixin):
    """Recurring weekly availability of a doctor at a clinic."""

    __tablename__ = "schedules"

    schedule_id = Column(Integer, primary_key=True, autoincrement=True)
    doctor_id = Column(Integer, ForeignKey("doctors.doctor_id", ondelete="CASCADE"), nullable=False)
    clinic_id = Column(Integer, ForeignKey("clinics.clinic_id", ondelete="CASCADE"), nullable=True, index=True)
    admin_id = Column(Integer, nullable=True)
    day_of_week = Column(Integer, nullable=False)  # Sunday=0
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    slot_duration = Column(Integer, nullable=False, default=30)
    effective_from = Column(Date, nullable=True)
    effective_to = Column(Date, nullable=True)

    clinic = relationship("ClinicModel", back_populates="schedules")

    __table_args__ = (Index("ix_schedules_doctor_day", "doctor_id", "day_of_week"),)


class SlotModel(Base, TimestampMixin):
    """Materialized bookable slot."""

    __tablename__ = "slots"

    slot_id = Column(Integer, primary_key=True, autoincrement=True)
    doctor_id = Column(Integer, ForeignKey("doctors.doctor_id", ondelete="CASCADE"), nullable=False)
    clinic_id = Column(Integer, ForeignKey("clinics.clinic_id", ondelete="CASCADE"), nullable=False)
    schedule_id = Column(Integer, ForeignKey("schedules.schedule_id", ondelete="SET NULL"), nullable=True)
    slot_date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    slot_status = Column(SQLEnum(SlotStatus), nullable=False, default=SlotStatus.AVAILABLE)

    __table_args__ = (
        UniqueConstraint("doctor_id", "clinic_id", "slot_date", "start_time", name="uq_slots_doctor_clinic_date_start"),
        Index("ix_slots_clinic_date", "clinic_id", "slot_date"),
    )


class PatientModel(Base, TimestampMixin):
    """SQLAlchemy model for Patient entity."""

    __tablename__ = "patients"

    patient_id = Column(Integer, primary_key=True, autoincrement=True)
    full_name = Column(String(200), nullable=False)
    phone = Column(String(20), nullable=True, index=True)
    telegram_chat_id = Column(String(64), nullable=True, index=True)
    admin_id = Column(Integer, nullable=True, index=True)
    patient_type = Column(SQLEnum(PatientType), nullable=False, default=PatientType.NEW)


class AppointmentModel(Base, TimestampMixin):
    """
    SQLAlchemy model for Appointment entity.

    Rows from the slot-based flow may carry only ``slot_id``; date and
    times are then read from the slot.
    """

    __tablename__ = "appointments"

    appointment_id = Column(Integer, primary_key=True, autoincrement=True)
    patient_id = Column(Integer, ForeignKey("patients.patient_id"), nullable=False, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.doctor_id", ondelete="CASCADE"), nullable=False)
    clinic_id = Column(Integer, ForeignKey("clinics.clinic_id", ondelete="CASCADE"), nullable=False)
    admin_id = Column(Integer, nullable=True, index=True)
    slot_id = Column(Integer, ForeignKey("slots.slot_id", ondelete="SET NULL"), nullable=True)
    appointment_date = Column(Date, nullable=True)
    start_time = Column(Time, nullable=True)
    end_time = Column(Time, nullable=True)
    status = Column(SQLEnum(AppointmentStatus), nullable=False, default=AppointmentStatus.PENDING)
    notes = Column(Text, nullable=True)

    slot = relationship("SlotModel", lazy="joined")

    __table_args__ = (
        Index(
            "uq_appointments_live_time",
            "doctor_id",
            "clinic_id",
            "appointment_date",
            "start_time",
            unique=True,
            postgresql_where=_LIVE_APPOINTMENT,
            sqlite_where=_LIVE_APPOINTMENT,
        ),
        Index("ix_appointments_clinic_date", "clinic_id", "appointment_date"),
    )


class ChatMessageModel(Base, TimestampMixin):
    """Chat message between a patient and a doctor."""

    __tablename__ = "chat_messages"

    message_id = Column(Integer, primary_key=True, autoincrement=True)
    patient_id = Column(Integer, ForeignKey("patients.patient_id", ondelete="CASCADE"), nullable=False)
    doctor_id = Column(Integer, ForeignKey("doctors.doctor_id", ondelete="CASCADE"), nullable=False)
    sender = Column(SQLEnum(MessageSender), nullable=False)
    content = Column(Text, nullable=False)

    __table_args__ = (Index("ix_chat_messages_pair", "patient_id", "doctor_id"),)
