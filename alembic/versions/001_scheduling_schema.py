"""Scheduling schema: doctors, clinics, schedules, slots, patients, appointments, chat.

Revision ID: 001_scheduling_schema
Revises: None
Create Date: 2026-10-18

Double booking is prevented by two constraints:
- uq_slots_doctor_clinic_date_start: one materialized slot per start time
- uq_appointments_live_time: one live (not CANCELLED/REJECTED) appointment
  per doctor, clinic, date and start time
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001_scheduling_schema"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

clinic_status = sa.Enum("ACTIVE", "INACTIVE", name="clinicstatus")
slot_status = sa.Enum("AVAILABLE", "BOOKED", name="slotstatus")
patient_type = sa.Enum("NEW", "RETURNING", name="patienttype")
appointment_status = sa.Enum("PENDING", "CONFIRMED", "COMPLETED", "CANCELLED", "REJECTED", name="appointmentstatus")
message_sender = sa.Enum("DOCTOR", "PATIENT", name="messagesender")

LIVE_APPOINTMENT = sa.text("status NOT IN ('CANCELLED', 'REJECTED')")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "doctors",
        sa.Column("doctor_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("admin_id", sa.Integer(), nullable=True),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("doctor_name", sa.String(200), nullable=False, server_default=""),
        sa.Column("status", sa.String(20), nullable=False, server_default="ACTIVE"),
        *_timestamps(),
    )
    op.create_index("ix_doctors_admin_id", "doctors", ["admin_id"])
    op.create_index("ix_doctors_user_id", "doctors", ["user_id"])

    op.create_table(
        "clinics",
        sa.Column("clinic_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("clinic_name", sa.String(200), nullable=False),
        sa.Column("phone", sa.String(30), nullable=True),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("admin_id", sa.Integer(), nullable=True),
        sa.Column(
            "doctor_id",
            sa.Integer(),
            sa.ForeignKey("doctors.doctor_id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("status", clinic_status, nullable=False, server_default="ACTIVE"),
        *_timestamps(),
    )
    op.create_index("ix_clinics_admin_id", "clinics", ["admin_id"])
    op.create_index("ix_clinics_doctor_id", "clinics", ["doctor_id"])

    op.create_table(
        "schedules",
        sa.Column("schedule_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "doctor_id",
            sa.Integer(),
            sa.ForeignKey("doctors.doctor_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "clinic_id",
            sa.Integer(),
            sa.ForeignKey("clinics.clinic_id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column("admin_id", sa.Integer(), nullable=True),
        sa.Column("day_of_week", sa.Integer(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("slot_duration", sa.Integer(), nullable=False, server_default="30"),
        sa.Column("effective_from", sa.Date(), nullable=True),
        sa.Column("effective_to", sa.Date(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_schedules_clinic_id", "schedules", ["clinic_id"])
    op.create_index("ix_schedules_doctor_day", "schedules", ["doctor_id", "day_of_week"])

    op.create_table(
        "slots",
        sa.Column("slot_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "doctor_id",
            sa.Integer(),
            sa.ForeignKey("doctors.doctor_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "clinic_id",
            sa.Integer(),
            sa.ForeignKey("clinics.clinic_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "schedule_id",
            sa.Integer(),
            sa.ForeignKey("schedules.schedule_id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("slot_date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("slot_status", slot_status, nullable=False, server_default="AVAILABLE"),
        *_timestamps(),
        sa.UniqueConstraint(
            "doctor_id", "clinic_id", "slot_date", "start_time", name="uq_slots_doctor_clinic_date_start"
        ),
    )
    op.create_index("ix_slots_clinic_date", "slots", ["clinic_id", "slot_date"])

    op.create_table(
        "patients",
        sa.Column("patient_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("full_name", sa.String(200), nullable=False),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column("telegram_chat_id", sa.String(64), nullable=True),
        sa.Column("admin_id", sa.Integer(), nullable=True),
        sa.Column("patient_type", patient_type, nullable=False, server_default="NEW"),
        *_timestamps(),
    )
    op.create_index("ix_patients_phone", "patients", ["phone"])
    op.create_index("ix_patients_telegram_chat_id", "patients", ["telegram_chat_id"])
    op.create_index("ix_patients_admin_id", "patients", ["admin_id"])

    op.create_table(
        "appointments",
        sa.Column("appointment_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("patient_id", sa.Integer(), sa.ForeignKey("patients.patient_id"), nullable=False),
        sa.Column(
            "doctor_id",
            sa.Integer(),
            sa.ForeignKey("doctors.doctor_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "clinic_id",
            sa.Integer(),
            sa.ForeignKey("clinics.clinic_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("admin_id", sa.Integer(), nullable=True),
        sa.Column(
            "slot_id",
            sa.Integer(),
            sa.ForeignKey("slots.slot_id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("appointment_date", sa.Date(), nullable=True),
        sa.Column("start_time", sa.Time(), nullable=True),
        sa.Column("end_time", sa.Time(), nullable=True),
        sa.Column("status", appointment_status, nullable=False, server_default="PENDING"),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_appointments_patient_id", "appointments", ["patient_id"])
    op.create_index("ix_appointments_admin_id", "appointments", ["admin_id"])
    op.create_index("ix_appointments_clinic_date", "appointments", ["clinic_id", "appointment_date"])
    op.create_index(
        "uq_appointments_live_time",
        "appointments",
        ["doctor_id", "clinic_id", "appointment_date", "start_time"],
        unique=True,
        postgresql_where=LIVE_APPOINTMENT,
        sqlite_where=LIVE_APPOINTMENT,
    )

    op.create_table(
        "chat_messages",
        sa.Column("message_id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "patient_id",
            sa.Integer(),
            sa.ForeignKey("patients.patient_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "doctor_id",
            sa.Integer(),
            sa.ForeignKey("doctors.doctor_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("sender", message_sender, nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_chat_messages_pair", "chat_messages", ["patient_id", "doctor_id"])


def downgrade() -> None:
    op.drop_table("chat_messages")
    op.drop_index("uq_appointments_live_time", table_name="appointments")
    op.drop_table("appointments")
    op.drop_table("patients")
    op.drop_table("slots")
    op.drop_table("schedules")
    op.drop_table("clinics")
    op.drop_table("doctors")

    bind = op.get_bind()
    for enum in (message_sender, appointment_status, patient_type, slot_status, clinic_status):
        enum.drop(bind, checkfirst=True)
