"""
Appointment model.

Status changes go through services.validation.rules.validate_appointment_transition;
the model itself does not enforce the lifecycle.
"""

from datetime import date
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Date, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ehrcloud.database.base_class import Base
from ehrcloud.models.enums import AppointmentStatus, AppointmentType
from ehrcloud.models.mixins import AuditMixin, TenantScopedMixin, TimestampMixin
from ehrcloud.models.types import enum_column

if TYPE_CHECKING:
    from ehrcloud.models.care_team.doctor import Doctor
    from ehrcloud.models.patient.patient import Patient


class Appointment(TenantScopedMixin, TimestampMixin, AuditMixin, Base):
    __tablename__ = "appointments"
    __table_args__ = (
        Index("ix_appointments_tenant_date", "tenant_id", "appointment_date", "appointment_time"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    patient_id: Mapped[int] = mapped_column(
        ForeignKey("patients.id", ondelete="CASCADE"), nullable=False, index=True
    )
    doctor_id: Mapped[int] = mapped_column(
        ForeignKey("doctors.id", ondelete="CASCADE"), nullable=False, index=True
    )

    appointment_date: Mapped[date] = mapped_column(Date, nullable=False)
    appointment_time: Mapped[str] = mapped_column(String(5), nullable=False, comment="HH:MM")
    duration_minutes: Mapped[int] = mapped_column(Integer, default=30, nullable=False)

    department: Mapped[Optional[str]] = mapped_column(String(100))
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[AppointmentType] = mapped_column(
        enum_column(AppointmentType, "appointment_type_enum"),
        default=AppointmentType.IN_PERSON,
        nullable=False,
    )
    status: Mapped[AppointmentStatus] = mapped_column(
        enum_column(AppointmentStatus, "appointment_status_enum"),
        default=AppointmentStatus.SCHEDULED,
        nullable=False,
    )
    location: Mapped[Optional[str]] = mapped_column(String(200))
    notes: Mapped[Optional[str]] = mapped_column(Text)

    patient: Mapped["Patient"] = relationship("Patient", back_populates="appointments", lazy="joined")
    doctor: Mapped["Doctor"] = relationship("Doctor", lazy="joined")

    def __repr__(self) -> str:
        return f"<Appointment(id={self.id}, status={self.status})>"
