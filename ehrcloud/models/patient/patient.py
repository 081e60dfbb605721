"""
Patient model - the clinical record owned by one hospital.

The table lives in a shared schema; isolation relies on tenant_id (see
TenantScopedMixin) and on the service layer never querying without it.
"""

from datetime import date, datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Date, DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ehrcloud.database.base_class import Base
from ehrcloud.models.enums import Gender, PatientStatus
from ehrcloud.models.mixins import AuditMixin, TenantScopedMixin, TimestampMixin
from ehrcloud.models.types import JSONBCompatible, enum_column

if TYPE_CHECKING:
    from ehrcloud.models.scheduling.appointment import Appointment


class Patient(TenantScopedMixin, TimestampMixin, AuditMixin, Base):
    __tablename__ = "patients"
    __table_args__ = (
        Index("ix_patients_tenant_name", "tenant_id", "last_name", "first_name"),
        {"comment": "Patient records, one row per patient per hospital"},
    )

    # === Columns ===

    id: Mapped[int] = mapped_column(primary_key=True)

    # --- Identity ---
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    date_of_birth: Mapped[date] = mapped_column(Date, nullable=False)
    gender: Mapped[Gender] = mapped_column(enum_column(Gender, "gender_enum"), nullable=False)

    # --- Contact ---
    email: Mapped[Optional[str]] = mapped_column(String(255))
    phone: Mapped[str] = mapped_column(String(30), nullable=False)
    address: Mapped[Optional[str]] = mapped_column(Text)
    emergency_contact_name: Mapped[Optional[str]] = mapped_column(String(200))
    emergency_contact_phone: Mapped[Optional[str]] = mapped_column(String(30))

    # --- Medical summary ---
    blood_group: Mapped[Optional[str]] = mapped_column(String(5))
    allergies: Mapped[List[str]] = mapped_column(JSONBCompatible, default=list, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text)

    # --- Status ---
    status: Mapped[PatientStatus] = mapped_column(
        enum_column(PatientStatus, "patient_status_enum"),
        default=PatientStatus.ACTIVE,
        nullable=False,
    )
    last_visit_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), index=True)

    # === Relationships ===

    appointments: Mapped[List["Appointment"]] = relationship(
        "Appointment",
        back_populates="patient",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self) -> str:
        return f"<Patient(id={self.id}, tenant_id={self.tenant_id})>"
