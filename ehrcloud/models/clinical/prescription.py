"""
Prescription model.

medications is a JSON list validated against
services/schemas/medications_v1.json before it is stored.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import DateTime, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column

from ehrcloud.database.base_class import Base
from ehrcloud.models.enums import PrescriptionStatus
from ehrcloud.models.mixins import AuditMixin, TenantScopedMixin, TimestampMixin, utcnow
from ehrcloud.models.types import JSONBCompatible, enum_column


class Prescription(TenantScopedMixin, TimestampMixin, AuditMixin, Base):
    __tablename__ = "prescriptions"

    id: Mapped[int] = mapped_column(primary_key=True)
    patient_id: Mapped[int] = mapped_column(
        ForeignKey("patients.id", ondelete="CASCADE"), nullable=False, index=True
    )
    doctor_id: Mapped[int] = mapped_column(
        ForeignKey("doctors.id", ondelete="CASCADE"), nullable=False, index=True
    )
    appointment_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("appointments.id", ondelete="SET NULL")
    )

    diagnosis: Mapped[str] = mapped_column(Text, nullable=False)
    medications: Mapped[List[Dict[str, Any]]] = mapped_column(JSONBCompatible, default=list, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text)
    status: Mapped[PrescriptionStatus] = mapped_column(
        enum_column(PrescriptionStatus, "prescription_status_enum"),
        default=PrescriptionStatus.ACTIVE,
        nullable=False,
    )
    issued_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
