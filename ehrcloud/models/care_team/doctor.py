"""
Doctor model - the clinical profile attached to a user account.

One profile per user. The profile does not change the account's role:
granting the doctor role is done through the user endpoints.
"""

from decimal import Decimal
from typing import TYPE_CHECKING, Dict, List, Optional

from sqlalchemy import ForeignKey, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ehrcloud.database.base_class import Base
from ehrcloud.models.enums import DoctorStatus
from ehrcloud.models.mixins import TenantScopedMixin, TimestampMixin
from ehrcloud.models.types import JSONBCompatible, enum_column

if TYPE_CHECKING:
    from ehrcloud.models.user.user import User


class Doctor(TenantScopedMixin, TimestampMixin, Base):
    __tablename__ = "doctors"
    __table_args__ = (
        UniqueConstraint("user_id", name="uq_doctors_user"),
        UniqueConstraint("tenant_id", "license_number", name="uq_doctors_tenant_license"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    license_number: Mapped[str] = mapped_column(String(50), nullable=False)
    specialization: Mapped[str] = mapped_column(String(100), nullable=False)
    department: Mapped[str] = mapped_column(String(100), nullable=False)
    experience_years: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    qualifications: Mapped[List[str]] = mapped_column(JSONBCompatible, default=list, nullable=False)
    consultation_fee: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"), nullable=False)

    # {"monday": {"start": "09:00", "end": "17:00"}, ...}
    available_hours: Mapped[Dict[str, Dict[str, str]]] = mapped_column(
        JSONBCompatible, default=dict, nullable=False
    )

    status: Mapped[DoctorStatus] = mapped_column(
        enum_column(DoctorStatus, "doctor_status_enum"),
        default=DoctorStatus.AVAILABLE,
        nullable=False,
    )
    rating: Mapped[Decimal] = mapped_column(Numeric(2, 1), default=Decimal("0"), nullable=False)

    user: Mapped["User"] = relationship("User", lazy="joined")

    @property
    def full_name(self) -> str:
        return self.user.full_name if self.user else ""

    def __repr__(self) -> str:
        return f"<Doctor(id={self.id}, user_id={self.user_id})>"
