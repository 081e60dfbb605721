"""
Staff model - employee profile of non-physician hospital personnel.
"""

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Date, ForeignKey, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ehrcloud.database.base_class import Base
from ehrcloud.models.enums import Gender, StaffDepartment, StaffShift, StaffStatus
from ehrcloud.models.mixins import TenantScopedMixin, TimestampMixin
from ehrcloud.models.types import enum_column

if TYPE_CHECKING:
    from ehrcloud.models.user.user import User


class Staff(TenantScopedMixin, TimestampMixin, Base):
    __tablename__ = "staff"
    __table_args__ = (
        UniqueConstraint("tenant_id", "employee_id", name="uq_staff_tenant_employee"),
        UniqueConstraint("user_id", name="uq_staff_user"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    # ========================
    # Employment
    # ========================
    employee_id: Mapped[str] = mapped_column(String(50), nullable=False)
    department: Mapped[StaffDepartment] = mapped_column(
        enum_column(StaffDepartment, "staff_department_enum"),
        nullable=False,
    )
    position: Mapped[str] = mapped_column(String(100), nullable=False)
    joining_date: Mapped[date] = mapped_column(Date, nullable=False)
    salary: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2))
    shift: Mapped[StaffShift] = mapped_column(
        enum_column(StaffShift, "staff_shift_enum"),
        default=StaffShift.DAY,
        nullable=False,
    )
    status: Mapped[StaffStatus] = mapped_column(
        enum_column(StaffStatus, "staff_status_enum"),
        default=StaffStatus.ACTIVE,
        nullable=False,
    )

    # ========================
    # Personal
    # ========================
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(30), nullable=False)
    gender: Mapped[Optional[Gender]] = mapped_column(enum_column(Gender, "gender_enum"))
    date_of_birth: Mapped[Optional[date]] = mapped_column(Date)
    notes: Mapped[Optional[str]] = mapped_column(Text)

    user: Mapped["User"] = relationship("User", lazy="joined")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self) -> str:
        return f"<Staff(id={self.id}, employee_id='{self.employee_id}')>"
