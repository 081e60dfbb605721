# ehrcloud/models/user/user.py
"""
User model - an account able to sign in.

Hospital accounts belong to exactly one tenant; the email is unique inside
that tenant only. The platform super admin is the one account without a
tenant.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ehrcloud.database.base_class import Base
from ehrcloud.models.enums import UserRole
from ehrcloud.models.mixins import TimestampMixin
from ehrcloud.models.types import enum_column

if TYPE_CHECKING:
    from ehrcloud.models.tenants.tenant import Tenant


class User(Base, TimestampMixin):
    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("tenant_id", "email", name="uq_users_tenant_email"),
    )

    # ========================
    # Primary key / tenant
    # ========================
    id: Mapped[int] = mapped_column(primary_key=True)
    tenant_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("tenants.id", ondelete="CASCADE"),
        index=True,
        comment="Owning tenant (NULL for the platform super admin)"
    )

    # ========================
    # Credentials
    # ========================
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    # ========================
    # Identity
    # ========================
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(30))

    role: Mapped[UserRole] = mapped_column(
        enum_column(UserRole, "user_role_enum"),
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    last_login_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    # ========================
    # Relationships
    # ========================
    tenant: Mapped[Optional["Tenant"]] = relationship("Tenant", back_populates="users")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def is_super_admin(self) -> bool:
        return self.role == UserRole.SUPER_ADMIN

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}', role={self.role})>"
