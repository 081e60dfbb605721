# ehrcloud/models/tenants/tenant.py
"""
Tenant model - one hospital subscribed to the platform.

Requests are routed to a tenant by its subdomain (h1.<BASE_DOMAIN>) or by
the tenant header. Every clinical record references exactly one tenant.
"""

from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ehrcloud.database.base_class import Base
from ehrcloud.models.enums import TenantStatus
from ehrcloud.models.mixins import TimestampMixin, as_utc, utcnow
from ehrcloud.models.types import JSONBCompatible, enum_column

if TYPE_CHECKING:
    from ehrcloud.models.tenants.subscription_plan import SubscriptionPlan
    from ehrcloud.models.user.user import User


class Tenant(Base, TimestampMixin):
    """
    A hospital account.

    Each tenant has:
    - a unique subdomain used for request routing
    - a lifecycle status (trial, active, suspended, cancelled)
    - usage limits copied from its subscription plan (NULL = unlimited)
    """

    __tablename__ = "tenants"

    # ========================
    # Primary key
    # ========================
    id: Mapped[int] = mapped_column(primary_key=True)

    # ========================
    # Identification
    # ========================
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Hospital display name"
    )
    subdomain: Mapped[str] = mapped_column(
        String(63),
        unique=True,
        index=True,
        nullable=False,
        comment="DNS label used for routing (lowercase)"
    )

    # ========================
    # Status
    # ========================
    status: Mapped[TenantStatus] = mapped_column(
        enum_column(TenantStatus, "tenant_status_enum"),
        default=TenantStatus.TRIAL,
        nullable=False,
    )
    trial_ends_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        comment="End of the trial period (trial tenants only)"
    )
    activated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    cancelled_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    # ========================
    # Contact
    # ========================
    contact_email: Mapped[str] = mapped_column(String(255), nullable=False)
    contact_phone: Mapped[Optional[str]] = mapped_column(String(30))
    address: Mapped[Optional[str]] = mapped_column(Text)

    # ========================
    # Subscription and limits
    # ========================
    plan_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("subscription_plans.id", ondelete="SET NULL"),
        comment="Current subscription plan"
    )
    max_patients: Mapped[Optional[int]] = mapped_column(
        Integer,
        comment="Patient limit (NULL = unlimited)"
    )
    max_users: Mapped[Optional[int]] = mapped_column(
        Integer,
        comment="User limit (NULL = unlimited)"
    )
    max_storage_mb: Mapped[Optional[int]] = mapped_column(Integer)

    # ========================
    # Metadata
    # ========================
    settings: Mapped[dict] = mapped_column(
        JSONBCompatible,
        default=dict,
        nullable=False,
        comment="Per-hospital preferences (JSON)"
    )

    # ========================
    # Relationships
    # ========================
    plan: Mapped[Optional["SubscriptionPlan"]] = relationship(
        "SubscriptionPlan",
        lazy="joined",
    )
    users: Mapped[List["User"]] = relationship(
        "User",
        back_populates="tenant",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    # ========================
    # Properties
    # ========================
    @property
    def is_active(self) -> bool:
        return self.status in (TenantStatus.ACTIVE, TenantStatus.TRIAL) and not self.trial_expired

    @property
    def is_suspended(self) -> bool:
        return self.status == TenantStatus.SUSPENDED

    @property
    def trial_expired(self) -> bool:
        if self.status != TenantStatus.TRIAL or self.trial_ends_at is None:
            return False
        return as_utc(self.trial_ends_at) < utcnow()

    @property
    def plan_code(self) -> Optional[str]:
        return self.plan.code if self.plan else None

    def __repr__(self) -> str:
        return f"<Tenant(id={self.id}, subdomain='{self.subdomain}', status={self.status})>"
