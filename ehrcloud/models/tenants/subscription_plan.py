# ehrcloud/models/tenants/subscription_plan.py
"""
SubscriptionPlan model - platform-level catalogue of offers.

Plans only carry limits and a feature list; payment processing is out of
scope. Assigning a plan to a tenant copies its limits onto the tenant.
"""

from typing import List, Optional

from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ehrcloud.database.base_class import Base
from ehrcloud.models.enums import BillingCycle
from ehrcloud.models.mixins import TimestampMixin
from ehrcloud.models.types import JSONBCompatible, enum_column


class SubscriptionPlan(Base, TimestampMixin):
    __tablename__ = "subscription_plans"

    id: Mapped[int] = mapped_column(primary_key=True)
    code: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        nullable=False,
        comment="Stable plan identifier (basic, professional, enterprise)"
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)

    price_cents: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    billing_cycle: Mapped[BillingCycle] = mapped_column(
        enum_column(BillingCycle, "billing_cycle_enum"),
        default=BillingCycle.MONTHLY,
        nullable=False,
    )

    # NULL = unlimited
    max_patients: Mapped[Optional[int]] = mapped_column(Integer)
    max_users: Mapped[Optional[int]] = mapped_column(Integer)
    max_storage_mb: Mapped[Optional[int]] = mapped_column(Integer)

    features: Mapped[List[str]] = mapped_column(JSONBCompatible, default=list, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<SubscriptionPlan(code='{self.code}')>"


# Catalogue seeded by database.init_db
INITIAL_PLANS = [
    {
        "code": "basic",
        "name": "Basic",
        "description": "Small clinics",
        "price_cents": 4900,
        "max_patients": 500,
        "max_users": 10,
        "max_storage_mb": 1024,
        "features": ["patients", "appointments"],
    },
    {
        "code": "professional",
        "name": "Professional",
        "description": "Hospitals with several departments",
        "price_cents": 19900,
        "max_patients": 5000,
        "max_users": 100,
        "max_storage_mb": 10240,
        "features": ["patients", "appointments", "prescriptions", "reports", "reminders"],
    },
    {
        "code": "enterprise",
        "name": "Enterprise",
        "description": "Hospital networks",
        "price_cents": 79900,
        "max_patients": None,
        "max_users": None,
        "max_storage_mb": None,
        "features": ["patients", "appointments", "prescriptions", "reports", "reminders", "priority_support"],
    },
]
