"""
Business services for the Tenants module.

Registration writes the tenant and its owner account in the request
session; the request transaction commits both or neither.
"""
import logging
import math
from datetime import timedelta
from typing import Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ehrcloud.core.auth.tenant_resolver import RESERVED_SUBDOMAINS, find_tenant_by_subdomain
from ehrcloud.core.config import Settings
from ehrcloud.core.exceptions import ConflictError, NotFoundError
from ehrcloud.database.session import SKIP_TENANT_FILTER
from ehrcloud.models.care_team.doctor import Doctor
from ehrcloud.models.care_team.staff import Staff
from ehrcloud.models.enums import TenantStatus, UserRole
from ehrcloud.models.mixins import as_utc, utcnow
from ehrcloud.models.patient.patient import Patient
from ehrcloud.models.scheduling.appointment import Appointment
from ehrcloud.models.tenants.subscription_plan import SubscriptionPlan
from ehrcloud.models.tenants.tenant import Tenant
from ehrcloud.models.user.user import User
from ehrcloud.services.validation import validate_subdomain

from ehrcloud.api.v1.tenants.schemas import TenantRegister, TenantUpdate, TenantUsage, UsageCounter
from ehrcloud.api.v1.user.schemas import UserCreate
from ehrcloud.api.v1.user.services import UserService

logger = logging.getLogger(__name__)

# Plan assigned at sign-up when none is requested (if it exists)
DEFAULT_PLAN_CODE = "basic"


def find_plan(db: Session, code: str) -> Optional[SubscriptionPlan]:
    return db.scalar(select(SubscriptionPlan).where(SubscriptionPlan.code == code))


def apply_plan(tenant: Tenant, plan: SubscriptionPlan) -> None:
    """Attach a plan and copy its limits onto the tenant."""
    tenant.plan = plan
    tenant.plan_id = plan.id
    tenant.max_patients = plan.max_patients
    tenant.max_users = plan.max_users
    tenant.max_storage_mb = plan.max_storage_mb


class TenantService:
    def __init__(self, db: Session):
        self.db = db

    # =========================================================================
    # REGISTRATION
    # =========================================================================

    def _plan_for_registration(self, plan_code: Optional[str]) -> Optional[SubscriptionPlan]:
        if plan_code is None:
            return find_plan(self.db, DEFAULT_PLAN_CODE)
        plan = find_plan(self.db, plan_code)
        if plan is None or not plan.is_active:
            raise NotFoundError("Subscription plan not found")
        return plan

    def register(self, data: TenantRegister, settings: Settings) -> Tuple[Tenant, User]:
        """
        Create a trial hospital and its owner.

        Raises:
            ValidationFailedError: malformed or reserved subdomain
            ConflictError: subdomain taken, or owner email rejected
            NotFoundError: unknown plan code
        """
        validate_subdomain(data.subdomain, RESERVED_SUBDOMAINS).raise_for_errors()
        if find_tenant_by_subdomain(self.db, data.subdomain) is not None:
            raise ConflictError("Subdomain is already taken")

        plan = self._plan_for_registration(data.plan_code)

        tenant = Tenant(
            name=data.name.strip(),
            subdomain=data.subdomain,
            status=TenantStatus.TRIAL,
            trial_ends_at=utcnow() + timedelta(days=settings.TRIAL_PERIOD_DAYS),
            contact_email=data.contact_email,
            contact_phone=data.contact_phone,
            address=data.address,
            settings={},
        )
        if plan is not None:
            apply_plan(tenant, plan)
        self.db.add(tenant)
        self.db.flush()

        owner = UserService(self.db, tenant.id).create_user(UserCreate(
            email=data.owner.email,
            password=data.owner.password,
            first_name=data.owner.first_name,
            last_name=data.owner.last_name,
            phone=data.owner.phone,
            role=UserRole.HOSPITAL_OWNER,
        ))

        logger.info("Registered tenant %s (%s) with owner %s", tenant.id, tenant.subdomain, owner.id)
        return tenant, owner

    # =========================================================================
    # CURRENT TENANT
    # =========================================================================

    def update(self, tenant: Tenant, data: TenantUpdate) -> Tenant:
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(tenant, field, value)
        self.db.flush()
        self.db.refresh(tenant)
        return tenant

    def _count(self, model, tenant_id: int) -> int:
        query = select(func.count()).select_from(model).where(model.tenant_id == tenant_id)
        return self.db.execute(query, execution_options={SKIP_TENANT_FILTER: True}).scalar() or 0

    def usage(self, tenant: Tenant) -> TenantUsage:
        trial_days_left = None
        if tenant.status == TenantStatus.TRIAL and tenant.trial_ends_at is not None:
            remaining = (as_utc(tenant.trial_ends_at) - utcnow()).total_seconds()
            trial_days_left = max(0, math.ceil(remaining / 86400))

        return TenantUsage(
            plan_code=tenant.plan_code,
            status=tenant.status,
            trial_days_left=trial_days_left,
            patients=UsageCounter(used=self._count(Patient, tenant.id), limit=tenant.max_patients),
            users=UsageCounter(used=self._count(User, tenant.id), limit=tenant.max_users),
            doctors=self._count(Doctor, tenant.id),
            staff=self._count(Staff, tenant.id),
            appointments=self._count(Appointment, tenant.id),
        )
