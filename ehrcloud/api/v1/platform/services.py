"""
Platform administration services.

These run without a resolved tenant: the super admin sees every hospital.
"""
import logging
from typing import List, Optional, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from ehrcloud.api.v1.dependencies import PaginationParams
from ehrcloud.core.exceptions import ConflictError, NotFoundError
from ehrcloud.models.enums import TenantStatus
from ehrcloud.models.mixins import utcnow
from ehrcloud.models.tenants.subscription_plan import SubscriptionPlan
from ehrcloud.models.tenants.tenant import Tenant
from ehrcloud.services.validation import validate_tenant_transition

from ehrcloud.api.v1.platform.schemas import PlanCreate, PlanUpdate, TenantFilters
from ehrcloud.api.v1.tenants.services import apply_plan, find_plan

logger = logging.getLogger(__name__)


class PlatformService:
    def __init__(self, db: Session):
        self.db = db

    # =========================================================================
    # TENANTS
    # =========================================================================

    def list_tenants(
            self,
            pagination: PaginationParams,
            filters: Optional[TenantFilters] = None,
    ) -> Tuple[List[Tenant], int]:
        query = select(Tenant)
        if filters:
            if filters.status:
                query = query.where(Tenant.status == filters.status)
            if filters.search:
                term = f"%{filters.search.strip()}%"
                query = query.where(or_(Tenant.name.ilike(term), Tenant.subdomain.ilike(term)))

        total = self.db.execute(select(func.count()).select_from(query.subquery())).scalar() or 0
        column = Tenant.created_at.desc() if pagination.sort_order == "desc" else Tenant.created_at.asc()
        query = query.order_by(column, Tenant.id).offset(pagination.offset).limit(pagination.limit)
        return list(self.db.execute(query).scalars().unique().all()), total

    def get_tenant(self, tenant_id: int) -> Tenant:
        tenant = self.db.get(Tenant, tenant_id)
        if tenant is None:
            raise NotFoundError("Hospital not found")
        return tenant

    def change_status(self, tenant_id: int, target: TenantStatus, reason: Optional[str] = None) -> Tenant:
        """
        Raises:
            NotFoundError: unknown tenant
            ValidationFailedError: transition not allowed (cancelled is terminal)
        """
        tenant = self.get_tenant(tenant_id)
        validate_tenant_transition(tenant.status, target).raise_for_errors()
        if tenant.status == target:
            return tenant

        previous = tenant.status
        tenant.status = target
        if target == TenantStatus.ACTIVE:
            tenant.activated_at = utcnow()
        elif target == TenantStatus.CANCELLED:
            tenant.cancelled_at = utcnow()
        self.db.flush()

        logger.warning(
            "Tenant %s status %s -> %s%s",
            tenant.id, previous.value, target.value, f" ({reason})" if reason else "",
        )
        return tenant

    def change_plan(self, tenant_id: int, plan_code: str) -> Tenant:
        tenant = self.get_tenant(tenant_id)
        plan = self.get_plan(plan_code)
        apply_plan(tenant, plan)
        self.db.flush()
        logger.info("Tenant %s moved to plan %s", tenant.id, plan.code)
        return tenant

    # =========================================================================
    # PLANS
    # =========================================================================

    def list_plans(self, include_inactive: bool = True) -> List[SubscriptionPlan]:
        query = select(SubscriptionPlan).order_by(SubscriptionPlan.price_cents, SubscriptionPlan.id)
        if not include_inactive:
            query = query.where(SubscriptionPlan.is_active.is_(True))
        return list(self.db.execute(query).scalars().all())

    def get_plan(self, code: str) -> SubscriptionPlan:
        plan = find_plan(self.db, code)
        if plan is None:
            raise NotFoundError("Subscription plan not found")
        return plan

    def create_plan(self, data: PlanCreate) -> SubscriptionPlan:
        if find_plan(self.db, data.code) is not None:
            raise ConflictError("A plan with this code already exists")
        plan = SubscriptionPlan(**data.model_dump())
        self.db.add(plan)
        self.db.flush()
        self.db.refresh(plan)
        return plan

    def update_plan(self, code: str, data: PlanUpdate) -> SubscriptionPlan:
        """Tenants keep the limits copied when the plan was assigned."""
        plan = self.get_plan(code)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(plan, field, value)
        self.db.flush()
        self.db.refresh(plan)
        return plan
