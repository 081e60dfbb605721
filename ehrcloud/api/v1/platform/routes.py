"""
Platform administration routes (super admin, no tenant).

Endpoints:
- POST  /platform/auth/login            : super admin sign-in
- GET   /platform/tenants               : all hospitals (status, search)
- GET   /platform/tenants/{id}          : one hospital
- PATCH /platform/tenants/{id}/status   : lifecycle change
- PATCH /platform/tenants/{id}/plan     : assign a plan (limits copied)
- GET   /platform/plans                 : plan catalogue
- POST  /platform/plans                 : create a plan
- PATCH /platform/plans/{code}          : edit a plan
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ehrcloud.api.v1.auth.schemas import LoginRequest, LoginResponse
from ehrcloud.api.v1.auth.services import AuthService, issue_tokens
from ehrcloud.api.v1.dependencies import Pagination
from ehrcloud.api.v1.envelope import ApiResponse, ok, paginated
from ehrcloud.api.v1.platform.schemas import (
    PlanCreate, PlanResponse, PlanUpdate, TenantFilters, TenantPlanUpdate, TenantStatusUpdate,
)
from ehrcloud.api.v1.platform.services import PlatformService
from ehrcloud.api.v1.tenants.schemas import TenantResponse
from ehrcloud.api.v1.user.schemas import UserResponse
from ehrcloud.core.auth.permissions import Permission
from ehrcloud.core.auth.user_auth import require_platform_permission
from ehrcloud.core.context import AppContext, get_app_context
from ehrcloud.database.dependencies import get_db
from ehrcloud.models.enums import TenantStatus
from ehrcloud.models.user.user import User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/platform", tags=["Platform"])


@router.post("/auth/login", response_model=ApiResponse[LoginResponse], summary="Super admin sign-in")
def platform_login(
    credentials: LoginRequest,
    db: Session = Depends(get_db),
    context: AppContext = Depends(get_app_context),
):
    admin = AuthService(db, context.settings).authenticate_platform_admin(
        credentials.email, credentials.password
    )
    tokens = issue_tokens(admin, context.settings, context.permissions)
    logger.info("Platform admin %s signed in", admin.id)
    return ok(LoginResponse(**tokens.model_dump(), user=UserResponse.model_validate(admin)), "Login successful")


# =============================================================================
# TENANTS
# =============================================================================

@router.get("/tenants", response_model=ApiResponse[List[TenantResponse]])
def list_tenants(
    pagination: Pagination,
    status_filter: Optional[TenantStatus] = Query(None, alias="status"),
    search: Optional[str] = Query(None, description="Name or subdomain"),
    admin: User = Depends(require_platform_permission(Permission.PLATFORM_TENANTS)),
    db: Session = Depends(get_db),
):
    items, total = PlatformService(db).list_tenants(pagination, TenantFilters(status=status_filter, search=search))
    return paginated([TenantResponse.model_validate(t) for t in items], total, pagination)


@router.get("/tenants/{tenant_id}", response_model=ApiResponse[TenantResponse])
def get_tenant(
    tenant_id: int,
    admin: User = Depends(require_platform_permission(Permission.PLATFORM_TENANTS)),
    db: Session = Depends(get_db),
):
    return ok(TenantResponse.model_validate(PlatformService(db).get_tenant(tenant_id)))


@router.patch("/tenants/{tenant_id}/status", response_model=ApiResponse[TenantResponse])
def change_tenant_status(
    tenant_id: int,
    data: TenantStatusUpdate,
    admin: User = Depends(require_platform_permission(Permission.PLATFORM_TENANTS)),
    db: Session = Depends(get_db),
):
    tenant = PlatformService(db).change_status(tenant_id, data.status, data.reason)
    return ok(TenantResponse.model_validate(tenant), "Hospital status updated")


@router.patch("/tenants/{tenant_id}/plan", response_model=ApiResponse[TenantResponse])
def change_tenant_plan(
    tenant_id: int,
    data: TenantPlanUpdate,
    admin: User = Depends(require_platform_permission(Permission.PLATFORM_TENANTS)),
    db: Session = Depends(get_db),
):
    tenant = PlatformService(db).change_plan(tenant_id, data.plan_code)
    return ok(TenantResponse.model_validate(tenant), "Hospital plan updated")


# =============================================================================
# PLANS
# =============================================================================

@router.get("/plans", response_model=ApiResponse[List[PlanResponse]])
def list_plans(
    admin: User = Depends(require_platform_permission(Permission.PLATFORM_PLANS)),
    db: Session = Depends(get_db),
):
    return ok([PlanResponse.model_validate(p) for p in PlatformService(db).list_plans()])


@router.post("/plans", response_model=ApiResponse[PlanResponse], status_code=status.HTTP_201_CREATED)
def create_plan(
    data: PlanCreate,
    admin: User = Depends(require_platform_permission(Permission.PLATFORM_PLANS)),
    db: Session = Depends(get_db),
):
    return ok(PlanResponse.model_validate(PlatformService(db).create_plan(data)), "Plan created successfully")


@router.patch("/plans/{code}", response_model=ApiResponse[PlanResponse])
def update_plan(
    code: str,
    data: PlanUpdate,
    admin: User = Depends(require_platform_permission(Permission.PLATFORM_PLANS)),
    db: Session = Depends(get_db),
):
    return ok(PlanResponse.model_validate(PlatformService(db).update_plan(code, data)), "Plan updated successfully")
