"""
Tenant routes.

Endpoints:
- POST  /tenants/register       : public sign-up, creates a trial hospital and its owner
- GET   /tenants/current        : the resolved hospital
- PATCH /tenants/current        : edit name, contact and settings (owner)
- GET   /tenants/current/usage  : usage against the plan limits
"""
from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ehrcloud.api.v1.auth.schemas import TokenResponse
from ehrcloud.api.v1.auth.services import issue_tokens
from ehrcloud.api.v1.envelope import ApiResponse, ok
from ehrcloud.api.v1.tenants.schemas import TenantRegister, TenantResponse, TenantUpdate, TenantUsage
from ehrcloud.api.v1.tenants.services import TenantService
from ehrcloud.api.v1.user.schemas import UserResponse
from ehrcloud.core.auth.permissions import Permission
from ehrcloud.core.auth.user_auth import TenantContext, require_permission
from ehrcloud.core.context import AppContext, get_app_context
from ehrcloud.database.dependencies import get_db

router = APIRouter(prefix="/tenants", tags=["Tenants"])


class RegistrationResponse(BaseModel):
    tenant: TenantResponse
    owner: UserResponse
    tokens: TokenResponse


@router.post(
    "/register",
    response_model=ApiResponse[RegistrationResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Register a hospital",
    responses={409: {"description": "Subdomain already taken"}},
)
def register_tenant(
    data: TenantRegister,
    db: Session = Depends(get_db),
    context: AppContext = Depends(get_app_context),
):
    tenant, owner = TenantService(db).register(data, context.settings)
    return ok(
        RegistrationResponse(
            tenant=TenantResponse.model_validate(tenant),
            owner=UserResponse.model_validate(owner),
            tokens=issue_tokens(owner, context.settings, context.permissions),
        ),
        "Hospital registered successfully",
    )


@router.get("/current", response_model=ApiResponse[TenantResponse])
def get_current_tenant(ctx: TenantContext = Depends(require_permission(Permission.TENANT_READ))):
    return ok(TenantResponse.model_validate(ctx.tenant))


@router.patch("/current", response_model=ApiResponse[TenantResponse])
def update_current_tenant(
    data: TenantUpdate,
    ctx: TenantContext = Depends(require_permission(Permission.TENANT_MANAGE)),
    db: Session = Depends(get_db),
):
    tenant = TenantService(db).update(ctx.tenant, data)
    return ok(TenantResponse.model_validate(tenant), "Hospital updated successfully")


@router.get("/current/usage", response_model=ApiResponse[TenantUsage])
def get_current_usage(
    ctx: TenantContext = Depends(require_permission(Permission.TENANT_READ)),
    db: Session = Depends(get_db),
):
    return ok(TenantService(db).usage(ctx.tenant))
