"""
Authentication routes.

Endpoints (hospital resolved from the subdomain or tenant header):
- POST /auth/login    : email + password -> access and refresh tokens
- POST /auth/refresh  : new token pair from a refresh token
- POST /auth/logout   : acknowledge sign-out
- GET  /auth/me       : current user, hospital and permissions

Tokens are bound to the hospital they were issued for; using one on
another hospital's address is refused with 403.
"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ehrcloud.api.v1.auth.schemas import (
    CurrentUserResponse, LoginRequest, LoginResponse, RefreshTokenRequest, TokenResponse,
)
from ehrcloud.api.v1.auth.services import AuthService, issue_tokens
from ehrcloud.api.v1.envelope import ApiResponse, ok
from ehrcloud.api.v1.tenants.schemas import TenantSummary
from ehrcloud.api.v1.user.schemas import UserResponse
from ehrcloud.core.auth.tenant_resolver import resolve_tenant
from ehrcloud.core.auth.user_auth import CurrentContext
from ehrcloud.core.context import AppContext, get_app_context
from ehrcloud.database.dependencies import get_db
from ehrcloud.models.tenants.tenant import Tenant

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/login",
    response_model=ApiResponse[LoginResponse],
    summary="Sign in with email and password",
    responses={
        401: {"description": "Invalid credentials"},
        403: {"description": "Account or hospital disabled"},
        404: {"description": "Unknown hospital"},
    },
)
def login(
    credentials: LoginRequest,
    tenant: Tenant = Depends(resolve_tenant),
    db: Session = Depends(get_db),
    context: AppContext = Depends(get_app_context),
):
    user = AuthService(db, context.settings).authenticate(tenant, credentials.email, credentials.password)
    tokens = issue_tokens(user, context.settings, context.permissions)
    logger.info("User %s signed in to tenant %s", user.id, tenant.id)
    return ok(
        LoginResponse(**tokens.model_dump(), user=UserResponse.model_validate(user)),
        "Login successful",
    )


@router.post(
    "/refresh",
    response_model=ApiResponse[TokenResponse],
    summary="Renew the token pair",
)
def refresh_tokens(
    body: RefreshTokenRequest,
    tenant: Tenant = Depends(resolve_tenant),
    db: Session = Depends(get_db),
    context: AppContext = Depends(get_app_context),
):
    user = AuthService(db, context.settings).refresh(tenant, body.refresh_token)
    return ok(issue_tokens(user, context.settings, context.permissions), "Token refreshed")


@router.post(
    "/logout",
    response_model=ApiResponse,
    summary="Sign out",
    description="Tokens are stateless: the client discards them. Nothing is revoked server side.",
)
def logout(ctx: CurrentContext):
    logger.info("User %s signed out", ctx.user_id)
    return ok(message="Logged out successfully")


@router.get("/me", response_model=ApiResponse[CurrentUserResponse], summary="Current user")
def get_me(ctx: CurrentContext):
    return ok(CurrentUserResponse(
        user=UserResponse.model_validate(ctx.user),
        tenant=TenantSummary.model_validate(ctx.tenant),
        permissions=sorted(p.value for p in ctx.permissions),
    ))
