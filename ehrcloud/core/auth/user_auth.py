"""
Authentication and authorization dependencies.

Flow for hospital routes:
    1. resolve_tenant() finds the hospital (404 / 403 before any credential check)
    2. get_current_user() verifies the bearer token, checks that it was issued
       for that hospital and loads the user
    3. The request session is scoped to the tenant
    4. require_permission() / require_roles() gate the handler

Usage:
    @router.post("/patients")
    def create_patient(
        ctx: TenantContext = Depends(require_permission(Permission.PATIENTS_WRITE)),
        db: Session = Depends(get_db),
    ):
        ...

Platform routes (super admin, no tenant) use get_platform_admin instead.
"""

import logging
from dataclasses import dataclass
from typing import Annotated, Any, Dict, FrozenSet, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError
from sqlalchemy.orm import Session

from ehrcloud.core.auth.permissions import Permission
from ehrcloud.core.auth.tenant_resolver import resolve_tenant
from ehrcloud.core.config import Settings
from ehrcloud.core.context import AppContext, get_app_context
from ehrcloud.core.exceptions import AuthenticationError, AuthorizationError
from ehrcloud.core.security.jwt import ACCESS_TOKEN_TYPE, verify_token
from ehrcloud.core.tenant_context import set_tenant_context
from ehrcloud.database.dependencies import get_db
from ehrcloud.database.session import scope_session_to_tenant
from ehrcloud.models.enums import UserRole
from ehrcloud.models.tenants.tenant import Tenant
from ehrcloud.models.user.user import User

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class TenantContext:
    """Identity attached to an authenticated hospital request."""

    user: User
    tenant: Tenant
    role: UserRole
    permissions: FrozenSet[Permission]

    @property
    def user_id(self) -> int:
        return self.user.id

    @property
    def tenant_id(self) -> int:
        return self.tenant.id

    def can(self, permission: Permission) -> bool:
        return permission in self.permissions


# =============================================================================
# TOKEN DECODING
# =============================================================================

def decode_access_token(
    credentials: Optional[HTTPAuthorizationCredentials],
    settings: Settings,
) -> Dict[str, Any]:
    """
    Verify the bearer credential.

    Raises:
        AuthenticationError 401: missing, malformed, badly signed or expired
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("No token, authorization denied")

    try:
        return verify_token(credentials.credentials, settings, token_type=ACCESS_TOKEN_TYPE)
    except ExpiredSignatureError:
        raise AuthenticationError("Token has expired")
    except JWTError as e:
        logger.info("Rejected access token: %s", e)
        raise AuthenticationError("Token is not valid")


def claim_as_int(payload: Dict[str, Any], name: str) -> Optional[int]:
    value = payload.get(name)
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise AuthenticationError("Token is not valid")


def load_token_user(db: Session, payload: Dict[str, Any]) -> User:
    """Load the token subject and check the role claim still matches the account."""
    user_id = claim_as_int(payload, "sub")
    user = db.get(User, user_id) if user_id is not None else None
    if user is None:
        raise AuthenticationError("User not found")
    if payload.get("role") != user.role.value:
        # Role changed since the token was issued
        raise AuthenticationError("Token is outdated, please sign in again")
    return user


# =============================================================================
# HOSPITAL USERS
# =============================================================================

async def get_current_user(
    request: Request,
    tenant: Tenant = Depends(resolve_tenant),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
    context: AppContext = Depends(get_app_context),
) -> TenantContext:
    """
    Authenticate the caller against the resolved tenant.

    Raises:
        AuthenticationError 401: no / invalid / expired token, unknown user
        AuthorizationError 403: token issued for another hospital, inactive user
    """
    payload = decode_access_token(credentials, context.settings)

    token_tenant_id = claim_as_int(payload, "tenant_id")
    if token_tenant_id != tenant.id:
        logger.warning(
            "Tenant mismatch: token for tenant %s used on tenant %s", token_tenant_id, tenant.id
        )
        raise AuthorizationError("Token is not valid for this hospital")

    user = load_token_user(db, payload)
    if user.tenant_id != tenant.id:
        raise AuthorizationError("Token is not valid for this hospital")
    if not user.is_active:
        raise AuthorizationError("User account is deactivated")

    scope_session_to_tenant(db, tenant.id)
    set_tenant_context(tenant.id, user.id)
    request.state.user_id = user.id
    request.state.role = user.role.value

    return TenantContext(
        user=user,
        tenant=tenant,
        role=user.role,
        permissions=context.permissions.permissions_for(user.role),
    )


CurrentContext = Annotated[TenantContext, Depends(get_current_user)]


# =============================================================================
# AUTHORIZATION GATES
# =============================================================================

def require_permission(*permissions: Permission):
    """
    Dependency factory: the caller's role must grant every listed permission.

    Runs before the handler body, so a refused request has no side effect.

    Usage:
        ctx: TenantContext = Depends(require_permission(Permission.PATIENTS_DELETE))
    """
    async def permission_checker(
        ctx: TenantContext = Depends(get_current_user),
        context: AppContext = Depends(get_app_context),
    ) -> TenantContext:
        for permission in permissions:
            if not context.permissions.allows(ctx.role, permission):
                logger.warning(
                    "Permission %s denied to user %s (%s)", permission.value, ctx.user_id, ctx.role.value
                )
                raise AuthorizationError(
                    f"User role {ctx.role.value} is not authorized to access this route"
                )
        return ctx

    return permission_checker


def require_roles(*roles: UserRole):
    """
    Dependency factory: the caller must hold one of the listed roles.

    Usage:
        ctx: TenantContext = Depends(require_roles(UserRole.HOSPITAL_OWNER))
    """
    allowed = frozenset(roles)

    async def role_checker(ctx: TenantContext = Depends(get_current_user)) -> TenantContext:
        if ctx.role not in allowed:
            logger.warning("Role %s refused for user %s", ctx.role.value, ctx.user_id)
            raise AuthorizationError(
                f"User role {ctx.role.value} is not authorized to access this route"
            )
        return ctx

    return role_checker


# =============================================================================
# PLATFORM SUPER ADMIN
# =============================================================================

async def get_platform_admin(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
    context: AppContext = Depends(get_app_context),
) -> User:
    """
    Authenticate a platform operator. No tenant is resolved.

    Raises:
        AuthenticationError 401: no / invalid / expired token
        AuthorizationError 403: not a super admin, or deactivated
    """
    payload = decode_access_token(credentials, context.settings)
    if payload.get("role") != UserRole.SUPER_ADMIN.value or payload.get("tenant_id") is not None:
        raise AuthorizationError("Platform administrator access required")

    user = load_token_user(db, payload)
    if not user.is_super_admin or user.tenant_id is not None:
        raise AuthorizationError("Platform administrator access required")
    if not user.is_active:
        raise AuthorizationError("User account is deactivated")

    set_tenant_context(None, user.id)
    request.state.user_id = user.id
    request.state.role = user.role.value
    return user


def require_platform_permission(permission: Permission):
    async def platform_checker(
        admin: User = Depends(get_platform_admin),
        context: AppContext = Depends(get_app_context),
    ) -> User:
        if not context.permissions.allows(admin.role, permission):
            raise AuthorizationError(f"Permission required: {permission.value}")
        return admin

    return platform_checker
