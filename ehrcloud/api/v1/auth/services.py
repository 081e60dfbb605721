"""
Authentication services: credential checks and token issuance.

Access token claims:
    sub          user id (string)
    role         UserRole value, checked against the stored role on every request
    tenant_id    hospital the token was issued for (None for the platform super admin)
    permissions  informative copy of the role's permissions

Authorization always re-derives permissions from the role table; the
permissions claim is never trusted on its own.
"""
import logging
from typing import Optional

from jose import ExpiredSignatureError, JWTError
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ehrcloud.core.auth.permissions import PermissionTable
from ehrcloud.core.config import Settings
from ehrcloud.core.exceptions import AuthenticationError, AuthorizationError
from ehrcloud.core.security.hashing import hash_password, needs_update, verify_password
from ehrcloud.core.security.jwt import (
    REFRESH_TOKEN_TYPE,
    create_access_token,
    create_refresh_token,
    verify_token,
)
from ehrcloud.models.enums import UserRole
from ehrcloud.models.mixins import utcnow
from ehrcloud.models.tenants.tenant import Tenant
from ehrcloud.models.user.user import User

from ehrcloud.api.v1.auth.schemas import TokenResponse

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


def issue_tokens(user: User, settings: Settings, permissions: Optional[PermissionTable] = None) -> TokenResponse:
    """Access + refresh pair for an authenticated user."""
    permissions = permissions or PermissionTable()
    granted = sorted(p.value for p in permissions.permissions_for(user.role))

    access_token = create_access_token(
        {
            "sub": str(user.id),
            "role": user.role.value,
            "tenant_id": user.tenant_id,
            "permissions": granted,
        },
        settings,
    )
    refresh_token = create_refresh_token({"sub": str(user.id), "tenant_id": user.tenant_id}, settings)
    return TokenResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        expires_in=settings.JWT_EXPIRE_MINUTES * 60,
    )


class AuthService:
    """Sign-in for hospital users and platform operators."""

    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings

    def _check_password(self, user: Optional[User], password: str, email: str) -> User:
        if user is None or not verify_password(password, user.password_hash):
            logger.warning("Failed login for %s", email)
            raise AuthenticationError(INVALID_CREDENTIALS)
        if not user.is_active:
            logger.warning("Login refused for deactivated user %s", user.id)
            raise AuthorizationError("User account is deactivated")

        if needs_update(user.password_hash):
            user.password_hash = hash_password(password)
        user.last_login_at = utcnow()
        self.db.flush()
        return user

    def authenticate(self, tenant: Tenant, email: str, password: str) -> User:
        """
        Email lookup is limited to the resolved hospital: the same address
        may exist in several hospitals.

        Raises:
            AuthenticationError: unknown email or wrong password
            AuthorizationError: deactivated account
        """
        user = self.db.scalar(
            select(User).where(User.tenant_id == tenant.id, func.lower(User.email) == email.lower())
        )
        return self._check_password(user, password, email)

    def authenticate_platform_admin(self, email: str, password: str) -> User:
        user = self.db.scalar(
            select(User).where(
                User.tenant_id.is_(None),
                User.role == UserRole.SUPER_ADMIN,
                func.lower(User.email) == email.lower(),
            )
        )
        return self._check_password(user, password, email)

    def refresh(self, tenant: Tenant, refresh_token: str) -> User:
        """
        Validate a refresh token for the resolved hospital and return its user.

        Raises:
            AuthenticationError: invalid or expired token, unknown user
            AuthorizationError: token of another hospital, deactivated user
        """
        try:
            payload = verify_token(refresh_token, self.settings, token_type=REFRESH_TOKEN_TYPE)
        except ExpiredSignatureError:
            raise AuthenticationError("Refresh token has expired")
        except JWTError as e:
            logger.info("Rejected refresh token: %s", e)
            raise AuthenticationError("Invalid refresh token")

        if payload.get("tenant_id") != tenant.id:
            logger.warning(
                "Tenant mismatch on refresh: token for tenant %s used on tenant %s",
                payload.get("tenant_id"), tenant.id,
            )
            raise AuthorizationError("Token is not valid for this hospital")

        try:
            user = self.db.get(User, int(payload["sub"]))
        except (TypeError, ValueError):
            raise AuthenticationError("Invalid refresh token")
        if user is None:
            raise AuthenticationError("User not found")
        if user.tenant_id != tenant.id:
            raise AuthorizationError("Token is not valid for this hospital")
        if not user.is_active:
            raise AuthorizationError("User account is deactivated")
        return user
