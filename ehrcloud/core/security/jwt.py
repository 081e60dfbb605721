"""JWT access and refresh tokens (HS256, python-jose)."""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import ExpiredSignatureError, JWTError, jwt

from ehrcloud.core.config import Settings

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


def _secret_for(settings: Settings, token_type: str) -> str:
    if token_type == REFRESH_TOKEN_TYPE:
        return settings.JWT_REFRESH_SECRET
    return settings.JWT_SECRET


def create_access_token(
    data: dict,
    settings: Settings,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a signed access token.

    Args:
        data: Claims to encode (sub, role, tenant_id, permissions)
        settings: Application settings (secret, algorithm, lifetime)
        expires_delta: Custom lifetime, mostly for tests

    Returns:
        Encoded JWT
    """
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)

    to_encode.update({
        "exp": now + expires_delta,
        "iat": now,
        "iss": settings.JWT_ISSUER,
        "type": ACCESS_TOKEN_TYPE,
    })
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def create_refresh_token(
    data: dict,
    settings: Settings,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a refresh token, signed with the dedicated refresh secret.

    Args:
        data: Minimal claims (sub, tenant_id)
        settings: Application settings
        expires_delta: Custom lifetime

    Returns:
        Encoded JWT
    """
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(days=settings.JWT_REFRESH_EXPIRE_DAYS)

    to_encode.update({
        "exp": now + expires_delta,
        "iat": now,
        "iss": settings.JWT_ISSUER,
        "type": REFRESH_TOKEN_TYPE,
    })
    return jwt.encode(to_encode, settings.JWT_REFRESH_SECRET, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str, settings: Settings, token_type: str = ACCESS_TOKEN_TYPE) -> Dict[str, Any]:
    """
    Verify and decode a token.

    Args:
        token: Encoded JWT
        settings: Application settings
        token_type: Expected type ("access" or "refresh")

    Returns:
        Decoded payload

    Raises:
        ExpiredSignatureError: The token is past its exp claim
        JWTError: Bad signature, malformed token, wrong type or issuer
    """
    try:
        payload = jwt.decode(
            token,
            _secret_for(settings, token_type),
            algorithms=[settings.JWT_ALGORITHM],
            issuer=settings.JWT_ISSUER,
            options={
                "verify_signature": True,
                "verify_exp": True,
                "verify_iat": True,
                "require_exp": True,
                "require_iat": True,
            },
        )
    except ExpiredSignatureError:
        raise
    except JWTError as e:
        raise JWTError(f"Token validation failed: {e}")

    if payload.get("type") != token_type:
        raise JWTError(f"Token type mismatch. Expected {token_type}")
    if "sub" not in payload:
        raise JWTError("Token has no subject")

    return payload
