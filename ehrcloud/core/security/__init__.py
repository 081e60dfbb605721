# ehrcloud/core/security/__init__.py

# Hashing
from ehrcloud.core.security.hashing import hash_password, verify_password, needs_update

# JWT
from ehrcloud.core.security.jwt import (
    create_access_token,
    create_refresh_token,
    verify_token,
)

__all__ = [
    "hash_password", "verify_password", "needs_update",
    "create_access_token", "create_refresh_token", "verify_token",
]
