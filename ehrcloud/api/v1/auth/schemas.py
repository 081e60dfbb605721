"""
Pydantic schemas for the authentication module.
"""
from typing import List

from pydantic import BaseModel, EmailStr, Field

from ehrcloud.api.v1.tenants.schemas import TenantSummary
from ehrcloud.api.v1.user.schemas import UserResponse


class LoginRequest(BaseModel):
    email: EmailStr = Field(..., description="Login email")
    password: str = Field(..., min_length=1, description="Password")


class RefreshTokenRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int = Field(..., description="Access token lifetime in seconds")


class LoginResponse(TokenResponse):
    user: UserResponse


class CurrentUserResponse(BaseModel):
    """GET /auth/me: the account, its hospital and what its role allows."""
    user: UserResponse
    tenant: TenantSummary
    permissions: List[str]
