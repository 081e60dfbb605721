"""
Pydantic schemas for the Tenants module (hospital self-service).
"""
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from ehrcloud.api.v1.dependencies import reject_null
from ehrcloud.api.v1.user.schemas import check_password_strength
from ehrcloud.models.enums import TenantStatus


# =============================================================================
# REGISTRATION
# =============================================================================

class OwnerAccount(BaseModel):
    """The hospital owner created together with the tenant."""
    email: EmailStr
    password: str = Field(..., max_length=128)
    first_name: str = Field(..., min_length=2, max_length=100)
    last_name: str = Field(..., min_length=2, max_length=100)
    phone: Optional[str] = Field(None, max_length=30)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return check_password_strength(v)


class TenantRegister(BaseModel):
    """
    Body of POST /tenants/register.

    The subdomain is lowercased here; syntax and reserved names are checked
    by validate_subdomain() in the service.
    """
    name: str = Field(..., min_length=2, max_length=255)
    subdomain: str = Field(..., min_length=1, max_length=63)
    contact_email: EmailStr
    contact_phone: Optional[str] = Field(None, max_length=30)
    address: Optional[str] = None
    plan_code: Optional[str] = None
    owner: OwnerAccount

    @field_validator("subdomain")
    @classmethod
    def lowercase_subdomain(cls, v: str) -> str:
        return v.strip().lower()


# =============================================================================
# CURRENT TENANT
# =============================================================================

class TenantUpdate(BaseModel):
    """Body of PATCH /tenants/current. Subdomain and status are not editable here."""
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    contact_email: Optional[EmailStr] = None
    contact_phone: Optional[str] = Field(None, max_length=30)
    address: Optional[str] = None
    settings: Optional[Dict[str, Any]] = None

    reject_null_fields = field_validator("name", "contact_email", "settings")(reject_null)


class TenantResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    subdomain: str
    status: TenantStatus
    trial_ends_at: Optional[datetime] = None
    activated_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    contact_email: str
    contact_phone: Optional[str] = None
    address: Optional[str] = None
    plan_code: Optional[str] = None
    max_patients: Optional[int] = None
    max_users: Optional[int] = None
    max_storage_mb: Optional[int] = None
    settings: Dict[str, Any] = {}
    created_at: datetime


class TenantSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    subdomain: str
    status: TenantStatus


class UsageCounter(BaseModel):
    used: int
    limit: Optional[int] = None


class TenantUsage(BaseModel):
    """Usage against the plan limits (limit None = unlimited)."""
    plan_code: Optional[str] = None
    status: TenantStatus
    trial_days_left: Optional[int] = None
    patients: UsageCounter
    users: UsageCounter
    doctors: int
    staff: int
    appointments: int
