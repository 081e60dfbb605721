"""
Pydantic schemas for the platform administration module (super admin).
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ehrcloud.api.v1.dependencies import reject_null
from ehrcloud.models.enums import BillingCycle, TenantStatus


class TenantStatusUpdate(BaseModel):
    status: TenantStatus
    reason: Optional[str] = Field(None, max_length=500)


class TenantPlanUpdate(BaseModel):
    plan_code: str = Field(..., min_length=1, max_length=50)


class TenantFilters(BaseModel):
    status: Optional[TenantStatus] = None
    search: Optional[str] = None


class PlanCreate(BaseModel):
    code: str = Field(..., min_length=2, max_length=50, pattern=r"^[a-z0-9_-]+$")
    name: str = Field(..., min_length=2, max_length=100)
    description: Optional[str] = None
    price_cents: int = Field(0, ge=0)
    billing_cycle: BillingCycle = BillingCycle.MONTHLY
    max_patients: Optional[int] = Field(None, ge=1)
    max_users: Optional[int] = Field(None, ge=1)
    max_storage_mb: Optional[int] = Field(None, ge=1)
    features: List[str] = Field(default_factory=list)
    is_active: bool = True

    @field_validator("features")
    @classmethod
    def unique_features(cls, v: List[str]) -> List[str]:
        return list(dict.fromkeys(f.strip() for f in v if f.strip()))


class PlanUpdate(BaseModel):
    """The plan code is immutable; set a limit to null for unlimited."""
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    description: Optional[str] = None
    price_cents: Optional[int] = Field(None, ge=0)
    billing_cycle: Optional[BillingCycle] = None
    max_patients: Optional[int] = Field(None, ge=1)
    max_users: Optional[int] = Field(None, ge=1)
    max_storage_mb: Optional[int] = Field(None, ge=1)
    features: Optional[List[str]] = None
    is_active: Optional[bool] = None

    reject_null_fields = field_validator(
        "name", "price_cents", "billing_cycle", "features", "is_active"
    )(reject_null)


class PlanResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    code: str
    name: str
    description: Optional[str] = None
    price_cents: int
    billing_cycle: BillingCycle
    max_patients: Optional[int] = None
    max_users: Optional[int] = None
    max_storage_mb: Optional[int] = None
    features: List[str] = []
    is_active: bool
    created_at: datetime
