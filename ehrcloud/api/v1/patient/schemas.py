"""
Pydantic schemas for the Patient module.
"""
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from ehrcloud.api.v1.dependencies import reject_null
from ehrcloud.models.enums import Gender, PatientStatus

BLOOD_GROUPS = {"A+", "A-", "B+", "B-", "AB+", "AB-", "O+", "O-"}


def _normalise_blood_group(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip().upper()
    if v not in BLOOD_GROUPS:
        raise ValueError(f"blood group must be one of {sorted(BLOOD_GROUPS)}")
    return v


def _check_birth_date(v: Optional[date]) -> Optional[date]:
    if v is not None and v > date.today():
        raise ValueError("date of birth cannot be in the future")
    return v


# =============================================================================
# PATIENT SCHEMAS
# =============================================================================

class PatientCreate(BaseModel):
    """Body of POST /patients. Unknown keys (tenant_id included) are ignored."""
    first_name: str = Field(..., min_length=2, max_length=100)
    last_name: str = Field(..., min_length=2, max_length=100)
    date_of_birth: date
    gender: Gender
    email: Optional[EmailStr] = None
    phone: str = Field(..., min_length=5, max_length=30)
    address: Optional[str] = Field(None, max_length=500)
    emergency_contact_name: Optional[str] = Field(None, max_length=200)
    emergency_contact_phone: Optional[str] = Field(None, max_length=30)
    blood_group: Optional[str] = None
    allergies: List[str] = Field(default_factory=list)
    notes: Optional[str] = None
    status: PatientStatus = PatientStatus.ACTIVE
    last_visit_at: Optional[datetime] = None

    @field_validator("first_name", "last_name")
    @classmethod
    def strip_names(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("must be at least 2 characters")
        return v

    @field_validator("blood_group")
    @classmethod
    def validate_blood_group(cls, v: Optional[str]) -> Optional[str]:
        return _normalise_blood_group(v)

    @field_validator("date_of_birth")
    @classmethod
    def validate_birth_date(cls, v: date) -> date:
        return _check_birth_date(v)


class PatientUpdate(BaseModel):
    """Body of PUT /patients/{id}: only the fields sent are changed."""
    first_name: Optional[str] = Field(None, min_length=2, max_length=100)
    last_name: Optional[str] = Field(None, min_length=2, max_length=100)
    date_of_birth: Optional[date] = None
    gender: Optional[Gender] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, min_length=5, max_length=30)
    address: Optional[str] = Field(None, max_length=500)
    emergency_contact_name: Optional[str] = Field(None, max_length=200)
    emergency_contact_phone: Optional[str] = Field(None, max_length=30)
    blood_group: Optional[str] = None
    allergies: Optional[List[str]] = None
    notes: Optional[str] = None
    status: Optional[PatientStatus] = None
    last_visit_at: Optional[datetime] = None

    reject_null_fields = field_validator(
        "first_name", "last_name", "date_of_birth", "gender", "phone", "allergies", "status"
    )(reject_null)

    @field_validator("blood_group")
    @classmethod
    def validate_blood_group(cls, v: Optional[str]) -> Optional[str]:
        return _normalise_blood_group(v)

    @field_validator("date_of_birth")
    @classmethod
    def validate_birth_date(cls, v: Optional[date]) -> Optional[date]:
        return _check_birth_date(v)


class PatientResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tenant_id: int
    first_name: str
    last_name: str
    date_of_birth: date
    gender: Gender
    email: Optional[str] = None
    phone: str
    address: Optional[str] = None
    emergency_contact_name: Optional[str] = None
    emergency_contact_phone: Optional[str] = None
    blood_group: Optional[str] = None
    allergies: List[str] = []
    notes: Optional[str] = None
    status: PatientStatus
    last_visit_at: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class PatientSummary(BaseModel):
    """Compact representation embedded in other resources."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    phone: Optional[str] = None


class PatientFilters(BaseModel):
    """Filters for GET /patients."""
    search: Optional[str] = None
    status: Optional[PatientStatus] = None
    gender: Optional[Gender] = None
