"""
Pydantic schemas for the Doctor module.
"""
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ehrcloud.api.v1.dependencies import reject_null
from ehrcloud.api.v1.user.schemas import UserSummary
from ehrcloud.models.enums import DoctorStatus
from ehrcloud.services.validation.rules import TIME_PATTERN

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def _check_available_hours(v: Optional[Dict[str, Dict[str, str]]]) -> Optional[Dict[str, Dict[str, str]]]:
    """{"monday": {"start": "09:00", "end": "17:00"}, ...}"""
    if v is None:
        return v
    for day, slot in v.items():
        if day not in WEEKDAYS:
            raise ValueError(f"unknown weekday '{day}'")
        start, end = slot.get("start"), slot.get("end")
        if not (start and end and TIME_PATTERN.match(start) and TIME_PATTERN.match(end)):
            raise ValueError(f"{day}: start and end must use HH:MM")
        if start >= end:
            raise ValueError(f"{day}: start must be before end")
    return v


class DoctorCreate(BaseModel):
    """
    Body of POST /doctors.

    user_id defaults to the caller; it must be an account of the same hospital.
    """
    user_id: Optional[int] = None
    license_number: str = Field(..., min_length=3, max_length=50)
    specialization: str = Field(..., min_length=2, max_length=100)
    department: str = Field(..., min_length=2, max_length=100)
    experience_years: int = Field(0, ge=0, le=70)
    qualifications: List[str] = Field(default_factory=list)
    consultation_fee: Decimal = Field(Decimal("0"), ge=0)
    available_hours: Dict[str, Dict[str, str]] = Field(default_factory=dict)
    status: DoctorStatus = DoctorStatus.AVAILABLE

    @field_validator("available_hours")
    @classmethod
    def validate_hours(cls, v):
        return _check_available_hours(v)


class DoctorUpdate(BaseModel):
    license_number: Optional[str] = Field(None, min_length=3, max_length=50)
    specialization: Optional[str] = Field(None, min_length=2, max_length=100)
    department: Optional[str] = Field(None, min_length=2, max_length=100)
    experience_years: Optional[int] = Field(None, ge=0, le=70)
    qualifications: Optional[List[str]] = None
    consultation_fee: Optional[Decimal] = Field(None, ge=0)
    available_hours: Optional[Dict[str, Dict[str, str]]] = None
    status: Optional[DoctorStatus] = None
    rating: Optional[Decimal] = Field(None, ge=0, le=5)

    reject_null_fields = field_validator(
        "license_number", "specialization", "department", "experience_years",
        "qualifications", "consultation_fee", "available_hours", "status", "rating",
    )(reject_null)

    @field_validator("available_hours")
    @classmethod
    def validate_hours(cls, v):
        return _check_available_hours(v)


class DoctorResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tenant_id: int
    user_id: int
    user: Optional[UserSummary] = None
    license_number: str
    specialization: str
    department: str
    experience_years: int
    qualifications: List[str] = []
    consultation_fee: Decimal
    available_hours: Dict[str, Dict[str, str]] = {}
    status: DoctorStatus
    rating: Decimal
    created_at: datetime


class DoctorSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    full_name: str
    specialization: str
    department: str


class DoctorFilters(BaseModel):
    specialization: Optional[str] = None
    department: Optional[str] = None
    status: Optional[DoctorStatus] = None
    search: Optional[str] = None
