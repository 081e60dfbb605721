"""
Pydantic schemas for the Appointment module.
"""
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ehrcloud.api.v1.dependencies import reject_null
from ehrcloud.api.v1.doctor.schemas import DoctorSummary
from ehrcloud.api.v1.patient.schemas import PatientSummary
from ehrcloud.models.enums import AppointmentStatus, AppointmentType
from ehrcloud.services.validation.rules import TIME_PATTERN


def _check_time(v: Optional[str]) -> Optional[str]:
    if v is not None and not TIME_PATTERN.match(v):
        raise ValueError("time must use the HH:MM 24-hour format")
    return v


class AppointmentCreate(BaseModel):
    """
    Body of POST /appointments.

    New appointments always start as Scheduled.
    """
    patient_id: int
    doctor_id: int
    appointment_date: date
    appointment_time: str = Field(..., examples=["09:30"])
    duration_minutes: int = Field(30, ge=5, le=480)
    department: Optional[str] = Field(None, max_length=100)
    reason: str = Field(..., min_length=3)
    type: AppointmentType = AppointmentType.IN_PERSON
    location: Optional[str] = Field(None, max_length=200)
    notes: Optional[str] = None

    @field_validator("appointment_time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        return _check_time(v)

    @field_validator("appointment_date")
    @classmethod
    def validate_date(cls, v: date) -> date:
        if v < date.today():
            raise ValueError("appointment date cannot be in the past")
        return v


class AppointmentUpdate(BaseModel):
    """Body of PUT /appointments/{id}. A status change must follow the lifecycle."""
    patient_id: Optional[int] = None
    doctor_id: Optional[int] = None
    appointment_date: Optional[date] = None
    appointment_time: Optional[str] = None
    duration_minutes: Optional[int] = Field(None, ge=5, le=480)
    department: Optional[str] = Field(None, max_length=100)
    reason: Optional[str] = Field(None, min_length=3)
    type: Optional[AppointmentType] = None
    status: Optional[AppointmentStatus] = None
    location: Optional[str] = Field(None, max_length=200)
    notes: Optional[str] = None

    reject_null_fields = field_validator(
        "patient_id", "doctor_id", "appointment_date", "appointment_time",
        "duration_minutes", "reason", "type", "status",
    )(reject_null)

    @field_validator("appointment_time")
    @classmethod
    def validate_time(cls, v: Optional[str]) -> Optional[str]:
        return _check_time(v)


class AppointmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tenant_id: int
    patient_id: int
    doctor_id: int
    patient: Optional[PatientSummary] = None
    doctor: Optional[DoctorSummary] = None
    appointment_date: date
    appointment_time: str
    duration_minutes: int
    department: Optional[str] = None
    reason: str
    type: AppointmentType
    status: AppointmentStatus
    location: Optional[str] = None
    notes: Optional[str] = None
    created_by: Optional[int] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class AppointmentFilters(BaseModel):
    status: Optional[AppointmentStatus] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    doctor_id: Optional[int] = None
    patient_id: Optional[int] = None
