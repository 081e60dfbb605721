"""
Pydantic schemas for the Prescription module.

The medication items are checked against services/schemas/medications_v1.json
by the service, so every writer goes through the same rules.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ehrcloud.api.v1.dependencies import reject_null
from ehrcloud.models.enums import PrescriptionStatus


class PrescriptionCreate(BaseModel):
    """doctor_id defaults to the doctor profile of the caller."""
    patient_id: int
    doctor_id: Optional[int] = None
    appointment_id: Optional[int] = None
    diagnosis: str = Field(..., min_length=3)
    medications: List[Dict[str, Any]]
    notes: Optional[str] = None


class PrescriptionUpdate(BaseModel):
    diagnosis: Optional[str] = Field(None, min_length=3)
    medications: Optional[List[Dict[str, Any]]] = None
    notes: Optional[str] = None
    status: Optional[PrescriptionStatus] = None

    reject_null_fields = field_validator("diagnosis", "medications", "status")(reject_null)


class PrescriptionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tenant_id: int
    patient_id: int
    doctor_id: int
    appointment_id: Optional[int] = None
    diagnosis: str
    medications: List[Dict[str, Any]]
    notes: Optional[str] = None
    status: PrescriptionStatus
    issued_at: datetime
    created_by: Optional[int] = None
    created_at: datetime


class PrescriptionFilters(BaseModel):
    patient_id: Optional[int] = None
    doctor_id: Optional[int] = None
    status: Optional[PrescriptionStatus] = None
