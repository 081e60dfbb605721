"""
FastAPI routes for the Patient module.

Endpoints:
- GET    /patients          : paginated list (search, status, gender)
- GET    /patients/recent   : visited in the last 7 days
- GET    /patients/{id}     : one record
- POST   /patients          : create (clinical and front-desk roles)
- PUT    /patients/{id}     : update
- DELETE /patients/{id}     : hard delete (hospital owner)

MULTI-TENANT: the tenant comes from the resolved request context, never
from the body.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ehrcloud.api.v1.dependencies import Pagination
from ehrcloud.api.v1.envelope import ApiResponse, ok, paginated
from ehrcloud.api.v1.patient.schemas import (
    PatientCreate, PatientFilters, PatientResponse, PatientUpdate,
)
from ehrcloud.api.v1.patient.services import PatientService
from ehrcloud.core.auth.permissions import Permission
from ehrcloud.core.auth.user_auth import TenantContext, require_permission
from ehrcloud.database.dependencies import get_db
from ehrcloud.models.enums import Gender, PatientStatus

router = APIRouter(prefix="/patients", tags=["Patients"])


@router.get("", response_model=ApiResponse[List[PatientResponse]])
def list_patients(
    pagination: Pagination,
    search: Optional[str] = Query(None, description="Name, email or phone"),
    status_filter: Optional[PatientStatus] = Query(None, alias="status"),
    gender: Optional[Gender] = Query(None),
    ctx: TenantContext = Depends(require_permission(Permission.PATIENTS_READ)),
    db: Session = Depends(get_db),
):
    filters = PatientFilters(search=search, status=status_filter, gender=gender)
    items, total = PatientService(db, ctx.tenant_id).get_all(pagination, filters)
    return paginated([PatientResponse.model_validate(p) for p in items], total, pagination)


@router.get("/recent", response_model=ApiResponse[List[PatientResponse]])
def list_recent_patients(
    ctx: TenantContext = Depends(require_permission(Permission.PATIENTS_READ)),
    db: Session = Depends(get_db),
):
    """Patients whose last visit is less than 7 days old."""
    patients = PatientService(db, ctx.tenant_id).get_recent()
    return ok([PatientResponse.model_validate(p) for p in patients])


@router.get("/{patient_id}", response_model=ApiResponse[PatientResponse])
def get_patient(
    patient_id: int,
    ctx: TenantContext = Depends(require_permission(Permission.PATIENTS_READ)),
    db: Session = Depends(get_db),
):
    patient = PatientService(db, ctx.tenant_id).get_by_id(patient_id)
    return ok(PatientResponse.model_validate(patient))


@router.post("", response_model=ApiResponse[PatientResponse], status_code=status.HTTP_201_CREATED)
def create_patient(
    data: PatientCreate,
    ctx: TenantContext = Depends(require_permission(Permission.PATIENTS_WRITE)),
    db: Session = Depends(get_db),
):
    patient = PatientService(db, ctx.tenant_id).create_patient(data, created_by=ctx.user_id)
    return ok(PatientResponse.model_validate(patient), "Patient created successfully")


@router.put("/{patient_id}", response_model=ApiResponse[PatientResponse])
def update_patient(
    patient_id: int,
    data: PatientUpdate,
    ctx: TenantContext = Depends(require_permission(Permission.PATIENTS_WRITE)),
    db: Session = Depends(get_db),
):
    patient = PatientService(db, ctx.tenant_id).update_patient(patient_id, data)
    return ok(PatientResponse.model_validate(patient), "Patient updated successfully")


@router.delete("/{patient_id}", response_model=ApiResponse)
def delete_patient(
    patient_id: int,
    ctx: TenantContext = Depends(require_permission(Permission.PATIENTS_DELETE)),
    db: Session = Depends(get_db),
):
    PatientService(db, ctx.tenant_id).delete(patient_id)
    return ok(message="Patient deleted successfully")
