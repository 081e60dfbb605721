"""
FastAPI routes for the Prescription module.

Endpoints:
- GET  /prescriptions       : paginated list (patient, doctor, status)
- GET  /prescriptions/{id}  : one prescription
- POST /prescriptions       : issue (doctors)
- PUT  /prescriptions/{id}  : update (doctors)
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ehrcloud.api.v1.dependencies import Pagination
from ehrcloud.api.v1.envelope import ApiResponse, ok, paginated
from ehrcloud.api.v1.prescription.schemas import (
    PrescriptionCreate, PrescriptionFilters, PrescriptionResponse, PrescriptionUpdate,
)
from ehrcloud.api.v1.prescription.services import PrescriptionService
from ehrcloud.core.auth.permissions import Permission
from ehrcloud.core.auth.user_auth import TenantContext, require_permission
from ehrcloud.database.dependencies import get_db
from ehrcloud.models.enums import PrescriptionStatus

router = APIRouter(prefix="/prescriptions", tags=["Prescriptions"])


@router.get("", response_model=ApiResponse[List[PrescriptionResponse]])
def list_prescriptions(
    pagination: Pagination,
    patient_id: Optional[int] = Query(None),
    doctor_id: Optional[int] = Query(None),
    status_filter: Optional[PrescriptionStatus] = Query(None, alias="status"),
    ctx: TenantContext = Depends(require_permission(Permission.PRESCRIPTIONS_READ)),
    db: Session = Depends(get_db),
):
    filters = PrescriptionFilters(patient_id=patient_id, doctor_id=doctor_id, status=status_filter)
    items, total = PrescriptionService(db, ctx.tenant_id).get_all(pagination, filters)
    return paginated([PrescriptionResponse.model_validate(p) for p in items], total, pagination)


@router.get("/{prescription_id}", response_model=ApiResponse[PrescriptionResponse])
def get_prescription(
    prescription_id: int,
    ctx: TenantContext = Depends(require_permission(Permission.PRESCRIPTIONS_READ)),
    db: Session = Depends(get_db),
):
    prescription = PrescriptionService(db, ctx.tenant_id).get_by_id(prescription_id)
    return ok(PrescriptionResponse.model_validate(prescription))


@router.post("", response_model=ApiResponse[PrescriptionResponse], status_code=status.HTTP_201_CREATED)
def create_prescription(
    data: PrescriptionCreate,
    ctx: TenantContext = Depends(require_permission(Permission.PRESCRIPTIONS_WRITE)),
    db: Session = Depends(get_db),
):
    prescription = PrescriptionService(db, ctx.tenant_id).create_prescription(data, user_id=ctx.user_id)
    return ok(PrescriptionResponse.model_validate(prescription), "Prescription created successfully")


@router.put("/{prescription_id}", response_model=ApiResponse[PrescriptionResponse])
def update_prescription(
    prescription_id: int,
    data: PrescriptionUpdate,
    ctx: TenantContext = Depends(require_permission(Permission.PRESCRIPTIONS_WRITE)),
    db: Session = Depends(get_db),
):
    prescription = PrescriptionService(db, ctx.tenant_id).update_prescription(prescription_id, data)
    return ok(PrescriptionResponse.model_validate(prescription), "Prescription updated successfully")
