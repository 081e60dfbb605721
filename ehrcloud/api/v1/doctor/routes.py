"""
FastAPI routes for the Doctor module.

Endpoints:
- GET  /doctors            : paginated list
- GET  /doctors/available  : doctors currently Available
- GET  /doctors/{id}       : one profile
- POST /doctors            : create a profile (owner, doctor)
- PUT  /doctors/{id}       : update a profile (owner, doctor)
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ehrcloud.api.v1.dependencies import Pagination
from ehrcloud.api.v1.doctor.schemas import DoctorCreate, DoctorFilters, DoctorResponse, DoctorUpdate
from ehrcloud.api.v1.doctor.services import DoctorService
from ehrcloud.api.v1.envelope import ApiResponse, ok, paginated
from ehrcloud.core.auth.permissions import Permission
from ehrcloud.core.auth.user_auth import TenantContext, require_permission
from ehrcloud.database.dependencies import get_db
from ehrcloud.models.enums import DoctorStatus

router = APIRouter(prefix="/doctors", tags=["Doctors"])


@router.get("", response_model=ApiResponse[List[DoctorResponse]])
def list_doctors(
    pagination: Pagination,
    specialization: Optional[str] = Query(None),
    department: Optional[str] = Query(None),
    status_filter: Optional[DoctorStatus] = Query(None, alias="status"),
    search: Optional[str] = Query(None),
    ctx: TenantContext = Depends(require_permission(Permission.DOCTORS_READ)),
    db: Session = Depends(get_db),
):
    filters = DoctorFilters(
        specialization=specialization, department=department, status=status_filter, search=search,
    )
    items, total = DoctorService(db, ctx.tenant_id).get_all(pagination, filters)
    return paginated([DoctorResponse.model_validate(d) for d in items], total, pagination)


@router.get("/available", response_model=ApiResponse[List[DoctorResponse]])
def list_available_doctors(
    ctx: TenantContext = Depends(require_permission(Permission.DOCTORS_READ)),
    db: Session = Depends(get_db),
):
    doctors = DoctorService(db, ctx.tenant_id).get_available()
    return ok([DoctorResponse.model_validate(d) for d in doctors])


@router.get("/{doctor_id}", response_model=ApiResponse[DoctorResponse])
def get_doctor(
    doctor_id: int,
    ctx: TenantContext = Depends(require_permission(Permission.DOCTORS_READ)),
    db: Session = Depends(get_db),
):
    return ok(DoctorResponse.model_validate(DoctorService(db, ctx.tenant_id).get_by_id(doctor_id)))


@router.post("", response_model=ApiResponse[DoctorResponse], status_code=status.HTTP_201_CREATED)
def create_doctor(
    data: DoctorCreate,
    ctx: TenantContext = Depends(require_permission(Permission.DOCTORS_WRITE)),
    db: Session = Depends(get_db),
):
    doctor = DoctorService(db, ctx.tenant_id).create_doctor(data, default_user_id=ctx.user_id)
    return ok(DoctorResponse.model_validate(doctor), "Doctor profile created successfully")


@router.put("/{doctor_id}", response_model=ApiResponse[DoctorResponse])
def update_doctor(
    doctor_id: int,
    data: DoctorUpdate,
    ctx: TenantContext = Depends(require_permission(Permission.DOCTORS_WRITE)),
    db: Session = Depends(get_db),
):
    doctor = DoctorService(db, ctx.tenant_id).update_doctor(doctor_id, data)
    return ok(DoctorResponse.model_validate(doctor), "Doctor profile updated successfully")
