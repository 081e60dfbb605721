"""
FastAPI routes for the Appointment module.

Endpoints:
- GET    /appointments            : paginated list (status, date range, doctor, patient)
- GET    /appointments/upcoming   : next open appointments
- GET    /appointments/{id}       : one appointment
- POST   /appointments            : book
- PUT    /appointments/{id}       : update, status changes follow the lifecycle
- DELETE /appointments/{id}       : cancel
"""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ehrcloud.api.v1.appointment.schemas import (
    AppointmentCreate, AppointmentFilters, AppointmentResponse, AppointmentUpdate,
)
from ehrcloud.api.v1.appointment.services import AppointmentService
from ehrcloud.api.v1.dependencies import Pagination
from ehrcloud.api.v1.envelope import ApiResponse, ok, paginated
from ehrcloud.core.auth.permissions import Permission
from ehrcloud.core.auth.user_auth import TenantContext, require_permission
from ehrcloud.database.dependencies import get_db
from ehrcloud.models.enums import AppointmentStatus

router = APIRouter(prefix="/appointments", tags=["Appointments"])


@router.get("", response_model=ApiResponse[List[AppointmentResponse]])
def list_appointments(
    pagination: Pagination,
    status_filter: Optional[AppointmentStatus] = Query(None, alias="status"),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    doctor_id: Optional[int] = Query(None),
    patient_id: Optional[int] = Query(None),
    ctx: TenantContext = Depends(require_permission(Permission.APPOINTMENTS_READ)),
    db: Session = Depends(get_db),
):
    filters = AppointmentFilters(
        status=status_filter,
        start_date=start_date,
        end_date=end_date,
        doctor_id=doctor_id,
        patient_id=patient_id,
    )
    items, total = AppointmentService(db, ctx.tenant_id).get_all(pagination, filters)
    return paginated([AppointmentResponse.model_validate(a) for a in items], total, pagination)


@router.get("/upcoming", response_model=ApiResponse[List[AppointmentResponse]])
def list_upcoming_appointments(
    ctx: TenantContext = Depends(require_permission(Permission.APPOINTMENTS_READ)),
    db: Session = Depends(get_db),
):
    appointments = AppointmentService(db, ctx.tenant_id).get_upcoming()
    return ok([AppointmentResponse.model_validate(a) for a in appointments])


@router.get("/{appointment_id}", response_model=ApiResponse[AppointmentResponse])
def get_appointment(
    appointment_id: int,
    ctx: TenantContext = Depends(require_permission(Permission.APPOINTMENTS_READ)),
    db: Session = Depends(get_db),
):
    appointment = AppointmentService(db, ctx.tenant_id).get_by_id(appointment_id)
    return ok(AppointmentResponse.model_validate(appointment))


@router.post("", response_model=ApiResponse[AppointmentResponse], status_code=status.HTTP_201_CREATED)
def create_appointment(
    data: AppointmentCreate,
    ctx: TenantContext = Depends(require_permission(Permission.APPOINTMENTS_WRITE)),
    db: Session = Depends(get_db),
):
    appointment = AppointmentService(db, ctx.tenant_id).create_appointment(data, created_by=ctx.user_id)
    return ok(AppointmentResponse.model_validate(appointment), "Appointment created successfully")


@router.put("/{appointment_id}", response_model=ApiResponse[AppointmentResponse])
def update_appointment(
    appointment_id: int,
    data: AppointmentUpdate,
    ctx: TenantContext = Depends(require_permission(Permission.APPOINTMENTS_WRITE)),
    db: Session = Depends(get_db),
):
    appointment = AppointmentService(db, ctx.tenant_id).update_appointment(appointment_id, data)
    return ok(AppointmentResponse.model_validate(appointment), "Appointment updated successfully")


@router.delete("/{appointment_id}", response_model=ApiResponse[AppointmentResponse])
def cancel_appointment(
    appointment_id: int,
    ctx: TenantContext = Depends(require_permission(Permission.APPOINTMENTS_WRITE)),
    db: Session = Depends(get_db),
):
    appointment = AppointmentService(db, ctx.tenant_id).cancel(appointment_id)
    return ok(AppointmentResponse.model_validate(appointment), "Appointment cancelled successfully")
