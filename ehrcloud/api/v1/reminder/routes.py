"""
FastAPI routes for the Reminder module.

Endpoints:
- GET    /reminders       : paginated list (status, patient, upcoming)
- GET    /reminders/{id}  : one reminder
- POST   /reminders       : create
- PUT    /reminders/{id}  : update
- DELETE /reminders/{id}  : delete
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ehrcloud.api.v1.dependencies import Pagination
from ehrcloud.api.v1.envelope import ApiResponse, ok, paginated
from ehrcloud.api.v1.reminder.schemas import (
    ReminderCreate, ReminderFilters, ReminderResponse, ReminderUpdate,
)
from ehrcloud.api.v1.reminder.services import ReminderService
from ehrcloud.core.auth.permissions import Permission
from ehrcloud.core.auth.user_auth import TenantContext, require_permission
from ehrcloud.database.dependencies import get_db
from ehrcloud.models.enums import ReminderStatus

router = APIRouter(prefix="/reminders", tags=["Reminders"])


@router.get("", response_model=ApiResponse[List[ReminderResponse]])
def list_reminders(
    pagination: Pagination,
    status_filter: Optional[ReminderStatus] = Query(None, alias="status"),
    patient_id: Optional[int] = Query(None),
    upcoming: bool = Query(False, description="Pending reminders not yet due"),
    ctx: TenantContext = Depends(require_permission(Permission.REMINDERS_READ)),
    db: Session = Depends(get_db),
):
    filters = ReminderFilters(status=status_filter, patient_id=patient_id, upcoming=upcoming)
    items, total = ReminderService(db, ctx.tenant_id).get_all(pagination, filters)
    return paginated([ReminderResponse.model_validate(r) for r in items], total, pagination)


@router.get("/{reminder_id}", response_model=ApiResponse[ReminderResponse])
def get_reminder(
    reminder_id: int,
    ctx: TenantContext = Depends(require_permission(Permission.REMINDERS_READ)),
    db: Session = Depends(get_db),
):
    return ok(ReminderResponse.model_validate(ReminderService(db, ctx.tenant_id).get_by_id(reminder_id)))


@router.post("", response_model=ApiResponse[ReminderResponse], status_code=status.HTTP_201_CREATED)
def create_reminder(
    data: ReminderCreate,
    ctx: TenantContext = Depends(require_permission(Permission.REMINDERS_WRITE)),
    db: Session = Depends(get_db),
):
    reminder = ReminderService(db, ctx.tenant_id).create_reminder(data, created_by=ctx.user_id)
    return ok(ReminderResponse.model_validate(reminder), "Reminder created successfully")


@router.put("/{reminder_id}", response_model=ApiResponse[ReminderResponse])
def update_reminder(
    reminder_id: int,
    data: ReminderUpdate,
    ctx: TenantContext = Depends(require_permission(Permission.REMINDERS_WRITE)),
    db: Session = Depends(get_db),
):
    reminder = ReminderService(db, ctx.tenant_id).update_reminder(reminder_id, data)
    return ok(ReminderResponse.model_validate(reminder), "Reminder updated successfully")


@router.delete("/{reminder_id}", response_model=ApiResponse)
def delete_reminder(
    reminder_id: int,
    ctx: TenantContext = Depends(require_permission(Permission.REMINDERS_WRITE)),
    db: Session = Depends(get_db),
):
    ReminderService(db, ctx.tenant_id).delete(reminder_id)
    return ok(message="Reminder deleted successfully")
