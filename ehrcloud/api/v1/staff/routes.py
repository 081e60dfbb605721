"""
FastAPI routes for the Staff module.

Endpoints:
- GET    /staff              : paginated list (owner, staff)
- GET    /staff/departments  : active staff grouped by department
- GET    /staff/{id}         : one profile
- POST   /staff              : create account + profile (owner)
- PUT    /staff/{id}         : update (owner)
- DELETE /staff/{id}         : deactivate (owner)
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ehrcloud.api.v1.dependencies import Pagination
from ehrcloud.api.v1.envelope import ApiResponse, ok, paginated
from ehrcloud.api.v1.staff.schemas import (
    DepartmentGroup, StaffCreate, StaffFilters, StaffResponse, StaffUpdate,
)
from ehrcloud.api.v1.staff.services import StaffService
from ehrcloud.core.auth.permissions import Permission
from ehrcloud.core.auth.user_auth import TenantContext, require_permission
from ehrcloud.database.dependencies import get_db
from ehrcloud.models.enums import StaffDepartment, StaffStatus

router = APIRouter(prefix="/staff", tags=["Staff"])


@router.get("", response_model=ApiResponse[List[StaffResponse]])
def list_staff(
    pagination: Pagination,
    department: Optional[StaffDepartment] = Query(None),
    position: Optional[str] = Query(None),
    status_filter: Optional[StaffStatus] = Query(None, alias="status"),
    search: Optional[str] = Query(None, description="Employee ID or name"),
    ctx: TenantContext = Depends(require_permission(Permission.STAFF_READ)),
    db: Session = Depends(get_db),
):
    filters = StaffFilters(department=department, position=position, status=status_filter, search=search)
    items, total = StaffService(db, ctx.tenant_id).get_all(pagination, filters)
    return paginated([StaffResponse.model_validate(s) for s in items], total, pagination)


@router.get("/departments", response_model=ApiResponse[List[DepartmentGroup]])
def list_departments(
    ctx: TenantContext = Depends(require_permission(Permission.STAFF_READ)),
    db: Session = Depends(get_db),
):
    groups = StaffService(db, ctx.tenant_id).group_by_department()
    return ok([DepartmentGroup.model_validate(g, from_attributes=True) for g in groups])


@router.get("/{staff_id}", response_model=ApiResponse[StaffResponse])
def get_staff(
    staff_id: int,
    ctx: TenantContext = Depends(require_permission(Permission.STAFF_READ)),
    db: Session = Depends(get_db),
):
    return ok(StaffResponse.model_validate(StaffService(db, ctx.tenant_id).get_by_id(staff_id)))


@router.post("", response_model=ApiResponse[StaffResponse], status_code=status.HTTP_201_CREATED)
def create_staff(
    data: StaffCreate,
    ctx: TenantContext = Depends(require_permission(Permission.STAFF_WRITE)),
    db: Session = Depends(get_db),
):
    staff = StaffService(db, ctx.tenant_id).create_staff(data)
    return ok(StaffResponse.model_validate(staff), "Staff member created successfully")


@router.put("/{staff_id}", response_model=ApiResponse[StaffResponse])
def update_staff(
    staff_id: int,
    data: StaffUpdate,
    ctx: TenantContext = Depends(require_permission(Permission.STAFF_WRITE)),
    db: Session = Depends(get_db),
):
    staff = StaffService(db, ctx.tenant_id).update_staff(staff_id, data)
    return ok(StaffResponse.model_validate(staff), "Staff member updated successfully")


@router.delete("/{staff_id}", response_model=ApiResponse[StaffResponse])
def deactivate_staff(
    staff_id: int,
    ctx: TenantContext = Depends(require_permission(Permission.STAFF_WRITE)),
    db: Session = Depends(get_db),
):
    staff = StaffService(db, ctx.tenant_id).deactivate(staff_id)
    return ok(StaffResponse.model_validate(staff), "Staff member deactivated successfully")
