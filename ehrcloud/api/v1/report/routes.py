"""
FastAPI routes for the Report module.

Endpoints:
- GET    /reports       : paginated list (type, patient, title search)
- GET    /reports/{id}  : one report
- POST   /reports       : write a report (owner, doctor)
- DELETE /reports/{id}  : delete (hospital owner only)
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ehrcloud.api.v1.dependencies import Pagination
from ehrcloud.api.v1.envelope import ApiResponse, ok, paginated
from ehrcloud.api.v1.report.schemas import ReportCreate, ReportFilters, ReportResponse
from ehrcloud.api.v1.report.services import ReportService
from ehrcloud.core.auth.permissions import Permission
from ehrcloud.core.auth.user_auth import TenantContext, require_permission, require_roles
from ehrcloud.database.dependencies import get_db
from ehrcloud.models.enums import ReportType, UserRole

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("", response_model=ApiResponse[List[ReportResponse]])
def list_reports(
    pagination: Pagination,
    report_type: Optional[ReportType] = Query(None, alias="type"),
    patient_id: Optional[int] = Query(None),
    search: Optional[str] = Query(None, description="Title contains"),
    ctx: TenantContext = Depends(require_permission(Permission.REPORTS_READ)),
    db: Session = Depends(get_db),
):
    filters = ReportFilters(report_type=report_type, patient_id=patient_id, search=search)
    items, total = ReportService(db, ctx.tenant_id).get_all(pagination, filters)
    return paginated([ReportResponse.model_validate(r) for r in items], total, pagination)


@router.get("/{report_id}", response_model=ApiResponse[ReportResponse])
def get_report(
    report_id: int,
    ctx: TenantContext = Depends(require_permission(Permission.REPORTS_READ)),
    db: Session = Depends(get_db),
):
    return ok(ReportResponse.model_validate(ReportService(db, ctx.tenant_id).get_by_id(report_id)))


@router.post("", response_model=ApiResponse[ReportResponse], status_code=status.HTTP_201_CREATED)
def create_report(
    data: ReportCreate,
    ctx: TenantContext = Depends(require_permission(Permission.REPORTS_WRITE)),
    db: Session = Depends(get_db),
):
    report = ReportService(db, ctx.tenant_id).create_report(data, created_by=ctx.user_id)
    return ok(ReportResponse.model_validate(report), "Report created successfully")


@router.delete(
    "/{report_id}",
    response_model=ApiResponse,
    dependencies=[Depends(require_roles(UserRole.HOSPITAL_OWNER))],
)
def delete_report(
    report_id: int,
    ctx: TenantContext = Depends(require_permission(Permission.REPORTS_WRITE)),
    db: Session = Depends(get_db),
):
    ReportService(db, ctx.tenant_id).delete(report_id)
    return ok(message="Report deleted successfully")
