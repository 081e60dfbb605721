"""
Business services for the Report module.
"""
from typing import Optional

from sqlalchemy import Select

from ehrcloud.models.clinical.report import Report
from ehrcloud.models.patient.patient import Patient
from ehrcloud.services.scoping import TenantScopedService

from ehrcloud.api.v1.report.schemas import ReportCreate, ReportFilters


class ReportService(TenantScopedService[Report]):
    model = Report
    not_found_message = "Report not found"
    sortable_fields = frozenset({"created_at", "title", "report_type"})

    def _apply_filters(self, query: Select, filters: Optional[ReportFilters]) -> Select:
        if filters is None:
            return query
        if filters.report_type:
            query = query.where(Report.report_type == filters.report_type)
        if filters.patient_id:
            query = query.where(Report.patient_id == filters.patient_id)
        if filters.search:
            query = query.where(Report.title.ilike(f"%{filters.search.strip()}%"))
        return query

    def create_report(self, data: ReportCreate, created_by: int) -> Report:
        if data.patient_id is not None:
            self.get_related(Patient, data.patient_id, "Patient not found")
        return self.create(data.model_dump(), created_by=created_by)
