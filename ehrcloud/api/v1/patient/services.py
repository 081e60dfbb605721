"""
Business services for the Patient module.

MULTI-TENANT: every operation is filtered by the tenant of the request
through TenantScopedService._base_query().
"""
from datetime import timedelta
from typing import List, Optional

from sqlalchemy import Select, or_

from ehrcloud.core.exceptions import AuthorizationError
from ehrcloud.models.mixins import utcnow
from ehrcloud.models.patient.patient import Patient
from ehrcloud.models.tenants.tenant import Tenant
from ehrcloud.services.scoping import TenantScopedService

from ehrcloud.api.v1.patient.schemas import PatientCreate, PatientFilters, PatientUpdate

RECENT_VISIT_DAYS = 7


class PatientService(TenantScopedService[Patient]):
    """Patient records of one hospital."""

    model = Patient
    not_found_message = "Patient not found"
    sortable_fields = frozenset({
        "created_at", "updated_at", "first_name", "last_name", "date_of_birth", "last_visit_at",
    })

    def _apply_filters(self, query: Select, filters: Optional[PatientFilters]) -> Select:
        if filters is None:
            return query
        if filters.status:
            query = query.where(Patient.status == filters.status)
        if filters.gender:
            query = query.where(Patient.gender == filters.gender)
        if filters.search:
            term = f"%{filters.search.strip()}%"
            query = query.where(or_(
                Patient.first_name.ilike(term),
                Patient.last_name.ilike(term),
                Patient.email.ilike(term),
                Patient.phone.ilike(term),
            ))
        return query

    def get_recent(self, days: int = RECENT_VISIT_DAYS, limit: int = 50) -> List[Patient]:
        """Patients seen in the last `days` days, most recent first."""
        since = utcnow() - timedelta(days=days)
        query = (
            self._base_query()
            .where(Patient.last_visit_at.is_not(None), Patient.last_visit_at >= since)
            .order_by(Patient.last_visit_at.desc())
            .limit(limit)
        )
        return list(self.db.execute(query).scalars().all())

    def _check_patient_limit(self) -> None:
        tenant = self.db.get(Tenant, self.tenant_id)
        if tenant is not None and tenant.max_patients is not None and self.count() >= tenant.max_patients:
            raise AuthorizationError("Patient limit reached for the hospital's subscription plan")

    def create_patient(self, data: PatientCreate, created_by: int) -> Patient:
        self._check_patient_limit()
        return self.create(data.model_dump(), created_by=created_by)

    def update_patient(self, patient_id: int, data: PatientUpdate) -> Patient:
        return self.update(patient_id, data.model_dump(exclude_unset=True))
