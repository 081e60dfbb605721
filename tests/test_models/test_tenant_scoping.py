"""
Model-level tenant isolation:
- tenant_id cannot be moved once set
- a session scoped to a tenant only ever loads that tenant's rows
- TenantScopedService stamps the tenant and hides other hospitals' records
"""

from datetime import date

import pytest
from sqlalchemy import select

from ehrcloud.api.v1.dependencies import PaginationParams
from ehrcloud.api.v1.patient.services import PatientService
from ehrcloud.core.exceptions import NotFoundError
from ehrcloud.database.session import SKIP_TENANT_FILTER, scope_session_to_tenant
from ehrcloud.models import Appointment, Doctor, Patient
from ehrcloud.models.enums import Gender


class TestTenantIdImmutability:

    def test_cannot_move_record(self, patient_h1, tenant_h2):
        with pytest.raises(ValueError, match="immutable"):
            patient_h1.tenant_id = tenant_h2.id

    def test_same_value_is_accepted(self, patient_h1, tenant_h1):
        patient_h1.tenant_id = tenant_h1.id
        assert patient_h1.tenant_id == tenant_h1.id


class TestSessionTenantFilter:

    def test_scoped_session_sees_one_tenant(self, context, patient_h1, patient_h2, tenant_h1):
        session = context.session_factory()
        try:
            scope_session_to_tenant(session, tenant_h1.id)
            patients = session.execute(select(Patient)).scalars().all()
            assert [p.id for p in patients] == [patient_h1.id]
            assert session.get(Patient, patient_h2.id) is None
        finally:
            session.close()

    def test_filter_applies_to_joins(self, context, appointment_h1, doctor_h2, tenant_h1):
        session = context.session_factory()
        try:
            scope_session_to_tenant(session, tenant_h1.id)
            doctors = session.execute(
                select(Doctor).join(Appointment, Appointment.doctor_id == Doctor.id, isouter=True)
            ).scalars().unique().all()
            assert {d.tenant_id for d in doctors} == {tenant_h1.id}
        finally:
            session.close()

    def test_skip_option(self, context, patient_h1, patient_h2, tenant_h1):
        session = context.session_factory()
        try:
            scope_session_to_tenant(session, tenant_h1.id)
            patients = session.execute(
                select(Patient), execution_options={SKIP_TENANT_FILTER: True}
            ).scalars().all()
            assert len(patients) == 2
        finally:
            session.close()

    def test_unscoped_session_sees_everything(self, db_session, patient_h1, patient_h2):
        assert len(db_session.execute(select(Patient)).scalars().all()) == 2


class TestTenantScopedService:

    def test_create_stamps_tenant(self, db_session, tenant_h1, tenant_h2):
        service = PatientService(db_session, tenant_h1.id)
        patient = service.create({
            "first_name": "Nina",
            "last_name": "Petit",
            "date_of_birth": date(1990, 1, 1),
            "gender": Gender.FEMALE,
            "phone": "+33600000000",
            "tenant_id": tenant_h2.id,
            "id": 12345,
        })
        assert patient.tenant_id == tenant_h1.id
        assert patient.id != 12345

    def test_get_by_id_hides_other_tenant(self, db_session, tenant_h1, patient_h2):
        with pytest.raises(NotFoundError):
            PatientService(db_session, tenant_h1.id).get_by_id(patient_h2.id)

    def test_get_all(self, db_session, tenant_h1, patient_h1, patient_h2):
        items, total = PatientService(db_session, tenant_h1.id).get_all(PaginationParams(page=1, limit=10))
        assert total == 1
        assert items == [patient_h1]

    def test_update_ignores_protected_fields(self, db_session, tenant_h1, tenant_h2, patient_h1):
        service = PatientService(db_session, tenant_h1.id)
        patient = service.update(patient_h1.id, {"notes": "ok", "tenant_id": tenant_h2.id})
        assert patient.notes == "ok"
        assert patient.tenant_id == tenant_h1.id

    def test_related_lookup_is_scoped(self, db_session, tenant_h1, doctor_h2):
        with pytest.raises(NotFoundError, match="Doctor not found"):
            PatientService(db_session, tenant_h1.id).get_related(Doctor, doctor_h2.id, "Doctor not found")
