"""
API tests for the Patient module.

Covers:
- CRUD by role (owner, doctor, staff, nurse)
- tenant isolation: records of h2 are invisible from h1 and vice versa
- the tenant of a new record always comes from the request, never the body
- pagination normalisation (page, limit, hasNext / hasPrev)
- subscription patient limit
"""

from datetime import date, timedelta

import pytest
from fastapi import status
from sqlalchemy import func, select

from ehrcloud.models import Patient
from ehrcloud.models.enums import UserRole
from ehrcloud.models.mixins import utcnow


def patient_payload(**overrides):
    payload = {
        "first_name": "Claire",
        "last_name": "Dubois",
        "date_of_birth": "1975-09-02",
        "gender": "Female",
        "phone": "+33611223344",
        "email": "claire.dubois@example.com",
        "blood_group": "ab+",
        "allergies": ["penicillin"],
    }
    payload.update(overrides)
    return payload


# =============================================================================
# CREATE
# =============================================================================

class TestCreatePatient:
    """POST /api/v1/patients"""

    def test_create_as_staff(self, client, staff_user_h1, tenant_h1, auth_headers, db_session):
        response = client.post("/api/v1/patients", json=patient_payload(), headers=auth_headers(staff_user_h1))

        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Patient created successfully"
        assert body["data"]["tenant_id"] == tenant_h1.id
        assert body["data"]["blood_group"] == "AB+"

        db_session.expire_all()
        patient = db_session.get(Patient, body["data"]["id"])
        assert patient.created_by == staff_user_h1.id

    def test_body_tenant_is_ignored(self, client, owner_h1, tenant_h1, tenant_h2, auth_headers):
        """A tenant_id sent by the client never reaches the row."""
        response = client.post(
            "/api/v1/patients",
            json=patient_payload(tenant_id=tenant_h2.id),
            headers=auth_headers(owner_h1),
        )
        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["data"]["tenant_id"] == tenant_h1.id

    def test_nurse_cannot_create(self, client, nurse_h1, auth_headers, db_session):
        response = client.post("/api/v1/patients", json=patient_payload(), headers=auth_headers(nurse_h1))

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["success"] is False
        db_session.expire_all()
        assert db_session.scalar(select(func.count()).select_from(Patient)) == 0

    def test_missing_fields(self, client, owner_h1, auth_headers):
        response = client.post(
            "/api/v1/patients",
            json={"first_name": "Claire"},
            headers=auth_headers(owner_h1),
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        body = response.json()
        assert body["message"] == "Validation errors"
        fields = {error["field"] for error in body["errors"]}
        assert {"last_name", "date_of_birth", "gender", "phone"} <= fields

    def test_future_birth_date(self, client, owner_h1, auth_headers):
        tomorrow = (date.today() + timedelta(days=1)).isoformat()
        response = client.post(
            "/api/v1/patients",
            json=patient_payload(date_of_birth=tomorrow),
            headers=auth_headers(owner_h1),
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_patient_limit(self, client, make_tenant, make_user, make_patient, auth_headers):
        tenant = make_tenant("small", max_patients=1)
        owner = make_user(tenant, UserRole.HOSPITAL_OWNER, "owner@small.example.com")
        make_patient(tenant)

        response = client.post("/api/v1/patients", json=patient_payload(), headers=auth_headers(owner))
        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert "limit" in response.json()["message"]


# =============================================================================
# READ / LIST
# =============================================================================

class TestListPatients:
    """GET /api/v1/patients"""

    def test_lists_only_own_hospital(self, client, owner_h1, owner_h2, patient_h1, patient_h2, auth_headers):
        response = client.get("/api/v1/patients", headers=auth_headers(owner_h1))
        assert response.status_code == status.HTTP_200_OK
        ids = [p["id"] for p in response.json()["data"]]
        assert ids == [patient_h1.id]

        response = client.get("/api/v1/patients", headers=auth_headers(owner_h2))
        ids = [p["id"] for p in response.json()["data"]]
        assert ids == [patient_h2.id]

    def test_search(self, client, nurse_h1, tenant_h1, make_patient, auth_headers):
        make_patient(tenant_h1, first_name="Alice", last_name="Martin")
        make_patient(tenant_h1, first_name="Jean", last_name="Valjean", phone="+33600000777")

        response = client.get("/api/v1/patients?search=valj", headers=auth_headers(nurse_h1))
        data = response.json()["data"]
        assert [p["last_name"] for p in data] == ["Valjean"]

    def test_pagination_metadata(self, client, owner_h1, tenant_h1, make_patient, auth_headers):
        for i in range(5):
            make_patient(tenant_h1, first_name=f"Patient{i}")

        response = client.get("/api/v1/patients?page=2&limit=2", headers=auth_headers(owner_h1))
        body = response.json()
        assert len(body["data"]) == 2
        assert body["pagination"] == {
            "page": 2, "limit": 2, "total": 5, "pages": 3, "hasNext": True, "hasPrev": True,
        }

    def test_out_of_range_pagination_is_normalised(self, client, owner_h1, patient_h1, auth_headers):
        headers = auth_headers(owner_h1)

        pagination = client.get("/api/v1/patients?page=0&limit=0", headers=headers).json()["pagination"]
        assert pagination["page"] == 1
        assert pagination["limit"] == 10
        assert pagination["hasPrev"] is False

        pagination = client.get("/api/v1/patients?limit=1000", headers=headers).json()["pagination"]
        assert pagination["limit"] == 100

    def test_empty_page(self, client, owner_h1, auth_headers):
        body = client.get("/api/v1/patients", headers=auth_headers(owner_h1)).json()
        assert body["data"] == []
        assert body["pagination"]["pages"] == 0
        assert body["pagination"]["hasNext"] is False

    def test_recent(self, client, doctor_user_h1, tenant_h1, make_patient, auth_headers):
        seen = make_patient(tenant_h1, first_name="Recent", last_visit_at=utcnow() - timedelta(days=2))
        make_patient(tenant_h1, first_name="Old", last_visit_at=utcnow() - timedelta(days=30))

        response = client.get("/api/v1/patients/recent", headers=auth_headers(doctor_user_h1))
        assert [p["id"] for p in response.json()["data"]] == [seen.id]


class TestGetPatient:
    """GET /api/v1/patients/{id}"""

    def test_get(self, client, nurse_h1, patient_h1, auth_headers):
        response = client.get(f"/api/v1/patients/{patient_h1.id}", headers=auth_headers(nurse_h1))
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["first_name"] == "Alice"

    def test_other_hospital_record_is_not_found(self, client, owner_h1, patient_h2, auth_headers):
        response = client.get(f"/api/v1/patients/{patient_h2.id}", headers=auth_headers(owner_h1))
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"success": False, "message": "Patient not found"}

    def test_unknown_id(self, client, owner_h1, auth_headers):
        response = client.get("/api/v1/patients/9999", headers=auth_headers(owner_h1))
        assert response.status_code == status.HTTP_404_NOT_FOUND


# =============================================================================
# UPDATE / DELETE
# =============================================================================

class TestUpdatePatient:
    """PUT /api/v1/patients/{id}"""

    def test_partial_update(self, client, doctor_user_h1, patient_h1, auth_headers, db_session):
        response = client.put(
            f"/api/v1/patients/{patient_h1.id}",
            json={"notes": "Allergic to latex", "allergies": ["latex"]},
            headers=auth_headers(doctor_user_h1),
        )
        assert response.status_code == status.HTTP_200_OK

        db_session.expire_all()
        patient = db_session.get(Patient, patient_h1.id)
        assert patient.notes == "Allergic to latex"
        assert patient.allergies == ["latex"]
        assert patient.first_name == "Alice"

    def test_cannot_update_other_hospital(self, client, owner_h1, patient_h2, auth_headers, db_session):
        response = client.put(
            f"/api/v1/patients/{patient_h2.id}",
            json={"notes": "hijacked"},
            headers=auth_headers(owner_h1),
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND

        db_session.expire_all()
        assert db_session.get(Patient, patient_h2.id).notes is None

    @pytest.mark.parametrize("field", ["first_name", "phone", "status", "allergies"])
    def test_null_on_required_field(self, client, owner_h1, patient_h1, auth_headers, db_session, field):
        """Omitting a field keeps it; sending null is a validation error, not a server error."""
        response = client.put(
            f"/api/v1/patients/{patient_h1.id}",
            json={field: None},
            headers=auth_headers(owner_h1),
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        body = response.json()
        assert body["message"] == "Validation errors"
        assert [e["field"] for e in body["errors"]] == [field]

        db_session.expire_all()
        assert db_session.get(Patient, patient_h1.id).first_name == "Alice"

    def test_null_on_optional_field_clears_it(self, client, owner_h1, make_patient, tenant_h1, auth_headers, db_session):
        patient = make_patient(tenant_h1, notes="To be cleared")
        response = client.put(
            f"/api/v1/patients/{patient.id}",
            json={"notes": None},
            headers=auth_headers(owner_h1),
        )
        assert response.status_code == status.HTTP_200_OK

        db_session.expire_all()
        assert db_session.get(Patient, patient.id).notes is None


class TestDeletePatient:
    """DELETE /api/v1/patients/{id}"""

    def test_owner_deletes(self, client, owner_h1, patient_h1, auth_headers, db_session):
        patient_id = patient_h1.id
        response = client.delete(f"/api/v1/patients/{patient_id}", headers=auth_headers(owner_h1))
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"success": True, "message": "Patient deleted successfully"}

        db_session.expire_all()
        assert db_session.get(Patient, patient_id) is None

    def test_doctor_cannot_delete(self, client, doctor_user_h1, patient_h1, auth_headers, db_session):
        response = client.delete(f"/api/v1/patients/{patient_h1.id}", headers=auth_headers(doctor_user_h1))
        assert response.status_code == status.HTTP_403_FORBIDDEN

        db_session.expire_all()
        assert db_session.get(Patient, patient_h1.id) is not None

    def test_cannot_delete_other_hospital(self, client, owner_h1, patient_h2, auth_headers, db_session):
        response = client.delete(f"/api/v1/patients/{patient_h2.id}", headers=auth_headers(owner_h1))
        assert response.status_code == status.HTTP_404_NOT_FOUND

        db_session.expire_all()
        assert db_session.get(Patient, patient_h2.id) is not None
