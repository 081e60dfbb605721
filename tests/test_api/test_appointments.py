"""
API tests for the Appointment module.

Covers creation (always Scheduled), the status lifecycle, cancellation,
upcoming list, filters and cross-hospital references.
"""

from datetime import date, timedelta

import pytest
from fastapi import status

from ehrcloud.models import Appointment, Patient
from ehrcloud.models.enums import AppointmentStatus


@pytest.fixture
def appointment_payload(patient_h1, doctor_h1):
    return {
        "patient_id": patient_h1.id,
        "doctor_id": doctor_h1.id,
        "appointment_date": (date.today() + timedelta(days=7)).isoformat(),
        "appointment_time": "14:15",
        "reason": "Follow-up consultation",
    }


def set_status(db_session, appointment, new_status):
    appointment.status = new_status
    db_session.commit()


# =============================================================================
# CREATE
# =============================================================================

class TestCreateAppointment:
    """POST /api/v1/appointments"""

    def test_create_starts_scheduled(self, client, staff_user_h1, appointment_payload, auth_headers):
        response = client.post(
            "/api/v1/appointments",
            json={**appointment_payload, "status": "Completed"},
            headers=auth_headers(staff_user_h1),
        )
        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()["data"]
        assert data["status"] == "Scheduled"
        assert data["duration_minutes"] == 30
        assert data["patient"]["first_name"] == "Alice"
        assert data["created_by"] == staff_user_h1.id

    def test_nurse_cannot_schedule(self, client, nurse_h1, appointment_payload, auth_headers):
        response = client.post("/api/v1/appointments", json=appointment_payload, headers=auth_headers(nurse_h1))
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_doctor_of_other_hospital(self, client, owner_h1, patient_h1, doctor_h2, auth_headers, db_session):
        response = client.post(
            "/api/v1/appointments",
            json={
                "patient_id": patient_h1.id,
                "doctor_id": doctor_h2.id,
                "appointment_date": (date.today() + timedelta(days=1)).isoformat(),
                "appointment_time": "09:00",
                "reason": "Consultation",
            },
            headers=auth_headers(owner_h1),
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["message"] == "Doctor not found"
        db_session.expire_all()
        assert db_session.query(Appointment).count() == 0

    def test_patient_of_other_hospital(self, client, owner_h1, patient_h2, doctor_h1, auth_headers):
        response = client.post(
            "/api/v1/appointments",
            json={
                "patient_id": patient_h2.id,
                "doctor_id": doctor_h1.id,
                "appointment_date": (date.today() + timedelta(days=1)).isoformat(),
                "appointment_time": "09:00",
                "reason": "Consultation",
            },
            headers=auth_headers(owner_h1),
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["message"] == "Patient not found"

    @pytest.mark.parametrize("time_value", ["9:00", "24:00", "12:60", "noon"])
    def test_invalid_time(self, client, owner_h1, appointment_payload, auth_headers, time_value):
        response = client.post(
            "/api/v1/appointments",
            json={**appointment_payload, "appointment_time": time_value},
            headers=auth_headers(owner_h1),
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["errors"][0]["field"] == "appointment_time"

    def test_past_date(self, client, owner_h1, appointment_payload, auth_headers):
        response = client.post(
            "/api/v1/appointments",
            json={**appointment_payload, "appointment_date": (date.today() - timedelta(days=1)).isoformat()},
            headers=auth_headers(owner_h1),
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST


# =============================================================================
# STATUS LIFECYCLE
# =============================================================================

class TestAppointmentLifecycle:
    """PUT /api/v1/appointments/{id} with a status, DELETE /api/v1/appointments/{id}"""

    def test_confirm_then_complete(self, client, doctor_user_h1, appointment_h1, auth_headers, db_session):
        headers = auth_headers(doctor_user_h1)
        url = f"/api/v1/appointments/{appointment_h1.id}"

        assert client.put(url, json={"status": "Confirmed"}, headers=headers).status_code == status.HTTP_200_OK
        response = client.put(url, json={"status": "Completed"}, headers=headers)
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["status"] == "Completed"

        db_session.expire_all()
        patient = db_session.get(Patient, appointment_h1.patient_id)
        assert patient.last_visit_at is not None

    def test_cancelled_is_terminal(self, client, owner_h1, appointment_h1, auth_headers, db_session):
        """Scheduled -> Cancelled, then Cancelled -> Confirmed is refused."""
        headers = auth_headers(owner_h1)
        url = f"/api/v1/appointments/{appointment_h1.id}"

        response = client.delete(url, headers=headers)
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["message"] == "Appointment cancelled successfully"

        response = client.put(url, json={"status": "Confirmed", "notes": "should not stick"}, headers=headers)
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        body = response.json()
        assert body["success"] is False
        assert body["errors"][0]["field"] == "status"

        db_session.expire_all()
        appointment = db_session.get(Appointment, appointment_h1.id)
        assert appointment.status == AppointmentStatus.CANCELLED
        assert appointment.notes is None

    def test_cannot_complete_scheduled(self, client, owner_h1, appointment_h1, auth_headers):
        response = client.put(
            f"/api/v1/appointments/{appointment_h1.id}",
            json={"status": "Completed"},
            headers=auth_headers(owner_h1),
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "Scheduled" in response.json()["message"]

    def test_same_status_is_accepted(self, client, owner_h1, appointment_h1, auth_headers):
        response = client.put(
            f"/api/v1/appointments/{appointment_h1.id}",
            json={"status": "Scheduled", "location": "Room 4"},
            headers=auth_headers(owner_h1),
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["location"] == "Room 4"

    def test_cannot_cancel_completed(self, client, owner_h1, appointment_h1, auth_headers, db_session):
        set_status(db_session, appointment_h1, AppointmentStatus.COMPLETED)

        response = client.delete(f"/api/v1/appointments/{appointment_h1.id}", headers=auth_headers(owner_h1))
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_other_hospital_cannot_cancel(self, client, owner_h2, appointment_h1, auth_headers, db_session):
        response = client.delete(f"/api/v1/appointments/{appointment_h1.id}", headers=auth_headers(owner_h2))
        assert response.status_code == status.HTTP_404_NOT_FOUND

        db_session.expire_all()
        assert db_session.get(Appointment, appointment_h1.id).status == AppointmentStatus.SCHEDULED

    def test_complete_stamps_reassigned_patient(
        self, client, owner_h1, appointment_h1, patient_h1, make_patient, tenant_h1, auth_headers, db_session
    ):
        set_status(db_session, appointment_h1, AppointmentStatus.CONFIRMED)
        other = make_patient(tenant_h1, first_name="Chloe", last_name="Bernard")

        response = client.put(
            f"/api/v1/appointments/{appointment_h1.id}",
            json={"patient_id": other.id, "status": "Completed"},
            headers=auth_headers(owner_h1),
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["patient_id"] == other.id

        db_session.expire_all()
        assert db_session.get(Patient, other.id).last_visit_at is not None
        assert db_session.get(Patient, patient_h1.id).last_visit_at is None

    @pytest.mark.parametrize("field", ["status", "patient_id", "appointment_date", "reason"])
    def test_null_on_required_field(self, client, owner_h1, appointment_h1, auth_headers, db_session, field):
        response = client.put(
            f"/api/v1/appointments/{appointment_h1.id}",
            json={field: None},
            headers=auth_headers(owner_h1),
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert [e["field"] for e in response.json()["errors"]] == [field]

        db_session.expire_all()
        appointment = db_session.get(Appointment, appointment_h1.id)
        assert appointment.status == AppointmentStatus.SCHEDULED
        assert appointment.reason == "Annual check-up"


# =============================================================================
# LISTS
# =============================================================================

class TestListAppointments:
    """GET /api/v1/appointments, GET /api/v1/appointments/upcoming"""

    def test_filter_by_status(self, client, nurse_h1, appointment_h1, auth_headers):
        headers = auth_headers(nurse_h1)

        response = client.get("/api/v1/appointments?status=Scheduled", headers=headers)
        assert [a["id"] for a in response.json()["data"]] == [appointment_h1.id]

        response = client.get("/api/v1/appointments?status=Cancelled", headers=headers)
        assert response.json()["data"] == []

    def test_date_range(self, client, nurse_h1, appointment_h1, auth_headers):
        day = appointment_h1.appointment_date.isoformat()
        response = client.get(
            f"/api/v1/appointments?start_date={day}&end_date={day}", headers=auth_headers(nurse_h1)
        )
        assert response.json()["pagination"]["total"] == 1

    def test_inverted_date_range(self, client, nurse_h1, auth_headers):
        response = client.get(
            "/api/v1/appointments?start_date=2026-05-10&end_date=2026-05-01", headers=auth_headers(nurse_h1)
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["errors"] == [
            {"field": "start_date", "message": "Start date must be on or before end date"}
        ]

    def test_upcoming(self, client, owner_h1, appointment_h1, db_session, tenant_h1, auth_headers):
        past = Appointment(
            tenant_id=tenant_h1.id,
            patient_id=appointment_h1.patient_id,
            doctor_id=appointment_h1.doctor_id,
            appointment_date=date.today() - timedelta(days=2),
            appointment_time="08:00",
            reason="Old visit",
            status=AppointmentStatus.SCHEDULED,
        )
        cancelled = Appointment(
            tenant_id=tenant_h1.id,
            patient_id=appointment_h1.patient_id,
            doctor_id=appointment_h1.doctor_id,
            appointment_date=date.today() + timedelta(days=1),
            appointment_time="08:00",
            reason="Cancelled visit",
            status=AppointmentStatus.CANCELLED,
        )
        db_session.add_all([past, cancelled])
        db_session.commit()

        response = client.get("/api/v1/appointments/upcoming", headers=auth_headers(owner_h1))
        assert [a["id"] for a in response.json()["data"]] == [appointment_h1.id]

    def test_other_hospital_sees_nothing(self, client, owner_h2, appointment_h1, auth_headers):
        response = client.get("/api/v1/appointments", headers=auth_headers(owner_h2))
        assert response.json()["data"] == []
        response = client.get(f"/api/v1/appointments/{appointment_h1.id}", headers=auth_headers(owner_h2))
        assert response.status_code == status.HTTP_404_NOT_FOUND
