"""
API tests for reports and reminders.
"""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi import status

from ehrcloud.models import Reminder, Report
from ehrcloud.models.enums import ReminderStatus


# =============================================================================
# REPORTS
# =============================================================================

@pytest.fixture
def report_h1(client, doctor_user_h1, patient_h1, auth_headers):
    response = client.post(
        "/api/v1/reports",
        json={
            "title": "Blood panel",
            "report_type": "lab",
            "content": "Haemoglobin within range.",
            "patient_id": patient_h1.id,
            "data": {"hb": 13.5},
        },
        headers=auth_headers(doctor_user_h1),
    )
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()["data"]


class TestReports:
    """/api/v1/reports"""

    def test_create(self, report_h1, doctor_user_h1, tenant_h1):
        assert report_h1["tenant_id"] == tenant_h1.id
        assert report_h1["created_by"] == doctor_user_h1.id
        assert report_h1["data"] == {"hb": 13.5}

    def test_filter_by_type(self, client, staff_user_h1, report_h1, auth_headers):
        headers = auth_headers(staff_user_h1)
        assert len(client.get("/api/v1/reports?type=lab", headers=headers).json()["data"]) == 1
        assert client.get("/api/v1/reports?type=radiology", headers=headers).json()["data"] == []

    def test_nurse_cannot_read(self, client, nurse_h1, auth_headers):
        response = client.get("/api/v1/reports", headers=auth_headers(nurse_h1))
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_patient_of_other_hospital(self, client, owner_h1, patient_h2, auth_headers):
        response = client.post(
            "/api/v1/reports",
            json={"title": "Summary", "report_type": "medical", "content": "n/a", "patient_id": patient_h2.id},
            headers=auth_headers(owner_h1),
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_only_owner_deletes(self, client, doctor_user_h1, owner_h1, report_h1, auth_headers, db_session):
        url = f"/api/v1/reports/{report_h1['id']}"

        response = client.delete(url, headers=auth_headers(doctor_user_h1))
        assert response.status_code == status.HTTP_403_FORBIDDEN

        response = client.delete(url, headers=auth_headers(owner_h1))
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["message"] == "Report deleted successfully"

        db_session.expire_all()
        assert db_session.get(Report, report_h1["id"]) is None

    def test_other_hospital_owner_cannot_delete(self, client, owner_h2, report_h1, auth_headers):
        response = client.delete(f"/api/v1/reports/{report_h1['id']}", headers=auth_headers(owner_h2))
        assert response.status_code == status.HTTP_404_NOT_FOUND


# =============================================================================
# REMINDERS
# =============================================================================

def in_hours(hours):
    return (datetime.now(timezone.utc) + timedelta(hours=hours)).isoformat()


class TestReminders:
    """/api/v1/reminders"""

    def test_patient_inferred_from_appointment(self, client, staff_user_h1, appointment_h1, auth_headers):
        response = client.post(
            "/api/v1/reminders",
            json={"title": "Call patient", "remind_at": in_hours(24), "appointment_id": appointment_h1.id},
            headers=auth_headers(staff_user_h1),
        )
        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()["data"]
        assert data["patient_id"] == appointment_h1.patient_id
        assert data["status"] == "pending"
        assert data["channel"] == "in_app"

    def test_appointment_of_other_patient(self, client, staff_user_h1, appointment_h1, make_patient, tenant_h1, auth_headers):
        other = make_patient(tenant_h1, first_name="Paul")
        response = client.post(
            "/api/v1/reminders",
            json={
                "title": "Call patient",
                "remind_at": in_hours(24),
                "appointment_id": appointment_h1.id,
                "patient_id": other.id,
            },
            headers=auth_headers(staff_user_h1),
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_upcoming_filter(self, client, nurse_h1, tenant_h1, db_session, auth_headers):
        now = datetime.now(timezone.utc)
        db_session.add_all([
            Reminder(tenant_id=tenant_h1.id, title="Due soon", remind_at=now + timedelta(hours=2)),
            Reminder(tenant_id=tenant_h1.id, title="Overdue", remind_at=now - timedelta(hours=2)),
            Reminder(
                tenant_id=tenant_h1.id, title="Already sent",
                remind_at=now + timedelta(hours=3), status=ReminderStatus.SENT,
            ),
        ])
        db_session.commit()

        response = client.get("/api/v1/reminders?upcoming=true", headers=auth_headers(nurse_h1))
        assert [r["title"] for r in response.json()["data"]] == ["Due soon"]

    def test_nurse_cannot_create(self, client, nurse_h1, auth_headers):
        response = client.post(
            "/api/v1/reminders",
            json={"title": "Internal note", "remind_at": in_hours(1)},
            headers=auth_headers(nurse_h1),
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_update_and_delete(self, client, owner_h1, auth_headers, db_session):
        headers = auth_headers(owner_h1)
        created = client.post(
            "/api/v1/reminders", json={"title": "Order gloves", "remind_at": in_hours(5)}, headers=headers
        ).json()["data"]

        response = client.put(f"/api/v1/reminders/{created['id']}", json={"status": "sent"}, headers=headers)
        assert response.json()["data"]["status"] == "sent"

        response = client.delete(f"/api/v1/reminders/{created['id']}", headers=headers)
        assert response.status_code == status.HTTP_200_OK
        db_session.expire_all()
        assert db_session.get(Reminder, created["id"]) is None

    def test_null_remind_at(self, client, owner_h1, auth_headers):
        headers = auth_headers(owner_h1)
        created = client.post(
            "/api/v1/reminders", json={"title": "Call supplier", "remind_at": in_hours(2)}, headers=headers
        ).json()["data"]

        response = client.put(f"/api/v1/reminders/{created['id']}", json={"remind_at": None}, headers=headers)
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["errors"][0]["field"] == "remind_at"
