"""
Every answer, success or failure, uses the JSON envelope:
{"success": bool, "message": str?, "data": ..., "errors": [...]?, "pagination": {...}?}
"""

from fastapi import status
from fastapi.testclient import TestClient

from conftest import tenant_headers


class TestErrorEnvelope:

    def test_unknown_route(self, client):
        response = client.get("/api/v1/does-not-exist")
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"success": False, "message": "Not Found"}

    def test_no_tenant_named(self, client, owner_h1, token_for):
        response = client.get("/api/v1/patients", headers={"Authorization": f"Bearer {token_for(owner_h1)}"})
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["message"] == "Hospital not found"

    def test_unknown_hospital_before_credentials(self, client):
        """An unknown hospital answers 404 even without a token."""
        response = client.get("/api/v1/patients", headers=tenant_headers("ghost"))
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_reserved_label_is_not_a_hospital(self, client):
        response = client.get("/api/v1/patients", headers=tenant_headers("www"))
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_body_validation_is_400(self, client, owner_h1, auth_headers):
        response = client.post("/api/v1/patients", json={"gender": "Robot"}, headers=auth_headers(owner_h1))
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Validation errors"
        assert all(set(error) == {"field", "message"} for error in body["errors"])
        assert "gender" in {error["field"] for error in body["errors"]}

    def test_malformed_json(self, client, owner_h1, auth_headers):
        response = client.post(
            "/api/v1/patients",
            content=b"{not json",
            headers={**auth_headers(owner_h1), "Content-Type": "application/json"},
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_unexpected_error_is_500(self, app, context):
        @app.get("/api/v1/explode")
        def explode():
            raise RuntimeError("database password is hunter2")

        with TestClient(app, raise_server_exceptions=False) as test_client:
            response = test_client.get("/api/v1/explode")

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {"success": False, "message": "Server error"}


class TestSuccessEnvelope:

    def test_health(self, client):
        response = client.get("/api/v1/health")
        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["success"] is True
        assert body["data"]["status"] == "healthy"
        assert body["data"]["database"] == "connected"

    def test_root(self, client):
        assert client.get("/").json()["data"]["status"] == "running"

    def test_unset_members_are_left_out(self, client, nurse_h1, patient_h1, auth_headers):
        body = client.get(f"/api/v1/patients/{patient_h1.id}", headers=auth_headers(nurse_h1)).json()
        assert set(body) == {"success", "data"}

