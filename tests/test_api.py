"""
API tests for the FastAPI routes
"""
import pytest
from fastapi.testclient import TestClient

from examflex.config import settings
from examflex.main import app
from examflex.services import hash_password

CLIENT_AUTH = ("school-portal", "s3cr3t")


@pytest.fixture(scope="module")
def client_hash():
    return hash_password(CLIENT_AUTH[1])


@pytest.fixture
def client(monkeypatch, client_hash):
    monkeypatch.setattr(settings, "API_CLIENTS", {CLIENT_AUTH[0]: client_hash})
    with TestClient(app) as test_client:
        yield test_client


class TestHealth:

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "running"

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestAuth:
    """Every /api route requires HTTP Basic credentials"""

    def test_missing_credentials(self, client, result_payload):
        response = client.post("/api/results/process", json=result_payload)
        assert response.status_code == 401
        assert response.json()["error_code"] == "UNAUTHORIZED"
        assert response.headers["WWW-Authenticate"] == "Basic"

    def test_wrong_password(self, client, result_payload):
        response = client.post("/api/results/process", json=result_payload, auth=(CLIENT_AUTH[0], "nope"))
        assert response.status_code == 401
        assert response.json()["error"] == "Unauthorized"

    def test_unknown_client(self, client, mark_payload):
        response = client.post("/api/marks/calculate", json=mark_payload, auth=("someone", "s3cr3t"))
        assert response.status_code == 401


class TestMarkRoutes:
    """Test cases for the mark entry flow"""

    def test_config_then_process(self, client, mark_payload):
        students = mark_payload.pop("students")

        response = client.post("/api/marks/config", json=mark_payload, auth=CLIENT_AUTH)
        assert response.status_code == 202
        saved = response.json()
        assert saved["status"] == "config_saved"
        assert saved["temp_id"].startswith("temp_")

        body = {"temp_id": saved["temp_id"], "students": students}
        response = client.post("/api/marks/process", json=body, auth=CLIENT_AUTH)
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "success"
        assert data["message"] == "Marks calculated and ready to save"
        assert len(data["results"]["results"]) == 3

        # The config is consumed by the first process call
        response = client.post("/api/marks/process", json=body, auth=CLIENT_AUTH)
        assert response.status_code == 410
        assert response.json()["error_code"] == "CONFIG_EXPIRED"

    def test_unknown_temp_id(self, client):
        body = {"temp_id": "temp_missing", "students": []}
        response = client.post("/api/marks/process", json=body, auth=CLIENT_AUTH)
        assert response.status_code == 410

    def test_calculate(self, client, mark_payload):
        response = client.post("/api/marks/calculate", json=mark_payload, auth=CLIENT_AUTH)
        assert response.status_code == 200
        first = response.json()["results"]["results"][0]
        assert first["remark"] == "Pass by Grace (+3 marks)"

    def test_config_requires_subjects(self, client, mark_payload):
        mark_payload["subjects"] = []
        response = client.post("/api/marks/config", json=mark_payload, auth=CLIENT_AUTH)
        assert response.status_code == 422

    def test_null_fields_take_defaults(self, client, mark_payload):
        subject = mark_payload["subjects"][0]
        subject["grace_mark"] = None
        subject["attendance_required"] = None
        subject["exam_config"][0]["pass_mark"] = None
        subject["exam_config"][1]["conversion"] = None
        mark_payload["grade_points"][0]["grade_point"] = None

        response = client.post("/api/marks/calculate", json=mark_payload, auth=CLIENT_AUTH)
        assert response.status_code == 200
        first, _, third = response.json()["results"]["results"]
        # No grace configured: 30 stays below the threshold
        assert first["grace_mark"] == 0.0
        assert first["result_status"] == "Fail"
        # Attendance not required, so an absent status is not special
        assert third["remark"] != "Absent"

    def test_batch_limit(self, client, mark_payload, monkeypatch):
        monkeypatch.setattr(settings, "MAX_BATCH_STUDENTS", 2)
        response = client.post("/api/marks/calculate", json=mark_payload, auth=CLIENT_AUTH)
        assert response.status_code == 400
        assert response.json()["error_code"] == "BAD_REQUEST"


class TestResultAndMeritRoutes:

    def test_results_process(self, client, result_payload):
        response = client.post("/api/results/process", json=result_payload, auth=CLIENT_AUTH)
        assert response.status_code == 202
        data = response.json()
        assert data["message"] == "Marks Calculated Successfully"
        assert data["results"]["total_students"] == 2

    def test_results_null_fields_take_defaults(self, client, result_payload):
        result_payload["has_combined"] = None
        result_payload["mark_configs"][2]["overall_required_percent"] = None
        result_payload["mark_configs"][2]["is_optional"] = None
        result_payload["mark_configs"][0]["parts"][0]["pass_mark"] = None
        result_payload["students"][0]["marks"]["101"]["grace_mark"] = None
        result_payload["students"][1]["student_name"] = None

        response = client.post("/api/results/process", json=result_payload, auth=CLIENT_AUTH)
        assert response.status_code == 202
        data = response.json()["results"]
        assert data["has_combined"] is False
        anika, rafi = data["results"]
        assert anika["gpa_with_optional"] == 5.0
        assert rafi["student_name"] == "N/A"

    def test_merit_process(self, client, result_payload):
        results = client.post("/api/results/process", json=result_payload, auth=CLIENT_AUTH).json()["results"]
        body = {
            "exam_name": "Annual Exam",
            "results": results,
            "exam_config": {"merit_process_type": "total_mark_non_sequential", "group_by_section": True},
            "academic_details": {"1": {"section": "A"}, "2": {"section": "B"}},
        }
        response = client.post("/api/merit/process", json=body, auth=CLIENT_AUTH)
        assert response.status_code == 202
        merit = response.json()["results"]
        assert merit["grouped_by"] == ["section"]
        assert [s["student_id"] for s in merit["data"]["all_students"]] == [1, 2]
        assert merit["data"]["grouped"]["B"][0]["merit_position"] == 2

    def test_merit_export(self, client, result_payload, tmp_path, monkeypatch):
        from examflex.services import merit_service

        monkeypatch.setattr(merit_service, "exports_dir", tmp_path)
        results = client.post("/api/results/process", json=result_payload, auth=CLIENT_AUTH).json()["results"]
        response = client.post(
            "/api/merit/export",
            json={"exam_name": "Annual Exam", "results": results},
            auth=CLIENT_AUTH,
        )
        assert response.status_code == 200
        assert response.headers["content-type"].startswith(
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        )

    def test_merit_export_without_results(self, client):
        response = client.post("/api/merit/export", json={"exam_name": "Annual Exam"}, auth=CLIENT_AUTH)
        assert response.status_code == 400
        assert response.json()["error"] == "No results found"
