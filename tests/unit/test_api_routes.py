import uuid
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from geokml.api.app import create_app
from geokml.database.models import JobStatus
from geokml.jobs.exceptions import InvalidStatusFilterError, JobNotFoundError, JobNotReadyError
from geokml.jobs.models import (
    JobBundleView,
    JobListView,
    JobStatusView,
    JobSummary,
    OutputDownload,
    SubmitResult,
)
from geokml.jobs.service import JobService
from geokml.notifications.hub import NotificationHub

JOB_ID = uuid.UUID("11111111-1111-1111-1111-111111111111")
RECORD_ID = uuid.UUID("22222222-2222-2222-2222-222222222222")


@pytest.fixture()
def service() -> MagicMock:
    return MagicMock(spec=JobService)


@pytest.fixture()
def client(service: MagicMock) -> TestClient:
    app = create_app(service, NotificationHub(default_user_id="anonymous"))
    return TestClient(app)


class TestConvert:
    def test_accepts_submission(self, client: TestClient, service: MagicMock) -> None:
        service.submit.return_value = SubmitResult(JOB_ID, RECORD_ID, JobStatus.PENDING)
        geo = {"type": "Point", "coordinates": [1, 2]}

        response = client.post("/api/job/convert", json={"userId": "user123", "geo": geo})

        assert response.status_code == 202
        assert response.json() == {
            "jobId": str(JOB_ID),
            "geoRecordId": str(RECORD_ID),
            "status": "PENDING",
        }
        service.submit.assert_called_once_with("user123", geo)

    def test_rejects_missing_user(self, client: TestClient, service: MagicMock) -> None:
        response = client.post("/api/job/convert", json={"geo": {}})

        assert response.status_code == 422
        service.submit.assert_not_called()


class TestStatus:
    def test_found(self, client: TestClient, service: MagicMock) -> None:
        service.get_status.return_value = JobStatusView(JOB_ID, RECORD_ID, JobStatus.DONE)

        response = client.get(f"/api/job/{JOB_ID}")

        assert response.status_code == 200
        assert response.json()["status"] == "DONE"
        service.get_status.assert_called_once_with(JOB_ID)

    def test_not_found(self, client: TestClient, service: MagicMock) -> None:
        service.get_status.side_effect = JobNotFoundError(f"Job ID: {JOB_ID} not found")

        response = client.get(f"/api/job/{JOB_ID}")

        assert response.status_code == 404
        assert response.json() == {"error": f"Job ID: {JOB_ID} not found"}


class TestList:
    def test_defaults(self, client: TestClient, service: MagicMock) -> None:
        service.list_jobs.return_value = JobListView(
            page=0,
            page_size=20,
            jobs=[JobSummary(JOB_ID, None, JobStatus.FAILED, 0, "boom")],
        )

        response = client.get("/api/job")

        assert response.status_code == 200
        body = response.json()
        assert body["pageSize"] == 20
        assert body["count"] == 1
        assert body["jobs"][0]["lastError"] == "boom"
        assert body["jobs"][0]["geoRecordId"] is None
        service.list_jobs.assert_called_once_with(None, page=0, page_size=20)

    def test_passes_filter_and_paging(self, client: TestClient, service: MagicMock) -> None:
        service.list_jobs.return_value = JobListView(page=3, page_size=5)

        client.get("/api/job", params={"status": "done", "page": 3, "pageSize": 5})

        service.list_jobs.assert_called_once_with("done", page=3, page_size=5)

    def test_invalid_status(self, client: TestClient, service: MagicMock) -> None:
        service.list_jobs.side_effect = InvalidStatusFilterError("Invalid status value.")

        response = client.get("/api/job", params={"status": "nope"})

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid status value."}

    def test_negative_page_rejected(self, client: TestClient, service: MagicMock) -> None:
        assert client.get("/api/job", params={"page": -1}).status_code == 422


class TestFiles:
    def test_bundle(self, client: TestClient, service: MagicMock) -> None:
        service.get_bundle.return_value = JobBundleView(
            JOB_ID, RECORD_ID, JobStatus.DONE, '{"type": "Point"}', "<kml/>"
        )

        body = client.get(f"/api/job/{JOB_ID}/files").json()

        assert body["geoJson"] == '{"type": "Point"}'
        assert body["kml"] == "<kml/>"


class TestDownload:
    def test_attachment(self, client: TestClient, service: MagicMock) -> None:
        service.download_output.return_value = OutputDownload(f"job-{JOB_ID}.kml", "<kml/>")

        response = client.get(f"/api/job/{JOB_ID}/kml")

        assert response.status_code == 200
        assert response.text == "<kml/>"
        assert response.headers["content-type"].startswith(
            "application/vnd.google-earth.kml+xml"
        )
        assert response.headers["content-disposition"] == (
            f'attachment; filename="job-{JOB_ID}.kml"'
        )

    def test_not_ready(self, client: TestClient, service: MagicMock) -> None:
        service.download_output.side_effect = JobNotReadyError(
            "Job is not complete yet. Current status: PROCESSING"
        )

        response = client.get(f"/api/job/{JOB_ID}/kml")

        assert response.status_code == 400
        assert "PROCESSING" in response.json()["error"]


class TestDelete:
    def test_deleted(self, client: TestClient, service: MagicMock) -> None:
        response = client.delete(f"/api/job/{JOB_ID}")

        assert response.status_code == 200
        assert response.json() == {"message": "Deleted"}
        service.delete.assert_called_once_with(JOB_ID)

    def test_unknown(self, client: TestClient, service: MagicMock) -> None:
        service.delete.side_effect = JobNotFoundError("Job ID: x not found")

        assert client.delete(f"/api/job/{JOB_ID}").status_code == 404


class TestHealth:
    def test_health_without_worker(self, client: TestClient) -> None:
        assert client.get("/health").json() == {"status": "ok", "workerRunning": False}
