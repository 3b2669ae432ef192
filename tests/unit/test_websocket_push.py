import asyncio
import uuid
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from geokml.api.app import create_app
from geokml.api.websocket import WebSocketConnection, pump_until_closed
from geokml.database.models import JobStatus
from geokml.jobs.service import JobService
from geokml.notifications.hub import NotificationHub
from geokml.notifications.models import JobStatusEvent

JOB_ID = uuid.UUID("11111111-1111-1111-1111-111111111111")


@pytest.fixture()
def hub() -> NotificationHub:
    return NotificationHub(default_user_id="anonymous")


@pytest.fixture()
def client(hub: NotificationHub) -> TestClient:
    return TestClient(create_app(MagicMock(spec=JobService), hub))


class TestPushChannel:
    def test_welcome_uses_query_user_id(self, client: TestClient) -> None:
        with client.websocket_connect("/ws?userId=alice") as ws:
            assert ws.receive_json() == {"type": "WELCOME", "userId": "alice"}

    def test_welcome_defaults_user_id(self, client: TestClient) -> None:
        with client.websocket_connect("/ws") as ws:
            assert ws.receive_json() == {"type": "WELCOME", "userId": "anonymous"}

    def test_job_event_reaches_connected_user(
        self, client: TestClient, hub: NotificationHub
    ) -> None:
        with client.websocket_connect("/ws?userId=alice") as ws:
            ws.receive_json()
            ws.send_text("hello?")
            hub.notify_user("alice", JobStatusEvent(job_id=JOB_ID, status=JobStatus.PROCESSING))

            assert ws.receive_json() == {
                "type": "JOB_STATUS",
                "jobId": str(JOB_ID),
                "jobType": "CONVERT",
                "status": "PROCESSING",
            }

    def test_connection_released_on_close(
        self, client: TestClient, hub: NotificationHub
    ) -> None:
        with client.websocket_connect("/ws?userId=bob") as ws:
            ws.receive_json()
            assert hub.connection_count("bob") == 1

        assert hub.connection_count("bob") == 0


class ClosedSocket:
    def __init__(self, user_id: str) -> None:
        self.query_params = {"userId": user_id}

    async def send_text(self, text: str) -> None:
        raise RuntimeError("Cannot call 'send' once a close message has been sent.")


class TestWebSocketConnection:
    def test_send_failure_closes_connection_and_drops_later_messages(self) -> None:
        async def scenario() -> WebSocketConnection:
            connection = WebSocketConnection(ClosedSocket("alice"), asyncio.get_running_loop())
            connection.send_text("first")
            await connection.pump()
            connection.send_text("second")
            await asyncio.sleep(0)
            return connection

        connection = asyncio.run(scenario())

        assert connection.is_closed
        assert connection._outbox.empty()

    def test_failed_pump_releases_hub_registration(self) -> None:
        hub = NotificationHub(default_user_id="anonymous")

        async def scenario() -> None:
            connection = WebSocketConnection(ClosedSocket("alice"), asyncio.get_running_loop())
            hub.connect(connection)
            assert hub.connection_count("alice") == 1
            await pump_until_closed(connection, hub)

        asyncio.run(scenario())

        assert hub.connection_count("alice") == 0
