import json
import threading
from collections.abc import Mapping
from typing import Protocol

from geokml.logging.logger import Log
from geokml.notifications.models import JobStatusEvent, WelcomeEvent


class PushConnection(Protocol):
    """A live, server-push connection (e.g. a websocket)."""

    @property
    def query_params(self) -> Mapping[str, str]: ...

    def send_text(self, text: str) -> None: ...


class NotificationHub:
    """Per-user registry of push connections with best-effort fan-out.

    Events are delivered at most once to the connections registered at the
    time of the call. Nothing is buffered for users without a connection.
    """

    USER_ID_PARAM = "userId"

    def __init__(self, default_user_id: str) -> None:
        self._default_user_id = default_user_id
        self._connections: dict[str, set[PushConnection]] = {}
        self._lock = threading.Lock()

    def connect(self, connection: PushConnection) -> str:
        """Register the connection and send a welcome. Returns the resolved user id."""
        user_id = connection.query_params.get(self.USER_ID_PARAM) or self._default_user_id
        with self._lock:
            self._connections.setdefault(user_id, set()).add(connection)
        Log.info("Push connection opened", user_id=user_id)
        self._send(connection, json.dumps(WelcomeEvent(user_id=user_id).to_payload()))
        return user_id

    def disconnect(self, connection: PushConnection) -> None:
        """Remove the connection from every user it may be filed under."""
        with self._lock:
            for user_id in list(self._connections):
                sessions = self._connections[user_id]
                sessions.discard(connection)
                if not sessions:
                    del self._connections[user_id]
        Log.info("Push connection closed")

    def receive(self, connection: PushConnection, text: str) -> None:
        """Accept an inbound message. The channel is server-push only."""
        Log.debug(f"Ignoring inbound push message ({len(text)} chars)")

    def notify_user(self, user_id: str, event: JobStatusEvent) -> None:
        """Push the event to every open connection of the user, if any."""
        with self._lock:
            targets = list(self._connections.get(user_id, ()))
        if not targets:
            return
        message = json.dumps(event.to_payload())
        for connection in targets:
            self._send(connection, message)

    def connection_count(self, user_id: str) -> int:
        with self._lock:
            return len(self._connections.get(user_id, ()))

    @staticmethod
    def _send(connection: PushConnection, message: str) -> None:
        try:
            connection.send_text(message)
        except Exception as exc:
            Log.warning(f"Failed to push message to connection: {exc}")
