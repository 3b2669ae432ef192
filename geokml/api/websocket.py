import asyncio
from collections.abc import Mapping

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from geokml.logging.logger import Log
from geokml.notifications.hub import NotificationHub

router = APIRouter()


class WebSocketConnection:
    """Adapts a FastAPI websocket to the hub's PushConnection protocol.

    send_text may be called from any thread (the worker runs in its own);
    messages go through an outbox that is drained on the event loop. Once a
    send fails the connection is closed and later messages are dropped.
    """

    def __init__(self, websocket: WebSocket, loop: asyncio.AbstractEventLoop) -> None:
        self._websocket = websocket
        self._loop = loop
        self._outbox: asyncio.Queue[str] = asyncio.Queue()
        self._closed = False

    @property
    def query_params(self) -> Mapping[str, str]:
        return self._websocket.query_params

    @property
    def is_closed(self) -> bool:
        return self._closed

    def send_text(self, text: str) -> None:
        if self._closed:
            return
        self._loop.call_soon_threadsafe(self._outbox.put_nowait, text)

    async def pump(self) -> None:
        """Forward queued messages to the client until a send fails."""
        while True:
            text = await self._outbox.get()
            try:
                await self._websocket.send_text(text)
            except (WebSocketDisconnect, RuntimeError) as exc:
                Log.debug(f"Stopped pushing to closed websocket: {exc}")
                self._closed = True
                return


async def pump_until_closed(connection: WebSocketConnection, hub: NotificationHub) -> None:
    """Drain the connection's outbox, then release it from the hub."""
    await connection.pump()
    hub.disconnect(connection)


@router.websocket("/ws")
async def push_channel(websocket: WebSocket) -> None:
    hub: NotificationHub = websocket.app.state.hub
    await websocket.accept()
    connection = WebSocketConnection(websocket, asyncio.get_running_loop())
    sender = asyncio.create_task(pump_until_closed(connection, hub))
    hub.connect(connection)
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            hub.receive(connection, message.get("text") or "")
    except WebSocketDisconnect:
        pass
    finally:
        hub.disconnect(connection)
        sender.cancel()
