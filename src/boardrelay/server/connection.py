from __future__ import annotations

import asyncio
import uuid
from collections.abc import Callable

from fastapi import WebSocket, WebSocketDisconnect
from starlette.websockets import WebSocketState

from .log import get_logger

logger = get_logger(__name__)

# Close codes used when the server drops a connection.
CLOSE_GOING_AWAY = 1001  # missed heartbeat, shutdown
CLOSE_INTERNAL_ERROR = 1011  # reader or writer failed


class Connection:
    """
    One live client channel.

    Outbound frames go through a per-connection queue drained by a single
    writer task, so `send()` never blocks the caller and frames reach the peer
    in the order they were generated.
    """

    def __init__(self, websocket: WebSocket) -> None:
        self.websocket = websocket
        self.id = uuid.uuid4().hex[:10]
        self._outbox: asyncio.Queue[str] = asyncio.Queue()
        self._terminated = asyncio.Event()

    def __repr__(self) -> str:
        return f"Connection(id={self.id!r})"

    @property
    def peer(self) -> str | None:
        client = self.websocket.client
        return client.host if client else None

    @property
    def is_open(self) -> bool:
        return (
            not self._terminated.is_set()
            and self.websocket.client_state == WebSocketState.CONNECTED
            and self.websocket.application_state == WebSocketState.CONNECTED
        )

    def send(self, data: str) -> None:
        if not self.is_open:
            # Connection is closing; its own close handling will evict it.
            logger.debug("dropped frame for closed connection", conn=self.id)
            return
        self._outbox.put_nowait(data)

    def terminate(self) -> None:
        """Force the connection closed; `run()` returns and the caller evicts it."""
        self._terminated.set()

    async def run(self, on_message: Callable[[str], None]) -> None:
        """Pump frames until the peer leaves, a send fails, or `terminate()` is called."""
        reader = asyncio.create_task(self._read(on_message))
        writer = asyncio.create_task(self._drain())
        killed = asyncio.create_task(self._terminated.wait())
        tasks = {reader, writer, killed}
        try:
            done, _pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

        failed = False
        for task in done:
            if task.cancelled():
                continue
            exc = task.exception()
            if exc is not None and not isinstance(exc, WebSocketDisconnect):
                logger.warning("connection task failed", conn=self.id, error=repr(exc))
                failed = True

        if self._terminated.is_set():
            await self._close(CLOSE_GOING_AWAY)
        elif failed:
            await self._close(CLOSE_INTERNAL_ERROR)

    async def _read(self, on_message: Callable[[str], None]) -> None:
        while True:
            message = await self.websocket.receive()
            if message["type"] == "websocket.disconnect":
                return
            raw = message.get("text")
            if raw is None:
                raw = (message.get("bytes") or b"").decode("utf-8", errors="replace")
            on_message(raw)

    async def _drain(self) -> None:
        while True:
            data = await self._outbox.get()
            await self.websocket.send_text(data)

    async def _close(self, code: int) -> None:
        if (
            self.websocket.application_state != WebSocketState.CONNECTED
            or self.websocket.client_state != WebSocketState.CONNECTED
        ):
            return
        try:
            await self.websocket.close(code=code)
        except (RuntimeError, WebSocketDisconnect):
            # Peer already gone.
            pass
