from __future__ import annotations

import json

from boardrelay.protocol.messages import Reload, SetName, UserPresence

from .errors import MalformedMessage
from .history import HistoryBuffer
from .liveness import LivenessMonitor
from .log import get_logger
from .registry import Endpoint, Registry
from .router import MessageRouter

logger = get_logger(__name__)


class Board:
    """
    Process-scoped relay service: one registry, one history, one heartbeat.

    Created by `create_app()` and kept on `app.state.board`. Everything here
    runs on the event loop and never awaits, so no locking is needed; a
    threaded host would have to serialize calls into this object.
    """

    def __init__(
        self,
        *,
        heartbeat_interval_s: float,
        heartbeat_message: str,
        log_messages: bool = False,
    ) -> None:
        self.registry = Registry()
        self.history = HistoryBuffer()
        self.router = MessageRouter(self.registry, self.history)
        self.monitor = LivenessMonitor(
            self.registry, interval_s=heartbeat_interval_s, probe=heartbeat_message
        )
        self.registry.bind_monitor(self.monitor)
        self.heartbeat_message = heartbeat_message
        self.log_messages = log_messages

    def join(self, conn: Endpoint, identity: str) -> None:
        self.registry.admit(conn, identity)
        self.registry.send(conn, SetName(name=identity))
        # The newcomer gets its own "online" notice too.
        self.registry.broadcast(UserPresence(id=identity, status="online"))
        logger.info("connection admitted", conn=conn.id, identity=identity, connections=len(self.registry))

    def leave(self, conn: Endpoint) -> None:
        state = self.registry.evict(conn)
        if state is None:
            # Already evicted (terminate + close race).
            return
        self.registry.broadcast(UserPresence(id=state.identity, status="away"))
        logger.info("connection evicted", conn=conn.id, identity=state.identity, connections=len(self.registry))

    def receive(self, conn: Endpoint, raw: str) -> None:
        try:
            msg = json.loads(raw)
        except (ValueError, RecursionError) as e:
            logger.info("dropping malformed message", conn=conn.id, reason=f"invalid json: {type(e).__name__}")
            return

        if msg == self.heartbeat_message:
            self.monitor.acknowledge(conn)
            return

        try:
            if self.log_messages:
                logger.info("inbound", conn=conn.id, type=msg.get("type") if isinstance(msg, dict) else None)
            self.router.route(conn, msg)
        except MalformedMessage as e:
            logger.info("dropping malformed message", conn=conn.id, reason=e.reason)

    def reload(self) -> None:
        logger.info("broadcasting reload", connections=len(self.registry))
        self.registry.broadcast(Reload())

    def shutdown(self) -> None:
        self.monitor.stop()
        for conn, _state in self.registry.items():
            conn.terminate()
