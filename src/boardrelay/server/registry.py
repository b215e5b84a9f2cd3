from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from boardrelay.protocol.messages import BoardEvent, OutboundMsg, encode

from .errors import DuplicateConnection
from .log import get_logger

if TYPE_CHECKING:
    from .liveness import LivenessMonitor

logger = get_logger(__name__)


class Endpoint(Protocol):
    """What the registry needs from a connection (see `connection.Connection`)."""

    id: str

    @property
    def is_open(self) -> bool: ...

    def send(self, data: str) -> None: ...

    def terminate(self) -> None: ...


@dataclass
class ConnectionState:
    identity: str
    alive: bool = True


class Registry:
    """
    Live connections and their per-connection state.

    All methods are synchronous and run on the event loop, so each call is
    atomic with respect to every other callback. Do not call from other threads.
    """

    def __init__(self) -> None:
        self._conns: dict[Endpoint, ConnectionState] = {}
        self._monitor: LivenessMonitor | None = None

    def bind_monitor(self, monitor: LivenessMonitor) -> None:
        self._monitor = monitor

    def admit(self, conn: Endpoint, identity: str) -> ConnectionState:
        if conn in self._conns:
            raise DuplicateConnection(f"connection {conn.id} already registered")
        state = ConnectionState(identity=identity)
        self._conns[conn] = state
        if len(self._conns) == 1 and self._monitor is not None:
            logger.info("first connection, starting liveness monitor")
            self._monitor.start()
        return state

    def evict(self, conn: Endpoint) -> ConnectionState | None:
        """Remove `conn`; returns its state, or None if it was already gone."""
        state = self._conns.pop(conn, None)
        if state is not None and not self._conns and self._monitor is not None:
            logger.info("last connection left, stopping liveness monitor")
            self._monitor.stop()
        return state

    def lookup(self, conn: Endpoint) -> ConnectionState | None:
        return self._conns.get(conn)

    def send(self, conn: Endpoint, msg: OutboundMsg | BoardEvent | str) -> None:
        conn.send(encode(msg))

    def broadcast(self, msg: OutboundMsg | BoardEvent | str, exclude: Endpoint | None = None) -> None:
        data = encode(msg)
        for conn in list(self._conns):
            if conn is exclude:
                continue
            conn.send(data)

    def items(self) -> list[tuple[Endpoint, ConnectionState]]:
        return list(self._conns.items())

    def __len__(self) -> int:
        return len(self._conns)

    def __contains__(self, conn: object) -> bool:
        return conn in self._conns
