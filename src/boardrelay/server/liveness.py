from __future__ import annotations

import asyncio

from .log import get_logger
from .registry import Endpoint, Registry

logger = get_logger(__name__)


class LivenessMonitor:
    """
    Periodic heartbeat over every registered connection.

    Each tick: a connection that has not acknowledged the previous probe is
    terminated; every other one is marked not-alive and probed again. A single
    missed window is enough to drop a connection.

    The registry starts the monitor on its first admission and stops it when
    it empties; at most one timer task exists at a time.
    """

    def __init__(self, registry: Registry, *, interval_s: float, probe: str) -> None:
        self.registry = registry
        self.interval_s = interval_s
        self.probe = probe
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._loop(), name="liveness-monitor")

    def stop(self) -> None:
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()

    def acknowledge(self, conn: Endpoint) -> None:
        state = self.registry.lookup(conn)
        if state is not None:
            state.alive = True

    def tick(self) -> None:
        for conn, state in self.registry.items():
            if not state.alive:
                logger.warning("unresponsive connection, terminating", conn=conn.id, identity=state.identity)
                conn.terminate()
                continue
            # Assume unresponsive until the acknowledgment comes back.
            state.alive = False
            self.registry.send(conn, self.probe)

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval_s)
            self.tick()
