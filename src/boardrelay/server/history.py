from __future__ import annotations

from boardrelay.protocol.messages import BoardEvent


class HistoryBuffer:
    """
    Append-only log of accepted mutation events for the (single) board.

    Process-lifetime only; nothing is persisted across restarts.
    """

    def __init__(self) -> None:
        self._events: list[BoardEvent] = []

    def append(self, event: BoardEvent) -> None:
        self._events.append(event)

    def clear(self) -> None:
        self._events = []

    def snapshot(self) -> list[BoardEvent]:
        return list(self._events)

    def __len__(self) -> int:
        return len(self._events)
