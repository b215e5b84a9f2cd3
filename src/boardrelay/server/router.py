from __future__ import annotations

from typing import Any

from boardrelay.protocol.constants import (
    MUTATION_TYPES,
    PERSONAL_TYPES,
    T_CLEAR_BOARD_HISTORY,
    T_GET_BOARD_HISTORY,
)
from boardrelay.protocol.messages import BoardEvent, SetBoardHistory

from .errors import MalformedMessage
from .history import HistoryBuffer
from .log import get_logger
from .registry import Endpoint, Registry

logger = get_logger(__name__)


def message_type(msg: Any) -> str:
    """Return the tag of an inbound message or raise `MalformedMessage`."""
    if not isinstance(msg, dict):
        raise MalformedMessage("message is not an object", msg)
    t = msg.get("type")
    if not isinstance(t, str) or not t:
        raise MalformedMessage("message has no type", msg)
    return t


class MessageRouter:
    """
    Dispatch tagged inbound messages.

    - personal (`app/init`, `app/error`): logged only
    - `app/getBoardHistory`: full history back to the sender
    - `app/clearBoardHistory`: history emptied, empty history to everyone
    - `canvas/*` mutations: appended to history, relayed to everyone but the sender
    - anything else: dropped

    Heartbeat acknowledgments never get here; they are untagged.
    """

    def __init__(self, registry: Registry, history: HistoryBuffer) -> None:
        self.registry = registry
        self.history = history

    def route(self, conn: Endpoint, msg: Any) -> None:
        t = message_type(msg)

        if t in PERSONAL_TYPES:
            logger.info("client message", conn=conn.id, type=t, payload=msg)
        elif t == T_GET_BOARD_HISTORY:
            self.registry.send(conn, SetBoardHistory(history=self.history.snapshot()))
        elif t == T_CLEAR_BOARD_HISTORY:
            self.history.clear()
            self.registry.broadcast(SetBoardHistory(history=[]))
        elif t in MUTATION_TYPES:
            self._mutate(conn, msg)
        else:
            logger.debug("dropping unknown message type", conn=conn.id, type=t)

    def _mutate(self, conn: Endpoint, event: BoardEvent) -> None:
        # Drawing payloads are trusted and relayed as-is.
        self.history.append(event)
        self.registry.broadcast(event, exclude=conn)
