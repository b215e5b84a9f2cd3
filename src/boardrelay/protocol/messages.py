from __future__ import annotations

import json
from typing import Any, Literal, TypeAlias, Union

from pydantic import BaseModel, Field

# Drawing primitives are opaque to the server: stored and relayed verbatim.
# Every event carries at least {"type": "canvas/..."}.
BoardEvent: TypeAlias = dict[str, Any]


class SetName(BaseModel):
    type: Literal["app/setName"] = "app/setName"
    name: str


class UserPresence(BaseModel):
    type: Literal["app/userPresence"] = "app/userPresence"
    id: str
    status: Literal["online", "away"]


class SetBoardHistory(BaseModel):
    type: Literal["app/setBoardHistory"] = "app/setBoardHistory"
    history: list[BoardEvent] = Field(default_factory=list)


class Reload(BaseModel):
    type: Literal["app/reload"] = "app/reload"


OutboundMsg: TypeAlias = Union[SetName, UserPresence, SetBoardHistory, Reload]


def encode(msg: OutboundMsg | BoardEvent | str) -> str:
    """Serialize an outbound message (model, relayed event or sentinel) to compact JSON."""
    if isinstance(msg, BaseModel):
        msg = msg.model_dump(mode="json")
    # ASCII-escaped so lone surrogates accepted by json.loads still serialize to valid UTF-8.
    return json.dumps(msg, separators=(",", ":"))
