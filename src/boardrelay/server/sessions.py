from __future__ import annotations

import uuid
from collections.abc import Mapping, MutableMapping
from datetime import datetime, timezone
from typing import Any

from .errors import Unauthenticated


def new_display_name() -> str:
    return f"guest-{uuid.uuid4().hex[:6]}"


def ensure_session(session: MutableMapping[str, Any]) -> dict[str, str]:
    """Create the board session once; later calls return the stored values unchanged."""
    if not session.get("created"):
        session["created"] = datetime.now(timezone.utc).isoformat()
        session["name"] = new_display_name()
    return {"name": session["name"], "created": session["created"]}


def bind_session(session: Mapping[str, Any] | None) -> str:
    """
    Resolve the identity for a WebSocket upgrade.

    The session must have been created earlier over HTTP (`GET /api/session`);
    the upgrade itself never creates one.
    """
    if not session or not session.get("created"):
        raise Unauthenticated("websocket upgrade request has no session")
    name = session.get("name")
    if not isinstance(name, str) or not name:
        raise Unauthenticated("session has no display name")
    return name
