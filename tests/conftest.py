from __future__ import annotations

import json
import uuid
from typing import Any

import pytest

from boardrelay.server.board import Board
from boardrelay.server.config import Settings

HEARTBEAT = "💓"


class FakeConnection:
    """In-memory stand-in for `Connection`: records decoded frames."""

    def __init__(self, name: str = "") -> None:
        self.id = name or uuid.uuid4().hex[:10]
        self.is_open = True
        self.terminated = False
        self.sent: list[Any] = []
        self.raw: list[str] = []

    def send(self, data: str) -> None:
        if not self.is_open:
            return
        # a real socket sends UTF-8 text frames; fail the same way it would
        data.encode("utf-8")
        self.raw.append(data)
        self.sent.append(json.loads(data))

    def terminate(self) -> None:
        self.terminated = True
        self.is_open = False

    def of_type(self, t: str) -> list[dict[str, Any]]:
        return [m for m in self.sent if isinstance(m, dict) and m.get("type") == t]

    def clear(self) -> None:
        self.sent.clear()
        self.raw.clear()


@pytest.fixture
def make_conn():
    return FakeConnection


@pytest.fixture
async def board():
    # async fixture: the liveness monitor needs a running loop to start its task
    b = Board(heartbeat_interval_s=60.0, heartbeat_message=HEARTBEAT)
    yield b
    b.shutdown()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        heartbeat_interval_s=60.0,
        client_serve_root=tmp_path / "missing",
        session_secret="test-secret",
    )
