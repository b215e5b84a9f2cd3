"""End-to-end tests over the FastAPI app and a real event loop (TestClient portal)."""

import json
import time
from contextlib import ExitStack

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from boardrelay.server.app import create_app

HEARTBEAT = "💓"
COOKIE = "board_session"


def _connect(stack: ExitStack, client: TestClient):
    """Issue a fresh session and open a websocket bound to it."""
    client.cookies.clear()
    resp = client.get("/api/session")
    cookie = f"{COOKIE}={resp.cookies[COOKIE]}"
    client.cookies.clear()
    ws = stack.enter_context(client.websocket_connect("/ws", headers={"cookie": cookie}))
    name = resp.json()["name"]
    return name, ws


def _wait_for(predicate, timeout_s: float = 2.0) -> bool:
    deadline = time.monotonic() + timeout_s
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return False


def test_healthz(settings):
    with TestClient(create_app(settings)) as client:
        assert client.get("/healthz").json() == {"ok": True, "connections": 0, "history": 0}


def test_session_endpoint_is_stable_per_cookie(settings):
    with TestClient(create_app(settings)) as client:
        first = client.get("/api/session").json()
        assert client.get("/api/session").json() == first


def test_upgrade_without_session_is_rejected(settings):
    with TestClient(create_app(settings)) as client:
        with pytest.raises(WebSocketDisconnect) as exc:
            with client.websocket_connect("/ws"):
                pass
        assert exc.value.code == 1008
        assert client.get("/healthz").json()["connections"] == 0


def test_presence_relay_and_history(settings):
    with TestClient(create_app(settings)) as client, ExitStack() as stack:
        alice, ws_a = _connect(stack, client)
        assert ws_a.receive_json() == {"type": "app/setName", "name": alice}
        assert ws_a.receive_json() == {"type": "app/userPresence", "id": alice, "status": "online"}

        bob, ws_b = _connect(stack, client)
        assert ws_b.receive_json() == {"type": "app/setName", "name": bob}
        assert ws_b.receive_json() == {"type": "app/userPresence", "id": bob, "status": "online"}
        assert ws_a.receive_json() == {"type": "app/userPresence", "id": bob, "status": "online"}

        line = {"type": "canvas/drawLine", "p1": [0, 0], "p2": [3, 4]}
        ws_a.send_text(json.dumps(line))
        assert ws_b.receive_json() == line

        # Alice never gets her own line back: the next frame is the history reply.
        ws_a.send_text(json.dumps({"type": "app/getBoardHistory"}))
        assert ws_a.receive_json() == {"type": "app/setBoardHistory", "history": [line]}

        ws_b.send_text("definitely not json")
        ws_b.send_text(json.dumps({"type": "app/clearBoardHistory"}))
        empty = {"type": "app/setBoardHistory", "history": []}
        assert ws_a.receive_json() == empty
        assert ws_b.receive_json() == empty

        ws_b.close()
        assert ws_a.receive_json() == {"type": "app/userPresence", "id": bob, "status": "away"}
        assert client.get("/healthz").json() == {"ok": True, "connections": 1, "history": 0}


def test_unresponsive_connection_is_terminated(settings):
    settings = settings.model_copy(update={"heartbeat_interval_s": 0.05})
    with TestClient(create_app(settings)) as client, ExitStack() as stack:
        _name, ws = _connect(stack, client)
        ws.receive_json()  # setName
        ws.receive_json()  # online

        assert ws.receive_json() == HEARTBEAT
        with pytest.raises(WebSocketDisconnect) as exc:
            ws.receive_json()
        assert exc.value.code == 1001
        assert _wait_for(lambda: client.get("/healthz").json()["connections"] == 0)


def test_acknowledged_connection_stays(settings):
    settings = settings.model_copy(update={"heartbeat_interval_s": 0.05})
    with TestClient(create_app(settings)) as client, ExitStack() as stack:
        _name, ws = _connect(stack, client)
        ws.receive_json()
        ws.receive_json()

        for _ in range(3):
            assert ws.receive_json() == HEARTBEAT
            ws.send_text(json.dumps(HEARTBEAT))

        assert client.get("/healthz").json()["connections"] == 1


def test_static_assets_served_from_root(settings, tmp_path):
    root = tmp_path / "public"
    root.mkdir()
    (root / "index.html").write_text("<h1>board</h1>", encoding="utf-8")
    settings = settings.model_copy(update={"client_serve_root": root})

    with TestClient(create_app(settings)) as client:
        assert "board" in client.get("/").text
        assert client.get("/healthz").json()["ok"] is True


class RecordingLogger:
    def __init__(self) -> None:
        self.events: list[tuple[str, str]] = []

    def __getattr__(self, level):
        def log(event, **_kw):
            self.events.append((level, event))

        return log


def test_default_session_secret_is_warned_about(settings, monkeypatch):
    from boardrelay.server import app as app_mod
    from boardrelay.server.config import DEFAULT_SESSION_SECRET

    rec = RecordingLogger()
    monkeypatch.setattr(app_mod, "logger", rec)

    create_app(settings)
    assert not [e for e in rec.events if e[0] == "warning"]

    create_app(settings.model_copy(update={"session_secret": DEFAULT_SESSION_SECRET}))
    warnings = [event for level, event in rec.events if level == "warning"]
    assert len(warnings) == 1
    assert "session secret" in warnings[0]
