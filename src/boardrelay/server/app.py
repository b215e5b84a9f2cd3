from __future__ import annotations

import argparse
import asyncio
import contextlib
from collections.abc import AsyncIterator

from fastapi import FastAPI, Request, WebSocket
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware

from .board import Board
from .config import DEFAULT_SESSION_SECRET, Settings, get_settings
from .connection import Connection
from .errors import Unauthenticated
from .log import configure_logging, get_logger
from .reload import watch_and_reload
from .sessions import bind_session, ensure_session

logger = get_logger(__name__)

# Policy violation; closing before accept makes the ASGI server answer 403.
CLOSE_POLICY_VIOLATION = 1008


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.log_json)
    if settings.session_secret == DEFAULT_SESSION_SECRET:
        logger.warning("using the built-in session secret; set BOARD_SESSION_SECRET outside development")

    board = Board(
        heartbeat_interval_s=settings.heartbeat_interval_s,
        heartbeat_message=settings.heartbeat_message,
        log_messages=settings.debug_log_msgs,
    )

    @contextlib.asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        watcher: asyncio.Task[None] | None = None
        if settings.dev_reload and settings.client_serve_root.is_dir():
            watcher = asyncio.create_task(
                watch_and_reload(board, settings.client_serve_root, settings.watcher_debounce_s)
            )
        try:
            yield
        finally:
            board.shutdown()
            if watcher is not None:
                watcher.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await watcher

    app = FastAPI(lifespan=lifespan)
    app.state.board = board
    app.state.settings = settings
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret,
        session_cookie=settings.session_cookie,
        max_age=settings.session_max_age_s,
    )

    @app.get("/healthz")
    def healthz():
        return {"ok": True, "connections": len(board.registry), "history": len(board.history)}

    @app.get("/api/session")
    def session(request: Request):
        return ensure_session(request.session)

    @app.websocket("/ws")
    async def ws(websocket: WebSocket):
        try:
            identity = bind_session(websocket.session)
        except Unauthenticated as e:
            logger.info("rejecting websocket upgrade", reason=str(e), peer=getattr(websocket.client, "host", None))
            await websocket.close(code=CLOSE_POLICY_VIOLATION)
            return

        await websocket.accept()
        conn = Connection(websocket)
        board.join(conn, identity)
        try:
            await conn.run(lambda raw: board.receive(conn, raw))
        finally:
            board.leave(conn)
            logger.info("disconnected", conn=conn.id, peer=conn.peer)

    # Mounted last so it never shadows the API and websocket routes.
    if settings.client_serve_root.is_dir():
        app.mount("/", StaticFiles(directory=settings.client_serve_root, html=True), name="client")

    return app


def main() -> None:
    import uvicorn

    ap = argparse.ArgumentParser(description="Run the board relay server.")
    ap.add_argument("--host", default="127.0.0.1")
    ap.add_argument("--port", type=int, default=8000)
    ap.add_argument(
        "--reload-assets",
        action="store_true",
        help="Broadcast app/reload to clients when files under the asset root change",
    )
    args = ap.parse_args()

    settings = get_settings()
    if args.reload_assets:
        settings = settings.model_copy(update={"dev_reload": True})
    uvicorn.run(create_app(settings), host=args.host, port=args.port, log_config=None)


app = create_app()


if __name__ == "__main__":
    main()
