from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from boardrelay.protocol.constants import HEARTBEAT_MESSAGE

DEFAULT_SESSION_SECRET = "dev-insecure-secret"


class Settings(BaseSettings):
    """
    Runtime config for the board relay.

    - Loaded from environment variables (prefix `BOARD_`)
    - Also reads `.env` if present (via pydantic-settings + python-dotenv)
    """

    model_config = SettingsConfigDict(env_file=".env", env_prefix="BOARD_", extra="ignore")

    # Liveness: one probe per interval, a single missed reply terminates the connection.
    heartbeat_interval_s: float = 30.0
    heartbeat_message: str = HEARTBEAT_MESSAGE

    # Static client assets + dev reload notifications
    client_serve_root: Path = Path("public")
    dev_reload: bool = False
    watcher_debounce_s: float = 0.3

    # Signed cookie session (issued by GET /api/session before the upgrade)
    session_secret: str = DEFAULT_SESSION_SECRET
    session_cookie: str = "board_session"
    session_max_age_s: int = 14 * 24 * 60 * 60

    # Logging
    log_level: str = "INFO"
    log_json: bool = False
    debug_log_msgs: bool = False


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
