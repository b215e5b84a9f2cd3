from __future__ import annotations

from pathlib import Path

from watchfiles import awatch

from .board import Board
from .log import get_logger

logger = get_logger(__name__)


async def watch_and_reload(board: Board, root: Path, debounce_s: float) -> None:
    """Tell every client to reload once per settled batch of asset changes."""
    logger.info("watching client assets", root=str(root))
    async for changes in awatch(root, debounce=int(debounce_s * 1000)):
        logger.debug("asset change batch", changes=len(changes))
        board.reload()
