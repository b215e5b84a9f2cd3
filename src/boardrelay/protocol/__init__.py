from .constants import (
    HEARTBEAT_MESSAGE,
    MUTATION_TYPES,
    PERSONAL_TYPES,
    T_APP_ERROR,
    T_APP_INIT,
    T_CANVAS_DRAW_CIRCLE,
    T_CANVAS_DRAW_LINE,
    T_CANVAS_DRAW_PIXEL_AREA,
    T_CANVAS_RESIZE,
    T_CLEAR_BOARD_HISTORY,
    T_GET_BOARD_HISTORY,
    T_RELOAD,
    T_SET_BOARD_HISTORY,
    T_SET_NAME,
    T_USER_PRESENCE,
)
from .messages import BoardEvent, Reload, SetBoardHistory, SetName, UserPresence, encode

__all__ = [
    "HEARTBEAT_MESSAGE",
    "MUTATION_TYPES",
    "PERSONAL_TYPES",
    "T_APP_INIT",
    "T_APP_ERROR",
    "T_GET_BOARD_HISTORY",
    "T_CLEAR_BOARD_HISTORY",
    "T_CANVAS_RESIZE",
    "T_CANVAS_DRAW_LINE",
    "T_CANVAS_DRAW_CIRCLE",
    "T_CANVAS_DRAW_PIXEL_AREA",
    "T_SET_NAME",
    "T_USER_PRESENCE",
    "T_SET_BOARD_HISTORY",
    "T_RELOAD",
    "BoardEvent",
    "SetName",
    "UserPresence",
    "SetBoardHistory",
    "Reload",
    "encode",
]
