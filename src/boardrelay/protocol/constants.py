# Message type constants (stringly-typed protocol; canonical list lives here)

# client -> server (personal)
T_APP_INIT = "app/init"
T_APP_ERROR = "app/error"
T_GET_BOARD_HISTORY = "app/getBoardHistory"
T_CLEAR_BOARD_HISTORY = "app/clearBoardHistory"

# client -> server (stored in history and relayed to other clients)
T_CANVAS_RESIZE = "canvas/resize"
T_CANVAS_DRAW_LINE = "canvas/drawLine"
T_CANVAS_DRAW_CIRCLE = "canvas/drawCircle"
T_CANVAS_DRAW_PIXEL_AREA = "canvas/drawPixelArea"

# server -> clients
T_SET_NAME = "app/setName"
T_USER_PRESENCE = "app/userPresence"
T_SET_BOARD_HISTORY = "app/setBoardHistory"
T_RELOAD = "app/reload"

PERSONAL_TYPES = frozenset({T_APP_INIT, T_APP_ERROR})
MUTATION_TYPES = frozenset(
    {
        T_CANVAS_RESIZE,
        T_CANVAS_DRAW_LINE,
        T_CANVAS_DRAW_CIRCLE,
        T_CANVAS_DRAW_PIXEL_AREA,
    }
)

# Untagged liveness sentinel; sent and acknowledged as a bare JSON string.
HEARTBEAT_MESSAGE = "💓"
