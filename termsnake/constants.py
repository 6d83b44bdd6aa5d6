"""Game constants."""

# Board used when no terminal decides the size (headless server).
GRID_W, GRID_H = 40, 30

TICK_PERIOD = 0.2
MIN_TICK_PERIOD = 0.02
MAX_TICK_PERIOD = 2.0
SPEED_UP_FACTOR = (3, 4)
SPEED_DOWN_FACTOR = (4, 3)

MESSAGE_DURATION = 3.0

# Screen cells reserved around the board: side walls, message line, top and bottom walls.
MARGIN_W = 2
MARGIN_H = 3

INPUT_POLL_INTERVAL = 0.01

# A remote client that takes longer than this to accept one state message is dropped.
SEND_TIMEOUT = 1.0

SERVER_HOST = "127.0.0.1"
SERVER_PORT = 8765

DIRECTIONS = {
    "up": (0, -1),
    "down": (0, 1),
    "left": (-1, 0),
    "right": (1, 0),
}

MSG_WALL = "You ran into a wall!"
MSG_SELF = "You ran into yourself!"
MSG_BOARD_FULL = "The board is full!"
MSG_SPEED_UP = "Speed increased!"
MSG_SPEED_DOWN = "Speed decreased..."
MSG_PAUSED = "Paused"
