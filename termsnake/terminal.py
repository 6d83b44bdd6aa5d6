"""Curses front-end: key polling and drawing."""

import asyncio
import curses
import logging
from typing import Callable, Optional

from .constants import INPUT_POLL_INTERVAL, MSG_PAUSED
from .driver import GameDriver
from .intents import board_size_for_surface
from .models import DOWN, LEFT, RIGHT, UP, Intent, IntentKind, Snapshot

logger = logging.getLogger(__name__)

KEY_CTRL_C = 3
KEY_CTRL_R = 18

COLOR_WALL = 1
COLOR_FRUIT = 2
COLOR_HEAD = 3
COLOR_PAUSED = 4

KEY_INTENTS = {
    KEY_CTRL_C: Intent(IntentKind.QUIT),
    KEY_CTRL_R: Intent(IntentKind.RESET),
    ord("p"): Intent(IntentKind.PAUSE),
    ord("l"): Intent(IntentKind.LOOP),
    ord("+"): Intent(IntentKind.SPEED_UP),
    ord("-"): Intent(IntentKind.SPEED_DOWN),
    curses.KEY_UP: Intent.move(UP),
    curses.KEY_DOWN: Intent.move(DOWN),
    curses.KEY_LEFT: Intent.move(LEFT),
    curses.KEY_RIGHT: Intent.move(RIGHT),
}


def intent_for_key(key: int, screen_size: Callable[[], tuple[int, int]]) -> Optional[Intent]:
    """Map a curses key code to an intent; ``screen_size`` returns (rows, cols)."""
    if key == curses.KEY_RESIZE:
        rows, cols = screen_size()
        return Intent.resize(cols, rows)
    return KEY_INTENTS.get(key)


def init_screen(stdscr):
    curses.curs_set(0)
    curses.raw()
    stdscr.keypad(True)
    stdscr.nodelay(True)
    if curses.has_colors():
        curses.start_color()
        curses.use_default_colors()
        curses.init_pair(COLOR_WALL, curses.COLOR_WHITE, -1)
        curses.init_pair(COLOR_FRUIT, curses.COLOR_RED, -1)
        curses.init_pair(COLOR_HEAD, curses.COLOR_YELLOW, -1)
        curses.init_pair(COLOR_PAUSED, -1, curses.COLOR_RED)


def put(stdscr, x: int, y: int, text: str, attr: int = 0):
    # Cells past the window edge are dropped; a small window still shows the rest.
    try:
        stdscr.addstr(y, x, text, attr)
    except curses.error:
        pass


def draw(stdscr, snap: Snapshot, now: Optional[float] = None):
    stdscr.erase()
    wall = curses.color_pair(COLOR_WALL)

    for x in range(1, snap.width + 1):
        put(stdscr, x, 1, "-", wall)
        put(stdscr, x, snap.height + 2, "-", wall)
    for y in range(2, snap.height + 2):
        put(stdscr, 0, y, "|", wall)
        put(stdscr, snap.width + 1, y, "|", wall)

    if snap.message_live(now):
        put(stdscr, 0, 0, snap.message)

    for fruit in snap.fruits:
        put(stdscr, fruit.x + 1, fruit.y + 2, "*", curses.color_pair(COLOR_FRUIT))

    # Tail first so the head stays visible over a duplicated segment.
    for i in range(len(snap.body) - 1, -1, -1):
        seg = snap.body[i]
        color = COLOR_HEAD if i == 0 else COLOR_WALL
        put(stdscr, seg.x + 1, seg.y + 2, "@", curses.color_pair(color))

    if snap.paused:
        x = snap.width // 2 + 1 - len(MSG_PAUSED) // 2
        put(stdscr, x, snap.height // 2 + 1, MSG_PAUSED, curses.color_pair(COLOR_PAUSED))

    stdscr.refresh()


async def poll_keys(stdscr, driver: GameDriver):
    while True:
        key = stdscr.getch()
        if key == -1:
            await asyncio.sleep(INPUT_POLL_INTERVAL)
            continue
        intent = intent_for_key(key, stdscr.getmaxyx)
        if intent is not None:
            driver.submit(intent)


async def play(stdscr, driver: GameDriver):
    """Run ``driver`` with the keyboard as input and the screen as output."""
    init_screen(stdscr)
    rows, cols = stdscr.getmaxyx()
    logger.info("Terminal is %dx%d", cols, rows)
    driver.game.reset(*board_size_for_surface(cols, rows))
    driver.add_listener(lambda snap: draw(stdscr, snap))
    draw(stdscr, driver.game.snapshot())

    poller = asyncio.create_task(poll_keys(stdscr, driver))
    try:
        await driver.run()
    finally:
        poller.cancel()
        try:
            await poller
        except asyncio.CancelledError:
            pass
