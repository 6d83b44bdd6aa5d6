"""Tests for the curses front-end that do not need a real terminal."""

import asyncio
import curses
from unittest.mock import Mock, patch

import pytest

from termsnake.constants import MSG_PAUSED
from termsnake.driver import GameDriver
from termsnake.game import GameState
from termsnake.models import DOWN, LEFT, RIGHT, UP, Intent, IntentKind, Snapshot, Vector
from termsnake.terminal import KEY_CTRL_C, KEY_CTRL_R, draw, intent_for_key, poll_keys


def screen_size():
    return 24, 80


class TestIntentForKey:
    @pytest.mark.parametrize("key,intent", [
        (KEY_CTRL_C, Intent(IntentKind.QUIT)),
        (KEY_CTRL_R, Intent(IntentKind.RESET)),
        (ord("p"), Intent(IntentKind.PAUSE)),
        (ord("l"), Intent(IntentKind.LOOP)),
        (ord("+"), Intent(IntentKind.SPEED_UP)),
        (ord("-"), Intent(IntentKind.SPEED_DOWN)),
        (curses.KEY_UP, Intent.move(UP)),
        (curses.KEY_DOWN, Intent.move(DOWN)),
        (curses.KEY_LEFT, Intent.move(LEFT)),
        (curses.KEY_RIGHT, Intent.move(RIGHT)),
    ])
    def test_known_keys(self, key, intent):
        assert intent_for_key(key, screen_size) == intent

    def test_resize_uses_screen_size(self):
        assert intent_for_key(curses.KEY_RESIZE, screen_size) == Intent.resize(80, 24)

    def test_unknown_key(self):
        assert intent_for_key(ord("x"), screen_size) is None


def make_snapshot(**overrides):
    fields = dict(
        width=6, height=4,
        body=(Vector(2, 1), Vector(2, 2)),
        fruits=(Vector(4, 3),),
        paused=False, dead=False, loop_walls=False,
        message="Speed increased!", message_expiration=10.0,
    )
    fields.update(overrides)
    return Snapshot(**fields)


def drawn(stdscr):
    return {(c.args[0], c.args[1]): c.args[2] for c in stdscr.addstr.call_args_list}


@patch("termsnake.terminal.curses.color_pair", return_value=0)
class TestDraw:
    def test_draws_walls_snake_fruit_and_message(self, color_pair):
        stdscr = Mock()
        draw(stdscr, make_snapshot(), now=5.0)
        cells = drawn(stdscr)

        assert cells[(0, 0)] == "Speed increased!"
        assert cells[(1, 1)] == "-"
        assert cells[(6, 1)] == "-"
        assert cells[(2, 0)] == "|"
        assert cells[(2, 7)] == "|"
        assert cells[(3, 3)] == "@"
        assert cells[(4, 3)] == "@"
        assert cells[(5, 5)] == "*"
        stdscr.erase.assert_called_once()
        stdscr.refresh.assert_called_once()

    def test_expired_message_is_hidden(self, color_pair):
        stdscr = Mock()
        draw(stdscr, make_snapshot(), now=10.0)
        assert "Speed increased!" not in drawn(stdscr).values()

    def test_message_uses_snapshot_time_by_default(self, color_pair):
        stdscr = Mock()
        draw(stdscr, make_snapshot(taken_at=9.0))
        assert "Speed increased!" in drawn(stdscr).values()

        stdscr = Mock()
        draw(stdscr, make_snapshot(taken_at=10.0))
        assert "Speed increased!" not in drawn(stdscr).values()

    def test_paused_banner(self, color_pair):
        stdscr = Mock()
        draw(stdscr, make_snapshot(paused=True), now=0.0)
        assert MSG_PAUSED in drawn(stdscr).values()

    def test_drawing_off_screen_is_ignored(self, color_pair):
        stdscr = Mock()
        stdscr.addstr.side_effect = curses.error
        draw(stdscr, make_snapshot(), now=0.0)
        stdscr.refresh.assert_called_once()


class TestPollKeys:
    def test_keys_become_intents(self):
        driver = GameDriver(GameState().reset(10, 10))
        stdscr = Mock()
        stdscr.getmaxyx.return_value = (24, 80)
        keys = iter([ord("p"), -1, ord("x"), curses.KEY_LEFT])

        def getch():
            try:
                return next(keys)
            except StopIteration:
                raise asyncio.CancelledError
        stdscr.getch.side_effect = getch

        async def scenario():
            with pytest.raises(asyncio.CancelledError):
                await poll_keys(stdscr, driver)

        asyncio.run(scenario())
        assert driver.queue.get_nowait() == Intent(IntentKind.PAUSE)
        assert driver.queue.get_nowait() == Intent.move(LEFT)
        assert driver.queue.empty()
