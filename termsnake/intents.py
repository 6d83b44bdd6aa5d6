"""Translate player intents into game operations."""

import logging
from dataclasses import dataclass

from .constants import (
    MARGIN_W, MARGIN_H, MIN_TICK_PERIOD, MAX_TICK_PERIOD,
    SPEED_UP_FACTOR, SPEED_DOWN_FACTOR, MSG_SPEED_UP, MSG_SPEED_DOWN,
)
from .game import GameState
from .models import Intent, IntentKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IntentResult:
    tick_period: float
    quit: bool = False


def board_size_for_surface(width: int, height: int) -> tuple[int, int]:
    """Board extents that fit a screen of ``width`` x ``height`` cells."""
    return max(1, width - MARGIN_W), max(1, height - MARGIN_H)


def scale_period(period: float, factor: tuple[int, int]) -> float:
    num, den = factor
    return min(MAX_TICK_PERIOD, max(MIN_TICK_PERIOD, period * num / den))


def apply_intent(game: GameState, intent: Intent, tick_period: float) -> IntentResult:
    """Apply ``intent`` to ``game``.

    The tick period belongs to whoever drives the timer, so a speed change
    only comes back in the result.
    """
    kind = intent.kind
    logger.debug("Intent %s", intent)

    if kind == IntentKind.QUIT:
        return IntentResult(tick_period, quit=True)
    elif kind == IntentKind.RESET:
        game.reset(game.width, game.height)
    elif kind == IntentKind.PAUSE:
        game.toggle_pause()
    elif kind == IntentKind.LOOP:
        loop = game.toggle_loop()
        game.show_message(f"Loop: {str(loop).lower()}")
    elif kind == IntentKind.SPEED_UP:
        tick_period = scale_period(tick_period, SPEED_UP_FACTOR)
        game.show_message(MSG_SPEED_UP)
    elif kind == IntentKind.SPEED_DOWN:
        tick_period = scale_period(tick_period, SPEED_DOWN_FACTOR)
        game.show_message(MSG_SPEED_DOWN)
    elif kind == IntentKind.MOVE:
        if intent.direction is not None:
            game.snake.change_direction(intent.direction)
    elif kind == IntentKind.RESIZE:
        game.reset(*board_size_for_surface(intent.width, intent.height))

    return IntentResult(tick_period)
