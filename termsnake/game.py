"""Core game state and logic."""

import logging
import random
import time
from typing import Optional

from .constants import MESSAGE_DURATION, MSG_BOARD_FULL, MSG_SELF, MSG_WALL
from .models import Snake, Snapshot, Vector

logger = logging.getLogger(__name__)


class GameState:
    def __init__(self, clock=time.time, rng=random):
        self.clock = clock
        self.rng = rng
        self.snake = Snake()
        self.fruits: list[Vector] = []
        self.width = 0
        self.height = 0
        self.loop_walls = False
        self.paused = False
        self.message = ""
        self.message_expiration = 0.0

    def show_message(self, text: str):
        self.message = text
        self.message_expiration = self.clock() + MESSAGE_DURATION

    def message_live(self, now: Optional[float] = None) -> bool:
        if now is None:
            now = self.clock()
        return now < self.message_expiration

    def reset(self, width: int, height: int) -> "GameState":
        """Start a new round on a ``width`` x ``height`` board.

        The pause and loop flags survive a reset; everything else is rebuilt.
        Raises ValueError for extents below one cell.
        """
        if width < 1 or height < 1:
            raise ValueError(f"Board must be at least 1x1, got {width}x{height}.")
        self.snake.reset(width // 2, height // 2)
        self.fruits = []
        self.width = width
        self.height = height
        fruit = self.random_empty_cell()
        if fruit is not None:
            self.fruits.append(fruit)
        self.message_expiration = self.clock()
        logger.info("Reset to %dx%d board, fruit at %s", width, height, fruit)
        return self

    def toggle_pause(self) -> bool:
        self.paused = not self.paused
        return self.paused

    def toggle_loop(self) -> bool:
        self.loop_walls = not self.loop_walls
        return self.loop_walls

    def tick(self):
        snake = self.snake
        if self.paused or snake.dead or not snake.body:
            return

        head = snake.head + snake.direction
        snake.body = [head] + snake.body[:-1]

        if self.loop_walls:
            head = Vector(head.x % self.width, head.y % self.height)
            snake.body[0] = head
        elif not (0 <= head.x < self.width and 0 <= head.y < self.height):
            self._kill(MSG_WALL)

        # Runs after the wall check so its message wins when both happen.
        if head in snake.body[1:]:
            self._kill(MSG_SELF)

        for i, fruit in enumerate(self.fruits):
            if fruit != head:
                continue
            self.fruits[i] = self.random_empty_cell()
            snake.body.append(snake.body[-1])

        if None in self.fruits:
            self.fruits = [f for f in self.fruits if f is not None]
            self._kill(MSG_BOARD_FULL)

    def random_empty_cell(self) -> Optional[Vector]:
        """Pick a free cell uniformly, or None when the board is full."""
        filled = set(self.snake.body)
        filled.update(f for f in self.fruits if f is not None)
        choices = [
            Vector(x, y)
            for x in range(self.width)
            for y in range(self.height)
            if (x, y) not in filled
        ]
        if not choices:
            return None
        return self.rng.choice(choices)

    def snapshot(self) -> Snapshot:
        return Snapshot(
            width=self.width,
            height=self.height,
            body=tuple(self.snake.body),
            fruits=tuple(self.fruits),
            paused=self.paused,
            dead=self.snake.dead,
            loop_walls=self.loop_walls,
            message=self.message,
            message_expiration=self.message_expiration,
            taken_at=self.clock(),
        )

    def _kill(self, message: str):
        self.snake.dead = True
        self.show_message(message)
        logger.info("Snake died at %s: %s (length %d)", self.snake.head, message, len(self.snake.body))
