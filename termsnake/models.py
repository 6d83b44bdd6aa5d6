"""Data models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple, Optional

from .constants import DIRECTIONS


class Vector(NamedTuple):
    x: int
    y: int

    def add(self, other: "Vector") -> "Vector":
        return Vector(self.x + other.x, self.y + other.y)

    # NamedTuple's own + concatenates.
    __add__ = add


UP = Vector(*DIRECTIONS["up"])
DOWN = Vector(*DIRECTIONS["down"])
LEFT = Vector(*DIRECTIONS["left"])
RIGHT = Vector(*DIRECTIONS["right"])

DIRECTION_BY_NAME = {name: Vector(*d) for name, d in DIRECTIONS.items()}


@dataclass
class Snake:
    body: list = field(default_factory=list)
    direction: Vector = UP
    dead: bool = False

    @property
    def head(self) -> Vector:
        return self.body[0]

    def reset(self, x: int, y: int) -> "Snake":
        self.body = [Vector(x, y)]
        self.direction = UP
        self.dead = False
        return self

    def change_direction(self, d: Vector):
        # Never turn back onto the segment right behind the head.
        if len(self.body) > 1 and self.head + d == self.body[1]:
            return
        self.direction = d


class IntentKind(Enum):
    QUIT = "quit"
    RESET = "reset"
    PAUSE = "pause"
    LOOP = "loop"
    SPEED_UP = "speed_up"
    SPEED_DOWN = "speed_down"
    MOVE = "move"
    RESIZE = "resize"


@dataclass(frozen=True)
class Intent:
    kind: IntentKind
    direction: Optional[Vector] = None
    width: Optional[int] = None
    height: Optional[int] = None

    @classmethod
    def move(cls, direction: Vector) -> "Intent":
        return cls(IntentKind.MOVE, direction=direction)

    @classmethod
    def resize(cls, width: int, height: int) -> "Intent":
        return cls(IntentKind.RESIZE, width=width, height=height)


@dataclass(frozen=True)
class Snapshot:
    """Read-only view of a game, handed to renderers after every tick."""

    width: int
    height: int
    body: tuple
    fruits: tuple
    paused: bool
    dead: bool
    loop_walls: bool
    message: str
    message_expiration: float
    # Game clock reading when the snapshot was taken.
    taken_at: float = 0.0

    @property
    def head(self) -> Optional[Vector]:
        return self.body[0] if self.body else None

    def message_live(self, now: Optional[float] = None) -> bool:
        if now is None:
            now = self.taken_at
        return now < self.message_expiration
