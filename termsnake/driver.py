"""Single-task game loop: every tick and every intent goes through one queue."""

import asyncio
import logging
from typing import Callable, Optional

from .constants import TICK_PERIOD
from .game import GameState
from .intents import apply_intent
from .models import Intent, Snapshot

logger = logging.getLogger(__name__)

TICK = object()

Listener = Callable[[Snapshot], None]


def _cancel_requested() -> bool:
    """True when the current task has a pending cancel (Python 3.11+)."""
    cancelling = getattr(asyncio.current_task(), "cancelling", None)
    return bool(cancelling and cancelling())


class Ticker:
    """Puts a tick on ``queue`` every ``period`` seconds.

    At most one tick task exists: ``restart`` waits for the old task to
    finish cancelling before it starts the next one.
    """

    def __init__(self, queue: asyncio.Queue, period: float):
        self.queue = queue
        self.period = period
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _run(self, period: float):
        while True:
            await asyncio.sleep(period)
            await self.queue.put(TICK)

    async def restart(self, period: Optional[float] = None):
        await self.stop()
        if period is not None:
            self.period = period
        self._task = asyncio.create_task(self._run(self.period))

    async def stop(self):
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            # Only the tick task's own cancellation ends here; ours propagates.
            if not task.cancelled() or _cancel_requested():
                raise

    async def __aenter__(self):
        await self.restart()
        return self

    async def __aexit__(self, *exc):
        await self.stop()


class GameDriver:
    def __init__(self, game: GameState, tick_period: float = TICK_PERIOD):
        self.game = game
        self.tick_period = tick_period
        self.queue: asyncio.Queue = asyncio.Queue()
        self.listeners: list[Listener] = []
        self.ticker: Optional[Ticker] = None
        self.running = False

    def add_listener(self, listener: Listener):
        self.listeners.append(listener)

    def remove_listener(self, listener: Listener):
        if listener in self.listeners:
            self.listeners.remove(listener)

    def submit(self, intent: Intent):
        self.queue.put_nowait(intent)

    def publish(self):
        snapshot = self.game.snapshot()
        for listener in list(self.listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Listener %r failed", listener)

    async def handle(self, event) -> bool:
        """Process one queued event. Returns False once a quit was handled."""
        if event is TICK:
            self.game.tick()
            self.publish()
            return True

        result = apply_intent(self.game, event, self.tick_period)
        if result.quit:
            return False
        if result.tick_period != self.tick_period:
            self.tick_period = result.tick_period
            logger.debug("Tick period now %.3fs", self.tick_period)
            if self.ticker is not None:
                await self.ticker.restart(self.tick_period)
        return True

    async def run(self):
        self.running = True
        try:
            async with Ticker(self.queue, self.tick_period) as ticker:
                self.ticker = ticker
                while await self.handle(await self.queue.get()):
                    pass
        finally:
            self.running = False
            logger.info("Game loop stopped")
