"""WebSocket connection management and state serialization."""

import asyncio
import json
import logging
from typing import Optional

from fastapi import WebSocket

from .constants import SEND_TIMEOUT
from .models import DIRECTION_BY_NAME, Intent, IntentKind, Snapshot

logger = logging.getLogger(__name__)

# Remote clients may steer and toggle, but never quit or resize the local game.
REMOTE_INTENTS = {
    "pause": Intent(IntentKind.PAUSE),
    "loop": Intent(IntentKind.LOOP),
    "reset": Intent(IntentKind.RESET),
    "speed_up": Intent(IntentKind.SPEED_UP),
    "speed_down": Intent(IntentKind.SPEED_DOWN),
}


class ConnectionManager:
    def __init__(self, send_timeout: float = SEND_TIMEOUT):
        self.connections: set[WebSocket] = set()
        self.send_timeout = send_timeout
        self._latest: Optional[Snapshot] = None
        self._sending: Optional[asyncio.Task] = None

    async def connect(self, ws: WebSocket):
        await ws.accept()
        self.connections.add(ws)
        logger.info("Client connected (%d total)", len(self.connections))

    def disconnect(self, ws: WebSocket):
        self.connections.discard(ws)

    async def _send(self, ws: WebSocket, message: str):
        await asyncio.wait_for(ws.send_text(message), self.send_timeout)

    async def broadcast(self, message: str):
        clients = list(self.connections)
        results = await asyncio.gather(
            *(self._send(ws, message) for ws in clients), return_exceptions=True,
        )
        for ws, result in zip(clients, results):
            if isinstance(result, Exception):
                logger.info("Dropping client after failed send: %r", result)
                self.connections.discard(ws)

    async def send_personal(self, ws: WebSocket, message: str):
        await ws.send_text(message)

    def publish(self, snapshot: Snapshot):
        """Game listener: broadcast ``snapshot`` on the running loop.

        One broadcast runs at a time. Snapshots published meanwhile replace
        each other, and only the newest is sent once the running one ends.
        """
        if not self.connections:
            return
        self._latest = snapshot
        if self._sending is None or self._sending.done():
            self._sending = asyncio.get_running_loop().create_task(self._send_latest())

    async def _send_latest(self):
        while self._latest is not None:
            snap, self._latest = self._latest, None
            await self.broadcast(build_state_msg(snap))


def vectors_to_list(vectors) -> list[list[int]]:
    return [[v.x, v.y] for v in vectors]


def build_state_msg(snap: Snapshot, now: Optional[float] = None) -> str:
    return json.dumps({
        "type": "state",
        "width": snap.width,
        "height": snap.height,
        "snake": vectors_to_list(snap.body),
        "fruits": vectors_to_list(snap.fruits),
        "paused": snap.paused,
        "dead": snap.dead,
        "loop": snap.loop_walls,
        "message": snap.message if snap.message_live(now) else None,
    })


def parse_client_msg(raw: str) -> Optional[Intent]:
    """Turn a client message into an intent, or None if it means nothing to us."""
    try:
        msg = json.loads(raw)
    except ValueError:
        logger.debug("Ignoring malformed message %r", raw)
        return None
    if not isinstance(msg, dict):
        return None

    kind = msg.get("type")
    if kind == "input":
        name = msg.get("direction")
        if isinstance(name, str) and name in DIRECTION_BY_NAME:
            return Intent.move(DIRECTION_BY_NAME[name])
    elif kind in REMOTE_INTENTS:
        return REMOTE_INTENTS[kind]

    logger.debug("Ignoring message %r", msg)
    return None
