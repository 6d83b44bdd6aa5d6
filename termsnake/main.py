"""FastAPI application: state route and WebSocket endpoint for remote clients."""

import asyncio
import logging

from contextlib import asynccontextmanager

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.responses import Response

from .constants import GRID_W, GRID_H
from .connection_manager import ConnectionManager, build_state_msg, parse_client_msg
from .driver import GameDriver
from .models import Intent, IntentKind

logger = logging.getLogger(__name__)


def create_app(driver: GameDriver, run_driver: bool = False, board: tuple[int, int] = (GRID_W, GRID_H)) -> FastAPI:
    """Build the app around ``driver``.

    With ``run_driver`` the app owns the game loop: it resets the game to
    ``board`` on startup and quits it on shutdown. Otherwise the caller
    runs the driver (the terminal front-end does).
    """
    manager = ConnectionManager()
    driver.add_listener(manager.publish)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        task = None
        if run_driver:
            driver.game.reset(*board)
            task = asyncio.create_task(driver.run())
        yield
        if task is not None:
            driver.submit(Intent(IntentKind.QUIT))
            await task

    app = FastAPI(lifespan=lifespan)
    app.state.driver = driver
    app.state.manager = manager

    @app.get("/state")
    async def get_state():
        return Response(build_state_msg(driver.game.snapshot()), media_type="application/json")

    @app.websocket("/ws")
    async def websocket_endpoint(ws: WebSocket):
        await manager.connect(ws)
        try:
            await manager.send_personal(ws, build_state_msg(driver.game.snapshot()))
            while True:
                message = await ws.receive()
                if message["type"] == "websocket.disconnect":
                    break
                raw = message.get("text")
                if raw is None:
                    logger.debug("Ignoring non-text frame")
                    continue
                intent = parse_client_msg(raw)
                if intent is not None:
                    driver.submit(intent)
        except WebSocketDisconnect:
            pass
        finally:
            manager.disconnect(ws)
            logger.info("Client disconnected (%d left)", len(manager.connections))

    return app
