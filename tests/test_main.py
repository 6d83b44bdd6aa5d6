"""Tests for the FastAPI app: state route and WebSocket endpoint."""

import random

from fastapi.testclient import TestClient

from termsnake.driver import GameDriver
from termsnake.game import GameState
from termsnake.main import create_app


def make_driver(period=0.01):
    return GameDriver(GameState(rng=random.Random(2)), tick_period=period)


class TestStateRoute:
    def test_state_reports_current_game(self):
        driver = make_driver()
        driver.game.reset(10, 8)
        client = TestClient(create_app(driver))

        resp = client.get("/state")

        assert resp.status_code == 200
        body = resp.json()
        assert body["type"] == "state"
        assert (body["width"], body["height"]) == (10, 8)
        assert body["snake"] == [[5, 4]]
        assert len(body["fruits"]) == 1

    def test_lifespan_runs_game_on_board(self):
        driver = make_driver()
        with TestClient(create_app(driver, run_driver=True, board=(12, 9))) as client:
            body = client.get("/state").json()
            assert (body["width"], body["height"]) == (12, 9)
        assert driver.running is False


class TestWebSocket:
    def test_client_receives_state_on_connect(self):
        driver = make_driver()
        driver.game.reset(6, 6)
        client = TestClient(create_app(driver))

        with client.websocket_connect("/ws") as ws:
            msg = ws.receive_json()

        assert msg["type"] == "state"
        assert msg["snake"] == [[3, 3]]

    def test_client_input_reaches_game(self):
        driver = make_driver()
        app = create_app(driver, run_driver=True, board=(20, 20))

        with TestClient(app) as client:
            with client.websocket_connect("/ws") as ws:
                ws.receive_json()
                ws.send_json({"type": "pause"})
                for _ in range(200):
                    msg = ws.receive_json()
                    if msg["paused"]:
                        break
                assert msg["paused"] is True
                assert driver.game.paused is True

    def test_binary_frame_is_ignored(self):
        driver = make_driver()
        app = create_app(driver, run_driver=True, board=(20, 20))

        with TestClient(app) as client:
            with client.websocket_connect("/ws") as ws:
                ws.receive_json()
                ws.send_bytes(b"\x00garbage")
                ws.send_json({"type": "pause"})
                for _ in range(200):
                    msg = ws.receive_json()
                    if msg["paused"]:
                        break
                assert msg["paused"] is True
                assert driver.game.paused is True
