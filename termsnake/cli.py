"""Command-line entry point."""

import argparse
import asyncio
import curses
import logging

import uvicorn

from .constants import GRID_W, GRID_H, TICK_PERIOD, SERVER_HOST, SERVER_PORT
from .driver import GameDriver
from .game import GameState
from .main import create_app
from .terminal import play

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Snake in the terminal")
    parser.add_argument("--speed", type=float, default=TICK_PERIOD,
                        help="Seconds between ticks (default: %(default)s)")
    parser.add_argument("--loop", action="store_true",
                        help="Start with wrap-around walls")
    parser.add_argument("--serve", action="store_true",
                        help="Also stream the game over WebSocket")
    parser.add_argument("--headless", action="store_true",
                        help="No terminal UI; serve the game over WebSocket only")
    parser.add_argument("--host", default=SERVER_HOST)
    parser.add_argument("--port", type=int, default=SERVER_PORT)
    parser.add_argument("--width", type=int, default=GRID_W,
                        help="Board width in headless mode (default: %(default)s)")
    parser.add_argument("--height", type=int, default=GRID_H,
                        help="Board height in headless mode (default: %(default)s)")
    parser.add_argument("--log-file", default=None,
                        help="Write logs here; the terminal UI owns the screen otherwise")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = parser.parse_args(argv)
    if args.speed <= 0:
        parser.error("--speed must be positive")
    if args.width < 1 or args.height < 1:
        parser.error("--width and --height must be at least 1")
    return args


def setup_logging(args: argparse.Namespace):
    fmt = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    if args.log_file:
        logging.basicConfig(filename=args.log_file, level=args.log_level, format=fmt)
    elif args.headless:
        logging.basicConfig(level=args.log_level, format=fmt)
    else:
        logging.basicConfig(handlers=[logging.NullHandler()], level=args.log_level)


def build_driver(args: argparse.Namespace) -> GameDriver:
    game = GameState()
    game.loop_walls = args.loop
    return GameDriver(game, tick_period=args.speed)


async def terminal_session(stdscr, args: argparse.Namespace):
    driver = build_driver(args)
    if not args.serve:
        await play(stdscr, driver)
        return

    app = create_app(driver)
    server = uvicorn.Server(uvicorn.Config(app, host=args.host, port=args.port, log_config=None))
    serving = asyncio.create_task(server.serve())
    try:
        await play(stdscr, driver)
    finally:
        server.should_exit = True
        await serving


def main(argv=None):
    args = parse_args(argv)
    setup_logging(args)

    if args.headless:
        driver = build_driver(args)
        app = create_app(driver, run_driver=True, board=(args.width, args.height))
        print(f"Snake server starting on http://{args.host}:{args.port}")
        uvicorn.run(app, host=args.host, port=args.port)
        return

    logger.info("Starting terminal game")
    curses.wrapper(lambda stdscr: asyncio.run(terminal_session(stdscr, args)))


if __name__ == "__main__":
    main()
