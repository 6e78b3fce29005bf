"""Hotseat console client: two players share one terminal."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
import threading
from typing import Optional, Set

from . import config as _cfg
from .commands import (
    ClickCommand,
    CommandParseError,
    DeleteCommand,
    HoverCommand,
    KeyCommand,
    QuitCommand,
    parse_command,
)
from .config import ConfigurationError, Settings
from .events import Event
from .frontend import ConsoleFrontend
from .session import GameSession, Phase

logger = logging.getLogger(__name__)

USAGE = """Commands (case-insensitive):

    PLACE <coord>    place your next ship with its anchor at <coord> (setup)
    HOVER <coord>    preview where the next ship would go (setup)
    ROTATE           turn the next ship N → E → S → W (setup)
    DELETE <coord>   retract your ship covering <coord> (setup)
    FIRE <coord>     shoot at the opponent's board (play)
    PAUSE            pause / resume the shot clock (play)
    QUIT             leave the game

Coordinates are column letter + row number, e.g. B7."""


def _start_reader(loop: asyncio.AbstractEventLoop, queue: "asyncio.Queue[Optional[str]]") -> threading.Thread:
    """Daemon thread pushing stdin lines into *queue*; ``None`` marks EOF."""

    def _reader() -> None:
        for line in sys.stdin:
            loop.call_soon_threadsafe(queue.put_nowait, line)
        loop.call_soon_threadsafe(queue.put_nowait, None)

    thread = threading.Thread(target=_reader, name="stdin-reader", daemon=True)
    thread.start()
    return thread


class ConsoleGame:
    """Glue between stdin lines, the console frontend and a :class:`GameSession`."""

    def __init__(self, settings: Settings, frontend: ConsoleFrontend | None = None):
        self.settings = settings
        self.frontend = frontend or ConsoleFrontend()
        self.session = GameSession(self.frontend, settings)
        self.session.subscribe(self._log_event)
        self._tasks: Set[asyncio.Task] = set()
        self.quit = False

    @staticmethod
    def _log_event(ev: Event) -> None:
        logger.debug("event %s %s %r", ev.category.name, ev.type, ev.payload)

    def _spawn(self, coro) -> None:
        # handlers may await prompts that the input pump must keep answering
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _point(self, col: int, row: int, *, target_opponent: bool) -> tuple[float, float]:
        s = self.session
        board = s.opponent.board if target_opponent else s.current_player.board
        return board.cell_center(col, row)

    def dispatch(self, line: str) -> None:
        """Handle one input line: answer an open prompt or run a command."""
        if self.frontend.feed(line):
            return
        s = self.settings
        try:
            cmd = parse_command(line, size=s.board_size, rotate_key=s.rotate_key, pause_key=s.pause_key)
        except CommandParseError as exc:
            self.frontend.notify(f"ERR {exc}", "danger")
            return
        session = self.session
        if isinstance(cmd, QuitCommand):
            self.quit = True
        elif isinstance(cmd, ClickCommand):
            x, y = self._point(cmd.col, cmd.row, target_opponent=session.phase is Phase.PLAY)
            session.handle_mouse_move(x, y)
            self._spawn(session.handle_click(x, y))
        elif isinstance(cmd, HoverCommand):
            session.handle_mouse_move(*self._point(cmd.col, cmd.row, target_opponent=False))
        elif isinstance(cmd, DeleteCommand):
            session.handle_mouse_move(*self._point(cmd.col, cmd.row, target_opponent=False))
            session.handle_key_press(s.delete_key)
        elif isinstance(cmd, KeyCommand):
            session.handle_key_press(cmd.key)

    async def _pump(self, queue: "asyncio.Queue[Optional[str]]") -> None:
        while not self.quit:
            line = await queue.get()
            if line is None:
                self.quit = True
                break
            self.dispatch(line)

    async def run(self, queue: "asyncio.Queue[Optional[str]]", tick_interval: float = _cfg.TICK_INTERVAL) -> int:
        pump = asyncio.ensure_future(self._pump(queue))
        try:
            if not await self.session.start():
                self.frontend.notify("No game started – returning.", "info")
                return 1
            self.frontend.notify(USAGE, "help")
            while not self.quit and self.session.phase is not Phase.GAME_OVER:
                await self.session.tick()
                await asyncio.sleep(tick_interval)
            self.session.render()
            if self._tasks:
                # let the winning shot finish its settle delay and announcement
                await asyncio.wait(set(self._tasks), timeout=self.settings.game_over_delay_ms / 1000 + 1)
            return 0
        finally:
            pump.cancel()
            for task in self._tasks:
                task.cancel()


async def _amain(settings: Settings, tick_interval: float) -> int:
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue[Optional[str]] = asyncio.Queue()
    _start_reader(loop, queue)
    return await ConsoleGame(settings).run(queue, tick_interval)


def main() -> None:  # pragma: no cover – CLI entry
    """Interactive hotseat game."""

    parser = argparse.ArgumentParser(description="Salvo hotseat Battleship")
    parser.add_argument("--size", type=int, default=_cfg.BOARD_SIZE, help="Board width/height")
    parser.add_argument("--min-ships", type=int, default=_cfg.MIN_SHIPS)
    parser.add_argument("--max-ships", type=int, default=_cfg.MAX_SHIPS)
    parser.add_argument("--turn-seconds", type=float, default=_cfg.TURN_SECONDS, help="Shot clock per turn")
    parser.add_argument("--delay-ms", type=int, default=_cfg.TURN_DELAY_MS, help="Pause before each hand-over")
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging.",
    )
    args = parser.parse_args()

    if args.debug:
        os.environ["SALVO_DEBUG"] = "1"
    logging.basicConfig(
        level=logging.DEBUG if args.debug or _cfg.DEBUG else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    settings = Settings(
        board_size=args.size,
        min_ships=args.min_ships,
        max_ships=args.max_ships,
        turn_seconds=args.turn_seconds,
        turn_delay_ms=args.delay_ms,
    )
    try:
        code = asyncio.run(_amain(settings, _cfg.TICK_INTERVAL))
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        sys.exit(2)
    except KeyboardInterrupt:
        logger.info("Client exiting")
        code = 130
    sys.exit(code)


if __name__ == "__main__":  # pragma: no cover
    main()
