"""Presentation collaborators for :class:`~salvo.session.GameSession`.

The session never draws, prompts, or plays audio itself. It calls an injected
object satisfying :class:`Frontend`. :class:`ConsoleFrontend` is the terminal
implementation used by ``python -m salvo.client``; tests use a recording fake.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol, Sequence, TextIO

from .battleship import Board, Cell
from .io_utils import grid_rows

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Choice:
    """Result of a numeric-choice prompt."""

    ok: bool
    value: Optional[int] = None


class Frontend(Protocol):
    def render_board(self, board: Board, mask: bool) -> None: ...

    def render_label(self, text: str) -> None: ...

    def render_timer(self, seconds: int) -> None: ...

    def render_ghost_preview(self, cells: Sequence[Cell]) -> None: ...

    async def show_confirm(self, title: str, message: str) -> bool: ...

    async def show_choice(self, minimum: int, maximum: int) -> Choice: ...

    def notify(self, message: str, variant: str = "info") -> None: ...

    def play_sound(self, name: str) -> None: ...

    def navigate_to_game_over(self, winner: int) -> None: ...


class ConsoleFrontend:
    """Hotseat terminal frontend.

    Input lines are pushed in through :meth:`feed`. While a prompt is open the
    next line answers it; otherwise :meth:`feed` returns False and the caller
    treats the line as a game command. Output is de-duplicated so a frame loop
    ticking ten times a second only prints what changed.
    """

    def __init__(self, out: TextIO | None = None):
        self.out = out or sys.stdout
        self.winner: Optional[int] = None
        self._prompt: Optional[asyncio.Future[str]] = None
        self._boards: Dict[str, List[str]] = {}
        self._label: Optional[str] = None
        self._timer: Optional[int] = None
        self._ghost: List[Cell] = []

    def _print(self, text: str = "") -> None:
        print(text, file=self.out, flush=True)

    # -------------------- input --------------------
    @property
    def prompt_open(self) -> bool:
        return self._prompt is not None and not self._prompt.done()

    def feed(self, line: str) -> bool:
        """Deliver *line* to an open prompt. Returns False if no prompt was waiting."""
        if not self.prompt_open:
            return False
        self._prompt.set_result(line)
        return True

    async def _ask(self, text: str) -> str:
        self._prompt = asyncio.get_running_loop().create_future()
        self._print(text)
        try:
            return await self._prompt
        finally:
            self._prompt = None

    async def show_confirm(self, title: str, message: str) -> bool:
        if self.prompt_open:
            return False
        # hide both boards from the player handing over
        self._boards.clear()
        self._label = None
        answer = await self._ask(f"\n=== {title} ===\n{message} [y/N]")
        return answer.strip().lower().startswith("y")

    async def show_choice(self, minimum: int, maximum: int) -> Choice:
        if self.prompt_open:
            return Choice(ok=False)
        while True:
            answer = (await self._ask(f"Number of ships per player ({minimum}-{maximum}, blank to return):")).strip()
            if not answer or answer.lower() in {"q", "n", "quit"}:
                return Choice(ok=False)
            try:
                value = int(answer)
            except ValueError:
                self._print(f"ERR {answer!r} is not a number")
                continue
            if minimum <= value <= maximum:
                return Choice(ok=True, value=value)
            self._print(f"ERR choose between {minimum} and {maximum}")

    # -------------------- output --------------------
    def render_board(self, board: Board, mask: bool) -> None:
        ghost = [c for c in self._ghost if board.cell(c.col, c.row) is c]
        rows = grid_rows(board, mask=mask, ghost=ghost)
        if self._boards.get(board.name) == rows:
            return
        self._boards[board.name] = rows
        self._print(f"\n{board.name}{' (hidden)' if mask else ''}")
        for row in rows:
            self._print(row)

    def render_label(self, text: str) -> None:
        if text != self._label:
            self._label = text
            self._print(f"\n>> {text}")

    def render_timer(self, seconds: int) -> None:
        if seconds == self._timer:
            return
        self._timer = seconds
        if seconds <= 5 or seconds % 5 == 0:
            self._print(f"Time: {seconds}")

    def render_ghost_preview(self, cells: Sequence[Cell]) -> None:
        self._ghost = list(cells)

    def notify(self, message: str, variant: str = "info") -> None:
        self._print(f"[{variant}] {message}")

    def play_sound(self, name: str) -> None:
        logger.debug("play_sound(%s)", name)
        # terminal bell stands in for audio
        if name == "sunk":
            self.out.write("\a")
            self.out.flush()

    def navigate_to_game_over(self, winner: int) -> None:
        self.winner = winner
        self._print(f"\n*** Player {winner} wins! ***")
