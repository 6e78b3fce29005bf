import asyncio
import dataclasses
import logging
import sys
from pathlib import Path
from typing import List, Optional

import pytest

# Ensure local `src` directory is importable before project is installed.
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from salvo.battleship import Orientation
from salvo.config import Settings
from salvo.frontend import Choice
from salvo.session import GameSession

# Suppress INFO & DEBUG logs from the session during tests
logging.basicConfig(level=logging.WARNING)


class FakeClock:
    """Manually advanced stand-in for ``time.monotonic``."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeFrontend:
    """Records every collaborator call; prompt answers are scripted.

    ``confirms`` is consumed in order, falling back to ``default_confirm``.
    If ``gate`` is set, confirmation prompts stay open until it is released.
    """

    def __init__(self, *, ships: int = 1, confirms: Optional[List[bool]] = None) -> None:
        self.choice = Choice(ok=True, value=ships)
        self.confirms = list(confirms or [])
        self.default_confirm = True
        self.gate: Optional[asyncio.Event] = None
        self.prompts: List[str] = []
        self.notifications: List[tuple] = []
        self.sounds: List[str] = []
        self.navigations: List[int] = []
        self.boards: List[tuple] = []
        self.labels: List[str] = []
        self.timers: List[int] = []
        self.ghosts: List[list] = []

    async def show_choice(self, minimum: int, maximum: int) -> Choice:
        self.prompts.append(f"choice {minimum}-{maximum}")
        return self.choice

    async def show_confirm(self, title: str, message: str) -> bool:
        self.prompts.append(title)
        if self.gate is not None:
            await self.gate.wait()
        return self.confirms.pop(0) if self.confirms else self.default_confirm

    def render_board(self, board, mask: bool) -> None:
        self.boards.append((board.name, mask))

    def render_label(self, text: str) -> None:
        self.labels.append(text)

    def render_timer(self, seconds: int) -> None:
        self.timers.append(seconds)

    def render_ghost_preview(self, cells) -> None:
        self.ghosts.append([(c.col, c.row) for c in cells])

    def notify(self, message: str, variant: str = "info") -> None:
        self.notifications.append((message, variant))

    def play_sound(self, name: str) -> None:
        self.sounds.append(name)

    def navigate_to_game_over(self, winner: int) -> None:
        self.navigations.append(winner)

    @property
    def messages(self) -> List[str]:
        return [m for m, _ in self.notifications]


def cell_point(session: GameSession, player_id: int, col: int, row: int):
    """Pixel centre of (col, row) on *player_id*'s board."""
    return session.players[player_id].board.cell_center(col, row)


async def place(session: GameSession, col: int, row: int) -> None:
    """Click (col, row) on the current player's own board."""
    await session.handle_click(*cell_point(session, session.current_player_id, col, row))


async def fire(session: GameSession, col: int, row: int) -> None:
    """Click (col, row) on the current player's opponent's board."""
    await session.handle_click(*cell_point(session, session.opponent.id, col, row))


@pytest.fixture
def settings() -> Settings:
    return Settings(board_size=10, min_ships=1, max_ships=5, turn_seconds=20, turn_delay_ms=0, game_over_delay_ms=0)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def session_factory(settings: Settings, clock: FakeClock):
    """Build a GameSession wired to a FakeFrontend and the manual clock."""

    def _factory(*, ships: int = 1, confirms: Optional[List[bool]] = None, **overrides):
        frontend = FakeFrontend(ships=ships, confirms=confirms)
        cfg = dataclasses.replace(settings, **overrides)
        return GameSession(frontend, cfg, clock=clock), frontend

    return _factory


@pytest.fixture
def play_factory(session_factory):
    """Coroutine factory returning a session already in PLAY.

    Each player's ships are laid out eastward from column 0, one row per
    ship length: player N's length-k ship covers (0..k-1, k-1).
    """

    async def _factory(*, ships: int = 1, **overrides):
        session, frontend = session_factory(ships=ships, **overrides)
        assert await session.start()
        for _ in range(ships):
            for _player in (1, 2):
                length = session.current_player.next_ship_length(ships)
                session.current_player.orientation = Orientation.E
                await place(session, 0, length - 1)
        return session, frontend

    return _factory
