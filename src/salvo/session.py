"""Two-player hotseat match coordination.

:class:`GameSession` owns both players and drives the match lifecycle::

    INIT ──choose ship count──▶ SETUP ──both fleets placed──▶ PLAY ──fleet destroyed──▶ GAME_OVER
                                  │                             │
                                  └──── hand-over declined ─────┴──────────────────────▶ GAME_OVER

Input arrives through ``handle_click``, ``handle_mouse_move``,
``handle_key_press`` and ``tick``. Everything visible or audible goes out
through the injected :class:`~salvo.frontend.Frontend`.

Between turns the device is handed to the other player. While a placement,
shot or timeout is being resolved (result shown, delay running, hand-over
prompt open) :attr:`GameSession.is_resolving_turn` is set and every further
input is dropped, not queued. Declining the hand-over prompt ends the match.
"""

from __future__ import annotations

import asyncio
import enum
import logging
import time
from typing import Callable, Dict, List, Tuple

from .battleship import Board, Cell
from .config import Settings
from .events import Category, Event
from .frontend import Frontend
from .player import Player
from .timer import Countdown

logger = logging.getLogger(__name__)

NEXT_TURN_TITLE = "Next turn"
NEXT_TURN_MESSAGE = "Please hand over the device to the next player and let them confirm"


class Phase(str, enum.Enum):
    INIT = "INIT"
    SETUP = "SETUP"
    PLAY = "PLAY"
    GAME_OVER = "GAME_OVER"


_TRANSITIONS = {
    Phase.INIT: {Phase.SETUP},
    Phase.SETUP: {Phase.PLAY, Phase.GAME_OVER},
    Phase.PLAY: {Phase.GAME_OVER},
    Phase.GAME_OVER: set(),
}


class InvalidTransition(RuntimeError):
    """Raised when code attempts a phase change the lifecycle does not allow."""


class GameSession:
    """Turn coordinator for a single two-player match on one device."""

    def __init__(
        self,
        frontend: Frontend,
        settings: Settings | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.frontend = frontend
        self.settings = settings or Settings()

        self.phase = Phase.INIT
        self.current_player_id = 1
        self.ships_per_player: int | None = None
        self.is_resolving_turn = False
        self.winner: int | None = None

        self.timer = Countdown(self.settings.turn_seconds, clock)

        s = self.settings
        cx, cy = s.canvas_width / 2, s.canvas_height / 2
        self.players: Dict[int, Player] = {
            1: Player(1, Board(s.board_size, s.cell_size, (cx - s.board_separation, cy), name="Player 1")),
            2: Player(2, Board(s.board_size, s.cell_size, (cx + s.board_separation, cy), name="Player 2")),
        }

        # Setup-phase pointer state for ghost preview and deletion
        self.pointer: Tuple[float, float] | None = None
        self.hovered_cell: Cell | None = None
        self.ghost_cells: List[Cell] = []

        self._shots: Dict[int, int] = {1: 0, 2: 0}
        self._subs: List[Callable[[Event], None]] = []

    # -------------------- players --------------------
    @property
    def current_player(self) -> Player:
        return self.players[self.current_player_id]

    @property
    def opponent(self) -> Player:
        return self.players[2 if self.current_player_id == 1 else 1]

    def both_players_ready(self) -> bool:
        return all(p.is_ready(self.ships_per_player) for p in self.players.values())

    def _switch_player(self) -> None:
        self.current_player_id = 2 if self.current_player_id == 1 else 1

    # -------------------- lifecycle --------------------
    async def start(self) -> bool:
        """Ask for the ship count and enter SETUP.

        Raises :class:`~salvo.config.ConfigurationError` before anything else
        if the configured ship bounds are unusable. Returns False, staying in
        INIT, if the player backs out of the choice; the caller should leave.
        """
        s = self.settings
        s.validate()
        choice = await self.frontend.show_choice(s.min_ships, s.max_ships)
        if not choice.ok:
            logger.info("Ship count selection cancelled – staying in INIT")
            return False
        if choice.value is None or not s.min_ships <= choice.value <= s.max_ships:
            raise ValueError(f"Ship count {choice.value} outside {s.min_ships}..{s.max_ships}")
        self.ships_per_player = choice.value
        self._transition(Phase.SETUP)
        self.frontend.notify(f"Player {self.current_player_id} place ship", "info")
        return True

    def _transition(self, new: Phase) -> None:
        if new not in _TRANSITIONS[self.phase]:
            raise InvalidTransition(f"Cannot move from {self.phase.value} to {new.value}")
        old, self.phase = self.phase, new
        logger.info("Phase %s -> %s", old.value, new.value)
        self._emit(Event(Category.SYSTEM, "phase", {"from": old.value, "to": new.value}))

    def _start_play(self) -> None:
        self._transition(Phase.PLAY)
        self.current_player_id = 1
        self._clear_ghost()
        self.frontend.notify("Battle begins!", "success")
        self.timer.reset(self.settings.turn_seconds)
        self.timer.resume()

    async def _conclude(self, winner: int) -> None:
        """Winning shot: end the match and, after the settle delay, show the result."""
        self.winner = winner
        self._transition(Phase.GAME_OVER)
        self.timer.pause()
        logger.info("Player %d wins after %d shots", winner, self._shots[winner])
        self._emit(Event(Category.TURN, "end", {"winner": winner, "shots": dict(self._shots)}))
        await self._delay(self.settings.game_over_delay_ms)
        self.frontend.navigate_to_game_over(winner)

    def _abandon(self) -> None:
        """Hand-over declined: the match ends with no winner."""
        self._transition(Phase.GAME_OVER)
        self.timer.pause()
        logger.info("Hand-over declined by player %d – game over", self.current_player_id)
        self._emit(Event(Category.TURN, "end", {"winner": None, "shots": dict(self._shots)}))

    # -------------------- input dispatch --------------------
    def _accepts_input(self, kind: str) -> bool:
        """Single gate for all player input: an active phase and no turn in flight."""
        if self.phase in (Phase.INIT, Phase.GAME_OVER):
            logger.debug("%s ignored – phase %s", kind, self.phase.value)
            return False
        if self.is_resolving_turn:
            logger.debug("%s ignored – turn resolution in progress", kind)
            return False
        return True

    async def handle_click(self, x: float, y: float) -> None:
        if not self._accepts_input("click"):
            return
        if self.phase is Phase.SETUP:
            await self._setup_click(x, y)
        elif self.phase is Phase.PLAY:
            await self._play_click(x, y)

    def handle_mouse_move(self, x: float, y: float) -> None:
        self.pointer = (x, y)
        if self.phase is not Phase.SETUP or not self._accepts_input("hover"):
            return
        cell = self.current_player.board.cell_at(x, y)
        if cell is None:
            return
        self.hovered_cell = cell
        self._update_ghost()

    def handle_key_press(self, key: str) -> None:
        if not self._accepts_input("key"):
            return
        key = key.lower()
        s = self.settings
        if self.phase is Phase.PLAY and key == s.pause_key.lower():
            self.toggle_pause()
        elif self.phase is Phase.SETUP and key == s.delete_key.lower():
            self.delete_ship()
        elif self.phase is Phase.SETUP and key == s.rotate_key.lower():
            self.rotate_ship()

    async def tick(self) -> None:
        """Periodic frame: advance the shot clock, redraw, and fire the timeout path."""
        if self.phase is Phase.PLAY:
            self.timer.update()
        self.render()
        if self.phase is Phase.PLAY and not self.is_resolving_turn and self.timer.is_finished():
            await self._handle_timeout()

    # -------------------- setup phase --------------------
    async def _setup_click(self, x: float, y: float) -> None:
        player = self.current_player
        length = player.next_ship_length(self.ships_per_player)
        if length is None:
            return
        ship = player.place_ship_at(x, y, length)
        if ship is None:
            return

        self.is_resolving_turn = True
        self._emit(
            Event(
                Category.TURN,
                "placed",
                {
                    "player": player.id,
                    "ship": ship.ship_id,
                    "length": ship.length,
                    "cells": [(c.col, c.row) for c in ship.cells],
                },
            )
        )
        self._update_ghost()

        await self._delay(self.settings.turn_delay_ms)
        if not await self.frontend.show_confirm(NEXT_TURN_TITLE, NEXT_TURN_MESSAGE):
            self._abandon()
            return

        self.is_resolving_turn = False
        if self.both_players_ready():
            self._start_play()
            return
        if not self.opponent.is_ready(self.ships_per_player):
            self._switch_player()
        self._clear_ghost()
        self._emit(Event(Category.TURN, "turn", {"player": self.current_player_id}))
        self.frontend.notify(f"Player {self.current_player_id} place ship", "info")

    def rotate_ship(self) -> None:
        orientation = self.current_player.rotate_ship()
        logger.debug("Player %d now facing %s", self.current_player_id, orientation.value)
        self._update_ghost()

    def delete_ship(self) -> bool:
        """Retract the current player's ship under the last pointer position."""
        if self.pointer is None:
            return False
        if not self.current_player.delete_ship_at(*self.pointer):
            return False
        self._emit(Event(Category.TURN, "deleted", {"player": self.current_player_id}))
        self._update_ghost()
        return True

    def _update_ghost(self) -> None:
        length = self.current_player.next_ship_length(self.ships_per_player or 0)
        if self.hovered_cell is None or length is None:
            self.ghost_cells = []
            return
        cells = self.current_player.board.valid_placement_cells(
            self.hovered_cell.col, self.hovered_cell.row, length, self.current_player.orientation
        )
        self.ghost_cells = cells or []

    def _clear_ghost(self) -> None:
        self.hovered_cell = None
        self.ghost_cells = []
        self.frontend.render_ghost_preview([])

    # -------------------- play phase --------------------
    async def _play_click(self, x: float, y: float) -> None:
        shooter = self.current_player_id
        target = self.opponent
        result = target.fire_at(x, y)
        if result is None:
            return

        self.is_resolving_turn = True
        self._shots[shooter] += 1
        cell = result.cell
        logger.info(
            "Player %d fired at (%d,%d): %s%s",
            shooter,
            cell.col,
            cell.row,
            "hit" if result.hit else "miss",
            " – sunk" if result.sunk else "",
        )
        self._emit(
            Event(
                Category.TURN,
                "shot",
                {"player": shooter, "col": cell.col, "row": cell.row, "hit": result.hit, "sunk": result.sunk},
            )
        )
        self.frontend.notify("Hit!" if result.hit else "Miss!", "success" if result.hit else "danger")
        self.frontend.play_sound("hit" if result.hit else "miss")

        if result.sunk:
            self.frontend.notify("Ship is sunk", "success")
            self.frontend.play_sound("sunk")
            # an empty board is vacuously sunk; only a placed fleet can be destroyed
            if target.board.ships and target.all_ships_sunk():
                self.frontend.notify(f"Player {shooter} Wins!", "success")
                await self._conclude(shooter)
                return

        self.timer.pause()
        await self._delay(self.settings.turn_delay_ms)
        await self._hand_over()

    async def _handle_timeout(self) -> None:
        self.is_resolving_turn = True
        self.timer.pause()
        logger.info("Player %d ran out of time", self.current_player_id)
        self._emit(Event(Category.TURN, "timeout", {"player": self.current_player_id}))
        self.frontend.notify("Time up!", "danger")
        await self._hand_over()

    async def _hand_over(self) -> None:
        """Ask for the next-turn confirmation; flip turns and restart the clock on yes."""
        if not await self.frontend.show_confirm(NEXT_TURN_TITLE, NEXT_TURN_MESSAGE):
            self._abandon()
            return
        self.is_resolving_turn = False
        self._switch_player()
        self.timer.reset(self.settings.turn_seconds)
        self.timer.resume()
        self._emit(Event(Category.TURN, "turn", {"player": self.current_player_id}))

    def toggle_pause(self) -> bool:
        """Pause or resume the shot clock. Only meaningful during PLAY."""
        if self.phase is not Phase.PLAY:
            return False
        if self.timer.running:
            self.timer.pause()
            self.frontend.notify("Paused", "info")
        else:
            self.timer.resume()
            self.frontend.notify("Resumed", "success")
        self._emit(Event(Category.SYSTEM, "pause", {"running": self.timer.running}))
        return True

    # -------------------- rendering --------------------
    def render(self) -> None:
        if self.phase is Phase.INIT:
            return
        fe = self.frontend
        over = self.phase is Phase.GAME_OVER
        for pid, player in self.players.items():
            fe.render_board(player.board, not over and pid != self.current_player_id)

        if self.phase is Phase.SETUP:
            fe.render_label(f"Player {self.current_player_id}'s Setup")
            if not self.is_resolving_turn:
                fe.render_ghost_preview(self.ghost_cells)
        elif self.phase is Phase.PLAY:
            fe.render_label(f"Player {self.current_player_id}'s Turn")
            fe.render_timer(self.timer.seconds_left())
        else:
            fe.render_label("Game Over")

    # -------------------- events --------------------
    def subscribe(self, cb: Callable[[Event], None]) -> None:
        """Allow external components (logger, recorder) to receive game events."""
        self._subs.append(cb)

    def _emit(self, ev: Event) -> None:
        for cb in tuple(self._subs):
            try:
                cb(ev)
            except Exception:
                logger.exception("Event subscriber failed on %s", ev.type)

    @property
    def shots(self) -> Dict[int, int]:
        return dict(self._shots)

    @staticmethod
    async def _delay(ms: int) -> None:
        await asyncio.sleep(ms / 1000)
