"""Player: one side of the match, binding a board to placement state."""

from __future__ import annotations

import logging
from typing import Dict, Optional

from .battleship import Board, CellState, Orientation, Ship, ShotResult

logger = logging.getLogger(__name__)


class Player:
    """A player's board plus the ships they have placed and their current facing.

    Ships are registered under the sequential id the board assigns at
    placement, so two ships of the same length never collide.
    """

    def __init__(self, player_id: int, board: Board, orientation: Orientation = Orientation.N):
        self.id = player_id
        self.board = board
        self.orientation = orientation
        self.ships: Dict[int, Ship] = {}

    def placed_lengths(self) -> set[int]:
        return {ship.length for ship in self.ships.values()}

    def next_ship_length(self, ships_per_player: int) -> Optional[int]:
        """Smallest length in ``1..ships_per_player`` not yet on the board."""
        placed = self.placed_lengths()
        for length in range(1, ships_per_player + 1):
            if length not in placed:
                return length
        return None

    def is_ready(self, ships_per_player: int) -> bool:
        return len(self.ships) == ships_per_player

    def place_ship_at(self, px: float, py: float, length: int) -> Optional[Ship]:
        """Anchor a ship of *length* at the cell under (*px*, *py*) facing :attr:`orientation`."""
        cell = self.board.cell_at(px, py)
        if cell is None:
            return None
        ship = self.board.place_ship(cell.col, cell.row, length, self.orientation)
        if ship is None:
            return None
        self.ships[ship.ship_id] = ship
        logger.info("Player %d placed ship %d (length %d) at (%d,%d)", self.id, ship.ship_id, length, cell.col, cell.row)
        return ship

    def fire_at(self, px: float, py: float) -> Optional[ShotResult]:
        """Receive a shot at the cell under (*px*, *py*) on this player's own board.

        Callers target the *opponent's* Player. Returns ``None`` when the
        point is off the board or the cell has already been fired at.
        """
        cell = self.board.cell_at(px, py)
        if cell is None or cell.state is not CellState.EMPTY:
            return None
        outcome = cell.fire()
        ship = cell.ship
        return ShotResult(hit=outcome == "hit", cell=cell, sunk=ship is not None and ship.is_sunk())

    def rotate_ship(self) -> Orientation:
        self.orientation = self.orientation.rotated()
        return self.orientation

    def delete_ship_at(self, px: float, py: float) -> bool:
        """Retract the ship under (*px*, *py*). Returns whether one was removed."""
        cell = self.board.cell_at(px, py)
        if cell is None or cell.ship is None:
            return False
        ship = cell.ship
        self.board.remove_ship(ship)
        self.ships.pop(ship.ship_id, None)
        logger.info("Player %d removed ship %d (length %d)", self.id, ship.ship_id, ship.length)
        return True

    def all_ships_sunk(self) -> bool:
        return self.board.all_ships_sunk()
