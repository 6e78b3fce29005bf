"""
battleship.py

Contains the core data structures of the hotseat Battleship rules engine:
 - Cell: one grid square holding an optional ship occupant and a fired-state
 - Ship: a contiguous run of cells with a hit counter
 - Board: an N×N grid of cells plus the ships placed on it, with placement
   validation and pixel → cell mapping

Nothing in this module draws anything. Pixel geometry is kept only so that
pointer coordinates coming from a frontend can be mapped onto grid cells.
"""

from __future__ import annotations

import enum
import itertools
import logging
import math
import weakref
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from typing_extensions import Literal

from .config import BOARD_SIZE, CELL_SIZE

logger = logging.getLogger(__name__)

FireOutcome = Literal["hit", "miss"]


class InvalidPlacement(ValueError):
    """Raised when a ship is handed a cell list that does not match its length."""


class CellState(str, enum.Enum):
    """Fired-state of a single cell."""

    EMPTY = "EMPTY"
    HIT = "HIT"
    MISS = "MISS"


class Orientation(str, enum.Enum):
    """Direction a ship extends from its anchor cell."""

    N = "N"
    E = "E"
    S = "S"
    W = "W"

    @property
    def step(self) -> Tuple[int, int]:
        """(dcol, drow) for one cell in this direction."""
        return _STEPS[self]

    def rotated(self) -> "Orientation":
        """Next orientation clockwise: N → E → S → W → N."""
        order = list(Orientation)
        return order[(order.index(self) + 1) % len(order)]


_STEPS = {
    Orientation.N: (0, -1),
    Orientation.S: (0, 1),
    Orientation.E: (1, 0),
    Orientation.W: (-1, 0),
}


class Cell:
    """
    One square of a board.

    The occupying ship is held through a weak reference: the board owns its
    cells and its ships, a cell merely points at whichever ship sits on it.
    """

    def __init__(self, col: int, row: int, x: float = 0.0, y: float = 0.0, size: float = CELL_SIZE):
        self.col = col
        self.row = row
        self.x = x
        self.y = y
        self.size = size
        self.state = CellState.EMPTY
        self._ship: Optional[weakref.ReferenceType[Ship]] = None

    @property
    def ship(self) -> Optional["Ship"]:
        return self._ship() if self._ship is not None else None

    @ship.setter
    def ship(self, ship: Optional["Ship"]) -> None:
        self._ship = weakref.ref(ship) if ship is not None else None

    def fire(self) -> Optional[FireOutcome]:
        """Resolve a shot at this cell.

        Returns ``"hit"`` or ``"miss"`` for a fresh cell. A cell that has
        already been fired at is left untouched and ``None`` is returned, so a
        repeated shot can never count twice against a ship.
        """
        if self.state is not CellState.EMPTY:
            logger.debug("fire() ignored – cell (%d,%d) already %s", self.col, self.row, self.state.value)
            return None
        ship = self.ship
        if ship is not None:
            self.state = CellState.HIT
            ship.hit()
            return "hit"
        self.state = CellState.MISS
        return "miss"

    def __repr__(self) -> str:
        return f"Cell({self.col}, {self.row}, {self.state.value})"


class Ship:
    """A ship of *length* cells that tracks how many of them have been hit."""

    def __init__(self, length: int, ship_id: int | None = None):
        if length <= 0:
            raise InvalidPlacement(f"Ship length must be positive, got {length}")
        self.length = length
        self.ship_id = ship_id
        self.hits = 0
        self.cells: List[Cell] = []

    def hit(self) -> bool:
        """Register one hit. Hits on an already-sunk ship are ignored."""
        if self.is_sunk():
            logger.debug("hit() ignored – ship %s already sunk", self.ship_id)
            return False
        self.hits += 1
        return True

    def place(self, cells: List[Cell]) -> None:
        """Occupy *cells* and point each of them back at this ship."""
        if len(cells) != self.length:
            raise InvalidPlacement(f"Ship of length {self.length} given {len(cells)} cells")
        self.cells = list(cells)
        for cell in self.cells:
            cell.ship = self

    def is_sunk(self) -> bool:
        return self.hits >= self.length

    def __repr__(self) -> str:
        return f"Ship(id={self.ship_id}, length={self.length}, hits={self.hits})"


@dataclass(frozen=True)
class ShotResult:
    """Outcome of a single accepted shot."""

    hit: bool
    cell: Cell
    sunk: bool = False


class Board:
    """
    A single player's grid.

    ``cells`` is indexed ``cells[col][row]``. Pixel geometry is derived from
    the board's centre point and cell size; ``cell_at`` inverts it.
    """

    def __init__(
        self,
        size: int = BOARD_SIZE,
        cell_size: float = CELL_SIZE,
        center: Tuple[float, float] = (0.0, 0.0),
        *,
        name: str = "",
    ):
        """Initialise an empty *size*×*size* board with no ships placed."""
        self.size = size
        self.cell_size = cell_size
        self.center = center
        self.name = name
        self.ships: List[Ship] = []
        self._ids = itertools.count(1)

        span = size * cell_size
        self.origin = (center[0] - span / 2, center[1] - span / 2)
        ox, oy = self.origin
        self.cells: List[List[Cell]] = [
            [Cell(col, row, ox + col * cell_size, oy + row * cell_size, cell_size) for row in range(size)]
            for col in range(size)
        ]

    # ------------------------------------------------------------------
    # spatial queries
    # ------------------------------------------------------------------
    def in_bounds(self, col: int, row: int) -> bool:
        return 0 <= col < self.size and 0 <= row < self.size

    def cell(self, col: int, row: int) -> Optional[Cell]:
        return self.cells[col][row] if self.in_bounds(col, row) else None

    def iter_cells(self) -> Iterator[Cell]:
        for column in self.cells:
            yield from column

    def cell_at(self, px: float, py: float) -> Optional[Cell]:
        """Return the cell under pixel (*px*, *py*), or ``None`` if off the board."""
        ox, oy = self.origin
        col = math.floor((px - ox) / self.cell_size)
        row = math.floor((py - oy) / self.cell_size)
        return self.cell(col, row)

    def cell_center(self, col: int, row: int) -> Tuple[float, float]:
        """Pixel centre of the cell at (*col*, *row*); used by frontends to synthesise clicks."""
        ox, oy = self.origin
        return (ox + (col + 0.5) * self.cell_size, oy + (row + 0.5) * self.cell_size)

    # ------------------------------------------------------------------
    # placement
    # ------------------------------------------------------------------
    def valid_placement_cells(
        self, col: int, row: int, length: int, orientation: Orientation
    ) -> Optional[List[Cell]]:
        """Cells a ship of *length* anchored at (*col*, *row*) would occupy.

        The anchor comes first and the rest follow in the step direction.
        Returns ``None`` if any cell leaves the grid or is already occupied.
        """
        dc, dr = Orientation(orientation).step
        cells: List[Cell] = []
        for i in range(length):
            cell = self.cell(col + dc * i, row + dr * i)
            if cell is None or cell.ship is not None:
                return None
            cells.append(cell)
        return cells

    def place_ship(self, col: int, row: int, length: int, orientation: Orientation) -> Optional[Ship]:
        """Place a new ship and return it, or ``None`` (board untouched) if invalid."""
        cells = self.valid_placement_cells(col, row, length, orientation)
        if cells is None:
            logger.debug(
                "place_ship() rejected – %s len=%d at (%d,%d) facing %s", self.name, length, col, row, orientation
            )
            return None
        ship = Ship(length, ship_id=next(self._ids))
        ship.place(cells)
        self.ships.append(ship)
        logger.debug("place_ship() – %s %r at (%d,%d) facing %s", self.name, ship, col, row, orientation)
        return ship

    def remove_ship(self, ship: Ship) -> None:
        """Lift *ship* off the board, clearing every cell it occupied."""
        for cell in ship.cells:
            cell.ship = None
        self.ships.remove(ship)

    def all_ships_sunk(self) -> bool:
        """Return True if every ship on this board has been sunk (vacuously True when empty)."""
        return all(ship.is_sunk() for ship in self.ships)
