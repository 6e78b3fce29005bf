# io_utils.py
"""
Text rendering helpers shared by the console frontend
–––––––––––––––––––––––––––––––––––––––––––––––––––––
• cell_symbol() – one cell → single character
• grid_rows()   – Board → ["A B C …", "1 . S X …", …] with ships optionally masked
"""

from typing import Iterable, List, Optional

from .battleship import Board, Cell, CellState
import logging

logger = logging.getLogger(__name__)

EMPTY = "."
SHIP = "S"
HIT = "X"
MISS = "o"
GHOST = "+"


def cell_symbol(cell: Cell, *, mask: bool = False) -> str:
    if cell.state is CellState.HIT:
        return HIT
    if cell.state is CellState.MISS:
        return MISS
    ship = cell.ship
    if ship is not None and (not mask or ship.is_sunk()):
        return SHIP
    return EMPTY


def grid_rows(board: Board, *, mask: bool = False, ghost: Optional[Iterable[Cell]] = None) -> List[str]:
    """Render *board* as text rows: a column-letter header then one line per row.

    Masked boards hide ships that are still afloat. Ghost cells, if given, are
    drawn over empty water.
    """
    logger.debug("grid_rows() start – board=%s mask=%s", board.name, mask)
    ghost_at = {(c.col, c.row) for c in ghost or ()}
    width = len(str(board.size))
    rows = [" " * width + " " + " ".join(chr(ord("A") + c) for c in range(board.size))]
    for r in range(board.size):
        symbols = []
        for c in range(board.size):
            sym = cell_symbol(board.cells[c][r], mask=mask)
            if sym == EMPTY and (c, r) in ghost_at:
                sym = GHOST
            symbols.append(sym)
        rows.append(f"{r + 1:>{width}} " + " ".join(symbols))
    return rows
