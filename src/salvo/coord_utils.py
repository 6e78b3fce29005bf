import re
from typing import Tuple

# Column letter followed by a 1-based row number, e.g. "A1" or "J10"
COORD_RE = re.compile(r"^([A-Z])([1-9][0-9]?)$")


def coord_to_colrow(coord: str, size: int = 26) -> Tuple[int, int]:
    """
    Convert a coordinate like 'A1' through 'J10' to a zero-based (col, row) tuple.

    Raises ValueError if the text is malformed or falls outside a *size*×*size* grid.
    """
    match = COORD_RE.match(coord.strip().upper())
    if not match:
        raise ValueError(f"Invalid coordinate: {coord!r}")
    col = ord(match.group(1)) - ord("A")
    row = int(match.group(2)) - 1
    if col >= size or row >= size:
        raise ValueError(f"Coordinate {coord!r} is off a {size}x{size} board")
    return col, row


def format_coord(col: int, row: int) -> str:
    """
    Convert zero-based (col, row) to a coordinate string like 'A1'.
    """
    return f"{chr(ord('A') + col)}{row + 1}"
