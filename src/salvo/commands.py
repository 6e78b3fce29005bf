"""Console command grammar for the hotseat terminal frontend."""

from dataclasses import dataclass
from typing import Union

from .coord_utils import coord_to_colrow


class CommandParseError(Exception):
    """Raised when a line cannot be parsed as a valid command."""


@dataclass(frozen=True)
class ClickCommand:
    """PLACE/FIRE: a click on a cell (which board depends on the phase)."""

    col: int
    row: int


@dataclass(frozen=True)
class HoverCommand:
    col: int
    row: int


@dataclass(frozen=True)
class DeleteCommand:
    col: int
    row: int


@dataclass(frozen=True)
class KeyCommand:
    key: str


@dataclass(frozen=True)
class QuitCommand:
    pass


Command = Union[ClickCommand, HoverCommand, DeleteCommand, KeyCommand, QuitCommand]

_COORD_VERBS = {"PLACE": ClickCommand, "FIRE": ClickCommand, "HOVER": HoverCommand, "DELETE": DeleteCommand}


def parse_command(line: str, *, size: int = 26, rotate_key: str = "r", pause_key: str = "space") -> Command:
    if line is None:
        raise CommandParseError("No command to parse")
    raw = line.strip()
    if not raw:
        raise CommandParseError("Empty command")
    parts = raw.split()
    verb = parts[0].upper()
    if verb in _COORD_VERBS:
        if len(parts) != 2:
            raise CommandParseError(f"{verb} requires a coordinate")
        try:
            col, row = coord_to_colrow(parts[1], size)
        except ValueError as exc:
            raise CommandParseError(str(exc)) from None
        return _COORD_VERBS[verb](col=col, row=row)
    if len(parts) != 1:
        raise CommandParseError(f"Unknown command: {raw}")
    if verb == "ROTATE":
        return KeyCommand(rotate_key)
    if verb == "PAUSE":
        return KeyCommand(pause_key)
    if verb == "QUIT":
        return QuitCommand()
    raise CommandParseError(f"Unknown command: {raw}")
