"""Central configuration for runtime-tunable parameters.

All constants can be overridden via environment variables so that a normal
game runs with comfortable human-scale delays, while the automated test-suite
can build a :class:`Settings` with every delay shrunk to zero.
"""

from __future__ import annotations

import os
from dataclasses import dataclass


class ConfigurationError(ValueError):
    """Raised when the configured ship bounds cannot produce a playable game."""


# ===========================================================================
# Board Geometry
# ===========================================================================
# SALVO_BOARD_SIZE: Width and height of each player's grid.
#   Defaults to 10 (for a 10x10 grid).
#   Example: export SALVO_BOARD_SIZE=8
BOARD_SIZE: int = int(os.getenv("SALVO_BOARD_SIZE", "10"))

# SALVO_CELL_SIZE: Pixel width/height of a single cell. Used to map pointer
#   coordinates onto grid cells.
CELL_SIZE: int = int(os.getenv("SALVO_CELL_SIZE", "50"))

# SALVO_BOARD_SEPARATION: Horizontal pixel offset of each board's centre from
#   the canvas centre (player 1 to the left, player 2 to the right).
BOARD_SEPARATION: int = int(os.getenv("SALVO_BOARD_SEPARATION", "400"))

# SALVO_CANVAS_WIDTH / SALVO_CANVAS_HEIGHT: Size of the virtual drawing surface.
CANVAS_WIDTH: int = int(os.getenv("SALVO_CANVAS_WIDTH", "1400"))
CANVAS_HEIGHT: int = int(os.getenv("SALVO_CANVAS_HEIGHT", "800"))


# ===========================================================================
# Fleet Limits
# ===========================================================================
# SALVO_MIN_SHIPS / SALVO_MAX_SHIPS: Range offered when players choose how many
#   ships each side places. Ship lengths run 1..N, so MAX_SHIPS may not exceed
#   BOARD_SIZE.
MIN_SHIPS: int = int(os.getenv("SALVO_MIN_SHIPS", "1"))
MAX_SHIPS: int = int(os.getenv("SALVO_MAX_SHIPS", "5"))


# ===========================================================================
# Turn Timing
# ===========================================================================
# SALVO_TURN_SECONDS: Countdown for each firing turn. When it reaches zero the
#   turn is forfeited.
TURN_SECONDS: float = float(os.getenv("SALVO_TURN_SECONDS", "20"))

# SALVO_TURN_DELAY_MS: Pause after a placement or shot before the hand-over
#   prompt appears, so both players can see the result.
TURN_DELAY_MS: int = int(os.getenv("SALVO_TURN_DELAY_MS", "2000"))

# SALVO_GAME_OVER_DELAY_MS: Settle delay between the winning shot and the
#   game-over screen.
GAME_OVER_DELAY_MS: int = int(os.getenv("SALVO_GAME_OVER_DELAY_MS", "2000"))

# SALVO_TICK_INTERVAL: Seconds between frame ticks in the console frontend.
TICK_INTERVAL: float = float(os.getenv("SALVO_TICK_INTERVAL", "0.1"))


# ===========================================================================
# Controls
# ===========================================================================
ROTATE_KEY: str = os.getenv("SALVO_ROTATE_KEY", "r")
DELETE_KEY: str = os.getenv("SALVO_DELETE_KEY", "x")
PAUSE_KEY: str = os.getenv("SALVO_PAUSE_KEY", "space")


# ===========================================================================
# Debugging and Logging
# ===========================================================================
# SALVO_DEBUG: If "1", enables detailed debug logging across modules.
#   Defaults to "0" (disabled).
DEBUG: bool = os.getenv("SALVO_DEBUG", "0") == "1"


@dataclass(frozen=True)
class Settings:
    """Snapshot of every option a :class:`~salvo.session.GameSession` reads."""

    board_size: int = BOARD_SIZE
    cell_size: int = CELL_SIZE
    board_separation: int = BOARD_SEPARATION
    canvas_width: int = CANVAS_WIDTH
    canvas_height: int = CANVAS_HEIGHT
    min_ships: int = MIN_SHIPS
    max_ships: int = MAX_SHIPS
    turn_seconds: float = TURN_SECONDS
    turn_delay_ms: int = TURN_DELAY_MS
    game_over_delay_ms: int = GAME_OVER_DELAY_MS
    rotate_key: str = ROTATE_KEY
    delete_key: str = DELETE_KEY
    pause_key: str = PAUSE_KEY

    def validate(self) -> None:
        """Raise :class:`ConfigurationError` if the ship bounds are unusable."""
        if self.min_ships <= 0 or self.max_ships > self.board_size:
            raise ConfigurationError(
                f"Invalid ship bounds: min={self.min_ships} max={self.max_ships} "
                f"for board size {self.board_size}"
            )
        if self.min_ships > self.max_ships:
            raise ConfigurationError(f"Minimum ships ({self.min_ships}) exceeds maximum ({self.max_ships})")
