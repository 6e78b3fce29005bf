"""Lightweight event model used by GameSession to decouple game logic from observers.

The session emits strongly-typed events that subscribers (a logger, a replay
recorder, a test) can consume without scraping frontend output.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Callable, Dict

logger = logging.getLogger(__name__)


class Category(Enum):
    """High-level event categories."""

    TURN = auto()  # placement, shots, hand-over, timeout, result
    SYSTEM = auto()  # phase changes, pause toggles


@dataclass(frozen=True, slots=True)
class Event:
    """Immutable event emitted by GameSession."""

    category: Category
    type: str  # finer-grained identifier, e.g. "shot", "turn", "end"
    payload: Dict[str, Any]


class EventRouter:
    """Dispatch events to one handler per event type."""

    def __init__(self) -> None:
        self.handlers: Dict[str, Callable[[Event], None]] = {}

    def register_handler(self, event_type: str, handler: Callable[[Event], None]) -> None:
        self.handlers[event_type] = handler

    def route_event(self, event: Event) -> None:
        handler = self.handlers.get(event.type)
        if handler is None:
            logger.debug("No handler for event type: %s", event.type)
            return
        handler(event)

    __call__ = route_event
