"""
Events Module - Observer hub for engine state changes.

Presentation layers subscribe to the events they render; the engine does
not depend on any UI toolkit's signal machinery.
"""

import logging
from collections import defaultdict
from enum import Enum, auto
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)


class PuzzleEvent(Enum):
    """
    Events emitted by the puzzle controller.

    Payloads:
        TILES_RESET: list of tiles
        TILE_MOVED: tile
        TILE_SNAPPED: tile (accepted drop, animate with a spring)
        TILE_PLACED: tile
        COMPLETED: none
        AUTO_SOLVE_VISIBILITY: bool
        AUTO_SOLVE_STATE: bool (running)
        SPEED_CHANGED: float (seconds per tile)
        GRID_SIZE_CHANGED: int
        IMAGE_CHANGED: bool (custom artwork present)
    """
    TILES_RESET = auto()
    TILE_MOVED = auto()
    TILE_SNAPPED = auto()
    TILE_PLACED = auto()
    COMPLETED = auto()
    AUTO_SOLVE_VISIBILITY = auto()
    AUTO_SOLVE_STATE = auto()
    SPEED_CHANGED = auto()
    GRID_SIZE_CHANGED = auto()
    IMAGE_CHANGED = auto()


class EventHub:
    """Synchronous publish/subscribe keyed by PuzzleEvent."""

    def __init__(self):
        self._subscribers: Dict[PuzzleEvent, List[Callable[..., None]]] = defaultdict(list)

    def subscribe(self, event: PuzzleEvent, callback: Callable[..., None]) -> None:
        self._subscribers[event].append(callback)

    def unsubscribe(self, event: PuzzleEvent, callback: Callable[..., None]) -> None:
        if callback in self._subscribers[event]:
            self._subscribers[event].remove(callback)

    def emit(self, event: PuzzleEvent, *payload: Any) -> None:
        """Call every subscriber of event, in subscription order."""
        for callback in list(self._subscribers[event]):
            callback(*payload)
