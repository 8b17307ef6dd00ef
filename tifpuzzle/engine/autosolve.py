r"""
Auto-Solve Module - Sequenced automatic placement of the remaining tiles.

Each step moves one tile to its cell center, waits one `speed` interval
for the presentation layer to animate the move, then commits the tile as
placed and schedules the next step. Tiles are processed strictly one at a
time in the order captured when the run started.

Step Flow:
    start -> [write position] --speed--> [commit placed] -> next tile ...
                                                       \-> (none left) --speed--> finish

Stopping clears `running`; a pending commit then does nothing, so the
tile being moved stays where it was written, unplaced.
"""

import logging
from typing import Callable, List, Optional

from .constants import DEFAULT_ANIMATION_SPEED, FAST_ANIMATION_SPEED
from .events import EventHub, PuzzleEvent
from .geometry import GeometrySnapshot, target_local_position
from .scheduler import ScheduledCall, Scheduler
from .store import PieceStore

logger = logging.getLogger(__name__)


class AutoSolveSequencer:
    """
    Cooperative, cancellable auto-solve driver.

    Attributes:
        default_speed: Seconds per tile at the start of every run
        fast_speed: Seconds per tile after speed_up()
    """

    def __init__(self, store: PieceStore, scheduler: Scheduler, events: EventHub,
                 on_finished: Optional[Callable[[], None]] = None,
                 default_speed: float = DEFAULT_ANIMATION_SPEED,
                 fast_speed: float = FAST_ANIMATION_SPEED):
        """
        Args:
            store: Tile store to walk
            scheduler: Timer source for the per-tile waits
            events: Hub for tile and state notifications
            on_finished: Called after the final wait (completion check)
            default_speed: Seconds per tile at run start
            fast_speed: Seconds per tile after speed_up()
        """
        self._store = store
        self._scheduler = scheduler
        self._events = events
        self._on_finished = on_finished
        self.default_speed = default_speed
        self.fast_speed = fast_speed

        self._running = False
        self._speed = default_speed
        self._snapshot: List[int] = []
        self._index = 0
        self._run_id = 0
        self._pending: Optional[ScheduledCall] = None
        self._geometry: Optional[GeometrySnapshot] = None
        self._cell_size = 0.0

    @property
    def running(self) -> bool:
        return self._running

    @property
    def speed(self) -> float:
        """Current seconds-per-tile; read at each wait."""
        return self._speed

    @property
    def snapshot(self) -> List[int]:
        """Tile ids captured for the current (or last) run."""
        return list(self._snapshot)

    @property
    def index(self) -> int:
        """Position of the next tile to process within the snapshot."""
        return self._index

    def start(self, geometry: GeometrySnapshot, cell_size: float) -> bool:
        """
        Begin solving every unplaced tile.

        Args:
            geometry: Layout rectangles used to compute targets
            cell_size: Grid cell side

        Returns:
            True if a run started (False if already running, geometry
            is unknown or no tile is left to place)
        """
        if self._running:
            logger.warning("Auto-solve already running")
            return False
        if not geometry.is_ready or cell_size <= 0:
            logger.debug("Auto-solve ignored: geometry unknown")
            return False
        remaining = [t.id for t in self._store.unplaced()]
        if not remaining:
            logger.debug("Auto-solve ignored: every tile already placed")
            return False

        self._run_id += 1
        self._geometry = geometry
        self._cell_size = cell_size
        self._snapshot = remaining
        self._index = 0
        self._set_speed(self.default_speed)
        self._set_running(True)

        logger.info(f"Auto-solve started: {len(self._snapshot)} tiles, {self._speed:.1f}s per tile")
        self._step(self._run_id)
        return True

    def stop(self) -> None:
        """Cancel the run; takes effect before the next commit."""
        if not self._running:
            return
        self._set_running(False)
        logger.info(f"Auto-solve stopped at tile {self._index + 1}/{len(self._snapshot)}")

    def speed_up(self) -> None:
        """Switch to the fast pace for the rest of the run."""
        if self._running and self._speed != self.fast_speed:
            self._set_speed(self.fast_speed)
            logger.info(f"Auto-solve sped up to {self._speed:.1f}s per tile")

    def _step(self, run_id: int) -> None:
        if run_id != self._run_id:
            return

        if self._index >= len(self._snapshot):
            self._pending = self._scheduler.call_later(self._speed, lambda: self._finish(run_id))
            return

        if not self._running:
            return

        tile = self._store.get(self._snapshot[self._index])
        target = target_local_position(tile, self._geometry, self._cell_size)
        self._store.set_position(tile.id, target)
        self._store.set_rotation(tile.id, 0.0)
        self._events.emit(PuzzleEvent.TILE_MOVED, tile)

        self._pending = self._scheduler.call_later(self._speed, lambda: self._commit(run_id))

    def _commit(self, run_id: int) -> None:
        if run_id != self._run_id or not self._running:
            return

        tile = self._store.set_placed(self._snapshot[self._index])
        logger.debug(f"Auto-solve placed tile {tile.id} ({self._index + 1}/{len(self._snapshot)})")
        self._events.emit(PuzzleEvent.TILE_PLACED, tile)

        self._index += 1
        self._step(run_id)

    def _finish(self, run_id: int) -> None:
        if run_id != self._run_id:
            return
        self._pending = None
        if self._running:
            self._set_running(False)
        logger.info("Auto-solve finished")
        if self._on_finished:
            self._on_finished()

    def abandon(self) -> None:
        """
        Drop the current run entirely (puzzle being rebuilt).

        Unlike stop(), pending callbacks are cancelled, including the
        final completion wait.
        """
        self._run_id += 1
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
        if self._running:
            self._set_running(False)
        self._snapshot = []
        self._index = 0

    def _set_running(self, running: bool) -> None:
        self._running = running
        self._events.emit(PuzzleEvent.AUTO_SOLVE_STATE, running)

    def _set_speed(self, speed: float) -> None:
        self._speed = speed
        self._events.emit(PuzzleEvent.SPEED_CHANGED, speed)
