"""
Puzzle Controller Module - Lifecycle orchestration for one puzzle board.

Composes the piece store, drag controller, auto-solve sequencer and secret
gesture recognizer, owns the layout geometry snapshot, and publishes every
state change through an EventHub.

Usage:
    controller = PuzzleController(scheduler=QtScheduler())
    controller.events.subscribe(PuzzleEvent.COMPLETED, show_alert)
    controller.update_geometry(grid_rect=..., working_rect=..., control_bar_bottom=...)
    controller.initialize(width, height)

    controller.drag_move(tile_id, point)
    controller.drag_end(tile_id, point)
"""

import logging
import random
from enum import Enum
from typing import Any, List, Optional

from .autosolve import AutoSolveSequencer
from .constants import (
    COMPLETION_ALERT_DELAY,
    DEFAULT_GRID_SIZE,
    MAX_GRID_SIZE,
    MIN_GRID_SIZE,
    SUPPORTED_GRID_SIZES,
)
from .drag import DragController
from .events import EventHub, PuzzleEvent
from .geometry import (
    DropOutcome,
    DropResult,
    GeometrySnapshot,
    scatter_bounds,
    scatter_cell_size,
)
from .piece import Point, Tile
from .scheduler import Scheduler
from .secret import SecretGestureRecognizer
from .store import PieceStore

logger = logging.getLogger(__name__)


class Orientation(Enum):
    """Device/window orientation as reported by the layout layer."""
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"
    UNKNOWN = "unknown"

    @classmethod
    def from_size(cls, width: float, height: float) -> 'Orientation':
        if width <= 0 or height <= 0 or width == height:
            return cls.UNKNOWN
        return cls.PORTRAIT if height > width else cls.LANDSCAPE


class PuzzleController:
    """
    Puzzle lifecycle: initialize, reset, grid-size toggle, reshuffle and
    completion, plus the input entry points used by the presentation layer.
    """

    def __init__(self, scheduler: Scheduler, grid_size: int = DEFAULT_GRID_SIZE,
                 rng: Optional[random.Random] = None, events: Optional[EventHub] = None,
                 image: Any = None):
        """
        Args:
            scheduler: Timer source for auto-solve and the completion delay
            grid_size: Initial grid side (3 or 4)
            rng: Random source for scattering tiles
            events: Event hub (a new one is created if omitted)
            image: Custom artwork, None for the default
        """
        if grid_size not in SUPPORTED_GRID_SIZES:
            raise ValueError(f"Unsupported grid size: {grid_size}")

        self._scheduler = scheduler
        self._rng = rng or random.Random()
        self.events = events or EventHub()

        self._grid_size = grid_size
        self.store = PieceStore()
        self._geometry = GeometrySnapshot()

        self.sequencer = AutoSolveSequencer(
            self.store, scheduler, self.events, on_finished=self.check_completion
        )
        self.drag = DragController(self.store, is_enabled=lambda: not self.sequencer.running)
        self.secret = SecretGestureRecognizer(grid_size)

        self._completed = False
        self._generation = 0
        self._image = image
        self._orientation = Orientation.UNKNOWN

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def grid_size(self) -> int:
        return self._grid_size

    @property
    def tiles(self) -> List[Tile]:
        return self.store.all()

    @property
    def geometry(self) -> GeometrySnapshot:
        return self._geometry

    @property
    def cell_size(self) -> float:
        """Grid cell side from the current grid rectangle (0 if unknown)."""
        if self._geometry.grid_rect is None:
            return 0.0
        return self._geometry.grid_rect.width / self._grid_size

    @property
    def completed(self) -> bool:
        return self._completed

    @property
    def auto_solve_visible(self) -> bool:
        return self.secret.visible

    @property
    def is_auto_solving(self) -> bool:
        return self.sequencer.running

    @property
    def image(self) -> Any:
        """Custom artwork, or None for the built-in default."""
        return self._image

    @property
    def has_custom_image(self) -> bool:
        return self._image is not None

    @property
    def orientation(self) -> Orientation:
        return self._orientation

    def update_geometry(self, **changes) -> GeometrySnapshot:
        """
        Replace layout rectangles (grid_rect, working_rect, control_bar_bottom).

        Returns:
            The new snapshot
        """
        self._geometry = self._geometry.updated(**changes)
        return self._geometry

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def initialize(self, width: float, height: float) -> None:
        """
        Create a fresh set of unplaced tiles scattered over width x height.

        Args:
            width: Working area width
            height: Working area height
        """
        self._generation += 1
        n = self._grid_size
        bounds = scatter_bounds(width, height, scatter_cell_size(width, height, n))

        tiles = []
        for row in range(n):
            for col in range(n):
                tiles.append(Tile.create(row, col, n, self._random_point(bounds)))

        self.store.replace_all(tiles)
        logger.info(f"Puzzle initialized: {n}x{n}, area {width:.0f}x{height:.0f}")
        self.events.emit(PuzzleEvent.TILES_RESET, self.store.all())

    def reset(self, width: float, height: float) -> None:
        """Discard all progress and start over with the current grid size."""
        self.sequencer.abandon()
        self.drag.cancel()
        self._completed = False
        self.secret.clear()
        self._set_auto_solve_visible(False)
        logger.info("Puzzle reset")
        self.initialize(width, height)

    def toggle_grid_size(self, width: float, height: float) -> None:
        """Switch between 3x3 and 4x4; destroys current progress."""
        self._grid_size = MIN_GRID_SIZE if self._grid_size == MAX_GRID_SIZE else MAX_GRID_SIZE
        self.secret.set_grid_size(self._grid_size)
        logger.info(f"Grid size changed to {self._grid_size}x{self._grid_size}")
        self.events.emit(PuzzleEvent.GRID_SIZE_CHANGED, self._grid_size)
        self.reset(width, height)

    def shuffle_unplaced(self, width: float, height: float) -> None:
        """
        Re-scatter tiles that are not placed yet; placed tiles stay put.

        The vertical range comes from the working area's own height, so
        nothing happens until that rectangle is known.
        """
        working = self._geometry.working_rect
        if working is None:
            logger.debug("Shuffle ignored: working area unknown")
            return

        bounds = scatter_bounds(width, working.height, scatter_cell_size(width, height, self._grid_size))
        moved = 0
        for tile in self.store.unplaced():
            self.store.set_position(tile.id, self._random_point(bounds))
            self.events.emit(PuzzleEvent.TILE_MOVED, tile)
            moved += 1
        logger.info(f"Shuffled {moved} unplaced tiles")

    def set_image(self, image: Any, width: float, height: float) -> None:
        """Use new artwork (None for the default) and restart the puzzle."""
        self._image = image
        self.events.emit(PuzzleEvent.IMAGE_CHANGED, image is not None)
        self.reset(width, height)

    def handle_orientation_change(self, orientation: Orientation,
                                  width: float, height: float) -> bool:
        """
        React to a new orientation.

        Unplaced tiles are reshuffled only on a portrait <-> landscape flip.

        Returns:
            True if tiles were reshuffled
        """
        previous = self._orientation
        if orientation is Orientation.UNKNOWN:
            return False

        self._orientation = orientation
        if previous is Orientation.UNKNOWN or previous is orientation:
            return False

        logger.info(f"Orientation {previous.value} -> {orientation.value}")
        self.shuffle_unplaced(width, height)
        return True

    def check_completion(self) -> bool:
        """
        Schedule the completed signal if every tile is placed.

        The signal fires after COMPLETION_ALERT_DELAY, at most once per
        puzzle; a reset in between drops it.

        Returns:
            True if the signal was scheduled
        """
        if not self.store.all_placed():
            return False

        generation = self._generation
        self._scheduler.call_later(COMPLETION_ALERT_DELAY, lambda: self._complete(generation))
        return True

    def _complete(self, generation: int) -> None:
        if generation != self._generation or not self.store.all_placed():
            return
        if self._completed:
            logger.debug("Completion already signalled")
            return
        self._completed = True
        logger.info("Puzzle completed")
        self.events.emit(PuzzleEvent.COMPLETED)

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def drag_start(self, tile_id: int, point: Point) -> Optional[Tile]:
        tile = self.drag.begin(tile_id, point, self._geometry, self.cell_size)
        if tile is not None:
            self.events.emit(PuzzleEvent.TILE_MOVED, tile)
        return tile

    def drag_move(self, tile_id: int, point: Point) -> Optional[Tile]:
        tile = self.drag.move(tile_id, point, self._geometry, self.cell_size)
        if tile is not None:
            self.events.emit(PuzzleEvent.TILE_MOVED, tile)
        return tile

    def drag_end(self, tile_id: int, point: Point) -> Optional[DropResult]:
        """Release a tile; snaps and runs the completion check on success."""
        result = self.drag.end(tile_id, point, self._geometry, self.cell_size)
        if result is not None and result.outcome is DropOutcome.ACCEPTED:
            tile = self.store.get(tile_id)
            self.events.emit(PuzzleEvent.TILE_SNAPPED, tile)
            self.events.emit(PuzzleEvent.TILE_PLACED, tile)
            self.check_completion()
        return result

    def handle_secret_tap(self, row: int, col: int) -> bool:
        """Grid-cell tap; True if it toggled the auto-solve control."""
        logger.debug(f"Grid tap ({row},{col})")
        toggled = self.secret.tap(row, col)
        if toggled:
            self.events.emit(PuzzleEvent.AUTO_SOLVE_VISIBILITY, self.secret.visible)
        return toggled

    def start_auto_solve(self) -> bool:
        self.drag.cancel()
        return self.sequencer.start(self._geometry, self.cell_size)

    def stop_auto_solve(self) -> None:
        self.sequencer.stop()

    def toggle_auto_solve(self) -> None:
        """Auto-solve button: start when idle, stop when running."""
        if self.sequencer.running:
            self.stop_auto_solve()
        else:
            self.start_auto_solve()

    def speed_up(self) -> None:
        self.sequencer.speed_up()

    def handle_title_tap(self, width: float, height: float) -> None:
        """Title gesture: speeds up a running auto-solve, else toggles grid size."""
        if self.sequencer.running:
            self.speed_up()
        else:
            self.toggle_grid_size(width, height)

    def _set_auto_solve_visible(self, visible: bool) -> None:
        if self.secret.visible != visible:
            self.secret.visible = visible
            self.events.emit(PuzzleEvent.AUTO_SOLVE_VISIBILITY, visible)

    def _random_point(self, bounds) -> Point:
        return Point(
            self._rng.uniform(bounds.min_x, bounds.max_x),
            self._rng.uniform(bounds.min_y, bounds.max_y),
        )
