"""
Engine Package - Puzzle interaction engine for TiFpuzzle.

Pure Python: no GUI toolkit is imported here. Presentation layers feed in
layout rectangles and pointer input and subscribe to PuzzleEvent
notifications.

Public API:
    - Tile, Point: Tile model and 2D point
    - PieceStore: Canonical tile list
    - Rect, GeometrySnapshot, GridLayout: Layout geometry
    - resolve_drop(), DropResult, DropOutcome: Snap decision
    - DragController, DragState: Drag state machine
    - AutoSolveSequencer: Timed automatic placement
    - SecretGestureRecognizer: Corner-tap unlock
    - PuzzleController, Orientation: Lifecycle orchestration
    - Scheduler, ManualScheduler: Timer abstraction
    - EventHub, PuzzleEvent: Observer mechanism

Usage:
    from tifpuzzle.engine import PuzzleController, ManualScheduler, Rect

    scheduler = ManualScheduler()
    controller = PuzzleController(scheduler=scheduler, grid_size=3)
    controller.update_geometry(grid_rect=Rect(20, 60, 300, 300),
                               working_rect=Rect(0, 400, 400, 400),
                               control_bar_bottom=50)
    controller.initialize(400, 400)
"""

from .piece import Point, Tile
from .store import PieceStore
from .geometry import (
    Bounds,
    DropOutcome,
    DropResult,
    GeometrySnapshot,
    GridLayout,
    Rect,
    cell_center,
    drag_bounds,
    resolve_drop,
    scatter_bounds,
    target_local_position,
    to_global,
    to_grid_local,
    to_local,
)
from .events import EventHub, PuzzleEvent
from .scheduler import ManualScheduler, ScheduledCall, Scheduler
from .drag import DragController, DragState
from .autosolve import AutoSolveSequencer
from .secret import SecretGestureRecognizer, secret_sequence_for
from .controller import Orientation, PuzzleController

__all__ = [
    # Data model
    "Point",
    "Tile",
    "PieceStore",
    # Geometry
    "Bounds",
    "Rect",
    "GeometrySnapshot",
    "GridLayout",
    "DropOutcome",
    "DropResult",
    "cell_center",
    "drag_bounds",
    "resolve_drop",
    "scatter_bounds",
    "target_local_position",
    "to_global",
    "to_grid_local",
    "to_local",
    # Events and timing
    "EventHub",
    "PuzzleEvent",
    "Scheduler",
    "ScheduledCall",
    "ManualScheduler",
    # Components
    "DragController",
    "DragState",
    "AutoSolveSequencer",
    "SecretGestureRecognizer",
    "secret_sequence_for",
    "PuzzleController",
    "Orientation",
]
