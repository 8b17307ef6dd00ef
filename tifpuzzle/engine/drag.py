r"""
Drag Controller Module - Interactive drag state machine for tiles.

State Flow:
    IDLE --begin/move--> DRAGGING --end--> PLACED (snap accepted)
                                     \---> IDLE   (snap rejected)

While dragging, the live position is the pointer clamped into the legal
play area, so the tile slides along the edge instead of escaping it. A
rejected drop leaves the tile where it was last dragged.
"""

import logging
from enum import Enum, auto
from typing import Callable, Optional

from .geometry import (
    DropOutcome,
    DropResult,
    GeometrySnapshot,
    drag_bounds,
    resolve_drop,
    target_local_position,
)
from .piece import Point, Tile
from .store import PieceStore

logger = logging.getLogger(__name__)


class DragState(Enum):
    """Per-tile drag state."""
    IDLE = auto()
    DRAGGING = auto()
    PLACED = auto()


class DragController:
    """
    Routes pointer drags to the piece store.

    Only one tile is dragged at a time. All input is ignored while
    is_enabled() returns False (e.g. during auto-solve).
    """

    def __init__(self, store: PieceStore, is_enabled: Optional[Callable[[], bool]] = None):
        """
        Args:
            store: Tile store to mutate
            is_enabled: Returns False to block all drag input
        """
        self._store = store
        self._is_enabled = is_enabled or (lambda: True)
        self._active_id: Optional[int] = None

    @property
    def active_tile_id(self) -> Optional[int]:
        """Id of the tile being dragged, if any."""
        return self._active_id

    @property
    def enabled(self) -> bool:
        return self._is_enabled()

    def state_of(self, tile_id: int) -> DragState:
        if self._store.get(tile_id).is_placed:
            return DragState.PLACED
        if tile_id == self._active_id:
            return DragState.DRAGGING
        return DragState.IDLE

    def begin(self, tile_id: int, point: Point, geometry: GeometrySnapshot,
              cell_size: float) -> Optional[Tile]:
        """Pick up a tile; same as the first move event."""
        return self.move(tile_id, point, geometry, cell_size)

    def move(self, tile_id: int, point: Point, geometry: GeometrySnapshot,
             cell_size: float) -> Optional[Tile]:
        """
        Drag a tile to point (working-area-local), clamped to the play area.

        Returns:
            The moved tile, or None if the input was ignored
        """
        if not self._accepts(tile_id):
            return None

        bounds = drag_bounds(geometry, cell_size)
        if bounds is None:
            logger.debug(f"Drag of tile {tile_id} ignored: working area or control bar unknown")
            return None

        self._active_id = tile_id
        self._store.bump_z_index(tile_id)
        return self._store.set_position(tile_id, bounds.clamp(point))

    def end(self, tile_id: int, point: Point, geometry: GeometrySnapshot,
            cell_size: float) -> Optional[DropResult]:
        """
        Release a tile at point (working-area-local) and try to snap it.

        On acceptance the tile is marked placed, its rotation zeroed and its
        position set to the cell center. On rejection nothing moves.

        Returns:
            DropResult, or None if the input was ignored
        """
        if tile_id == self._active_id:
            self._active_id = None
        if not self._accepts(tile_id):
            return None

        tile = self._store.get(tile_id)
        result = resolve_drop(tile, point, geometry, cell_size)
        logger.debug(
            f"Drop tile {tile_id} ({tile.row},{tile.col}): {result.outcome.value}"
            + (f" target={result.target_cell}" if result.target_cell else "")
            + (f" distance={result.distance:.1f}" if result.distance is not None else "")
        )

        if result.outcome is DropOutcome.ACCEPTED:
            target = target_local_position(tile, geometry, cell_size)
            if target is not None:
                self._store.set_position(tile_id, target)
            self._store.set_rotation(tile_id, 0.0)
            self._store.set_placed(tile_id)

        return result

    def cancel(self) -> None:
        """Forget the active drag without resolving it."""
        self._active_id = None

    def _accepts(self, tile_id: int) -> bool:
        if not self._is_enabled():
            logger.debug(f"Drag of tile {tile_id} ignored: input disabled")
            return False
        if self._store.get(tile_id).is_placed:
            return False
        return True
