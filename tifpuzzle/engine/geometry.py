"""
Geometry Module - Coordinate frames, play-area bounds and drop resolution.

Three frames are in play:
    local       relative to the working area's top-left corner
    global      absolute screen position
    grid-local  relative to the grid square's top-left corner

Everything here is a pure function of explicit inputs. The rectangles come
from a GeometrySnapshot published by the layout layer; any rectangle may be
None before the first layout pass.
"""

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Tuple

from .constants import (
    BOTTOM_MARGIN,
    CELL_SIZE_MULTIPLIER,
    GRID_HEIGHT_MULTIPLIER,
    GRID_SIZE_PADDING,
    SNAP_THRESHOLD,
)
from .piece import Point, Tile


@dataclass(frozen=True)
class Rect:
    """
    Axis-aligned rectangle.

    Attributes:
        x: Left edge
        y: Top edge
        width: Width
        height: Height
    """
    x: float
    y: float
    width: float
    height: float

    @property
    def origin(self) -> Point:
        return Point(self.x, self.y)

    @property
    def min_x(self) -> float:
        return self.x

    @property
    def min_y(self) -> float:
        return self.y

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height


@dataclass(frozen=True)
class GeometrySnapshot:
    """
    Layout rectangles in screen coordinates, as of one layout pass.

    Attributes:
        grid_rect: Grid square bounds
        working_rect: Working area bounds
        control_bar_bottom: Bottom Y of the control bar (None until reported)
        version: Bumped on every update
    """
    grid_rect: Optional[Rect] = None
    working_rect: Optional[Rect] = None
    control_bar_bottom: Optional[float] = None
    version: int = 0

    @property
    def is_ready(self) -> bool:
        """True once both the grid and the working area are known."""
        return self.grid_rect is not None and self.working_rect is not None

    def updated(self, **changes) -> 'GeometrySnapshot':
        """Copy with the given fields replaced and the version bumped."""
        return replace(self, version=self.version + 1, **changes)


@dataclass(frozen=True)
class GridLayout:
    """
    Grid square dimensions for a given window size.

    Attributes:
        grid_size: Grid side length N
        square_size: Side of the grid square
    """
    grid_size: int
    square_size: float

    @classmethod
    def for_window(cls, width: float, height: float, grid_size: int) -> 'GridLayout':
        """Size the grid square to fit the upper part of the window."""
        square = min(width, height * GRID_HEIGHT_MULTIPLIER) - GRID_SIZE_PADDING
        return cls(grid_size=grid_size, square_size=max(square, 0.0))

    @property
    def cell_size(self) -> float:
        return self.square_size / self.grid_size


@dataclass(frozen=True)
class Bounds:
    """Closed range of legal tile-center positions."""
    min_x: float
    max_x: float
    min_y: float
    max_y: float

    def clamp(self, point: Point) -> Point:
        """Clamp a point into the range (the max wins when the range is empty)."""
        x = min(max(point.x, self.min_x), self.max_x)
        y = min(max(point.y, self.min_y), self.max_y)
        return Point(x, y)


class DropOutcome(Enum):
    """Why a drop was accepted or rejected."""
    ACCEPTED = "accepted"
    OUTSIDE_GRID = "outside_grid"
    WRONG_CELL = "wrong_cell"
    TOO_FAR = "too_far"
    NO_GEOMETRY = "no_geometry"


@dataclass(frozen=True)
class DropResult:
    """
    Result of resolving a drop.

    Attributes:
        outcome: Accept/reject reason
        grid_local: Release point in grid-local coordinates (if computed)
        target_cell: (row, col) under the release point (if inside the grid)
        distance: Distance to the target cell center (if the cell was correct)
    """
    outcome: DropOutcome
    grid_local: Optional[Point] = None
    target_cell: Optional[Tuple[int, int]] = None
    distance: Optional[float] = None

    @property
    def accepted(self) -> bool:
        return self.outcome is DropOutcome.ACCEPTED


def to_global(local: Point, working_rect: Rect) -> Point:
    """Working-area-local -> global."""
    return local + working_rect.origin


def to_local(global_point: Point, working_rect: Rect) -> Point:
    """Global -> working-area-local."""
    return global_point - working_rect.origin


def to_grid_local(global_point: Point, grid_rect: Rect) -> Point:
    """Global -> grid-local."""
    return global_point - grid_rect.origin


def grid_local_to_global(grid_local: Point, grid_rect: Rect) -> Point:
    """Grid-local -> global."""
    return grid_local + grid_rect.origin


def cell_center(row: int, col: int, cell_size: float) -> Point:
    """Center of a grid cell in grid-local coordinates."""
    return Point(col * cell_size + cell_size / 2, row * cell_size + cell_size / 2)


def cell_at(grid_local: Point, cell_size: float) -> Tuple[int, int]:
    """(row, col) of the cell containing a grid-local point."""
    return math.floor(grid_local.y / cell_size), math.floor(grid_local.x / cell_size)


def target_local_position(tile: Tile, geometry: GeometrySnapshot,
                          cell_size: float) -> Optional[Point]:
    """
    Working-area-local position of a tile's correct cell center.

    Converts grid-local -> global -> working-area-local.

    Returns:
        Target point, or None if the geometry is not known yet
    """
    if not geometry.is_ready:
        return None
    center = cell_center(tile.row, tile.col, cell_size)
    global_point = grid_local_to_global(center, geometry.grid_rect)
    return to_local(global_point, geometry.working_rect)


def resolve_drop(tile: Tile, release: Point, geometry: GeometrySnapshot,
                 cell_size: float, snap_threshold: float = SNAP_THRESHOLD) -> DropResult:
    """
    Decide whether a released tile snaps into its cell.

    A drop is accepted only when the release point lies inside the grid, in
    the tile's own cell, and within snap_threshold of that cell's center.

    Args:
        tile: Tile being dropped
        release: Release point in working-area-local coordinates
        geometry: Current layout rectangles
        cell_size: Grid cell side
        snap_threshold: Max center distance for a snap

    Returns:
        DropResult describing the outcome
    """
    if not geometry.is_ready or cell_size <= 0:
        return DropResult(DropOutcome.NO_GEOMETRY)

    grid_rect = geometry.grid_rect
    grid_local = to_grid_local(to_global(release, geometry.working_rect), grid_rect)

    if not (0 <= grid_local.x <= grid_rect.width and 0 <= grid_local.y <= grid_rect.height):
        return DropResult(DropOutcome.OUTSIDE_GRID, grid_local=grid_local)

    target = cell_at(grid_local, cell_size)
    if target != tile.cell:
        return DropResult(DropOutcome.WRONG_CELL, grid_local=grid_local, target_cell=target)

    distance = grid_local.distance_to(cell_center(target[0], target[1], cell_size))
    outcome = DropOutcome.ACCEPTED if distance <= snap_threshold else DropOutcome.TOO_FAR
    return DropResult(outcome, grid_local=grid_local, target_cell=target, distance=distance)


def drag_bounds(geometry: GeometrySnapshot, cell_size: float) -> Optional[Bounds]:
    """
    Legal tile-center range while dragging.

    Tiles may not rise under the control bar, nor sink into the bottom
    margin of the working area.

    Returns:
        Bounds, or None if the working area or control bar is not known yet
    """
    working = geometry.working_rect
    if working is None or geometry.control_bar_bottom is None:
        return None
    half = cell_size / 2
    return Bounds(
        min_x=half,
        max_x=working.width - half,
        min_y=geometry.control_bar_bottom - working.min_y + half,
        max_y=working.height - BOTTOM_MARGIN - half,
    )


def scatter_cell_size(width: float, height: float, grid_size: int) -> float:
    """Cell size used when scattering tiles over a width x height area."""
    return min(width, height * CELL_SIZE_MULTIPLIER) / grid_size


def scatter_bounds(width: float, height: float, cell_size: float) -> Bounds:
    """Range of random starting positions inside a width x height area."""
    half = cell_size / 2
    return Bounds(
        min_x=half,
        max_x=width - half,
        min_y=half,
        max_y=height - BOTTOM_MARGIN - half,
    )
