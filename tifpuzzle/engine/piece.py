"""
Piece Module - Tile and point value types for the puzzle board.
"""

import math
from dataclasses import dataclass, field
from typing import Tuple


@dataclass(frozen=True)
class Point:
    """
    Immutable 2D point.

    Attributes:
        x: Horizontal coordinate
        y: Vertical coordinate
    """
    x: float
    y: float

    def __add__(self, other: 'Point') -> 'Point':
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: 'Point') -> 'Point':
        return Point(self.x - other.x, self.y - other.y)

    def distance_to(self, other: 'Point') -> float:
        """Euclidean distance to another point."""
        return math.hypot(self.x - other.x, self.y - other.y)


@dataclass
class Tile:
    """
    One puzzle piece, mapped to exactly one correct grid cell.

    Attributes:
        id: Stable identifier, row * grid_size + col
        row: Correct row (0-based)
        col: Correct column (0-based)
        position: Current center in working-area-local coordinates
        rotation: Rotation in degrees (always 0 in the current game)
        is_placed: True once committed to its correct cell
        z_index: Layering key, raised when the tile is picked up
    """
    id: int
    row: int
    col: int
    position: Point = field(default_factory=lambda: Point(0.0, 0.0))
    rotation: float = 0.0
    is_placed: bool = False
    z_index: float = 0.0

    @classmethod
    def create(cls, row: int, col: int, grid_size: int, position: Point) -> 'Tile':
        """
        Create an unplaced tile with its id derived from the grid cell.

        Args:
            row: Correct row
            col: Correct column
            grid_size: Grid side length N
            position: Initial working-area-local position

        Returns:
            Tile instance
        """
        return cls(id=row * grid_size + col, row=row, col=col, position=position)

    @property
    def cell(self) -> Tuple[int, int]:
        """Correct (row, col) destination."""
        return (self.row, self.col)
