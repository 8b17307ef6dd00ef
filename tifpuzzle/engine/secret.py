"""
Secret Gesture Module - Corner-tap sequence that reveals the auto-solve control.
"""

import logging
from collections import deque
from typing import Deque, List

from .constants import SECRET_SEQUENCE_LENGTH, SECRET_SEQUENCES

logger = logging.getLogger(__name__)


def secret_sequence_for(grid_size: int) -> List[int]:
    """
    Target tap sequence for a grid size.

    Raises:
        ValueError: If the grid size has no sequence
    """
    if grid_size not in SECRET_SEQUENCES:
        raise ValueError(f"No secret sequence for grid size {grid_size}")
    return list(SECRET_SEQUENCES[grid_size])


class SecretGestureRecognizer:
    """
    Rolling buffer of the last grid-cell taps.

    The visibility flag toggles each time the buffer matches the target
    sequence exactly (same cells, same order), so repeating the gesture
    hides the control again.
    """

    def __init__(self, grid_size: int, capacity: int = SECRET_SEQUENCE_LENGTH):
        self._grid_size = grid_size
        self._target = secret_sequence_for(grid_size)
        self._taps: Deque[int] = deque(maxlen=capacity)
        self.visible = False

    @property
    def taps(self) -> List[int]:
        """Buffered cell indices, oldest first."""
        return list(self._taps)

    @property
    def target(self) -> List[int]:
        return list(self._target)

    def set_grid_size(self, grid_size: int) -> None:
        """Switch target sequence; clears the buffer."""
        self._target = secret_sequence_for(grid_size)
        self._grid_size = grid_size
        self._taps.clear()

    def tap(self, row: int, col: int) -> bool:
        """
        Record a tap on a grid cell.

        Returns:
            True if this tap completed the sequence and toggled visibility
        """
        self._taps.append(row * self._grid_size + col)
        if list(self._taps) != self._target:
            return False

        self.visible = not self.visible
        logger.info(f"Secret sequence matched, auto-solve control visible={self.visible}")
        return True

    def clear(self) -> None:
        """Empty the tap buffer (visibility unchanged)."""
        self._taps.clear()
