"""
Engine Constants - Thresholds, timings and grid configuration.

All lengths are in layout units (Qt logical pixels), all durations in seconds.
"""

from typing import Dict, List

# Grid configuration
DEFAULT_GRID_SIZE = 3
MIN_GRID_SIZE = 3
MAX_GRID_SIZE = 4
SUPPORTED_GRID_SIZES = (MIN_GRID_SIZE, MAX_GRID_SIZE)

# Layout
GRID_HEIGHT_MULTIPLIER = 0.45    # Grid square vs. window height
GRID_SIZE_PADDING = 32.0         # Subtracted from the computed square size
CELL_SIZE_MULTIPLIER = 0.9       # Scatter cell size vs. working area height

# Boundary enforcement (1 cm ~ 37.8 units at standard DPI)
BOTTOM_MARGIN = 37.8

# Snap behavior
SNAP_THRESHOLD = 30.0

# Auto-solve pacing (seconds per tile)
DEFAULT_ANIMATION_SPEED = 1.2
FAST_ANIMATION_SPEED = 0.3

# Snap spring (presentation hint)
SNAP_SPRING_RESPONSE = 0.3

# Delay before the completion signal, lets the last snap animation finish
COMPLETION_ALERT_DELAY = 0.5

# Secret gesture: corner taps top-left, bottom-left, bottom-right, top-right
SECRET_SEQUENCE_LENGTH = 4
SECRET_SEQUENCES: Dict[int, List[int]] = {
    3: [0, 6, 8, 2],
    4: [0, 12, 15, 3],
}
