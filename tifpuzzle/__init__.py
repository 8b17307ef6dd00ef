"""
TiFpuzzle - Drag-and-drop jigsaw puzzle.

Packages:
    - engine: GUI-free puzzle state, drop resolution and timed auto-solve
    - puzzle_window: PyQt5 window and canvas
    - image_source: Pillow artwork loading and slicing
"""

__version__ = "1.0.0"
