"""
TiFpuzzle - Entry Point

Launches the puzzle window and wires it to the puzzle engine.

Example:
    python main.py
    python main.py --grid-size 4 --image photos/cat.jpg
"""

import sys
import logging
import argparse
from typing import Optional

from PyQt5.QtWidgets import QApplication

from tifpuzzle.engine import Orientation, Point, PuzzleController, PuzzleEvent, Rect
from tifpuzzle.engine.constants import SUPPORTED_GRID_SIZES
from tifpuzzle.image_source import default_artwork, load_image
from tifpuzzle.puzzle_window import PuzzleWindow
from tifpuzzle.qt_scheduler import QtScheduler
from tifpuzzle.settings import load_settings, save_settings


logger = logging.getLogger(__name__)


def configure_logging(debug: bool = False):
    """Log to both console and file."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        handlers=[
            logging.StreamHandler(),  # Console output
            logging.FileHandler("tifpuzzle.log", mode='w', encoding='utf-8')  # File output
        ]
    )


class Application:
    """
    Main application controller.

    Owns the PuzzleController and the window, forwarding window signals
    to the engine and engine events back to the window.
    """

    def __init__(self, grid_size: Optional[int] = None, image_path: Optional[str] = None):
        """
        Initialize the application.

        Args:
            grid_size: Grid side from the CLI (overrides saved setting)
            image_path: Image from the CLI (overrides saved setting)
        """
        self.settings = load_settings()
        self.grid_size = grid_size or self.settings["grid_size"]
        self.image_path = image_path or self.settings.get("last_image_path")

        self.window: Optional[PuzzleWindow] = None
        self.scheduler: Optional[QtScheduler] = None
        self.controller: Optional[PuzzleController] = None
        self._initialized = False

    def setup(self):
        """Set up the engine and UI and connect signals."""
        self.window = PuzzleWindow()
        self.scheduler = QtScheduler(self.window)

        image = load_image(self.image_path) if self.image_path else None
        self.controller = PuzzleController(scheduler=self.scheduler, grid_size=self.grid_size,
                                           image=image)
        self.window.canvas.set_artwork(image or default_artwork())

        # Window -> engine
        canvas = self.window.canvas
        canvas.layout_changed.connect(self._on_layout_changed)
        canvas.cell_tapped.connect(self.controller.handle_secret_tap)
        canvas.drag_started.connect(lambda tid, x, y: self.controller.drag_start(tid, Point(x, y)))
        canvas.drag_moved.connect(lambda tid, x, y: self.controller.drag_move(tid, Point(x, y)))
        canvas.drag_ended.connect(lambda tid, x, y: self.controller.drag_end(tid, Point(x, y)))
        self.window.control_bar_changed.connect(self._on_control_bar_changed)
        self.window.load_requested.connect(self._on_load_requested)
        self.window.title_tapped.connect(self._on_title_tapped)
        self.window.auto_solve_clicked.connect(self.controller.toggle_auto_solve)
        self.window.play_again_requested.connect(self._reset)
        self.window.shutdown_requested.connect(self._on_shutdown)

        # Engine -> window
        events = self.controller.events
        events.subscribe(PuzzleEvent.TILES_RESET, self._on_tiles_reset)
        events.subscribe(PuzzleEvent.TILE_MOVED, self._on_tile_moved)
        events.subscribe(PuzzleEvent.TILE_SNAPPED, canvas.snap_tile)
        events.subscribe(PuzzleEvent.TILE_PLACED, lambda tile: canvas.update())
        events.subscribe(PuzzleEvent.COMPLETED, self.window.show_completed)
        events.subscribe(PuzzleEvent.AUTO_SOLVE_VISIBILITY, self.window.set_auto_solve_visible)
        events.subscribe(PuzzleEvent.AUTO_SOLVE_STATE, self.window.set_auto_solving)
        events.subscribe(PuzzleEvent.GRID_SIZE_CHANGED, self._on_grid_size_changed)

        logger.info(f"Application initialized: {self.grid_size}x{self.grid_size}, "
                    f"image={'custom' if image else 'default'}")

    def _working_size(self):
        rect = self.controller.geometry.working_rect
        return (rect.width, rect.height) if rect else (0.0, 0.0)

    def _on_layout_changed(self, grid_rect: Rect, working_rect: Rect):
        """Handle a layout pass: refresh geometry, initialize or reshuffle."""
        self.controller.update_geometry(grid_rect=grid_rect, working_rect=working_rect)
        width, height = self._working_size()

        if not self._initialized:
            self._initialized = True
            self.controller.initialize(width, height)
        orientation = Orientation.from_size(self.window.width(), self.window.height())
        self.controller.handle_orientation_change(orientation, width, height)

    def _on_control_bar_changed(self, bottom: float):
        self.controller.update_geometry(control_bar_bottom=bottom)

    def _on_tiles_reset(self, tiles):
        self.window.canvas.set_tiles(tiles, self.controller.grid_size)

    def _on_tile_moved(self, tile):
        duration = self.controller.sequencer.speed if self.controller.is_auto_solving else 0.0
        self.window.canvas.move_tile(tile, duration=duration)

    def _on_title_tapped(self):
        self.controller.handle_title_tap(*self._working_size())

    def _on_grid_size_changed(self, grid_size: int):
        self.settings["grid_size"] = grid_size
        save_settings(self.settings)

    def _on_load_requested(self, path: str):
        """Handle an image chosen in the file dialog."""
        image = load_image(path)
        if image is None:
            logger.warning(f"Keeping current artwork, could not load {path}")
            return

        self.window.canvas.set_artwork(image)
        self.controller.set_image(image, *self._working_size())

        self.settings["last_image_path"] = path
        save_settings(self.settings)

    def _reset(self):
        self.controller.reset(*self._working_size())

    def _on_shutdown(self):
        """Handle window close."""
        logger.info("Shutdown requested")
        self.controller.stop_auto_solve()
        self.scheduler.cancel_all()

    def run(self) -> int:
        """
        Run the application.

        Returns:
            Exit code
        """
        self.window.show()
        self.window.publish_layout()
        return 0


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="TiFpuzzle - Drag the tiles into place to rebuild the picture"
    )
    parser.add_argument(
        "--grid-size", "-g",
        type=int,
        choices=SUPPORTED_GRID_SIZES,
        default=None,
        help="Grid side length (default: saved setting, else 3)"
    )
    parser.add_argument(
        "--image", "-i",
        default=None,
        help="Image file to use as puzzle artwork"
    )
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Enable debug logging (drop outcomes, taps)"
    )
    return parser.parse_args()


def main():
    """Initialize and run TiFpuzzle."""
    args = parse_args()
    configure_logging(args.debug)

    app = QApplication(sys.argv)

    application = Application(grid_size=args.grid_size, image_path=args.image)
    application.setup()
    application.run()

    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
