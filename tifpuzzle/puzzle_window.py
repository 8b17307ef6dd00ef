"""
Puzzle Window Module for TiFpuzzle

PyQt5 presentation layer: a control bar plus one canvas that holds the
grid square (upper part) and the working area (lower part). The canvas
reports its layout rectangles in global coordinates and forwards pointer
input; all puzzle decisions are made by the engine's PuzzleController.
"""

import logging
import time
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from PIL import Image
from PyQt5.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton,
    QFileDialog, QMessageBox, QSizePolicy
)
from PyQt5.QtCore import Qt, QTimer, QRectF, QPointF, QEasingCurve, pyqtSignal
from PyQt5.QtGui import QFont, QPainter, QColor, QPen, QPixmap, QImage

from tifpuzzle.engine import GridLayout, Point, Rect, Tile
from tifpuzzle.engine.constants import SNAP_SPRING_RESPONSE
from tifpuzzle.image_source import SUPPORTED_EXTENSIONS, slice_tiles

# Configure module logger
logger = logging.getLogger(__name__)


# Layout
ZONE_SPACING = 16                     # Gap between grid square and working area
FRAME_INTERVAL_MS = 16                # ~60 FPS animation tick

# Colors
BACKGROUND_COLOR = QColor(245, 245, 245)
WORKING_AREA_COLOR = QColor(33, 150, 243, 26)
GRID_FILL_COLOR = QColor(255, 255, 255)
GRID_LINE_COLOR = QColor(128, 128, 128, 128)
TILE_BORDER_COLOR = QColor(255, 255, 255)
TILE_SHADOW_COLOR = QColor(0, 0, 0, 60)

TILE_BORDER_WIDTH = 2
TILE_SHADOW_OFFSET = 3
GRID_CORNER_RADIUS = 12


def pil_to_pixmap(image: Image.Image) -> QPixmap:
    """Convert a Pillow image to a QPixmap."""
    rgba = image.convert("RGBA")
    width, height = rgba.size
    data = rgba.tobytes("raw", "RGBA")
    qimage = QImage(data, width, height, 4 * width, QImage.Format_RGBA8888)
    # copy() detaches from the Python buffer
    return QPixmap.fromImage(qimage.copy())


@dataclass
class _Animation:
    """Interpolation of one tile's drawn position."""
    start: Point
    end: Point
    started_at: float
    duration: float
    curve: QEasingCurve

    def position_at(self, now: float) -> Tuple[Point, bool]:
        if self.duration <= 0:
            return self.end, True
        progress = min((now - self.started_at) / self.duration, 1.0)
        t = self.curve.valueForProgress(progress)
        point = Point(
            self.start.x + (self.end.x - self.start.x) * t,
            self.start.y + (self.end.y - self.start.y) * t,
        )
        return point, progress >= 1.0


class PuzzleCanvas(QWidget):
    """
    Grid square and working area in one widget.

    Tiles are drawn in working-area-local coordinates offset by the working
    area's origin, so auto-solved tiles can travel up into the grid.

    Signals:
        layout_changed(object, object): grid and working Rect (global coords)
        cell_tapped(int, int): (row, col) of a click on the grid
        drag_started(int, float, float): tile id and working-area-local point
        drag_moved(int, float, float): tile id and working-area-local point
        drag_ended(int, float, float): tile id and working-area-local point
    """

    layout_changed = pyqtSignal(object, object)
    cell_tapped = pyqtSignal(int, int)
    drag_started = pyqtSignal(int, float, float)
    drag_moved = pyqtSignal(int, float, float)
    drag_ended = pyqtSignal(int, float, float)

    def __init__(self, parent: QWidget = None):
        super().__init__(parent)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.setMouseTracking(False)

        self._grid_size = 3
        self._tiles: List[Tile] = []
        self._artwork: Optional[Image.Image] = None
        self._pixmaps: Dict[Tuple[int, int], QPixmap] = {}
        self._pixmap_key: Optional[Tuple[int, int]] = None

        # Canvas-local rectangles
        self._grid_rect = QRectF()
        self._working_rect = QRectF()

        self._animations: Dict[int, _Animation] = {}
        self._drawn: Dict[int, Point] = {}
        self._dragging_id: Optional[int] = None
        self._input_enabled = True

        self._frame_timer = QTimer(self)
        self._frame_timer.setInterval(FRAME_INTERVAL_MS)
        self._frame_timer.timeout.connect(self._on_frame)

    # ------------------------------------------------------------------
    # State from the controller
    # ------------------------------------------------------------------

    @property
    def cell_size(self) -> float:
        return self._grid_rect.width() / self._grid_size if self._grid_size else 0.0

    def set_artwork(self, artwork: Image.Image) -> None:
        self._artwork = artwork
        self._pixmap_key = None
        self.update()

    def set_tiles(self, tiles: List[Tile], grid_size: int) -> None:
        """Replace the tile list (new puzzle)."""
        self._grid_size = grid_size
        self._tiles = tiles
        self._animations.clear()
        self._drawn = {t.id: t.position for t in tiles}
        self._dragging_id = None
        self._relayout()
        self.update()

    def set_input_enabled(self, enabled: bool) -> None:
        self._input_enabled = enabled
        if not enabled:
            self._dragging_id = None

    def move_tile(self, tile: Tile, duration: float = 0.0,
                  curve: QEasingCurve.Type = QEasingCurve.InOutQuad) -> None:
        """Show a tile at its new position, optionally animated."""
        if duration <= 0:
            self._animations.pop(tile.id, None)
            self._drawn[tile.id] = tile.position
        else:
            start = self._drawn.get(tile.id, tile.position)
            self._animations[tile.id] = _Animation(
                start=start, end=tile.position, started_at=time.monotonic(),
                duration=duration, curve=QEasingCurve(curve)
            )
            if not self._frame_timer.isActive():
                self._frame_timer.start()
        self.update()

    def snap_tile(self, tile: Tile) -> None:
        """Spring a released tile into its cell."""
        self.move_tile(tile, duration=SNAP_SPRING_RESPONSE, curve=QEasingCurve.OutBack)

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self._relayout()

    def publish_layout(self) -> None:
        """Emit the current rectangles in global coordinates."""
        if self._grid_rect.isEmpty() or self._working_rect.isEmpty():
            return
        self.layout_changed.emit(self._to_global_rect(self._grid_rect),
                                 self._to_global_rect(self._working_rect))

    def _relayout(self) -> None:
        window = self.window()
        layout = GridLayout.for_window(window.width(), window.height(), self._grid_size)
        square = min(layout.square_size, float(self.width()), float(self.height()) / 2)
        square = max(square, 0.0)

        left = (self.width() - square) / 2
        self._grid_rect = QRectF(left, ZONE_SPACING, square, square)
        top = self._grid_rect.bottom() + ZONE_SPACING
        self._working_rect = QRectF(0, top, self.width(), max(self.height() - top, 0.0))

        self._pixmap_key = None
        self.publish_layout()

    def _to_global_rect(self, rect: QRectF) -> Rect:
        origin = self.mapToGlobal(rect.topLeft().toPoint())
        return Rect(float(origin.x()), float(origin.y()), rect.width(), rect.height())

    # ------------------------------------------------------------------
    # Painting
    # ------------------------------------------------------------------

    def _ensure_pixmaps(self) -> None:
        tile_px = int(round(self.cell_size))
        key = (self._grid_size, tile_px)
        if self._pixmap_key == key or self._artwork is None or tile_px <= 0:
            return
        slices = slice_tiles(self._artwork, self._grid_size, tile_px)
        self._pixmaps = {cell: pil_to_pixmap(img) for cell, img in slices.items()}
        self._pixmap_key = key
        logger.debug(f"Tile pixmaps rebuilt: {self._grid_size}x{self._grid_size} @ {tile_px}px")

    def paintEvent(self, event):
        self._ensure_pixmaps()
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)
        painter.setRenderHint(QPainter.SmoothPixmapTransform)

        painter.fillRect(self.rect(), BACKGROUND_COLOR)
        painter.fillRect(self._working_rect, WORKING_AREA_COLOR)
        self._paint_grid(painter)

        cell = self.cell_size
        placed = [t for t in self._tiles if t.is_placed and t.id not in self._animations]
        moving = [t for t in self._tiles if not (t.is_placed and t.id not in self._animations)]

        for tile in placed:
            x = self._grid_rect.left() + tile.col * cell
            y = self._grid_rect.top() + tile.row * cell
            self._paint_tile(painter, tile, QRectF(x, y, cell, cell), shadow=False)

        for tile in sorted(moving, key=lambda t: t.z_index):
            center = self._drawn.get(tile.id, tile.position)
            x = self._working_rect.left() + center.x - cell / 2
            y = self._working_rect.top() + center.y - cell / 2
            self._paint_tile(painter, tile, QRectF(x, y, cell, cell), shadow=not tile.is_placed)

        painter.end()

    def _paint_grid(self, painter: QPainter) -> None:
        painter.setPen(Qt.NoPen)
        painter.setBrush(GRID_FILL_COLOR)
        painter.drawRoundedRect(self._grid_rect, GRID_CORNER_RADIUS, GRID_CORNER_RADIUS)

        pen = QPen(GRID_LINE_COLOR)
        pen.setWidth(1)
        painter.setPen(pen)
        painter.setBrush(Qt.NoBrush)
        cell = self.cell_size
        for i in range(self._grid_size + 1):
            offset = i * cell
            painter.drawLine(QPointF(self._grid_rect.left() + offset, self._grid_rect.top()),
                             QPointF(self._grid_rect.left() + offset, self._grid_rect.bottom()))
            painter.drawLine(QPointF(self._grid_rect.left(), self._grid_rect.top() + offset),
                             QPointF(self._grid_rect.right(), self._grid_rect.top() + offset))

    def _paint_tile(self, painter: QPainter, tile: Tile, rect: QRectF, shadow: bool) -> None:
        if shadow:
            painter.fillRect(rect.translated(TILE_SHADOW_OFFSET, TILE_SHADOW_OFFSET), TILE_SHADOW_COLOR)

        pixmap = self._pixmaps.get(tile.cell)
        if pixmap is not None:
            painter.drawPixmap(rect, pixmap, QRectF(pixmap.rect()))
        else:
            painter.fillRect(rect, QColor(200, 200, 200))

        pen = QPen(TILE_BORDER_COLOR)
        pen.setWidth(TILE_BORDER_WIDTH)
        painter.setPen(pen)
        painter.setBrush(Qt.NoBrush)
        painter.drawRect(rect.adjusted(1, 1, -1, -1))

    def _on_frame(self) -> None:
        now = time.monotonic()
        for tile_id, animation in list(self._animations.items()):
            point, done = animation.position_at(now)
            self._drawn[tile_id] = point
            if done:
                del self._animations[tile_id]
        if not self._animations:
            self._frame_timer.stop()
        self.update()

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def _local(self, pos) -> Tuple[float, float]:
        return pos.x() - self._working_rect.left(), pos.y() - self._working_rect.top()

    def _tile_at(self, pos) -> Optional[Tile]:
        """Topmost unplaced tile under a canvas point."""
        half = self.cell_size / 2
        x, y = self._local(pos)
        for tile in sorted(self._tiles, key=lambda t: t.z_index, reverse=True):
            if tile.is_placed:
                continue
            center = self._drawn.get(tile.id, tile.position)
            if abs(x - center.x) <= half and abs(y - center.y) <= half:
                return tile
        return None

    def mousePressEvent(self, event):
        if event.button() != Qt.LeftButton:
            return
        pos = event.pos()

        tile = self._tile_at(pos) if self._input_enabled else None
        if tile is not None:
            self._dragging_id = tile.id
            self.drag_started.emit(tile.id, *self._local(pos))
            return

        # Placed tiles do not intercept taps on the grid
        cell = self.cell_size
        if cell > 0 and self._grid_rect.contains(QPointF(pos)):
            col = min(int((pos.x() - self._grid_rect.left()) // cell), self._grid_size - 1)
            row = min(int((pos.y() - self._grid_rect.top()) // cell), self._grid_size - 1)
            self.cell_tapped.emit(row, col)

    def mouseMoveEvent(self, event):
        if self._dragging_id is not None and self._input_enabled:
            self.drag_moved.emit(self._dragging_id, *self._local(event.pos()))

    def mouseReleaseEvent(self, event):
        if event.button() != Qt.LeftButton or self._dragging_id is None:
            return
        tile_id = self._dragging_id
        self._dragging_id = None
        if self._input_enabled:
            self.drag_ended.emit(tile_id, *self._local(event.pos()))


class ClickableLabel(QLabel):
    """QLabel that emits clicked on left-button press."""

    clicked = pyqtSignal()

    def mousePressEvent(self, event):
        if event.button() == Qt.LeftButton:
            self.clicked.emit()
        super().mousePressEvent(event)


class PuzzleWindow(QMainWindow):
    """
    Main TiFpuzzle window.

    Signals:
        load_requested(str): Image path chosen by the user
        title_tapped(): Title label clicked (speed-up / grid toggle)
        auto_solve_clicked(): Auto Solve / Stop button clicked
        play_again_requested(): "Play Again" chosen on completion
        control_bar_changed(float): Control bar bottom Y (global coords)
        shutdown_requested(): Window closing
    """

    load_requested = pyqtSignal(str)
    title_tapped = pyqtSignal()
    auto_solve_clicked = pyqtSignal()
    play_again_requested = pyqtSignal()
    control_bar_changed = pyqtSignal(float)
    shutdown_requested = pyqtSignal()

    def __init__(self):
        super().__init__()
        self._init_ui()

    def _init_ui(self):
        """Initialize the user interface components."""
        self.setWindowTitle("TiFpuzzle")
        self.resize(480, 860)

        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        layout = QVBoxLayout()
        layout.setSpacing(0)
        layout.setContentsMargins(0, 8, 0, 0)
        central_widget.setLayout(layout)

        # Control bar
        self.control_bar = QWidget()
        bar_layout = QHBoxLayout()
        bar_layout.setContentsMargins(16, 0, 16, 8)
        self.control_bar.setLayout(bar_layout)

        self.load_button = QPushButton("Load")
        self.load_button.clicked.connect(self._on_load_clicked)
        bar_layout.addWidget(self.load_button)

        self.title_label = ClickableLabel("TiFpuzzle")
        title_font = QFont()
        title_font.setPointSize(14)
        self.title_label.setFont(title_font)
        self.title_label.setToolTip("Tap to switch between 3x3 and 4x4")
        self.title_label.clicked.connect(self.title_tapped.emit)
        bar_layout.addWidget(self.title_label)

        bar_layout.addStretch()

        self.auto_solve_button = QPushButton("Auto Solve")
        self.auto_solve_button.clicked.connect(self.auto_solve_clicked.emit)
        self.auto_solve_button.setVisible(False)
        bar_layout.addWidget(self.auto_solve_button)

        layout.addWidget(self.control_bar)

        # Grid + working area
        self.canvas = PuzzleCanvas()
        layout.addWidget(self.canvas, 1)

        self._apply_styles()
        self.set_auto_solving(False)

    def _apply_styles(self):
        """Apply clean, minimal styling to the window."""
        style = """
            QMainWindow {
                background-color: #f5f5f5;
            }
            QPushButton {
                background-color: rgba(33, 150, 243, 26);
                color: #2196F3;
                border: none;
                border-radius: 8px;
                padding: 6px 12px;
            }
            QLabel {
                color: #333333;
            }
        """
        self.setStyleSheet(style)

    def _on_load_clicked(self):
        """Open a file dialog and emit the chosen image path."""
        patterns = " ".join(f"*{ext}" for ext in SUPPORTED_EXTENSIONS)
        path, _ = QFileDialog.getOpenFileName(self, "Load photo", "", f"Images ({patterns})")
        if path:
            self.load_requested.emit(path)

    def set_auto_solve_visible(self, visible: bool):
        self.auto_solve_button.setVisible(visible)

    def set_auto_solving(self, running: bool):
        """
        Update the auto-solve button and block drags while running.

        Args:
            running: True while the sequencer is active
        """
        self.canvas.set_input_enabled(not running)
        color = "#f44336" if running else "#4CAF50"
        self.auto_solve_button.setText("Stop Auto Solve" if running else "Auto Solve")
        self.auto_solve_button.setStyleSheet(f"""
            QPushButton {{
                background-color: {color};
                color: white;
                border: none;
                border-radius: 8px;
                padding: 8px 16px;
            }}
        """)
        self.title_label.setToolTip(
            "Tap to speed up" if running else "Tap to switch between 3x3 and 4x4"
        )

    def show_completed(self):
        """Show the completion alert; emits play_again_requested on accept."""
        box = QMessageBox(self)
        box.setWindowTitle("Puzzle Completed!")
        box.setText("Great job! You solved the puzzle!")
        box.addButton("Play Again", QMessageBox.AcceptRole)
        box.exec_()
        self.play_again_requested.emit()

    def control_bar_bottom(self) -> float:
        """Bottom edge of the control bar in global coordinates."""
        bottom_left = self.control_bar.mapToGlobal(self.control_bar.rect().bottomLeft())
        return float(bottom_left.y())

    def publish_layout(self):
        self.control_bar_changed.emit(self.control_bar_bottom())
        self.canvas.publish_layout()

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self.control_bar_changed.emit(self.control_bar_bottom())

    def moveEvent(self, event):
        super().moveEvent(event)
        self.publish_layout()

    def closeEvent(self, event):
        """
        Handle window close event.

        Emits shutdown_requested signal before closing so pending timers
        can be cancelled.

        Args:
            event: QCloseEvent object
        """
        self.shutdown_requested.emit()
        event.accept()
