"""
Custom GUI widgets for The Warden.
"""

from typing import List, Optional, Sequence

from PyQt6.QtWidgets import QWidget, QLabel, QGridLayout
from PyQt6.QtCore import Qt, QTimer, pyqtSignal
from PyQt6.QtGui import QImage, QPixmap, QPainter, QColor
import numpy as np

from warden.core.feedback import TileState, row_states
from warden.vision.particles import ParticleField


TILE_STYLES = {
    TileState.EMPTY: "background-color: #121213; border: 2px solid #3a3a3c; color: white;",
    TileState.PENDING: "background-color: #121213; border: 2px solid #565758; color: white;",
    TileState.EXACT: "background-color: #538d4e; border: 2px solid #538d4e; color: white;",
    TileState.PRESENT: "background-color: #b59f3b; border: 2px solid #b59f3b; color: white;",
    TileState.ABSENT: "background-color: #3a3a3c; border: 2px solid #3a3a3c; color: white;",
}


def rgb_to_pixmap(frame: np.ndarray) -> QPixmap:
    """Convert an RGB numpy frame (H, W, 3) to a QPixmap."""
    frame = np.ascontiguousarray(frame)
    height, width, channels = frame.shape
    q_image = QImage(
        frame.data,
        width,
        height,
        channels * width,
        QImage.Format.Format_RGB888,
    )
    # Copy so the pixmap does not reference numpy memory
    return QPixmap.fromImage(q_image.copy())


def image_label(path, alt_text: str, parent=None) -> QLabel:
    """Label showing an image file, or its alt text if it cannot be loaded."""
    label = QLabel(parent)
    label.setAlignment(Qt.AlignmentFlag.AlignCenter)
    pixmap = QPixmap(str(path))
    if pixmap.isNull():
        label.setText(alt_text)
        label.setStyleSheet("color: #ddd; font-size: 14pt; font-style: italic;")
    else:
        label.setPixmap(pixmap)
    return label


class BoardWidget(QWidget):
    """
    Grid of letter tiles.

    Rows below the guess history are empty; the row right after the
    history shows the guess being typed.
    """

    def __init__(self, rows: int = 5, columns: int = 5, tile_size: int = 62, spacing: int = 6, parent=None):
        super().__init__(parent)
        self._rows = rows
        self._columns = columns

        layout = QGridLayout(self)
        layout.setSpacing(spacing)
        layout.setContentsMargins(0, 0, 0, 0)

        self._tiles: List[List[QLabel]] = []
        self._states = [[TileState.EMPTY] * columns for _ in range(rows)]
        for r in range(rows):
            row = []
            for c in range(columns):
                tile = QLabel("")
                tile.setFixedSize(tile_size, tile_size)
                tile.setAlignment(Qt.AlignmentFlag.AlignCenter)
                font = tile.font()
                font.setPointSize(22)
                font.setBold(True)
                tile.setFont(font)
                tile.setStyleSheet(TILE_STYLES[TileState.EMPTY])
                layout.addWidget(tile, r, c)
                row.append(tile)
            self._tiles.append(row)

    def update_board(self, guesses: Sequence[str], current_guess: str, solution: str):
        """Redraw every tile from the game state."""
        for r in range(self._rows):
            if r < len(guesses):
                word, submitted = guesses[r], True
            elif r == len(guesses):
                word, submitted = current_guess, False
            else:
                word, submitted = "", False

            states = row_states(word, solution, submitted, self._columns)
            letters = word.ljust(self._columns)
            for c, tile in enumerate(self._tiles[r]):
                tile.setText(letters[c].strip())
                tile.setStyleSheet(TILE_STYLES[states[c]])
            self._states[r] = list(states)

    def tile_text(self, row: int, column: int) -> str:
        return self._tiles[row][column].text()

    def tile_state(self, row: int, column: int) -> TileState:
        return self._states[row][column]


class SnapshotWidget(QWidget):
    """
    Displays the judgment snapshot with falling confetti painted on top.

    The confetti runs on its own frame timer and stops by itself once the
    last particle has left the canvas.
    """

    animation_finished = pyqtSignal()

    def __init__(self, width: int = 640, height: int = 480, frame_interval_ms: int = 16, parent=None):
        super().__init__(parent)
        self.setFixedSize(width, height)
        self.setStyleSheet("background-color: black;")

        self._pixmap: Optional[QPixmap] = None
        self._field: Optional[ParticleField] = None

        self._frame_timer = QTimer(self)
        self._frame_timer.setInterval(frame_interval_ms)
        self._frame_timer.timeout.connect(self._on_frame)

    def set_snapshot(self, frame: Optional[np.ndarray]):
        """Show an RGB frame scaled to the widget, or clear it."""
        if frame is None or frame.size == 0:
            self._pixmap = None
        else:
            self._pixmap = rgb_to_pixmap(frame).scaled(
                self.width(),
                self.height(),
                Qt.AspectRatioMode.KeepAspectRatio,
                Qt.TransformationMode.SmoothTransformation,
            )
        self.update()

    def start_confetti(self, field: ParticleField):
        """Start animating a particle field."""
        self._field = field
        self._frame_timer.start()

    def stop_confetti(self):
        """Cancel the animation loop and clear the particles."""
        self._frame_timer.stop()
        self._field = None
        self.update()

    @property
    def animating(self) -> bool:
        return self._frame_timer.isActive()

    def _on_frame(self):
        if self._field is None:
            self._frame_timer.stop()
            return

        if self._field.step() == 0:
            self._frame_timer.stop()
            self.animation_finished.emit()

        self.update()

    def paintEvent(self, event):
        """Paint the snapshot and the particles."""
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)

        if self._pixmap is not None:
            x = (self.width() - self._pixmap.width()) // 2
            y = (self.height() - self._pixmap.height()) // 2
            painter.drawPixmap(x, y, self._pixmap)

        if self._field is None:
            painter.end()
            return

        # Particle coordinates are in canvas space
        canvas_w, canvas_h = self._field.size
        painter.scale(self.width() / canvas_w, self.height() / canvas_h)
        painter.setPen(Qt.PenStyle.NoPen)

        for p in self._field.particles:
            painter.save()
            painter.translate(p.x, p.y)
            painter.rotate(p.rotation)
            painter.setBrush(QColor.fromHsv(p.hue, 255, 255))
            half = p.size / 2
            painter.drawRect(int(-half), int(-half), int(p.size), int(p.size))
            painter.restore()

        painter.end()
