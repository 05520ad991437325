"""
Video player control widgets.

MPVSignals carries mpv property callbacks (fired on mpv's event thread)
onto the Qt main thread. ProgressSlider turns a click anywhere on the bar
into a seek fraction.
"""

from PyQt6.QtWidgets import QSlider
from PyQt6.QtCore import Qt, QObject, pyqtSignal, QRect
from PyQt6.QtGui import QPainter, QColor

from memories_bed.ui.common.theme import Colors


class MPVSignals(QObject):
    position = pyqtSignal(float)   # seconds
    duration = pyqtSignal(float)   # seconds
    pause = pyqtSignal(bool)
    eof = pyqtSignal()
    error = pyqtSignal(str)


class ProgressSlider(QSlider):
    """Seek bar. Emits seek_requested(fraction) on click or drag release."""

    RESOLUTION = 1000
    GROOVE_INSET = 8
    GROOVE_HEIGHT = 4

    seek_requested = pyqtSignal(float)

    def __init__(self, parent=None):
        super().__init__(Qt.Orientation.Horizontal, parent)
        self.setRange(0, self.RESOLUTION)
        self.setFixedHeight(18)
        self.setMouseTracking(True)
        self.setCursor(Qt.CursorShape.PointingHandCursor)
        self._dragging = False

    @property
    def dragging(self) -> bool:
        return self._dragging

    def set_fraction(self, fraction: float):
        """Reflect playback progress; ignored while the user is dragging."""
        if self._dragging:
            return
        fraction = max(0.0, min(1.0, fraction))
        self.blockSignals(True)
        self.setValue(int(fraction * self.RESOLUTION))
        self.blockSignals(False)
        self.update()

    def groove_rect(self) -> QRect:
        """Visible track, inset from the widget edges and centred vertically."""
        top = (self.height() - self.GROOVE_HEIGHT) // 2
        return QRect(
            self.GROOVE_INSET, top,
            max(1, self.width() - 2 * self.GROOVE_INSET), self.GROOVE_HEIGHT,
        )

    def fraction_at(self, x: float) -> float:
        """Seek fraction for a pointer x; the ends of the visible track are 0 and 1."""
        groove = self.groove_rect()
        return max(0.0, min(1.0, (x - groove.left()) / groove.width()))

    def mousePressEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton and self.isEnabled():
            ratio = self.fraction_at(event.position().x())
            self._dragging = True
            self.setValue(int(ratio * self.RESOLUTION))
            event.accept()
            return
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event):
        if self._dragging:
            self.setValue(int(self.fraction_at(event.position().x()) * self.RESOLUTION))
            event.accept()
            return
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event):
        if self._dragging and event.button() == Qt.MouseButton.LeftButton:
            self._dragging = False
            self.seek_requested.emit(self.fraction_at(event.position().x()))
            event.accept()
            return
        super().mouseReleaseEvent(event)

    def paintEvent(self, _):
        p = QPainter(self)
        p.setRenderHint(QPainter.RenderHint.Antialiasing)

        r = self.groove_rect()

        # track
        p.setPen(Qt.PenStyle.NoPen)
        p.setBrush(QColor(255, 255, 255, 64))
        p.drawRoundedRect(r, 2, 2)

        # played
        played = self.value() / self.maximum() if self.maximum() else 0.0
        pw = int(r.width() * played)
        if pw > 0:
            p.setBrush(QColor(Colors.ACCENT_PRIMARY))
            p.drawRoundedRect(QRect(r.left(), r.top(), pw, r.height()), 2, 2)

        # handle
        if self.isEnabled():
            hx = r.left() + pw
            p.setBrush(QColor(Colors.TEXT_WHITE))
            p.drawEllipse(hx - 5, r.center().y() - 5, 10, 10)
