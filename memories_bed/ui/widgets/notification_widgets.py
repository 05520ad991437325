"""
Transient notifications shown over the main window.
"""
from PyQt6.QtCore import Qt, QTimer, QPropertyAnimation, QRectF, QEvent
from PyQt6.QtGui import QPainter, QColor, QPainterPath
from PyQt6.QtWidgets import QWidget, QHBoxLayout, QLabel, QGraphicsOpacityEffect
import qtawesome as qta

from memories_bed.ui.common.theme import Colors, Fonts, Spacing

# kind -> (icon, accent)
TOAST_KINDS = {
    "info": ('fa5s.info-circle', Colors.ACCENT_PRIMARY),
    "success": ('fa5s.check-circle', Colors.ACCENT_SUCCESS),
    "error": ('fa5s.exclamation-circle', Colors.ACCENT_ERROR),
}

BOTTOM_OFFSET = 48
FADE_MS = 250


class ToastNotification(QWidget):
    """
    Pill anchored bottom-centre of its parent, above any overlay such as
    the lightbox. Clicking it dismisses it early; it never takes focus.
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("toastNotification")
        self.setAttribute(Qt.WidgetAttribute.WA_TranslucentBackground)
        self.setFocusPolicy(Qt.FocusPolicy.NoFocus)
        self.setCursor(Qt.CursorShape.PointingHandCursor)
        self._accent = QColor(Colors.ACCENT_PRIMARY)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(Spacing.XL, Spacing.MD, Spacing.XL, Spacing.MD)
        layout.setSpacing(Spacing.SM)

        self.icon_label = QLabel()
        self.icon_label.setFixedSize(Spacing.ICON_MD, Spacing.ICON_MD)
        layout.addWidget(self.icon_label)

        self.message_label = QLabel()
        self.message_label.setStyleSheet(
            f"color: {Colors.TEXT_PRIMARY}; font-size: {Fonts.SIZE_LG}px; background: transparent;"
        )
        layout.addWidget(self.message_label)

        self._opacity = QGraphicsOpacityEffect(self)
        self._opacity.setOpacity(0.0)
        self.setGraphicsEffect(self._opacity)
        self._fade = QPropertyAnimation(self._opacity, b"opacity", self)
        self._fade.setDuration(FADE_MS)
        self._fade.finished.connect(self._on_fade_finished)

        self.hide_timer = QTimer(self)
        self.hide_timer.setSingleShot(True)
        self.hide_timer.timeout.connect(self.dismiss)

        if parent is not None:
            parent.installEventFilter(self)
        self.hide()

    @property
    def message(self) -> str:
        return self.message_label.text()

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        rect = QRectF(self.rect()).adjusted(0.5, 0.5, -0.5, -0.5)
        radius = rect.height() / 2

        path = QPainterPath()
        path.addRoundedRect(rect, radius, radius)
        painter.fillPath(path, QColor(Colors.BG_TERTIARY))
        painter.setPen(self._accent)
        painter.drawPath(path)

    def show_message(self, message: str, kind: str = "info", duration: int = 3000):
        icon_name, accent = TOAST_KINDS.get(kind, TOAST_KINDS["info"])
        self._accent = QColor(accent)
        self.message_label.setText(message)
        self.icon_label.setPixmap(qta.icon(icon_name, color=accent).pixmap(Spacing.ICON_MD, Spacing.ICON_MD))

        self.adjustSize()
        self._reposition()
        self.show()
        self.raise_()

        self._fade.stop()
        self._fade.setStartValue(self._opacity.opacity())
        self._fade.setEndValue(1.0)
        self._fade.start()
        self.hide_timer.start(duration)

    def show_info(self, message: str, duration: int = 2500):
        self.show_message(message, "info", duration)

    def show_success(self, message: str, duration: int = 3000):
        self.show_message(message, "success", duration)

    def show_error(self, message: str, duration: int = 4000):
        self.show_message(message, "error", duration)

    def dismiss(self):
        self.hide_timer.stop()
        if not self.isVisible():
            return
        self._fade.stop()
        self._fade.setStartValue(self._opacity.opacity())
        self._fade.setEndValue(0.0)
        self._fade.start()

    def _on_fade_finished(self):
        if self._opacity.opacity() <= 0.0:
            self.hide()

    def _reposition(self):
        parent = self.parentWidget()
        if parent is None:
            return
        x = (parent.width() - self.width()) // 2
        y = parent.height() - self.height() - BOTTOM_OFFSET
        self.move(max(0, x), max(0, y))

    def mousePressEvent(self, event):
        self.dismiss()
        event.accept()

    def eventFilter(self, obj, event):
        if obj is self.parentWidget() and event.type() == QEvent.Type.Resize and self.isVisible():
            self._reposition()
        return super().eventFilter(obj, event)
