"""
Full-window lightbox over the gallery.

Renders a LightboxController: one fresh viewer widget per opened item,
prev/next buttons, counter, dot indicators, like and download actions.
Keyboard and touch input are translated into controller transitions.
"""
from typing import Callable, List, Optional
import logging

from PyQt6.QtCore import Qt, QEvent, QSize, pyqtSignal
from PyQt6.QtGui import QPainter, QColor, QKeyEvent, QMouseEvent
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton,
    QGraphicsOpacityEffect,
)
import qtawesome as qta

from memories_bed.core.media_urls import LIGHTBOX_SIZE, optimized_image_url
from memories_bed.ui.common.theme import Colors, Fonts, Spacing, Styles
from memories_bed.ui.images.zoomable_image import ImageViewerWidget
from memories_bed.viewer.gestures import SwipeOutcome, SwipeRecognizer, feedback_opacity
from memories_bed.viewer.lightbox import (
    KEY_CLOSE, KEY_NEXT, KEY_PREV, ImageView, LightboxController, VideoView,
)

logger = logging.getLogger(__name__)

MAX_DOTS = 20

QT_KEYS = {
    Qt.Key.Key_Left: KEY_PREV,
    Qt.Key.Key_Right: KEY_NEXT,
    Qt.Key.Key_Escape: KEY_CLOSE,
}


class LightboxOverlay(QWidget):
    """
    Overlay covering its parent window while the controller is Open.

    Signals:
        download_requested(item, index): download button pressed
        like_toggled(item): heart pressed; the host calls set_liked()
    """

    download_requested = pyqtSignal(object, int)
    like_toggled = pyqtSignal(object)

    def __init__(
        self,
        controller: LightboxController,
        parent: Optional[QWidget] = None,
        *,
        db=None,
        loader=None,
        is_liked: Optional[Callable[[str], bool]] = None,
    ):
        super().__init__(parent)
        self.setObjectName("lightboxOverlay")
        self.controller = controller
        self._db = db
        self._loader = loader
        self._is_liked = is_liked or (lambda media_id: False)
        self.swipe = SwipeRecognizer()
        self.viewer_widget: Optional[QWidget] = None
        self.dots: List[QPushButton] = []

        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setAttribute(Qt.WidgetAttribute.WA_AcceptTouchEvents)
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground)

        self._media_opacity = QGraphicsOpacityEffect(self)
        self._media_opacity.setOpacity(1.0)

        self._build_ui()
        self.controller.add_listener(self._on_controller_changed)
        if parent is not None:
            parent.installEventFilter(self)
        self.hide()

    # ------------------------------------------------------------------

    def _round_button(self, icon: str, tip: str, slot) -> QPushButton:
        btn = QPushButton()
        btn.setIcon(qta.icon(icon, color=Colors.ICON_ON_MEDIA))
        btn.setIconSize(QSize(Spacing.ICON_MD, Spacing.ICON_MD))
        btn.setToolTip(tip)
        btn.setStyleSheet(Styles.round_media_button())
        btn.setCursor(Qt.CursorShape.PointingHandCursor)
        btn.setFocusPolicy(Qt.FocusPolicy.NoFocus)
        btn.clicked.connect(slot)
        return btn

    def _build_ui(self):
        root = QVBoxLayout(self)
        root.setContentsMargins(Spacing.XL, Spacing.LG, Spacing.XL, Spacing.LG)
        root.setSpacing(Spacing.MD)

        top = QHBoxLayout()
        self.counter_label = QLabel()
        self.counter_label.setObjectName("lightboxCounter")
        self.counter_label.setStyleSheet(Styles.label(Colors.TEXT_WHITE, Fonts.SIZE_LG, Fonts.WEIGHT_MEDIUM))
        top.addWidget(self.counter_label)
        top.addStretch()
        self.like_btn = self._round_button('fa5.heart', "Like", self._on_like_clicked)
        top.addWidget(self.like_btn)
        self.download_btn = self._round_button('fa5s.download', "Download", self._on_download_clicked)
        top.addWidget(self.download_btn)
        self.close_btn = self._round_button('fa5s.times', "Close", self.controller.close)
        top.addWidget(self.close_btn)
        root.addLayout(top)

        middle = QHBoxLayout()
        middle.setSpacing(Spacing.MD)
        self.prev_btn = self._round_button('fa5s.chevron-left', "Previous", self.controller.prev)
        middle.addWidget(self.prev_btn, 0, Qt.AlignmentFlag.AlignVCenter)

        self.media_host = QWidget()
        self.media_host.setObjectName("lightboxMedia")
        self.media_host.setGraphicsEffect(self._media_opacity)
        self.media_layout = QVBoxLayout(self.media_host)
        self.media_layout.setContentsMargins(0, 0, 0, 0)
        middle.addWidget(self.media_host, 1)

        self.next_btn = self._round_button('fa5s.chevron-right', "Next", self.controller.next)
        middle.addWidget(self.next_btn, 0, Qt.AlignmentFlag.AlignVCenter)
        root.addLayout(middle, 1)

        self.dots_host = QWidget()
        self.dots_layout = QHBoxLayout(self.dots_host)
        self.dots_layout.setContentsMargins(0, 0, 0, 0)
        self.dots_layout.setSpacing(Spacing.SM)
        root.addWidget(self.dots_host, 0, Qt.AlignmentFlag.AlignHCenter)

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.fillRect(self.rect(), QColor(0, 0, 0, 235))

    # ------------------------------------------------------------------
    # Controller -> widgets
    # ------------------------------------------------------------------

    def _on_controller_changed(self, controller: LightboxController):
        self._teardown_viewer()
        self.swipe.cancel()
        self._apply_drag_feedback(0.0)
        if not controller.is_open:
            self.hide()
            parent = self.parentWidget()
            if parent is not None:
                parent.setFocus()
            return

        self._build_viewer()
        self._refresh_chrome()
        parent = self.parentWidget()
        if parent is not None:
            self.setGeometry(parent.rect())
        self.show()
        self.raise_()
        if hasattr(self.viewer_widget, "transport"):
            self.viewer_widget.setFocus()
        else:
            self.setFocus()

    def _build_viewer(self):
        viewer = self.controller.viewer
        if isinstance(viewer, ImageView):
            url = optimized_image_url(viewer.item.url, *LIGHTBOX_SIZE)
            widget = ImageViewerWidget(url, viewer.view, loader=self._loader)
            widget.background_clicked.connect(self._on_background_clicked)
        elif isinstance(viewer, VideoView):
            widget = self._build_video(viewer)
        else:
            return
        self.media_layout.addWidget(widget)
        self.viewer_widget = widget

    def _build_video(self, viewer: VideoView) -> QWidget:
        try:
            from memories_bed.ui.video.video_player import VideoPlayerWidget
        except (ImportError, OSError) as e:
            # libmpv missing on this machine
            logger.error(f"Video playback unavailable: {e}")
            viewer.playback.load_failed = True
            label = QLabel("Video failed to load")
            label.setAlignment(Qt.AlignmentFlag.AlignCenter)
            label.setStyleSheet(Styles.label(Colors.TEXT_SECONDARY, Fonts.SIZE_LG))
            return label
        return VideoPlayerWidget(viewer.item.url, viewer.playback, db=self._db)

    def _teardown_viewer(self):
        widget = self.viewer_widget
        self.viewer_widget = None
        if widget is None:
            return
        if hasattr(widget, "cleanup"):
            widget.cleanup()
        elif hasattr(widget, "teardown"):
            widget.teardown()
        self.media_layout.removeWidget(widget)
        widget.hide()
        widget.deleteLater()

    def _refresh_chrome(self):
        controller = self.controller
        self.counter_label.setText(controller.counter_text)
        navigable = controller.can_navigate
        self.prev_btn.setEnabled(navigable)
        self.next_btn.setEnabled(navigable)
        self._rebuild_dots()
        item = controller.current_item
        if item is not None:
            self.set_liked(self._is_liked(item.id))

    def _rebuild_dots(self):
        for dot in self.dots:
            self.dots_layout.removeWidget(dot)
            dot.deleteLater()
        self.dots = []
        count = self.controller.count
        if count <= 1 or count > MAX_DOTS:
            self.dots_host.setVisible(False)
            return
        self.dots_host.setVisible(True)
        for i in range(count):
            dot = QPushButton()
            dot.setCursor(Qt.CursorShape.PointingHandCursor)
            dot.setFocusPolicy(Qt.FocusPolicy.NoFocus)
            dot.setStyleSheet(Styles.dot(i == self.controller.index))
            dot.setToolTip(f"{i + 1}")
            dot.clicked.connect(lambda _=False, idx=i: self.controller.jump(idx))
            self.dots_layout.addWidget(dot)
            self.dots.append(dot)

    def set_liked(self, liked: bool):
        icon = 'fa5s.heart' if liked else 'fa5.heart'
        color = Colors.ACCENT_FAVORITE if liked else Colors.ICON_ON_MEDIA
        self.like_btn.setIcon(qta.icon(icon, color=color))
        self.like_btn.setProperty("liked", liked)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def _on_like_clicked(self):
        item = self.controller.current_item
        if item is not None:
            self.like_toggled.emit(item)

    def _on_download_clicked(self):
        item = self.controller.current_item
        if item is not None:
            self.download_requested.emit(item, self.controller.index)

    def _on_background_clicked(self):
        self.controller.background_clicked(gesture_active=self.swipe.is_dragging)

    # ------------------------------------------------------------------
    # Keyboard
    # ------------------------------------------------------------------

    def keyPressEvent(self, event: QKeyEvent):
        key = QT_KEYS.get(event.key())
        if key is not None and self.controller.handle_key(key):
            event.accept()
            return
        super().keyPressEvent(event)

    # ------------------------------------------------------------------
    # Touch
    # ------------------------------------------------------------------

    def event(self, event):
        etype = event.type()
        if etype in (QEvent.Type.TouchBegin, QEvent.Type.TouchUpdate, QEvent.Type.TouchEnd):
            points = event.points()
            if not points:
                return super().event(event)
            pos = points[0].position()
            if etype == QEvent.Type.TouchBegin:
                self.touch_start(pos.x(), pos.y())
            elif etype == QEvent.Type.TouchUpdate:
                self.touch_move(pos.x(), pos.y())
            else:
                self.touch_end(pos.x(), pos.y())
            event.accept()
            return True
        if etype == QEvent.Type.TouchCancel:
            self.swipe.cancel()
            self._apply_drag_feedback(0.0)
            event.accept()
            return True
        return super().event(event)

    def touch_start(self, x: float, y: float):
        if not self.controller.is_open:
            return
        self.swipe.touch_start(x, y)

    def touch_move(self, x: float, y: float):
        if self.swipe.touch_move(x, y):
            self._apply_drag_feedback(self.swipe.offset)

    def touch_end(self, x: float, y: float) -> SwipeOutcome:
        outcome = self.swipe.touch_end(x, y)
        self._apply_drag_feedback(0.0)
        if outcome is SwipeOutcome.NEXT:
            self.controller.next()
        elif outcome is SwipeOutcome.PREV:
            self.controller.prev()
        return outcome

    def _apply_drag_feedback(self, offset: float):
        """Shift and fade the media with the finger; 0 snaps back."""
        shift = int(offset)
        self.media_layout.setContentsMargins(max(0, shift), 0, max(0, -shift), 0)
        self._media_opacity.setOpacity(feedback_opacity(offset, self.media_host.width()))

    # ------------------------------------------------------------------
    # Mouse / geometry
    # ------------------------------------------------------------------

    def mousePressEvent(self, event: QMouseEvent):
        # Only presses on the bare backdrop, not ones bubbling up from children
        if event.button() == Qt.MouseButton.LeftButton and self.childAt(event.position().toPoint()) is None:
            self._on_background_clicked()
            event.accept()
            return
        super().mousePressEvent(event)

    def eventFilter(self, obj, event):
        if obj is self.parentWidget() and event.type() == QEvent.Type.Resize and self.isVisible():
            self.setGeometry(obj.rect())
        return super().eventFilter(obj, event)

    def teardown(self):
        self.controller.remove_listener(self._on_controller_changed)
        self._teardown_viewer()
        parent = self.parentWidget()
        if parent is not None:
            parent.removeEventFilter(self)
