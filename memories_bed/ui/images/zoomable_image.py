"""
Lightbox image viewer: zoom, pan and rotate over an ImageViewState
"""
from typing import Optional
import logging

from PyQt6.QtWidgets import (
    QGraphicsView,
    QGraphicsScene,
    QGraphicsPixmapItem,
    QWidget,
    QVBoxLayout,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QStackedLayout,
)
from PyQt6.QtCore import Qt, QRectF, pyqtSignal
from PyQt6.QtGui import QPixmap, QWheelEvent, QMouseEvent, QPainter, QTransform, QImage
import qtawesome as qta

from memories_bed.ui.common.theme import Colors, Fonts, Spacing, Styles
from memories_bed.ui.images.image_loader import ImageHandle, get_image_loader
from memories_bed.viewer.image_transform import ImageViewState, compose_transform

logger = logging.getLogger(__name__)


class ZoomableImageView(QGraphicsView):
    """
    Renders one pixmap fitted to the viewport, then the viewer transform
    (translate, scale, rotate) about the viewport centre.
    """

    transform_changed = pyqtSignal()
    background_clicked = pyqtSignal()

    def __init__(self, state: ImageViewState, parent=None):
        super().__init__(parent)
        self.setObjectName("zoomableImageView")
        self.state = state

        self.scene = QGraphicsScene(self)
        self.setScene(self.scene)
        self.pixmap_item: Optional[QGraphicsPixmapItem] = None
        self._press_hit_image = False

        self.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
        self.setDragMode(QGraphicsView.DragMode.NoDrag)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.setViewportUpdateMode(QGraphicsView.ViewportUpdateMode.FullViewportUpdate)
        self.setFocusPolicy(Qt.FocusPolicy.NoFocus)
        self.setStyleSheet("background: transparent; border: none;")

    def set_pixmap(self, pixmap: QPixmap):
        """Set image to display"""
        if pixmap.isNull():
            return
        self.scene.clear()
        self.pixmap_item = QGraphicsPixmapItem(pixmap)
        self.pixmap_item.setTransformationMode(Qt.TransformationMode.SmoothTransformation)
        self.scene.addItem(self.pixmap_item)
        self.apply_state()

    def clear_pixmap(self):
        self.scene.clear()
        self.pixmap_item = None

    def _fit_transform(self) -> QTransform:
        """Contain-fit, never upscaling, centred in the viewport."""
        view = self.viewport().rect()
        pix = self.pixmap_item.pixmap()
        if pix.width() <= 0 or pix.height() <= 0 or view.isEmpty():
            return QTransform()
        scale = min(view.width() / pix.width(), view.height() / pix.height(), 1.0)
        ox = (view.width() - pix.width() * scale) / 2
        oy = (view.height() - pix.height() * scale) / 2
        return QTransform.fromScale(scale, scale) * QTransform.fromTranslate(ox, oy)

    def apply_state(self):
        """Re-render the item from the current ImageViewState."""
        view = self.viewport().rect()
        # Scene coordinates == viewport coordinates
        self.resetTransform()
        self.scene.setSceneRect(QRectF(0, 0, view.width(), view.height()))
        if self.pixmap_item is not None:
            origin = (view.width() / 2, view.height() / 2)
            user = QTransform(*compose_transform(self.state.transform, origin=origin))
            self.pixmap_item.setTransform(self._fit_transform() * user)
        self._update_cursor()
        self.viewport().update()
        self.transform_changed.emit()

    def image_rect(self) -> QRectF:
        if self.pixmap_item is None:
            return QRectF()
        return self.pixmap_item.sceneBoundingRect()

    def _update_cursor(self):
        if self.state.dragging:
            self.viewport().setCursor(Qt.CursorShape.ClosedHandCursor)
        elif self.state.can_pan:
            self.viewport().setCursor(Qt.CursorShape.OpenHandCursor)
        else:
            self.viewport().setCursor(Qt.CursorShape.ArrowCursor)

    def wheelEvent(self, event: QWheelEvent):
        """Wheel zooms by one step per notch"""
        if self.pixmap_item is None:
            return
        if event.angleDelta().y() > 0:
            self.state.zoom_in()
        elif event.angleDelta().y() < 0:
            self.state.zoom_out()
        self.apply_state()
        event.accept()

    def mousePressEvent(self, event: QMouseEvent):
        if event.button() != Qt.MouseButton.LeftButton:
            super().mousePressEvent(event)
            return
        pos = event.position()
        self._press_hit_image = self.image_rect().contains(pos)
        if self.state.begin_drag(pos.x(), pos.y()):
            self._update_cursor()
        event.accept()

    def mouseMoveEvent(self, event: QMouseEvent):
        if self.state.dragging:
            pos = event.position()
            self.state.update_drag(pos.x(), pos.y())
            self.apply_state()
            event.accept()
        else:
            super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event: QMouseEvent):
        if event.button() != Qt.MouseButton.LeftButton:
            super().mouseReleaseEvent(event)
            return
        was_dragging = self.state.dragging
        self.state.end_drag()
        self._update_cursor()
        if not was_dragging and not self._press_hit_image:
            self.background_clicked.emit()
        event.accept()

    def leaveEvent(self, event):
        # Leaving the view ends a drag, like releasing the button
        if self.state.dragging:
            self.state.end_drag()
            self._update_cursor()
        super().leaveEvent(event)

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self.apply_state()


class ImageViewerWidget(QWidget):
    """
    Image viewer for one lightbox item.

    Owns a fresh ImageViewState; the lightbox builds a new widget per item so
    zoom, position and rotation never leak between images.
    """

    background_clicked = pyqtSignal()
    load_failed = pyqtSignal(str)

    def __init__(self, url: str, state: Optional[ImageViewState] = None, parent=None, *, loader=None):
        super().__init__(parent)
        self.url = url
        self.state = state or ImageViewState()
        self._loader = loader or get_image_loader()
        self._handle: Optional[ImageHandle] = None
        self.failed = False

        self.setStyleSheet("background: transparent;")
        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)
        root.setSpacing(Spacing.SM)

        self._stack_host = QWidget()
        self._stack = QStackedLayout(self._stack_host)

        self.view = ZoomableImageView(self.state)
        self.view.transform_changed.connect(self._refresh_zoom_label)
        self.view.background_clicked.connect(self.background_clicked)
        self._stack.addWidget(self.view)

        self.status_label = QLabel("Loading…")
        self.status_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.status_label.setStyleSheet(Styles.label(Colors.TEXT_SECONDARY, Fonts.SIZE_LG))
        self._stack.addWidget(self.status_label)
        self._stack.setCurrentWidget(self.status_label)
        root.addWidget(self._stack_host, 1)

        root.addLayout(self._build_toolbar())

        self._load()

    def _build_toolbar(self) -> QHBoxLayout:
        bar = QHBoxLayout()
        bar.setSpacing(Spacing.SM)
        bar.addStretch()

        def make(icon: str, tip: str, slot) -> QPushButton:
            btn = QPushButton()
            btn.setIcon(qta.icon(icon, color=Colors.ICON_ON_MEDIA))
            btn.setToolTip(tip)
            btn.setStyleSheet(Styles.zoom_button())
            btn.setFocusPolicy(Qt.FocusPolicy.NoFocus)
            btn.clicked.connect(slot)
            bar.addWidget(btn)
            return btn

        self.zoom_out_btn = make('fa5s.search-minus', "Zoom out", self.zoom_out)

        self.zoom_label = QLabel()
        self.zoom_label.setMinimumWidth(48)
        self.zoom_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.zoom_label.setStyleSheet(Styles.label(Colors.TEXT_WHITE, Fonts.SIZE_SM, Fonts.WEIGHT_MEDIUM))
        bar.addWidget(self.zoom_label)

        self.zoom_in_btn = make('fa5s.search-plus', "Zoom in", self.zoom_in)
        self.rotate_btn = make('fa5s.redo', "Rotate", self.rotate)
        self.reset_btn = make('fa5s.compress', "Reset", self.reset)
        bar.addStretch()
        self._refresh_zoom_label()
        return bar

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _load(self):
        cached = self._loader.cached(self.url)
        if cached is not None:
            self._on_ready(cached)
            return
        self._handle = self._loader.request(self.url)
        self._handle.ready.connect(self._on_ready)
        self._handle.failed.connect(self._on_failed)

    def _on_ready(self, image: QImage):
        self.failed = False
        self.view.set_pixmap(QPixmap.fromImage(image))
        self._stack.setCurrentWidget(self.view)

    def _on_failed(self, error: str):
        logger.warning(f"Lightbox image failed: {self.url}: {error}")
        self.failed = True
        self.status_label.setText("")
        self.status_label.setPixmap(
            qta.icon('fa5s.image', color=Colors.TEXT_MUTED).pixmap(64, 64)
        )
        self.status_label.setToolTip("Image failed to load")
        self._stack.setCurrentWidget(self.status_label)
        self.load_failed.emit(error)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def zoom_in(self):
        self.state.zoom_in()
        self.view.apply_state()

    def zoom_out(self):
        self.state.zoom_out()
        self.view.apply_state()

    def rotate(self):
        self.state.rotate()
        self.view.apply_state()

    def reset(self):
        self.state.reset()
        self.view.apply_state()

    def _refresh_zoom_label(self):
        self.zoom_label.setText(f"{self.state.transform.zoom_percent}%")

    def teardown(self):
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self.view.clear_pixmap()
