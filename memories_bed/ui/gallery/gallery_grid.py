"""
Grid view of a gallery's media with the All / Images / Videos filter bar.

The grid renders GallerySession.filtered and reports activation with the
index inside that filtered sequence.
"""
from typing import Dict, List, Optional
import logging

from PyQt6.QtCore import Qt, pyqtSignal, QTimer, QSize
from PyQt6.QtGui import QPixmap, QImage, QMouseEvent
from PyQt6.QtWidgets import (
    QScrollArea, QWidget, QGridLayout, QFrame, QLabel, QVBoxLayout,
    QHBoxLayout, QPushButton, QStackedLayout,
)
import qtawesome as qta

from memories_bed.core.dto.media import MediaItem
from memories_bed.core.media_urls import grid_thumbnail_url
from memories_bed.ui.common.theme import Colors, Fonts, Spacing, Styles
from memories_bed.ui.images.image_loader import ImageHandle, get_image_loader
from memories_bed.viewer.gallery import GallerySession, MediaFilter

logger = logging.getLogger(__name__)

FILTER_LABELS = {
    MediaFilter.ALL: "All",
    MediaFilter.IMAGES: "Images",
    MediaFilter.VIDEOS: "Videos",
}

EMPTY_MESSAGES = {
    MediaFilter.ALL: "No media in this gallery yet",
    MediaFilter.IMAGES: "No images in this gallery",
    MediaFilter.VIDEOS: "No videos in this gallery",
}


class MediaThumbnail(QFrame):
    """
    One grid cell. Images load their resized variant, videos their poster
    frame with a play badge on top.
    """

    clicked = pyqtSignal(int)

    def __init__(self, item: MediaItem, index: int, parent=None, *, loader=None):
        super().__init__(parent)
        self.item = item
        self.index = index
        self._loader = loader or get_image_loader()
        self._handle: Optional[ImageHandle] = None
        self._image: Optional[QImage] = None
        self.failed = False

        self.setObjectName("mediaThumbnail")
        self.setStyleSheet(Styles.thumbnail_card())
        self.setCursor(Qt.CursorShape.PointingHandCursor)

        layout = QStackedLayout(self)
        layout.setStackingMode(QStackedLayout.StackingMode.StackAll)

        self.image_label = QLabel()
        self.image_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.image_label.setStyleSheet("border: none; background: transparent;")
        self.image_label.setPixmap(
            qta.icon('fa5s.spinner', color=Colors.TEXT_MUTED).pixmap(Spacing.ICON_LG, Spacing.ICON_LG)
        )
        layout.addWidget(self.image_label)

        self.play_badge: Optional[QLabel] = None
        if item.is_video:
            self.play_badge = QLabel()
            self.play_badge.setObjectName("videoBadge")
            self.play_badge.setAlignment(Qt.AlignmentFlag.AlignCenter)
            self.play_badge.setAttribute(Qt.WidgetAttribute.WA_TransparentForMouseEvents)
            self.play_badge.setStyleSheet("border: none; background: transparent;")
            self.play_badge.setPixmap(
                qta.icon('fa5s.play-circle', color=Colors.ICON_ON_MEDIA).pixmap(Spacing.ICON_XL * 2, Spacing.ICON_XL * 2)
            )
            layout.addWidget(self.play_badge)
            layout.setCurrentWidget(self.play_badge)

        self.thumb_url = grid_thumbnail_url(item.url, item.is_video)
        self.update_size(Spacing.THUMB_MIN_WIDTH)
        self._load()

    def _load(self):
        self._handle = self._loader.request(self.thumb_url)
        self._handle.ready.connect(self._on_ready)
        self._handle.failed.connect(self._on_failed)

    def _on_ready(self, image: QImage):
        self._image = image
        self.failed = False
        self._render_image()

    def _on_failed(self, error: str):
        logger.debug(f"Thumbnail failed for {self.item.id}: {error}")
        self.failed = True
        icon = 'fa5s.film' if self.item.is_video else 'fa5s.image'
        self.image_label.setPixmap(
            qta.icon(icon, color=Colors.TEXT_MUTED).pixmap(Spacing.ICON_XL, Spacing.ICON_XL)
        )

    def _render_image(self):
        if self._image is None:
            return
        pix = QPixmap.fromImage(self._image).scaled(
            self.size(),
            Qt.AspectRatioMode.KeepAspectRatioByExpanding,
            Qt.TransformationMode.SmoothTransformation,
        )
        # Centre crop, like object-fit: cover
        x = max(0, (pix.width() - self.width()) // 2)
        y = max(0, (pix.height() - self.height()) // 2)
        self.image_label.setPixmap(pix.copy(x, y, self.width(), self.height()))

    def update_size(self, width: int):
        height = int(width * Spacing.THUMB_ASPECT)
        self.setFixedSize(QSize(width, height))
        self._render_image()

    def mouseReleaseEvent(self, event: QMouseEvent):
        if event.button() == Qt.MouseButton.LeftButton and self.rect().contains(event.position().toPoint()):
            self.clicked.emit(self.index)
            event.accept()
            return
        super().mouseReleaseEvent(event)

    def teardown(self):
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


class FilterBar(QWidget):
    """All / Images / Videos tabs with per-filter counts."""

    filter_changed = pyqtSignal(object)  # MediaFilter

    def __init__(self, parent=None):
        super().__init__(parent)
        self._active = MediaFilter.ALL
        self._counts: Dict[MediaFilter, int] = {f: 0 for f in MediaFilter}
        self.buttons: Dict[MediaFilter, QPushButton] = {}

        layout = QHBoxLayout(self)
        layout.setContentsMargins(Spacing.XXL, Spacing.MD, Spacing.XXL, 0)
        layout.setSpacing(Spacing.SM)
        for media_filter in MediaFilter:
            btn = QPushButton()
            btn.setCursor(Qt.CursorShape.PointingHandCursor)
            btn.setFocusPolicy(Qt.FocusPolicy.NoFocus)
            btn.clicked.connect(lambda _=False, f=media_filter: self._on_clicked(f))
            self.buttons[media_filter] = btn
            layout.addWidget(btn)
        layout.addStretch()
        self._refresh()

    @property
    def active(self) -> MediaFilter:
        return self._active

    def set_state(self, active: MediaFilter, counts: Dict[MediaFilter, int]):
        self._active = active
        self._counts = dict(counts)
        self._refresh()

    def _on_clicked(self, media_filter: MediaFilter):
        if media_filter == self._active:
            return
        self._active = media_filter
        self._refresh()
        self.filter_changed.emit(media_filter)

    def _refresh(self):
        for media_filter, btn in self.buttons.items():
            btn.setText(f"{FILTER_LABELS[media_filter]} ({self._counts.get(media_filter, 0)})")
            btn.setStyleSheet(Styles.tab_button(media_filter == self._active))


class GalleryGridView(QWidget):
    """
    Filter bar plus a responsive thumbnail grid.

    Signals:
        item_activated(index): index within the filtered sequence
        filter_changed(filter): user picked another MediaFilter
    """

    item_activated = pyqtSignal(int)
    filter_changed = pyqtSignal(object)

    def __init__(self, parent=None, *, loader=None):
        super().__init__(parent)
        self.setObjectName("galleryGridView")
        self._loader = loader
        self.session: Optional[GallerySession] = None
        self.thumbnails: List[MediaThumbnail] = []

        # Debounce resize so the grid reflows once per drag
        self._resize_timer = QTimer(self)
        self._resize_timer.setSingleShot(True)
        self._resize_timer.setInterval(100)
        self._resize_timer.timeout.connect(self._do_reflow)

        self._setup_ui()

    def _setup_ui(self):
        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)
        root.setSpacing(0)

        self.filter_bar = FilterBar()
        self.filter_bar.filter_changed.connect(self._on_filter_changed)
        root.addWidget(self.filter_bar)

        self.scroll = QScrollArea()
        self.scroll.setWidgetResizable(True)
        self.scroll.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.scroll.setVerticalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAsNeeded)
        self.scroll.setStyleSheet(Styles.scroll_area_transparent() + Styles.SCROLLBAR)

        container = QWidget()
        container.setObjectName("galleryGridContainer")
        container_layout = QVBoxLayout(container)
        container_layout.setContentsMargins(Spacing.XXL, Spacing.XXL, Spacing.XXL, Spacing.XXL)
        container_layout.setSpacing(0)

        self.grid_host = QWidget()
        self.grid_layout = QGridLayout(self.grid_host)
        self.grid_layout.setContentsMargins(0, 0, 0, 0)
        self.grid_layout.setSpacing(Spacing.LG)
        self.grid_layout.setAlignment(Qt.AlignmentFlag.AlignTop | Qt.AlignmentFlag.AlignLeft)
        container_layout.addWidget(self.grid_host)

        self.empty_label = QLabel()
        self.empty_label.setObjectName("galleryEmptyState")
        self.empty_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.empty_label.setStyleSheet(Styles.label(Colors.TEXT_SECONDARY, Fonts.SIZE_XL))
        self.empty_label.setVisible(False)
        container_layout.addWidget(self.empty_label)
        container_layout.addStretch()

        self.scroll.setWidget(container)
        root.addWidget(self.scroll, 1)

    # ------------------------------------------------------------------

    def set_session(self, session: Optional[GallerySession]):
        self.session = session
        self.refresh()

    def refresh(self):
        """Rebuild thumbnails from the session's filtered sequence."""
        self.clear()
        if self.session is None:
            self.filter_bar.set_state(MediaFilter.ALL, {f: 0 for f in MediaFilter})
            self._show_empty(MediaFilter.ALL)
            return

        self.filter_bar.set_state(self.session.filter, self.session.counts())
        items = self.session.filtered
        if not items:
            self._show_empty(self.session.filter)
            return

        self.empty_label.setVisible(False)
        self.grid_host.setVisible(True)
        self.setUpdatesEnabled(False)
        for index, item in enumerate(items):
            thumb = MediaThumbnail(item, index, loader=self._loader)
            thumb.clicked.connect(self.item_activated.emit)
            self.thumbnails.append(thumb)
        self._do_reflow()
        self.setUpdatesEnabled(True)

    def clear(self):
        for thumb in self.thumbnails:
            thumb.teardown()
            self.grid_layout.removeWidget(thumb)
            thumb.deleteLater()
        self.thumbnails = []

    def _show_empty(self, media_filter: MediaFilter):
        self.grid_host.setVisible(False)
        self.empty_label.setText(EMPTY_MESSAGES[media_filter])
        self.empty_label.setVisible(True)

    @property
    def is_empty(self) -> bool:
        return not self.thumbnails

    def _on_filter_changed(self, media_filter: MediaFilter):
        if self.session is not None and self.session.set_filter(media_filter):
            self.refresh()
        self.filter_changed.emit(media_filter)

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def column_count(self, width: Optional[int] = None) -> int:
        available = self._available_width() if width is None else width
        spacing = self.grid_layout.spacing()
        columns = max(1, (available + spacing) // (Spacing.THUMB_MIN_WIDTH + spacing))
        return min(columns, Spacing.GRID_MAX_COLUMNS)

    def _available_width(self) -> int:
        return max(0, self.scroll.viewport().width() - Spacing.XXL * 2)

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self._resize_timer.start()

    def _do_reflow(self):
        if not self.thumbnails:
            return
        available = self._available_width()
        columns = self.column_count(available)
        spacing = self.grid_layout.spacing()
        width = max(Spacing.THUMB_MIN_WIDTH // 2, int((available - (columns - 1) * spacing) / columns))

        for i in reversed(range(self.grid_layout.count())):
            self.grid_layout.takeAt(i)
        for idx, thumb in enumerate(self.thumbnails):
            thumb.update_size(width)
            self.grid_layout.addWidget(thumb, idx // columns, idx % columns)
