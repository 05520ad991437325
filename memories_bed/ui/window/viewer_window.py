"""
Main window: open a gallery by code, browse its grid, view items in the
lightbox, share it and leave comments.
"""
from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QLineEdit, QPushButton,
    QLabel, QFrame, QScrollArea, QSplitter,
)
from PyQt6.QtCore import Qt, QThread, pyqtSlot
from PyQt6.QtGui import QKeySequence, QShortcut
import logging
from typing import List, Optional
import qtawesome as qta

from memories_bed.core.dto.folder import GalleryDTO
from memories_bed.core.dto.media import MediaItem
from memories_bed.core.share import normalize_code_input
from memories_bed.ui.common.theme import Colors, Fonts, Spacing, Styles
from memories_bed.ui.common.utils import format_date, pluralize
from memories_bed.ui.gallery.comments_panel import CommentsPanel
from memories_bed.ui.gallery.gallery_grid import GalleryGridView
from memories_bed.ui.gallery.lightbox import LightboxOverlay
from memories_bed.ui.share.qr_dialog import ShareDialog
from memories_bed.ui.video.volume_store import load_saved_volume
from memories_bed.ui.widgets.notification_widgets import ToastNotification
from memories_bed.ui.window.viewer_downloads import DownloadMixin
from memories_bed.ui.window.viewer_workers import (
    AddCommentWorker, CommentsWorker, GalleryLoadWorker, ViewCountWorker,
)
from memories_bed.viewer.gallery import GallerySession, MediaFilter

logger = logging.getLogger(__name__)


class ViewerWindow(QMainWindow, DownloadMixin):
    def __init__(self, core, *, loader=None):
        super().__init__()

        self.core = core
        self.db = core.db
        self.folders = core.folders
        self._loader = loader
        self.gallery: Optional[GalleryDTO] = None
        self.session: Optional[GallerySession] = None
        self.lightbox: Optional[LightboxOverlay] = None

        self._gallery_worker: Optional[GalleryLoadWorker] = None
        self._gallery_token = 0
        self._comments_worker: Optional[CommentsWorker] = None
        self._comments_token = 0
        # bumped whenever a different gallery is shown
        self._shown_token = 0
        self._comment_post_worker: Optional[AddCommentWorker] = None
        self._view_worker: Optional[ViewCountWorker] = None
        self._stale_workers: List[QThread] = []
        self._closing = False

        self.setWindowTitle("Memories Bed")
        self.setGeometry(100, 100, 1400, 900)

        self._create_ui()
        self._setup_shortcuts()

    # ------------------------------------------------------------------
    # UI
    # ------------------------------------------------------------------

    def _create_ui(self):
        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        self._central_widget = central_widget

        main_layout = QVBoxLayout(central_widget)
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.setSpacing(0)

        main_layout.addWidget(self._create_code_bar())
        main_layout.addWidget(self._create_gallery_header())

        self.status_label = QLabel("Enter a gallery code to start")
        self.status_label.setObjectName("viewerStatus")
        self.status_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.status_label.setStyleSheet(Styles.label(Colors.TEXT_SECONDARY, Fonts.SIZE_XL, padding=Spacing.XXL))
        main_layout.addWidget(self.status_label)

        self.splitter = QSplitter(Qt.Orientation.Horizontal)
        self.splitter.setChildrenCollapsible(False)
        self.splitter.setHandleWidth(1)

        self.grid = GalleryGridView(loader=self._loader)
        self.grid.item_activated.connect(self._on_item_activated)
        self.grid.filter_changed.connect(self._on_filter_changed)
        self.splitter.addWidget(self.grid)

        self.comments_scroll = QScrollArea()
        self.comments_scroll.setWidgetResizable(True)
        self.comments_scroll.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.comments_scroll.setStyleSheet(Styles.scroll_area_transparent() + Styles.SCROLLBAR)
        self.comments_scroll.setMinimumWidth(320)
        self.comments = CommentsPanel()
        self.comments.submit_requested.connect(self._on_comment_submitted)
        self.comments_scroll.setWidget(self.comments)
        self.splitter.addWidget(self.comments_scroll)
        self.splitter.setSizes([1050, 350])
        self.splitter.setVisible(False)
        main_layout.addWidget(self.splitter, 1)

        self.toast = ToastNotification(self)

    def _create_code_bar(self) -> QWidget:
        bar = QFrame()
        bar.setObjectName("codeBar")
        bar.setStyleSheet(f"QFrame#codeBar {{ {Styles.HEADER} }}")
        bar.setFixedHeight(Spacing.HEADER_HEIGHT)
        layout = QHBoxLayout(bar)
        layout.setContentsMargins(Spacing.XXL, Spacing.MD, Spacing.XXL, Spacing.MD)
        layout.setSpacing(Spacing.MD)

        brand = QLabel("Memories Bed")
        brand.setStyleSheet(Styles.label(Colors.ACCENT_PRIMARY, Fonts.SIZE_TITLE, Fonts.WEIGHT_BOLD))
        layout.addWidget(brand)
        layout.addStretch()

        self.code_input = QLineEdit()
        self.code_input.setPlaceholderText("Gallery code or link")
        self.code_input.setMinimumWidth(320)
        self.code_input.setStyleSheet(Styles.input_field())
        self.code_input.returnPressed.connect(self._on_open_clicked)
        layout.addWidget(self.code_input)

        self.open_btn = QPushButton("Open")
        self.open_btn.setIcon(qta.icon('fa5s.folder-open', color=Colors.TEXT_WHITE))
        self.open_btn.setStyleSheet(Styles.button_primary())
        self.open_btn.clicked.connect(self._on_open_clicked)
        layout.addWidget(self.open_btn)
        return bar

    def _create_gallery_header(self) -> QWidget:
        self.header = QFrame()
        self.header.setObjectName("galleryHeader")
        layout = QHBoxLayout(self.header)
        layout.setContentsMargins(Spacing.XXL, Spacing.LG, Spacing.XXL, 0)
        layout.setSpacing(Spacing.LG)

        text_col = QVBoxLayout()
        text_col.setSpacing(Spacing.XS)
        self.title_label = QLabel()
        self.title_label.setStyleSheet(Styles.label(Colors.TEXT_PRIMARY, Fonts.SIZE_TITLE, Fonts.WEIGHT_BOLD))
        text_col.addWidget(self.title_label)
        self.description_label = QLabel()
        self.description_label.setWordWrap(True)
        self.description_label.setStyleSheet(Styles.label(Colors.TEXT_SECONDARY, Fonts.SIZE_LG))
        text_col.addWidget(self.description_label)
        self.meta_label = QLabel()
        self.meta_label.setStyleSheet(Styles.label(Colors.TEXT_MUTED, Fonts.SIZE_SM))
        text_col.addWidget(self.meta_label)
        layout.addLayout(text_col, 1)

        self.share_btn = QPushButton("Share")
        self.share_btn.setIcon(qta.icon('fa5s.qrcode', color=Colors.TEXT_PRIMARY))
        self.share_btn.setStyleSheet(Styles.button_secondary())
        self.share_btn.clicked.connect(self._on_share_clicked)
        layout.addWidget(self.share_btn, 0, Qt.AlignmentFlag.AlignTop)

        self.header.setVisible(False)
        return self.header

    def _setup_shortcuts(self):
        QShortcut(QKeySequence("Ctrl+L"), self, activated=self.code_input.setFocus)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _on_open_clicked(self):
        self.open_code(self.code_input.text())

    def open_code(self, text: str) -> bool:
        """Start loading the gallery named by a code or /view/{code} link."""
        code = normalize_code_input(text or "")
        if code is None:
            self.status_label.setText("Enter a valid 6-character code")
            self.status_label.setVisible(True)
            return False

        if self._gallery_worker:
            self._retire_worker(self._gallery_worker)

        self.code_input.setText(code)
        self.status_label.setText("Loading gallery…")
        self.status_label.setVisible(True)
        self.open_btn.setEnabled(False)

        self._gallery_token += 1
        self._gallery_worker = GalleryLoadWorker(
            token=self._gallery_token,
            folders_manager=self.folders,
            code=code,
        )
        self._gallery_worker.loaded.connect(self._on_gallery_loaded)
        self._gallery_worker.failed.connect(self._on_gallery_failed)
        self._gallery_worker.start()
        return True

    @pyqtSlot(int, object)
    def _on_gallery_loaded(self, token: int, gallery: GalleryDTO):
        if token != self._gallery_token or self._closing:
            return
        self.open_btn.setEnabled(True)
        self.show_gallery(gallery)
        self._record_view(gallery)

    @pyqtSlot(int, str, bool)
    def _on_gallery_failed(self, token: int, error: str, not_found: bool):
        if token != self._gallery_token or self._closing:
            return
        self.open_btn.setEnabled(True)
        logger.warning(f"Gallery load failed: {error}")
        self.status_label.setText("Gallery not found" if not_found else "Could not load gallery")
        self.status_label.setVisible(True)
        if not not_found:
            self.toast.show_error(error)

    def show_gallery(self, gallery: GalleryDTO):
        """Render a loaded gallery. A previous gallery's lightbox and pending comment post are discarded."""
        self._teardown_lightbox()
        self._shown_token += 1
        if self._comment_post_worker is not None:
            self._retire_worker(self._comment_post_worker)
            self._comment_post_worker = None
        self.comments.set_busy(False)
        self.gallery = gallery
        saved_filter = MediaFilter.parse(self.db.get_config("gallery_filter", MediaFilter.ALL.value))
        self.session = GallerySession(
            gallery.media,
            saved_filter,
            volume_provider=lambda: load_saved_volume(self.db),
        )
        self.lightbox = LightboxOverlay(
            self.session.lightbox,
            self._central_widget,
            db=self.db,
            loader=self._loader,
            is_liked=self.db.is_liked,
        )
        self.lightbox.download_requested.connect(self._download_media)
        self.lightbox.like_toggled.connect(self._on_like_toggled)

        self._render_header(gallery)
        self.grid.set_session(self.session)
        self.status_label.setVisible(False)
        self.splitter.setVisible(True)

        folder = gallery.folder
        self.comments_scroll.setVisible(folder.allow_comments)
        self.comments.set_comments([])
        if folder.allow_comments:
            self._load_comments()
        self.setWindowTitle(f"{folder.title} - Memories Bed")

    def _render_header(self, gallery: GalleryDTO):
        folder = gallery.folder
        self.title_label.setText(folder.title)
        self.description_label.setText(folder.description or "")
        self.description_label.setVisible(bool(folder.description))
        meta = [pluralize(len(gallery.media), "item"), pluralize(folder.view_count, "view")]
        created = format_date(folder.created_at)
        if created:
            meta.insert(0, created)
        self.meta_label.setText("  ·  ".join(meta))
        self.header.setVisible(True)

    def _record_view(self, gallery: GalleryDTO):
        # Once per gallery load, never per lightbox open
        if self._view_worker:
            self._retire_worker(self._view_worker)
        self._view_worker = ViewCountWorker(folders_manager=self.folders, gallery=gallery)
        self._view_worker.start()

    # ------------------------------------------------------------------
    # Grid / lightbox
    # ------------------------------------------------------------------

    def _on_item_activated(self, index: int):
        if self.session is None:
            return
        try:
            self.session.select(index)
        except IndexError as e:
            logger.warning(f"Ignoring grid activation: {e}")

    def _on_filter_changed(self, media_filter: MediaFilter):
        self.db.set_config("gallery_filter", media_filter.value)

    def _on_like_toggled(self, item: MediaItem):
        liked = not self.db.is_liked(item.id)
        self.db.set_liked(item.id, liked, self.gallery.folder.code if self.gallery else None)
        if self.lightbox is not None:
            self.lightbox.set_liked(liked)

    def _teardown_lightbox(self):
        if self.lightbox is None:
            return
        self.session.lightbox.close()
        self.lightbox.teardown()
        self.lightbox.deleteLater()
        self.lightbox = None

    # ------------------------------------------------------------------
    # Share
    # ------------------------------------------------------------------

    def _on_share_clicked(self):
        if self.gallery is None:
            return
        folder = self.gallery.folder
        dialog = ShareDialog(folder.code, folder.title, self.core.public_base_url, self)
        dialog.exec()

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    def _load_comments(self):
        if self.gallery is None:
            return
        if self._comments_worker:
            self._retire_worker(self._comments_worker)
        self._comments_token += 1
        self._comments_worker = CommentsWorker(
            token=self._comments_token,
            folders_manager=self.folders,
            gallery=self.gallery,
        )
        self._comments_worker.loaded.connect(self._on_comments_loaded)
        self._comments_worker.failed.connect(self._on_comments_failed)
        self._comments_worker.start()

    @pyqtSlot(int, list)
    def _on_comments_loaded(self, token: int, comments: list):
        if token != self._comments_token or self._closing:
            return
        self.comments.set_comments(comments)

    @pyqtSlot(int, str)
    def _on_comments_failed(self, token: int, error: str):
        if token != self._comments_token or self._closing:
            return
        self.comments.set_status("Could not load comments", error=True)

    def _on_comment_submitted(self, name: str, text: str):
        if self.gallery is None:
            return
        if self._comment_post_worker is not None and self._comment_post_worker.isRunning():
            return
        self.comments.set_busy(True)
        self._comment_post_worker = AddCommentWorker(
            token=self._shown_token,
            folders_manager=self.folders,
            gallery=self.gallery,
            name=name,
            text=text,
        )
        self._comment_post_worker.added.connect(self._on_comment_added)
        self._comment_post_worker.failed.connect(self._on_comment_failed)
        self._comment_post_worker.start()

    @pyqtSlot(int, object)
    def _on_comment_added(self, token: int, comment):
        if token != self._shown_token or self._closing:
            return
        self.comments.set_busy(False)
        self.comments.prepend_comment(comment)
        self.comments.clear_form()
        self.toast.show_success("Comment posted")

    @pyqtSlot(int, str)
    def _on_comment_failed(self, token: int, error: str):
        if token != self._shown_token or self._closing:
            return
        self.comments.set_busy(False)
        self.comments.set_status(error or "Could not post comment", error=True)

    # ------------------------------------------------------------------
    # Threads / shutdown
    # ------------------------------------------------------------------

    def _retire_worker(self, worker: QThread) -> None:
        if not worker:
            return
        if not worker.isRunning():
            worker.deleteLater()
            return
        if hasattr(worker, "cancel"):
            worker.cancel()
        self._stale_workers.append(worker)
        worker.finished.connect(lambda w=worker: self._release_worker(w))

    def _release_worker(self, worker: QThread) -> None:
        if worker in self._stale_workers:
            self._stale_workers.remove(worker)
        worker.deleteLater()

    def _shutdown_threads(self) -> None:
        threads = [
            self._gallery_worker,
            self._comments_worker,
            self._comment_post_worker,
            self._view_worker,
            self._download_thread,
        ]
        threads.extend(self._stale_workers)
        for thread in threads:
            if thread is None:
                continue
            if hasattr(thread, "cancel"):
                thread.cancel()
            if thread.isRunning() and not thread.wait(3000):
                logger.warning(f"{type(thread).__name__} did not finish in time")

    def closeEvent(self, event):
        """Ensure core resources shut down when the main window closes."""
        self._closing = True
        if self.lightbox is not None:
            self._teardown_lightbox()
        self._shutdown_threads()
        self.core.close()
        super().closeEvent(event)
