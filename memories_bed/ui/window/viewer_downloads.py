"""
Download functionality mixin for ViewerWindow.

Usage:
    class ViewerWindow(QMainWindow, DownloadMixin):
        ...
"""
from typing import Optional
import logging

from memories_bed.core.dto.media import MediaItem
from memories_bed.core.download_worker import DownloadWorker

logger = logging.getLogger(__name__)

MSG_NOT_ALLOWED = "Downloads are not allowed for this gallery"
MSG_STARTED = "Download started!"
MSG_FAILED = "Failed to download file"
MSG_BUSY = "Download already in progress"


class DownloadMixin:
    """
    Mixin class providing download functionality for ViewerWindow.

    This mixin expects the following attributes on the host class:
    - self.core: CoreContext (uses core.downloads)
    - self.gallery: GalleryDTO currently shown, or None
    - self.session: GallerySession whose lightbox holds the filtered items
    - self.toast: ToastNotification widget
    """

    _download_thread: Optional[DownloadWorker] = None

    def _download_media(self, item: MediaItem, index: int) -> bool:
        """
        Save one lightbox item to the download directory.

        Returns True when a download was started.
        """
        gallery = self.gallery
        if gallery is None:
            return False
        if not gallery.folder.allow_downloads:
            self.toast.show_error(MSG_NOT_ALLOWED)
            return False

        if self._download_thread is not None and self._download_thread.isRunning():
            logger.info("Download already in progress; ignoring new request")
            self.toast.show_info(MSG_BUSY)
            return False

        # index is within the filtered lightbox list
        total = self.session.lightbox.count if self.session is not None else len(gallery.media)
        logger.info(f"Downloading {item.type} {item.id} ({index + 1} of {total})")
        self._download_thread = DownloadWorker(
            self.core.downloads,
            item,
            gallery.folder.title,
            index,
        )
        self._download_thread.completed.connect(self._on_download_completed)
        self._download_thread.failed.connect(self._on_download_failed)
        self._download_thread.start()
        return True

    def _on_download_completed(self, path: str):
        logger.info(f"Download saved to {path}")
        self.toast.show_success(MSG_STARTED)

    def _on_download_failed(self, error: str):
        logger.error(f"Download failed: {error}")
        self.toast.show_error(MSG_FAILED)
