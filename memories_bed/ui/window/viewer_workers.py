"""
Background worker threads for the viewer window.

Workers whose results land in the window carry a token so the window can
ignore results from a request it has since superseded.
"""
from PyQt6.QtCore import QThread, pyqtSignal
import logging

logger = logging.getLogger(__name__)


class GalleryLoadWorker(QThread):
    """
    Loads a gallery (folder + media) by short code.

    Signals:
        loaded(token, gallery): GalleryDTO on success
        failed(token, error, not_found): error text; not_found is True when
            the code matched nothing
    """
    loaded = pyqtSignal(int, object)
    failed = pyqtSignal(int, str, bool)

    def __init__(self, *, token: int, folders_manager, code: str):
        super().__init__()
        self._token = token
        self._folders = folders_manager
        self._code = code
        self._cancelled = False

    @property
    def token(self) -> int:
        return self._token

    def cancel(self) -> None:
        """Cancel the worker. Safe to call multiple times."""
        self._cancelled = True

    def run(self) -> None:
        from memories_bed.core.folders_manager import GalleryNotFoundError
        try:
            gallery = self._folders.load_gallery(self._code)
            if self._cancelled:
                return
            self.loaded.emit(self._token, gallery)
        except GalleryNotFoundError as e:
            if not self._cancelled:
                self.failed.emit(self._token, str(e), True)
        except Exception as e:
            if not self._cancelled:
                self.failed.emit(self._token, str(e), False)


class ViewCountWorker(QThread):
    """Fire-and-forget view counter bump; failures are logged by the manager."""
    finished_with = pyqtSignal(bool)

    def __init__(self, *, folders_manager, gallery):
        super().__init__()
        self._folders = folders_manager
        self._gallery = gallery

    def run(self) -> None:
        self.finished_with.emit(self._folders.record_view(self._gallery))


class CommentsWorker(QThread):
    """
    Loads the comment list of a gallery, newest first.

    Signals:
        loaded(token, comments)
        failed(token, error)
    """
    loaded = pyqtSignal(int, list)
    failed = pyqtSignal(int, str)

    def __init__(self, *, token: int, folders_manager, gallery):
        super().__init__()
        self._token = token
        self._folders = folders_manager
        self._gallery = gallery

    @property
    def token(self) -> int:
        return self._token

    def run(self) -> None:
        try:
            comments = self._folders.list_comments(self._gallery)
            self.loaded.emit(self._token, list(comments))
        except Exception as e:
            logger.warning(f"Loading comments failed: {e}")
            self.failed.emit(self._token, str(e))


class AddCommentWorker(QThread):
    """
    Posts one comment.

    Signals:
        added(token, comment): created CommentDTO
        failed(token, error)
    """
    added = pyqtSignal(int, object)
    failed = pyqtSignal(int, str)

    def __init__(self, *, token: int, folders_manager, gallery, name: str, text: str):
        super().__init__()
        self._token = token
        self._folders = folders_manager
        self._gallery = gallery
        self._name = name
        self._text = text

    def run(self) -> None:
        try:
            comment = self._folders.add_comment(self._gallery, self._name, self._text)
            self.added.emit(self._token, comment)
        except Exception as e:
            logger.warning(f"Adding comment failed: {e}")
            self.failed.emit(self._token, str(e))
