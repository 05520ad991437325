"""
Off-thread image fetching for grid thumbnails and lightbox images.

Requests go through a thread pool; results are marshalled back onto the
Qt main thread through `future_done` and delivered on per-request handles.
"""
from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, List, Optional

import requests
from PyQt6.QtCore import QObject, QTimer, pyqtSignal
from PyQt6.QtGui import QImage

from memories_bed.core.http_client import MEDIA_HEADERS, get_http_client

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], bytes]


class ImageHandle(QObject):
    """
    Tracks one image request.

    ready: QImage decoded from the response
    failed: error message
    """

    ready = pyqtSignal(object)
    failed = pyqtSignal(str)

    def __init__(self, url: str, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.url = url
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class ImageLoader(QObject):
    """
    Image pipeline.

    Responsibilities:
    - Request deduplication
    - Thread pooling
    - Bounded memory cache
    - UI-safe signal delivery
    """

    future_done = pyqtSignal(str, object)  # url, future

    def __init__(
        self,
        *,
        max_workers: int = 4,
        memory_cache_limit: int = 256,
        timeout: int = 30,
        fetch: Optional[Fetcher] = None,
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        self._executor = ThreadPoolExecutor(
            max_workers=max(1, int(max_workers)),
            thread_name_prefix="image-loader",
        )
        self._lock = threading.Lock()
        self._in_flight: Dict[str, List[ImageHandle]] = {}
        self._memory_cache: "OrderedDict[str, QImage]" = OrderedDict()
        self._memory_cache_limit = max(1, int(memory_cache_limit))
        self._timeout = timeout
        self._fetch = fetch or self._http_fetch
        self._session: Optional[requests.Session] = None
        self.future_done.connect(self._on_future_done)

    # --------------------------------------------------------

    def request(self, url: str) -> ImageHandle:
        """
        Entry point used by widgets.

        Always returns immediately with a handle; cache hits are delivered
        on the next event loop turn.
        """
        handle = ImageHandle(url)
        if not url:
            QTimer.singleShot(0, lambda: handle.failed.emit("Invalid URL"))
            return handle

        with self._lock:
            if url in self._memory_cache:
                self._memory_cache.move_to_end(url)
                img = self._memory_cache[url]
                QTimer.singleShot(0, lambda img=img: self._deliver(handle, img))
                return handle

            waiting = self._in_flight.get(url)
            if waiting is not None:
                # one fetch per url; every live handle gets the result
                waiting.append(handle)
                return handle

            self._in_flight[url] = [handle]

        logger.debug(f"Scheduling image load: {url}")
        future = self._executor.submit(self._load, url)
        future.add_done_callback(lambda f, url=url: self.future_done.emit(url, f))
        return handle

    def cached(self, url: str) -> Optional[QImage]:
        with self._lock:
            return self._memory_cache.get(url)

    def shutdown(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)
        if self._session is not None:
            self._session.close()
            self._session = None

    # --------------------------------------------------------

    @staticmethod
    def _deliver(handle: ImageHandle, img: QImage) -> None:
        if not handle.cancelled:
            handle.ready.emit(img)

    @staticmethod
    def _fail(handle: ImageHandle, err: str) -> None:
        if not handle.cancelled:
            handle.failed.emit(err)

    def _on_future_done(self, url: str, future) -> None:
        with self._lock:
            handles = self._in_flight.pop(url, [])
        if not handles or future.cancelled():
            return

        try:
            img = future.result()
        except Exception as e:
            logger.warning(f"Image load failed for {url}: {e}")
            for handle in handles:
                self._fail(handle, str(e))
            return

        self._store_in_memory(url, img)
        for handle in handles:
            self._deliver(handle, img)

    def _store_in_memory(self, url: str, img: QImage) -> None:
        with self._lock:
            self._memory_cache[url] = img
            self._memory_cache.move_to_end(url)
            while len(self._memory_cache) > self._memory_cache_limit:
                self._memory_cache.popitem(last=False)

    def _load(self, url: str) -> QImage:
        """Runs in worker thread."""
        data = self._fetch(url)
        img = QImage.fromData(data)
        if img.isNull():
            raise RuntimeError("Unsupported or corrupt image data")
        return img

    def _http_fetch(self, url: str) -> bytes:
        if self._session is None:
            client = get_http_client()
            if client is not None:
                self._session = client.create_sync_session(headers=MEDIA_HEADERS)
            else:
                self._session = requests.Session()
                self._session.headers.update(MEDIA_HEADERS)
        resp = self._session.get(url, timeout=self._timeout)
        if not resp.ok:
            raise RuntimeError(f"HTTP {resp.status_code}")
        return resp.content


_image_loader: Optional[ImageLoader] = None


def get_image_loader() -> ImageLoader:
    """Get or create the shared image loader (main thread only)."""
    global _image_loader
    if _image_loader is None:
        _image_loader = ImageLoader()
    return _image_loader


def set_image_loader(loader: Optional[ImageLoader]) -> None:
    global _image_loader
    _image_loader = loader
