from __future__ import annotations

import asyncio

from PyQt6.QtCore import QThread, pyqtSignal

from memories_bed.core.download_manager import DownloadManager
from memories_bed.core.dto import MediaItem


class DownloadWorker(QThread):
    """
    Runs one DownloadManager.download_media call on its own event loop.

    Signals:
        progress: (downloaded_bytes, total_bytes)
        completed: (saved_path)
        failed: (error_string)
    """

    progress = pyqtSignal(int, int)
    completed = pyqtSignal(str)
    failed = pyqtSignal(str)

    def __init__(self, download_manager: DownloadManager, item: MediaItem, title: str, index: int):
        super().__init__()
        self._dm = download_manager
        self._item = item
        self._title = title
        self._index = index

    def run(self) -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        try:
            path = loop.run_until_complete(self._download())
            self.completed.emit(str(path))
        except Exception as e:
            self.failed.emit(str(e))
        finally:
            loop.close()

    async def _download(self):
        async with self._dm:
            return await self._dm.download_media(
                self._item,
                self._title,
                self._index,
                progress_callback=lambda done, total: self.progress.emit(done, total),
            )
