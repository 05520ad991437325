"""
Download manager for saving gallery media to disk
"""
import aiohttp
import asyncio
import logging
from pathlib import Path
from typing import Optional, Callable

from memories_bed.core.dto import MediaItem
from memories_bed.core.http_client import MEDIA_HEADERS, get_http_client
from memories_bed.utils.file_utils import sanitize_filename

logger = logging.getLogger(__name__)


class DownloadError(RuntimeError):
    """A media file could not be fetched or written."""


def download_filename(title: str, index: int, item: MediaItem) -> str:
    """`{title}-{index+1}.jpg` or `.mp4`, safe for the local filesystem."""
    ext = "mp4" if item.is_video else "jpg"
    return f"{sanitize_filename(title)}-{index + 1}.{ext}"


class DownloadManager:
    """
    Fetches single media files with aiohttp and writes them atomically
    """

    def __init__(self, download_dir: Path, max_concurrent: int = 2):
        self.download_dir = Path(download_dir)
        self.max_concurrent = max_concurrent
        self.session: Optional[aiohttp.ClientSession] = None
        self._semaphore: Optional[asyncio.Semaphore] = None
        self._chunk_size = 64 * 1024

    async def __aenter__(self):
        await self.create_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close_session()

    async def create_session(self):
        if not self.session:
            http_client = get_http_client()
            if http_client:
                self.session = await http_client.create_async_session(
                    headers=MEDIA_HEADERS,
                    total_timeout=None,  # No total timeout for large videos
                )
            else:
                timeout = aiohttp.ClientTimeout(total=None, sock_read=60)
                self.session = aiohttp.ClientSession(
                    timeout=timeout,
                    headers=MEDIA_HEADERS,
                )
        # bound to the loop that runs the downloads
        self._semaphore = asyncio.Semaphore(self.max_concurrent)

    async def close_session(self):
        if self.session:
            await self.session.close()
            self.session = None

    def destination_for(self, title: str, index: int, item: MediaItem) -> Path:
        return self.download_dir / download_filename(title, index, item)

    async def download_file(self, url: str, destination: Path,
                            progress_callback: Optional[Callable] = None) -> Path:
        """
        Stream `url` into `destination` through a `.part` file that is renamed
        into place only once complete. `progress_callback(done, total)` fires per
        chunk when the server sends a length. Raises DownloadError.
        """
        if not self.session:
            await self.create_session()

        partial = destination.with_name(destination.name + ".part")
        async with self._semaphore:
            try:
                destination.parent.mkdir(parents=True, exist_ok=True)
                logger.info(f"Downloading: {url} -> {destination}")

                async with self.session.get(url) as response:
                    if response.status != 200:
                        raise DownloadError(f"HTTP {response.status} for {url}")

                    try:
                        total_size = int(response.headers.get('content-length', '0'))
                    except (ValueError, TypeError):
                        total_size = 0

                    downloaded = 0
                    with open(partial, 'wb') as f:
                        async for chunk in response.content.iter_chunked(self._chunk_size):
                            f.write(chunk)
                            downloaded += len(chunk)
                            if progress_callback and total_size > 0:
                                progress_callback(downloaded, total_size)

                partial.replace(destination)
                logger.info(f"Download complete: {destination} ({downloaded} bytes)")
                return destination

            except DownloadError:
                partial.unlink(missing_ok=True)
                raise
            except aiohttp.ClientError as e:
                partial.unlink(missing_ok=True)
                raise DownloadError(f"Network error: {e}") from e
            except OSError as e:
                partial.unlink(missing_ok=True)
                raise DownloadError(f"Could not write {destination}: {e}") from e

    async def download_media(self, item: MediaItem, title: str, index: int,
                             progress_callback: Optional[Callable] = None) -> Path:
        """Save a gallery item as `{title}-{index+1}.ext` in the download directory."""
        return await self.download_file(
            item.url,
            self.destination_for(title, index, item),
            progress_callback=progress_callback,
        )
