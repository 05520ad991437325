"""Media filtering and the per-gallery viewing session."""
from __future__ import annotations

from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Sequence
import logging

from memories_bed.core.dto.media import MediaItem
from memories_bed.viewer.lightbox import LightboxController

logger = logging.getLogger(__name__)


class MediaFilter(str, Enum):
    ALL = "all"
    IMAGES = "images"
    VIDEOS = "videos"

    @classmethod
    def parse(cls, value: Optional[str]) -> "MediaFilter":
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.ALL


def _matches(item: MediaItem, media_filter: MediaFilter) -> bool:
    if media_filter is MediaFilter.IMAGES:
        return item.is_image
    if media_filter is MediaFilter.VIDEOS:
        return item.is_video
    return True


def filter_media(items: Iterable[MediaItem], media_filter: MediaFilter = MediaFilter.ALL) -> List[MediaItem]:
    """Order-preserving subsequence of `items` passing `media_filter`."""
    return [item for item in items if _matches(item, media_filter)]


def filter_counts(items: Sequence[MediaItem]) -> Dict[MediaFilter, int]:
    return {f: len(filter_media(items, f)) for f in MediaFilter}


class GallerySession:
    """
    Viewing state of one loaded gallery: the full media list, the active
    filter and the lightbox over the filtered list.
    """

    def __init__(
        self,
        media: Sequence[MediaItem] = (),
        media_filter: MediaFilter = MediaFilter.ALL,
        *,
        volume_provider: Optional[Callable[[], float]] = None,
    ):
        self._media: List[MediaItem] = list(media)
        self._filter = media_filter
        self.lightbox = LightboxController(
            filter_media(self._media, self._filter),
            volume_provider=volume_provider,
        )

    @property
    def filter(self) -> MediaFilter:
        return self._filter

    @property
    def filtered(self) -> List[MediaItem]:
        return self.lightbox.items

    @property
    def is_empty(self) -> bool:
        return self.lightbox.count == 0

    def counts(self) -> Dict[MediaFilter, int]:
        return filter_counts(self._media)

    def set_filter(self, media_filter: MediaFilter) -> bool:
        if media_filter == self._filter:
            return False
        self._filter = media_filter
        self.lightbox.set_items(filter_media(self._media, self._filter))
        logger.debug(f"Filter -> {media_filter.value}: {self.lightbox.count} items")
        return True

    def select(self, index: int):
        """Grid activation at `index` of the filtered sequence."""
        return self.lightbox.open(index)
