"""
Lightbox state machine: Closed | Open(index).

Each transition into Open builds a brand new per-item viewer (ImageView or
VideoView), so zoom / playback state never carries over between items.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Union
import logging

from memories_bed.core.dto.media import MediaItem
from memories_bed.viewer.image_transform import ImageViewState
from memories_bed.viewer.playback import PlaybackState

logger = logging.getLogger(__name__)

KEY_PREV = "ArrowLeft"
KEY_NEXT = "ArrowRight"
KEY_CLOSE = "Escape"


@dataclass
class ImageView:
    item: MediaItem
    view: ImageViewState = field(default_factory=ImageViewState)
    kind: str = field(default="image", init=False)


@dataclass
class VideoView:
    item: MediaItem
    playback: PlaybackState = field(default_factory=PlaybackState)
    kind: str = field(default="video", init=False)


ItemViewer = Union[ImageView, VideoView]


def viewer_for(item: MediaItem, *, volume: Optional[float] = None) -> ItemViewer:
    """Fresh viewer state for `item`. `volume` seeds a video's remembered level."""
    if item.is_video:
        playback = PlaybackState()
        if volume is not None:
            playback.volume = max(0.0, min(1.0, float(volume)))
            playback.is_muted = playback.volume == 0
        return VideoView(item=item, playback=playback)
    return ImageView(item=item)


class LightboxController:
    """
    Owns the open item of a filtered media sequence.

    Listeners receive the controller after every transition; `index is None`
    means Closed.
    """

    def __init__(
        self,
        items: Sequence[MediaItem] = (),
        *,
        volume_provider: Optional[Callable[[], float]] = None,
    ):
        self._items: List[MediaItem] = list(items)
        self._index: Optional[int] = None
        self._viewer: Optional[ItemViewer] = None
        self._volume_provider = volume_provider
        self._listeners: List[Callable[["LightboxController"], None]] = []

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def add_listener(self, callback: Callable[["LightboxController"], None]) -> None:
        self._listeners.append(callback)

    def remove_listener(self, callback: Callable[["LightboxController"], None]) -> None:
        try:
            self._listeners.remove(callback)
        except ValueError:
            pass

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def items(self) -> List[MediaItem]:
        return list(self._items)

    @property
    def count(self) -> int:
        return len(self._items)

    @property
    def is_open(self) -> bool:
        return self._index is not None

    @property
    def index(self) -> Optional[int]:
        return self._index

    @property
    def viewer(self) -> Optional[ItemViewer]:
        return self._viewer

    @property
    def current_item(self) -> Optional[MediaItem]:
        if self._index is None:
            return None
        return self._items[self._index]

    @property
    def can_navigate(self) -> bool:
        return len(self._items) > 1

    @property
    def counter_text(self) -> str:
        if self._index is None:
            return ""
        return f"{self._index + 1} of {len(self._items)}"

    def set_items(self, items: Sequence[MediaItem]) -> None:
        """Replace the sequence; an open lightbox closes because its index is stale."""
        self._items = list(items)
        if self._index is not None:
            self.close()

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def open(self, index: int) -> ItemViewer:
        if not 0 <= index < len(self._items):
            raise IndexError(f"lightbox index {index} out of range for {len(self._items)} items")
        return self._enter(index)

    def jump(self, index: int) -> bool:
        """Dot-indicator navigation. Out-of-range or current index is a no-op."""
        if self._index is None or index == self._index:
            return False
        if not 0 <= index < len(self._items):
            return False
        self._enter(index)
        return True

    def next(self) -> bool:
        if self._index is None or not self.can_navigate:
            return False
        self._enter((self._index + 1) % len(self._items))
        return True

    def prev(self) -> bool:
        if self._index is None or not self.can_navigate:
            return False
        self._enter((self._index - 1) % len(self._items))
        return True

    def close(self) -> bool:
        if self._index is None:
            return False
        self._index = None
        self._viewer = None
        self._notify()
        return True

    def handle_key(self, key: str) -> bool:
        """Keyboard bindings, only while open. Returns True if consumed."""
        if self._index is None:
            return False
        if key == KEY_PREV:
            self.prev()
            return True
        if key == KEY_NEXT:
            self.next()
            return True
        if key == KEY_CLOSE:
            self.close()
            return True
        return False

    def background_clicked(self, gesture_active: bool = False) -> bool:
        if gesture_active:
            return False
        return self.close()

    def _enter(self, index: int) -> ItemViewer:
        item = self._items[index]
        volume = None
        if item.is_video and self._volume_provider is not None:
            try:
                volume = self._volume_provider()
            except Exception as e:
                logger.debug(f"Volume provider failed: {e}")
        self._index = index
        self._viewer = viewer_for(item, volume=volume)
        logger.debug(f"Lightbox open at {index} ({item.type} {item.id})")
        self._notify()
        return self._viewer

    def _notify(self) -> None:
        for callback in list(self._listeners):
            callback(self)
