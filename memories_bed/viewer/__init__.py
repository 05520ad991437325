"""
Viewer control logic.

Pure Python state machines behind the gallery grid, lightbox, image viewer,
video transport and swipe recognizer. Nothing here imports Qt; widgets in
memories_bed.ui translate events into these operations and render the state.
"""

from .gallery import MediaFilter, GallerySession, filter_media
from .gestures import GestureState, SwipeOutcome, SwipeRecognizer
from .image_transform import ImageTransform, ImageViewState, compose_transform
from .lightbox import ImageView, LightboxController, VideoView, viewer_for
from .playback import PlaybackState, VideoTransport

__all__ = [
    "MediaFilter",
    "GallerySession",
    "filter_media",
    "GestureState",
    "SwipeOutcome",
    "SwipeRecognizer",
    "ImageTransform",
    "ImageViewState",
    "compose_transform",
    "ImageView",
    "LightboxController",
    "VideoView",
    "viewer_for",
    "PlaybackState",
    "VideoTransport",
]
