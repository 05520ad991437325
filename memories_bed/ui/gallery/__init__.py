"""Gallery grid, lightbox overlay and comments."""

from .comments_panel import CommentCard, CommentsPanel
from .gallery_grid import FilterBar, GalleryGridView, MediaThumbnail
from .lightbox import LightboxOverlay

__all__ = [
    'CommentCard',
    'CommentsPanel',
    'FilterBar',
    'GalleryGridView',
    'LightboxOverlay',
    'MediaThumbnail',
]
