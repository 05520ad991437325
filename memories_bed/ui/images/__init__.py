"""Image loading and display widgets."""

from .image_loader import ImageHandle, ImageLoader, get_image_loader, set_image_loader
from .zoomable_image import ImageViewerWidget, ZoomableImageView

__all__ = [
    'ImageHandle',
    'ImageLoader',
    'ImageViewerWidget',
    'ZoomableImageView',
    'get_image_loader',
    'set_image_loader',
]
