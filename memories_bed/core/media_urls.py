"""
Cloudinary delivery URL rewriting.

Resized variants and video poster frames are requested by inserting
transformation segments into the canonical URL. No network round trip.
"""
import re

CLOUDINARY_HOST = "cloudinary.com"

UPLOAD_SEGMENT = "/upload/"
VIDEO_UPLOAD_SEGMENT = "/video/upload/"

THUMBNAIL_SIZE = (400, 300)
OPTIMIZED_SIZE = (800, 600)
LIGHTBOX_SIZE = (1600, 1200)

_VIDEO_EXT_RE = re.compile(r"\.(mp4|mov|avi|mkv|webm)$", re.IGNORECASE)


def is_transformable(url: str) -> bool:
    return bool(url) and CLOUDINARY_HOST in url


def _resize_params(width: int, height: int) -> str:
    return f"w_{int(width)},h_{int(height)},c_fill,q_auto:best,f_auto"


def optimized_image_url(url: str, width: int = OPTIMIZED_SIZE[0], height: int = OPTIMIZED_SIZE[1]) -> str:
    if not is_transformable(url):
        return url
    return url.replace(UPLOAD_SEGMENT, f"{UPLOAD_SEGMENT}{_resize_params(width, height)}/", 1)


def thumbnail_url(url: str) -> str:
    return optimized_image_url(url, *THUMBNAIL_SIZE)


def video_poster_url(url: str) -> str:
    """Still frame at t=0 as a jpg."""
    if not is_transformable(url):
        return url
    poster = url.replace(VIDEO_UPLOAD_SEGMENT, f"{VIDEO_UPLOAD_SEGMENT}so_0/", 1)
    return _VIDEO_EXT_RE.sub(".jpg", poster)


def grid_thumbnail_url(url: str, is_video: bool) -> str:
    """URL the gallery grid loads for an item."""
    if is_video:
        return video_poster_url(url)
    return thumbnail_url(url)
