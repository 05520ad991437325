"""
Zoom / pan / rotate state for a single open image.

The widget owns one ImageViewState per mounted image and renders
compose_transform() of it; the state is discarded when another item opens.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple
import logging

logger = logging.getLogger(__name__)

ZOOM_STEP = 1.2
MIN_ZOOM = 0.5
MAX_ZOOM = 5.0
ROTATION_STEP = 90

# Exact (cos, sin) for quarter turns, avoids float noise in the matrix
_QUARTER_TURNS = {
    0: (1.0, 0.0),
    90: (0.0, 1.0),
    180: (-1.0, 0.0),
    270: (0.0, -1.0),
}


@dataclass
class ImageTransform:
    zoom: float = 1.0
    x: float = 0.0
    y: float = 0.0
    rotation: int = 0

    @property
    def is_identity(self) -> bool:
        return self.zoom == 1.0 and self.x == 0.0 and self.y == 0.0 and self.rotation == 0

    @property
    def zoom_percent(self) -> int:
        return int(round(self.zoom * 100))


class ImageViewState:
    """Mutating operations over an ImageTransform."""

    def __init__(self, transform: Optional[ImageTransform] = None):
        self.transform = transform or ImageTransform()
        self._drag_offset: Optional[Tuple[float, float]] = None

    @property
    def dragging(self) -> bool:
        return self._drag_offset is not None

    @property
    def can_pan(self) -> bool:
        return self.transform.zoom > 1.0

    def zoom_in(self) -> float:
        self.transform.zoom = min(self.transform.zoom * ZOOM_STEP, MAX_ZOOM)
        return self.transform.zoom

    def zoom_out(self) -> float:
        self.transform.zoom = max(self.transform.zoom / ZOOM_STEP, MIN_ZOOM)
        return self.transform.zoom

    def rotate(self) -> int:
        self.transform.rotation = (self.transform.rotation + ROTATION_STEP) % 360
        return self.transform.rotation

    def reset(self) -> None:
        self.transform = ImageTransform()
        self._drag_offset = None

    def begin_drag(self, x: float, y: float) -> bool:
        """Start panning. Returns False when the image is not zoomed in."""
        if not self.can_pan:
            return False
        self._drag_offset = (x - self.transform.x, y - self.transform.y)
        return True

    def update_drag(self, x: float, y: float) -> bool:
        if self._drag_offset is None:
            return False
        ox, oy = self._drag_offset
        # Unconstrained free pan
        self.transform.x = x - ox
        self.transform.y = y - oy
        return True

    def end_drag(self) -> None:
        self._drag_offset = None


def compose_transform(
    transform: ImageTransform,
    origin: Tuple[float, float] = (0.0, 0.0),
) -> Tuple[float, float, float, float, float, float]:
    """
    Compose translate(position) -> scale(zoom) -> rotate(rotation) about `origin`.

    Returns (m11, m12, m21, m22, dx, dy) in Qt's convention, i.e.
        x' = m11 * x + m21 * y + dx
        y' = m12 * x + m22 * y + dy
    so the tuple can be passed straight to QTransform(...).
    """
    rotation = transform.rotation % 360
    if rotation not in _QUARTER_TURNS:
        raise ValueError(f"rotation must be a multiple of {ROTATION_STEP}: {transform.rotation}")
    cos, sin = _QUARTER_TURNS[rotation]
    z = transform.zoom
    cx, cy = origin

    m11 = z * cos
    m12 = z * sin
    m21 = -z * sin
    m22 = z * cos
    dx = cx + transform.x - (m11 * cx + m21 * cy)
    dy = cy + transform.y - (m12 * cx + m22 * cy)
    return (m11, m12, m21, m22, dx, dy)
