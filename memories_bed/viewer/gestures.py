"""Horizontal swipe recognition for the lightbox."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional
import logging

logger = logging.getLogger(__name__)

DEAD_ZONE_PX = 10.0
MIN_SWIPE_PX = 50.0
MAX_FADE = 0.5


class SwipeOutcome(str, Enum):
    NEXT = "next"
    PREV = "prev"
    CANCEL = "cancel"


@dataclass
class GestureState:
    start_x: float
    start_y: float
    current_x: Optional[float] = None
    current_y: Optional[float] = None
    is_dragging: bool = False
    offset: float = 0.0


class SwipeRecognizer:
    """
    One gesture at a time: touch_start -> touch_move* -> touch_end.

    touch_end always clears the gesture, so the next touch_start begins
    from a clean slate whatever the previous outcome was.
    """

    def __init__(self, dead_zone: float = DEAD_ZONE_PX, min_swipe: float = MIN_SWIPE_PX):
        self.dead_zone = dead_zone
        self.min_swipe = min_swipe
        self.gesture: Optional[GestureState] = None

    @property
    def active(self) -> bool:
        return self.gesture is not None

    @property
    def is_dragging(self) -> bool:
        return self.gesture is not None and self.gesture.is_dragging

    @property
    def offset(self) -> float:
        return self.gesture.offset if self.gesture is not None else 0.0

    def touch_start(self, x: float, y: float) -> None:
        self.gesture = GestureState(start_x=x, start_y=y)

    def touch_move(self, x: float, y: float) -> bool:
        """Track the pointer. Returns True once the gesture is a horizontal drag."""
        g = self.gesture
        if g is None:
            return False
        g.current_x = x
        g.current_y = y
        delta_x = x - g.start_x
        delta_y = abs(y - g.start_y)
        if not g.is_dragging and abs(delta_x) > delta_y and abs(delta_x) > self.dead_zone:
            g.is_dragging = True
        if g.is_dragging:
            g.offset = delta_x
        return g.is_dragging

    def touch_end(self, x: float, y: float) -> SwipeOutcome:
        g = self.gesture
        self.gesture = None
        if g is None:
            return SwipeOutcome.CANCEL
        # positive means the finger travelled left
        delta_x = g.start_x - x
        delta_y = abs(y - g.start_y)
        if abs(delta_x) > delta_y and abs(delta_x) > self.min_swipe:
            outcome = SwipeOutcome.NEXT if delta_x > 0 else SwipeOutcome.PREV
        else:
            outcome = SwipeOutcome.CANCEL
        logger.debug(f"Swipe resolved: dx={delta_x:.1f} dy={delta_y:.1f} -> {outcome.value}")
        return outcome

    def cancel(self) -> None:
        self.gesture = None


def feedback_opacity(offset: float, width: float) -> float:
    """Opacity of the media while it is being dragged by `offset` px."""
    if width <= 0:
        return 1.0
    return 1.0 - min(abs(offset) / width, 1.0) * MAX_FADE
