"""
Video transport control logic.

VideoTransport wraps one playable media backend (mpv in the app, a fake in
tests). Commands go to the backend; PlaybackState only changes when the
backend reports back through the on_* event methods.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Protocol
import logging
import math

logger = logging.getLogger(__name__)

CONTROLS_HIDE_MS = 3000
SKIP_SECONDS = 10.0


class MediaBackend(Protocol):
    def play(self) -> None: ...
    def pause(self) -> None: ...
    def seek(self, seconds: float) -> None: ...
    def set_volume(self, volume: float) -> None: ...
    def set_muted(self, muted: bool) -> None: ...


class FullscreenHost(Protocol):
    def request_fullscreen(self) -> None: ...
    def exit_fullscreen(self) -> None: ...


class HideTimer(Protocol):
    def start(self, msec: int) -> None: ...
    def stop(self) -> None: ...


@dataclass
class PlaybackState:
    is_playing: bool = False
    current_time: float = 0.0
    duration: float = 0.0
    volume: float = 1.0
    is_muted: bool = False
    is_fullscreen: bool = False
    controls_visible: bool = True
    load_failed: bool = False

    @property
    def progress(self) -> float:
        if self.duration <= 0:
            return 0.0
        return self.current_time / self.duration


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def format_time(seconds: float) -> str:
    """m:ss, or h:mm:ss from one hour up."""
    if not seconds or not math.isfinite(seconds) or seconds < 0:
        seconds = 0
    total = int(seconds)
    h, rem = divmod(total, 3600)
    m, s = divmod(rem, 60)
    return f"{h}:{m:02d}:{s:02d}" if h else f"{m}:{s:02d}"


class VideoTransport:
    """
    Transport operations for a single video.

    Args:
        backend: playable element receiving commands
        state: PlaybackState to mirror events into (fresh one if omitted)
        timer: single-shot timer used for the controls auto-hide
        fullscreen: host that enters / leaves fullscreen
        on_change: called with the state after every mutation
    """

    def __init__(
        self,
        backend: MediaBackend,
        *,
        state: Optional[PlaybackState] = None,
        timer: Optional[HideTimer] = None,
        fullscreen: Optional[FullscreenHost] = None,
        on_change: Optional[Callable[[PlaybackState], None]] = None,
    ):
        self._backend = backend
        self.state = state or PlaybackState()
        self._timer = timer
        self._fullscreen = fullscreen
        self._on_change = on_change
        self._last_volume = self.state.volume if self.state.volume > 0 else 1.0
        self._closed = False

    # ------------------------------------------------------------------
    # Derived
    # ------------------------------------------------------------------

    @property
    def can_seek(self) -> bool:
        return self.state.duration > 0 and not self.state.load_failed

    @property
    def last_volume(self) -> float:
        return self._last_volume

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def toggle_play(self) -> None:
        if self._closed or self.state.load_failed:
            return
        if self.state.is_playing:
            self._backend.pause()
        else:
            self._backend.play()

    def seek_to(self, fraction: float) -> Optional[float]:
        """Seek to a fraction of the duration. No-op while duration is unknown."""
        if self._closed or not self.can_seek:
            return None
        target = _clamp(float(fraction), 0.0, 1.0) * self.state.duration
        self._backend.seek(target)
        self.state.current_time = target
        self._changed()
        return target

    def skip(self, delta_seconds: float) -> Optional[float]:
        if self._closed or not self.can_seek:
            return None
        target = _clamp(self.state.current_time + delta_seconds, 0.0, self.state.duration)
        self._backend.seek(target)
        self.state.current_time = target
        self._changed()
        return target

    def skip_forward(self) -> Optional[float]:
        return self.skip(SKIP_SECONDS)

    def skip_back(self) -> Optional[float]:
        return self.skip(-SKIP_SECONDS)

    def set_volume(self, volume: float) -> None:
        if self._closed:
            return
        volume = _clamp(float(volume), 0.0, 1.0)
        self.state.volume = volume
        self.state.is_muted = volume == 0
        if volume > 0:
            self._last_volume = volume
        self._backend.set_volume(volume)
        self._backend.set_muted(self.state.is_muted)
        self._changed()

    def toggle_mute(self) -> None:
        if self._closed:
            return
        if self.state.is_muted:
            self.state.is_muted = False
            if self.state.volume == 0:
                self.state.volume = self._last_volume
                self._backend.set_volume(self.state.volume)
        else:
            self.state.is_muted = True
        self._backend.set_muted(self.state.is_muted)
        self._changed()

    def toggle_fullscreen(self) -> None:
        """Ask the host to switch; is_fullscreen follows on_fullscreen_changed."""
        if self._closed or self._fullscreen is None:
            return
        try:
            if self.state.is_fullscreen:
                self._fullscreen.exit_fullscreen()
            else:
                self._fullscreen.request_fullscreen()
        except Exception as e:
            logger.debug(f"Fullscreen request rejected: {e}")

    def pointer_activity(self) -> None:
        if self._closed:
            return
        self.state.controls_visible = True
        self._restart_hide_timer()
        self._changed()

    # ------------------------------------------------------------------
    # Backend events
    # ------------------------------------------------------------------

    def on_loaded_metadata(self, duration: Optional[float]) -> None:
        if self._closed:
            return
        try:
            value = float(duration) if duration is not None else 0.0
        except (TypeError, ValueError):
            value = 0.0
        if not math.isfinite(value) or value < 0:
            value = 0.0
        self.state.duration = value
        self.state.current_time = _clamp(self.state.current_time, 0.0, value)
        self._changed()

    def on_time_update(self, seconds: Optional[float]) -> None:
        if self._closed or seconds is None:
            return
        try:
            value = float(seconds)
        except (TypeError, ValueError):
            return
        if not math.isfinite(value):
            return
        self.state.current_time = _clamp(value, 0.0, self.state.duration)
        self._changed()

    def on_play(self) -> None:
        if self._closed:
            return
        self.state.is_playing = True
        self._restart_hide_timer()
        self._changed()

    def on_pause(self) -> None:
        if self._closed:
            return
        self.state.is_playing = False
        self.state.controls_visible = True
        self._stop_timer()
        self._changed()

    def on_ended(self) -> None:
        self.on_pause()

    def on_error(self, message: str = "") -> None:
        if self._closed:
            return
        logger.warning(f"Video failed to load: {message}")
        self.state.load_failed = True
        self.state.is_playing = False
        self.state.duration = 0.0
        self.state.current_time = 0.0
        self.state.controls_visible = True
        self._stop_timer()
        self._changed()

    def on_fullscreen_changed(self, active: bool) -> None:
        if self._closed:
            return
        self.state.is_fullscreen = bool(active)
        self._changed()

    def on_hide_timeout(self) -> None:
        if self._closed:
            return
        if self.state.is_playing:
            self.state.controls_visible = False
            self._changed()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def teardown(self) -> None:
        """Stop the hide timer and ignore any late backend events."""
        self._stop_timer()
        self._closed = True
        self._on_change = None

    def _restart_hide_timer(self) -> None:
        self._stop_timer()
        if self.state.is_playing and self._timer is not None:
            self._timer.start(CONTROLS_HIDE_MS)

    def _stop_timer(self) -> None:
        if self._timer is not None:
            self._timer.stop()

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change(self.state)
