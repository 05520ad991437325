"""
Video player components.

video_player imports python-mpv, which needs libmpv at import time; it is
imported by the lightbox only when a video is opened.
"""

from .player_controls import MPVSignals, ProgressSlider

__all__ = ['MPVSignals', 'ProgressSlider']
