"""Main viewer window."""

from .viewer_window import ViewerWindow

__all__ = ['ViewerWindow']
