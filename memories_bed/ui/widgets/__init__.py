"""Reusable UI widgets."""

from .notification_widgets import ToastNotification

__all__ = ['ToastNotification']
