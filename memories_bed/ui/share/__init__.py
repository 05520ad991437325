"""Sharing: public link and QR code."""

from .qr_dialog import ShareDialog

__all__ = ['ShareDialog']
