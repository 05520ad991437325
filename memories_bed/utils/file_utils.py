import logging
import re
import sys

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')

# DWMWA_USE_IMMERSIVE_DARK_MODE: 20 from Windows 10 20H1, 19 on 1809-1909
_DARK_MODE_ATTRIBUTES = (20, 19)


def sanitize_filename(name: str, fallback: str = "memory") -> str:
    """Strip characters Windows and POSIX filesystems reject."""
    cleaned = _UNSAFE_CHARS.sub("_", name or "").strip().strip(".")
    cleaned = re.sub(r"\s+", " ", cleaned)
    return cleaned[:120] or fallback


def apply_windows_dark_mode(widget):
    """Dark title bar on Windows 10 1809+; a no-op elsewhere."""
    if sys.platform != "win32":
        return

    import ctypes
    try:
        hwnd = int(widget.winId())
        set_attribute = ctypes.windll.dwmapi.DwmSetWindowAttribute
        enabled = ctypes.c_int(1)
        for attribute in _DARK_MODE_ATTRIBUTES:
            if set_attribute(hwnd, attribute, ctypes.byref(enabled), ctypes.sizeof(enabled)) == 0:
                return
    except (AttributeError, OSError) as e:
        logger.debug(f"Dark title bar unavailable: {e}")
