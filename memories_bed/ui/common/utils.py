"""
Text formatting helpers shared by the viewer widgets.
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional


def format_date(value: Optional[str], fmt: str = "%B %d, %Y") -> str:
    """
    Format an ISO timestamp from the backend for display.

    Examples:
        >>> format_date("2024-03-05T10:20:00+00:00")
        "March 05, 2024"
        >>> format_date(None)
        ""
    """
    if not value:
        return ""
    cleaned = str(value).strip()
    date_str = cleaned.split("T")[0].strip()
    try:
        return datetime.fromisoformat(date_str).strftime(fmt)
    except ValueError:
        return date_str


def pluralize(count: int, singular: str, plural: Optional[str] = None) -> str:
    """
    Examples:
        >>> pluralize(1, "item")
        "1 item"
        >>> pluralize(3, "view")
        "3 views"
    """
    word = singular if count == 1 else (plural or f"{singular}s")
    return f"{count} {word}"
