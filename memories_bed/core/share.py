"""
Short codes, public viewer URLs and QR codes.

Every gallery is addressed by a 6 character code; the public route is
{base}/view/{code} and QR codes encode that URL verbatim.
"""
from __future__ import annotations

import io
import re
import secrets
import string
from typing import Optional
from urllib.parse import urlparse
import logging

import qrcode
from qrcode.constants import ERROR_CORRECT_M

logger = logging.getLogger(__name__)

CODE_LENGTH = 6
CODE_ALPHABET = string.ascii_uppercase + string.digits
DEFAULT_BASE_URL = "http://localhost:3000"
VIEW_SEGMENT = "view"

QR_SIZE = 256
QR_BORDER = 2
QR_DARK = "#667eea"
QR_LIGHT = "#ffffff"

_CODE_RE = re.compile(rf"^[A-Z0-9]{{{CODE_LENGTH}}}$")


def generate_memory_code() -> str:
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))


def is_valid_code(code: Optional[str]) -> bool:
    return bool(code) and _CODE_RE.match(code) is not None


def public_url(code: str, base_url: Optional[str] = None) -> str:
    base = (base_url or DEFAULT_BASE_URL).rstrip("/")
    return f"{base}/{VIEW_SEGMENT}/{code}"


def extract_code_from_url(url: str) -> Optional[str]:
    """Path segment following /view/, upper-cased, or None."""
    if not url:
        return None
    try:
        path = urlparse(url.strip()).path
    except ValueError:
        return None
    parts = [p for p in path.split("/") if p]
    try:
        idx = parts.index(VIEW_SEGMENT)
    except ValueError:
        return None
    if idx + 1 >= len(parts):
        return None
    return parts[idx + 1].upper()


def normalize_code_input(text: str) -> Optional[str]:
    """Accept a bare code or a /view/ URL; returns a valid code or None."""
    if not text:
        return None
    candidate = text.strip()
    if "/" in candidate:
        candidate = extract_code_from_url(candidate) or ""
    candidate = candidate.upper()
    return candidate if is_valid_code(candidate) else None


def generate_qr_png(
    url: str,
    *,
    size: int = QR_SIZE,
    border: int = QR_BORDER,
    dark: str = QR_DARK,
    light: str = QR_LIGHT,
) -> bytes:
    """Encode `url` as a PNG QR code roughly `size` pixels wide."""
    qr = qrcode.QRCode(error_correction=ERROR_CORRECT_M, border=border)
    qr.add_data(url)
    qr.make(fit=True)
    # box size chosen after fitting so the image lands close to `size`
    qr.box_size = max(1, size // (qr.modules_count + 2 * border))
    image = qr.make_image(fill_color=dark, back_color=light)
    buf = io.BytesIO()
    image.save(buf)
    logger.debug(f"QR generated for {url} ({qr.modules_count} modules)")
    return buf.getvalue()
