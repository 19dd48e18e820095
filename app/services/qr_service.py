"""
QR encoding of verification links (segno, pure Python, no imaging library needed).
Failures surface as EncodingError so callers can keep the registration and report the image separately.
"""

import io
import segno
from app.config import settings
from app.exceptions import EncodingError
from app.utils.logger import get_logger

logger = get_logger(__name__)


def _make(link: str):
    if not link:
        raise EncodingError("Cannot encode an empty verification link")
    try:
        return segno.make(link, error="m", micro=False)
    except ValueError as e:   # includes segno.DataOverflowError
        logger.error(f"[QR] Encoding failed for {link!r}: {e}")
        raise EncodingError(f"QR encoding failed: {e}") from e


def encode_png(link: str) -> bytes:
    """Return the QR code for `link` as PNG bytes."""
    qr = _make(link)
    buff = io.BytesIO()
    qr.save(buff, kind="png", scale=settings.QR_SCALE, border=settings.QR_BORDER)
    return buff.getvalue()


def encode_data_url(link: str) -> str:
    """Return the QR code for `link` as a `data:image/png;base64,...` URL."""
    qr = _make(link)
    return qr.png_data_uri(scale=settings.QR_SCALE, border=settings.QR_BORDER)
