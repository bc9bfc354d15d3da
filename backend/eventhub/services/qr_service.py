"""
Attendance QR codes.

The organizer's code encodes the literal text ``eventId:<id>``. The scanning
student's client parses it and marks its own attendance; the code itself
carries no identity.
"""

import io

import qrcode
from qrcode.constants import ERROR_CORRECT_H

from eventhub.core.exceptions import ValidationError
from eventhub.core.logging_config import logger
from eventhub.services.event_service import MAX_EVENT_ID


QR_PREFIX = "eventId:"


def build_qr_payload(event_id: int) -> str:
    return f"{QR_PREFIX}{event_id}"


def parse_qr_payload(text: str) -> int:
    """
    Extract the event id from a scanned payload.

    Raises ValidationError unless the text is ``eventId:<positive int>``.
    """
    text = (text or "").strip()
    if not text.startswith(QR_PREFIX):
        raise ValidationError("Invalid QR code", field="qrText")

    raw_id = text[len(QR_PREFIX):].strip()
    if not (raw_id.isascii() and raw_id.isdigit()) or not 0 < int(raw_id) <= MAX_EVENT_ID:
        raise ValidationError("Invalid QR code", field="qrText")
    return int(raw_id)


def render_qr_png(payload: str, box_size: int = 10, border: int = 2) -> bytes:
    """Render ``payload`` as a PNG image (high error correction)"""
    qr = qrcode.QRCode(
        version=None,
        error_correction=ERROR_CORRECT_H,
        box_size=box_size,
        border=border,
    )
    qr.add_data(payload)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    logger.debug(f"Rendered QR code for {payload}")
    return buffer.getvalue()
