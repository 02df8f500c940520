"""Helper utilities for the Europass builder."""

import base64
import binascii
import re
from datetime import datetime, timezone
from typing import List, Optional, Tuple

_ISO_MONTH = re.compile(r"^(\d{4})-(\d{2})(?:-\d{2})?$")
_DATA_URI = re.compile(r"^data:(?P<mime>[\w/+.-]+)?(?P<b64>;base64)?,(?P<data>.*)$", re.DOTALL)


def format_month_year(value: str) -> str:
    """'2021-03-15' or '2021-03' -> '03/2021'; anything else is returned unchanged."""
    if not value:
        return ""
    m = _ISO_MONTH.match(value.strip())
    if not m:
        return value
    return f"{m.group(2)}/{m.group(1)}"


def split_hobbies(hobbies: str) -> List[str]:
    """Split the comma-separated hobbies field, dropping blanks."""
    return [h.strip() for h in (hobbies or "").split(",") if h.strip()]


def sanitize_filename_part(text: str) -> str:
    """Whitespace runs become '_', every other non-alphanumeric character is dropped."""
    return re.sub(r"[^A-Za-z0-9_]", "", re.sub(r"\s+", "_", (text or "").strip()))


def format_last_saved(saved_at: Optional[datetime], now: Optional[datetime] = None) -> str:
    """Human label for the autosave marker: Never / Just now / N min ago / N hr ago / date."""
    if saved_at is None:
        return "Never"
    now = now or datetime.now(timezone.utc)
    minutes = int((now - saved_at).total_seconds() // 60)
    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{minutes} min ago"
    if minutes < 1440:
        return f"{minutes // 60} hr ago"
    return saved_at.strftime("%Y-%m-%d")


def encode_data_uri(data: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def decode_data_uri(uri: str) -> Optional[Tuple[str, bytes]]:
    """Return (mime_type, payload) for a base64 data URI, or None if it is not one."""
    m = _DATA_URI.match((uri or "").strip())
    if not m or not m.group("b64"):
        return None
    try:
        payload = base64.b64decode(m.group("data"), validate=True)
    except (binascii.Error, ValueError):
        return None
    return (m.group("mime") or "application/octet-stream", payload)
