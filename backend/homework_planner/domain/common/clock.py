"""Time and id helpers shared by the domain modules."""
from __future__ import annotations
import uuid
from datetime import date, datetime, time, timezone
from typing import Any, Optional


def utcnow() -> datetime:
    # millisecond precision, the resolution of the stored format
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def new_id() -> str:
    return str(uuid.uuid4())


def parse_datetime(value: Any) -> Optional[datetime]:
    """
    Parse an ISO-8601 string (or date/datetime) into an aware UTC datetime.
    Naive values are taken as UTC; a bare date means midnight. Returns None when
    the value is empty or unparseable.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime.combine(value, time.min)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z") or text.endswith("z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_datetime(value: Optional[datetime]) -> Optional[str]:
    """Serialize as e.g. 2024-01-01T00:00:00.000Z."""
    if value is None:
        return None
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
