"""
Timestamp helpers shared by the models.
"""
from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes read back from the database."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def isoformat(value: Optional[datetime]) -> Optional[str]:
    """ISO-8601 rendering used by every to_dict()."""
    value = ensure_utc(value)
    return value.isoformat() if value else None


def parse_datetime(value) -> Optional[datetime]:
    """
    Parse an API timestamp into an aware UTC datetime.

    Date-only strings (YYYY-MM-DD) are pinned to 12:00 UTC so they land on
    the same calendar day in every timezone.

    Raises:
        ValueError: If the value cannot be parsed
    """
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    text = str(value).strip()
    if len(text) == 10 and text[4] == '-' and text[7] == '-':
        text = f"{text}T12:00:00+00:00"
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    return ensure_utc(datetime.fromisoformat(text))
