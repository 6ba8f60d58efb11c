"""General utility functions."""
import uuid
from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def new_id() -> str:
    """Generate a string primary key."""
    return str(uuid.uuid4())


def to_utc(dt: datetime) -> datetime:
    """Convert datetime to UTC timezone."""
    if dt.tzinfo is None:
        # Assume UTC if no timezone (SQLite drops tzinfo on read)
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def optional_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """``to_utc`` that passes ``None`` through."""
    if dt is None:
        return None
    return to_utc(dt)


def is_valid_id(value: str) -> bool:
    """Check that ``value`` is a canonical UUID string."""
    try:
        return str(uuid.UUID(value)) == value.lower()
    except (ValueError, AttributeError, TypeError):
        return False
