"""Token Service.

Opaque token generation and expiry checks shared by parent invitations
and shared report links.
"""

import uuid
from datetime import datetime, timedelta, timezone


def generate_token() -> str:
    """Return a random 32-character lowercase hex token (no separators)."""
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime | str) -> datetime:
    """Parse/normalize a timestamp to an aware UTC datetime.

    SQLite returns naive datetimes for ``DateTime(timezone=True)``
    columns; those are stored as UTC.
    """
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def calculate_expires_at(days: int = 7, now: datetime | None = None) -> datetime:
    """Return ``now`` (UTC) plus ``days`` days."""
    return (now or utcnow()) + timedelta(days=days)


def is_token_expired(expires_at: datetime | str, now: datetime | None = None) -> bool:
    return as_utc(expires_at) < (now or utcnow())


def is_token_used(one_time: bool, accessed_at: datetime | None) -> bool:
    """A one-time token counts as used once its first access was stamped."""
    return one_time and accessed_at is not None
