"""
UTC timestamp helpers.

Every timestamp written by the exporter is UTC and ISO-8601 with a ``Z``
suffix, e.g. ``2026-02-24T15:00:00.123456Z``.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Return the current UTC datetime with timezone info.

    Prefer this over ``datetime.utcnow()`` (which returns naive datetimes).
    """
    return datetime.now(tz=timezone.utc)


def isoformat_utc(value: Optional[datetime] = None) -> str:
    """Format ``value`` (default: now) as an ISO-8601 UTC string.

    Naive datetimes are assumed to already be UTC.

    Args:
        value: Datetime to format. ``None`` → :func:`utcnow`.

    Returns:
        String such as ``"2026-02-24T15:00:00.000000Z"``.
    """
    if value is None:
        value = utcnow()
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="microseconds").replace("+00:00", "Z")
