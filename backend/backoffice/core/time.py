from __future__ import annotations

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Naive UTC timestamp, the form every table column stores."""
    return datetime.now(UTC).replace(tzinfo=None)
