"""
Time Utilities
"""

from __future__ import annotations

from datetime import datetime, timezone

UTC = timezone.utc


def utc_now() -> datetime:
    """Return current UTC time (timezone-aware)."""
    return datetime.now(UTC)


def epoch_ms(dt: datetime | None = None) -> int:
    """Milliseconds since the Unix epoch, for `dt` or now."""
    return int((dt or utc_now()).timestamp() * 1000)
