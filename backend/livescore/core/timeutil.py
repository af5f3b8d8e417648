"""Timestamp helpers shared by the scoring functions."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value: datetime | str | None) -> datetime | None:
    """Coerce a datetime or ISO-8601 string to an aware UTC datetime.

    Naive values are taken as UTC. Anything that cannot be parsed yields
    `None`, which callers treat as maximally stale.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        raw = value.strip()
        if not raw:
            return None
        try:
            dt = datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def age_since(moment: datetime, now: datetime) -> timedelta:
    """Elapsed time from `moment` to `now`, clamped at zero for future moments."""
    delta = parse_timestamp(now) - moment
    if delta < timedelta(0):
        return timedelta(0)
    return delta
