"""Freshness weighting — how much a single signal counts given its age."""
from __future__ import annotations

from datetime import datetime, timedelta

from livescore.core.timeutil import age_since, parse_timestamp

# (exclusive upper age bound, weight), checked in order
FRESHNESS_BUCKETS: tuple[tuple[timedelta, float], ...] = (
    (timedelta(hours=24), 2.0),
    (timedelta(days=7), 1.5),
    (timedelta(days=14), 1.0),
    (timedelta(days=30), 0.5),
)
STALE_WEIGHT = 0.1


def freshness_weight(observed_at: datetime | str | None, now: datetime) -> float:
    """Weight for a signal observed at `observed_at`.

    Missing or unparseable timestamps get the floor weight; future
    timestamps count as brand new.
    """
    moment = parse_timestamp(observed_at)
    if moment is None:
        return STALE_WEIGHT

    age = age_since(moment, now)
    for bound, weight in FRESHNESS_BUCKETS:
        if age < bound:
            return weight
    return STALE_WEIGHT
