"""Decay factor — trust in the computed score versus the neutral midpoint.

Venues without recent chatter drift toward 5.0 instead of keeping an old
score forever.
"""
from __future__ import annotations

from datetime import datetime, timedelta

from livescore.core.timeutil import age_since, parse_timestamp

DECAY_BUCKETS: tuple[tuple[timedelta, float], ...] = (
    (timedelta(days=14), 1.0),
    (timedelta(days=30), 0.7),
    (timedelta(days=60), 0.4),
)
FLOOR_DECAY = 0.1
NO_SIGNAL_DECAY = 0.0


def decay_factor(last_signal_at: datetime | str | None, now: datetime) -> float:
    """Return 1.0 (no decay) down to 0.0 (fully neutral) by days since the last signal."""
    moment = parse_timestamp(last_signal_at)
    if moment is None:
        return NO_SIGNAL_DECAY

    age = age_since(moment, now)
    for bound, factor in DECAY_BUCKETS:
        if age < bound:
            return factor
    return FLOOR_DECAY
