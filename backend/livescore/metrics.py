"""Prometheus metrics for the score refresh cycle."""
from __future__ import annotations

from prometheus_client import Counter, Histogram


REFRESH_VENUES_TOTAL = Counter(
    "livescore_refresh_venues_total",
    "Venues handled by the refresh cycle, by outcome",
    ["outcome"],
)

REFRESH_DURATION_SECONDS = Histogram(
    "livescore_refresh_duration_seconds",
    "Wall time of a full refresh run",
    buckets=(0.5, 1, 2, 5, 10, 30, 60, 120, 300, 600),
)

VENUE_SCORE_OBS = Histogram(
    "livescore_venue_score",
    "Live Score distribution written by the refresh cycle",
    buckets=(0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10),
)

COLLECTOR_FAILURES_TOTAL = Counter(
    "livescore_collector_failures_total",
    "Signal collection failures (venue recomputed from stored signals)",
)
