"""Score refresh worker.

Beat triggers `run_score_refresh` on a fixed interval; `run_venue_refresh`
recomputes one venue on demand (e.g. right after new reviews are stored).
"""
from __future__ import annotations

import asyncio
import logging

from livescore.celery_app import celery
from livescore.config import settings
from livescore.db import engine
from livescore.refresh_service import RefreshStats, ScoreRefresher, SignalCollector
from livescore.repository import SqlScoreSink, SqlSignalSource, SqlVenueSource

logger = logging.getLogger(__name__)


def build_refresher(
    *,
    batch_size: int | None = settings.REFRESH_BATCH_SIZE,
    stale_hours: float | None = settings.REFRESH_STALE_HOURS,
    time_budget_s: float | None = settings.REFRESH_TIME_BUDGET_S,
    concurrency: int = settings.REFRESH_CONCURRENCY,
    collector: SignalCollector | None = None,
) -> ScoreRefresher:
    """Wire the refresh cycle to the database collaborators."""
    return ScoreRefresher(
        SqlVenueSource(batch_size=batch_size, stale_hours=stale_hours),
        SqlSignalSource(),
        SqlScoreSink(),
        collector=collector,
        concurrency=concurrency,
        time_budget_s=time_budget_s,
    )


async def _run_refresh(refresher: ScoreRefresher) -> RefreshStats:
    try:
        return await refresher.run()
    finally:
        # Pooled connections are bound to this event loop.
        await engine.dispose()


async def _run_venue_refresh(refresher: ScoreRefresher, venue_id: str) -> float | None:
    try:
        return await refresher.refresh_venue(venue_id)
    finally:
        await engine.dispose()


@celery.task(name="livescore.workers.refresh.run_score_refresh")
def run_score_refresh() -> dict:
    """Recompute and persist the Live Score of every due venue."""
    stats = asyncio.run(_run_refresh(build_refresher()))
    return stats.as_dict()


@celery.task(name="livescore.workers.refresh.run_venue_refresh")
def run_venue_refresh(venue_id: str) -> float | None:
    score = asyncio.run(_run_venue_refresh(build_refresher(), venue_id))
    if score is None:
        logger.warning("Venue refresh for %s did not produce a score", venue_id)
    return score
