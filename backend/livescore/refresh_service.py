"""Live Score refresh orchestration.

Recomputes the score of every active venue and persists it together with
a history point. Collaborators (venue listing, signal store, persistence
and an optional signal collector) are injected, so the same orchestration
runs against the database, in the Celery worker, or against in-memory fakes.
"""
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional, Protocol, Sequence

from livescore.core.timeutil import utc_now
from livescore.metrics import (
    COLLECTOR_FAILURES_TOTAL,
    REFRESH_DURATION_SECONDS,
    REFRESH_VENUES_TOTAL,
    VENUE_SCORE_OBS,
)
from livescore.schemas.signal import Signal
from livescore.scoring.live_score import calculate_live_score

logger = logging.getLogger(__name__)


class VenueSource(Protocol):
    async def list_venue_ids(self) -> Sequence[str]: ...


class SignalSource(Protocol):
    async def fetch_signals(self, venue_id: str) -> Sequence[Signal]: ...


class ScoreSink(Protocol):
    async def save_score(self, venue_id: str, score: float, computed_at: datetime) -> None:
        """Persist `score` as the venue's current value and append one history point."""
        ...


class SignalCollector(Protocol):
    async def collect(self, venue_id: str) -> None: ...


@dataclass
class RefreshStats:
    started_at: datetime
    attempted: int = 0
    refreshed: int = 0
    failed: int = 0
    skipped: int = 0
    duration_s: float = 0.0
    errors: List[str] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            "started_at": self.started_at.isoformat(),
            "attempted": self.attempted,
            "refreshed": self.refreshed,
            "failed": self.failed,
            "skipped": self.skipped,
            "duration_s": round(self.duration_s, 3),
            "errors": list(self.errors),
        }


class ScoreRefresher:
    """Runs one refresh cycle over the venues returned by `venues`."""

    def __init__(
        self,
        venues: VenueSource,
        signals: SignalSource,
        sink: ScoreSink,
        *,
        collector: Optional[SignalCollector] = None,
        clock: Callable[[], datetime] = utc_now,
        concurrency: int = 1,
        time_budget_s: float | None = None,
        monotonic: Callable[[], float] = time.monotonic,
    ):
        if concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        self._venues = venues
        self._signals = signals
        self._sink = sink
        self._collector = collector
        self._clock = clock
        self._concurrency = concurrency
        self._time_budget_s = time_budget_s
        self._monotonic = monotonic

    async def refresh_all(self) -> int:
        """Refresh every listed venue; returns how many were successfully updated."""
        stats = await self.run()
        return stats.refreshed

    async def run(self) -> RefreshStats:
        now = self._clock()
        stats = RefreshStats(started_at=now)
        started = self._monotonic()

        # A venue listed twice is still refreshed once per run.
        venue_ids = list(dict.fromkeys(await self._venues.list_venue_ids()))
        if self._collector is None:
            logger.info("No signal collector configured, recomputing from stored signals")
        logger.info("Score refresh starting for %s venues", len(venue_ids))

        semaphore = asyncio.Semaphore(self._concurrency)

        async def _guarded(venue_id: str) -> None:
            async with semaphore:
                if self._budget_exhausted(started):
                    stats.skipped += 1
                    REFRESH_VENUES_TOTAL.labels(outcome="skipped").inc()
                    return
                stats.attempted += 1
                await self._refresh_venue(venue_id, now, stats)

        await asyncio.gather(*(_guarded(venue_id) for venue_id in venue_ids))

        stats.duration_s = max(0.0, self._monotonic() - started)
        REFRESH_DURATION_SECONDS.observe(stats.duration_s)
        if stats.skipped:
            logger.warning(
                "Score refresh time budget exhausted, %s venues left for the next run",
                stats.skipped,
            )
        logger.info(
            "Score refresh finished: refreshed=%s failed=%s skipped=%s in %.2fs",
            stats.refreshed,
            stats.failed,
            stats.skipped,
            stats.duration_s,
        )
        return stats

    async def refresh_venue(self, venue_id: str) -> float | None:
        """Refresh a single venue. Returns the new score, or None if it failed."""
        now = self._clock()
        stats = RefreshStats(started_at=now, attempted=1)
        return await self._refresh_venue(venue_id, now, stats)

    def _budget_exhausted(self, started: float) -> bool:
        if self._time_budget_s is None:
            return False
        return (self._monotonic() - started) >= self._time_budget_s

    async def _refresh_venue(self, venue_id: str, now: datetime, stats: RefreshStats) -> float | None:
        if self._collector is not None:
            try:
                await self._collector.collect(venue_id)
            except Exception as exc:
                COLLECTOR_FAILURES_TOTAL.inc()
                logger.warning(
                    "Signal collection failed for venue %s, using stored signals: %s",
                    venue_id,
                    exc,
                )

        try:
            signals = await self._signals.fetch_signals(venue_id)
            # Computed once; the same value becomes current score and history point.
            result = calculate_live_score(signals, now)
            await self._sink.save_score(venue_id, result["score"], now)
        except Exception as exc:
            stats.failed += 1
            stats.errors.append(f"{venue_id}: {exc}"[:200])
            REFRESH_VENUES_TOTAL.labels(outcome="failed").inc()
            logger.error(f"Score refresh failed for venue {venue_id}: {exc}")
            return None

        stats.refreshed += 1
        REFRESH_VENUES_TOTAL.labels(outcome="refreshed").inc()
        VENUE_SCORE_OBS.observe(result["score"])
        logger.info(
            f"Live score updated for venue {venue_id}: {result['score']} "
            f"({result['signal_count']} signals, reasons={result['reasons']})"
        )
        return result["score"]
