"""SQLAlchemy-backed collaborators for the refresh cycle and read side.

Each call opens its own session so venues refreshed concurrently never
share one.
"""
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable, List, Sequence

from sqlalchemy import case, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from livescore.core.timeutil import utc_now
from livescore.db import async_session_factory
from livescore.models.review import Review
from livescore.models.score_history import ScoreHistory
from livescore.models.social_signal import SocialSignal
from livescore.models.venue import Venue
from livescore.schemas.signal import Signal

# live_score below this means the venue has never been scored
UNSCORED_THRESHOLD = 0.1


class VenueNotFoundError(LookupError):
    pass


def review_to_signal(review: Review) -> Signal:
    return Signal(
        sentiment=review.sentiment,
        observed_at=review.published_at or review.created_at,
        source=review.source,
        mention_count=1,
    )


def social_signal_to_signal(row: SocialSignal) -> Signal:
    return Signal(
        sentiment=row.sentiment_avg,
        observed_at=row.collected_at,
        source=row.source,
        mention_count=max(0, int(row.mention_count or 0)),
    )


class SqlVenueSource:
    """Active venues, never-scored first, then least recently updated."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession] = async_session_factory,
        *,
        batch_size: int | None = None,
        stale_hours: float | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._session_factory = session_factory
        self._batch_size = batch_size
        self._stale_hours = stale_hours
        self._clock = clock

    async def list_venue_ids(self) -> List[str]:
        unscored_first = case((Venue.live_score < UNSCORED_THRESHOLD, 0), else_=1)
        stmt = (
            select(Venue.id)
            .where(Venue.is_active.is_(True))
            .order_by(unscored_first, Venue.updated_at.asc())
        )
        if self._stale_hours:
            threshold = self._clock() - timedelta(hours=self._stale_hours)
            stmt = stmt.where(
                or_(Venue.live_score < UNSCORED_THRESHOLD, Venue.updated_at < threshold)
            )
        if self._batch_size:
            stmt = stmt.limit(self._batch_size)

        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return [row[0] for row in result.all()]


class SqlSignalSource:
    """Reviews and, optionally, aggregated social signals as `Signal`s."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession] = async_session_factory,
        *,
        include_social: bool = True,
        lookback_days: int | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._session_factory = session_factory
        self._include_social = include_social
        self._lookback_days = lookback_days
        self._clock = clock

    async def fetch_signals(self, venue_id: str) -> List[Signal]:
        since = None
        if self._lookback_days:
            since = self._clock() - timedelta(days=self._lookback_days)

        async with self._session_factory() as session:
            stmt = select(Review).where(Review.venue_id == venue_id)
            if since is not None:
                stmt = stmt.where(or_(Review.published_at >= since, Review.created_at >= since))
            reviews = (await session.execute(stmt)).scalars().all()
            signals = [review_to_signal(r) for r in reviews]

            if self._include_social:
                stmt = select(SocialSignal).where(SocialSignal.venue_id == venue_id)
                if since is not None:
                    stmt = stmt.where(SocialSignal.collected_at >= since)
                rows = (await session.execute(stmt)).scalars().all()
                signals.extend(social_signal_to_signal(r) for r in rows)

        return signals


class SqlScoreSink:
    """Writes the current score and its history point in one transaction."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession] = async_session_factory):
        self._session_factory = session_factory

    async def save_score(self, venue_id: str, score: float, computed_at: datetime) -> None:
        async with self._session_factory() as session:
            result = await session.execute(
                update(Venue)
                .where(Venue.id == venue_id)
                .values(live_score=score, updated_at=computed_at)
            )
            if result.rowcount == 0:
                await session.rollback()
                raise VenueNotFoundError(f"venue {venue_id} not found")
            session.add(ScoreHistory(venue_id=venue_id, score=score, calculated_at=computed_at))
            await session.commit()


class SqlHistoryStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession] = async_session_factory):
        self._session_factory = session_factory

    async def list_scores(self, venue_id: str, since: datetime) -> Sequence[tuple[datetime, float]]:
        stmt = (
            select(ScoreHistory.calculated_at, ScoreHistory.score)
            .where(ScoreHistory.venue_id == venue_id, ScoreHistory.calculated_at >= since)
            .order_by(ScoreHistory.calculated_at.asc(), ScoreHistory.id.asc())
        )
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return [(row[0], row[1]) for row in result.all()]
