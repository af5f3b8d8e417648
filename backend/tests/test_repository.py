from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from livescore.models.review import Review
from livescore.models.score_history import ScoreHistory
from livescore.models.social_signal import SocialSignal
from livescore.repository import (
    SqlHistoryStore,
    SqlScoreSink,
    SqlSignalSource,
    SqlVenueSource,
    VenueNotFoundError,
    review_to_signal,
    social_signal_to_signal,
)

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


class _Result:
    def __init__(self, rowcount: int = 0, rows: list | None = None) -> None:
        self.rowcount = rowcount
        self.rows = rows or []

    def all(self) -> list:
        return list(self.rows)

    def scalars(self) -> "_Result":
        return self


class _Session:
    def __init__(self, rowcount: int = 0, rows: list | None = None, batches: list | None = None) -> None:
        self.rowcount = rowcount
        self.rows = rows
        # one row list per executed statement, in order
        self.batches = list(batches or [])
        self.statements: list = []
        self.added: list = []
        self.committed = False
        self.rolled_back = False

    async def __aenter__(self) -> "_Session":
        return self

    async def __aexit__(self, *exc) -> bool:
        return False

    async def execute(self, stmt):
        self.statements.append(stmt)
        if self.batches:
            return _Result(self.rowcount, self.batches.pop(0))
        return _Result(self.rowcount, self.rows)

    def add(self, obj) -> None:
        self.added.append(obj)

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True


def test_review_maps_to_signal_with_published_at() -> None:
    r = Review()
    r.venue_id = "v1"
    r.sentiment = 0.75
    r.source = "2gis"
    r.published_at = datetime(2026, 2, 27, 9, 0, tzinfo=timezone.utc)
    r.created_at = NOW

    signal = review_to_signal(r)
    assert signal.sentiment == 0.75
    assert signal.observed_at == r.published_at
    assert signal.source == "2gis"
    assert signal.mention_count == 1


def test_review_without_published_at_falls_back_to_created_at() -> None:
    r = Review()
    r.sentiment = -0.4
    r.source = "google_maps"
    r.published_at = None
    r.created_at = NOW
    assert review_to_signal(r).observed_at == NOW


def test_social_signal_maps_mentions_and_average_sentiment() -> None:
    row = SocialSignal()
    row.source = "instagram"
    row.mention_count = 14
    row.sentiment_avg = 0.32
    row.collected_at = NOW

    signal = social_signal_to_signal(row)
    assert signal.sentiment == 0.32
    assert signal.mention_count == 14
    assert signal.observed_at == NOW


def test_save_score_updates_venue_and_appends_history_in_one_commit() -> None:
    session = _Session(rowcount=1)
    sink = SqlScoreSink(session_factory=lambda: session)

    asyncio.run(sink.save_score("v1", 7.25, NOW))

    assert session.committed is True
    assert len(session.statements) == 1
    [history] = session.added
    assert isinstance(history, ScoreHistory)
    assert (history.venue_id, history.score, history.calculated_at) == ("v1", 7.25, NOW)


def test_save_score_for_unknown_venue_raises_without_history() -> None:
    session = _Session(rowcount=0)
    sink = SqlScoreSink(session_factory=lambda: session)

    with pytest.raises(VenueNotFoundError):
        asyncio.run(sink.save_score("missing", 5.0, NOW))
    assert session.added == []
    assert session.committed is False
    assert session.rolled_back is True


def test_venue_source_returns_ids_in_query_order() -> None:
    session = _Session(rows=[("unscored",), ("oldest",), ("newer",)])
    source = SqlVenueSource(session_factory=lambda: session, batch_size=3, stale_hours=24, clock=lambda: NOW)

    assert asyncio.run(source.list_venue_ids()) == ["unscored", "oldest", "newer"]
    sql = str(session.statements[0])
    assert "ORDER BY" in sql
    assert "LIMIT" in sql


def test_history_store_returns_timestamp_score_pairs() -> None:
    rows = [(NOW, 6.5), (NOW, 6.75)]
    session = _Session(rows=rows)
    store = SqlHistoryStore(session_factory=lambda: session)

    assert asyncio.run(store.list_scores("v1", NOW)) == rows
    assert "score_history.calculated_at >=" in str(session.statements[0])


def _review(sentiment: float, published_at: datetime) -> Review:
    r = Review()
    r.venue_id = "v1"
    r.sentiment = sentiment
    r.source = "2gis"
    r.published_at = published_at
    r.created_at = published_at
    return r


def _social(mentions: int, sentiment_avg: float, collected_at: datetime) -> SocialSignal:
    row = SocialSignal()
    row.venue_id = "v1"
    row.source = "instagram"
    row.mention_count = mentions
    row.sentiment_avg = sentiment_avg
    row.collected_at = collected_at
    return row


def test_signal_source_merges_reviews_and_social_rows() -> None:
    session = _Session(
        batches=[
            [_review(0.5, NOW - timedelta(days=1))],
            [_social(12, -0.25, NOW - timedelta(hours=3))],
        ]
    )
    source = SqlSignalSource(session_factory=lambda: session)

    signals = asyncio.run(source.fetch_signals("v1"))

    assert [(s.source, s.sentiment, s.mention_count) for s in signals] == [
        ("2gis", 0.5, 1),
        ("instagram", -0.25, 12),
    ]
    assert len(session.statements) == 2
    assert "FROM reviews" in str(session.statements[0])
    assert "FROM social_signals" in str(session.statements[1])


def test_signal_source_without_social_reads_reviews_only() -> None:
    session = _Session(batches=[[_review(-0.5, NOW)], [_social(3, 1.0, NOW)]])
    source = SqlSignalSource(session_factory=lambda: session, include_social=False)

    signals = asyncio.run(source.fetch_signals("v1"))

    assert [s.sentiment for s in signals] == [-0.5]
    assert len(session.statements) == 1
    assert "social_signals" not in str(session.statements[0])


def test_signal_source_lookback_filters_both_tables() -> None:
    session = _Session(batches=[[], []])
    source = SqlSignalSource(session_factory=lambda: session, lookback_days=14, clock=lambda: NOW)

    assert asyncio.run(source.fetch_signals("v1")) == []

    review_stmt, social_stmt = session.statements
    assert "reviews.published_at >=" in str(review_stmt)
    assert "social_signals.collected_at >=" in str(social_stmt)
    since = NOW - timedelta(days=14)
    assert since in review_stmt.compile().params.values()
    assert since in social_stmt.compile().params.values()


def test_signal_source_without_lookback_has_no_time_filter() -> None:
    session = _Session(batches=[[], []])
    source = SqlSignalSource(session_factory=lambda: session)

    asyncio.run(source.fetch_signals("v1"))

    assert ">=" not in str(session.statements[0])
    assert ">=" not in str(session.statements[1])
