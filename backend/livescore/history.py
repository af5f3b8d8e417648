"""Score history read side — trailing window of persisted Live Scores."""
from __future__ import annotations

from datetime import datetime, timedelta
from typing import List, Protocol, Sequence

from livescore.config import settings
from livescore.core.timeutil import parse_timestamp, utc_now
from livescore.schemas.signal import ScoreHistoryPoint


class HistoryStore(Protocol):
    async def list_scores(self, venue_id: str, since: datetime) -> Sequence[tuple[datetime, float]]: ...


class ScoreHistoryReader:
    """Read-only projection of score history; never triggers a computation."""

    def __init__(self, store: HistoryStore):
        self._store = store

    async def get_history(
        self,
        venue_id: str,
        days: int | None = None,
        now: datetime | None = None,
    ) -> List[ScoreHistoryPoint]:
        """Points from the last `days` days, oldest first, one per stored row."""
        if days is None:
            days = settings.HISTORY_DEFAULT_DAYS
        if days <= 0:
            return []
        now = parse_timestamp(now) if now is not None else utc_now()
        since = now - timedelta(days=days)

        rows = []
        for calculated_at, score in await self._store.list_scores(venue_id, since):
            moment = parse_timestamp(calculated_at)
            if moment is None or moment < since:
                continue
            rows.append((moment, float(score)))
        rows.sort(key=lambda r: r[0])

        return [ScoreHistoryPoint(date=moment.date(), score=score) for moment, score in rows]
