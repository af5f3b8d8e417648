"""Social pulse — mention volume, sentiment and trend from recent signals."""
from __future__ import annotations

from collections import OrderedDict
from datetime import datetime, timedelta
from typing import Iterable

from livescore.core.numeric import round_half_up
from livescore.core.timeutil import parse_timestamp
from livescore.scoring.live_score import clamp_sentiment
from livescore.schemas.signal import PulseTrend, Signal, SocialPulse, SourcePulse

TREND_THRESHOLD = 0.15
UNKNOWN_SOURCE = "unknown"


def _trend(recent_total: int, older_total: int) -> PulseTrend:
    if older_total <= 0:
        return PulseTrend.STABLE
    change = (recent_total - older_total) / older_total
    if change > TREND_THRESHOLD:
        return PulseTrend.RISING
    if change < -TREND_THRESHOLD:
        return PulseTrend.DECLINING
    return PulseTrend.STABLE


def compute_social_pulse(
    signals: Iterable[Signal],
    now: datetime,
    window_days: int = 7,
) -> SocialPulse:
    """Summarise the last `window_days` of signals and compare volume with the window before."""
    now = parse_timestamp(now)
    recent_start = now - timedelta(days=window_days)
    older_start = recent_start - timedelta(days=window_days)

    per_source: "OrderedDict[str, dict]" = OrderedDict()
    recent_total = 0
    older_total = 0

    for signal in signals:
        if signal.observed_at is None:
            continue
        # Clock skew: future-dated signals count as brand new.
        if signal.observed_at >= recent_start:
            recent_total += signal.mention_count
            bucket = per_source.setdefault(
                signal.source or UNKNOWN_SOURCE,
                {"mentions": 0, "sentiment_sum": 0.0, "count": 0},
            )
            bucket["mentions"] += signal.mention_count
            bucket["sentiment_sum"] += clamp_sentiment(signal.sentiment)
            bucket["count"] += 1
        elif signal.observed_at >= older_start:
            older_total += signal.mention_count

    sources = [
        SourcePulse(
            source=name,
            mentions=data["mentions"],
            sentiment=round_half_up(data["sentiment_sum"] / max(1, data["count"]), 2),
        )
        for name, data in per_source.items()
    ]
    avg_sentiment = (
        round_half_up(sum(s.sentiment for s in sources) / len(sources), 2) if sources else 0.0
    )

    return SocialPulse(
        total_mentions=sum(s.mentions for s in sources),
        avg_sentiment=avg_sentiment,
        trend=_trend(recent_total, older_total),
        sources=sources,
    )
