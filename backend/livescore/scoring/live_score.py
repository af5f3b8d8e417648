"""Live Score aggregation.

Each signal's sentiment (-1..1) is mapped linearly onto 0..10 and averaged
with freshness weights. The average is then blended toward the neutral
midpoint by the decay factor of the most recent signal:

    final = raw * decay + 5.0 * (1 - decay)

The result is rounded half up to 2 decimals and clamped to [0, 10].
"""
from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Dict, Iterable

from livescore.core.numeric import round_half_up
from livescore.scoring.decay import decay_factor
from livescore.scoring.freshness import freshness_weight
from livescore.schemas.signal import Signal

NEUTRAL_SCORE = 5.0
MIN_SCORE = 0.0
MAX_SCORE = 10.0

# Stable reason codes
REASONS = {
    "LIVE_SCORE_NO_SIGNALS": "No signals, neutral default",
    "LIVE_SCORE_ZERO_WEIGHT": "Total freshness weight was zero, neutral default",
    "LIVE_SCORE_FRESH_SIGNALS": "Signals from the last 24 hours",
    "LIVE_SCORE_DECAY": "No recent signals, pulled toward neutral",
    "LIVE_SCORE_SENTIMENT_CLAMPED": "Out-of-range sentiment clamped to [-1, 1]",
    "LIVE_SCORE_UNDATED_SIGNALS": "Signals without a usable timestamp",
}


def clamp_sentiment(value: float) -> float:
    if math.isnan(value):
        return 0.0
    return max(-1.0, min(1.0, value))


def sentiment_to_score(sentiment: float) -> float:
    """Map a sentiment in [-1, 1] onto the 0..10 score scale."""
    return (clamp_sentiment(sentiment) + 1.0) * 5.0


def _neutral(reason: str, signal_count: int) -> Dict[str, Any]:
    return {
        "score": NEUTRAL_SCORE,
        "raw_score": None,
        "decay": None,
        "signal_count": signal_count,
        "reasons": [reason],
    }


def calculate_live_score(signals: Iterable[Signal], now: datetime) -> Dict[str, Any]:
    """Calculate the Live Score with the intermediate values and reason codes."""
    signals = list(signals)
    if not signals:
        return _neutral("LIVE_SCORE_NO_SIGNALS", 0)

    weighted_sum = 0.0
    total_weight = 0.0
    clamped = False
    undated = False
    fresh = False
    last_signal_at: datetime | None = None

    for signal in signals:
        sentiment = float(signal.sentiment)
        if math.isnan(sentiment) or not -1.0 <= sentiment <= 1.0:
            clamped = True

        weight = freshness_weight(signal.observed_at, now)
        if weight >= 2.0:
            fresh = True
        weighted_sum += sentiment_to_score(sentiment) * weight
        total_weight += weight

        if signal.observed_at is None:
            undated = True
        elif last_signal_at is None or signal.observed_at > last_signal_at:
            last_signal_at = signal.observed_at

    if total_weight <= 0:
        return _neutral("LIVE_SCORE_ZERO_WEIGHT", len(signals))

    raw_score = weighted_sum / total_weight
    decay = decay_factor(last_signal_at, now)
    blended = raw_score * decay + NEUTRAL_SCORE * (1.0 - decay)
    final_score = max(MIN_SCORE, min(MAX_SCORE, round_half_up(blended, 2)))

    reasons = []
    if fresh: reasons.append("LIVE_SCORE_FRESH_SIGNALS")
    if decay < 1.0: reasons.append("LIVE_SCORE_DECAY")
    if clamped: reasons.append("LIVE_SCORE_SENTIMENT_CLAMPED")
    if undated: reasons.append("LIVE_SCORE_UNDATED_SIGNALS")

    return {
        "score": final_score,
        "raw_score": round(raw_score, 4),
        "decay": decay,
        "signal_count": len(signals),
        "reasons": reasons,
    }


def compute_live_score(signals: Iterable[Signal], now: datetime) -> float:
    """Live Score in [0, 10], rounded to 2 decimals; 5.0 for no signals."""
    return calculate_live_score(signals, now)["score"]
