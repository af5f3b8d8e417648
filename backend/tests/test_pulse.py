from datetime import datetime, timedelta, timezone

from livescore.schemas.signal import PulseTrend, Signal
from livescore.scoring.pulse import compute_social_pulse

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _sig(source: str, mentions: int, sentiment: float, days_ago: float) -> Signal:
    return Signal(
        source=source,
        mention_count=mentions,
        sentiment=sentiment,
        observed_at=NOW - timedelta(days=days_ago),
    )


def test_pulse_aggregates_recent_window_per_source() -> None:
    pulse = compute_social_pulse(
        [
            _sig("instagram", 10, 0.6, 1),
            _sig("instagram", 6, 0.2, 3),
            _sig("2gis", 4, -0.2, 2),
            _sig("2gis", 50, 1.0, 20),  # outside both windows
        ],
        NOW,
    )
    by_source = {s.source: s for s in pulse.sources}
    assert pulse.total_mentions == 20
    assert by_source["instagram"].mentions == 16
    assert by_source["instagram"].sentiment == 0.4
    assert by_source["2gis"].sentiment == -0.2
    assert pulse.avg_sentiment == 0.1
    assert pulse.trend == PulseTrend.STABLE


def test_pulse_trend_rising_and_declining() -> None:
    rising = compute_social_pulse([_sig("x", 12, 0.0, 1), _sig("x", 10, 0.0, 10)], NOW)
    assert rising.trend == PulseTrend.RISING

    declining = compute_social_pulse([_sig("x", 8, 0.0, 1), _sig("x", 10, 0.0, 10)], NOW)
    assert declining.trend == PulseTrend.DECLINING

    steady = compute_social_pulse([_sig("x", 11, 0.0, 1), _sig("x", 10, 0.0, 10)], NOW)
    assert steady.trend == PulseTrend.STABLE


def test_pulse_without_signals_is_empty_and_stable() -> None:
    pulse = compute_social_pulse([], NOW)
    assert pulse.total_mentions == 0
    assert pulse.avg_sentiment == 0.0
    assert pulse.sources == []
    assert pulse.trend == PulseTrend.STABLE


def test_pulse_ignores_undated_but_counts_future_signals_as_recent() -> None:
    pulse = compute_social_pulse(
        [
            Signal(sentiment=1.0, observed_at=None, source="x", mention_count=5),
            _sig("x", 7, 1.0, -2),
        ],
        NOW,
    )
    assert pulse.total_mentions == 7
    assert [s.source for s in pulse.sources] == ["x"]
    assert pulse.sources[0].sentiment == 1.0


def test_pulse_sentiment_ties_round_half_up() -> None:
    pulse = compute_social_pulse([_sig("x", 1, 0.125, 1)], NOW)
    assert pulse.sources[0].sentiment == 0.13
    assert pulse.avg_sentiment == 0.13
