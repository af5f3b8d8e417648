from datetime import datetime, timedelta, timezone

from livescore.scoring.decay import decay_factor

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def test_no_last_signal_means_full_decay() -> None:
    assert decay_factor(None, NOW) == 0.0
    assert decay_factor("garbage", NOW) == 0.0


def test_bucket_boundaries() -> None:
    assert decay_factor(NOW, NOW) == 1.0
    assert decay_factor(NOW - timedelta(days=13, hours=23), NOW) == 1.0
    assert decay_factor(NOW - timedelta(days=14), NOW) == 0.7
    assert decay_factor(NOW - timedelta(days=30), NOW) == 0.4
    assert decay_factor(NOW - timedelta(days=59), NOW) == 0.4
    assert decay_factor(NOW - timedelta(days=60), NOW) == 0.1
    assert decay_factor(NOW - timedelta(days=365), NOW) == 0.1


def test_decay_is_non_increasing_with_days_since_last_signal() -> None:
    factors = [decay_factor(NOW - timedelta(days=d), NOW) for d in range(0, 120)]
    assert all(a >= b for a, b in zip(factors, factors[1:]))


def test_future_last_signal_has_no_decay() -> None:
    assert decay_factor(NOW + timedelta(hours=5), NOW) == 1.0
