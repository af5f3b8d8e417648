"""Rounding for persisted and displayed scores."""
from __future__ import annotations

import math


def round_half_up(value: float, digits: int = 2) -> float:
    """Round with ties going up (5.625 -> 5.63), unlike the built-in `round`."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor
