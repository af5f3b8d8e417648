"""Value objects exchanged with the scoring engine."""
from __future__ import annotations

import enum
from datetime import date as date_type, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from livescore.core.timeutil import parse_timestamp


class Signal(BaseModel):
    """One timestamped opinion about a venue (review or social mention).

    `sentiment` is nominally -1..1 but is not rejected when outside that
    range; the aggregator clamps it so a bad row cannot fail a batch.
    """

    model_config = ConfigDict(frozen=True)

    sentiment: float
    observed_at: Optional[datetime] = None
    source: Optional[str] = None
    mention_count: int = Field(default=1, ge=0)

    @field_validator("observed_at", mode="before")
    @classmethod
    def lenient_timestamp(cls, v):
        return parse_timestamp(v)


class ScoreHistoryPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: date_type
    score: float


class PulseTrend(str, enum.Enum):
    RISING = "rising"
    STABLE = "stable"
    DECLINING = "declining"


class SourcePulse(BaseModel):
    source: str
    mentions: int
    sentiment: float


class SocialPulse(BaseModel):
    total_mentions: int = 0
    avg_sentiment: float = 0.0
    trend: PulseTrend = PulseTrend.STABLE
    sources: list[SourcePulse] = Field(default_factory=list)


class DistrictAverage(BaseModel):
    avg: float
    count: int
