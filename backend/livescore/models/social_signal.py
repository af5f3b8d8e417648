"""SocialSignal model — aggregated mentions per source and collection run."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from livescore.db import Base


class SocialSignal(Base):
    __tablename__ = "social_signals"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    venue_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("venues.id", ondelete="CASCADE"), nullable=False, index=True
    )
    source: Mapped[str] = mapped_column(String(32), nullable=False)
    mention_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    sentiment_avg: Mapped[float] = mapped_column(Float, default=0.0, nullable=False, comment="-1..1")
    collected_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), index=True, nullable=False
    )

    def __repr__(self) -> str:
        return f"<SocialSignal venue={self.venue_id} source={self.source} mentions={self.mention_count}>"
