"""ScoreHistory model — append-only Live Score snapshots."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Float, ForeignKey, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from livescore.db import Base


class ScoreHistory(Base):
    """One row per venue per refresh run. Never updated."""

    __tablename__ = "score_history"
    __table_args__ = (Index("ix_score_history_venue_calculated", "venue_id", "calculated_at"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    venue_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("venues.id", ondelete="CASCADE"), nullable=False
    )
    score: Mapped[float] = mapped_column(Float, nullable=False)
    calculated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    def __repr__(self) -> str:
        return f"<ScoreHistory venue={self.venue_id} score={self.score} at={self.calculated_at}>"
