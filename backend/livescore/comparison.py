"""District and city averages for comparing a venue against its surroundings."""
from __future__ import annotations

import math

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from livescore.config import settings
from livescore.core.numeric import round_half_up
from livescore.db import async_session_factory
from livescore.models.venue import Venue
from livescore.schemas.signal import DistrictAverage

KM_PER_DEGREE_LAT = 111.0


def bounding_box(latitude: float, longitude: float, radius_km: float) -> tuple[float, float, float, float]:
    """Approximate (min_lat, max_lat, min_lng, max_lng) around a point."""
    lat_delta = radius_km / KM_PER_DEGREE_LAT
    cos_lat = math.cos(math.radians(latitude))
    # Longitude degrees shrink toward the poles.
    lng_delta = radius_km / (KM_PER_DEGREE_LAT * max(cos_lat, 1e-6))
    return (
        latitude - lat_delta,
        latitude + lat_delta,
        longitude - lng_delta,
        longitude + lng_delta,
    )


class ScoreComparison:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession] = async_session_factory):
        self._session_factory = session_factory

    async def district_average(
        self,
        latitude: float,
        longitude: float,
        radius_km: float | None = None,
    ) -> DistrictAverage:
        min_lat, max_lat, min_lng, max_lng = bounding_box(
            latitude, longitude, radius_km or settings.DISTRICT_RADIUS_KM
        )
        stmt = select(func.avg(Venue.live_score), func.count(Venue.id)).where(
            Venue.is_active.is_(True),
            Venue.latitude.between(min_lat, max_lat),
            Venue.longitude.between(min_lng, max_lng),
        )
        async with self._session_factory() as session:
            avg, count = (await session.execute(stmt)).one()
        return DistrictAverage(avg=round_half_up(float(avg or 0.0), 1), count=int(count or 0))

    async def city_average(self) -> float:
        stmt = select(func.avg(Venue.live_score)).where(Venue.is_active.is_(True))
        async with self._session_factory() as session:
            avg = (await session.execute(stmt)).scalar()
        return round_half_up(float(avg or 0.0), 1)
