"""Async SQLAlchemy engine, session factory and declarative base.

Pool sizing comes from settings so concurrent venue refreshes (each holding
its own session) fit inside it. SQL echo is not used; statements are logged
through the `sqlalchemy.engine` logger when `LOG_SQL` is set.
"""
from __future__ import annotations

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from livescore.config import settings

engine = create_async_engine(
    settings.DATABASE_URL,
    pool_size=settings.DATABASE_POOL_SIZE,
    max_overflow=settings.DATABASE_MAX_OVERFLOW,
    pool_pre_ping=True,
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    pass
