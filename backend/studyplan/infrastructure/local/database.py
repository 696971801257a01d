"""
SQLite database configuration and ORM models.

This module defines the SQLAlchemy ORM models and database initialization.
"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import (
    Column,
    DateTime,
    Integer,
    String,
    Text,
)
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from studyplan.core.config import get_settings


class Base(DeclarativeBase):
    """SQLAlchemy declarative base."""

    pass


# ===========================================
# ORM Models
# ===========================================


class TaskORM(Base):
    """
    Task ORM model.

    A recurring template is a row whose series_id equals its own id. Occurrences share
    the template's series_id and carry a unique occurrence_key.
    Timestamps are stored as naive UTC.
    """

    __tablename__ = "tasks"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id = Column(String(255), nullable=False, index=True)
    title = Column(String(500), nullable=False)
    notes = Column(Text, nullable=True)
    priority = Column(String(10), default="MEDIUM")
    due_at = Column(DateTime, nullable=True)
    effort_minutes = Column(Integer, nullable=True)

    # Recurrence
    recurrence_type = Column(String(10), default="NONE", index=True)
    recurrence_interval = Column(Integer, default=1)
    recurrence_count = Column(Integer, nullable=True)
    recurrence_until = Column(DateTime, nullable=True)
    series_id = Column(String(36), nullable=True, index=True)
    occurrence_key = Column(String(64), nullable=True, unique=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


def get_engine(database_url: str | None = None):
    """Get async engine instance."""
    settings = get_settings()
    return create_async_engine(database_url or settings.DATABASE_URL, echo=settings.DEBUG)


def get_session_factory(engine=None):
    """Get async session factory."""
    engine = engine or get_engine()
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_db(engine=None):
    """Initialize database tables."""
    engine = engine or get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
