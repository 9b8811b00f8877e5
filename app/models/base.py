"""
Base declarative class, mixins and clock helpers for SQLAlchemy models.

Database connection logic lives in app.core.database.
"""

from datetime import UTC, datetime, timedelta

from sqlalchemy import Column, DateTime
from sqlalchemy.orm import DeclarativeBase


def utc_now() -> datetime:
    """Returns current UTC time with timezone awareness."""
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite drops the offset on the way back)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def next_timestamp(previous: datetime | None) -> datetime:
    """Return now, bumped past ``previous`` when the clock has not advanced.

    Keeps ``updated_at`` strictly increasing across consecutive writes.
    """
    now = utc_now()
    if previous is not None and now <= as_utc(previous):
        return as_utc(previous) + timedelta(microseconds=1)
    return now


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""


class TimestampMixin:
    """Mixin that adds created_at and updated_at timestamp columns to models.

    Values are assigned by the repositories, the column defaults only cover
    rows written outside of them.
    """

    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
