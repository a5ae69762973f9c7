"""SQLAlchemy base class for all models."""

from __future__ import annotations

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base shared by the logs, tags and log_tags tables."""

    pass
