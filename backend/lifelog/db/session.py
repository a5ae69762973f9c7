"""Database session management."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from pathlib import Path

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from lifelog.core.config import settings


def get_database_url() -> str:
    """Get the database URL, ensuring the directory exists."""
    if settings.database_url:
        return settings.database_url

    # Use configured path if it exists or is writable, otherwise use local ./config
    config_path = settings.config_path
    if not config_path.exists():
        try:
            config_path.mkdir(parents=True, exist_ok=True)
        except OSError:
            # Fall back to local directory for development
            config_path = Path("./config")
            config_path.mkdir(parents=True, exist_ok=True)

    db_path = config_path / "lifelog.db"
    return f"sqlite+aiosqlite:///{db_path}"


def install_sqlite_pragmas(engine: AsyncEngine, wal: bool = True) -> None:
    """Register a connect hook enabling foreign keys (and WAL) on SQLite.

    Cascading deletes on log_tags only fire when foreign keys are enabled,
    and SQLite enables them per connection.
    """
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine.sync_engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        if wal:
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA synchronous=NORMAL")
            cursor.execute("PRAGMA busy_timeout=30000")  # 30 second busy timeout
        cursor.close()


engine = create_async_engine(
    get_database_url(),
    echo=settings.debug,
    future=True,
    pool_pre_ping=True,
)
install_sqlite_pragmas(engine)


async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting async database sessions.

    The session is one transaction: committed when the request succeeds,
    rolled back when anything raises.

    Yields:
        An async database session.
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
