"""
Database Configuration.

SQLAlchemy async engine and session management.

There is no module-level engine. The process entry point (the FastAPI
lifespan, the CLI, a test fixture) builds a Database and owns its lifetime;
request handlers reach it through the get_db_session dependency.
"""

from collections.abc import AsyncGenerator
from typing import Any

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from modules.backend.core.logging import get_logger

logger = get_logger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """
    Owns one async engine and its session factory.

    Usage:
        database = Database.from_config()
        async with database.session() as session:
            ...
        await database.dispose()
    """

    def __init__(self, url: str, **engine_kwargs: Any) -> None:
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        self.session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        logger.debug("Database engine created", extra={"dialect": self.engine.dialect.name})

    @classmethod
    def from_config(cls) -> "Database":
        """Build a Database from database.yaml and secrets."""
        from modules.backend.core.config import get_app_config, get_database_url

        db_config = get_app_config().database
        engine_kwargs: dict[str, Any] = {"echo": db_config.echo}
        if not db_config.is_sqlite:
            engine_kwargs.update(
                pool_size=db_config.pool_size,
                max_overflow=db_config.max_overflow,
                pool_timeout=db_config.pool_timeout,
                pool_recycle=db_config.pool_recycle,
            )
        return cls(get_database_url(), **engine_kwargs)

    def session(self) -> AsyncSession:
        """Open a new session. Use as an async context manager."""
        return self.session_factory()

    async def create_all(self) -> None:
        """Create all tables. Used for SQLite development stores and tests."""
        from modules.backend.models import Base

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.debug("Database engine disposed")


def get_database(request: Request) -> Database:
    """The Database stored on app.state by the lifespan."""
    database = getattr(request.app.state, "database", None)
    if database is None:
        raise RuntimeError("Database is not initialized. Is the app lifespan running?")
    return database


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency that provides one session and one transaction per request.

    The transaction commits after the handler returns and rolls back if it
    raises, so multi-step writes are all-or-nothing.

    Usage in endpoints:
        @router.get("/notes")
        async def list_notes(db: DbSession):
            ...
    """
    database = get_database(request)
    async with database.session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
