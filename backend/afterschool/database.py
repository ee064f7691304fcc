"""
After School Lessons Backend — Database Handle & Session Management
=====================================================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
How:   A `Database` object owns the engine (connection pool) and the session
       factory. The app lifespan creates one at startup and stores it on
       `app.state.database`; `get_db_session` hands each request its own
       session from it. Nothing here is a module-level global, so tests
       inject a `Database` bound to a throwaway SQLite file.
Who:   The app factory (lifecycle), route dependencies (sessions),
       the seed tool and Alembic (metadata).

Connection Pooling (PostgreSQL):
    pool_size / max_overflow:  persistent + burst connections
    pool_pre_ping:             validates connections before use
    pool_timeout:              bounded wait for a free connection
    pool_recycle=3600:         recycles connections hourly
    SQLite URLs skip the pool arguments (the aiosqlite dialect manages its own).
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, List

from sqlalchemy import inspect, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from starlette.requests import Request

from afterschool.exceptions import InvalidArgumentError, StoreUnavailableError

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object between the models, Alembic
    and `Database.create_schema()`.
    """
    pass


class Database:
    """
    Process-scoped handle on the lesson store.

    Lifecycle:
        1. Constructed once (app lifespan or CLI tool)
        2. connect() verifies the store is reachable; failure is fatal at startup
        3. session() is opened per request / per unit of work
        4. dispose() closes the pool at shutdown
    """

    def __init__(
        self,
        url: str,
        *,
        pool_size: int = 10,
        max_overflow: int = 5,
        pool_pre_ping: bool = True,
        pool_timeout: float = 10,
        connect_timeout: float = 10,
        echo: bool = False,
    ):
        self.url = url
        self.connect_timeout = connect_timeout

        engine_kwargs: Dict[str, Any] = {"echo": echo}
        if url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"timeout": connect_timeout}
        else:
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_pre_ping=pool_pre_ping,
                pool_timeout=pool_timeout,
                pool_recycle=3600,
            )
            if "+asyncpg" in url:
                engine_kwargs["connect_args"] = {"timeout": connect_timeout}

        try:
            self.engine = create_async_engine(url, **engine_kwargs)
        except (SQLAlchemyError, ImportError) as e:
            # Unparseable URL, unknown dialect, or a driver that is missing or not async
            logger.error("Cannot create engine: %s", e)
            raise InvalidArgumentError(
                message="Invalid database URL",
                field="database_url",
                context={"error_type": type(e).__name__},
            ) from e

        # expire_on_commit=False: returned ORM objects stay readable after commit
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings) -> "Database":
        """Build a handle from the application `Settings`."""
        return cls(
            settings.database_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_timeout=settings.db_pool_timeout,
            connect_timeout=settings.db_connect_timeout,
            echo=settings.log_level == "DEBUG",
        )

    async def connect(self) -> List[str]:
        """
        Verify the store is reachable and return the table names it holds.

        Raises:
            StoreUnavailableError: connection refused, bad credentials or timeout.
        """
        try:
            return await asyncio.wait_for(self._probe(), timeout=self.connect_timeout)
        except (SQLAlchemyError, OSError, asyncio.TimeoutError) as e:
            logger.error("Database connection error: %s", str(e) or type(e).__name__)
            raise StoreUnavailableError(
                message="Could not connect to the lesson store",
                context={"error_type": type(e).__name__},
            ) from e

    async def _probe(self) -> List[str]:
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
            return await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())

    async def create_schema(self) -> None:
        """Create the lessons/orders tables and indexes if they are missing."""
        # Registers the models on Base.metadata
        from afterschool.models import lesson, order  # noqa: F401

        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except (SQLAlchemyError, OSError) as e:
            logger.error("Schema creation failed: %s", str(e))
            raise StoreUnavailableError(
                message="Could not create the lesson store schema",
                context={"error_type": type(e).__name__},
            ) from e

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Unit-of-work session: commits on success, rolls back on any error,
        always returns the connection to the pool.
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def dispose(self) -> None:
        """Close every pooled connection. Called once at shutdown."""
        await self.engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    The `Database` is looked up on `app.state`, where the app factory or
    lifespan placed it.

    Example usage in a route:
        @router.get("/lessons")
        async def list_lessons(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
