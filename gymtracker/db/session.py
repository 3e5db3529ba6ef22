"""Async database engine and session factory."""

from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from gymtracker.core.config import Settings, get_settings
from gymtracker.core.errors import StoreError

settings = get_settings()


def _on_sqlite_connect(dbapi_connection, connection_record) -> None:
    # The driver must not emit BEGIN itself; _on_sqlite_begin does
    dbapi_connection.isolation_level = None
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


def _on_sqlite_begin(conn) -> None:
    # SERIALIZABLE takes the write lock at BEGIN; concurrent ledger writers
    # queue on the busy timeout instead of failing their lock upgrade.
    if conn.get_execution_options().get("isolation_level") == "SERIALIZABLE":
        conn.exec_driver_sql("BEGIN IMMEDIATE")
    else:
        conn.exec_driver_sql("BEGIN")


def build_engine(url: str, settings: Settings) -> AsyncEngine:
    """Create the async engine; pool sizing and asyncpg timeouts only apply to PostgreSQL."""
    if url.startswith("sqlite"):
        sqlite_engine = create_async_engine(
            url,
            echo=settings.debug,
            connect_args={"timeout": settings.database_command_timeout},
        )
        event.listen(sqlite_engine.sync_engine, "connect", _on_sqlite_connect)
        event.listen(sqlite_engine.sync_engine, "begin", _on_sqlite_begin)
        return sqlite_engine
    return create_async_engine(
        url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        pool_pre_ping=True,
        echo=settings.debug,
        connect_args={"command_timeout": settings.database_command_timeout},
    )


def build_session_maker(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


engine = build_engine(settings.async_database_url, settings)

async_session_maker = build_session_maker(engine)


def get_session_factory(request: Request) -> async_sessionmaker[AsyncSession]:
    """Store handle held by the application; checked once per request."""
    factory = getattr(request.app.state, "session_factory", None)
    if factory is None:
        raise StoreError("Database not available")
    return factory


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Dependency that yields an async DB session, committed when the handler returns."""
    factory = get_session_factory(request)
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
