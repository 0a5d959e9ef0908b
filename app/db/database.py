"""Database engine and session management."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from logging import getLogger

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession as SQLModelAsyncSession

from app.configs import file_logger, pool_kwargs, settings

logger = file_logger(getLogger(__name__))


def _configure_engine_events(engine: AsyncEngine) -> None:
    """Configure connection pool events for monitoring."""

    @event.listens_for(engine.sync_engine, "connect")
    def on_connect(dbapi_connection: object, connection_record: object) -> None:
        logger.debug("New database connection established")

    @event.listens_for(engine.sync_engine, "checkout")
    def on_checkout(
        dbapi_connection: object,
        connection_record: object,
        connection_proxy: object,
    ) -> None:
        logger.debug("Connection checked out from pool")

    @event.listens_for(engine.sync_engine, "checkin")
    def on_checkin(dbapi_connection: object, connection_record: object) -> None:
        logger.debug("Connection returned to pool")


def _enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection."""

    @event.listens_for(engine.sync_engine, "connect")
    def on_connect(dbapi_connection: object, connection_record: object) -> None:
        cursor = dbapi_connection.cursor()  # type: ignore[attr-defined]
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def build_engine(database_url: str | None = None) -> AsyncEngine:
    """
    Create an async engine for the given (or configured) database URL.

    Args:
        database_url: Database URL (defaults to `settings.DATABASE_URL`)

    Returns:
        AsyncEngine: Configured engine
    """
    url = database_url or settings.DATABASE_URL
    new_engine = create_async_engine(url, echo=settings.DATABASE_ECHO, **pool_kwargs(url))
    if url.startswith("sqlite"):
        _enable_sqlite_foreign_keys(new_engine)
    if settings.DEBUG:
        _configure_engine_events(new_engine)
    return new_engine


def build_session_maker(bind: AsyncEngine) -> async_sessionmaker[SQLModelAsyncSession]:
    return async_sessionmaker(
        bind,
        class_=SQLModelAsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


engine: AsyncEngine = build_engine()

async_session_maker: async_sessionmaker[SQLModelAsyncSession] = build_session_maker(engine)


async def get_session() -> AsyncGenerator[AsyncSession]:
    """
    Dependency for getting async database sessions.

    This function is used as a FastAPI dependency to provide
    database sessions to route handlers.

    Yields:
        AsyncSession: Database session

    Example:
        ```python
        @app.get("/posts")
        async def get_posts(session: AsyncSession = Depends(get_session)):
            result = await session.execute(select(PostDB))
            return result.scalars().all()
        ```
    """
    async with transaction() as session:
        yield session


@asynccontextmanager
async def transaction() -> AsyncGenerator[AsyncSession]:
    """
    Context manager for explicit transaction management.

    Yields:
        AsyncSession: Database session within a transaction

    Example:
        ```python
        async with transaction() as session:
            session.add(PostDB(title="Hello", ...))
            # Commits on successful exit, rolls back on exception
        ```
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            logger.exception("Transaction error")
            raise
        finally:
            await session.close()


async def init_db(bind: AsyncEngine | None = None) -> None:
    """
    Initialize database tables.

    Creates all tables defined in SQLModel models. Called on application
    startup; production schemas are managed by Alembic.

    Args:
        bind: Engine to initialize (defaults to the application engine)
    """
    async with (bind or engine).begin() as conn:
        # Import all models to ensure they are registered
        from app.models import FeaturedPostDB, PostDB, PostTagDB  # noqa: F401, PLC0415

        await conn.run_sync(SQLModel.metadata.create_all)
        logger.info("db connected")


async def ping_db() -> bool:
    """
    Check that the database answers a trivial query.

    Returns:
        bool: True if the database is reachable
    """
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:  # noqa: BLE001
        logger.warning(f"db connection failed: {e}")
        return False
    return True


async def close_db() -> None:
    """
    Close database connections.

    This function should be called on application shutdown
    to properly close all database connections.
    """
    await engine.dispose()
    logger.info("Database connections closed")
