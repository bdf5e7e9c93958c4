import logging

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool, StaticPool

logger = logging.getLogger(__name__)

Base = declarative_base()


def get_database_type(url: str) -> str:
    """
    Extract database type from connection URL.

    Args:
        url: Database connection URL

    Returns:
        "sqlite" or "postgresql" or "unknown"
    """
    if url.startswith("sqlite"):
        return "sqlite"
    elif url.startswith("postgresql"):
        return "postgresql"
    return "unknown"


def is_memory_url(url: str) -> bool:
    """Check whether a SQLite URL points at an in-memory database."""
    return get_database_type(url) == "sqlite" and (":memory:" in url or url.rstrip("/").endswith("sqlite+aiosqlite:"))


def create_engine(url: str, echo: bool = False) -> AsyncEngine:
    """
    Build an async engine with database-specific settings.

    In-memory SQLite keeps a single shared connection (StaticPool) so every
    session sees the same database. File-based SQLite opens a connection per
    use (NullPool). Anything else gets a regular connection pool.

    Args:
        url: SQLAlchemy async database URL
        echo: Log every SQL statement

    Returns:
        Configured AsyncEngine
    """
    database_type = get_database_type(url)

    if database_type == "sqlite":
        engine = create_async_engine(
            url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool if is_memory_url(url) else NullPool,
        )

        # Enable foreign key constraints for SQLite
        @event.listens_for(engine.sync_engine, "connect")
        def set_sqlite_pragma(dbapi_conn, connection_record):
            """Enable foreign key constraints in SQLite."""
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        logger.info(f"Database configured: SQLite ({'in-memory' if is_memory_url(url) else 'file-based'})")
    else:
        engine = create_async_engine(
            url,
            echo=echo,
            pool_size=5,
            max_overflow=10,
            pool_pre_ping=True,  # Verify connections before use
            pool_recycle=3600,  # Recycle connections after 1 hour
        )
        logger.info(f"Database configured: {database_type}")

    return engine


def create_session_factory(engine: AsyncEngine, session_class=AsyncSession) -> async_sessionmaker:
    """Session factory with the defaults the store relies on."""
    return async_sessionmaker(
        engine,
        class_=session_class,
        expire_on_commit=False,
        autoflush=False,
    )


async def init_db(engine: AsyncEngine) -> None:
    """Create any missing tables."""
    # Models must be registered on Base before create_all
    from herocache.infrastructure.database import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
