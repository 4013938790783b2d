"""
Database connection and session management.

Key concepts:
- We use SQLAlchemy 2.0's async API (asyncpg for PostgreSQL, aiosqlite
  for local development and the test suite)
- get_db() is a "dependency" that FastAPI injects into route handlers -
  it provides a session and ensures cleanup after each request
"""

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from manual_api.config import settings


def _engine_options(url: str) -> dict:
    """Pool settings per backend.

    SQLite connections are cheap and bound to the event loop that opened
    them, so we don't pool them at all.
    """
    if url.startswith("sqlite"):
        return {"poolclass": NullPool}
    return {"pool_size": 5, "max_overflow": 10}


# echo=True logs all SQL (turn on DEBUG in .env when you need it)
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    **_engine_options(settings.DATABASE_URL),
)


def _unicode_lower(value):
    return value.lower() if value is not None else None


if settings.DATABASE_URL.startswith("sqlite"):
    # SQLite's built-in lower() only folds ASCII; title search needs
    # "École" to match "école" the same way Postgres does
    @event.listens_for(engine.sync_engine, "connect")
    def _register_sqlite_functions(dbapi_connection, connection_record):
        dbapi_connection.create_function("lower", 1, _unicode_lower)

# expire_on_commit=False keeps objects usable after commit; without it,
# touching an attribute triggers a lazy load, which fails under async.
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


async def get_db():
    """FastAPI dependency that provides a database session.

    Usage in a route:
        @router.get("/items")
        async def get_items(db: AsyncSession = Depends(get_db)):
            ...

    The session is closed when the request finishes, even on error.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_db():
    """Create all tables defined by our models.

    Called once at startup. In production, you'd use Alembic migrations
    instead, but for a single table this is simpler.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
