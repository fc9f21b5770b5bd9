"""Async SQLAlchemy engine and session factory.

Learn: The user store issues at most three short queries per login and
one per resolved identity, so the pool stays small and is sized from
settings (QUIZAPP_DB_POOL_SIZE / QUIZAPP_DB_MAX_OVERFLOW). pool_pre_ping
drops connections the server closed while idle, so a login after a quiet
night doesn't surface as a STORAGE failure.
"""

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from quizapp.config import Settings, settings


def build_engine(cfg: Settings):
    return create_async_engine(
        cfg.database_url,
        echo=cfg.debug,
        pool_size=cfg.db_pool_size,
        max_overflow=cfg.db_max_overflow,
        pool_recycle=cfg.db_pool_recycle_seconds,
        pool_pre_ping=True,
    )


engine = build_engine(settings)

# Repositories commit explicitly; expire_on_commit=False keeps the
# returned rows readable after the commit.
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncSession:
    """FastAPI dependency: one session per request, closed on exit."""
    async with async_session_factory() as session:
        yield session
