"""Database session management."""

import ssl
from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.config import get_settings

settings = get_settings()


def connect_args() -> dict:
    """Driver arguments shared by the app engine and migrations (TLS for hosted Postgres)."""
    if settings.database_url.startswith("postgresql") and settings.database_requires_ssl:
        return {"ssl": ssl.create_default_context()}
    return {}


engine_kwargs: dict = {"echo": settings.debug, "pool_pre_ping": True, "connect_args": connect_args()}
if settings.database_url.startswith("postgresql"):
    engine_kwargs.update(pool_size=5, max_overflow=10)

# Create async engine
engine = create_async_engine(settings.database_url, **engine_kwargs)

# Session factory
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
