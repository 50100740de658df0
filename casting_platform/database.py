"""Database engine, sessions and shared column helpers."""

import logging
import os
from datetime import datetime, timezone
from typing import Any, AsyncGenerator, Dict

from dotenv import load_dotenv
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

load_dotenv()

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base shared by every table of the platform."""

    pass


DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL:
    raise ValueError("DATABASE_URL environment variable is required")


def engine_options(url: str) -> Dict[str, Any]:
    """Engine keyword arguments for a database URL.

    Pool sizing only applies to server databases; SQLite keeps the
    dialect's default pool.
    """
    options: Dict[str, Any] = {
        "echo": os.getenv("SQL_DEBUG", "false").lower() == "true",
        "future": True,
    }
    if make_url(url).get_backend_name() != "sqlite":
        options.update(
            pool_pre_ping=True,
            pool_size=int(os.getenv("DB_POOL_SIZE", "5")),
            max_overflow=int(os.getenv("DB_MAX_OVERFLOW", "10")),
        )
    return options


engine = create_async_engine(DATABASE_URL, **engine_options(DATABASE_URL))

AsyncSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session. Services decide when to commit."""
    async with AsyncSessionLocal() as session:
        yield session


async def init_db() -> None:
    # Tables come from the Alembic migrations, nothing is created here
    logger.info("Using %s database", engine.dialect.name)


async def close_db() -> None:
    await engine.dispose()


def utc_now() -> datetime:
    """Timezone-aware UTC timestamp for column defaults and stamps."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive timestamps (SQLite drops the offset on read)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
