import os

# Settings are read at import time, so they must be in place before the app loads
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-signing-tokens-0123")

from typing import Any, AsyncGenerator, Awaitable, Callable, Generator  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402
from uuid import uuid4  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

import casting_platform.models.db  # noqa: E402,F401
from casting_platform.database import Base, get_db  # noqa: E402
from casting_platform.main import app  # noqa: E402
from casting_platform.models.api.castings import CastingResponse  # noqa: E402
from casting_platform.models.api.users import (  # noqa: E402
    DirectorProfileResponse,
    TalentProfileResponse,
    UserResponse,
    WriterProfileResponse,
)
from casting_platform.models.enums import UserRole  # noqa: E402
from casting_platform.repositories.casting_repository import (  # noqa: E402
    CastingRepository,
)
from casting_platform.repositories.profile_repository import (  # noqa: E402
    DirectorProfileRepository,
    TalentProfileRepository,
    WriterProfileRepository,
)
from casting_platform.repositories.user_repository import UserRepository  # noqa: E402
from tests.factories import build_casting, build_user  # noqa: E402

MakeUser = Callable[..., Awaitable[UserResponse]]


@pytest.fixture(scope="function")
async def test_engine(tmp_path: Any) -> AsyncGenerator[AsyncEngine, None]:
    """A fresh SQLite database file per test."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        echo=os.getenv("SQL_DEBUG", "false").lower() == "true",
        future=True,
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Clean up
    await engine.dispose()


@pytest.fixture(scope="function")
def session_maker(test_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture(scope="function")
async def test_db(
    session_maker: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session for integration tests."""
    async with session_maker() as session:
        yield session


@pytest.fixture(scope="function")
async def mock_db() -> AsyncGenerator[AsyncMock, None]:
    """Create a mock database session for unit tests."""
    mock_session = AsyncMock()
    mock_session.commit = AsyncMock()
    mock_session.rollback = AsyncMock()
    mock_session.close = AsyncMock()
    mock_session.refresh = AsyncMock()
    mock_session.execute = AsyncMock()
    mock_session.add = MagicMock()  # add is sync, not async

    yield mock_session


@pytest.fixture
def make_user(session_maker: async_sessionmaker[AsyncSession]) -> MakeUser:
    """Factory persisting a user together with the profile for their role."""

    async def _make_user(
        role: UserRole,
        first_name: str = "Test",
        last_name: str = "User",
        identification_status: str = "not_submitted",
        **profile: Any,
    ) -> UserResponse:
        async with session_maker() as session:
            user = await UserRepository(session).create(
                build_user(
                    role,
                    first_name=first_name,
                    last_name=last_name,
                    identification_status=identification_status,
                )
            )
            if role == UserRole.TALENT:
                await TalentProfileRepository(session).create(
                    TalentProfileResponse(id=uuid4(), user_id=user.id, **profile)
                )
            elif role == UserRole.CASTING_DIRECTOR:
                await DirectorProfileRepository(session).create(
                    DirectorProfileResponse(id=uuid4(), user_id=user.id, **profile)
                )
            elif role == UserRole.JOURNALIST:
                await WriterProfileRepository(session).create(
                    WriterProfileResponse(id=uuid4(), user_id=user.id, **profile)
                )
        return user

    return _make_user


@pytest.fixture
def make_casting(
    session_maker: async_sessionmaker[AsyncSession],
) -> Callable[..., Awaitable[CastingResponse]]:
    """Factory persisting a casting, active and open by default."""

    async def _make_casting(
        director: UserResponse, **overrides: Any
    ) -> CastingResponse:
        async with session_maker() as session:
            return await CastingRepository(session).create(
                build_casting(director, **overrides)
            )

    return _make_casting


@pytest.fixture(scope="function")
async def api_client(
    session_maker: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app, backed by the per-test database."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def client() -> Generator[TestClient, Any, None]:
    """Create a test client for the FastAPI app."""
    with TestClient(app) as test_client:
        yield test_client
