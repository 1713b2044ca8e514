"""
Pytest fixtures for GranteeTrack backend tests.
"""

import os
from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

# Set test environment variables before importing app
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-testing")
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DEBUG", "false")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

DEFAULT_PASSWORD = "correct-horse-battery"


@pytest.fixture
async def engine(tmp_path) -> AsyncGenerator[Any, None]:
    """A fresh SQLite database file with the full schema."""
    from db.session import create_engine_for_url, create_schema

    test_engine = create_engine_for_url(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await create_schema(test_engine)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine: Any) -> Any:
    from db.session import create_session_factory

    return create_session_factory(engine)


@pytest.fixture
async def db_session(session_factory: Any) -> AsyncGenerator[Any, None]:
    """Session for seeding and inspecting the test database."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def app(session_factory: Any) -> AsyncGenerator[Any, None]:
    """FastAPI application wired to the test database."""
    from db.session import get_db
    from main import app as fastapi_app

    async def override_get_db() -> AsyncGenerator[Any, None]:
        async with session_factory() as session:
            yield session

    fastapi_app.dependency_overrides[get_db] = override_get_db
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
async def client(app: Any) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def mock_db_session() -> AsyncMock:
    """Create mock database session."""
    session = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.flush = AsyncMock()
    session.execute = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def user_factory(db_session: Any) -> Callable[..., Awaitable[Any]]:
    """Create committed users; every user gets DEFAULT_PASSWORD unless told otherwise."""
    from core.security import hash_password
    from repositories.user_repository import UserRepository

    counter = {"n": 0}

    async def create(
        email: str | None = None,
        name: str | None = None,
        role: str = "user",
        password: str = DEFAULT_PASSWORD,
        **profile: Any,
    ) -> Any:
        counter["n"] += 1
        user = await UserRepository(db_session).create(
            email=email or f"user{counter['n']}@example.org",
            password_hash=hash_password(password),
            name=name or f"User {counter['n']}",
            role=role,
            **profile,
        )
        await db_session.commit()
        return user

    return create


@pytest.fixture
def login_as(client: AsyncClient) -> Callable[[Any], None]:
    """Put a valid session cookie for `user` into the client's cookie jar."""
    from core.config import settings
    from core.security import encode_session
    from schemas.converters import user_model_to_session_record

    def _login(user: Any) -> None:
        client.cookies.set(
            settings.SESSION_COOKIE_NAME,
            encode_session(user_model_to_session_record(user)),
        )

    return _login


@pytest.fixture
def poll_factory(db_session: Any) -> Callable[..., Awaitable[Any]]:
    """Create a committed poll through the poll service; returns the API shape."""
    from services.poll_service import PollService

    async def create(
        creator: Any,
        question: str = "Which venue for the general assembly?",
        options: list[str] | None = None,
        description: str | None = None,
    ) -> Any:
        return await PollService(db_session).create_poll(
            creator_id=str(creator.id),
            question=question,
            options=options or ["City hall", "Gymnasium", "Online"],
            description=description,
        )

    return create
