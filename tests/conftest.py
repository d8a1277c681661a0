"""Test fixtures and configuration."""

import pytest
from unittest.mock import AsyncMock, MagicMock

from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from src.database import get_db
from src.main import app
from src.models.base import Base
from src.repositories.submission import SubmissionRepository
from src.schemas.submission import SubmissionCreate


@pytest.fixture
async def db_engine():
    """In-memory SQLite shared by every session of one test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    """A session for direct repository tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def repo(db):
    return SubmissionRepository(db)


@pytest.fixture
async def client(session_factory):
    """HTTP client against the app with get_db bound to the test database."""

    async def _get_test_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_test_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def mock_db():
    """Mock AsyncSession for failure injection."""
    session = MagicMock()
    session.add = MagicMock()
    session.flush = AsyncMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    return session


@pytest.fixture
def step1_payload():
    """A complete step 1 form, as posted by the site."""
    return {
        "userName": "Ahmed Ali",
        "phoneNumber": "0551234567",
        "idNumber": "1012345678",
        "offerType": "new",
        "regType": "form",
        "birthDate": "1990-04-12",
        "serialNumber": "123456789",
        "carYear": 2021,
    }


@pytest.fixture
def step1_data(step1_payload):
    return SubmissionCreate.model_validate(step1_payload)
