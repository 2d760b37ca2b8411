"""Pytest configuration and shared fixtures"""

import os

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
import pytest_asyncio
import shapely
from typing import AsyncGenerator
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from streammap.main import app
from streammap.database import Base, get_db
from streammap.models import Organization, User, State
from streammap.services.auth_service import AuthService
from streammap.services.project_service import ProjectService


# In-memory database shared by every connection of the test engine
TEST_DATABASE_URL = "sqlite+aiosqlite://"

# Square covering lon -122..-120, lat 43..45
SAMPLE_STATE_POLYGON = shapely.set_srid(
    shapely.from_wkt("POLYGON ((-122 43, -120 43, -120 45, -122 45, -122 43))"), 4326
)


@pytest.fixture
def client():
    """FastAPI test client fixture"""
    return TestClient(app)


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create a test database engine"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for testing"""
    async_session_maker = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def async_client(db_session: AsyncSession):
    """Create async test client with database override"""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def sample_organization(db_session: AsyncSession) -> Organization:
    """Create a sample organization for testing"""
    org = Organization(name="Test Watershed Council")
    db_session.add(org)
    await db_session.commit()
    await db_session.refresh(org)
    return org


@pytest_asyncio.fixture
async def sample_user(db_session: AsyncSession) -> User:
    """Create a sample project author for testing"""
    user = User(
        email="test@example.com",
        first_name="Test",
        last_name="User",
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest_asyncio.fixture
async def other_user(db_session: AsyncSession) -> User:
    """Create a second user who did not author any project"""
    user = User(email="other@example.com", first_name="Other", last_name="User")
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest_asyncio.fixture
async def sample_state(db_session: AsyncSession) -> State:
    """Create a sample state covering lon -122..-120, lat 43..45"""
    state = State(name="Oregon", geom=SAMPLE_STATE_POLYGON)
    db_session.add(state)
    await db_session.commit()
    await db_session.refresh(state)
    return state


@pytest.fixture
def auth_headers(sample_user: User) -> dict:
    """Create authentication headers for test user"""
    token = AuthService.create_access_token(
        user_id=str(sample_user.id),
        email=sample_user.email,
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def project_attributes() -> dict:
    """Valid raw attributes for a project inside the sample state"""
    return {
        "name": "Whychus Creek Restoration",
        "stream_name": "Whychus Creek",
        "watershed": "Upper Deschutes",
        "implementation_date": "2017-10-05",
        "primary_contact": "Field Crew",
        "narrative": "Beaver dam analogs installed along a degraded reach.",
        "structure_description": "Post-assisted log structures",
        "url": "https://example.org/projects/whychus",
        "length": 15234,
        "number_of_structures": 42,
        "latitude": "44.0429694",
        "longitude": "-121.333482",
    }


@pytest.fixture
def project_service(db_session: AsyncSession) -> ProjectService:
    """Project service bound to the test session"""
    return ProjectService(db_session)
