import json
import os

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

# ------------------------------------------------------------------
# FORCE TESTING CONFIG
# Must be set BEFORE importing hostel_api.main so Settings() sees it.
# ------------------------------------------------------------------
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ["BCRYPT_ROUNDS"] = "4"

from hostel_api.main import app
from hostel_api.api.deps import get_db_session, get_roster
from hostel_api.core.config import settings
from hostel_api.services.roster_service import RosterClient, roster_key


class FakeRedis:
    """Just enough of redis.asyncio.Redis for the roster client."""

    def __init__(self, data=None):
        self.data = dict(data or {})
        self.requested = []

    async def get(self, key):
        self.requested.append(key)
        return self.data.get(key)

    async def aclose(self):
        pass


ROSTER = {
    "11232763": {"name": "Asha Verma", "gender": "F"},
    "11232764": {"full_name": "Rohan Mehta", "gender": "M"},
    "11232765": {"full_name": "Kabir Singh", "gender": "M"},
    "11232766": {"full_name": "Meera Iyer", "gender": "F"},
    # Broken entries
    "22222222": {"name": "No Gender"},
    "33333333": "not json",
}


@pytest.fixture
def fake_redis():
    data = {}
    for roll_no, entry in ROSTER.items():
        data[roster_key(roll_no)] = entry if isinstance(entry, str) else json.dumps(entry)
    return FakeRedis(data)


@pytest.fixture(autouse=True)
def modes():
    """Each test starts from the default modes and may change them."""
    saved = (settings.SIGNUP_MODE, settings.PROFILE_UPDATE_MODE, settings.EXPOSE_DB_ERRORS)
    settings.SIGNUP_MODE = "roster"
    settings.PROFILE_UPDATE_MODE = "dynamic"
    settings.EXPOSE_DB_ERRORS = False
    yield settings
    settings.SIGNUP_MODE, settings.PROFILE_UPDATE_MODE, settings.EXPOSE_DB_ERRORS = saved


@pytest_asyncio.fixture
async def db_engine():
    # In-memory SQLite shared by every session of one test
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    session_factory = async_sessionmaker(bind=db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_engine, fake_redis):
    session_factory = async_sessionmaker(bind=db_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db_session():
        async with session_factory() as session:
            yield session

    async def override_get_roster():
        return RosterClient(fake_redis)

    app.dependency_overrides[get_db_session] = override_get_db_session
    app.dependency_overrides[get_roster] = override_get_roster

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def signup_student(client):
    async def _signup(**overrides):
        payload = {
            "roll_no": "11232763",
            "mobile_no": "9876543210",
            "password": "secret1",
        }
        payload.update(overrides)
        return await client.post("/api/signup", json=payload)

    return _signup
