"""Shared fixtures for the motor skills backend tests.

Uses SQLite (aiosqlite) in memory, no PostgreSQL required.
Set TEST_DATABASE_URL to override (e.g. for CI with real PostgreSQL).
"""

import os
import uuid
from datetime import date

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite://")

# Ensure settings can be loaded without .env
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-unit-tests")

from motorskills.database import Base  # noqa: E402


# ---------------------------------------------------------------------------
# Engine: fresh schema per test (SQLite in-memory with StaticPool)
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture()
async def db_engine():
    import motorskills.models  # noqa: F401 (populate Base.metadata)

    engine_kwargs = {}
    if TEST_DATABASE_URL.startswith("sqlite"):
        engine_kwargs = {
            "connect_args": {"check_same_thread": False},
            "poolclass": StaticPool,
        }
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, **engine_kwargs)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


# ---------------------------------------------------------------------------
# Reset rate-limiter counters before every test
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _reset_rate_limits():
    """Clear in-memory rate-limit counters so tests never block each other."""
    from motorskills.core.rate_limit import limiter

    storage = getattr(limiter, "_storage", None)
    if storage is not None and hasattr(storage, "reset"):
        storage.reset()


# ---------------------------------------------------------------------------
# Per-test session
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture()
async def db_session(db_engine):
    session_factory = async_sessionmaker(
        bind=db_engine, class_=AsyncSession, expire_on_commit=False,
    )
    async with session_factory() as session:
        yield session
        await session.rollback()


# ---------------------------------------------------------------------------
# HTTP test client
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture()
async def client(db_session: AsyncSession):
    from motorskills.database import get_db
    from motorskills.main import app

    async def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Identities, profiles and domain rows
# ---------------------------------------------------------------------------

@pytest.fixture()
def auth_headers():
    """Return a factory building a bearer header for an identity."""
    from motorskills.core.security import create_access_token

    def _headers(identity_id: uuid.UUID, email: str) -> dict[str, str]:
        token = create_access_token({"sub": str(identity_id), "email": email})
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture()
def make_profile(db_session: AsyncSession):
    """Return a factory inserting a Profile with the given role."""
    from motorskills.models.profile import Profile

    async def _make(role: str = "coach", email: str | None = None, full_name: str = "Test Coach"):
        suffix = uuid.uuid4().hex[:8]
        profile = Profile(
            id=uuid.uuid4(),
            role=role,
            full_name=full_name,
            email=email or f"{role}-{suffix}@test.example",
        )
        db_session.add(profile)
        await db_session.flush()
        await db_session.refresh(profile)
        return profile

    return _make


@pytest_asyncio.fixture()
async def coach(make_profile, auth_headers):
    """Registered coach. Keys: profile, headers, id, email."""
    profile = await make_profile("coach")
    return {
        "profile": profile,
        "id": str(profile.id),
        "email": profile.email,
        "headers": auth_headers(profile.id, profile.email),
    }


@pytest.fixture()
def parent_identity(auth_headers):
    """Signed-in identity without a profile. Keys: id, email, headers."""
    identity_id = uuid.uuid4()
    email = f"parent-{identity_id.hex[:8]}@test.example"
    return {
        "id": identity_id,
        "email": email,
        "headers": auth_headers(identity_id, email),
    }


@pytest_asyncio.fixture()
async def child(db_session: AsyncSession, coach):
    from motorskills.models.child import Child

    row = Child(
        owner_profile_id=coach["profile"].id,
        first_name="Taro",
        last_name="Yamada",
        birthdate=date(2018, 4, 10),
        grade="K2",
    )
    db_session.add(row)
    await db_session.flush()
    await db_session.refresh(row)
    return row


@pytest.fixture()
def make_assessment(db_session: AsyncSession, coach):
    """Return a factory inserting an assessment with FMS scores for a child."""
    from motorskills.models.assessment import Assessment, FmsScore, SmcScore

    async def _make(child_id, assessed_at=None, scores: dict | None = None, smc: dict | None = None):
        values = {
            "run": 3, "balance_beam": 3, "jump": 3, "throw": 3,
            "catch": 3, "dribble": 3, "roll": 3,
        }
        values.update(scores or {})
        assessment = Assessment(
            child_id=child_id,
            coach_id=coach["profile"].id,
            memo="Good effort",
            fms_score=FmsScore(**values),
        )
        if assessed_at is not None:
            assessment.assessed_at = assessed_at
        if smc is not None:
            assessment.smc_score = SmcScore(**smc)
        db_session.add(assessment)
        await db_session.flush()
        await db_session.refresh(assessment)
        return assessment

    return _make


@pytest_asyncio.fixture()
async def assessment(make_assessment, child):
    return await make_assessment(child.id)
