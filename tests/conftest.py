"""
Shared fixtures for the GymTracker test suite.

Strategy:
- Every test gets its own aiosqlite database file under tmp_path, created from
  Base.metadata and seeded with the reference catalog.
- The app is built with create_application(session_factory=...) so requests hit
  that database; no lifespan events run under ASGITransport.
- Credentials are issued with core.security.create_access_token.
"""

import os

os.environ["DATABASE_DSN"] = "sqlite+aiosqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["ENVIRONMENT"] = "test"

from collections.abc import AsyncGenerator  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import select  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker  # noqa: E402

from gymtracker.core.clock import utc_today  # noqa: E402
from gymtracker.core.config import get_settings  # noqa: E402
from gymtracker.core.security import create_access_token, hash_password  # noqa: E402
from gymtracker.db.base import Base  # noqa: E402
from gymtracker.db.seed import seed_catalog  # noqa: E402
from gymtracker.db.session import build_engine, build_session_maker  # noqa: E402
from gymtracker.main import create_application  # noqa: E402
from gymtracker.models import Equipment, Exercise, NfcTag, User  # noqa: E402
from gymtracker.schemas.user import CurrentUser  # noqa: E402

USER_PASSWORD = "secret123"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def make_auth_headers(user: CurrentUser) -> dict:
    """Authorization header with a valid credential for ``user``."""
    return {"Authorization": f"Bearer {create_access_token(user)}"}


async def create_user(
    session_factory: async_sessionmaker[AsyncSession],
    username: str,
    email: str,
    password: str = USER_PASSWORD,
) -> CurrentUser:
    async with session_factory() as db:
        async with db.begin():
            user = User(
                username=username,
                email=email,
                password_hash=hash_password(password),
                name=username.title(),
                join_date=utc_today(),
            )
            db.add(user)
            await db.flush()
            return CurrentUser(id=user.id, username=user.username, email=user.email)


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------

@pytest.fixture
async def session_factory(tmp_path) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Fresh schema in a throw-away SQLite file, seeded with the reference catalog."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'gymtracker.db'}", get_settings())
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = build_session_maker(engine)
    async with factory() as db:
        async with db.begin():
            await seed_catalog(db)
    yield factory
    await engine.dispose()


@pytest.fixture
async def catalog(session_factory) -> dict:
    """Ids of the seeded rows the tests use, plus one registered tag ``T-BENCH``."""
    async with session_factory() as db:
        async with db.begin():
            rows = await db.execute(select(Exercise.name, Exercise.id, Exercise.category_id))
            exercises = {name: (exercise_id, category_id) for name, exercise_id, category_id in rows.all()}
            db.add(
                NfcTag(
                    tag_id="T-BENCH",
                    equipment_id="BP001",
                    exercise_id=exercises["Bench Press"][0],
                    date_registered=utc_today(),
                )
            )
            equipment = (await db.execute(select(Equipment.id))).scalars().all()
    return {
        "bench_press": exercises["Bench Press"][0],
        "chest_category": exercises["Bench Press"][1],
        "squat": exercises["Squat"][0],
        "leg_press": exercises["Leg Press"][0],
        "equipment": set(equipment),
    }


@pytest.fixture
async def user(session_factory) -> CurrentUser:
    return await create_user(session_factory, "lifter", "lifter@example.com")


@pytest.fixture
async def other_user(session_factory) -> CurrentUser:
    return await create_user(session_factory, "spotter", "spotter@example.com")


# ---------------------------------------------------------------------------
# HTTP client
# ---------------------------------------------------------------------------

@pytest.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    app = create_application(session_factory=session_factory)
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
