"""
Pytest configuration: in-memory SQLite, fast bcrypt, no demo seeding.
"""

import os
import tempfile

# Set before any ruralcare module reads its settings
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SEED_DEMO_DATA"] = "false"
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["ADMIN_USERNAME"] = "admin"
os.environ["ADMIN_PASSWORD"] = "01"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="ruralcare-uploads-")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from ruralcare.database import Base, get_db
import ruralcare.models  # noqa: F401


@pytest_asyncio.fixture
async def engine():
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
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    from ruralcare.main import app

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def admin_headers(client):
    resp = await client.post("/api/auth/login/admin", json={"username": "admin", "password": "01"})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


@pytest.fixture
def failing_prescription_insert():
    """Inserting a Prescription violates NOT NULL on doctor_id while active."""
    from sqlalchemy import event
    from ruralcare.models.prescription import Prescription

    def drop_doctor(mapper, connection, target):
        target.doctor_id = None

    event.listen(Prescription, "before_insert", drop_doctor)
    yield
    event.remove(Prescription, "before_insert", drop_doctor)
