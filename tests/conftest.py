"""Shared fixtures: fresh in-memory database per test and an ASGI test client.

The get_db dependency is overridden so every request in a test shares the
test engine. Uploaded images land in a per-test temporary directory.
"""

import os
import tempfile

# Must be set before vuestagram modules read their configuration
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///test.db"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="vuestagram-uploads-")
os.environ["SECRET_KEY"] = "test-secret-key-that-is-long-enough-for-hs256"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from vuestagram.core import config
from vuestagram.core.security import hash_password
from vuestagram.db.base import Base
from vuestagram.db.models import Board, User
from vuestagram.db.session import get_db
from vuestagram.main import app

PASSWORD = "secret-pw"


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "UPLOAD_DIR", str(tmp_path))
    return tmp_path


@pytest.fixture
async def client(test_session_factory):
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
async def user(test_db):
    return await create_user(test_db, "alice", "Alice")


async def create_user(db, account: str, name: str, password: str = PASSWORD) -> User:
    user = User(account=account, name=name, password=hash_password(password))
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def seed_boards(db, user: User, count: int) -> list[int]:
    """Insert boards oldest first and return their ids."""
    boards = [
        Board(user_id=user.id, content=f"post {n}", img=f"img/seed{n}.png")
        for n in range(count)
    ]
    db.add_all(boards)
    await db.commit()
    return [b.id for b in boards]


async def login(client, account: str = "alice", password: str = PASSWORD) -> dict:
    response = await client.post("/api/login", json={"account": account, "password": password})
    assert response.status_code == 200, response.text
    return response.json()


async def auth_headers(client, account: str = "alice") -> dict:
    body = await login(client, account)
    return {"Authorization": f"Bearer {body['accessToken']}"}
