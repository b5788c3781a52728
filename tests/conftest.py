"""
Bloglist — Test Configuration (conftest.py)
============================================

What:  Shared pytest fixtures for the whole suite.
How:   Each test gets a fresh in-memory SQLite database (aiosqlite) with the
       schema created by database.create_all(). The FastAPI app's session
       dependency is overridden to use it, and an httpx AsyncClient talks to
       the app through ASGITransport (no server process).

Fixture Hierarchy (all function-scoped):
    db_engine ─ session_factory ─┬─ db_session         (service tests)
                                 ├─ test_client        (API tests)
                                 ├─ root_user          (seeded account)
                                 │    └─ auth_headers  (bearer header for root)
                                 ├─ initial_blogs      (two seeded blogs owned by root)
                                 └─ blogs_in_db        (helper: current blog rows)
"""

import os

# Settings are read at import time, so the environment must be ready first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["JWT_SECRET"] = "test-secret-not-for-production"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["RATE_LIMIT_REQUESTS"] = "100000"

from typing import AsyncGenerator, Dict, List
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bloglist.database import build_engine, build_session_factory, create_all, get_db_session
from bloglist.models.blog import Blog
from bloglist.models.user import User
from bloglist.services.auth_service import hash_password


INITIAL_BLOGS = [
    {
        "title": "React patterns",
        "author": "Michael Chan",
        "url": "https://reactpatterns.com/",
        "likes": 7,
    },
    {
        "title": "Go To Statement Considered Harmful",
        "author": "Edsger W. Dijkstra",
        "url": "http://www.u.arizona.edu/~rubinson/copyright_violations/Go_To_Considered_Harmful.html",
        "likes": 0,
    },
]

ROOT_PASSWORD = "password"


# ══════════════════════════════════════════════════════════════════════════
# Database
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    """A private in-memory database with all tables created."""
    engine = build_engine("sqlite+aiosqlite://")
    await create_all(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return build_session_factory(db_engine)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """A session for calling services directly; committed on teardown."""
    async with session_factory() as session:
        yield session
        await session.commit()


@pytest.fixture
def mock_db_session():
    """
    A MagicMock standing in for AsyncSession, for tests that force
    database failures without a database.
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# Application
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTPX AsyncClient wired to the FastAPI app, with the request session
    dependency pointed at this test's database.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/api/blogs")
            assert response.status_code == 200
    """
    from bloglist.main import app

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


# ══════════════════════════════════════════════════════════════════════════
# Seed Data
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def root_user(session_factory) -> User:
    async with session_factory() as session:
        user = User(
            username="root",
            name="adminko",
            password_hash=hash_password(ROOT_PASSWORD),
            blogs=[],
        )
        session.add(user)
        await session.commit()
        return user


@pytest_asyncio.fixture
async def initial_blogs(session_factory, root_user) -> List[Blog]:
    """The two INITIAL_BLOGS, saved in order and owned by root."""
    saved = []
    async with session_factory() as session:
        owner = await session.get(User, root_user.id)
        for data in INITIAL_BLOGS:
            blog = Blog(**data, user_id=owner.id)
            session.add(blog)
            # Separate flushes keep created_at (and so listing order) distinct
            await session.flush()
            saved.append(blog)
        await session.commit()
    return saved


@pytest_asyncio.fixture
async def auth_headers(test_client, root_user) -> Dict[str, str]:
    """Authorization header for root, obtained through POST /api/login."""
    response = await test_client.post(
        "/api/login",
        json={"username": "root", "password": ROOT_PASSWORD},
    )
    assert response.status_code == 200
    return {"Authorization": f"bearer {response.json()['token']}"}


@pytest.fixture
def blogs_in_db(session_factory):
    """Returns an async helper reading the current blog rows."""

    async def _blogs_in_db() -> List[Blog]:
        async with session_factory() as session:
            result = await session.execute(select(Blog).order_by(Blog.created_at))
            return list(result.scalars().all())

    return _blogs_in_db
