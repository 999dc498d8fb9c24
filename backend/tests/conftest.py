"""
Pytest configuration and fixtures
"""
import os

# Settings are read at import time, so the environment must be in place first.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["AUTH_JWT_SECRET"] = "test-secret"
os.environ["ENVIRONMENT"] = "test"
os.environ["ADMIN_EMAILS"] = "admin@example.com"
os.environ["INSTRUCTOR_EMAILS"] = "teacher@example.com"
os.environ["ANTHROPIC_API_KEY"] = ""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import models  # noqa: F401
from database import Base, get_db
from main import app
from services.auth import create_access_token
from services.quiz_generator import get_quiz_generator


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    """HTTP client against the app with the database dependency overridden."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def auth_headers(email: str, user_id: str | None = None) -> dict:
    token = create_access_token({"id": user_id or f"user-{email}", "email": email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers():
    return auth_headers("admin@example.com")


@pytest.fixture
def instructor_headers():
    return auth_headers("teacher@example.com")


@pytest.fixture
def student_headers():
    return auth_headers("student@example.com")


@pytest.fixture
def other_student_headers():
    return auth_headers("classmate@example.com")


class FakeQuizGenerator:
    """Records requests and returns a canned result (or raises)."""

    def __init__(self, result: dict | None = None, error: Exception | None = None):
        self.result = result if result is not None else {
            "success": True,
            "quiz": {"title": "Quiz: Fractions", "questions": []},
            "debugInfo": {"prompt": "p", "systemPrompt": "s", "rawResponse": "{}"},
        }
        self.error = error
        self.requests = []

    async def generate_quiz(self, request):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return dict(self.result)

    async def test_connection(self):
        return {"success": True}


@pytest.fixture
def fake_generator():
    generator = FakeQuizGenerator()
    app.dependency_overrides[get_quiz_generator] = lambda: generator
    return generator
