"""Service test fixtures — async DB, FastAPI test clients, fake repository.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - fake_client swaps the whole service for one backed by RecordingUserRepository,
      so tests can assert exactly which storage calls happened

Design Decisions:
    - SQLite in-memory with StaticPool: every session sees the same database
      (ADR: PostgreSQL-specific features not exercised here)
    - RecordingUserRepository implements the UserRepository protocol structurally
"""

from uuid import uuid4

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool
from httpx import ASGITransport, AsyncClient

from user_api.db.base import Base
from user_api.infrastructure.database import get_db
from user_api.api.routes.users import get_user_service
from user_api.services.user_service import UserService
from user_api.models.user import User
from user_api.main import app


class RecordingUserRepository:
    """In-memory UserRepository that logs every call as (operation, argument)."""

    def __init__(self):
        self.rows: dict[str, User] = {}
        self.calls: list[tuple[str, str | None]] = []

    async def save(self, user: User) -> User:
        self.calls.append(("save", user.email))
        if user.id is None:
            user.id = str(uuid4())
        self.rows[user.id] = user
        return user

    async def find_by_id(self, user_id):
        self.calls.append(("find_by_id", user_id))
        return self.rows.get(user_id)

    async def exists_by_email(self, email: str) -> bool:
        self.calls.append(("exists_by_email", email))
        return any(u.email == email for u in self.rows.values())

    async def find_all(self) -> list[User]:
        self.calls.append(("find_all", None))
        return list(self.rows.values())

    async def remove_by_id(self, user_id) -> None:
        self.calls.append(("remove_by_id", user_id))
        self.rows.pop(user_id, None)

    def seed(self, name: str, email: str, age: int) -> User:
        """Insert directly, without recording a call."""
        user = User(id=str(uuid4()), name=name, email=email, age=age)
        self.rows[user.id] = user
        return user

    def operations(self) -> list[str]:
        return [op for op, _ in self.calls]


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_session_factory):
    """FastAPI test client with DB dependency overridden."""
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
def fake_repository():
    return RecordingUserRepository()


@pytest.fixture
async def fake_client(fake_repository):
    """FastAPI test client whose UserService is backed by fake_repository."""
    app.dependency_overrides[get_user_service] = (
        lambda: UserService(fake_repository)
    )

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
