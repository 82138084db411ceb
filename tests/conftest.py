"""Pytest configuration: in-memory database, users and principals."""

import os

# Set test configuration BEFORE any imports from duplex_tracker
# so the settings instance and the global engine pick it up
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["AUTH_SECRET"] = "test-secret"

import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker  # noqa: E402

from duplex_tracker.models import Base, User, UserRole  # noqa: E402
from duplex_tracker.services import create_engine_for_url  # noqa: E402
from duplex_tracker.services.auth_service import Principal  # noqa: E402


@pytest.fixture
async def engine():
    """Fresh in-memory database with all tables."""
    engine = create_engine_for_url("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def session(engine) -> AsyncSession:
    """Async session bound to the in-memory database."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
async def user(session: AsyncSession) -> User:
    """Create regular user."""
    user = User(email="mona@example.com", full_name="Mona Saleh", role=UserRole.USER)
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


@pytest.fixture
async def admin(session: AsyncSession) -> User:
    """Create admin user."""
    admin = User(email="admin@example.com", full_name="Khalid Admin", role=UserRole.ADMIN)
    session.add(admin)
    await session.commit()
    await session.refresh(admin)
    return admin


@pytest.fixture
def principal(user: User) -> Principal:
    return Principal.from_user(user)


@pytest.fixture
def admin_principal(admin: User) -> Principal:
    return Principal.from_user(admin)
