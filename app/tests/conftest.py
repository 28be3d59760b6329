"""
Pytest configuration and fixtures for testing
"""
import os
import pytest
from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool
from infrastructure.postgres_connection import Base
from infrastructure.lobby_repository import LobbyRepository
from models.user import User, UserStatus
from models.lobby import Lobby
from services.lobby_service import LobbyService


# Test database URL - using file-based SQLite to avoid in-memory connection issues
TEST_DATABASE_PATH = "./test_users.db"
TEST_DATABASE_URL = f"sqlite+aiosqlite:///{TEST_DATABASE_PATH}"


@pytest.fixture(scope="function")
async def db_engine():
    """Create a test database engine"""
    if os.path.exists(TEST_DATABASE_PATH):
        os.remove(TEST_DATABASE_PATH)

    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=NullPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()

    if os.path.exists(TEST_DATABASE_PATH):
        os.remove(TEST_DATABASE_PATH)


@pytest.fixture(scope="function")
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session"""
    session_factory = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with session_factory() as session:
        yield session
        await session.rollback()


async def _add_user(session: AsyncSession, username: str, token: str) -> User:
    user = User(
        username=username,
        token=token,
        status=UserStatus.ONLINE,
        password="1",
    )
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


@pytest.fixture
async def leader_user(db_session: AsyncSession) -> User:
    """The user who creates lobbies in API tests"""
    return await _add_user(db_session, "Flacko", "leader-token")


@pytest.fixture
async def other_user(db_session: AsyncSession) -> User:
    return await _add_user(db_session, "Bunny", "other-token")


@pytest.fixture
async def redis_client():
    """Create a test Redis client using fakeredis"""
    import fakeredis.aioredis

    redis = fakeredis.aioredis.FakeRedis(decode_responses=True)

    yield redis

    await redis.flushall()
    await redis.aclose()


@pytest.fixture
def lobby_repository(redis_client) -> LobbyRepository:
    return LobbyRepository(redis_client)


@pytest.fixture
def lobby_service(lobby_repository) -> LobbyService:
    return LobbyService(lobby_repository, min_players=3)


@pytest.fixture
def candidate_lobby() -> Lobby:
    """Unsaved lobby led by user 1 with token "1" and room for 5 players"""
    return Lobby(
        lobby_name="BadBunny",
        number_of_players=5,
        voice_chat=False,
        user_id=1,
        user_token="1",
        is_private=False,
    )
