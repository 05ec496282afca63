"""
Pytest configuration and fixtures
Configuração dos testes e fixtures
"""

import random

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import impostor.models  # noqa: F401  registers every table on Base.metadata
from impostor.core.database import Base, get_db
from impostor.main import app
from impostor.services.room import RoomService
from impostor.services.room_events import RoomEventPublisher
from impostor.services.round import RoundCoordinator
from impostor.services.word_pairs import WordPairSource

# Test database URL (in-memory SQLite for fast testing)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class MockRedisManager:
    """Stands in for RedisManager: records published messages"""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.published = []

    @property
    def is_configured(self) -> bool:
        return True

    async def publish_message(self, channel: str, message: dict) -> int:
        if self.fail:
            raise ConnectionError("redis down")
        self.published.append((channel, message))
        return 1

    def types(self):
        return [message["type"] for _, message in self.published]

    def clear(self):
        self.published.clear()


@pytest.fixture
async def test_engine():
    """Fresh in-memory database per test"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
        echo=False
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_session(test_engine):
    async_session = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def seeded_session(db_session):
    """Session over a database holding the bundled word catalog"""
    await WordPairSource(db_session).seed_default_catalog()
    return db_session


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def redis_mock():
    return MockRedisManager()


@pytest.fixture
def events(redis_mock):
    return RoomEventPublisher(redis_mock)


@pytest.fixture
def failing_events():
    """Publisher whose Redis refuses every message"""
    return RoomEventPublisher(MockRedisManager(fail=True))


@pytest.fixture
def room_service(seeded_session, rng, events):
    return RoomService(seeded_session, rng=rng, events=events)


@pytest.fixture
def coordinator(seeded_session, rng, events):
    return RoundCoordinator(seeded_session, rng=rng, events=events)


@pytest.fixture
def make_room(room_service):
    """Factory: create a room hosted by 'Host' with player_count members in total"""
    async def _make_room(player_count: int = 3):
        host = await room_service.create_room("Host")
        player_ids = [host.player_id]
        for i in range(player_count - 1):
            joined = await room_service.join_room(host.room_code, f"Jogador {i + 1}")
            player_ids.append(joined.player_id)
        return host, player_ids

    return _make_room


@pytest.fixture
async def client(seeded_session):
    """HTTP client bound to the app with the test session injected"""
    async def _override_get_db():
        yield seeded_session

    app.dependency_overrides[get_db] = _override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
