"""
Row store engine, sessions and availability checks
Banco de dados: engine, sessões e verificação de disponibilidade
"""

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, Dict, Optional, TypeVar

from sqlalchemy import text
from sqlalchemy.exc import DisconnectionError, OperationalError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from impostor.core.config import settings
from impostor.core.exceptions import BackendUnavailable

logger = logging.getLogger(__name__)

T = TypeVar("T")

_CONNECTION_ERRORS = (DisconnectionError, OperationalError)


class Base(DeclarativeBase):
    pass


async def store_call(awaitable: Awaitable[T], operation: str, timeout: Optional[float] = None) -> T:
    """
    Await a row store call under the store timeout.

    Timeouts and lost connections surface as BackendUnavailable; whatever was
    committed before the failure stays committed.
    """
    timeout = settings.STORE_TIMEOUT_SECONDS if timeout is None else timeout
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError as e:
        logger.error(f"Row store timed out after {timeout}s during {operation}")
        raise BackendUnavailable(operation=operation) from e
    except _CONNECTION_ERRORS as e:
        logger.error(f"Row store connection error during {operation}: {e}")
        raise BackendUnavailable(operation=operation) from e


class DatabaseManager:
    """
    Owns the async engine and the session factory.

    Availability is re-checked at most once per DB_HEALTH_CHECK_INTERVAL; a
    failed check rebuilds the engine with exponential backoff.
    """

    def __init__(self, url: Optional[str] = None):
        self.url = url or settings.DATABASE_URL
        self.engine: Optional[AsyncEngine] = None
        self.session_factory: Optional[async_sessionmaker] = None
        self.reconnect_attempts = 0
        self.checked_at = 0.0

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    def _create_engine(self) -> AsyncEngine:
        if self.is_sqlite:
            return create_async_engine(self.url, connect_args={"check_same_thread": False})
        return create_async_engine(
            self.url,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_recycle=settings.DB_POOL_RECYCLE,
            pool_pre_ping=True,
            connect_args={"charset": "utf8mb4", "connect_timeout": 10},
        )

    async def connect(self) -> None:
        """Build engine and session factory, then verify the store answers"""
        self.engine = self._create_engine()
        self.session_factory = async_sessionmaker(self.engine, class_=AsyncSession, expire_on_commit=False)

        if not await self.ping():
            raise BackendUnavailable(operation="connect")
        logger.info(f"Row store connected ({self.engine.dialect.name})")

    async def ping(self) -> bool:
        if not self.engine:
            return False
        try:
            async with self.engine.connect() as conn:
                await asyncio.wait_for(conn.execute(text("SELECT 1")), settings.STORE_TIMEOUT_SECONDS)
        except (asyncio.TimeoutError,) + _CONNECTION_ERRORS as e:
            logger.warning(f"Row store ping failed: {e}")
            return False

        self.checked_at = time.time()
        self.reconnect_attempts = 0
        return True

    async def _reconnect(self) -> bool:
        while self.reconnect_attempts < settings.DB_RECONNECT_ATTEMPTS:
            self.reconnect_attempts += 1
            delay = settings.DB_RECONNECT_BASE_DELAY * 2 ** (self.reconnect_attempts - 1)
            logger.info(
                f"Reconnecting to row store in {delay}s "
                f"(attempt {self.reconnect_attempts}/{settings.DB_RECONNECT_ATTEMPTS})"
            )
            await asyncio.sleep(delay)

            if self.engine:
                await self.engine.dispose()
            try:
                await self.connect()
                return True
            except (BackendUnavailable,) + _CONNECTION_ERRORS as e:
                logger.warning(f"Row store reconnection failed: {e}")

        logger.error("Row store unreachable, giving up reconnecting")
        return False

    async def ensure_available(self) -> bool:
        if time.time() - self.checked_at < settings.DB_HEALTH_CHECK_INTERVAL:
            return True
        return await self.ping() or await self._reconnect()

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Standalone session for work outside a request (startup seeding)"""
        if not self.session_factory:
            await self.connect()

        async with self.session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def status(self) -> Dict[str, Any]:
        if not self.engine:
            return {"status": "disconnected"}
        healthy = await self.ensure_available()
        return {
            "status": "healthy" if healthy else "unhealthy",
            "dialect": self.engine.dialect.name,
            "reconnect_attempts": self.reconnect_attempts,
            "last_check": self.checked_at,
        }

    async def dispose(self) -> None:
        if self.engine:
            await self.engine.dispose()
            logger.info("Row store connections closed")
        self.engine = None
        self.session_factory = None


db_manager = DatabaseManager()


async def init_db():
    """Connect, create missing tables and seed the word catalog"""
    await db_manager.connect()

    from impostor import models  # noqa: F401  registers every table on Base.metadata

    async with db_manager.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    if settings.SEED_WORD_PAIRS:
        from impostor.services.word_pairs import WordPairSource

        async with db_manager.session() as session:
            seeded = await WordPairSource(session).seed_default_catalog()
        if seeded:
            logger.info(f"Seeded {seeded} word pairs")

    logger.info("Database initialized")


async def get_db() -> AsyncIterator[AsyncSession]:
    """Request-scoped session dependency"""
    if not db_manager.session_factory:
        await db_manager.connect()
    elif not await db_manager.ensure_available():
        raise BackendUnavailable(operation="get_db")

    async with db_manager.session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def close_db():
    await db_manager.dispose()


async def health_check() -> dict:
    try:
        return await db_manager.status()
    except Exception as e:
        logger.warning(f"Row store health check failed: {e}")
        return {"status": "error", "error": str(e)}
