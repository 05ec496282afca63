"""
Redis connection for the room change feed
Conexão Redis usada para publicar eventos das salas
"""

import asyncio
import json
import logging
from typing import Any, Dict, Optional

import redis.asyncio as redis

from impostor.core.config import settings

logger = logging.getLogger(__name__)

_REDIS_ERRORS = (redis.ConnectionError, redis.TimeoutError)


class RedisManager:
    """
    Optional Redis connection.

    Outside production a Redis that cannot be reached leaves the manager
    unconfigured and the change feed silently disabled.
    """

    def __init__(self, url: Optional[str] = None):
        self.url = url or settings.REDIS_URL
        self.client: Optional[redis.Redis] = None
        self.publish_failures = 0

    @property
    def is_configured(self) -> bool:
        return self.client is not None

    async def connect(self) -> None:
        client = redis.from_url(
            self.url,
            max_connections=settings.REDIS_MAX_CONNECTIONS,
            socket_timeout=settings.REDIS_SOCKET_TIMEOUT,
            socket_connect_timeout=settings.REDIS_SOCKET_CONNECT_TIMEOUT,
            retry_on_timeout=True,
            health_check_interval=30,
            decode_responses=True,
        )
        try:
            await client.ping()
        except _REDIS_ERRORS as e:
            await client.aclose()
            if settings.ENVIRONMENT == "production":
                logger.error(f"Redis unreachable at startup: {e}")
                raise
            logger.warning(f"Redis unreachable, room change feed disabled: {e}")
            return

        self.client = client
        logger.info("Redis connected, room change feed enabled")

    async def publish_message(self, channel: str, message: Dict[str, Any]) -> int:
        """Publish a JSON message, retrying once on a dropped connection"""
        if not self.client:
            raise RuntimeError("Redis is not configured")

        payload = json.dumps(message, default=str, ensure_ascii=False)
        try:
            return await self.client.publish(channel, payload)
        except _REDIS_ERRORS as e:
            self.publish_failures += 1
            logger.warning(f"Publish to {channel} failed, retrying once: {e}")
            await asyncio.sleep(0.2)
            return await self.client.publish(channel, payload)

    async def status(self) -> Dict[str, Any]:
        if not self.client:
            return {"status": "disabled"}
        try:
            await self.client.ping()
            healthy = True
        except _REDIS_ERRORS:
            healthy = False
        return {
            "status": "healthy" if healthy else "unhealthy",
            "publish_failures": self.publish_failures,
        }

    async def close(self) -> None:
        if self.client:
            await self.client.aclose()
            logger.info("Redis connection closed")
        self.client = None


redis_manager = RedisManager()


async def init_redis():
    await redis_manager.connect()


async def close_redis():
    await redis_manager.close()


async def redis_health_check() -> dict:
    return await redis_manager.status()
