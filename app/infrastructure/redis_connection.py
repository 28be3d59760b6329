# app/infrastructure/redis_connection.py

import redis.asyncio as aioredis
from config.settings import settings


class RedisConnection:
    """Redis connection manager backing the lobby store"""

    def __init__(self):
        self.client: aioredis.Redis | None = None

    @property
    def is_connected(self) -> bool:
        return self.client is not None

    async def connect(self):
        """Open the client and verify it with a PING"""
        if self.client is not None:
            return

        try:
            self.client = aioredis.Redis(
                host=settings.REDIS_HOST,
                port=settings.REDIS_PORT,
                db=settings.REDIS_DB,
                password=settings.REDIS_PASSWORD,
                decode_responses=settings.REDIS_DECODE_RESPONSES,
            )
            await self.client.ping()
            print(f"✅ Lobby store connected to Redis at {settings.REDIS_HOST}:{settings.REDIS_PORT}/{settings.REDIS_DB}")
        except Exception as e:
            print(f"❌ Lobby store could not reach Redis: {e}")
            self.client = None
            raise

    async def disconnect(self):
        if self.client:
            await self.client.aclose()
            self.client = None
            print("✅ Lobby store disconnected from Redis")

    def get_client(self) -> aioredis.Redis:
        if not self.client:
            raise RuntimeError("Redis client is not connected. Call connect() first.")
        return self.client


# Shared instance
redis_connection = RedisConnection()


def get_redis() -> aioredis.Redis:
    """Get the shared Redis client"""
    return redis_connection.get_client()
