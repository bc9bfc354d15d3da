import redis.asyncio as aioredis
from redis.asyncio import Redis
from typing import Optional
import json

from eventhub.core.config import settings
from eventhub.core.logging_config import logger


class RedisClient:
    """Redis client used by the Redis session backend"""

    def __init__(self):
        self.redis: Optional[Redis] = None

    async def connect(self):
        """Connect to Redis"""
        try:
            self.redis = aioredis.from_url(
                settings.REDIS_URL,
                encoding="utf-8",
                decode_responses=True
            )
            await self.redis.ping()
            logger.info("Redis connected successfully")
        except Exception as e:
            logger.error(f"Redis connection error: {e}")
            raise

    async def disconnect(self):
        """Disconnect from Redis"""
        if self.redis:
            await self.redis.close()
            self.redis = None
        logger.info("Redis disconnected")

    async def get_json(self, key: str) -> Optional[dict]:
        value = await self.redis.get(key)
        return json.loads(value) if value else None

    async def set_json(self, key: str, value: dict, expire: int) -> bool:
        return bool(await self.redis.setex(key, expire, json.dumps(value)))

    async def delete(self, key: str) -> bool:
        """Delete key from Redis"""
        return await self.redis.delete(key) > 0


# Create Redis client instance
redis_client = RedisClient()

