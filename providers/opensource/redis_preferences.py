"""
Redis implementation of the preference store

Keeps serialized chart preferences per user/session key with a long TTL
"""

import logging
from datetime import timedelta

from redis.asyncio import Redis
from redis.exceptions import RedisError

from config.settings import Settings, get_settings
from core.exceptions import PreferenceStoreError
from core.interfaces.preferences import BasePreferenceStore

logger = logging.getLogger(__name__)


class RedisPreferenceStore(BasePreferenceStore):
    """
    Redis implementation

    Features:
    - Survives restarts (RDB + AOF on the server side)
    - Shared across dashboard instances
    - TTL refreshed on every save
    """

    def __init__(self, settings: Settings | None = None, client: Redis | None = None):
        self.settings = settings or get_settings()
        self.client: Redis | None = client
        self.ttl = timedelta(days=self.settings.PREFERENCE_TTL_DAYS)

    async def connect(self) -> None:
        """Connect to Redis"""
        try:
            if self.client is None:
                self.client = Redis.from_url(self.settings.redis_url, decode_responses=True)
            await self.client.ping()
            logger.info(
                f"✓ Connected to Redis: {self.settings.REDIS_HOST}:{self.settings.REDIS_PORT}"
            )
        except RedisError as e:
            logger.error(f"✗ Failed to connect to Redis: {e}")
            raise PreferenceStoreError(f"Redis connection failed: {e}") from e

    async def load(self, key: str) -> str | None:
        """Get stored preference"""
        client = self._require_client()
        try:
            return await client.get(key)
        except RedisError as e:
            logger.error(f"✗ Redis GET error for {key}: {e}")
            raise PreferenceStoreError(f"Failed to load {key}: {e}") from e

    async def save(self, key: str, value: str) -> None:
        """Set preference with TTL"""
        client = self._require_client()
        try:
            await client.set(key, value, ex=int(self.ttl.total_seconds()))
        except RedisError as e:
            logger.error(f"✗ Redis SET error for {key}: {e}")
            raise PreferenceStoreError(f"Failed to save {key}: {e}") from e

    async def clear(self, key: str) -> None:
        """Delete stored preference"""
        client = self._require_client()
        try:
            await client.delete(key)
        except RedisError as e:
            logger.error(f"✗ Redis DELETE error for {key}: {e}")
            raise PreferenceStoreError(f"Failed to clear {key}: {e}") from e

    async def close(self) -> None:
        """Close connection"""
        if self.client:
            await self.client.aclose()
            self.client = None
            logger.info("✓ Redis connection closed")

    def _require_client(self) -> Redis:
        if not self.client:
            raise RuntimeError("Redis client not connected")
        return self.client
