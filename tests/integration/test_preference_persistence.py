"""
Integration test for Redis-backed indicator preferences

Requires a Redis server on localhost:6379; skipped when none is reachable.
"""

import os

import pytest
from redis.asyncio import Redis

from core.exceptions import PreferenceStoreError
from providers.opensource.redis_preferences import RedisPreferenceStore
from services.chart_engine.preferences import IndicatorPreferences

REDIS_URL = os.getenv("TEST_REDIS_URL", "redis://localhost:6379/15")


@pytest.mark.integration
@pytest.mark.asyncio
async def test_selection_persists_across_store_instances():
    """Verify a saved selection is read back by a fresh store"""
    writer = RedisPreferenceStore(client=Redis.from_url(REDIS_URL, decode_responses=True))
    try:
        await writer.connect()
    except PreferenceStoreError as e:
        await writer.close()
        pytest.skip(f"Redis not reachable: {e}")

    reader = RedisPreferenceStore(client=Redis.from_url(REDIS_URL, decode_responses=True))
    await reader.connect()
    available = ["sma20", "ema12", "bollinger"]

    try:
        await IndicatorPreferences(writer, available).save("integration-user", ["bollinger", "ema12"])

        loaded = await IndicatorPreferences(reader, available).load("integration-user")

        assert loaded == ["bollinger", "ema12"]
        assert await reader.client.ttl("chart:indicators:integration-user") > 0
    finally:
        await IndicatorPreferences(writer, available).reset("integration-user")
        await writer.close()
        await reader.close()
