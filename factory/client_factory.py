"""
Client factory - Auto-create storage clients based on configuration

Dependency injection pattern for backend-agnostic code
"""

import logging

from config.settings import Settings, get_settings
from core.interfaces.preferences import BasePreferenceStore

logger = logging.getLogger(__name__)


def create_preference_store(settings: Settings | None = None) -> BasePreferenceStore:
    """
    Create preference store based on PREFERENCE_BACKEND config

    Returns:
        BasePreferenceStore: Redis (redis), in-process dict (memory)

    Examples:
        >>> # .env: PREFERENCE_BACKEND=redis
        >>> store = create_preference_store()  # Returns RedisPreferenceStore
        >>>
        >>> # .env: PREFERENCE_BACKEND=memory
        >>> store = create_preference_store()  # Returns InMemoryPreferenceStore
    """
    settings = settings or get_settings()
    backend = settings.PREFERENCE_BACKEND.lower()

    if backend == "redis":
        from providers.opensource.redis_preferences import RedisPreferenceStore

        logger.info("✓ Creating RedisPreferenceStore")
        return RedisPreferenceStore(settings=settings)

    elif backend == "memory":
        from providers.memory.preferences import InMemoryPreferenceStore

        logger.info("✓ Creating InMemoryPreferenceStore")
        return InMemoryPreferenceStore()

    else:
        raise ValueError(
            f"Unsupported preference backend: {backend}. Supported: redis, memory"
        )
