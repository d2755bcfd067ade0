"""
In-memory implementation of the preference store

Process-local; used for local runs and tests
"""

import logging

from core.interfaces.preferences import BasePreferenceStore

logger = logging.getLogger(__name__)


class InMemoryPreferenceStore(BasePreferenceStore):
    """Dict-backed preference store"""

    def __init__(self):
        self._values: dict[str, str] = {}

    async def connect(self) -> None:
        logger.debug("✓ In-memory preference store ready")

    async def load(self, key: str) -> str | None:
        return self._values.get(key)

    async def save(self, key: str, value: str) -> None:
        self._values[key] = value

    async def clear(self, key: str) -> None:
        self._values.pop(key, None)

    async def close(self) -> None:
        self._values.clear()
