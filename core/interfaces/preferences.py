from abc import ABC, abstractmethod


class BasePreferenceStore(ABC):
    """
    Abstract interface for per-user chart preferences

    Values are opaque serialized strings; callers own the format.

    Implementations:
    - RedisPreferenceStore (persistent, shared across sessions)
    - InMemoryPreferenceStore (process-local, tests and local runs)
    """

    @abstractmethod
    async def connect(self) -> None:
        """Establish connection to the backend"""

    @abstractmethod
    async def load(self, key: str) -> str | None:
        """
        Load a stored value

        Args:
            key: Preference key

        Returns:
            Stored string, or None if not found
        """

    @abstractmethod
    async def save(self, key: str, value: str) -> None:
        """
        Store a value, replacing any previous one

        Args:
            key: Preference key
            value: Serialized preference
        """

    @abstractmethod
    async def clear(self, key: str) -> None:
        """Remove a stored value (no-op if absent)"""

    @abstractmethod
    async def close(self) -> None:
        """Close connection"""
