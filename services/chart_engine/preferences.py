"""
Indicator Preferences - Persist the indicator selection per user/session

Format: JSON list of indicator identifiers, e.g. '["sma20", "bollinger"]'
Key: {PREFERENCE_KEY_PREFIX}:{user_key}

Reading is forgiving: missing, corrupt, or stale entries fall back to the
default selection; identifiers that no longer exist are dropped.
"""

import json
import logging
from collections.abc import Iterable

from config.settings import Settings, get_settings
from core.interfaces.preferences import BasePreferenceStore

logger = logging.getLogger(__name__)


def serialize_selection(identifiers: Iterable[str]) -> str:
    """Serialize a selection, de-duplicated in order"""
    return json.dumps(list(dict.fromkeys(identifiers)))


def parse_selection(raw: str | None) -> list[str] | None:
    """
    Parse a stored selection

    Returns:
        List of identifiers, or None if raw is missing or not a JSON list of strings
    """
    if raw is None:
        return None
    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        return None
    if not isinstance(data, list) or not all(isinstance(item, str) for item in data):
        return None
    return list(dict.fromkeys(data))


class IndicatorPreferences:
    """Load and save indicator selections through a preference store"""

    def __init__(
        self,
        store: BasePreferenceStore,
        available: Iterable[str],
        settings: Settings | None = None,
    ):
        """
        Args:
            store: Preference backend (connected by the caller)
            available: Identifiers the indicator engine can compute
            settings: Settings override
        """
        self.store = store
        self.settings = settings or get_settings()
        self.available = list(available)

    @property
    def default_selection(self) -> list[str]:
        return [i for i in self.settings.INDICATOR_DEFAULT_SELECTION if i in self.available]

    def key_for(self, user_key: str) -> str:
        return f"{self.settings.PREFERENCE_KEY_PREFIX}:{user_key}"

    async def load(self, user_key: str) -> list[str]:
        """
        Load the stored selection

        Args:
            user_key: User or session identifier

        Returns:
            Known identifiers in stored order, or the default selection
        """
        raw = await self.store.load(self.key_for(user_key))
        selection = parse_selection(raw)

        if selection is None:
            if raw is not None:
                logger.warning(f"⚠️ Corrupt indicator preference for {user_key}, using defaults")
            return self.default_selection

        known = [i for i in selection if i in self.available]
        if len(known) != len(selection):
            logger.info(f"Dropped unknown indicators for {user_key}: {set(selection) - set(known)}")
        return known

    async def save(self, user_key: str, identifiers: Iterable[str]) -> list[str]:
        """
        Store a selection (unknown identifiers are dropped)

        Returns:
            The selection actually stored
        """
        selection = [i for i in dict.fromkeys(identifiers) if i in self.available]
        await self.store.save(self.key_for(user_key), serialize_selection(selection))
        logger.debug(f"✓ Saved indicators for {user_key}: {selection}")
        return selection

    async def reset(self, user_key: str) -> list[str]:
        """Forget the stored selection and return the defaults"""
        await self.store.clear(self.key_for(user_key))
        return self.default_selection
