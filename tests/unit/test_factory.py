"""
Unit tests for factory pattern

Tests that correct preference store implementations are created based on config
"""

from unittest.mock import patch

import pytest

from factory.client_factory import create_preference_store
from providers.memory.preferences import InMemoryPreferenceStore
from providers.opensource.redis_preferences import RedisPreferenceStore


@pytest.mark.unit
class TestPreferenceStoreFactory:
    """Test preference store factory"""

    @patch("factory.client_factory.get_settings")
    def test_create_redis_store(self, mock_settings):
        """Test that redis backend creates RedisPreferenceStore"""
        mock_settings.return_value.PREFERENCE_BACKEND = "redis"
        mock_settings.return_value.PREFERENCE_TTL_DAYS = 30

        store = create_preference_store()

        assert isinstance(store, RedisPreferenceStore)
        assert store.client is None

    @patch("factory.client_factory.get_settings")
    def test_create_memory_store(self, mock_settings):
        """Test that memory backend creates InMemoryPreferenceStore"""
        mock_settings.return_value.PREFERENCE_BACKEND = "memory"

        assert isinstance(create_preference_store(), InMemoryPreferenceStore)

    @patch("factory.client_factory.get_settings")
    def test_backend_case_insensitive(self, mock_settings):
        mock_settings.return_value.PREFERENCE_BACKEND = "Memory"

        assert isinstance(create_preference_store(), InMemoryPreferenceStore)

    @patch("factory.client_factory.get_settings")
    def test_unsupported_backend_raises_error(self, mock_settings):
        """Test that unsupported backend raises ValueError"""
        mock_settings.return_value.PREFERENCE_BACKEND = "postgres"

        with pytest.raises(ValueError, match="Unsupported preference backend"):
            create_preference_store()

    def test_default_backend(self):
        """Test default settings create the in-memory store"""
        assert isinstance(create_preference_store(), InMemoryPreferenceStore)
