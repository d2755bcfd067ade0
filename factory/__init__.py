"""Factory package - Dependency injection for backend-agnostic code"""

from .client_factory import create_preference_store

__all__ = [
    "create_preference_store",
]
