"""Interfaces module - Abstract base classes for indicators and storage backends"""

from .indicators import BaseIndicator
from .preferences import BasePreferenceStore

__all__ = [
    "BaseIndicator",
    "BasePreferenceStore",
]
