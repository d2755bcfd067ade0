"""
Technical indicators module

Exports:
- BaseIndicator (core/interfaces/indicators.py)
- Moving averages: SMA, EMA, BollingerBands
- Registry: IndicatorRegistry
"""

from core.interfaces.indicators import BaseIndicator
from domain.indicators.moving_averages import EMA, SMA, BollingerBands
from domain.indicators.registry import IndicatorRegistry

__all__ = [
    "BaseIndicator",
    "SMA",
    "EMA",
    "BollingerBands",
    "IndicatorRegistry",
]
