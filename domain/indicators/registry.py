"""
Indicator registry for managing and creating indicators

Factory pattern for indicator creation
"""

from collections.abc import Mapping
from typing import Any

from core.exceptions import UnknownIndicatorError
from core.interfaces.indicators import BaseIndicator
from domain.indicators.moving_averages import EMA, SMA, BollingerBands


class IndicatorRegistry:
    """
    Registry for indicator creation

    Provides factory methods for creating indicators
    """

    # Registry of available indicators
    _indicators: dict[str, type[BaseIndicator]] = {
        "sma": SMA,
        "ema": EMA,
        "bollinger": BollingerBands,
    }

    @classmethod
    def create(cls, indicator_type: str, **params) -> BaseIndicator:
        """
        Create indicator by type

        Args:
            indicator_type: Indicator type (sma, ema, bollinger)
            **params: Indicator parameters (including optional 'name' for the output key)

        Returns:
            Indicator instance

        Raises:
            UnknownIndicatorError: If indicator type is not found
            InvalidPeriodError: If the period is unusable

        Example:
            >>> sma = IndicatorRegistry.create("sma", period=20, name="sma20")
            >>> bands = IndicatorRegistry.create("bollinger", period=20, multiplier=2.0)
        """
        indicator_class = cls._indicators.get(indicator_type.lower())
        if not indicator_class:
            available = ", ".join(cls._indicators.keys())
            raise UnknownIndicatorError(f"Unknown indicator: {indicator_type}. Available: {available}")

        return indicator_class(**params)

    @classmethod
    def create_preset(cls, preset: Mapping[str, Any]) -> BaseIndicator:
        """
        Create indicator from a chart.yaml preset entry

        The preset name doubles as the output key unless params set one
        (Bollinger presets use name "bb" for bb_upper/bb_middle/bb_lower).

        Args:
            preset: {"name": "sma20", "type": "sma", "params": {"period": 20}}

        Raises:
            KeyError: If name or type is missing
            UnknownIndicatorError / InvalidPeriodError: As create()
        """
        params = {"name": preset["name"], **(preset.get("params") or {})}
        return cls.create(preset["type"], **params)

    @classmethod
    def register(cls, name: str, indicator_class: type[BaseIndicator]) -> None:
        """
        Register a new indicator

        Args:
            name: Indicator type name
            indicator_class: Indicator class (must inherit from BaseIndicator)
        """
        cls._indicators[name.lower()] = indicator_class

    @classmethod
    def list_indicators(cls) -> list[str]:
        """
        List all available indicator types

        Example:
            >>> IndicatorRegistry.list_indicators()
            ['bollinger', 'ema', 'sma']
        """
        return sorted(cls._indicators.keys())
