"""
Abstract interface for technical indicators

Indicators map a chronological price sequence to an index-aligned series
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence

import numpy as np

from core.exceptions import InvalidPeriodError

IndicatorValues = list[float | None]


class BaseIndicator(ABC):
    """
    Indicator interface

    Design principle:
    - Pure calculation logic (no storage or UI dependency)
    - Output is index-aligned to the input; warm-up entries are None, never 0
    - Testable with plain lists of floats

    Implementations:
    - SMA, EMA, BollingerBands (domain/indicators/moving_averages.py)
    """

    # TA-Lib rejects look-back periods below 2
    MIN_PERIOD = 2

    def __init__(self, period: int, name: str | None = None, **kwargs):
        """
        Initialize indicator

        Args:
            period: Look-back period for calculation
            name: Output key (e.g., "sma20"). If None, uses class name.
            **kwargs: Additional indicator-specific parameters

        Raises:
            InvalidPeriodError: If period is not an integer >= MIN_PERIOD
        """
        if isinstance(period, bool) or not isinstance(period, int) or period < self.MIN_PERIOD:
            raise InvalidPeriodError(
                f"{self.__class__.__name__}: period must be an integer >= "
                f"{self.MIN_PERIOD}, got {period!r}"
            )
        self.period = period
        self.name = name or self.__class__.__name__
        self.params = {"period": period, **kwargs}

    @abstractmethod
    def calculate(self, values: Sequence[float]) -> IndicatorValues:
        """
        Calculate the indicator over a price sequence

        Args:
            values: Prices in chronological order (oldest first)

        Returns:
            One entry per input value; None where the trailing window is
            not yet full

        Note:
            Implementation should:
            1. Short-circuit with padding() when len(values) < period
            2. Convert with as_array() and use TA-Lib for the calculation
            3. Map NaN back to None with to_series()
        """

    def get_results(self, values: Sequence[float]) -> dict[str, IndicatorValues]:
        """
        Get indicator results as dict (for polymorphic calculation)

        Default implementation returns a single series: {self.name: series}
        Override for multi-series indicators (Bollinger returns upper/middle/lower)

        Example:
            >>> SMA(period=3, name="sma3").get_results([10, 20, 30, 40])
            {'sma3': [None, None, 20.0, 30.0]}
        """
        return {self.name: self.calculate(values)}

    def has_window(self, values: Sequence[float]) -> bool:
        """True when at least one full trailing window exists"""
        return len(values) >= self.period

    @staticmethod
    def padding(values: Sequence[float]) -> IndicatorValues:
        """All-undefined series for inputs shorter than the period"""
        return [None] * len(values)

    @staticmethod
    def as_array(values: Sequence[float]) -> np.ndarray:
        return np.asarray(values, dtype=np.float64)

    @staticmethod
    def to_series(array: np.ndarray) -> IndicatorValues:
        """Convert a TA-Lib output array, mapping NaN to None"""
        return [None if np.isnan(v) else float(v) for v in array]

    def __repr__(self) -> str:
        """String representation"""
        params_str = ", ".join(f"{k}={v}" for k, v in self.params.items())
        return f"{self.name}({params_str})"
