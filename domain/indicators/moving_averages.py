"""
Moving average indicators

Implementations:
- SMA: Simple Moving Average
- EMA: Exponential Moving Average (seeded with the SMA of the first window)
- BollingerBands: SMA ± k × population standard deviation
"""

import logging
from collections.abc import Sequence

import talib

from core.exceptions import InvalidPeriodError
from core.interfaces.indicators import BaseIndicator, IndicatorValues

logger = logging.getLogger(__name__)


class SMA(BaseIndicator):
    """
    Simple Moving Average

    Formula: SMA[i] = SUM(value[i-period+1..i]) / period

    Example:
        >>> SMA(period=3).calculate([10, 20, 30, 40])
        [None, None, 20.0, 30.0]
    """

    def __init__(self, period: int, name: str | None = None):
        """
        Initialize SMA

        Args:
            period: Look-back period
            name: Output key (e.g., "sma20"). If None, uses class name.
        """
        super().__init__(period=period, name=name)

    def calculate(self, values: Sequence[float]) -> IndicatorValues:
        """Calculate SMA"""
        if not self.has_window(values):
            return self.padding(values)

        return self.to_series(talib.SMA(self.as_array(values), timeperiod=self.period))


class EMA(BaseIndicator):
    """
    Exponential Moving Average

    Formula: EMA[i] = (value[i] - EMA[i-1]) × α + EMA[i-1]
    where α = 2 / (period + 1), seeded at i = period-1 with the SMA of the
    first period values (TA-Lib default compatibility mode)

    Note:
        EMA needs a warm-up period. For values close to a long-run EMA,
        load 4× the period (e.g., 104 points for EMA(26))

    Example:
        >>> ema = EMA(period=12, name="ema12")
        >>> series = ema.calculate(prices)
    """

    def __init__(self, period: int, name: str | None = None):
        """
        Initialize EMA

        Args:
            period: Look-back period
            name: Output key (e.g., "ema12"). If None, uses class name.
        """
        super().__init__(period=period, name=name)

    @property
    def alpha(self) -> float:
        """Smoothing factor"""
        return 2 / (self.period + 1)

    def calculate(self, values: Sequence[float]) -> IndicatorValues:
        """Calculate EMA"""
        if not self.has_window(values):
            return self.padding(values)

        if len(values) < self.period * 4:
            logger.debug(
                f"EMA({self.period}): Only {len(values)} points, "
                f"recommend {self.period * 4} for convergence"
            )

        return self.to_series(talib.EMA(self.as_array(values), timeperiod=self.period))


class BollingerBands(BaseIndicator):
    """
    Bollinger Bands

    Components:
        - Middle = SMA(period)
        - Upper = Middle + multiplier × σ
        - Lower = Middle - multiplier × σ
    where σ is the population standard deviation (divisor = period) of the
    trailing window

    Example:
        >>> bands = BollingerBands(period=20)
        >>> result = bands.get_results(prices)
        >>> result.keys()
        dict_keys(['bb_upper', 'bb_middle', 'bb_lower'])
    """

    def __init__(self, period: int = 20, multiplier: float = 2.0, name: str | None = None):
        """
        Initialize Bollinger Bands

        Args:
            period: Look-back period (default: 20)
            multiplier: Standard deviation multiplier (default: 2.0)
            name: Prefix for output keys (default: "bb")
        """
        if multiplier <= 0:
            raise InvalidPeriodError(f"BollingerBands: multiplier must be positive, got {multiplier}")
        super().__init__(period=period, name=name or "bb", multiplier=multiplier)
        self.multiplier = float(multiplier)

    def calculate(self, values: Sequence[float]) -> IndicatorValues:
        """
        Calculate the middle band

        Returns:
            SMA(period) series
        """
        return self.calculate_full(values)["middle"]

    def calculate_full(self, values: Sequence[float]) -> dict[str, IndicatorValues]:
        """
        Calculate all three bands

        Returns:
            Dict with keys: upper, middle, lower
        """
        if not self.has_window(values):
            empty = self.padding(values)
            return {"upper": empty, "middle": list(empty), "lower": list(empty)}

        upper, middle, lower = talib.BBANDS(
            self.as_array(values),
            timeperiod=self.period,
            nbdevup=self.multiplier,
            nbdevdn=self.multiplier,
            matype=talib.MA_Type.SMA,
        )

        return {
            "upper": self.to_series(upper),
            "middle": self.to_series(middle),
            "lower": self.to_series(lower),
        }

    def get_results(self, values: Sequence[float]) -> dict[str, IndicatorValues]:
        """
        Override to return all three bands

        Returns:
            Dict with bb_upper, bb_middle, bb_lower
        """
        bands = self.calculate_full(values)
        return {
            f"{self.name}_upper": bands["upper"],
            f"{self.name}_middle": bands["middle"],
            f"{self.name}_lower": bands["lower"],
        }
