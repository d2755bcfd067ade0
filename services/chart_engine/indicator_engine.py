"""
Indicator Engine - Compute selected indicators over the actual-price sub-series

Clean separation of concerns:
- Load indicator presets (via IndicatorRegistry, from settings)
- Compute each selected preset over the chronological actual prices
- Map index-aligned results back onto the merged series for display

Architecture:
    load_indicator_presets() → Build presets from chart.yaml
    IndicatorEngine.compute() → {key: index-aligned series}
    IndicatorEngine.attach() → DisplayPoint rows
"""

import logging
from collections.abc import Iterable, Sequence

from config.settings import Settings, get_settings
from core.interfaces.indicators import BaseIndicator, IndicatorValues
from core.models.chart_data import DisplayPoint, TimeBucket
from domain.indicators.registry import IndicatorRegistry

logger = logging.getLogger(__name__)

# Output keys carried by DisplayPoint
INDICATOR_KEYS = ("sma20", "sma50", "ema12", "ema26", "bb_upper", "bb_middle", "bb_lower")


def load_indicator_presets(settings: Settings | None = None) -> dict[str, BaseIndicator]:
    """
    Load indicator presets from settings.INDICATORS

    Each preset's name is the selection identifier; single-series indicators
    also use it as their output key unless params give an explicit name.

    Returns:
        Dict of indicator instances: {"sma20": SMA(20), "bollinger": BollingerBands(20), ...}

    Example:
        >>> presets = load_indicator_presets()
        >>> presets["sma20"].calculate(prices)
        [None, None, ..., 45.12]
    """
    settings = settings or get_settings()
    presets = {}

    for config in settings.INDICATORS:
        name = config.get("name", "?")

        try:
            presets[name] = IndicatorRegistry.create_preset(config)
            logger.debug(f"  ✓ Loaded {name}: {presets[name]}")
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"  ✗ Skipping {name}: {e}")

    logger.debug(f"✓ Loaded {len(presets)} indicator presets: {list(presets.keys())}")
    return presets


class IndicatorEngine:
    """Calculate selected indicators over a chronological price sequence"""

    def __init__(
        self,
        presets: dict[str, BaseIndicator] | None = None,
        settings: Settings | None = None,
    ):
        self.settings = settings or get_settings()
        self.presets = presets if presets is not None else load_indicator_presets(self.settings)
        self.min_points = self.settings.INDICATOR_MIN_POINTS

    @property
    def available(self) -> list[str]:
        """Selectable indicator identifiers"""
        return list(self.presets.keys())

    def compute(self, values: Sequence[float], selected: Iterable[str]) -> dict[str, IndicatorValues]:
        """
        Calculate the selected indicators

        Args:
            values: Actual prices, oldest first
            selected: Indicator identifiers (e.g., ["sma20", "bollinger"])

        Returns:
            Dict of index-aligned series: {"sma20": [None, ..., 45.1], "bb_upper": [...], ...}
            Empty dict when fewer than min_points values are given

        Example:
            >>> engine = IndicatorEngine()
            >>> engine.compute([10, 20, 30, 40, 50], ["sma20"])
            {'sma20': [None, None, None, None, None]}
        """
        if len(values) < self.min_points:
            logger.debug(
                f"Insufficient data: {len(values)}/{self.min_points} points, skipping indicators"
            )
            return {}

        results: dict[str, IndicatorValues] = {}

        for identifier in dict.fromkeys(selected):
            indicator = self.presets.get(identifier)
            if indicator is None:
                logger.warning(f"⚠️ Unknown indicator '{identifier}', skipping")
                continue
            results.update(indicator.get_results(values))

        return results

    def compute_for_buckets(
        self, buckets: Sequence[TimeBucket], selected: Iterable[str]
    ) -> dict[str, IndicatorValues]:
        """Calculate over the actual-only sub-sequence of a merged series"""
        values = [b.actual_price for b in buckets if b.actual_price is not None]
        return self.compute(values, selected)

    @staticmethod
    def attach(
        buckets: Sequence[TimeBucket], indicators: dict[str, IndicatorValues]
    ) -> list[DisplayPoint]:
        """
        Build display rows, mapping actual-aligned indicator values back by index

        Rows without an actual price carry no indicator fields.

        Args:
            buckets: Merged series
            indicators: Output of compute() over the same series

        Returns:
            One DisplayPoint per bucket
        """
        points = []
        actual_index = 0

        for bucket in buckets:
            row = {
                "timestamp": bucket.start,
                "actual": bucket.actual_price,
                "aeso_forecast": bucket.forecast_price,
                "ai_prediction": bucket.ai_price,
                "ai_lower": bucket.ai_lower,
                "ai_upper": bucket.ai_upper,
                "confidence_score": bucket.ai_confidence,
                "volume": bucket.volume_proxy,
            }

            if bucket.actual_price is not None:
                for key, series in indicators.items():
                    if key in INDICATOR_KEYS and actual_index < len(series):
                        row[key] = series[actual_index]
                actual_index += 1

            points.append(DisplayPoint(**row))

        return points
