"""
Chart Engine - Time-series reconciliation and technical analysis

Pure, synchronous stages re-run on every batch or configuration change:
1. Merges actual, forecast and prediction feeds into hourly buckets
2. Calculates technical indicators (SMA, EMA, Bollinger Bands)
3. Aggregates OHLC candles and chains forecast candles
4. Maintains the zoom/pan/brush viewport
5. Evaluates advisory alerts
"""

from services.chart_engine.alerts import AlertEvaluator
from services.chart_engine.candles import CandleAggregator, candle_domain
from services.chart_engine.indicator_engine import IndicatorEngine
from services.chart_engine.merger import TimeBucketMerger
from services.chart_engine.pipeline import ChartEngine, recompute, time_window
from services.chart_engine.preferences import IndicatorPreferences
from services.chart_engine.statistics import (
    compute_series_stats,
    confidence_level,
    next_hour_prediction,
    prediction_diff,
    volume_bars,
)
from services.chart_engine.viewport import ViewportController

__all__ = [
    "AlertEvaluator",
    "CandleAggregator",
    "ChartEngine",
    "IndicatorEngine",
    "IndicatorPreferences",
    "TimeBucketMerger",
    "ViewportController",
    "candle_domain",
    "compute_series_stats",
    "confidence_level",
    "next_hour_prediction",
    "prediction_diff",
    "recompute",
    "time_window",
    "volume_bars",
]
