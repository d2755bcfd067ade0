"""
Unit tests for header and sidebar summaries
"""

import math

import pytest

from core.models.chart_data import SeriesStats
from services.chart_engine.statistics import (
    compute_series_stats,
    confidence_level,
    next_hour_prediction,
    prediction_diff,
    volume_bars,
)
from tests.factories import NOW, actual_bucket, hours, prediction_bucket


@pytest.mark.unit
class TestSeriesStats:
    """Test statistics over the actual sub-series"""

    def test_hand_calculated(self):
        buckets = [
            actual_bucket(-4, 40, volume=1000),
            actual_bucket(-3, 60, volume=0),
            prediction_bucket(-2, 999),
            actual_bucket(-1, 50, volume=3000),
        ]

        stats = compute_series_stats(buckets)

        assert (stats.open, stats.high, stats.low, stats.close) == (40, 60, 40, 50)
        assert stats.change == 10
        assert stats.change_percent == pytest.approx(25.0)
        assert stats.avg == pytest.approx(50.0)
        # Population variance: (100 + 100 + 0) / 3
        assert stats.volatility == pytest.approx(math.sqrt(200 / 3))
        assert stats.volume == pytest.approx(2000.0)

    def test_empty_is_zero(self):
        assert compute_series_stats([prediction_bucket(1, 50)]) == SeriesStats()

    def test_zero_open_no_percent(self):
        stats = compute_series_stats([actual_bucket(-2, 0), actual_bucket(-1, 10)])

        assert stats.change == 10
        assert stats.change_percent == 0.0


@pytest.mark.unit
class TestVolumeBars:
    """Test volume histogram direction flags"""

    def test_direction(self):
        buckets = [
            actual_bucket(-4, 50, volume=100),
            actual_bucket(-3, 45, volume=200),
            actual_bucket(-2, 45, volume=0),
            actual_bucket(-1, 60, volume=300),
        ]

        bars = volume_bars(buckets)

        assert [b.volume for b in bars] == [100, 200, 300]
        assert [b.price_up for b in bars] == [True, False, True]


@pytest.mark.unit
class TestPredictionBadges:
    """Test next-hour lookup, diff and confidence level"""

    def test_next_hour_prediction(self):
        buckets = [prediction_bucket(0, 40), prediction_bucket(1, 45), prediction_bucket(2, 50)]

        bucket = next_hour_prediction(buckets, now=hours(0.25))

        assert bucket.start == hours(1)

    def test_next_hour_missing(self):
        assert next_hour_prediction([prediction_bucket(3, 50)], now=NOW) is None

    def test_prediction_diff(self):
        diff = prediction_diff(55, 50)

        assert diff.diff == 5
        assert diff.percent == pytest.approx(10.0)
        assert diff.is_up is True

    def test_prediction_diff_down(self):
        assert prediction_diff(45, 50).is_up is False

    @pytest.mark.parametrize("prediction,current", [(None, 50), (55, None), (55, 0)])
    def test_prediction_diff_missing(self, prediction, current):
        assert prediction_diff(prediction, current) is None

    @pytest.mark.parametrize(
        "confidence,level", [(0.95, "high"), (0.8, "high"), (0.7, "medium"), (0.6, "medium"), (0.3, "low")]
    )
    def test_confidence_level(self, confidence, level):
        assert confidence_level(confidence) == level
