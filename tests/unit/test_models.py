"""
Unit tests for core models (Pydantic)

Tests RawPoint, TimeBucket, DisplayPoint, Candle, Alert, Viewport models
"""

from datetime import UTC, datetime, timedelta

import pytest
from pydantic import ValidationError

from core.models import (
    Alert,
    Candle,
    ChartState,
    DisplayPoint,
    RawPoint,
    TimeBucket,
    Viewport,
)


@pytest.mark.unit
class TestRawPointModel:
    """Test RawPoint alias handling and coercion"""

    def test_camel_case_feed_keys(self):
        """Test feed rows with camelCase keys"""
        point = RawPoint.model_validate(
            {
                "timestamp": "2024-01-01T13:00:00Z",
                "actualPrice": 52.5,
                "volumeProxy": 9800,
                "aiLower": 40,
                "aiUpper": 60,
                "aiConfidence": 0.82,
            }
        )

        assert point.actual_price == 52.5
        assert point.volume_proxy == 9800.0
        assert point.ai_lower == 40.0
        assert point.ai_upper == 60.0
        assert point.ai_confidence == 0.82

    def test_legacy_row_keys(self):
        """Test pool price row keys map onto the same fields"""
        point = RawPoint.model_validate(
            {"datetime": "2024-01-01 13:00", "pool_price": 45, "forecast_pool_price": 47, "ail_mw": 10000}
        )

        assert point.timestamp == "2024-01-01 13:00"
        assert point.actual_price == 45.0
        assert point.forecast_price == 47.0
        assert point.volume_proxy == 10000.0

    def test_non_numeric_values_coerced_to_none(self):
        """Test non-numeric field values are dropped, not raised"""
        point = RawPoint.model_validate(
            {"timestamp": "2024-01-01T13:00:00Z", "actualPrice": "n/a", "aiPrice": float("nan"), "volumeProxy": True}
        )

        assert point.actual_price is None
        assert point.ai_price is None
        assert point.volume_proxy is None

    def test_numeric_strings_accepted(self):
        point = RawPoint.model_validate({"timestamp": "2024-01-01T13:00:00Z", "forecastPrice": "61.25"})

        assert point.forecast_price == 61.25

    def test_datetime_timestamp(self):
        """Test datetime timestamps are kept as ISO text"""
        point = RawPoint(timestamp=datetime(2024, 1, 1, 13, tzinfo=UTC))

        assert point.timestamp == "2024-01-01T13:00:00+00:00"

    def test_non_string_timestamp_becomes_none(self):
        point = RawPoint.model_validate({"timestamp": 12345, "actualPrice": 1})

        assert point.timestamp is None


@pytest.mark.unit
class TestTimeBucketModel:
    """Test TimeBucket key and flags"""

    def test_key_and_flags(self):
        bucket = TimeBucket(start=datetime(2024, 3, 5, 7, tzinfo=UTC), actual_price=30.0)

        assert bucket.key == (2024, 3, 5, 7)
        assert bucket.has_actual is True
        assert bucket.has_prediction is False

    def test_frozen(self):
        bucket = TimeBucket(start=datetime(2024, 3, 5, 7, tzinfo=UTC))

        with pytest.raises(ValidationError):
            bucket.actual_price = 1.0


@pytest.mark.unit
class TestDisplayPointModel:
    """Test DisplayPoint serialization to the rendering format"""

    def test_to_dict_uses_rendering_keys(self):
        point = DisplayPoint(
            timestamp=datetime(2024, 1, 1, 13, tzinfo=UTC),
            actual=50.0,
            aeso_forecast=52.0,
            ai_prediction=51.0,
            ai_lower=45.0,
            ai_upper=57.0,
            confidence_score=0.9,
            sma20=49.5,
            bb_upper=60.0,
        )

        data = point.to_dict()

        assert data["aesoForecast"] == 52.0
        assert data["aiPrediction"] == 51.0
        assert data["aiLower"] == 45.0
        assert data["aiUpper"] == 57.0
        assert data["confidenceScore"] == 0.9
        assert data["sma20"] == 49.5
        assert data["bb_upper"] == 60.0
        assert data["timestamp"] == "2024-01-01T13:00:00Z"

    def test_to_dict_omits_undefined(self):
        data = DisplayPoint(timestamp=datetime(2024, 1, 1, 13, tzinfo=UTC), ai_prediction=51.0).to_dict()

        assert set(data) == {"timestamp", "aiPrediction"}


@pytest.mark.unit
class TestCandleModel:
    """Test Candle OHLC validation"""

    def test_valid_candle(self):
        candle = Candle(
            timestamp=datetime(2024, 1, 1, tzinfo=UTC),
            open=100.0,
            high=110.0,
            low=95.0,
            close=105.0,
            volume=8000.0,
        )

        assert candle.is_forecast is False
        assert candle.volume == 8000.0

    def test_invalid_ohlc_raises(self):
        """Test high below close is rejected"""
        with pytest.raises(ValidationError, match="Invalid OHLC"):
            Candle(timestamp=datetime(2024, 1, 1, tzinfo=UTC), open=100, high=104, low=95, close=105)

    def test_low_above_open_raises(self):
        with pytest.raises(ValidationError, match="Invalid OHLC"):
            Candle(timestamp=datetime(2024, 1, 1, tzinfo=UTC), open=94, high=110, low=95, close=105)

    def test_forecast_to_dict(self):
        candle = Candle(
            timestamp=datetime(2024, 1, 1, tzinfo=UTC),
            open=100,
            high=120,
            low=90,
            close=110,
            is_forecast=True,
            confidence_lower=90,
            confidence_upper=120,
        )

        data = candle.to_dict()

        assert data["isForecast"] is True
        assert data["confidenceLower"] == 90.0
        assert data["confidenceUpper"] == 120.0


@pytest.mark.unit
class TestAlertModel:
    """Test Alert crossing and cooldown"""

    def test_camel_case_fields(self):
        alert = Alert.model_validate({"thresholdValue": 100, "condition": "above", "isActive": False})

        assert alert.threshold_value == 100.0
        assert alert.is_active is False

    def test_crossing_is_strict(self):
        above = Alert(threshold_value=100, condition="above")
        below = Alert(threshold_value=0, condition="below")

        assert above.is_crossed_by(100.01)
        assert not above.is_crossed_by(100)
        assert below.is_crossed_by(-5)
        assert not below.is_crossed_by(0)

    def test_invalid_condition(self):
        with pytest.raises(ValidationError):
            Alert(threshold_value=100, condition="equals")

    def test_cooldown(self):
        now = datetime(2024, 1, 1, 12, tzinfo=UTC)
        alert = Alert(
            threshold_value=100,
            condition="above",
            cooldown_minutes=60,
            last_triggered_at=now - timedelta(minutes=30),
        )

        assert alert.in_cooldown(now)
        assert not alert.in_cooldown(now + timedelta(minutes=31))

    def test_naive_last_triggered_is_utc(self):
        alert = Alert.model_validate(
            {"thresholdValue": 100, "condition": "above", "cooldownMinutes": 60, "lastTriggeredAt": "2024-01-01T11:50:00"}
        )

        assert alert.last_triggered_at == datetime(2024, 1, 1, 11, 50, tzinfo=UTC)
        assert alert.in_cooldown(datetime(2024, 1, 1, 12, tzinfo=UTC))
        assert not alert.in_cooldown(datetime(2024, 1, 1, 12, 50, tzinfo=UTC))

    def test_no_cooldown_by_default(self):
        alert = Alert(threshold_value=100, condition="above", last_triggered_at=datetime(2024, 1, 1, tzinfo=UTC))

        assert not alert.in_cooldown(datetime(2024, 1, 1, tzinfo=UTC))


@pytest.mark.unit
class TestViewportModel:
    """Test Viewport range validation"""

    def test_span(self):
        assert Viewport(start_index=10, end_index=14).span == 5

    def test_reversed_range_rejected(self):
        with pytest.raises(ValidationError):
            Viewport(start_index=10, end_index=4)

    def test_negative_index_rejected(self):
        with pytest.raises(ValidationError):
            Viewport(start_index=-1, end_index=4)


@pytest.mark.unit
class TestChartStateModel:
    """Test ChartState defaults"""

    def test_defaults(self):
        state = ChartState()

        assert state.interval == "1H"
        assert state.time_range == "1D"
        assert state.display_mode == "line"
        assert state.viewport is None
        assert state.displayed_length == 0
        assert state.stats.close == 0.0

    def test_invalid_display_mode(self):
        with pytest.raises(ValidationError):
            ChartState(display_mode="area")
