"""
Chart data models

Pydantic models for the chart series:
- RawPoint: One observation from a source feed (actual, forecast, prediction)
- TimeBucket: Hour-keyed merged unit
- DisplayPoint: Row consumed by the rendering layer
- Candle: OHLC candlestick (observed or synthesized forecast)
- GapInfo: Missing hours in the merged series
- SeriesStats, VolumeBar, PredictionDiff: Header/sidebar summaries
"""

import math
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator


class SourceKind(str, Enum):
    """Feed a raw point came from"""

    ACTUAL = "actual"
    FORECAST = "forecast"
    PREDICTION = "prediction"


def _coerce_number(value: Any) -> float | None:
    """Return a finite float, or None for anything non-numeric"""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


class RawPoint(BaseModel):
    """
    Raw observation from one source feed

    Accepts the camelCase feed keys (actualPrice, aiLower, ...), the
    snake_case field names, and the legacy pool-price row keys
    (pool_price, forecast_pool_price, ail_mw). Non-numeric values are
    coerced to None rather than rejected.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    timestamp: str | None = Field(
        default=None,
        validation_alias=AliasChoices("timestamp", "datetime"),
        description="ISO-8601 or 'YYYY-MM-DD HH:mm' timestamp",
    )
    actual_price: float | None = Field(
        default=None, validation_alias=AliasChoices("actualPrice", "actual_price", "pool_price")
    )
    volume_proxy: float | None = Field(
        default=None, validation_alias=AliasChoices("volumeProxy", "volume_proxy", "ail_mw")
    )
    forecast_price: float | None = Field(
        default=None,
        validation_alias=AliasChoices("forecastPrice", "forecast_price", "forecast_pool_price"),
    )
    ai_price: float | None = Field(
        default=None, validation_alias=AliasChoices("aiPrice", "ai_price", "price")
    )
    ai_lower: float | None = Field(
        default=None, validation_alias=AliasChoices("aiLower", "ai_lower", "confidenceLower")
    )
    ai_upper: float | None = Field(
        default=None, validation_alias=AliasChoices("aiUpper", "ai_upper", "confidenceUpper")
    )
    ai_confidence: float | None = Field(
        default=None,
        validation_alias=AliasChoices("aiConfidence", "ai_confidence", "confidenceScore"),
    )

    @field_validator("timestamp", mode="before")
    @classmethod
    def timestamp_as_text(cls, v):
        if isinstance(v, datetime):
            return v.isoformat()
        return v if isinstance(v, str) else None

    @field_validator(
        "actual_price",
        "volume_proxy",
        "forecast_price",
        "ai_price",
        "ai_lower",
        "ai_upper",
        "ai_confidence",
        mode="before",
    )
    @classmethod
    def numeric_or_none(cls, v):
        return _coerce_number(v)


class TimeBucket(BaseModel):
    """
    One hour-aligned slot of the merged series

    Holds at most one value per field. Keyed by (year, month, day, hour) in UTC.
    """

    model_config = ConfigDict(frozen=True)

    start: datetime = Field(description="Bucket start (UTC, top of hour)")
    actual_price: float | None = None
    volume_proxy: float | None = None
    forecast_price: float | None = None
    ai_price: float | None = None
    ai_lower: float | None = None
    ai_upper: float | None = None
    ai_confidence: float | None = None

    @property
    def key(self) -> tuple[int, int, int, int]:
        """Bucket key (year, month, day, hour)"""
        return (self.start.year, self.start.month, self.start.day, self.start.hour)

    @property
    def has_actual(self) -> bool:
        return self.actual_price is not None

    @property
    def has_prediction(self) -> bool:
        return self.ai_price is not None


class DisplayPoint(BaseModel):
    """
    One row of the rendered line chart

    Serialized with the rendering layer's keys (aesoForecast, aiPrediction, ...)
    via to_dict().
    """

    timestamp: datetime
    actual: float | None = None
    aeso_forecast: float | None = Field(default=None, serialization_alias="aesoForecast")
    ai_prediction: float | None = Field(default=None, serialization_alias="aiPrediction")
    ai_lower: float | None = Field(default=None, serialization_alias="aiLower")
    ai_upper: float | None = Field(default=None, serialization_alias="aiUpper")
    confidence_score: float | None = Field(default=None, serialization_alias="confidenceScore")
    volume: float | None = None
    sma20: float | None = None
    sma50: float | None = None
    ema12: float | None = None
    ema26: float | None = None
    bb_upper: float | None = None
    bb_middle: float | None = None
    bb_lower: float | None = None

    def to_dict(self) -> dict:
        """Convert to the rendering layer's row format (undefined fields omitted)"""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Candle(BaseModel):
    """
    OHLC candlestick

    Observed candles aggregate actual prices inside one interval bucket.
    Forecast candles (is_forecast=True) are synthesized from predictions and
    carry the prediction's confidence bounds.
    """

    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(description="Candle bucket start (UTC)")
    open: float = Field(description="Opening price")
    high: float = Field(description="Highest price in interval")
    low: float = Field(description="Lowest price in interval")
    close: float = Field(description="Closing price")
    volume: float = Field(default=0.0, description="Mean positive load sample (estimated for forecasts)")
    is_forecast: bool = Field(default=False, serialization_alias="isForecast")
    confidence_lower: float | None = Field(default=None, serialization_alias="confidenceLower")
    confidence_upper: float | None = Field(default=None, serialization_alias="confidenceUpper")

    @model_validator(mode="after")
    def check_ohlc(self):
        if self.low > min(self.open, self.close) or self.high < max(self.open, self.close):
            raise ValueError(
                f"Invalid OHLC: open={self.open} high={self.high} "
                f"low={self.low} close={self.close}"
            )
        return self

    def to_dict(self) -> dict:
        """Convert to the rendering layer's candle format"""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class GapInfo(BaseModel):
    """Run of missing hourly buckets between two present ones"""

    start_time: datetime = Field(description="First missing bucket start")
    end_time: datetime = Field(description="Last missing bucket start")
    missing_count: int = Field(description="Number of missing buckets")
    expected_interval_minutes: int = Field(default=60)


class SeriesStats(BaseModel):
    """Header statistics over the actual-price sub-series"""

    open: float = 0.0
    high: float = 0.0
    low: float = 0.0
    close: float = 0.0
    change: float = 0.0
    change_percent: float = 0.0
    avg: float = 0.0
    volatility: float = 0.0
    volume: float = 0.0


class VolumeBar(BaseModel):
    """Volume histogram bar, coloured by price direction"""

    timestamp: datetime
    volume: float
    price_up: bool


class PredictionDiff(BaseModel):
    """Prediction relative to the current price"""

    diff: float
    percent: float
    is_up: bool
