"""
Chart state models

- Viewport: Visible index range over the displayed series
- ChartInputs: One batch of raw points plus active alerts
- ChartState: Explicit value object passed into and returned from recompute()
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from core.models.alerts import Alert, AlertNotice
from core.models.chart_data import (
    Candle,
    DisplayPoint,
    GapInfo,
    PredictionDiff,
    SeriesStats,
    TimeBucket,
    VolumeBar,
)

DisplayMode = Literal["line", "candle"]


class Viewport(BaseModel):
    """Visible index range, inclusive on both ends"""

    model_config = ConfigDict(frozen=True)

    start_index: int = Field(ge=0)
    end_index: int = Field(ge=0)

    @model_validator(mode="after")
    def check_order(self):
        if self.end_index < self.start_index:
            raise ValueError(
                f"Viewport end {self.end_index} before start {self.start_index}"
            )
        return self

    @property
    def span(self) -> int:
        """Number of visible points"""
        return self.end_index - self.start_index + 1


class ChartInputs(BaseModel):
    """Raw point batch delivered by the data-fetch layer"""

    # Points stay unvalidated here; the merger drops malformed ones individually
    actual: list[Any] = Field(default_factory=list)
    forecast: list[Any] = Field(default_factory=list)
    prediction: list[Any] = Field(default_factory=list)
    alerts: list[Alert] = Field(default_factory=list)


class ChartState(BaseModel):
    """
    Snapshot of one render pass

    Configuration fields (indicator selection, interval, time range, display
    mode, viewport) are inputs; the remaining fields are derived by
    recompute() and never edited in place.
    """

    model_config = ConfigDict(frozen=True)

    selected_indicators: tuple[str, ...] = ()
    interval: str | int = "1H"
    time_range: str = "1D"
    display_mode: DisplayMode = "line"
    viewport: Viewport | None = None

    buckets: tuple[TimeBucket, ...] = ()
    indicators: dict[str, list[float | None]] = Field(default_factory=dict)
    display_points: tuple[DisplayPoint, ...] = ()
    candles: tuple[Candle, ...] = ()
    notices: tuple[AlertNotice, ...] = ()
    gaps: tuple[GapInfo, ...] = ()
    stats: SeriesStats = Field(default_factory=SeriesStats)
    volume_bars: tuple[VolumeBar, ...] = ()
    next_prediction: TimeBucket | None = None
    prediction_diff: PredictionDiff | None = None
    prediction_confidence: Literal["high", "medium", "low"] | None = None

    @property
    def displayed_length(self) -> int:
        """Length of the series the viewport indexes into"""
        if self.display_mode == "candle":
            return len(self.candles)
        return len(self.display_points)
