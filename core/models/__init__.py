"""Models module - Pydantic data models"""

from .alerts import Alert, AlertNotice
from .chart_data import (
    Candle,
    DisplayPoint,
    GapInfo,
    PredictionDiff,
    RawPoint,
    SeriesStats,
    SourceKind,
    TimeBucket,
    VolumeBar,
)
from .chart_state import ChartInputs, ChartState, DisplayMode, Viewport

__all__ = [
    "RawPoint",
    "SourceKind",
    "TimeBucket",
    "DisplayPoint",
    "Candle",
    "GapInfo",
    "SeriesStats",
    "VolumeBar",
    "PredictionDiff",
    "Alert",
    "AlertNotice",
    "Viewport",
    "ChartInputs",
    "ChartState",
    "DisplayMode",
]
