"""
Chart Engine - recompute(state, inputs) → new state

Orchestrates one render pass:
1. Merge raw feeds into the hourly series (TimeBucketMerger)
2. Indicators over the actual-only sub-series (IndicatorEngine)
3. Observed + forecast candles (CandleAggregator)
4. Alert notices (AlertEvaluator)
5. Header and sidebar summaries (stats, volume bars, next-hour prediction)
6. Re-clamp the viewport to the displayed series (ViewportController)

Nothing is updated incrementally: every call recomputes from the inputs it
is given. The caller (UI shell, task loop) decides when to call it.
"""

import logging
import random
from datetime import datetime, timedelta

from config.settings import Settings, get_settings
from core.models.chart_data import SourceKind
from core.models.chart_state import ChartInputs, ChartState, Viewport
from core.utils.gap_handling import detect_gaps, parse_interval
from core.utils.timestamps import ensure_utc, utc_now
from services.chart_engine.alerts import AlertEvaluator
from services.chart_engine.candles import CandleAggregator
from services.chart_engine.indicator_engine import IndicatorEngine
from services.chart_engine.merger import TimeBucketMerger
from services.chart_engine.statistics import (
    compute_series_stats,
    confidence_level,
    next_hour_prediction,
    prediction_diff,
    volume_bars,
)
from services.chart_engine.viewport import ViewportController

logger = logging.getLogger(__name__)


def time_window(
    time_range: str, now: datetime, settings: Settings | None = None
) -> tuple[datetime, datetime]:
    """
    Merge window for a time range preset

    Past cutoff = now - range hours; future cutoff = now + min(range hours, max forecast hours)

    Raises:
        ValueError: If the preset is unknown

    Example:
        >>> past, future = time_window("5D", now)
        >>> (now - past).total_seconds() / 3600, (future - now).total_seconds() / 3600
        (120.0, 72.0)
    """
    settings = settings or get_settings()
    ranges = settings.TIME_RANGES
    if time_range not in ranges:
        raise ValueError(f"Unknown time range: {time_range}. Available: {', '.join(ranges)}")

    hours = ranges[time_range]
    now = ensure_utc(now)
    return (
        now - timedelta(hours=hours),
        now + timedelta(hours=min(hours, settings.MAX_FORECAST_HOURS)),
    )


class ChartEngine:
    """Pure recompute pipeline over explicit ChartState values"""

    def __init__(
        self,
        settings: Settings | None = None,
        indicator_engine: IndicatorEngine | None = None,
    ):
        self.settings = settings or get_settings()
        self.merger = TimeBucketMerger(self.settings)
        self.indicator_engine = indicator_engine or IndicatorEngine(settings=self.settings)
        self.candle_aggregator = CandleAggregator(self.settings)
        self.alert_evaluator = AlertEvaluator(self.settings)

    def recompute(
        self,
        state: ChartState,
        inputs: ChartInputs,
        *,
        now: datetime | None = None,
        rng: random.Random | None = None,
    ) -> ChartState:
        """
        Recompute every derived field of the state from a raw point batch

        Args:
            state: Previous state (configuration + viewport are read from it)
            inputs: Raw feeds and active alerts
            now: Wall-clock reference (default: current UTC time)
            rng: Optional RNG for cosmetic forecast-volume jitter

        Returns:
            New ChartState; the input state is left untouched
        """
        now = ensure_utc(now) if now else utc_now()
        cutoff_past, cutoff_future = time_window(state.time_range, now, self.settings)

        buckets = self.merger.merge(
            {
                SourceKind.ACTUAL: inputs.actual,
                SourceKind.FORECAST: inputs.forecast,
                SourceKind.PREDICTION: inputs.prediction,
            },
            now=now,
            cutoff_past=cutoff_past,
            cutoff_future=cutoff_future,
        )

        indicators = self.indicator_engine.compute_for_buckets(buckets, state.selected_indicators)
        display_points = self.indicator_engine.attach(buckets, indicators)
        candles = self.candle_aggregator.build(buckets, state.interval, now=now, rng=rng)
        notices = self.alert_evaluator.evaluate(buckets, inputs.alerts, now=now)
        gaps = detect_gaps([b.start for b in buckets])

        if gaps:
            missing = sum(g.missing_count for g in gaps)
            logger.info(f"📊 {len(gaps)} gaps in merged series, {missing} missing hours")

        stats = compute_series_stats(buckets)
        next_prediction = next_hour_prediction(buckets, now)
        confidence = next_prediction.ai_confidence if next_prediction else None

        next_state = state.model_copy(
            update={
                "buckets": tuple(buckets),
                "indicators": indicators,
                "display_points": tuple(display_points),
                "candles": tuple(candles),
                "notices": tuple(notices),
                "gaps": tuple(gaps),
                "stats": stats,
                "volume_bars": tuple(volume_bars(buckets)),
                "next_prediction": next_prediction,
                "prediction_diff": prediction_diff(
                    next_prediction.ai_price if next_prediction else None,
                    stats.close,
                ),
                "prediction_confidence": confidence_level(confidence) if confidence is not None else None,
            }
        )
        return next_state.model_copy(update={"viewport": self._clamped_viewport(next_state)})

    def configure(self, state: ChartState, **changes) -> ChartState:
        """
        Change configuration (indicators, interval, time range, display mode)

        Switching display mode resets the viewport since it indexes a
        different series. Derived fields are stale until the next recompute().
        """
        unknown = set(changes) - {"selected_indicators", "interval", "time_range", "display_mode"}
        if unknown:
            raise ValueError(f"Not configuration fields: {sorted(unknown)}")

        if "interval" in changes:
            parse_interval(changes["interval"])
        if "time_range" in changes and changes["time_range"] not in self.settings.TIME_RANGES:
            raise ValueError(f"Unknown time range: {changes['time_range']}")
        if "selected_indicators" in changes:
            changes["selected_indicators"] = tuple(dict.fromkeys(changes["selected_indicators"]))
        if "display_mode" in changes and changes["display_mode"] != state.display_mode:
            changes["viewport"] = None

        return ChartState.model_validate({**state.model_dump(), **changes})

    def update_viewport(self, state: ChartState, operation: str, **kwargs) -> ChartState:
        """
        Apply a viewport operation to the displayed series

        Operations:
            zoom_in, zoom_out, reset,
            jump_to_now(now=None),
            pan(delta_pixels, container_width, pan_speed=None),
            brush(start_index, end_index)

        Returns:
            New state with the updated viewport
        """
        controller = ViewportController(state.displayed_length, state.viewport, self.settings)

        if operation == "zoom_in":
            controller.zoom_in()
        elif operation == "zoom_out":
            controller.zoom_out()
        elif operation == "reset":
            controller.reset()
        elif operation == "jump_to_now":
            controller.jump_to_now(self._displayed_timestamps(state), now=kwargs.get("now"))
        elif operation == "pan":
            controller.pan(**kwargs)
        elif operation == "brush":
            controller.set_range(kwargs["start_index"], kwargs["end_index"])
        else:
            raise ValueError(f"Unknown viewport operation: {operation}")

        return state.model_copy(update={"viewport": controller.viewport})

    def visible(self, state: ChartState) -> list:
        """Display points (line mode) or candles (candle mode) inside the viewport"""
        series = state.candles if state.display_mode == "candle" else state.display_points
        controller = ViewportController(len(series), state.viewport, self.settings)
        return controller.slice(series)

    def _clamped_viewport(self, state: ChartState) -> Viewport | None:
        length = state.displayed_length
        if not length:
            return None
        return ViewportController(length, state.viewport, self.settings).viewport

    @staticmethod
    def _displayed_timestamps(state: ChartState) -> list[datetime]:
        if state.display_mode == "candle":
            return [c.timestamp for c in state.candles]
        return [p.timestamp for p in state.display_points]


def recompute(
    state: ChartState,
    inputs: ChartInputs,
    *,
    now: datetime | None = None,
    rng: random.Random | None = None,
) -> ChartState:
    """
    recompute(state, inputs) → new state with default settings

    Example:
        >>> state = recompute(ChartState(selected_indicators=("sma20",)), inputs, now=now)
        >>> [p.to_dict() for p in ChartEngine().visible(state)]
    """
    return ChartEngine().recompute(state, inputs, now=now, rng=rng)
