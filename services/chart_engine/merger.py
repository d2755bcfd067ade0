"""
Time Bucket Merger - Reconcile independent feeds into one hourly series

Feeds:
- actual: observed pool price + load (volume proxy)
- forecast: vendor forecast price
- prediction: AI price with confidence band

Merge policy (one rule per feed, applied in feed order):

    feed        fields                                    rule
    ----------  ----------------------------------------  ----------------------------------
    actual      actual_price, volume_proxy                only buckets starting at or before
                                                          now (+ tolerance); later point wins
    forecast    forecast_price                            overwrite on arrival
    prediction  ai_price, ai_lower, ai_upper,             overwrite on arrival
                ai_confidence

Feeds never share fields, so a later feed only adds fields to a bucket.
A field missing from a point never erases a value set by an earlier point.
"""

import logging
from collections.abc import Mapping, Sequence
from datetime import datetime, timedelta
from typing import Any

from pydantic import BaseModel, ConfigDict

from config.settings import Settings, get_settings
from core.models.chart_data import SourceKind, TimeBucket
from core.utils.timestamps import ensure_utc, floor_to_hour, utc_now
from core.validators.chart_data import SOURCE_FIELDS, RawPointValidator

logger = logging.getLogger(__name__)


class MergeRule(BaseModel):
    """How one feed writes into a bucket"""

    model_config = ConfigDict(frozen=True)

    fields: tuple[str, ...]
    past_only: bool = False


MERGE_POLICY: dict[SourceKind, MergeRule] = {
    SourceKind.ACTUAL: MergeRule(fields=SOURCE_FIELDS[SourceKind.ACTUAL], past_only=True),
    SourceKind.FORECAST: MergeRule(fields=SOURCE_FIELDS[SourceKind.FORECAST]),
    SourceKind.PREDICTION: MergeRule(fields=SOURCE_FIELDS[SourceKind.PREDICTION]),
}

FeedBatch = Mapping[SourceKind | str, Sequence[Any]]


class TimeBucketMerger:
    """Merge raw feed batches into an ascending, hour-keyed TimeBucket series"""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()

    def merge(
        self,
        sources: FeedBatch,
        *,
        now: datetime | None = None,
        cutoff_past: datetime | None = None,
        cutoff_future: datetime | None = None,
    ) -> list[TimeBucket]:
        """
        Merge feed batches

        Steps:
        1. Validate each point (bad timestamps, empty rows, out-of-window → dropped)
        2. Find or create the bucket for the point's hour
        3. Apply the feed's merge rule
        4. Sort buckets ascending by start

        Args:
            sources: Feed → points, keyed by SourceKind or its value ("actual", ...)
            now: Wall-clock reference (default: current UTC time)
            cutoff_past: Earliest accepted timestamp (inclusive)
            cutoff_future: Latest accepted timestamp (inclusive)

        Returns:
            Ascending list of TimeBuckets; empty list if nothing survives

        Example:
            >>> merger = TimeBucketMerger()
            >>> buckets = merger.merge({
            ...     "actual": [{"timestamp": "2024-01-01T00:00:00Z", "actualPrice": 50}],
            ...     "prediction": [{"timestamp": "2024-01-01T00:00:00Z", "aiPrice": 55}],
            ... })
            >>> buckets[0].actual_price, buckets[0].ai_price
            (50.0, 55.0)
        """
        now = ensure_utc(now) if now else utc_now()
        validator = RawPointValidator(
            cutoff_past=ensure_utc(cutoff_past) if cutoff_past else None,
            cutoff_future=ensure_utc(cutoff_future) if cutoff_future else None,
        )
        latest_actual_start = now + timedelta(seconds=self.settings.ACTUAL_FUTURE_TOLERANCE_SECONDS)

        slots: dict[datetime, dict[str, Any]] = {}
        total_points = 0

        for source in SourceKind:
            points = self._points_for(sources, source)
            rule = MERGE_POLICY[source]
            total_points += len(points)

            for raw in points:
                result = validator.validate(raw, source)
                if result is None:
                    continue

                point, moment = result
                start = floor_to_hour(moment)
                slot = slots.setdefault(start, {"start": start})

                if rule.past_only and start > latest_actual_start:
                    continue

                for field in rule.fields:
                    value = getattr(point, field)
                    if value is not None:
                        slot[field] = value

        buckets = sorted((TimeBucket(**slot) for slot in slots.values()), key=lambda b: b.start)

        stats = validator.get_stats()
        if total_points and not buckets:
            logger.warning(f"⚠️ All {total_points} points dropped during merge: {stats}")
        elif stats["rejected"]:
            logger.info(
                f"✓ Merged {len(buckets)} buckets from {total_points} points "
                f"({stats['rejected']} dropped)"
            )
        else:
            logger.debug(f"✓ Merged {len(buckets)} buckets from {total_points} points")

        return buckets

    @staticmethod
    def _points_for(sources: FeedBatch, source: SourceKind) -> Sequence[Any]:
        """Look up a feed by enum or string key"""
        if source in sources:
            return sources[source] or ()
        return sources.get(source.value) or ()


def actual_buckets(buckets: Sequence[TimeBucket]) -> list[TimeBucket]:
    """Actual-only sub-sequence, in chronological order"""
    return [b for b in buckets if b.actual_price is not None]


def upcoming_predictions(buckets: Sequence[TimeBucket], now: datetime) -> list[TimeBucket]:
    """Prediction buckets starting strictly after now"""
    now = ensure_utc(now)
    return [b for b in buckets if b.ai_price is not None and b.start > now]
