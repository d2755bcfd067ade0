"""
Test data builders shared across the chart engine tests
"""

from datetime import UTC, datetime, timedelta

from core.models.chart_data import TimeBucket

NOW = datetime(2024, 1, 15, 12, 0, tzinfo=UTC)


def hours(offset: float) -> datetime:
    """Timestamp `offset` hours from NOW"""
    return NOW + timedelta(hours=offset)


def iso(moment: datetime) -> str:
    return moment.strftime("%Y-%m-%dT%H:%M:%SZ")


def actual_bucket(offset: int, price: float, volume: float | None = None) -> TimeBucket:
    """Bucket with an observed price `offset` hours from NOW"""
    return TimeBucket(start=hours(offset), actual_price=price, volume_proxy=volume)


def prediction_bucket(
    offset: int,
    price: float,
    lower: float | None = None,
    upper: float | None = None,
    confidence: float | None = None,
) -> TimeBucket:
    """Bucket with an AI prediction `offset` hours from NOW"""
    return TimeBucket(
        start=hours(offset),
        ai_price=price,
        ai_lower=lower,
        ai_upper=upper,
        ai_confidence=confidence,
    )
