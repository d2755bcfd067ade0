"""
Header and sidebar summaries over the merged series

- compute_series_stats(): OHLC, change, average, volatility, mean load
- volume_bars(): load histogram coloured by price direction
- next_hour_prediction(): prediction for the upcoming top of hour
- prediction_diff() / confidence_level(): prediction badges
"""

import math
from collections.abc import Sequence
from datetime import datetime, timedelta
from typing import Literal

from core.models.chart_data import PredictionDiff, SeriesStats, TimeBucket, VolumeBar
from core.utils.timestamps import ensure_utc, floor_to_hour, utc_now

# Predictions this close to the next top of hour count as "next hour"
NEXT_HOUR_TOLERANCE = timedelta(minutes=30)


def compute_series_stats(buckets: Sequence[TimeBucket]) -> SeriesStats:
    """
    Statistics over the actual-price sub-series

    Returns:
        SeriesStats; all zeros when there are no actual prices

    Example:
        >>> stats = compute_series_stats(buckets)
        >>> print(f"O {stats.open:.2f} H {stats.high:.2f} ({stats.change_percent:+.2f}%)")
    """
    prices = [b.actual_price for b in buckets if b.actual_price is not None]
    if not prices:
        return SeriesStats()

    volumes = [b.volume_proxy for b in buckets if b.volume_proxy is not None and b.volume_proxy > 0]

    open_price, close_price = prices[0], prices[-1]
    change = close_price - open_price
    avg = sum(prices) / len(prices)
    variance = sum((p - avg) ** 2 for p in prices) / len(prices)

    return SeriesStats(
        open=open_price,
        high=max(prices),
        low=min(prices),
        close=close_price,
        change=change,
        change_percent=(change / open_price) * 100 if open_price != 0 else 0.0,
        avg=avg,
        volatility=math.sqrt(variance),
        volume=sum(volumes) / len(volumes) if volumes else 0.0,
    )


def volume_bars(buckets: Sequence[TimeBucket]) -> list[VolumeBar]:
    """
    Positive-volume rows flagged up/down against the previous actual price

    A bar without an actual price (or the first one) counts as up.
    """
    bars = []
    previous_price = 0.0

    for bucket in buckets:
        if bucket.volume_proxy is None or bucket.volume_proxy <= 0:
            continue

        price_up = True
        if bucket.actual_price is not None:
            price_up = bucket.actual_price >= previous_price
            previous_price = bucket.actual_price

        bars.append(VolumeBar(timestamp=bucket.start, volume=bucket.volume_proxy, price_up=price_up))

    return bars


def next_hour_prediction(
    buckets: Sequence[TimeBucket], now: datetime | None = None
) -> TimeBucket | None:
    """Prediction bucket within 30 minutes of the next top of hour"""
    now = ensure_utc(now) if now else utc_now()
    next_hour = floor_to_hour(now) + timedelta(hours=1)

    for bucket in buckets:
        if bucket.ai_price is not None and abs(bucket.start - next_hour) < NEXT_HOUR_TOLERANCE:
            return bucket
    return None


def prediction_diff(prediction: float | None, current_price: float | None) -> PredictionDiff | None:
    """
    Prediction relative to the current price

    Returns:
        PredictionDiff, or None when either price is missing or zero
    """
    if not prediction or not current_price:
        return None

    diff = prediction - current_price
    return PredictionDiff(diff=diff, percent=(diff / current_price) * 100, is_up=diff >= 0)


def confidence_level(confidence: float) -> Literal["high", "medium", "low"]:
    """Badge bucket for a 0-1 confidence score"""
    if confidence >= 0.8:
        return "high"
    if confidence >= 0.6:
        return "medium"
    return "low"
