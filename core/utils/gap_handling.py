"""
Gap detection utilities for the merged hourly series

Feeds go quiet for hours at a time (publication delays, outages, the
forecast horizon ending before the prediction horizon). Gaps are reported,
never filled: fabricating prices would leak into indicators and candles.
"""

from collections.abc import Sequence
from datetime import datetime, timedelta

from core.exceptions import InvalidPeriodError
from core.models.chart_data import GapInfo

# Interval presets offered by the chart toolbar
INTERVAL_HOURS = {
    "1H": 1,
    "4H": 4,
    "1D": 24,
    "1W": 168,
}


def detect_gaps(
    timestamps: Sequence[datetime], expected_interval_minutes: int = 60
) -> list[GapInfo]:
    """
    Detect missing slots in an ascending time series

    Args:
        timestamps: Bucket start times (must be sorted ascending)
        expected_interval_minutes: Expected spacing (60 for the merged series)

    Returns:
        List of gaps detected (empty list if no gaps)

    Example:
        >>> starts = [bucket_at_09_00, bucket_at_13_00]  # Missing 10:00-12:00
        >>> gaps = detect_gaps(starts)
        >>> gaps[0].missing_count
        3
    """
    if len(timestamps) < 2:
        return []

    gaps = []
    expected_delta = timedelta(minutes=expected_interval_minutes)

    for current_time, next_time in zip(timestamps, timestamps[1:]):
        actual_delta = next_time - current_time

        if actual_delta > expected_delta:
            missing_count = int(actual_delta / expected_delta) - 1
            if missing_count < 1:
                continue
            gaps.append(
                GapInfo(
                    start_time=current_time + expected_delta,
                    end_time=next_time - expected_delta,
                    missing_count=missing_count,
                    expected_interval_minutes=expected_interval_minutes,
                )
            )

    return gaps


def parse_interval(interval: str | int) -> int:
    """
    Convert a candle interval to hours

    Args:
        interval: Interval preset (1H, 4H, 1D, 1W) or a positive hour count

    Returns:
        Interval in hours

    Raises:
        InvalidPeriodError: If interval is not supported

    Example:
        >>> parse_interval("4H")
        4
        >>> parse_interval("1W")
        168
    """
    if isinstance(interval, bool):
        raise InvalidPeriodError(f"Unsupported interval: {interval}")
    if isinstance(interval, int):
        if interval <= 0:
            raise InvalidPeriodError(f"Interval must be positive, got {interval}")
        return interval

    key = interval.strip().upper()
    if key not in INTERVAL_HOURS:
        raise InvalidPeriodError(
            f"Unsupported interval: {interval}. Available: {', '.join(INTERVAL_HOURS)}"
        )
    return INTERVAL_HOURS[key]
