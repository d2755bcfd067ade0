"""
Candle Aggregator - OHLC candles over the merged series

Historical candles bucket actual prices into epoch-aligned intervals.
Forecast candles chain from the last observed close through upcoming AI
predictions. Their volume is an estimate only: it repeats the last observed
candle volume, optionally jittered by a caller-supplied RNG.
"""

import logging
import random
from collections.abc import Sequence
from datetime import UTC, datetime

from config.settings import Settings, get_settings
from core.models.chart_data import Candle, TimeBucket
from core.utils.gap_handling import parse_interval
from core.utils.timestamps import ensure_utc, utc_now

logger = logging.getLogger(__name__)

_HOUR_MS = 3_600_000


def bucket_start(moment: datetime, interval_hours: int) -> datetime:
    """
    Start of the interval bucket containing moment

    Formula: floor(epoch_ms / interval_ms) × interval_ms

    Example:
        >>> bucket_start(datetime(2024, 1, 1, 13, 30, tzinfo=UTC), 4)
        datetime.datetime(2024, 1, 1, 12, 0, tzinfo=datetime.timezone.utc)
    """
    interval_ms = interval_hours * _HOUR_MS
    epoch_ms = int(ensure_utc(moment).timestamp() * 1000)
    return datetime.fromtimestamp((epoch_ms // interval_ms) * interval_ms / 1000, tz=UTC)


class CandleAggregator:
    """Build observed and forecast OHLC candles"""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()

    def aggregate(self, buckets: Sequence[TimeBucket], interval: str | int) -> list[Candle]:
        """
        Aggregate actual prices into OHLC candles

        Rules:
        - open = first price in the bucket, close = last (chronological)
        - high/low = running max/min
        - volume = mean of positive volume samples (0 if none)
        - buckets without an actual price never produce a candle

        Args:
            buckets: Merged series (ascending)
            interval: Interval preset (1H, 4H, 1D, 1W) or hours

        Returns:
            Ascending, non-overlapping candles
        """
        interval_hours = parse_interval(interval)
        groups: dict[datetime, dict] = {}

        for bucket in buckets:
            price = bucket.actual_price
            if price is None:
                continue

            start = bucket_start(bucket.start, interval_hours)
            group = groups.get(start)
            if group is None:
                group = {"open": price, "high": price, "low": price, "close": price, "volumes": []}
                groups[start] = group
            else:
                group["high"] = max(group["high"], price)
                group["low"] = min(group["low"], price)
                group["close"] = price

            if bucket.volume_proxy is not None and bucket.volume_proxy > 0:
                group["volumes"].append(bucket.volume_proxy)

        candles = []
        for start in sorted(groups):
            group = groups[start]
            volumes = group["volumes"]
            candles.append(
                Candle(
                    timestamp=start,
                    open=group["open"],
                    high=group["high"],
                    low=group["low"],
                    close=group["close"],
                    volume=sum(volumes) / len(volumes) if volumes else 0.0,
                )
            )

        return candles

    def synthesize_forecast(
        self,
        predictions: Sequence[TimeBucket],
        interval: str | int,
        *,
        last_close: float | None,
        last_volume: float = 0.0,
        after: datetime | None = None,
        now: datetime | None = None,
        rng: random.Random | None = None,
    ) -> list[Candle]:
        """
        Synthesize forecast candles from upcoming predictions

        Each candle opens at the previous candle's close (the first at
        last_close), closes at the bucket's last predicted price, and widens
        high/low to cover open, close, every predicted price in the bucket,
        and the confidence bounds.

        Args:
            predictions: Buckets carrying ai_price (others are ignored)
            interval: Interval preset or hours
            last_close: Close of the last observed candle (None: first forecast
                candle opens at its own first prediction)
            last_volume: Volume of the last observed candle
            after: Skip forecast buckets starting at or before this time
                (the last observed candle's start)
            now: Only predictions strictly after now are used, and only in
                buckets starting at or after now
            rng: Optional RNG for cosmetic ±jitter on the estimated volume

        Returns:
            Ascending forecast candles (is_forecast=True)

        Example:
            >>> aggregator.synthesize_forecast(preds_110_then_90, "1H", last_close=100, now=now)
            [Candle(open=100, close=110, ...), Candle(open=110, close=90, ...)]
        """
        interval_hours = parse_interval(interval)
        now = ensure_utc(now) if now else utc_now()
        after = ensure_utc(after) if after else None

        groups: dict[datetime, list[TimeBucket]] = {}
        for bucket in predictions:
            if bucket.ai_price is None or bucket.start <= now:
                continue
            start = bucket_start(bucket.start, interval_hours)
            # The in-progress bucket starts before now
            if start < now or (after is not None and start <= after):
                continue
            groups.setdefault(start, []).append(bucket)

        candles = []
        previous_close = last_close

        for start in sorted(groups):
            members = sorted(groups[start], key=lambda b: b.start)
            prices = [b.ai_price for b in members]
            lowers = [b.ai_lower for b in members if b.ai_lower is not None]
            uppers = [b.ai_upper for b in members if b.ai_upper is not None]

            open_price = previous_close if previous_close is not None else prices[0]
            close_price = prices[-1]
            confidence_lower = min(lowers) if lowers else None
            confidence_upper = max(uppers) if uppers else None

            candles.append(
                Candle(
                    timestamp=start,
                    open=open_price,
                    high=max([open_price, *prices, *uppers]),
                    low=min([open_price, *prices, *lowers]),
                    close=close_price,
                    volume=self._estimate_volume(last_volume, rng),
                    is_forecast=True,
                    confidence_lower=confidence_lower,
                    confidence_upper=confidence_upper,
                )
            )
            previous_close = close_price

        return candles

    def build(
        self,
        buckets: Sequence[TimeBucket],
        interval: str | int,
        *,
        now: datetime | None = None,
        rng: random.Random | None = None,
    ) -> list[Candle]:
        """
        Observed candles followed by the forecast chain

        Args:
            buckets: Merged series (ascending)
            interval: Interval preset or hours
            now: Wall-clock reference (default: current UTC time)
            rng: Optional RNG for forecast volume jitter

        Returns:
            Ascending candles; forecast candles start after the last observed one
        """
        history = self.aggregate(buckets, interval)
        last = history[-1] if history else None

        forecast = self.synthesize_forecast(
            buckets,
            interval,
            last_close=last.close if last else None,
            last_volume=last.volume if last else 0.0,
            after=last.timestamp if last else None,
            now=now,
            rng=rng,
        )

        if history or forecast:
            logger.debug(f"✓ Built {len(history)} candles + {len(forecast)} forecast candles")
        return history + forecast

    def _estimate_volume(self, last_volume: float, rng: random.Random | None) -> float:
        """Non-authoritative placeholder volume for a forecast candle"""
        if rng is None:
            return last_volume
        jitter = self.settings.FORECAST_VOLUME_JITTER
        return last_volume * rng.uniform(1 - jitter, 1 + jitter)


def candle_domain(
    candles: Sequence[Candle], padding: float | None = None
) -> tuple[float, float] | None:
    """
    Padded y-axis domain covering every wick and confidence bound

    Formula: [min - padding × span, max + padding × span]

    Args:
        candles: Candles to cover
        padding: Fraction of the span added on each side (default from settings)

    Returns:
        (low, high), or None for no candles. A flat series pads by 1.0.
    """
    if not candles:
        return None

    if padding is None:
        padding = get_settings().CANDLE_DOMAIN_PADDING

    lows = [c.low for c in candles] + [c.confidence_lower for c in candles if c.confidence_lower is not None]
    highs = [c.high for c in candles] + [c.confidence_upper for c in candles if c.confidence_upper is not None]

    low, high = min(lows), max(highs)
    span = high - low
    pad = span * padding if span > 0 else 1.0
    return (low - pad, high + pad)
