"""
Alert Evaluator - Advisory notices over the merged series

Rules (each evaluated independently, emitted in this order):
1. Spike: an upcoming predicted price above the spike threshold
2. Negative price: an upcoming predicted price below zero
3. Optimal timing: cheapest of the next N predicted points
4. Volatility: spread of the next N predicted prices around the first one
5. User thresholds: each active alert crossed by the latest price, or by an
   upcoming predicted price

Pure: identical inputs give identical, order-stable notices. Whether a
notice was already delivered is tracked outside the engine.
"""

import logging
import math
from collections.abc import Sequence
from datetime import datetime

from config.settings import Settings, get_settings
from core.models.alerts import Alert, AlertNotice
from core.models.chart_data import TimeBucket
from core.utils.timestamps import ensure_utc, utc_now
from services.chart_engine.merger import actual_buckets, upcoming_predictions

logger = logging.getLogger(__name__)


def _hours_until(moment: datetime, now: datetime) -> float:
    return round((moment - now).total_seconds() / 3600, 1)


def deviation_from_first(prices: Sequence[float]) -> float:
    """
    Population standard deviation measured around the first price

    Formula: sqrt(Σ(p - p₀)² / n)
    """
    if not prices:
        return 0.0
    first = prices[0]
    return math.sqrt(sum((p - first) ** 2 for p in prices) / len(prices))


class AlertEvaluator:
    """Scan the merged series for spike, negative-price, timing, volatility and threshold conditions"""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()

    def evaluate(
        self,
        buckets: Sequence[TimeBucket],
        alerts: Sequence[Alert] = (),
        *,
        now: datetime | None = None,
    ) -> list[AlertNotice]:
        """
        Evaluate every rule

        Args:
            buckets: Merged series (ascending)
            alerts: User-configured thresholds (inactive ones are ignored)
            now: Wall-clock reference (default: current UTC time)

        Returns:
            Notices in rule order, thresholds in alert order
        """
        now = ensure_utc(now) if now else utc_now()
        upcoming = upcoming_predictions(buckets, now)

        notices: list[AlertNotice] = []
        notices.extend(self._spike(upcoming, now))
        notices.extend(self._negative(upcoming, now))
        notices.extend(self._optimal_timing(upcoming, now))
        notices.extend(self._volatility(upcoming))
        notices.extend(self._thresholds(buckets, upcoming, alerts, now))

        if notices:
            logger.debug(f"Evaluated {len(alerts)} alerts → {len(notices)} notices")
        return notices

    def _spike(self, upcoming: list[TimeBucket], now: datetime) -> list[AlertNotice]:
        threshold = self.settings.ALERT_SPIKE_THRESHOLD
        first = next((b for b in upcoming if b.ai_price > threshold), None)
        if first is None:
            return []

        hours = _hours_until(first.start, now)
        return [
            AlertNotice(
                kind="spike",
                severity="critical",
                message=f"Price spike to ${first.ai_price:.2f}/MWh predicted in {hours:g}h",
                timestamp=first.start,
                value=first.ai_price,
                hours_until=hours,
            )
        ]

    def _negative(self, upcoming: list[TimeBucket], now: datetime) -> list[AlertNotice]:
        threshold = self.settings.ALERT_NEGATIVE_THRESHOLD
        first = next((b for b in upcoming if b.ai_price < threshold), None)
        if first is None:
            return []

        hours = _hours_until(first.start, now)
        return [
            AlertNotice(
                kind="negative_price",
                severity="warning",
                message=f"Negative price ${first.ai_price:.2f}/MWh predicted in {hours:g}h",
                timestamp=first.start,
                value=first.ai_price,
                hours_until=hours,
            )
        ]

    def _optimal_timing(self, upcoming: list[TimeBucket], now: datetime) -> list[AlertNotice]:
        window = upcoming[: self.settings.ALERT_LOOKAHEAD_POINTS]
        if not window:
            return []

        cheapest = min(window, key=lambda b: b.ai_price)
        return [
            AlertNotice(
                kind="optimal_timing",
                severity="info",
                message=(
                    f"Lowest predicted price ${cheapest.ai_price:.2f}/MWh at "
                    f"{cheapest.start:%Y-%m-%d %H:%M} UTC"
                ),
                timestamp=cheapest.start,
                value=cheapest.ai_price,
                hours_until=_hours_until(cheapest.start, now),
            )
        ]

    def _volatility(self, upcoming: list[TimeBucket]) -> list[AlertNotice]:
        window = upcoming[: self.settings.ALERT_LOOKAHEAD_POINTS]
        if len(window) < 2:
            return []

        deviation = deviation_from_first([b.ai_price for b in window])
        if deviation <= self.settings.ALERT_VOLATILITY_THRESHOLD:
            return []

        return [
            AlertNotice(
                kind="volatility",
                severity="warning",
                message=f"High volatility expected: ±${deviation:.2f}/MWh over the next {len(window)}h",
                value=deviation,
            )
        ]

    def _thresholds(
        self,
        buckets: Sequence[TimeBucket],
        upcoming: list[TimeBucket],
        alerts: Sequence[Alert],
        now: datetime,
    ) -> list[AlertNotice]:
        actuals = [b for b in actual_buckets(buckets) if b.start <= now]
        latest = actuals[-1] if actuals else None

        notices = []
        for alert in alerts:
            if not alert.is_active or alert.in_cooldown(now):
                continue

            direction = "above" if alert.condition == "above" else "below"

            if latest is not None and alert.is_crossed_by(latest.actual_price):
                notices.append(
                    AlertNotice(
                        kind="threshold",
                        severity="warning",
                        message=(
                            f"Price ${latest.actual_price:.2f}/MWh is {direction} "
                            f"your ${alert.threshold_value:.2f} threshold"
                        ),
                        timestamp=latest.start,
                        value=latest.actual_price,
                        alert_id=alert.id,
                    )
                )
                continue

            crossing = next((b for b in upcoming if alert.is_crossed_by(b.ai_price)), None)
            if crossing is not None:
                hours = _hours_until(crossing.start, now)
                notices.append(
                    AlertNotice(
                        kind="threshold",
                        severity="info",
                        message=(
                            f"Predicted ${crossing.ai_price:.2f}/MWh {direction} "
                            f"your ${alert.threshold_value:.2f} threshold in {hours:g}h"
                        ),
                        timestamp=crossing.start,
                        value=crossing.ai_price,
                        hours_until=hours,
                        alert_id=alert.id,
                    )
                )

        return notices
