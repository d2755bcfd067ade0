"""
Data quality validator for raw chart feed points

Validates:
- Point shape (mapping or RawPoint)
- Timestamp parsing (ISO-8601 and "YYYY-MM-DD HH:mm")
- Source field presence (a point must carry a value for its own feed)
- Merge window bounds
"""

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from pydantic import ValidationError

from core.models.chart_data import RawPoint, SourceKind
from core.utils.timestamps import parse_timestamp

logger = logging.getLogger(__name__)

# Fields each feed is allowed to contribute
SOURCE_FIELDS: dict[SourceKind, tuple[str, ...]] = {
    SourceKind.ACTUAL: ("actual_price", "volume_proxy"),
    SourceKind.FORECAST: ("forecast_price",),
    SourceKind.PREDICTION: ("ai_price", "ai_lower", "ai_upper", "ai_confidence"),
}


class RawPointValidator:
    """
    Point-level validation for one merge pass

    Features:
    - Never raises for bad data; rejected points are counted and logged
    - Window filtering with inclusive bounds
    - Per-reason rejection tracking
    """

    def __init__(
        self,
        cutoff_past: datetime | None = None,
        cutoff_future: datetime | None = None,
    ):
        """
        Initialize validator

        Args:
            cutoff_past: Earliest accepted timestamp (inclusive), None for unbounded
            cutoff_future: Latest accepted timestamp (inclusive), None for unbounded
        """
        self.cutoff_past = cutoff_past
        self.cutoff_future = cutoff_future
        self.accepted_count = 0
        self.rejected: dict[str, int] = {}

    def validate(
        self, raw: RawPoint | Mapping[str, Any], source: SourceKind
    ) -> tuple[RawPoint, datetime] | None:
        """
        Validate a raw point from one feed

        Checks:
        1. Point parses into a RawPoint
        2. Timestamp parses
        3. Point carries at least one field of its feed
        4. Timestamp lies inside the merge window

        Args:
            raw: Feed row (dict with camelCase keys) or RawPoint
            source: Feed the row came from

        Returns:
            (point, parsed UTC timestamp), or None if the point is dropped

        Example:
            >>> validator = RawPointValidator()
            >>> validator.validate({"timestamp": "2024-01-01 13:00", "actualPrice": 50}, SourceKind.ACTUAL)
            (RawPoint(...), datetime.datetime(2024, 1, 1, 13, 0, tzinfo=...))
        """
        # 1. Shape
        if isinstance(raw, RawPoint):
            point = raw
        elif isinstance(raw, Mapping):
            try:
                point = RawPoint.model_validate(dict(raw))
            except ValidationError as e:
                return self._reject("malformed", f"{e.error_count()} validation errors")
        else:
            return self._reject("malformed", f"unsupported point type {type(raw).__name__}")

        # 2. Timestamp
        moment = parse_timestamp(point.timestamp)
        if moment is None:
            return self._reject("bad_timestamp", repr(point.timestamp))

        # 3. Source fields
        if all(getattr(point, field) is None for field in SOURCE_FIELDS[source]):
            return self._reject("no_fields", f"{source.value} point at {moment.isoformat()}")

        # 4. Window
        if self.cutoff_past is not None and moment < self.cutoff_past:
            return self._reject("outside_window", moment.isoformat())
        if self.cutoff_future is not None and moment > self.cutoff_future:
            return self._reject("outside_window", moment.isoformat())

        self.accepted_count += 1
        return point, moment

    def _reject(self, reason: str, detail: str) -> None:
        self.rejected[reason] = self.rejected.get(reason, 0) + 1
        logger.debug(f"Dropped point ({reason}): {detail}")
        return None

    @property
    def rejected_count(self) -> int:
        return sum(self.rejected.values())

    def get_stats(self) -> dict[str, int]:
        """
        Get validation statistics

        Returns:
            Dictionary with accepted, rejected and per-reason counts

        Example:
            >>> stats = validator.get_stats()
            >>> print(f"Accepted: {stats['accepted']}, bad timestamps: {stats.get('bad_timestamp', 0)}")
        """
        return {
            "accepted": self.accepted_count,
            "rejected": self.rejected_count,
            **self.rejected,
        }
