"""
Viewport Controller - Zoom, pan, brush and jump-to-now over the displayed series

Owns the only mutable state in the engine: the visible [start, end] index
range (inclusive). Every operation clamps instead of raising, and keeps at
least min_span points visible whenever the series has that many.
"""

import logging
import math
from collections.abc import Sequence
from datetime import datetime
from typing import TypeVar

from config.settings import Settings, get_settings
from core.models.chart_state import Viewport
from core.utils.timestamps import ensure_utc, utc_now

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


class ViewportController:
    """
    Visible index range over a series of `length` points

    Example:
        >>> controller = ViewportController(length=100)
        >>> controller.zoom_in()
        Viewport(start_index=20, end_index=79)
        >>> controller.pan(delta_pixels=50, container_width=500)
        Viewport(start_index=30, end_index=89)
    """

    def __init__(
        self,
        length: int,
        viewport: Viewport | None = None,
        settings: Settings | None = None,
    ):
        """
        Initialize controller

        Args:
            length: Number of points in the displayed series
            viewport: Previous range to restore (clamped to the new length);
                None shows the full series
            settings: Settings override
        """
        self.settings = settings or get_settings()
        self.min_span = self.settings.VIEWPORT_MIN_SPAN
        self.length = max(0, length)
        self.start_index = 0
        self.end_index = max(0, self.length - 1)

        if viewport is not None:
            self.set_range(viewport.start_index, viewport.end_index)

    # ============================================
    # STATE
    # ============================================
    @property
    def span(self) -> int:
        """Number of visible points"""
        return self.end_index - self.start_index + 1 if self.length else 0

    @property
    def viewport(self) -> Viewport:
        return Viewport(start_index=self.start_index, end_index=self.end_index)

    def slice(self, items: Sequence[T]) -> list[T]:
        """Visible window of a series aligned with this controller"""
        if not self.length:
            return []
        return list(items[self.start_index : self.end_index + 1])

    # ============================================
    # OPERATIONS
    # ============================================
    def resize(self, length: int) -> Viewport:
        """
        Re-clamp the range after a series of a different length arrives

        A range that covered the whole previous series keeps covering the
        whole new one.
        """
        was_full = self.length and self.start_index == 0 and self.end_index == self.length - 1
        self.length = max(0, length)

        if was_full or not self.length:
            return self.reset()
        return self.set_range(self.start_index, self.end_index)

    def reset(self) -> Viewport:
        """Show the full series"""
        self.start_index = 0
        self.end_index = max(0, self.length - 1)
        return self.viewport

    def zoom_in(self) -> Viewport:
        return self.zoom(self.settings.ZOOM_IN_FACTOR)

    def zoom_out(self) -> Viewport:
        return self.zoom(self.settings.ZOOM_OUT_FACTOR)

    def zoom(self, factor: float) -> Viewport:
        """
        Scale the visible span around its midpoint

        Formula: new_span = max(min_span, floor(span × factor)), clamped to length

        Args:
            factor: < 1 zooms in, > 1 zooms out
        """
        if factor <= 0:
            raise ValueError(f"Zoom factor must be positive, got {factor}")
        if not self.length:
            return self.viewport

        new_span = max(self.min_span, math.floor(self.span * factor))
        center = (self.start_index + self.end_index) / 2
        start = math.floor(center - (new_span - 1) / 2)
        return self._place(start, new_span)

    def pan(
        self,
        delta_pixels: float,
        container_width: float,
        pan_speed: float | None = None,
    ) -> Viewport:
        """
        Shift the range by a drag distance

        Formula: index_delta = round(delta_pixels × (length / width) × pan_speed),
        added to both bounds; the span is preserved at the series edges.

        Args:
            delta_pixels: Drag distance (positive moves toward later points)
            container_width: Chart width in pixels
            pan_speed: Multiplier (default from settings)

        Raises:
            ValueError: If container_width is not positive
        """
        if container_width <= 0:
            raise ValueError(f"Container width must be positive, got {container_width}")
        if not self.length:
            return self.viewport

        speed = self.settings.PAN_SPEED if pan_speed is None else pan_speed
        index_delta = _round_half_up(delta_pixels * (self.length / container_width) * speed)
        return self._place(self.start_index + index_delta, self.span)

    def set_range(self, start_index: int, end_index: int) -> Viewport:
        """
        Brush selection: accept explicit indices after clamping

        Reversed indices are swapped; a range narrower than min_span grows to
        the right first, then to the left.
        """
        if not self.length:
            return self.reset()

        last = self.length - 1
        start = min(max(int(start_index), 0), last)
        end = min(max(int(end_index), 0), last)
        if start > end:
            start, end = end, start

        span = end - start + 1
        if span < self.min_span:
            return self._place(start, self.min_span)

        self.start_index, self.end_index = start, end
        return self.viewport

    def jump_to_now(
        self,
        timestamps: Sequence[datetime],
        now: datetime | None = None,
        window: int | None = None,
    ) -> Viewport:
        """
        Center a fixed-size window on the point closest to now

        Args:
            timestamps: Timestamps of the displayed series (same length)
            now: Wall-clock reference (default: current UTC time)
            window: Points to show (default from settings)
        """
        if not self.length or not timestamps:
            return self.viewport

        now = ensure_utc(now) if now else utc_now()
        index = self.now_index(timestamps, now)
        span = window or self.settings.JUMP_WINDOW
        return self._place(index - span // 2, span)

    @staticmethod
    def now_index(timestamps: Sequence[datetime], now: datetime) -> int:
        """Index of the timestamp closest to now (first wins on ties)"""
        now = ensure_utc(now)
        best_index, best_distance = 0, None
        for i, moment in enumerate(timestamps):
            distance = abs((ensure_utc(moment) - now).total_seconds())
            if best_distance is None or distance < best_distance:
                best_index, best_distance = i, distance
        return best_index

    def _place(self, start: int, span: int) -> Viewport:
        """Position a window of `span` points at `start`, clamped inside the series"""
        span = min(max(span, self.min_span), self.length)
        start = min(max(start, 0), self.length - span)
        self.start_index = start
        self.end_index = start + span - 1
        return self.viewport
