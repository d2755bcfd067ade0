"""
Unit tests for ViewportController

Tests zoom, pan, brush, jump-to-now and the minimum span under arbitrary
operation sequences
"""

import random

import pytest

from core.models.chart_state import Viewport
from services.chart_engine.viewport import ViewportController
from tests.factories import NOW, hours


def bounds(controller):
    return (controller.start_index, controller.end_index)


@pytest.mark.unit
class TestZoom:
    """Test zoom in/out around the midpoint"""

    def test_initial_full_range(self):
        assert bounds(ViewportController(100)) == (0, 99)

    def test_zoom_in(self):
        """Test span 100 × 0.6 = 60 re-centred on 49.5"""
        controller = ViewportController(100)

        assert controller.zoom_in() == Viewport(start_index=20, end_index=79)
        assert controller.span == 60

    def test_zoom_out_clamped_to_length(self):
        controller = ViewportController(100)

        controller.zoom_out()

        assert bounds(controller) == (0, 99)

    def test_zoom_out_after_zoom_in(self):
        controller = ViewportController(100)
        controller.zoom_in()

        controller.zoom_out()

        assert controller.span == 90
        assert bounds(controller) == (5, 94)

    def test_zoom_in_floors_at_min_span(self):
        controller = ViewportController(100)

        for _ in range(10):
            controller.zoom_in()

        assert controller.span == 5

    def test_zoom_near_edge_stays_in_bounds(self):
        controller = ViewportController(100, Viewport(start_index=90, end_index=99))

        controller.zoom_out()

        assert controller.span == 15
        assert bounds(controller) == (85, 99)

    def test_invalid_factor(self):
        with pytest.raises(ValueError):
            ViewportController(100).zoom(0)


@pytest.mark.unit
class TestPan:
    """Test drag panning"""

    def test_pan_forward(self):
        """Test 50px of 500px over 100 points moves 10 indices"""
        controller = ViewportController(100)
        controller.zoom_in()

        assert controller.pan(delta_pixels=50, container_width=500) == Viewport(start_index=30, end_index=89)

    def test_pan_backward(self):
        controller = ViewportController(100)
        controller.zoom_in()

        controller.pan(delta_pixels=-50, container_width=500)

        assert bounds(controller) == (10, 69)

    def test_pan_rounds_half_up(self):
        controller = ViewportController(100, Viewport(start_index=40, end_index=59))

        controller.pan(delta_pixels=25, container_width=1000)

        assert bounds(controller) == (43, 62)

    def test_pan_speed(self):
        controller = ViewportController(100, Viewport(start_index=40, end_index=59))

        controller.pan(delta_pixels=50, container_width=500, pan_speed=0.5)

        assert bounds(controller) == (45, 64)

    def test_pan_clamped_preserves_span(self):
        controller = ViewportController(100, Viewport(start_index=40, end_index=59))

        controller.pan(delta_pixels=10_000, container_width=500)
        assert bounds(controller) == (80, 99)

        controller.pan(delta_pixels=-10_000, container_width=500)
        assert bounds(controller) == (0, 19)

    def test_zero_width_raises(self):
        with pytest.raises(ValueError, match="Container width"):
            ViewportController(100).pan(delta_pixels=10, container_width=0)


@pytest.mark.unit
class TestBrush:
    """Test explicit range selection"""

    def test_accepted_verbatim(self):
        controller = ViewportController(100)

        assert controller.set_range(12, 40) == Viewport(start_index=12, end_index=40)

    def test_clamped_to_bounds(self):
        controller = ViewportController(100)

        controller.set_range(-10, 500)

        assert bounds(controller) == (0, 99)

    def test_reversed_swapped(self):
        controller = ViewportController(100)

        controller.set_range(50, 10)

        assert bounds(controller) == (10, 50)

    def test_narrow_range_grows_to_min_span(self):
        controller = ViewportController(100)

        controller.set_range(3, 5)
        assert bounds(controller) == (3, 7)

        controller.set_range(98, 99)
        assert bounds(controller) == (95, 99)


@pytest.mark.unit
class TestJumpToNow:
    """Test centring a window on the point closest to now"""

    def test_centres_window(self):
        timestamps = [hours(i) for i in range(-50, 50)]
        controller = ViewportController(len(timestamps))

        controller.jump_to_now(timestamps, now=NOW)

        assert bounds(controller) == (38, 61)

    def test_clamped_at_series_end(self):
        timestamps = [hours(i) for i in range(-99, 1)]
        controller = ViewportController(len(timestamps))

        controller.jump_to_now(timestamps, now=NOW)

        assert bounds(controller) == (76, 99)

    def test_now_index_closest(self):
        timestamps = [hours(-2), hours(-1), hours(3)]

        assert ViewportController.now_index(timestamps, hours(0.4)) == 1

    def test_custom_window(self):
        timestamps = [hours(i) for i in range(-50, 50)]
        controller = ViewportController(len(timestamps))

        controller.jump_to_now(timestamps, now=NOW, window=10)

        assert controller.span == 10


@pytest.mark.unit
class TestResizeAndShortSeries:
    """Test re-clamping after new data and tiny series"""

    def test_full_range_stays_full(self):
        controller = ViewportController(100)

        controller.resize(120)

        assert bounds(controller) == (0, 119)

    def test_partial_range_reclamped(self):
        controller = ViewportController(100)
        controller.zoom_in()

        controller.resize(50)

        assert bounds(controller) == (20, 49)

    def test_stale_viewport_restored_within_bounds(self):
        controller = ViewportController(10, Viewport(start_index=50, end_index=80))

        assert bounds(controller) == (5, 9)

    def test_short_series_covers_everything(self):
        controller = ViewportController(3)

        controller.zoom_in()
        controller.pan(delta_pixels=100, container_width=300)
        controller.set_range(1, 1)

        assert bounds(controller) == (0, 2)

    def test_empty_series(self):
        controller = ViewportController(0)

        assert controller.span == 0
        assert controller.slice([]) == []
        assert controller.zoom_in() == Viewport(start_index=0, end_index=0)

    def test_slice(self):
        controller = ViewportController(10, Viewport(start_index=2, end_index=6))

        assert controller.slice(list(range(10))) == [2, 3, 4, 5, 6]


@pytest.mark.unit
class TestMinimumSpan:
    """Test span never drops below 5 under any operation order"""

    @pytest.mark.parametrize("seed", range(5))
    @pytest.mark.parametrize("length", [5, 6, 24, 100, 731])
    def test_random_operation_sequences(self, seed, length):
        rng = random.Random(seed)
        controller = ViewportController(length)
        timestamps = [hours(i - length // 2) for i in range(length)]

        for _ in range(200):
            op = rng.choice(["zoom_in", "zoom_out", "pan", "brush", "reset", "jump", "resize"])
            if op == "zoom_in":
                controller.zoom_in()
            elif op == "zoom_out":
                controller.zoom_out()
            elif op == "pan":
                controller.pan(rng.uniform(-800, 800), rng.uniform(100, 1200))
            elif op == "brush":
                controller.set_range(rng.randint(-10, length + 10), rng.randint(-10, length + 10))
            elif op == "reset":
                controller.reset()
            elif op == "jump":
                controller.jump_to_now(timestamps, now=NOW)
            else:
                controller.resize(length)

            assert controller.span >= 5
            assert 0 <= controller.start_index <= controller.end_index <= length - 1
