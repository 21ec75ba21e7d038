"""Tests for nearest-point lookup and tooltip placement."""
from datetime import datetime, timezone

import pytest

from fitchart.analysis.channels import CHANNELS
from fitchart.analysis.timeseries import ChannelPoint
from fitchart.charts.geometry import ScreenPoint
from fitchart.charts.hit_test import (
    estimate_tooltip_size,
    find_nearest_point,
    format_tooltip,
    place_tooltip,
)

START_TIME = datetime(2025, 2, 18, 7, 0, 0, tzinfo=timezone.utc)

POINTS = [ScreenPoint(60, 100), ScreenPoint(100, 80), ScreenPoint(140, 120)]


class TestFindNearestPoint:
    def test_exact_hit(self):
        hit = find_nearest_point(POINTS, 100, 80)
        assert hit.index == 1
        assert hit.distance == 0
        assert (hit.screen_x, hit.screen_y) == (100, 80)

    def test_nearest_wins(self):
        assert find_nearest_point(POINTS, 125, 110).index == 2

    def test_far_away_misses(self):
        assert find_nearest_point(POINTS, 1000, 1000) is None

    def test_threshold_is_strict(self):
        # (60, 100) is exactly 30 px from (60, 130)
        assert find_nearest_point(POINTS, 60, 130, threshold=30) is None
        assert find_nearest_point(POINTS, 60, 129, threshold=30).index == 0

    def test_custom_threshold(self):
        assert find_nearest_point(POINTS, 100, 90, threshold=5) is None
        assert find_nearest_point(POINTS, 100, 90, threshold=15).index == 1

    def test_no_points(self):
        assert find_nearest_point([], 0, 0) is None


class TestTooltipText:
    def test_heart_rate_tooltip(self):
        pt = ChannelPoint(timestamp=START_TIME, value=152.4)
        text = format_tooltip(pt, 0, 3, CHANNELS["heart_rate"], timezone.utc)
        assert text == "Time: 07:00:00\nValue: 152 bpm\nPoint: 1/3"

    def test_pace_tooltip_shows_speed(self):
        pt = ChannelPoint(timestamp=START_TIME, value=5.0, original_value=12.0)
        text = format_tooltip(pt, 9, 10, CHANNELS["speed"], timezone.utc)
        assert "Value: 5:00 min/km (12.00 km/h)" in text
        assert text.endswith("Point: 10/10")


class TestPlaceTooltip:
    def test_below_right_by_default(self):
        assert place_tooltip(100, 100, (120, 60), (1000, 800)) == (110, 110)

    def test_flips_left_near_right_edge(self):
        assert place_tooltip(950, 100, (120, 60), (1000, 800)) == (820, 110)

    def test_flips_up_near_bottom_edge(self):
        assert place_tooltip(100, 780, (120, 60), (1000, 800)) == (110, 710)

    def test_flips_both(self):
        assert place_tooltip(950, 780, (120, 60), (1000, 800)) == (820, 710)

    def test_estimate_grows_with_text(self):
        short = estimate_tooltip_size("a")
        long = estimate_tooltip_size("a much longer line\nand another")
        assert long[0] > short[0]
        assert long[1] > short[1]
        assert short == pytest.approx((31.0, 33.0))
