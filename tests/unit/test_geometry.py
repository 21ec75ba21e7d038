"""Tests for data → screen coordinate mapping."""
from datetime import datetime, timedelta, timezone

import pytest

from fitchart.analysis.timeseries import AxisRange, ChannelPoint
from fitchart.charts.geometry import ChartLayout, Padding, resolve_y_range

START_TIME = datetime(2025, 2, 18, 7, 0, 0, tzinfo=timezone.utc)
START_EPOCH = START_TIME.timestamp()


def two_points():
    return [
        ChannelPoint(timestamp=START_TIME, value=100.0),
        ChannelPoint(timestamp=START_TIME + timedelta(seconds=60), value=200.0),
    ]


class TestResolveYRange:
    def test_positive_values_widened_by_ten_percent(self):
        rng = resolve_y_range([100, 200])
        assert rng.min == pytest.approx(90)
        assert rng.max == pytest.approx(220)

    def test_explicit_range_wins(self):
        assert resolve_y_range([100, 200], AxisRange(0, 50)) == AxisRange(0, 50)

    def test_negative_values_widen_away_from_zero(self):
        rng = resolve_y_range([-10, -2])
        assert rng.min == pytest.approx(-11)
        assert rng.max == pytest.approx(-1.8)
        assert rng.min < -10 and rng.max > -2


class TestChartLayout:
    def test_plot_area(self):
        layout = ChartLayout.for_series(two_points(), 300, 200)
        assert layout.plot_width == 220
        assert layout.plot_height == 100
        assert layout.plot_bottom == 140

    def test_normal_mapping(self):
        layout = ChartLayout.for_series(two_points(), 300, 200)
        first, last = (layout.point_position(p) for p in two_points())
        assert (first.x, first.y) == pytest.approx((60.0, 132.3077), abs=1e-3)
        assert (last.x, last.y) == pytest.approx((280.0, 55.3846), abs=1e-3)

    def test_inverted_mapping(self):
        layout = ChartLayout.for_series(two_points(), 300, 200, invert_y=True)
        first, last = (layout.point_position(p) for p in two_points())
        assert (first.x, first.y) == pytest.approx((60.0, 47.6923), abs=1e-3)
        assert (last.x, last.y) == pytest.approx((280.0, 124.6154), abs=1e-3)

    def test_larger_value_higher_unless_inverted(self):
        normal = ChartLayout.for_series(two_points(), 300, 200)
        inverted = ChartLayout.for_series(two_points(), 300, 200, invert_y=True)
        assert normal.to_screen(START_EPOCH, 200).y < normal.to_screen(START_EPOCH, 100).y
        assert inverted.to_screen(START_EPOCH, 200).y > inverted.to_screen(START_EPOCH, 100).y

    def test_single_point_maps_to_centre(self):
        layout = ChartLayout(width=300, height=200, x_min=START_EPOCH, x_max=START_EPOCH,
                             y_min=5, y_max=5)
        pos = layout.to_screen(START_EPOCH, 5)
        assert (pos.x, pos.y) == (170.0, 90.0)

    def test_custom_padding(self):
        layout = ChartLayout.for_series(two_points(), 300, 200, padding=Padding(0, 0, 0, 0))
        assert layout.point_position(two_points()[0]).x == 0


class TestGridAndTicks:
    def test_six_gridlines_each_way(self):
        layout = ChartLayout.for_series(two_points(), 300, 200)
        assert layout.grid_xs() == pytest.approx([60, 104, 148, 192, 236, 280])
        assert layout.grid_ys() == pytest.approx([40, 60, 80, 100, 120, 140])

    def test_x_ticks_span_time_domain(self):
        ticks = ChartLayout.for_series(two_points(), 300, 200).x_ticks()
        assert ticks[0] == pytest.approx((60, START_EPOCH))
        assert ticks[-1] == pytest.approx((280, START_EPOCH + 60))
        assert ticks[1][1] == pytest.approx(START_EPOCH + 12)

    def test_y_ticks_bottom_up_normally(self):
        ticks = ChartLayout.for_series(two_points(), 300, 200).y_ticks()
        assert ticks[0] == pytest.approx((140, 90))
        assert ticks[-1] == pytest.approx((40, 220))

    def test_y_ticks_top_down_when_inverted(self):
        ticks = ChartLayout.for_series(two_points(), 300, 200, invert_y=True).y_ticks()
        assert ticks[0] == pytest.approx((40, 90))
        assert ticks[-1] == pytest.approx((140, 220))

    def test_tick_positions_agree_with_mapping(self):
        for invert in (False, True):
            layout = ChartLayout.for_series(two_points(), 300, 200, invert_y=invert)
            for y, value in layout.y_ticks():
                assert layout.to_screen(START_EPOCH, value).y == pytest.approx(y)
