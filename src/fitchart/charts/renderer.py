"""
Single-channel line chart on a Canvas.

Lifecycle:
    chart = LineChart(canvas, config, prepared)   # create: lays out and renders
    chart.update(new_prepared)                     # e.g. outlier filter toggled
    chart.hover(x, y) / chart.leave()              # pointer events, cheap redraws
    chart.dispose()                                # releases the tooltip overlay

LineChart is also a context manager, so `with LineChart(...) as chart:` always
disposes, including when the body raises.

Chart layout:
  - fixed padding (top 40, right 20, bottom 60, left 60)
  - 6 horizontal and 6 vertical gridlines (5 divisions) across the plot area
  - solid X and Y axis lines
  - X tick labels: local time of day (HH:MM); Y tick labels: rounded numbers,
    or M:SS on inverted (pace) charts
  - title centred at the top, with "(filtered: N)" when outliers were dropped
  - series drawn as one Catmull-Rom Bezier curve
  - hovered point: filled circle with a white outline
"""
import logging
from datetime import datetime, timezone, tzinfo
from typing import Callable, Dict, List, Optional, Tuple

from fitchart.analysis.channels import ChannelConfig
from fitchart.analysis.pipeline import PreparedSeries, prepare_workout
from fitchart.analysis.records import Workout
from fitchart.charts.canvas import Canvas, MatplotlibCanvas
from fitchart.charts.curve import DEFAULT_TENSION, bezier_segments
from fitchart.charts.formatting import (
    chart_title,
    format_tick_value,
    format_time_of_day,
    no_data_message,
    resolve_timezone,
)
from fitchart.charts.geometry import ChartLayout, Padding, ScreenPoint
from fitchart.charts.hit_test import (
    DEFAULT_HIT_THRESHOLD_PX,
    HitResult,
    Tooltip,
    TooltipOverlay,
    estimate_tooltip_size,
    find_nearest_point,
    format_tooltip,
    place_tooltip,
)
from fitchart.config import Settings, get_settings

logger = logging.getLogger(__name__)

GRID_COLOR = "#e2e8f0"
AXIS_COLOR = "#333333"
LABEL_COLOR = "#666666"
TITLE_COLOR = "#000000"
NO_DATA_COLOR = "#9ca3af"
HOVER_OUTLINE = "#ffffff"
HOVER_RADIUS = 6.0
LINE_WIDTH = 2.0

OverlayFactory = Callable[[], TooltipOverlay]


class ChartDisposedError(RuntimeError):
    """Raised when a disposed chart is drawn or hovered."""


class LineChart:
    def __init__(
        self,
        canvas: Canvas,
        config: ChannelConfig,
        series: Optional[PreparedSeries] = None,
        *,
        tension: float = DEFAULT_TENSION,
        hit_threshold: float = DEFAULT_HIT_THRESHOLD_PX,
        tz: Optional[tzinfo] = None,
        overlay_factory: Optional[OverlayFactory] = None,
        padding: Optional[Padding] = None,
    ):
        self.canvas = canvas
        self.config = config
        self.tension = tension
        self.hit_threshold = hit_threshold
        self.tz = tz
        self.padding = padding or Padding()
        self._overlay_factory = overlay_factory
        self._overlay: Optional[TooltipOverlay] = None
        self._hovered: Optional[HitResult] = None
        self._disposed = False
        self.series: Optional[PreparedSeries] = None
        self.layout: Optional[ChartLayout] = None
        self.screen_points: List[ScreenPoint] = []
        self.update(series)

    # ── lifecycle ────────────────────────────────────────────────────────────

    def update(self, series: Optional[PreparedSeries]) -> None:
        """Swap in new data, recompute the layout, and redraw."""
        self._check_alive()
        self.series = series
        self._hovered = None
        self._hide_overlay()
        points = series.points if series is not None else []
        if points:
            self.layout = ChartLayout.for_series(
                points,
                self.canvas.width,
                self.canvas.height,
                axis_range=series.axis_range,
                invert_y=self.config.invert_y,
                padding=self.padding,
            )
            self.screen_points = [self.layout.point_position(p) for p in points]
        else:
            self.layout = None
            self.screen_points = []
        self.render()

    def dispose(self) -> None:
        """Release the tooltip overlay. Safe to call more than once."""
        if self._disposed:
            return
        self._disposed = True
        self._hovered = None
        if self._overlay is not None:
            self._overlay.remove()
            self._overlay = None

    @property
    def disposed(self) -> bool:
        return self._disposed

    def __enter__(self) -> "LineChart":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()

    def _check_alive(self) -> None:
        if self._disposed:
            raise ChartDisposedError(f"Chart for {self.config.key} has been disposed")

    # ── drawing ──────────────────────────────────────────────────────────────

    @property
    def title(self) -> str:
        if self.series is None:
            return chart_title(self.config)
        return chart_title(self.config, self.series.removed_count, self.series.filter_enabled)

    @property
    def hovered(self) -> Optional[HitResult]:
        return self._hovered

    def render(self) -> None:
        """Redraw everything from current state. Idempotent."""
        self._check_alive()
        canvas = self.canvas
        canvas.clear()

        if self.layout is None:
            canvas.text(canvas.width / 2, canvas.height / 2, no_data_message(self.config),
                        NO_DATA_COLOR, size=14, align="center", baseline="middle")
            return

        self._draw_grid()
        self._draw_axes()
        self._draw_curve()
        self._draw_title()
        if self._hovered is not None:
            canvas.circle(self._hovered.screen_x, self._hovered.screen_y, HOVER_RADIUS,
                          fill=self.config.color, stroke=HOVER_OUTLINE, stroke_width=2)

    def _draw_grid(self) -> None:
        layout = self.layout
        for y in layout.grid_ys():
            self.canvas.line(layout.padding.left, y, layout.padding.left + layout.plot_width, y,
                             GRID_COLOR, 1)
        for x in layout.grid_xs():
            self.canvas.line(x, layout.padding.top, x, layout.plot_bottom, GRID_COLOR, 1)

    def _draw_axes(self) -> None:
        layout = self.layout
        left, bottom = layout.padding.left, layout.plot_bottom
        self.canvas.line(left, layout.padding.top, left, bottom, AXIS_COLOR, 2)
        self.canvas.line(left, bottom, left + layout.plot_width, bottom, AXIS_COLOR, 2)

        for y, value in layout.y_ticks():
            self.canvas.text(left - 10, y, format_tick_value(value, self.config),
                             LABEL_COLOR, size=12, align="right", baseline="middle")

        for x, epoch in layout.x_ticks():
            moment = datetime.fromtimestamp(epoch, tz=timezone.utc)
            self.canvas.text(x, bottom + 10, format_time_of_day(moment, self.tz),
                             LABEL_COLOR, size=12, align="center", baseline="top")

    def _draw_curve(self) -> None:
        points = self.screen_points
        if len(points) == 1:
            self.canvas.circle(points[0].x, points[0].y, LINE_WIDTH,
                               fill=self.config.color, stroke=self.config.color, stroke_width=0)
            return
        self.canvas.bezier_path(points[0], bezier_segments(points, self.tension),
                                self.config.color, LINE_WIDTH)

    def _draw_title(self) -> None:
        self.canvas.text(self.canvas.width / 2, 10, self.title, TITLE_COLOR,
                         size=14, align="center", baseline="top", bold=True)

    # ── pointer events ───────────────────────────────────────────────────────

    def hit_test(self, x: float, y: float) -> Optional[HitResult]:
        return find_nearest_point(self.screen_points, x, y, self.hit_threshold)

    def hover(
        self,
        x: float,
        y: float,
        client_x: Optional[float] = None,
        client_y: Optional[float] = None,
        viewport: Optional[Tuple[float, float]] = None,
    ) -> Optional[Tooltip]:
        """
        Handle a pointer move at canvas coordinates (x, y).

        client_x/client_y and viewport locate the pointer on the host page for
        tooltip placement; they default to the canvas coordinates and size.
        Returns the tooltip to show, or None (hover state cleared).
        """
        self._check_alive()
        hit = self.hit_test(x, y)
        if hit is None:
            self.leave()
            return None

        changed = self._hovered is None or self._hovered.index != hit.index
        self._hovered = hit
        if changed:
            self.render()

        points = self.series.points
        text = format_tooltip(points[hit.index], hit.index, len(points), self.config, self.tz)
        overlay = self._get_overlay()
        size = overlay.measure(text) if overlay is not None else estimate_tooltip_size(text)
        left, top = place_tooltip(
            x if client_x is None else client_x,
            y if client_y is None else client_y,
            size,
            viewport or (self.canvas.width, self.canvas.height),
        )
        if overlay is not None:
            overlay.show(text, left, top)
        return Tooltip(text=text, left=left, top=top, index=hit.index)

    def leave(self) -> None:
        """Pointer left the chart: clear hover state and hide the tooltip."""
        self._check_alive()
        self._hide_overlay()
        if self._hovered is not None:
            self._hovered = None
            self.render()

    def _get_overlay(self) -> Optional[TooltipOverlay]:
        if self._overlay is None and self._overlay_factory is not None:
            self._overlay = self._overlay_factory()
        return self._overlay

    def _hide_overlay(self) -> None:
        if self._overlay is not None:
            self._overlay.hide()


# ─── PNG output ───────────────────────────────────────────────────────────────

def make_channel_chart(
    prepared: Optional[PreparedSeries],
    config: Optional[ChannelConfig] = None,
    settings: Optional[Settings] = None,
) -> Tuple[bytes, str]:
    """
    Render one channel to PNG.

    Pass `config` to render a "no data" chart when `prepared` is None.
    Returns (png_bytes, title).
    """
    if prepared is None and config is None:
        raise ValueError("make_channel_chart needs prepared data or a channel config")
    settings = settings or get_settings()
    config = config or prepared.channel

    with MatplotlibCanvas(settings.chart_width, settings.chart_height,
                          settings.device_pixel_ratio) as canvas:
        with LineChart(canvas, config, prepared,
                       tension=settings.curve_tension,
                       hit_threshold=settings.hit_threshold_px,
                       tz=resolve_timezone(settings.display_timezone)) as chart:
            title = chart.title
        return canvas.to_png(), title


def make_workout_charts(
    workout: Workout,
    settings: Optional[Settings] = None,
    filter_outliers: Optional[bool] = None,
) -> Dict[str, Tuple[bytes, str]]:
    """PNG + title for every channel with data, keyed by channel."""
    settings = settings or get_settings()
    prepared = prepare_workout(workout, settings=settings, filter_outliers=filter_outliers)
    charts: Dict[str, Tuple[bytes, str]] = {}
    for key, series in prepared.series.items():
        charts[key] = make_channel_chart(series, settings=settings)
    logger.info("Rendered %d charts for %s", len(charts), prepared.file_name or "workout")
    return charts
