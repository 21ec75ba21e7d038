"""
Data ↔ screen coordinate mapping for a single line chart.

Screen space is canvas space: origin top-left, y grows downwards, units are
logical pixels (before device-pixel-ratio scaling).

  screen_x = left + (t - x_min) / (x_max - x_min) * plot_width
  screen_y = top + ratio * plot_height
      ratio = (v - y_min) / (y_max - y_min)       if invert_y
      ratio = 1 - (v - y_min) / (y_max - y_min)   otherwise

So a normal chart puts large values near the top, and an inverted chart
(pace: smaller is faster) puts large values near the bottom. A degenerate
domain (single timestamp, or y_min == y_max) maps to the middle of the plot.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from fitchart.analysis.timeseries import AxisRange, ChannelPoint

GRID_DIVISIONS = 5

# Fraction added around derived Y extrema
Y_MARGIN = 0.10


@dataclass(frozen=True)
class Padding:
    top: float = 40.0
    right: float = 20.0
    bottom: float = 60.0
    left: float = 60.0


@dataclass(frozen=True)
class ScreenPoint:
    x: float
    y: float


def resolve_y_range(values: Sequence[float], explicit: Optional[AxisRange] = None) -> AxisRange:
    """
    Explicit range if given, else the extrema widened by 10%.

    For positive data this is [min * 0.9, max * 1.1]. Negative extrema are
    widened away from zero instead, so the data never falls outside the axis.
    """
    if explicit is not None:
        return explicit
    lo, hi = min(values), max(values)
    lo = lo * (1 - Y_MARGIN) if lo >= 0 else lo * (1 + Y_MARGIN)
    hi = hi * (1 + Y_MARGIN) if hi >= 0 else hi * (1 - Y_MARGIN)
    return AxisRange(min=lo, max=hi)


def _ratio(value: float, lo: float, hi: float) -> float:
    span = hi - lo
    if span == 0:
        return 0.5
    return (value - lo) / span


@dataclass
class ChartLayout:
    width: float
    height: float
    x_min: float      # epoch seconds
    x_max: float
    y_min: float
    y_max: float
    invert_y: bool = False
    padding: Padding = field(default_factory=Padding)

    @classmethod
    def for_series(
        cls,
        points: Sequence[ChannelPoint],
        width: float,
        height: float,
        axis_range: Optional[AxisRange] = None,
        invert_y: bool = False,
        padding: Optional[Padding] = None,
    ) -> "ChartLayout":
        """Derive the X and Y domains from a non-empty series."""
        xs = [p.timestamp.timestamp() for p in points]
        y_range = resolve_y_range([p.value for p in points], axis_range)
        return cls(
            width=width,
            height=height,
            x_min=min(xs),
            x_max=max(xs),
            y_min=y_range.min,
            y_max=y_range.max,
            invert_y=invert_y,
            padding=padding or Padding(),
        )

    @property
    def plot_width(self) -> float:
        return self.width - self.padding.left - self.padding.right

    @property
    def plot_height(self) -> float:
        return self.height - self.padding.top - self.padding.bottom

    @property
    def plot_bottom(self) -> float:
        return self.padding.top + self.plot_height

    def to_screen(self, epoch_seconds: float, value: float) -> ScreenPoint:
        x = self.padding.left + _ratio(epoch_seconds, self.x_min, self.x_max) * self.plot_width
        y_ratio = _ratio(value, self.y_min, self.y_max)
        if not self.invert_y:
            y_ratio = 1 - y_ratio
        return ScreenPoint(x=x, y=self.padding.top + y_ratio * self.plot_height)

    def point_position(self, point: ChannelPoint) -> ScreenPoint:
        return self.to_screen(point.timestamp.timestamp(), point.value)

    def grid_xs(self) -> List[float]:
        step = self.plot_width / GRID_DIVISIONS
        return [self.padding.left + step * i for i in range(GRID_DIVISIONS + 1)]

    def grid_ys(self) -> List[float]:
        step = self.plot_height / GRID_DIVISIONS
        return [self.padding.top + step * i for i in range(GRID_DIVISIONS + 1)]

    def x_ticks(self) -> List[Tuple[float, float]]:
        """(screen_x, epoch_seconds) per vertical gridline, left to right."""
        span = self.x_max - self.x_min
        return [
            (x, self.x_min + span * i / GRID_DIVISIONS)
            for i, x in enumerate(self.grid_xs())
        ]

    def y_ticks(self) -> List[Tuple[float, float]]:
        """(screen_y, value) per horizontal gridline, from y_min to y_max."""
        span = self.y_max - self.y_min
        step = self.plot_height / GRID_DIVISIONS
        ticks = []
        for i in range(GRID_DIVISIONS + 1):
            if self.invert_y:
                y = self.padding.top + step * i
            else:
                y = self.plot_bottom - step * i
            ticks.append((y, self.y_min + span * i / GRID_DIVISIONS))
        return ticks
