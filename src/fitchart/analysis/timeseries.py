"""
ChannelPoint dataclass: one sample of one channel.

ChannelPoint is the universal in-memory representation passed between the
extractor, outlier filter, smoother and chart renderer. It is a plain Python
dataclass with no parser or drawing dependencies. Every stage returns new points
rather than mutating the ones it was given.
"""
from dataclasses import dataclass, replace
from datetime import datetime
from typing import List, Optional


@dataclass(frozen=True)
class ChannelPoint:
    """
    One (timestamp, value) sample of a single channel.

    original_value holds the pre-transform reading where the display needs it
    (e.g. km/h behind a min/km pace). It is carried through smoothing as-is.
    """

    timestamp: datetime                    # timezone-aware, UTC
    value: float                           # transformed, display units
    original_value: Optional[float] = None  # raw reading before transform
    is_outlier: bool = False

    def with_value(self, value: float) -> "ChannelPoint":
        return replace(self, value=value)


@dataclass(frozen=True)
class AxisRange:
    """Explicit Y-axis bounds for a chart."""
    min: float
    max: float


ChannelSeries = List[ChannelPoint]
