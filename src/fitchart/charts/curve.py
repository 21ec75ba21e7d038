"""
Catmull-Rom style cubic Bezier interpolation.

For the segment from P[i] to P[i+1], the control points follow the tangents
at each end, estimated from the neighbouring points:

  cp1 = P[i]   + (P[i+1] - P[i-1]) * k
  cp2 = P[i+1] - (P[i+2] - P[i])   * k      k = tension / 3

At the ends the missing neighbour is replaced by the endpoint itself.
"""
from dataclasses import dataclass
from typing import List, Sequence

from fitchart.charts.geometry import ScreenPoint

DEFAULT_TENSION = 0.4


@dataclass(frozen=True)
class BezierSegment:
    cp1: ScreenPoint
    cp2: ScreenPoint
    end: ScreenPoint


def bezier_segments(points: Sequence[ScreenPoint],
                    tension: float = DEFAULT_TENSION) -> List[BezierSegment]:
    """Segments joining consecutive points. Empty for fewer than two points."""
    k = tension / 3.0
    n = len(points)
    segments: List[BezierSegment] = []
    for i in range(n - 1):
        prev = points[i - 1] if i > 0 else points[i]
        curr = points[i]
        nxt = points[i + 1]
        after = points[i + 2] if i + 2 < n else nxt
        segments.append(BezierSegment(
            cp1=ScreenPoint(curr.x + (nxt.x - prev.x) * k, curr.y + (nxt.y - prev.y) * k),
            cp2=ScreenPoint(nxt.x - (after.x - curr.x) * k, nxt.y - (after.y - curr.y) * k),
            end=nxt,
        ))
    return segments
