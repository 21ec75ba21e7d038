"""
Drawing surfaces.

Canvas is the small 2D drawing API the chart renderer talks to, in logical
pixels with a top-left origin (the same convention as an HTML canvas).

MatplotlibCanvas implements it on an Agg figure whose single axes covers the
whole figure with x in [0, width] and y in [height, 0]. The raster is
width × device_pixel_ratio by height × device_pixel_ratio pixels; drawing
code never sees the ratio.
"""
import io
from typing import Protocol, Sequence

import matplotlib.patches as mpatches
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure
from matplotlib.path import Path

from fitchart.charts.curve import BezierSegment
from fitchart.charts.geometry import ScreenPoint

# Figure dpi per unit of device pixel ratio: one logical pixel = 1/100 inch
_BASE_DPI = 100.0
# Matplotlib sizes are in points (1/72 inch)
_PT_PER_PX = 72.0 / _BASE_DPI

_HALIGN = {"left": "left", "center": "center", "right": "right"}
_VALIGN = {"top": "top", "middle": "center", "bottom": "bottom", "alphabetic": "baseline"}


class Canvas(Protocol):
    width: float
    height: float

    def clear(self) -> None: ...

    def line(self, x0: float, y0: float, x1: float, y1: float,
             color: str, width: float = 1.0) -> None: ...

    def bezier_path(self, start: ScreenPoint, segments: Sequence[BezierSegment],
                    color: str, width: float = 2.0) -> None: ...

    def circle(self, x: float, y: float, radius: float, fill: str,
               stroke: str, stroke_width: float = 2.0) -> None: ...

    def text(self, x: float, y: float, text: str, color: str, size: float = 12.0,
             align: str = "left", baseline: str = "alphabetic", bold: bool = False) -> None: ...


class MatplotlibCanvas:
    """Raster canvas backed by an Agg figure. Close it (or use `with`) when done."""

    def __init__(self, width: float, height: float, device_pixel_ratio: float = 1.0,
                 background: str = "#ffffff"):
        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas size must be positive, got {width}x{height}")
        self.width = float(width)
        self.height = float(height)
        self.device_pixel_ratio = device_pixel_ratio if device_pixel_ratio > 0 else 1.0
        self.background = background

        # built without pyplot, so it never joins the global figure registry
        self._fig = Figure(
            figsize=(self.width / _BASE_DPI, self.height / _BASE_DPI),
            dpi=_BASE_DPI * self.device_pixel_ratio,
        )
        FigureCanvasAgg(self._fig)
        self._fig.patch.set_facecolor(background)
        self._ax = self._fig.add_axes((0, 0, 1, 1))
        self._reset_axes()

    @property
    def pixel_size(self):
        """(width, height) of the raster in physical pixels."""
        return (
            int(round(self.width * self.device_pixel_ratio)),
            int(round(self.height * self.device_pixel_ratio)),
        )

    def _reset_axes(self) -> None:
        ax = self._ax
        ax.set_xlim(0, self.width)
        ax.set_ylim(self.height, 0)
        ax.set_axis_off()
        ax.set_facecolor(self.background)

    def clear(self) -> None:
        self._ax.clear()
        self._reset_axes()

    def line(self, x0, y0, x1, y1, color, width=1.0) -> None:
        self._ax.plot([x0, x1], [y0, y1], color=color, linewidth=width * _PT_PER_PX,
                      solid_capstyle="butt")

    def bezier_path(self, start, segments, color, width=2.0) -> None:
        vertices = [(start.x, start.y)]
        codes = [Path.MOVETO]
        for seg in segments:
            vertices.extend([(seg.cp1.x, seg.cp1.y), (seg.cp2.x, seg.cp2.y), (seg.end.x, seg.end.y)])
            codes.extend([Path.CURVE4] * 3)
        patch = mpatches.PathPatch(
            Path(vertices, codes),
            facecolor="none",
            edgecolor=color,
            linewidth=width * _PT_PER_PX,
            capstyle="round",
            joinstyle="round",
        )
        self._ax.add_patch(patch)

    def circle(self, x, y, radius, fill, stroke, stroke_width=2.0) -> None:
        self._ax.add_patch(mpatches.Circle(
            (x, y), radius,
            facecolor=fill, edgecolor=stroke, linewidth=stroke_width * _PT_PER_PX,
            zorder=5,
        ))

    def text(self, x, y, text, color, size=12.0, align="left",
             baseline="alphabetic", bold=False) -> None:
        self._ax.text(
            x, y, text,
            color=color,
            fontsize=size * _PT_PER_PX,
            fontweight="bold" if bold else "normal",
            ha=_HALIGN.get(align, "left"),
            va=_VALIGN.get(baseline, "baseline"),
        )

    def to_png(self) -> bytes:
        buf = io.BytesIO()
        self._fig.savefig(buf, format="png", dpi=self._fig.dpi,
                          facecolor=self._fig.get_facecolor())
        buf.seek(0)
        return buf.read()

    def close(self) -> None:
        self._fig.clear()

    def __enter__(self) -> "MatplotlibCanvas":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class NullCanvas:
    """Canvas that draws nothing. Used where only layout and hit-testing matter."""

    def __init__(self, width: float, height: float):
        self.width = float(width)
        self.height = float(height)

    def clear(self) -> None:
        pass

    def line(self, x0, y0, x1, y1, color, width=1.0) -> None:
        pass

    def bezier_path(self, start, segments, color, width=2.0) -> None:
        pass

    def circle(self, x, y, radius, fill, stroke, stroke_width=2.0) -> None:
        pass

    def text(self, x, y, text, color, size=12.0, align="left",
             baseline="alphabetic", bold=False) -> None:
        pass
