"""
Chart rendering routes.

The host posts the parsed workout with every request; nothing is stored
between calls.

  POST /charts/{channel}        → PNG of one channel's chart, with counts in
                                   X-Data-Points / X-Filtered-Count / X-Outlier-Count
  POST /charts/{channel}/hover  → tooltip for a pointer position
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel

from fitchart.analysis.channels import ChannelConfig, UnknownChannelError, get_channel
from fitchart.analysis.pipeline import PreparedSeries, prepare_channel
from fitchart.analysis.records import resolve_records
from fitchart.charts.canvas import NullCanvas
from fitchart.charts.formatting import points_caption, resolve_timezone
from fitchart.charts.renderer import LineChart, make_channel_chart
from fitchart.config import Settings, get_settings

router = APIRouter()


class ChartRequest(BaseModel):
    workout: Dict[str, Any]
    filter_outliers: Optional[bool] = None


class HoverRequest(ChartRequest):
    x: float
    y: float
    client_x: Optional[float] = None
    client_y: Optional[float] = None
    viewport_width: Optional[float] = None
    viewport_height: Optional[float] = None


class HoverResponse(BaseModel):
    tooltip: Optional[str] = None
    left: Optional[float] = None
    top: Optional[float] = None
    index: Optional[int] = None


def _channel_or_404(key: str) -> ChannelConfig:
    try:
        return get_channel(key)
    except UnknownChannelError:
        raise HTTPException(status_code=404, detail=f"Unknown channel: {key}")


def _prepare(req: ChartRequest, config: ChannelConfig,
             settings: Settings) -> Optional[PreparedSeries]:
    filter_outliers = (
        settings.filter_outliers if req.filter_outliers is None else req.filter_outliers
    )
    return prepare_channel(
        resolve_records(req.workout),
        config,
        filter_outliers=filter_outliers,
        sigma=settings.sigma_threshold,
        window=settings.smoothing_window,
        boundary_policy=settings.smoothing_boundary,
    )


@router.post("/{channel}", response_class=Response)
def render_chart(channel: str, req: ChartRequest,
                 settings: Settings = Depends(get_settings)):
    """Render one channel. Channels without data get the "no data" chart."""
    config = _channel_or_404(channel)
    prepared = _prepare(req, config, settings)
    png, title = make_channel_chart(prepared, config=config, settings=settings)

    points = len(prepared.points) if prepared else 0
    removed = prepared.removed_count if prepared else 0
    filtered = prepared.filter_enabled if prepared else False
    outliers = prepared.outlier_count if prepared else 0
    return Response(
        content=png,
        media_type="image/png",
        headers={
            "X-Chart-Title": title.encode("ascii", "replace").decode("ascii"),
            "X-Data-Points": str(points),
            "X-Filtered-Count": str(removed),
            "X-Outlier-Count": str(outliers),
            "X-Caption": points_caption(points, removed, filtered),
        },
    )


@router.post("/{channel}/hover", response_model=HoverResponse)
def hover_chart(channel: str, req: HoverRequest,
                settings: Settings = Depends(get_settings)):
    """Nearest point within the hit threshold, formatted for a tooltip."""
    config = _channel_or_404(channel)
    prepared = _prepare(req, config, settings)
    if prepared is None:
        raise HTTPException(status_code=404, detail=f"No {channel} data in workout")

    canvas = NullCanvas(settings.chart_width, settings.chart_height)
    viewport = None
    if req.viewport_width is not None and req.viewport_height is not None:
        viewport = (req.viewport_width, req.viewport_height)

    with LineChart(canvas, config, prepared,
                   tension=settings.curve_tension,
                   hit_threshold=settings.hit_threshold_px,
                   tz=resolve_timezone(settings.display_timezone)) as chart:
        tooltip = chart.hover(req.x, req.y, req.client_x, req.client_y, viewport)

    if tooltip is None:
        return HoverResponse()
    return HoverResponse(tooltip=tooltip.text, left=tooltip.left,
                         top=tooltip.top, index=tooltip.index)
