"""
Workout → chart-ready series.

  workout ─► resolve_records ─► extract_channel ─► [clamp_to_floor] ─►
  mark/drop outliers ─► moving_average ─► PreparedSeries

Each channel is processed independently. A channel with no data is simply
absent from the result; a channel that raises is logged and skipped so it
can't take the other charts down with it.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Sequence, Union

from fitchart.analysis.channels import CHANNELS, ChannelConfig
from fitchart.analysis.extract import extract_channel, sample_field_names
from fitchart.analysis.outliers import clamp_to_floor, drop_outliers, mark_outliers
from fitchart.analysis.records import RawRecord, Workout, resolve_records
from fitchart.analysis.smoothing import BoundaryPolicy, moving_average
from fitchart.analysis.timeseries import AxisRange, ChannelSeries
from fitchart.config import Settings, get_settings

logger = logging.getLogger(__name__)


@dataclass
class PreparedSeries:
    """One channel, cleaned and smoothed, plus what the chart caption needs."""
    channel: ChannelConfig
    points: ChannelSeries
    original_count: int
    removed_count: int = 0
    filter_enabled: bool = False
    axis_range: Optional[AxisRange] = None   # pinned range, else derived at render time

    @property
    def outlier_count(self) -> int:
        """Flagged samples: removed ones when dropping, marked ones otherwise."""
        if self.filter_enabled:
            return self.removed_count
        return sum(1 for p in self.points if p.is_outlier)


@dataclass
class WorkoutCharts:
    file_name: str
    record_count: int
    series: Dict[str, PreparedSeries] = field(default_factory=dict)


def prepare_channel(
    records: Sequence[RawRecord],
    config: ChannelConfig,
    filter_outliers: bool = True,
    sigma: float = 2.0,
    window: int = 5,
    boundary_policy: Union[BoundaryPolicy, str] = BoundaryPolicy.SHRINK_WINDOW,
) -> Optional[PreparedSeries]:
    """
    Run one channel through the pipeline. Returns None when it has no data.

    The channel's own sigma_threshold / smoothing_window, when set, win over
    the arguments.
    """
    points = extract_channel(records, config)
    if not points:
        return None

    sigma = config.sigma_threshold if config.sigma_threshold is not None else sigma
    window = config.smoothing_window if config.smoothing_window is not None else window
    original_count = len(points)

    axis_range: Optional[AxisRange] = None
    if config.pin_floor:
        points, axis_range = clamp_to_floor(points)

    removed = 0
    if filter_outliers:
        result = drop_outliers(points, sigma)
        points, removed = result.series, result.removed_count
    else:
        points = mark_outliers(points, sigma)

    if points:
        points = moving_average(points, window, boundary_policy)

    logger.debug(
        "Channel %s: %d samples, %d removed", config.key, original_count, removed
    )
    return PreparedSeries(
        channel=config,
        points=points,
        original_count=original_count,
        removed_count=removed,
        filter_enabled=filter_outliers,
        axis_range=axis_range,
    )


def prepare_workout(
    workout: Workout,
    channels: Optional[Iterable[str]] = None,
    settings: Optional[Settings] = None,
    filter_outliers: Optional[bool] = None,
) -> WorkoutCharts:
    """
    Prepare every requested channel (default: the whole channel table).

    Unknown channel keys are ignored with a warning.
    """
    settings = settings or get_settings()
    if filter_outliers is None:
        filter_outliers = settings.filter_outliers

    records = resolve_records(workout)
    charts = WorkoutCharts(
        file_name=str(workout.get("fileName", "")),
        record_count=len(records),
    )
    if not records:
        return charts

    logger.debug("Fields in first records: %s", sample_field_names(records))

    for key in channels if channels is not None else CHANNELS:
        config = CHANNELS.get(key)
        if config is None:
            logger.warning("Unknown channel %r skipped", key)
            continue
        try:
            prepared = prepare_channel(
                records,
                config,
                filter_outliers=filter_outliers,
                sigma=settings.sigma_threshold,
                window=settings.smoothing_window,
                boundary_policy=settings.smoothing_boundary,
            )
        except Exception:
            logger.exception("Channel %s failed; skipping", key)
            continue
        if prepared is not None:
            charts.series[key] = prepared

    logger.info(
        "Prepared %d charts for %s", len(charts.series), charts.file_name or "workout"
    )
    return charts
