"""
Sigma-based outlier handling for channel series.

A sample is an outlier when |value - mean| > sigma * std_dev, using the
population standard deviation (divisor N). Three modes:

  mark_outliers   annotate is_outlier, keep every sample (report-only)
  drop_outliers   remove flagged samples, report how many were removed
  clamp_to_floor  asymmetric: raise values below mean - k*std_dev up to that
                  floor instead of discarding them (cadence, whose valid range
                  sits on a hard physical floor near zero)

Empty, single-sample and constant series have std_dev == 0, so nothing is
flagged: |value - mean| <= 0 holds for every sample.
"""
from dataclasses import dataclass, replace
from typing import Sequence, Tuple

import numpy as np

from fitchart.analysis.timeseries import AxisRange, ChannelSeries

DEFAULT_SIGMA = 2.0


@dataclass
class SeriesStats:
    mean: float
    std_dev: float   # population
    min: float
    max: float


@dataclass
class OutlierResult:
    series: ChannelSeries
    removed_count: int


def series_stats(values: Sequence[float]) -> SeriesStats:
    """Mean, population std dev and extrema. All zero for an empty input."""
    if len(values) == 0:
        return SeriesStats(mean=0.0, std_dev=0.0, min=0.0, max=0.0)
    arr = np.asarray(values, dtype=float)
    return SeriesStats(
        mean=float(np.mean(arr)),
        std_dev=float(np.std(arr)),   # ddof=0 → population
        min=float(np.min(arr)),
        max=float(np.max(arr)),
    )


def outlier_mask(values: Sequence[float], sigma: float = DEFAULT_SIGMA) -> np.ndarray:
    """Boolean array, True where the value lies more than sigma std devs from the mean."""
    if len(values) == 0:
        return np.zeros(0, dtype=bool)
    arr = np.asarray(values, dtype=float)
    stats = series_stats(arr)
    return np.abs(arr - stats.mean) > sigma * stats.std_dev


def mark_outliers(series: ChannelSeries, sigma: float = DEFAULT_SIGMA) -> ChannelSeries:
    """Return a copy of the series with is_outlier set on every sample."""
    mask = outlier_mask([p.value for p in series], sigma)
    return [replace(p, is_outlier=bool(flag)) for p, flag in zip(series, mask)]


def drop_outliers(series: ChannelSeries, sigma: float = DEFAULT_SIGMA) -> OutlierResult:
    """Remove outliers. The survivors keep their original order."""
    mask = outlier_mask([p.value for p in series], sigma)
    kept = [replace(p, is_outlier=False) for p, flag in zip(series, mask) if not flag]
    return OutlierResult(series=kept, removed_count=len(series) - len(kept))


def clamp_to_floor(
    series: ChannelSeries,
    sigmas: float = DEFAULT_SIGMA,
) -> Tuple[ChannelSeries, AxisRange]:
    """
    Raise every value below mean - sigmas*std_dev up to that floor.

    Returns the clamped series and the pinned axis range [floor, max], where
    max is taken from the unclamped values.
    """
    stats = series_stats([p.value for p in series])
    floor = stats.mean - sigmas * stats.std_dev
    clamped = [p if p.value >= floor else p.with_value(floor) for p in series]
    return clamped, AxisRange(min=floor, max=stats.max)
