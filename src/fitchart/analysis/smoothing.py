"""
Centred moving-average smoothing.

For index i with half-width h = window // 2, the smoothed value is the mean of
values[i-h .. i+h]. Near either end the full window does not fit, and two
policies exist:

  KEEP_RAW       boundary samples are copied through unsmoothed
  SHRINK_WINDOW  boundary samples average whatever part of the window fits

Even windows use the same symmetric range, so they average window + 1 values.

Only values change. Timestamps, original_value and is_outlier are carried over
from the input point at the same index, and the output length always equals
the input length. Series shorter than the window are returned unchanged.
"""
from enum import Enum
from typing import Union

import numpy as np

from fitchart.analysis.timeseries import ChannelSeries


class BoundaryPolicy(str, Enum):
    KEEP_RAW = "keep-raw"
    SHRINK_WINDOW = "shrink-window"


def moving_average(
    series: ChannelSeries,
    window: int = 5,
    boundary_policy: Union[BoundaryPolicy, str] = BoundaryPolicy.SHRINK_WINDOW,
) -> ChannelSeries:
    policy = BoundaryPolicy(boundary_policy)
    n = len(series)
    if window < 2 or n < window:
        return list(series)

    half = window // 2
    values = np.array([p.value for p in series], dtype=float)
    cumsum = np.concatenate(([0.0], np.cumsum(values)))

    idx = np.arange(n)
    lo = np.maximum(idx - half, 0)
    hi = np.minimum(idx + half + 1, n)
    smoothed = (cumsum[hi] - cumsum[lo]) / (hi - lo)

    if policy is BoundaryPolicy.KEEP_RAW:
        partial = (idx - half < 0) | (idx + half + 1 > n)
        smoothed = np.where(partial, values, smoothed)

    return [p.with_value(float(v)) for p, v in zip(series, smoothed)]
