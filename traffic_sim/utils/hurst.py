"""Hurst exponent estimation.

This module estimates the Hurst exponent of a series with Rescaled-Range
(R/S) analysis: the mean R/S statistic is computed for a fixed set of window
sizes and the exponent is the slope of log(R/S) against log(window).
"""

from typing import List, Sequence, Tuple

import numpy as np

DEFAULT_HURST = 0.5
MIN_SERIES_LENGTH = 10
WINDOW_SIZES = (10, 20, 50, 100, 200, 500, 1000)


def rescaled_range(window: np.ndarray) -> float:
    """Compute the R/S statistic of a single window.

    Args:
        window: Values of the window.

    Returns:
        Range of the cumulative deviations divided by the standard deviation,
        or 0.0 when the window is constant.
    """
    deviations = window - window.mean()
    std = np.sqrt(np.mean(deviations**2))
    if std == 0:
        return 0.0
    cumulative = np.cumsum(deviations)
    return float((cumulative.max() - cumulative.min()) / std)


def mean_rescaled_range(series: np.ndarray, window_size: int) -> float:
    """Average R/S over all non-overlapping windows of a given size.

    Constant windows are left out of the average. Returns 0.0 when every
    window is constant.
    """
    num_windows = len(series) // window_size
    windows = series[: num_windows * window_size].reshape(num_windows, window_size)
    stats = [rs for rs in (rescaled_range(w) for w in windows) if rs > 0]
    if not stats:
        return 0.0
    return float(np.mean(stats))


def rs_points(series: Sequence[float]) -> List[Tuple[float, float]]:
    """Collect the (log window, log mean R/S) pairs used by the regression.

    Args:
        series: Input time series.

    Returns:
        One pair per window size smaller than the series whose statistic is
        positive.
    """
    data = np.asarray(series, dtype=float)
    points = []
    for window_size in WINDOW_SIZES:
        if window_size >= len(data):
            break
        rs = mean_rescaled_range(data, window_size)
        if rs > 0:
            points.append((np.log(window_size), np.log(rs)))
    return points


def estimate_hurst(series: Sequence[float]) -> float:
    """Estimate the Hurst exponent of a series.

    Args:
        series: Input time series.

    Returns:
        The least-squares slope of log(R/S) over log(window). Series shorter
        than MIN_SERIES_LENGTH, or with fewer than two usable window sizes,
        return DEFAULT_HURST.
    """
    if len(series) < MIN_SERIES_LENGTH:
        return DEFAULT_HURST

    points = rs_points(series)
    if len(points) < 2:
        return DEFAULT_HURST

    x, y = np.array(points).T
    slope, _ = np.polyfit(x, y, 1)
    return float(slope)
