"""
Time-series kernels: moving averages, outlier flags, gap filling and
autocorrelation.
"""

from __future__ import annotations

import logging
import math
from typing import Any

import numpy as np
from numba import njit

from reduct_kernels.core.buffers import as_f64_buffer, require_count
from reduct_kernels.core.errors import PreconditionError
from reduct_kernels.core.reductions import (
    batched_centered_moments,
    batched_cross_moments,
    batched_sum,
)

logger = logging.getLogger(__name__)


@njit
def _sliding_mean(values, window):
    n_out = values.shape[0] - window + 1
    out = np.empty(n_out, dtype=np.float64)
    window_sum = 0.0
    for i in range(window):
        window_sum += values[i]
    out[0] = window_sum / window
    for i in range(1, n_out):
        window_sum = window_sum - values[i - 1] + values[i + window - 1]
        out[i] = window_sum / window
    return out


@njit
def _exponential_mean(values, alpha):
    out = np.empty(values.shape[0], dtype=np.float64)
    out[0] = values[0]
    for i in range(1, values.shape[0]):
        out[i] = alpha * values[i] + (1.0 - alpha) * out[i - 1]
    return out


@njit
def _weighted_mean(values, window):
    n_out = values.shape[0] - window + 1
    out = np.empty(n_out, dtype=np.float64)
    denominator = (window * (window + 1)) // 2
    for i in range(n_out):
        weighted_sum = 0.0
        for j in range(window):
            weighted_sum += values[i + j] * (j + 1)
        out[i] = weighted_sum / denominator
    return out


def _check_window(buffer: np.ndarray, window_size: Any) -> int:
    window = require_count(window_size, "window_size", minimum=1)
    if window > buffer.shape[0]:
        raise PreconditionError(
            f"window_size {window} exceeds buffer length {buffer.shape[0]}"
        )
    return window


def numeric_moving_average_f64(values: Any, window_size: int) -> np.ndarray:
    """
    Simple moving average over a sliding window.

    Parameters
    ----------
    values : Any
        Numeric sequence.
    window_size : int
        Window length, between 1 and ``len(values)``.

    Returns
    -------
    np.ndarray
        ``len(values) - window_size + 1`` window means.
    """
    buffer = as_f64_buffer(values, "values")
    window = _check_window(buffer, window_size)
    return _sliding_mean(buffer, window)


def numeric_exponential_moving_average_f64(values: Any, alpha: float) -> np.ndarray:
    """
    EMA seeded with the first element; `alpha` must lie in (0, 1].
    """
    alpha = float(alpha)
    if not 0.0 < alpha <= 1.0:
        raise PreconditionError(f"alpha must lie in (0, 1], got {alpha}")
    buffer = as_f64_buffer(values, "values")
    if buffer.shape[0] == 0:
        return np.zeros(0, dtype=np.float64)
    return _exponential_mean(buffer, alpha)


def numeric_weighted_moving_average_f64(values: Any, window_size: int) -> np.ndarray:
    """Linearly weighted moving average; the newest element weighs `window_size`."""
    buffer = as_f64_buffer(values, "values")
    window = _check_window(buffer, window_size)
    return _weighted_mean(buffer, window)


def numeric_detect_outliers_f64(values: Any, threshold: float) -> np.ndarray:
    """
    Flag elements whose absolute z-score exceeds `threshold`.

    Uses the population standard deviation. A constant buffer has no
    outliers.
    """
    threshold = float(threshold)
    if not threshold > 0.0:
        raise PreconditionError(f"threshold must be positive, got {threshold}")
    buffer = as_f64_buffer(values, "values")
    n = buffer.shape[0]
    if n == 0:
        return np.zeros(0, dtype=np.bool_)
    mean = batched_sum(buffer) / n
    s2, _, _ = batched_centered_moments(buffer, mean)
    std_dev = math.sqrt(s2 / n)
    if std_dev == 0.0:
        return np.zeros(n, dtype=np.bool_)
    return np.abs(buffer - mean) / std_dev > threshold


def numeric_interpolate_missing_f64(values: Any) -> np.ndarray:
    """
    Fill NaN gaps.

    Interior runs are filled by linear interpolation between the nearest valid
    neighbours; leading and trailing runs repeat the nearest valid value. A
    buffer with no valid value is returned unchanged.
    """
    buffer = as_f64_buffer(values, "values")
    valid = np.flatnonzero(~np.isnan(buffer))
    if valid.shape[0] == 0:
        return buffer
    out = buffer.copy()
    first, last = valid[0], valid[-1]
    out[:first] = buffer[first]
    out[last + 1 :] = buffer[last]
    for left, right in zip(valid[:-1], valid[1:]):
        gap = right - left
        if gap > 1:
            step = (buffer[right] - buffer[left]) / gap
            for j in range(1, gap):
                out[left + j] = buffer[left] + step * j
    logger.debug(
        "Interpolated %d missing values", buffer.shape[0] - valid.shape[0]
    )
    return out


def numeric_autocorrelation_f64(values: Any, lag: int) -> float:
    """
    Lag-`lag` autocovariance divided by the zero-lag variance sum.

    NaN when the buffer is not longer than `lag`; 0 for a constant buffer.
    """
    lag = require_count(lag, "lag", minimum=0)
    buffer = as_f64_buffer(values, "values")
    n = buffer.shape[0]
    if n <= lag:
        return math.nan
    mean = batched_sum(buffer) / n
    numerator, _, _ = batched_cross_moments(buffer[: n - lag], buffer[lag:], mean, mean)
    denominator, _, _ = batched_centered_moments(buffer, mean)
    if denominator == 0.0:
        return 0.0
    return numerator / denominator
