"""
Moments, order statistics and pairwise statistics over float64 buffers.

Variance-type statistics use the population formula (divide by n) and the
two-pass algorithm: a batched mean first, then batched centered powers.
Undefined statistics on too-short inputs return NaN rather than raising.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Tuple

import numpy as np

from reduct_kernels.algorithms.sorting import specialized_sort_f64
from reduct_kernels.core.buffers import as_f64_buffer
from reduct_kernels.core.reductions import (
    batched_centered_moments,
    batched_cross_moments,
    batched_sum,
)

logger = logging.getLogger(__name__)


def _centered(buffer: np.ndarray) -> Tuple[float, float, float]:
    n = buffer.shape[0]
    mean = batched_sum(buffer) / n
    return batched_centered_moments(buffer, mean)


def _interpolate_rank(ordered: np.ndarray, fraction: float) -> float:
    """Linear interpolation at rank `fraction * (n - 1)` of a sorted buffer."""
    n = ordered.shape[0]
    rank = fraction * (n - 1)
    index = int(rank)
    weight = rank - index
    if index + 1 < n:
        return float(ordered[index] + weight * (ordered[index + 1] - ordered[index]))
    return float(ordered[index])


def numeric_median_f64(values: Any) -> float:
    """Middle value of the sorted buffer; mean of the middle pair for even n."""
    buffer = as_f64_buffer(values, "values")
    n = buffer.shape[0]
    if n == 0:
        return math.nan
    ordered = specialized_sort_f64(buffer)
    mid = n // 2
    if n % 2 == 0:
        return float((ordered[mid - 1] + ordered[mid]) / 2.0)
    return float(ordered[mid])


def numeric_variance_f64(values: Any) -> float:
    """Population variance; NaN when empty, 0 for a single element."""
    buffer = as_f64_buffer(values, "values")
    n = buffer.shape[0]
    if n == 0:
        return math.nan
    if n == 1:
        return 0.0
    s2, _, _ = _centered(buffer)
    return s2 / n


def numeric_std_dev_f64(values: Any) -> float:
    variance = numeric_variance_f64(values)
    if math.isnan(variance):
        return variance
    return math.sqrt(variance)


def numeric_skewness_f64(values: Any) -> float:
    """
    Bias-adjusted skewness.

    Computed as ``n * sqrt(n - 1) / (n - 2) * m3 / sigma**3`` where ``m3`` and
    ``sigma`` are population moments. NaN for n < 3, 0 when sigma is 0.
    """
    buffer = as_f64_buffer(values, "values")
    n = buffer.shape[0]
    if n < 3:
        return math.nan
    s2, s3, _ = _centered(buffer)
    std_dev = math.sqrt(s2 / n)
    if std_dev == 0.0:
        return 0.0
    adjustment = (n * math.sqrt(n - 1.0)) / (n - 2.0)
    return adjustment * (s3 / n) / (std_dev**3)


def numeric_kurtosis_f64(values: Any) -> float:
    """
    Excess kurtosis with small-sample bias correction.

    Returns NaN for n <= 3 and 0 for a constant buffer.
    """
    buffer = as_f64_buffer(values, "values")
    n = buffer.shape[0]
    if n <= 3:
        return math.nan
    s2, _, s4 = _centered(buffer)
    variance = s2 / n
    if variance == 0.0:
        return 0.0
    adjustment = (n * (n + 1.0)) / ((n - 1.0) * (n - 2.0) * (n - 3.0))
    term1 = ((n + 1.0) * (s4 / n)) / (variance * variance)
    term2 = 3.0 * (n - 1.0) ** 2 / ((n - 2.0) * (n - 3.0))
    return adjustment * term1 - term2


def numeric_percentile_f64(values: Any, percentile: float) -> float:
    """
    Percentile by linear interpolation between closest ranks.

    Parameters
    ----------
    values : Any
        Numeric sequence.
    percentile : float
        Percentile in [0, 100]; values outside are clamped.

    Returns
    -------
    float
        Interpolated value at rank ``p / 100 * (n - 1)``; NaN when empty.
    """
    buffer = as_f64_buffer(values, "values")
    if buffer.shape[0] == 0 or math.isnan(percentile):
        return math.nan
    p = min(max(float(percentile), 0.0), 100.0)
    return _interpolate_rank(specialized_sort_f64(buffer), p / 100.0)


def numeric_quantiles_f64(values: Any, quantiles: Any) -> np.ndarray:
    """
    Several quantiles at once, each clamped to [0, 1].

    The buffer is sorted once. Empty input or no quantiles yield an empty
    result.
    """
    buffer = as_f64_buffer(values, "values")
    qs = as_f64_buffer(quantiles, "quantiles")
    if buffer.shape[0] == 0 or qs.shape[0] == 0:
        return np.zeros(0, dtype=np.float64)
    ordered = specialized_sort_f64(buffer)
    out = np.empty(qs.shape[0], dtype=np.float64)
    for i, q in enumerate(qs):
        if math.isnan(q):
            out[i] = math.nan
            continue
        out[i] = _interpolate_rank(ordered, min(max(float(q), 0.0), 1.0))
    return out


def _paired(x: Any, y: Any) -> Tuple[np.ndarray, np.ndarray]:
    bx = as_f64_buffer(x, "x")
    by = as_f64_buffer(y, "y")
    n = min(bx.shape[0], by.shape[0])
    if bx.shape[0] != by.shape[0]:
        logger.debug(
            "Truncating paired inputs of lengths %d and %d to %d",
            bx.shape[0],
            by.shape[0],
            n,
        )
    return bx[:n], by[:n]


def numeric_covariance_f64(x: Any, y: Any) -> float:
    """
    Population covariance over the first ``min(len(x), len(y))`` pairs.
    """
    bx, by = _paired(x, y)
    n = bx.shape[0]
    if n == 0:
        return math.nan
    if n == 1:
        return 0.0
    sxy, _, _ = batched_cross_moments(
        bx, by, batched_sum(bx) / n, batched_sum(by) / n
    )
    return sxy / n


def numeric_correlation_f64(x: Any, y: Any) -> float:
    """
    Pearson correlation over the first ``min(len(x), len(y))`` pairs.

    NaN when empty, 1 for a single pair, 0 when either side has zero variance.
    """
    bx, by = _paired(x, y)
    n = bx.shape[0]
    if n == 0:
        return math.nan
    if n == 1:
        return 1.0
    sxy, sxx, syy = batched_cross_moments(
        bx, by, batched_sum(bx) / n, batched_sum(by) / n
    )
    if sxx == 0.0 or syy == 0.0:
        return 0.0
    return sxy / (math.sqrt(sxx) * math.sqrt(syy))
