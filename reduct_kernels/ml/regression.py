"""
Ordinary least-squares fit of a line and prediction from a fitted line.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import numpy as np

from reduct_kernels.core.buffers import as_f64_buffer
from reduct_kernels.core.errors import DegenerateInputError, PreconditionError
from reduct_kernels.core.reductions import (
    batched_affine,
    batched_cross_moments,
    batched_squared_error,
    batched_sum,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegressionResult:
    slope: float
    intercept: float
    r_squared: float


def linear_regression_f64(x: Any, y: Any) -> RegressionResult:
    """
    Fit ``y = slope * x + intercept`` by least squares.

    Parameters
    ----------
    x, y : Any
        Paired samples; the longer input is truncated to the shorter one.

    Returns
    -------
    RegressionResult
        Slope, intercept and coefficient of determination. ``r_squared`` is
        0 when every y is equal.

    Raises
    ------
    PreconditionError
        With fewer than two pairs.
    DegenerateInputError
        When every x is equal.
    """
    bx = as_f64_buffer(x, "x")
    by = as_f64_buffer(y, "y")
    n = min(bx.shape[0], by.shape[0])
    if n < 2:
        raise PreconditionError(
            "At least 2 data points are required for linear regression"
        )
    bx, by = bx[:n], by[:n]
    mean_x = batched_sum(bx) / n
    mean_y = batched_sum(by) / n
    numerator, denominator, ss_total = batched_cross_moments(bx, by, mean_x, mean_y)
    if denominator == 0.0:
        raise DegenerateInputError("x has zero variance; slope is undefined")
    slope = numerator / denominator
    intercept = mean_y - slope * mean_x
    ss_residual = batched_squared_error(by, batched_affine(bx, slope, intercept))
    r_squared = 0.0 if ss_total == 0.0 else 1.0 - ss_residual / ss_total
    logger.debug(
        "Fitted %d points: slope=%g intercept=%g r2=%g", n, slope, intercept, r_squared
    )
    return RegressionResult(slope=slope, intercept=intercept, r_squared=r_squared)


def linear_regression_predict_f64(
    x: Any, slope: float, intercept: float
) -> np.ndarray:
    """Evaluate a fitted line at every x."""
    return batched_affine(as_f64_buffer(x, "x"), float(slope), float(intercept))
