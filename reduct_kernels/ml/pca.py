"""
Closed-form principal component analysis for 2-D points.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Tuple

import numpy as np

from reduct_kernels.core.buffers import as_f64_buffer, require_count
from reduct_kernels.core.errors import PreconditionError
from reduct_kernels.core.reductions import batched_cross_moments, batched_sum

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PCAResult:
    components: np.ndarray
    projected: np.ndarray
    explained_variance: np.ndarray
    mean_x: float
    mean_y: float


def _normalize(vx: float, vy: float) -> Tuple[float, float]:
    norm = math.hypot(vx, vy)
    return vx / norm, vy / norm


def pca_f64(data: Any, num_components: int) -> PCAResult:
    """
    Project 2-D points onto their principal axes.

    Parameters
    ----------
    data : Any
        Interleaved ``[x0, y0, x1, y1, ...]`` coordinates.
    num_components : int
        1 or 2.

    Returns
    -------
    PCAResult
        Unit eigenvectors (interleaved, descending eigenvalue), the projected
        points (``num_components`` values per point), the explained variance
        ratio of each kept component and the data mean. The ratios are NaN
        when the data has no variance.
    """
    num_components = require_count(num_components, "num_components", minimum=1)
    if num_components > 2:
        raise PreconditionError("Number of components must be 1 or 2 for 2D data")
    buffer = as_f64_buffer(data, "data")
    if buffer.shape[0] % 2 != 0:
        raise PreconditionError(
            f"data must hold interleaved (x, y) pairs, got odd length {buffer.shape[0]}"
        )
    n = buffer.shape[0] // 2
    if n == 0:
        raise PreconditionError("Data must not be empty")

    xs = buffer[0::2].copy()
    ys = buffer[1::2].copy()
    mean_x = batched_sum(xs) / n
    mean_y = batched_sum(ys) / n
    sxy, sxx, syy = batched_cross_moments(xs, ys, mean_x, mean_y)
    cov_xx, cov_xy, cov_yy = sxx / n, sxy / n, syy / n

    trace = cov_xx + cov_yy
    determinant = cov_xx * cov_yy - cov_xy * cov_xy
    discriminant = trace * trace - 4.0 * determinant
    if discriminant < 0.0:
        raise PreconditionError("Negative discriminant in PCA")
    root = math.sqrt(discriminant)
    lambda1, lambda2 = sorted(((trace + root) / 2.0, (trace - root) / 2.0), reverse=True)

    if cov_xy != 0.0:
        v1 = _normalize(lambda1 - cov_yy, cov_xy)
        v2 = _normalize(lambda2 - cov_yy, cov_xy)
    elif cov_xx >= cov_yy:
        v1, v2 = (1.0, 0.0), (0.0, 1.0)
    else:
        v1, v2 = (0.0, 1.0), (1.0, 0.0)

    total_variance = lambda1 + lambda2
    if total_variance == 0.0:
        ratios = (math.nan, math.nan)
    else:
        ratios = (lambda1 / total_variance, lambda2 / total_variance)

    dx = xs - mean_x
    dy = ys - mean_y
    projected = np.empty((n, num_components), dtype=np.float64)
    projected[:, 0] = dx * v1[0] + dy * v1[1]
    if num_components > 1:
        projected[:, 1] = dx * v2[0] + dy * v2[1]

    logger.debug(
        "PCA on %d points: eigenvalues %g, %g", n, lambda1, lambda2
    )
    return PCAResult(
        components=np.array((v1 + v2)[: 2 * num_components], dtype=np.float64),
        projected=projected.reshape(-1),
        explained_variance=np.array(ratios[:num_components], dtype=np.float64),
        mean_x=mean_x,
        mean_y=mean_y,
    )
