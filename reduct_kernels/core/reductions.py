"""
Batched reductions that drive either kernel path.

Each reduction walks a `BatchPlan`, copies every batch into a `ScratchArena`
and folds the per-batch partials in batch order. On the vectorized path each
batch is zero-padded to the lane width of the plan's chunk size, so a call
compiles its lane kernel at most once.
"""

from __future__ import annotations

import logging
from typing import Tuple

import numpy as np

from reduct_kernels.core.batching import BatchPlan, ScratchArena, build_plan
from reduct_kernels.core.dispatch import SIMD, active_path, select_kernel
from reduct_kernels.core.kernels import lane_width

logger = logging.getLogger(__name__)


def _plan(length: int, chunk_size: int | None, path: str | None) -> Tuple[BatchPlan, str]:
    plan = build_plan(length, chunk_size)
    if path is None:
        path = active_path()
    logger.debug(
        "Reduction over %d elements: %d batches of %d on %s path",
        plan.length,
        len(plan),
        plan.chunk_size,
        path,
    )
    return plan, path


def batched_sum(
    values: np.ndarray, chunk_size: int | None = None, path: str | None = None
) -> float:
    """
    Sum a float64 buffer batch by batch.

    Parameters
    ----------
    values : np.ndarray
        Float64 buffer produced by the buffer adapter.
    chunk_size : int | None
        Batch size; defaults to ``Config().batch_size``.
    path : str | None
        Force ``"simd"`` or ``"scalar"``; defaults to the active path.

    Returns
    -------
    float
        The sum, ``0.0`` for an empty buffer.
    """
    plan, path = _plan(values.shape[0], chunk_size, path)
    kernel = select_kernel("sum", path)
    total = 0.0
    for offset, length in plan:
        with ScratchArena() as arena:
            if path == SIMD:
                batch, mask = arena.load(
                    values, offset, length, pad_to=lane_width(plan.chunk_size)
                )
                total += float(kernel(batch, mask))
            else:
                batch, _ = arena.load(values, offset, length)
                total += float(kernel(batch))
    return total


def batched_centered_moments(
    values: np.ndarray,
    mean: float,
    chunk_size: int | None = None,
    path: str | None = None,
) -> Tuple[float, float, float]:
    """
    Return (sum d^2, sum d^3, sum d^4) for d = values - mean.
    """
    plan, path = _plan(values.shape[0], chunk_size, path)
    kernel = select_kernel("centered_powers", path)
    s2 = s3 = s4 = 0.0
    for offset, length in plan:
        with ScratchArena() as arena:
            if path == SIMD:
                batch, mask = arena.load(
                    values, offset, length, pad_to=lane_width(plan.chunk_size)
                )
                p2, p3, p4 = kernel(batch, mask, mean)
            else:
                batch, _ = arena.load(values, offset, length)
                p2, p3, p4 = kernel(batch, mean)
            s2 += float(p2)
            s3 += float(p3)
            s4 += float(p4)
    return s2, s3, s4


def batched_cross_moments(
    x: np.ndarray,
    y: np.ndarray,
    mean_x: float,
    mean_y: float,
    chunk_size: int | None = None,
    path: str | None = None,
) -> Tuple[float, float, float]:
    """
    Return (sum dx*dy, sum dx^2, sum dy^2) over equally long buffers.
    """
    if x.shape[0] != y.shape[0]:
        raise ValueError("cross moments need equally long buffers")
    plan, path = _plan(x.shape[0], chunk_size, path)
    kernel = select_kernel("cross", path)
    sxy = sxx = syy = 0.0
    for offset, length in plan:
        with ScratchArena() as arena:
            if path == SIMD:
                width = lane_width(plan.chunk_size)
                bx, mask = arena.load(x, offset, length, pad_to=width)
                by, _ = arena.load(y, offset, length, pad_to=width)
                pxy, pxx, pyy = kernel(bx, by, mask, mean_x, mean_y)
            else:
                bx, _ = arena.load(x, offset, length)
                by, _ = arena.load(y, offset, length)
                pxy, pxx, pyy = kernel(bx, by, mean_x, mean_y)
            sxy += float(pxy)
            sxx += float(pxx)
            syy += float(pyy)
    return sxy, sxx, syy


def batched_squared_error(
    predictions: np.ndarray,
    targets: np.ndarray,
    chunk_size: int | None = None,
    path: str | None = None,
) -> float:
    if predictions.shape[0] != targets.shape[0]:
        raise ValueError("squared error needs equally long buffers")
    plan, path = _plan(predictions.shape[0], chunk_size, path)
    kernel = select_kernel("squared_error", path)
    total = 0.0
    for offset, length in plan:
        with ScratchArena() as arena:
            if path == SIMD:
                width = lane_width(plan.chunk_size)
                bp, mask = arena.load(predictions, offset, length, pad_to=width)
                bt, _ = arena.load(targets, offset, length, pad_to=width)
                total += float(kernel(bp, bt, mask))
            else:
                bp, _ = arena.load(predictions, offset, length)
                bt, _ = arena.load(targets, offset, length)
                total += float(kernel(bp, bt))
    return total


def batched_affine(
    values: np.ndarray,
    slope: float,
    intercept: float,
    chunk_size: int | None = None,
    path: str | None = None,
) -> np.ndarray:
    """
    Elementwise `slope * values + intercept` into a fresh output buffer.
    """
    plan, path = _plan(values.shape[0], chunk_size, path)
    kernel = select_kernel("affine", path)
    out = np.empty(values.shape[0], dtype=np.float64)
    for offset, length in plan:
        with ScratchArena() as arena:
            if path == SIMD:
                batch, _ = arena.load(
                    values, offset, length, pad_to=lane_width(plan.chunk_size)
                )
                out[offset : offset + length] = np.asarray(
                    kernel(batch, slope, intercept)
                )[:length]
            else:
                batch, _ = arena.load(values, offset, length)
                out[offset : offset + length] = kernel(batch, slope, intercept)
    return out
