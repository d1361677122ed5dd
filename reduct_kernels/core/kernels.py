"""
Stateless lane kernels intended for JAX JIT.

Design notes
------------
- Kernels operate on one padded batch plus a boolean mask and never see the
  caller's buffers; the batch scheduler in `reduct_kernels.core.reductions`
  owns slicing and accumulation across batches.
- Padded widths are a multiple of `SIMD_LANES` so each batch folds into
  `(width // SIMD_LANES, SIMD_LANES)` lane accumulators before the final
  horizontal add.
- Shapes should be static per compiled instance; the scheduler pads every
  batch of one call to the same width so each call compiles at most once.
"""

from __future__ import annotations

from typing import Tuple

import jax
import jax.numpy as jnp
import opt_einsum as oe

from reduct_kernels.constants import SIMD_LANES


def lane_width(length: int) -> int:
    """Smallest multiple of `SIMD_LANES` that holds `length` elements."""
    return -(-length // SIMD_LANES) * SIMD_LANES


def _fold_lanes(values: jnp.ndarray) -> jnp.ndarray:
    lanes = values.reshape((-1, SIMD_LANES))
    return jnp.sum(jnp.sum(lanes, axis=0))


@jax.jit
def lane_sum(values: jnp.ndarray, mask: jnp.ndarray) -> jnp.ndarray:
    """
    Sum of the masked elements of one batch.

    Parameters
    ----------
    values : jnp.ndarray
        Batch padded to a multiple of `SIMD_LANES`.
    mask : jnp.ndarray
        Boolean mask marking real elements.

    Returns
    -------
    jnp.ndarray
        Scalar partial sum.
    """
    return _fold_lanes(jnp.where(mask, values, 0.0))


@jax.jit
def lane_centered_powers(
    values: jnp.ndarray, mask: jnp.ndarray, mean: jnp.ndarray
) -> Tuple[jnp.ndarray, jnp.ndarray, jnp.ndarray]:
    """
    Partial sums of the second, third and fourth powers of `values - mean`.
    """
    d = jnp.where(mask, values - mean, 0.0)
    d2 = d * d
    return _fold_lanes(d2), _fold_lanes(d2 * d), _fold_lanes(d2 * d2)


@jax.jit
def lane_cross(
    x: jnp.ndarray,
    y: jnp.ndarray,
    mask: jnp.ndarray,
    mean_x: jnp.ndarray,
    mean_y: jnp.ndarray,
) -> Tuple[jnp.ndarray, jnp.ndarray, jnp.ndarray]:
    """
    Partial sums of dx*dy, dx^2 and dy^2 for centered pairs.
    """
    dx = jnp.where(mask, x - mean_x, 0.0)
    dy = jnp.where(mask, y - mean_y, 0.0)
    return _fold_lanes(dx * dy), _fold_lanes(dx * dx), _fold_lanes(dy * dy)


@jax.jit
def lane_squared_error(
    predictions: jnp.ndarray, targets: jnp.ndarray, mask: jnp.ndarray
) -> jnp.ndarray:
    diff = jnp.where(mask, predictions - targets, 0.0)
    return _fold_lanes(diff * diff)


@jax.jit
def lane_affine(
    values: jnp.ndarray, slope: jnp.ndarray, intercept: jnp.ndarray
) -> jnp.ndarray:
    return slope * values + intercept


@jax.jit
def dense_forward(
    weights: jnp.ndarray, inputs: jnp.ndarray, biases: jnp.ndarray
) -> jnp.ndarray:
    """
    Pre-activation of a dense layer.

    Parameters
    ----------
    weights : jnp.ndarray
        Row-major weights shaped (outputs, features).
    inputs : jnp.ndarray
        Feature vector shaped (features,).
    biases : jnp.ndarray
        Bias vector shaped (outputs,).

    Returns
    -------
    jnp.ndarray
        `weights @ inputs + biases` shaped (outputs,).
    """
    return oe.contract("of,f->o", weights, inputs, backend="jax") + biases


@jax.jit
def matmul(a: jnp.ndarray, b: jnp.ndarray) -> jnp.ndarray:
    return oe.contract("ij,jk->ik", a, b, backend="jax")
