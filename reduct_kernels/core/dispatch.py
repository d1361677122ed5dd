"""
Selection between the vectorized (jax) and scalar (numba) kernel paths.

The capability check runs once per process; afterwards every call consults
`Config().use_simd` so callers can opt out without re-probing.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Callable, Dict, Tuple

import jax
import jax.numpy as jnp

from reduct_kernels.core import kernels, scalar
from reduct_kernels.reduct_kernels import Config

logger = logging.getLogger(__name__)

SIMD = "simd"
SCALAR = "scalar"

_KERNELS: Dict[str, Tuple[Callable, Callable]] = {
    "sum": (kernels.lane_sum, scalar.scalar_sum),
    "centered_powers": (kernels.lane_centered_powers, scalar.scalar_centered_powers),
    "cross": (kernels.lane_cross, scalar.scalar_cross),
    "squared_error": (kernels.lane_squared_error, scalar.scalar_squared_error),
    "affine": (kernels.lane_affine, scalar.scalar_affine),
    "dense_forward": (kernels.dense_forward, scalar.scalar_dense_forward),
    "matmul": (kernels.matmul, scalar.scalar_matmul),
}


@lru_cache(None)
def simd_available() -> bool:
    """
    Check whether the vectorized backend can compile and run a lane kernel.
    """
    try:
        total = kernels.lane_sum(
            jnp.ones(kernels.lane_width(1)), jnp.array([True, False, False, False])
        )
        ok = bool(total == 1.0)
    except RuntimeError as exc:
        logger.warning("Vectorized kernels unavailable, using scalar path: %s", exc)
        return False
    logger.debug(
        "Vectorized kernels available on %s (float64=%s)",
        jax.default_backend(),
        jax.config.jax_enable_x64,
    )
    return ok


def use_simd_path() -> bool:
    return Config().use_simd and simd_available()


def active_path() -> str:
    return SIMD if use_simd_path() else SCALAR


def kernel_names() -> Tuple[str, ...]:
    return tuple(_KERNELS)


def select_kernel(name: str, path: str | None = None) -> Callable:
    """
    Pick one implementation of a kernel from the strategy table.

    Parameters
    ----------
    name : str
        Kernel name, one of `kernel_names()`.
    path : str | None
        Force `"simd"` or `"scalar"`; defaults to the active path.

    Returns
    -------
    Callable
        The selected implementation.
    """
    try:
        simd_fn, scalar_fn = _KERNELS[name]
    except KeyError:
        raise KeyError(f"Unknown kernel {name!r}") from None
    if path is None:
        path = active_path()
    if path == SIMD:
        return simd_fn
    if path == SCALAR:
        return scalar_fn
    raise ValueError(f"Unknown execution path {path!r}")
