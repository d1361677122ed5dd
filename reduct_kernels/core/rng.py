"""
Lightweight PRNG helpers to make key threading explicit.
"""

from __future__ import annotations

from typing import Optional, Tuple

import jax
import jax.numpy as jnp

from reduct_kernels.reduct_kernels import Config


def borrow_key(
    key: Optional[jnp.ndarray],
) -> Tuple[jnp.ndarray, Optional[jnp.ndarray]]:
    """
    Return a split key pair. Requires an explicit key.

    Parameters
    ----------
    key : jnp.ndarray
        PRNG key to split.

    Returns
    -------
    Tuple[jnp.ndarray, Optional[jnp.ndarray]]
        (use_key, next_key) where use_key is suitable for a single draw and
        next_key is the remainder of the split.

    Raises
    ------
    ValueError
        If `key` is None.
    """
    if key is None:
        raise ValueError("PRNG key is required; got None")
    use_key, next_key = jax.random.split(key)
    return use_key, next_key


def resolve_key(key: Optional[jnp.ndarray]) -> jnp.ndarray:
    """Use the caller's key, or draw a fresh one from the global Config."""
    if key is None:
        return Config().random_key
    return key


def draw_uniform(key: jnp.ndarray) -> Tuple[float, jnp.ndarray]:
    """
    Draw one float in [0, 1) and return it with the key to use next.
    """
    use_key, next_key = borrow_key(key)
    return float(jax.random.uniform(use_key, dtype=jnp.float64)), next_key


def draw_index(key: jnp.ndarray, upper: int) -> Tuple[int, jnp.ndarray]:
    """
    Draw a uniform index in [0, upper).
    """
    u, next_key = draw_uniform(key)
    return min(int(u * upper), upper - 1), next_key
