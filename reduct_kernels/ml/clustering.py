"""
k-means clustering of 2-D points with k-means++ seeding.

Randomness comes from an explicit jax PRNG key. Pass `key` for reproducible
runs; without one a key is drawn from the global `Config`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Tuple

import jax.numpy as jnp
import numpy as np

from reduct_kernels.core.buffers import as_f64_buffer, require_count
from reduct_kernels.core.errors import PreconditionError
from reduct_kernels.core.rng import draw_index, draw_uniform, resolve_key

logger = logging.getLogger(__name__)

UNASSIGNED = -1


@dataclass(frozen=True)
class KMeansResult:
    """
    Attributes
    ----------
    assignments : np.ndarray
        Cluster index of every point.
    centroids : np.ndarray
        Interleaved (x, y) of every centroid, ``2 * k`` floats.
    iterations : int
        Number of centroid updates performed.
    converged : bool
        Whether an assignment pass changed nothing.
    """

    assignments: np.ndarray
    centroids: np.ndarray
    iterations: int
    converged: bool


def _split_points(data: Any) -> Tuple[np.ndarray, np.ndarray]:
    buffer = as_f64_buffer(data, "data")
    if buffer.shape[0] % 2 != 0:
        raise PreconditionError(
            f"data must hold interleaved (x, y) pairs, got odd length {buffer.shape[0]}"
        )
    return buffer[0::2].copy(), buffer[1::2].copy()


def _squared_distances(
    px: np.ndarray, py: np.ndarray, cx: np.ndarray, cy: np.ndarray
) -> np.ndarray:
    dx = px[:, None] - cx[None, :]
    dy = py[:, None] - cy[None, :]
    return dx * dx + dy * dy


def _seed_centroids(
    px: np.ndarray, py: np.ndarray, k: int, key: jnp.ndarray
) -> Tuple[np.ndarray, np.ndarray, jnp.ndarray]:
    n = px.shape[0]
    chosen = np.empty(k, dtype=np.int64)
    chosen[0], key = draw_index(key, n)
    for c in range(1, k):
        nearest = _squared_distances(px, py, px[chosen[:c]], py[chosen[:c]]).min(axis=1)
        u, key = draw_uniform(key)
        cumulative = np.cumsum(nearest)
        target = u * cumulative[-1]
        chosen[c] = min(int(np.searchsorted(cumulative, target, side="left")), n - 1)
    return px[chosen].copy(), py[chosen].copy(), key


def kmeans_clustering_f64(
    data: Any,
    k: int,
    max_iterations: int,
    key: Optional[jnp.ndarray] = None,
) -> KMeansResult:
    """
    Partition 2-D points into `k` clusters.

    Parameters
    ----------
    data : Any
        Interleaved ``[x0, y0, x1, y1, ...]`` coordinates.
    k : int
        Number of clusters, between 1 and the number of points.
    max_iterations : int
        Upper bound on centroid updates, at least 1.
    key : jnp.ndarray | None
        PRNG key driving the seeding and the reseeding of empty clusters.

    Returns
    -------
    KMeansResult
        Final assignments and centroids.

    Notes
    -----
    Every point starts unassigned, so the first assignment pass always
    changes something and counts as one iteration. Ties between centroids go
    to the lowest cluster index. An empty cluster is moved to a uniformly
    drawn point.
    """
    k = require_count(k, "k", minimum=1)
    max_iterations = require_count(max_iterations, "max_iterations", minimum=1)
    px, py = _split_points(data)
    n = px.shape[0]
    if k > n:
        raise PreconditionError(
            f"Number of points ({n}) must be greater than or equal to k ({k})"
        )

    key = resolve_key(key)
    cx, cy, key = _seed_centroids(px, py, k, key)

    assignments = np.full(n, UNASSIGNED, dtype=np.int64)
    converged = False
    iterations = 0
    while iterations < max_iterations:
        nearest = np.argmin(_squared_distances(px, py, cx, cy), axis=1)
        if np.array_equal(nearest, assignments):
            converged = True
            break
        assignments = nearest

        counts = np.bincount(assignments, minlength=k)
        sum_x = np.bincount(assignments, weights=px, minlength=k)
        sum_y = np.bincount(assignments, weights=py, minlength=k)
        for c in range(k):
            if counts[c] > 0:
                cx[c] = sum_x[c] / counts[c]
                cy[c] = sum_y[c] / counts[c]
            else:
                idx, key = draw_index(key, n)
                logger.debug("Cluster %d is empty, reseeding at point %d", c, idx)
                cx[c], cy[c] = px[idx], py[idx]
        iterations += 1

    logger.debug(
        "k-means with k=%d on %d points: %d iterations, converged=%s",
        k,
        n,
        iterations,
        converged,
    )
    centroids = np.empty(2 * k, dtype=np.float64)
    centroids[0::2] = cx
    centroids[1::2] = cy
    return KMeansResult(
        assignments=assignments,
        centroids=centroids,
        iterations=iterations,
        converged=converged,
    )
