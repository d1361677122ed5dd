"""
Element-wise aggregates and callback-driven map/filter/reduce.

Callbacks receive `(value, index)` (reduce: `(accumulator, value, index)`),
where `index` is the position in the whole buffer, and are driven batch by
batch through a scratch arena. Exceptions raised by a callback propagate to
the caller unchanged.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Callable, List

import numpy as np

from reduct_kernels.constants import CALLBACK_BATCH_SIZE
from reduct_kernels.core.batching import ScratchArena, build_plan
from reduct_kernels.core.buffers import as_f64_buffer
from reduct_kernels.core.reductions import batched_sum

logger = logging.getLogger(__name__)

MapFn = Callable[[float, int], float]
FilterFn = Callable[[float, int], Any]
ReduceFn = Callable[[Any, float, int], Any]


def numeric_sum_f64(values: Any) -> float:
    """Sum of all elements; ``0.0`` for an empty buffer."""
    return batched_sum(as_f64_buffer(values, "values"))


def numeric_average_f64(values: Any) -> float:
    """Arithmetic mean; NaN for an empty buffer."""
    buffer = as_f64_buffer(values, "values")
    n = buffer.shape[0]
    if n == 0:
        return math.nan
    return batched_sum(buffer) / n


numeric_mean_f64 = numeric_average_f64


def numeric_min_f64(values: Any) -> float:
    buffer = as_f64_buffer(values, "values")
    if buffer.shape[0] == 0:
        return math.nan
    return float(np.min(buffer))


def numeric_max_f64(values: Any) -> float:
    buffer = as_f64_buffer(values, "values")
    if buffer.shape[0] == 0:
        return math.nan
    return float(np.max(buffer))


def numeric_map_f64(values: Any, map_fn: MapFn) -> np.ndarray:
    """
    Apply `map_fn(value, index)` to every element.

    Parameters
    ----------
    values : Any
        Numeric sequence.
    map_fn : Callable[[float, int], float]
        Mapping callback; its result is coerced with ``float``.

    Returns
    -------
    np.ndarray
        New float64 array of the same length.
    """
    buffer = as_f64_buffer(values, "values")
    out = np.empty(buffer.shape[0], dtype=np.float64)
    plan = build_plan(buffer.shape[0], CALLBACK_BATCH_SIZE)
    logger.debug("Mapping %d elements in %d batches", plan.length, len(plan))
    for offset, length in plan:
        with ScratchArena() as arena:
            batch, _ = arena.load(buffer, offset, length)
            results = arena.alloc(length)
            for i in range(length):
                results[i] = float(map_fn(float(batch[i]), offset + i))
            out[offset : offset + length] = results
    return out


def numeric_filter_f64(values: Any, filter_fn: FilterFn) -> np.ndarray:
    """Keep the elements for which `filter_fn(value, index)` is truthy."""
    buffer = as_f64_buffer(values, "values")
    kept: List[float] = []
    for offset, length in build_plan(buffer.shape[0], CALLBACK_BATCH_SIZE):
        with ScratchArena() as arena:
            batch, _ = arena.load(buffer, offset, length)
            for i in range(length):
                value = float(batch[i])
                if filter_fn(value, offset + i):
                    kept.append(value)
    return np.array(kept, dtype=np.float64)


def numeric_reduce_f64(values: Any, reduce_fn: ReduceFn, initial: Any) -> Any:
    """
    Fold `reduce_fn(accumulator, value, index)` left to right from `initial`.

    The accumulator is passed through untouched, so it need not be a number.
    An empty buffer returns `initial`.
    """
    buffer = as_f64_buffer(values, "values")
    accumulator = initial
    for offset, length in build_plan(buffer.shape[0], CALLBACK_BATCH_SIZE):
        with ScratchArena() as arena:
            batch, _ = arena.load(buffer, offset, length)
            for i in range(length):
                accumulator = reduce_fn(accumulator, float(batch[i]), offset + i)
    return accumulator


def numeric_map_filter_f64(
    values: Any, map_fn: MapFn, filter_fn: FilterFn
) -> np.ndarray:
    """
    Map every element, then keep the mapped values accepted by `filter_fn`.

    Within each batch all elements are mapped before any is filtered; the
    filter sees the mapped value and the original index.
    """
    buffer = as_f64_buffer(values, "values")
    kept: List[float] = []
    for offset, length in build_plan(buffer.shape[0], CALLBACK_BATCH_SIZE):
        with ScratchArena() as arena:
            batch, _ = arena.load(buffer, offset, length)
            mapped = arena.alloc(length)
            for i in range(length):
                mapped[i] = float(map_fn(float(batch[i]), offset + i))
            for i in range(length):
                if filter_fn(float(mapped[i]), offset + i):
                    kept.append(float(mapped[i]))
    return np.array(kept, dtype=np.float64)


def numeric_map_reduce_f64(
    values: Any, map_fn: MapFn, reduce_fn: ReduceFn, initial: Any
) -> Any:
    """
    Fold the mapped values without materializing them.

    `reduce_fn` receives ``(accumulator, float(map_fn(value, index)), index)``.
    """
    buffer = as_f64_buffer(values, "values")
    accumulator = initial
    for offset, length in build_plan(buffer.shape[0], CALLBACK_BATCH_SIZE):
        with ScratchArena() as arena:
            batch, _ = arena.load(buffer, offset, length)
            for i in range(length):
                index = offset + i
                mapped = float(map_fn(float(batch[i]), index))
                accumulator = reduce_fn(accumulator, mapped, index)
    return accumulator


def numeric_filter_reduce_f64(
    values: Any, filter_fn: FilterFn, reduce_fn: ReduceFn, initial: Any
) -> Any:
    """Fold only the elements for which `filter_fn(value, index)` is truthy."""
    buffer = as_f64_buffer(values, "values")
    accumulator = initial
    for offset, length in build_plan(buffer.shape[0], CALLBACK_BATCH_SIZE):
        with ScratchArena() as arena:
            batch, _ = arena.load(buffer, offset, length)
            for i in range(length):
                index = offset + i
                value = float(batch[i])
                if filter_fn(value, index):
                    accumulator = reduce_fn(accumulator, value, index)
    return accumulator


def numeric_map_filter_reduce_f64(
    values: Any,
    map_fn: MapFn,
    filter_fn: FilterFn,
    reduce_fn: ReduceFn,
    initial: Any,
) -> Any:
    """
    Map, filter and fold in one pass.

    The filter sees the mapped value and the original index; accepted mapped
    values are folded left to right from `initial`.
    """
    buffer = as_f64_buffer(values, "values")
    accumulator = initial
    plan = build_plan(buffer.shape[0], CALLBACK_BATCH_SIZE)
    logger.debug("Map/filter/reduce over %d elements in %d batches", plan.length, len(plan))
    for offset, length in plan:
        with ScratchArena() as arena:
            batch, _ = arena.load(buffer, offset, length)
            for i in range(length):
                index = offset + i
                mapped = float(map_fn(float(batch[i]), index))
                if filter_fn(mapped, index):
                    accumulator = reduce_fn(accumulator, mapped, index)
    return accumulator
