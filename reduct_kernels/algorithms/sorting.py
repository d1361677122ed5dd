"""
Adaptive sort family.

The dispatch rule lives in one strategy table (`select_sort_strategy`) so the
size thresholds are named constants rather than literals scattered through the
kernels. Floating comparisons treat any pair involving NaN as equal: NaN
placement relative to other NaNs is stable, its position relative to numbers
is unspecified.
"""

from __future__ import annotations

import logging
from enum import Enum
from functools import cmp_to_key
from typing import Any, Callable, Optional

import numpy as np
from numba import njit

from reduct_kernels.constants import (
    BYTE_VALUES,
    INSERTION_SORT_LIMIT,
    MERGE_SORT_THRESHOLD,
    RADIX_BITS,
    RADIX_BUCKETS,
    RADIX_PASSES,
)
from reduct_kernels.core.buffers import as_f64_buffer, as_u8_buffer, as_u32_buffer

logger = logging.getLogger(__name__)


class SortStrategy(Enum):
    COPY = "copy"
    INSERTION = "insertion"
    COMPARISON = "comparison"
    MERGE = "merge"
    RADIX = "radix"
    COUNTING = "counting"


class KeyType(Enum):
    F64 = "f64"
    U32 = "u32"
    U8 = "u8"


def select_sort_strategy(n: int, key_type: KeyType = KeyType.F64) -> SortStrategy:
    """
    Strategy table for the adaptive sort.

    Parameters
    ----------
    n : int
        Number of elements to sort.
    key_type : KeyType
        Element domain; unsigned keys unlock the linear-time sorts.

    Returns
    -------
    SortStrategy
        The algorithm `adaptive_sort` will run.
    """
    if n <= 1:
        return SortStrategy.COPY
    if key_type is KeyType.U8:
        return SortStrategy.COUNTING
    if n < INSERTION_SORT_LIMIT:
        return SortStrategy.INSERTION
    if n < MERGE_SORT_THRESHOLD:
        return SortStrategy.COMPARISON
    if key_type is KeyType.U32:
        return SortStrategy.RADIX
    return SortStrategy.MERGE


@njit
def _insertion_sort(values):
    out = values.copy()
    for i in range(1, out.shape[0]):
        key = out[i]
        j = i - 1
        while j >= 0 and out[j] > key:
            out[j + 1] = out[j]
            j -= 1
        out[j + 1] = key
    return out


@njit
def _merge_sort(values):
    n = values.shape[0]
    src = values.copy()
    dst = np.empty_like(src)
    width = 1
    while width < n:
        for lo in range(0, n, 2 * width):
            mid = min(lo + width, n)
            hi = min(lo + 2 * width, n)
            i = lo
            j = mid
            k = lo
            while i < mid and j < hi:
                # take from the left unless the right is strictly smaller
                if src[j] < src[i]:
                    dst[k] = src[j]
                    j += 1
                else:
                    dst[k] = src[i]
                    i += 1
                k += 1
            while i < mid:
                dst[k] = src[i]
                i += 1
                k += 1
            while j < hi:
                dst[k] = src[j]
                j += 1
                k += 1
        src, dst = dst, src
        width *= 2
    return src


@njit
def _radix_sort(values, passes, bits, buckets):
    n = values.shape[0]
    src = values.copy()
    dst = np.empty_like(src)
    mask = buckets - 1
    for p in range(passes):
        shift = p * bits
        starts = np.zeros(buckets + 1, dtype=np.int64)
        for i in range(n):
            starts[((np.int64(src[i]) >> shift) & mask) + 1] += 1
        for b in range(buckets):
            starts[b + 1] += starts[b]
        for i in range(n):
            digit = (np.int64(src[i]) >> shift) & mask
            dst[starts[digit]] = src[i]
            starts[digit] += 1
        src, dst = dst, src
    return src


def _counting_sort(values: np.ndarray) -> np.ndarray:
    counts = np.bincount(values, minlength=BYTE_VALUES)
    return np.repeat(np.arange(BYTE_VALUES, dtype=np.uint8), counts)


def _run(strategy: SortStrategy, values: np.ndarray) -> np.ndarray:
    logger.debug("Sorting %d elements with %s", values.shape[0], strategy.value)
    if strategy is SortStrategy.COPY:
        return values.copy()
    if strategy is SortStrategy.INSERTION:
        return _insertion_sort(values)
    if strategy is SortStrategy.COMPARISON:
        return np.sort(values, kind="quicksort")
    if strategy is SortStrategy.MERGE:
        return _merge_sort(values)
    if strategy is SortStrategy.RADIX:
        return _radix_sort(values, RADIX_PASSES, RADIX_BITS, RADIX_BUCKETS)
    if strategy is SortStrategy.COUNTING:
        return _counting_sort(values)
    raise ValueError(f"Unknown sort strategy {strategy!r}")


_ADAPTERS = {
    KeyType.F64: as_f64_buffer,
    KeyType.U32: as_u32_buffer,
    KeyType.U8: as_u8_buffer,
}


def adaptive_sort(values: Any, key_type: KeyType = KeyType.F64) -> np.ndarray:
    """
    Sort a buffer with the algorithm the strategy table picks for its size.

    Returns a new array of the key type's dtype; the input is never mutated.
    """
    buffer = _ADAPTERS[key_type](values, "values")
    return _run(select_sort_strategy(buffer.shape[0], key_type), buffer)


def specialized_sort_f64(values: Any) -> np.ndarray:
    """
    Sort doubles ascending: insertion sort below 20 elements, a general
    comparison sort below 1000 and a stable merge sort above.
    """
    return adaptive_sort(values, KeyType.F64)


def numeric_sort_f64(
    values: Any, compare_fn: Optional[Callable[[float, float], float]] = None
) -> np.ndarray:
    """
    Sort doubles, optionally ordered by a caller comparator.

    Parameters
    ----------
    values : Any
        Numeric sequence.
    compare_fn : Callable[[float, float], float] | None
        `cmp(a, b)` returning a negative, zero or positive number. When given,
        ordering follows the comparator verbatim.

    Returns
    -------
    np.ndarray
        Sorted float64 copy.
    """
    buffer = as_f64_buffer(values, "values")
    if compare_fn is None or buffer.shape[0] <= 1:
        return _run(select_sort_strategy(buffer.shape[0]), buffer)
    logger.debug("Sorting %d elements with caller comparator", buffer.shape[0])
    ordered = sorted(buffer.tolist(), key=cmp_to_key(compare_fn))
    return np.array(ordered, dtype=np.float64)


def radix_sort_u32(values: Any) -> np.ndarray:
    """
    LSD radix sort over 32-bit unsigned keys: 4 byte passes, each a stable
    counting pass.
    """
    buffer = as_u32_buffer(values, "values")
    if buffer.shape[0] <= 1:
        return buffer
    logger.debug("Sorting %d elements with radix", buffer.shape[0])
    return _radix_sort(buffer, RADIX_PASSES, RADIX_BITS, RADIX_BUCKETS)


def counting_sort_u8(values: Any) -> np.ndarray:
    buffer = as_u8_buffer(values, "values")
    return _counting_sort(buffer)
