"""
Index arithmetic for a 32-way bit-partitioned trie, plus the flat-buffer
edits the persistent vector built on top of it performs on leaf nodes.

Each trie level consumes `BITS_PER_LEVEL` bits of the element index; bitmaps
are 32-bit words with one bit per child slot.
"""

from __future__ import annotations

from typing import Any, Optional

import numpy as np

from reduct_kernels.constants import BITMAP_WIDTH, BITS_PER_LEVEL, LEVEL_MASK
from reduct_kernels.core.buffers import as_f64_buffer, require_count
from reduct_kernels.core.errors import PreconditionError

_BITMAP_MASK = (1 << BITMAP_WIDTH) - 1


def hamt_find_path(index: int, height: int, size: Optional[int] = None) -> np.ndarray:
    """
    Per-level child positions of `index`, root level first.

    Parameters
    ----------
    index : int
        Element index.
    height : int
        Trie height; the path has ``height + 1`` entries.
    size : int | None
        Vector size. Accepted for call-site symmetry and not used.

    Returns
    -------
    np.ndarray
        int32 array where entry ``height - level`` is
        ``(index >> (level * 5)) & 31``.

    Examples
    --------
    >>> hamt_find_path(40, 1)
    array([1, 8], dtype=int32)
    """
    index = require_count(index, "index")
    height = require_count(height, "height")
    # python ints keep indices at or above 2**63 exact
    digits = [
        (index >> (level * BITS_PER_LEVEL)) & LEVEL_MASK for level in range(height, -1, -1)
    ]
    return np.array(digits, dtype=np.int32)


def _check_bitmap(bitmap: int) -> int:
    bitmap = require_count(bitmap, "bitmap")
    if bitmap > _BITMAP_MASK:
        raise PreconditionError(f"bitmap must fit in {BITMAP_WIDTH} bits, got {bitmap}")
    return bitmap


def _check_position(position: int) -> int:
    position = require_count(position, "position")
    if position >= BITMAP_WIDTH:
        raise PreconditionError(
            f"position must lie in 0..{BITMAP_WIDTH - 1}, got {position}"
        )
    return position


def hamt_get_index(bitmap: int, position: int) -> int:
    """Dense child index of `position`: the number of set bits below it."""
    bitmap = _check_bitmap(bitmap)
    position = _check_position(position)
    return bin(bitmap & ((1 << position) - 1)).count("1")


def hamt_set_bit(bitmap: int, position: int) -> int:
    return _check_bitmap(bitmap) | (1 << _check_position(position))


def hamt_clear_bit(bitmap: int, position: int) -> int:
    return _check_bitmap(bitmap) & ~(1 << _check_position(position)) & _BITMAP_MASK


def hamt_append(data: Any, value: float) -> np.ndarray:
    return np.append(as_f64_buffer(data, "data"), float(value))


def hamt_prepend(data: Any, value: float) -> np.ndarray:
    return np.insert(as_f64_buffer(data, "data"), 0, float(value))


def hamt_insert(data: Any, index: int, value: float) -> np.ndarray:
    """
    New buffer with `value` inserted before `index`; ``index == len(data)``
    appends.
    """
    buffer = as_f64_buffer(data, "data")
    index = require_count(index, "index")
    if index > buffer.shape[0]:
        raise PreconditionError(f"Index {index} out of bounds for insertion")
    return np.insert(buffer, index, float(value))


def hamt_remove(data: Any, index: int) -> np.ndarray:
    buffer = as_f64_buffer(data, "data")
    index = require_count(index, "index")
    if index >= buffer.shape[0]:
        raise PreconditionError(f"Index {index} out of bounds")
    return np.delete(buffer, index)


def hamt_append_multiple(data: Any, values: Any) -> np.ndarray:
    return np.concatenate((as_f64_buffer(data, "data"), as_f64_buffer(values, "values")))


def hamt_prepend_multiple(data: Any, values: Any) -> np.ndarray:
    return np.concatenate((as_f64_buffer(values, "values"), as_f64_buffer(data, "data")))


def hamt_concat(data1: Any, data2: Any) -> np.ndarray:
    return np.concatenate((as_f64_buffer(data1, "data1"), as_f64_buffer(data2, "data2")))
