"""
Buffer adapter between caller-owned sequences and kernel-local storage.

Every kernel copies its inputs through these helpers before touching them and
writes results into arrays allocated by `new_output`, so no kernel aliases
caller memory after it returns.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from reduct_kernels.core.errors import DimensionMismatchError, PreconditionError

_U32_MAX = np.iinfo(np.uint32).max
_U8_MAX = np.iinfo(np.uint8).max


def _as_flat_array(values: Any, name: str) -> np.ndarray:
    array = np.asarray(values)
    if array.ndim == 0:
        raise PreconditionError(f"{name} must be a 1-D buffer, got a scalar")
    if array.ndim != 1:
        raise PreconditionError(
            f"{name} must be a 1-D buffer, got shape {array.shape}"
        )
    return array


def as_f64_buffer(values: Any, name: str = "input") -> np.ndarray:
    """
    Copy a caller sequence into a contiguous float64 buffer.

    Parameters
    ----------
    values : Any
        Any 1-D sequence accepted by ``numpy.asarray``.
    name : str
        Argument name used in error messages.

    Returns
    -------
    np.ndarray
        A new, exclusively owned float64 array.
    """
    array = _as_flat_array(values, name)
    if array.dtype == np.bool_ or np.issubdtype(array.dtype, np.complexfloating):
        raise PreconditionError(
            f"{name} must hold real numbers, got dtype {array.dtype}"
        )
    try:
        return np.array(array, dtype=np.float64, copy=True, order="C")
    except (TypeError, ValueError) as exc:
        raise PreconditionError(f"{name} must hold real numbers: {exc}") from exc


def _as_unsigned(values: Any, name: str, dtype: type, upper: int) -> np.ndarray:
    if isinstance(values, (bytes, bytearray, memoryview)):
        if dtype is not np.uint8:
            raise PreconditionError(f"{name} must be a sequence of integers")
        return np.frombuffer(bytes(values), dtype=np.uint8).copy()
    array = _as_flat_array(values, name)
    if array.size == 0:
        return np.zeros(0, dtype=dtype)
    if np.issubdtype(array.dtype, np.floating):
        if not np.all(np.isfinite(array)) or not np.all(array == np.floor(array)):
            raise PreconditionError(f"{name} must hold integral values")
    elif not np.issubdtype(array.dtype, np.integer):
        raise PreconditionError(
            f"{name} must hold unsigned integers, got dtype {array.dtype}"
        )
    lo, hi = array.min(), array.max()
    if lo < 0 or hi > upper:
        raise PreconditionError(
            f"{name} values must lie in [0, {upper}], got range [{lo}, {hi}]"
        )
    return np.array(array, dtype=dtype, copy=True, order="C")


def as_u32_buffer(values: Any, name: str = "input") -> np.ndarray:
    """Copy a caller sequence into a uint32 buffer, validating the range."""
    return _as_unsigned(values, name, np.uint32, _U32_MAX)


def as_u8_buffer(values: Any, name: str = "input") -> np.ndarray:
    """Copy a caller sequence (or bytes) into a uint8 buffer."""
    return _as_unsigned(values, name, np.uint8, _U8_MAX)


def as_byte_string(data: str | bytes | bytearray | memoryview, name: str = "data") -> bytes:
    """
    Return an owned ``bytes`` copy of text (UTF-8 encoded) or bytes-like input.
    """
    if isinstance(data, str):
        return data.encode("utf-8")
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    if isinstance(data, np.ndarray):
        return as_u8_buffer(data, name).tobytes()
    raise PreconditionError(
        f"{name} must be str or bytes-like, got {type(data).__name__}"
    )


def require_length(buffer: np.ndarray, expected: int, name: str = "input") -> None:
    """Raise when a separately passed dimension disagrees with the buffer."""
    if buffer.shape[0] != expected:
        raise DimensionMismatchError(
            f"{name} has length {buffer.shape[0]}, expected {expected}"
        )


def require_nonempty(buffer: np.ndarray, name: str = "input") -> None:
    if buffer.shape[0] == 0:
        raise PreconditionError(f"{name} must not be empty")


def require_count(value: Any, name: str, minimum: int = 0) -> int:
    """Validate a scalar dimension argument and return it as ``int``."""
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise PreconditionError(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise PreconditionError(f"{name} must be at least {minimum}, got {value}")
    return int(value)


def new_output(length: int, dtype: type = np.float64) -> np.ndarray:
    """Allocate a fresh output buffer owned by the result."""
    return np.zeros(length, dtype=dtype)
