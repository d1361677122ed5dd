"""
Radix-2 FFT, its inverse and direct linear convolution.

Complex values only live inside this module; callers see interleaved
``[re0, im0, re1, im1, ...]`` float64 buffers.
"""

from __future__ import annotations

import logging
import math
from typing import Any

import numpy as np

from reduct_kernels.core.buffers import as_f64_buffer, require_count, require_length
from reduct_kernels.core.dispatch import SIMD, active_path
from reduct_kernels.core.errors import PreconditionError
from reduct_kernels.core.scalar import convolve_direct

logger = logging.getLogger(__name__)


def _is_power_of_two(n: int) -> bool:
    return n >= 1 and (n & (n - 1)) == 0


def _fft_recursive(x: np.ndarray) -> np.ndarray:
    n = x.shape[0]
    if n == 1:
        return x.copy()
    even = _fft_recursive(x[0::2])
    odd = _fft_recursive(x[1::2])
    angle = -2.0 * math.pi * np.arange(n // 2) / n
    twiddle = np.cos(angle) + 1j * np.sin(angle)
    odd_term = odd * twiddle
    return np.concatenate((even + odd_term, even - odd_term))


def _interleave(spectrum: np.ndarray) -> np.ndarray:
    out = np.empty(2 * spectrum.shape[0], dtype=np.float64)
    out[0::2] = spectrum.real
    out[1::2] = spectrum.imag
    return out


def fft_f64(signal: Any) -> np.ndarray:
    """
    Discrete Fourier transform of a real signal.

    Parameters
    ----------
    signal : Any
        Real samples; the length must be a power of two.

    Returns
    -------
    np.ndarray
        ``2 * n`` floats, the real and imaginary part of each bin interleaved.

    Raises
    ------
    PreconditionError
        If the length is not a power of two.
    """
    buffer = as_f64_buffer(signal, "signal")
    n = buffer.shape[0]
    if not _is_power_of_two(n):
        raise PreconditionError(f"Signal length must be a power of 2, got {n}")
    logger.debug("FFT over %d samples", n)
    return _interleave(_fft_recursive(buffer.astype(np.complex128)))


def ifft_f64(spectrum: Any) -> np.ndarray:
    """
    Inverse of `fft_f64` over an interleaved spectrum.

    Uses ``ifft(X) = conj(fft(conj(X))) / n`` and returns the interleaved
    complex result; for the spectrum of a real signal the imaginary parts are
    zero up to rounding.
    """
    buffer = as_f64_buffer(spectrum, "spectrum")
    if buffer.shape[0] % 2 != 0:
        raise PreconditionError(
            f"Interleaved spectrum needs an even length, got {buffer.shape[0]}"
        )
    n = buffer.shape[0] // 2
    if not _is_power_of_two(n):
        raise PreconditionError(f"Spectrum length must be a power of 2, got {n}")
    bins = buffer[0::2] + 1j * buffer[1::2]
    return _interleave(np.conj(_fft_recursive(np.conj(bins))) / n)


def _convolve_rows(signal1: np.ndarray, signal2: np.ndarray) -> np.ndarray:
    n1, n2 = signal1.shape[0], signal2.shape[0]
    out = np.zeros(n1 + n2 - 1, dtype=np.float64)
    for i in range(n1):
        out[i : i + n2] += signal1[i] * signal2
    return out


def convolve_f64(signal1: Any, signal2: Any, n1: int, n2: int) -> np.ndarray:
    """
    Full linear convolution of two signals.

    Parameters
    ----------
    signal1, signal2 : Any
        Real samples.
    n1, n2 : int
        Lengths of the two signals; both must match the buffers and be
        at least 1.

    Returns
    -------
    np.ndarray
        ``n1 + n2 - 1`` samples.

    Notes
    -----
    Both execution paths accumulate each output sample over ascending
    indices of `signal1`, so they agree bit for bit.
    """
    n1 = require_count(n1, "n1", minimum=1)
    n2 = require_count(n2, "n2", minimum=1)
    s1 = as_f64_buffer(signal1, "signal1")
    s2 = as_f64_buffer(signal2, "signal2")
    require_length(s1, n1, "signal1")
    require_length(s2, n2, "signal2")
    path = active_path()
    logger.debug("Convolving %d x %d samples on %s path", n1, n2, path)
    if path == SIMD:
        return _convolve_rows(s1, s2)
    return convolve_direct(s1, s2)
