"""
Scalar reference kernels compiled with numba.

Each function mirrors one lane kernel in `reduct_kernels.core.kernels` but
walks the exact batch element by element, so it needs neither padding nor a
mask.
"""

import numpy as np
from numba import njit


@njit
def scalar_sum(values):
    total = 0.0
    for i in range(values.shape[0]):
        total += values[i]
    return total


@njit
def scalar_centered_powers(values, mean):
    s2 = 0.0
    s3 = 0.0
    s4 = 0.0
    for i in range(values.shape[0]):
        d = values[i] - mean
        d2 = d * d
        s2 += d2
        s3 += d2 * d
        s4 += d2 * d2
    return s2, s3, s4


@njit
def scalar_cross(x, y, mean_x, mean_y):
    sxy = 0.0
    sxx = 0.0
    syy = 0.0
    for i in range(x.shape[0]):
        dx = x[i] - mean_x
        dy = y[i] - mean_y
        sxy += dx * dy
        sxx += dx * dx
        syy += dy * dy
    return sxy, sxx, syy


@njit
def scalar_squared_error(predictions, targets):
    total = 0.0
    for i in range(predictions.shape[0]):
        diff = predictions[i] - targets[i]
        total += diff * diff
    return total


@njit
def scalar_affine(values, slope, intercept):
    out = np.empty(values.shape[0], dtype=np.float64)
    for i in range(values.shape[0]):
        out[i] = slope * values[i] + intercept
    return out


@njit
def scalar_dense_forward(weights, inputs, biases):
    n_out = biases.shape[0]
    n_in = inputs.shape[0]
    out = np.empty(n_out, dtype=np.float64)
    for o in range(n_out):
        acc = biases[o]
        for f in range(n_in):
            acc += weights[o, f] * inputs[f]
        out[o] = acc
    return out


@njit
def convolve_direct(signal1, signal2):
    """
    Full linear convolution as a double loop, outer index over `signal1`.
    """
    n1 = signal1.shape[0]
    n2 = signal2.shape[0]
    out = np.zeros(n1 + n2 - 1, dtype=np.float64)
    for i in range(n1):
        for j in range(n2):
            out[i + j] += signal1[i] * signal2[j]
    return out


@njit
def scalar_matmul(a, b):
    rows = a.shape[0]
    inner = a.shape[1]
    cols = b.shape[1]
    out = np.zeros((rows, cols), dtype=np.float64)
    for i in range(rows):
        for k in range(inner):
            a_ik = a[i, k]
            for j in range(cols):
                out[i, j] += a_ik * b[k, j]
    return out
