"""
Dense matrix multiplication over flat row-major buffers.
"""

from __future__ import annotations

import logging
from typing import Any

import numpy as np

from reduct_kernels.core.buffers import as_f64_buffer, require_count, require_length
from reduct_kernels.core.dispatch import select_kernel
from reduct_kernels.core.errors import DimensionMismatchError

logger = logging.getLogger(__name__)


def matrix_multiply_f64(
    a: Any, b: Any, a_rows: int, a_cols: int, b_rows: int, b_cols: int
) -> np.ndarray:
    """
    Multiply an ``a_rows x a_cols`` matrix by a ``b_rows x b_cols`` matrix.

    Parameters
    ----------
    a, b : Any
        Flat row-major matrix entries.
    a_rows, a_cols, b_rows, b_cols : int
        Matrix dimensions; ``a_cols`` must equal ``b_rows`` and each buffer
        must hold exactly rows x cols values.

    Returns
    -------
    np.ndarray
        Flat row-major product with ``a_rows * b_cols`` values.
    """
    a_rows = require_count(a_rows, "a_rows")
    a_cols = require_count(a_cols, "a_cols")
    b_rows = require_count(b_rows, "b_rows")
    b_cols = require_count(b_cols, "b_cols")
    if a_cols != b_rows:
        raise DimensionMismatchError(
            "Matrix dimensions incompatible for multiplication: "
            f"({a_rows}, {a_cols}) * ({b_rows}, {b_cols})"
        )
    ma = as_f64_buffer(a, "a")
    mb = as_f64_buffer(b, "b")
    require_length(ma, a_rows * a_cols, "a")
    require_length(mb, b_rows * b_cols, "b")
    logger.debug("Multiplying (%d, %d) x (%d, %d)", a_rows, a_cols, b_rows, b_cols)
    product = select_kernel("matmul")(
        ma.reshape((a_rows, a_cols)), mb.reshape((b_rows, b_cols))
    )
    return np.array(product, dtype=np.float64).reshape(-1)
