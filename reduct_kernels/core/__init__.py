"""
Infrastructure shared by every kernel: buffer adaptation, batch scheduling,
scratch arenas, PRNG key threading and the vectorized/scalar dual path.
"""

from reduct_kernels.core import (
    batching,
    buffers,
    dispatch,
    errors,
    kernels,
    reductions,
    rng,
    scalar,
)

__all__ = [
    "batching",
    "buffers",
    "dispatch",
    "errors",
    "kernels",
    "reductions",
    "rng",
    "scalar",
]
