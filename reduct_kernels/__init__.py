"""Top-level reduct_kernels helpers."""

# The vectorized path computes in float64; this needs to run before any
# module creates jax arrays.

import jax

jax.config.update("jax_enable_x64", True)

from reduct_kernels import (  # noqa: E402
    algorithms,
    compression,
    constants,
    core,
    ml,
    signal,
    stats,
    trie,
)
from reduct_kernels.core.errors import (  # noqa: E402
    DecodeError,
    DegenerateInputError,
    DimensionMismatchError,
    KernelError,
    PreconditionError,
)
from reduct_kernels.reduct_kernels import Config, Session  # noqa: E402

__all__ = [
    "algorithms",
    "compression",
    "constants",
    "core",
    "ml",
    "signal",
    "stats",
    "trie",
    "Config",
    "Session",
    "KernelError",
    "PreconditionError",
    "DimensionMismatchError",
    "DegenerateInputError",
    "DecodeError",
]
