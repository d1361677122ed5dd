import random
import sys
from typing import Any

import jax
import jax.numpy as jnp

from reduct_kernels.constants import DEFAULT_BATCH_SIZE


class Config:
    _instance = None

    def __new__(cls, *args: Any, **kwargs: Any) -> "Config":
        if cls._instance is None:
            cls._instance = super(Config, cls).__new__(cls, *args, **kwargs)
        return cls._instance

    def __init__(self) -> None:
        if not hasattr(self, "_initialized"):
            self._initialized = True  # Prevents reinitialization
            self._random_seed = random.randint(0, sys.maxsize)
            self._key = jax.random.PRNGKey(self._random_seed)
            self._use_simd = True
            self._batch_size = DEFAULT_BATCH_SIZE

    def set_seed(self, seed: int) -> None:
        """
        For reproducability one can set a seed for the randomized kernels
        (k-means seeding, Xavier initialization)

        Parameters
        ----------
        seed: int
            Seed to be used by random processes
        """
        self._random_seed = seed
        self._key = jax.random.PRNGKey(seed)

    @property
    def random_seed(self) -> int:
        return self._random_seed

    @property
    def random_key(self) -> jnp.ndarray:
        """
        Splits the current key and returns a new one for random operations
        """
        key, self._key = jax.random.split(self._key)
        return key

    @property
    def use_simd(self) -> bool:
        return self._use_simd

    def set_use_simd(self, use_simd: bool) -> None:
        self._use_simd = bool(use_simd)

    @property
    def batch_size(self) -> int:
        return self._batch_size

    def set_batch_size(self, batch_size: int) -> None:
        """
        Sets the default chunk size used by the batch scheduler

        Parameters
        ----------
        batch_size: int
            Number of elements per batch, must be positive
        """
        if isinstance(batch_size, bool) or int(batch_size) != batch_size:
            raise ValueError(f"batch_size must be an integer, got {batch_size!r}")
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        self._batch_size = int(batch_size)


class Session:
    """
    Lightweight context manager to scope Config settings per run.

    Example:
        with Session(seed=0, use_simd=False):
            ...
    Restores previous Config values on exit so tests/runs stay isolated.
    """

    def __init__(
        self,
        *,
        seed: int | None = None,
        use_simd: bool | None = None,
        batch_size: int | None = None,
    ) -> None:
        cfg = Config()
        self._prev = {
            "seed": cfg.random_seed,
            "key": cfg._key,  # type: ignore[attr-defined]
            "use_simd": cfg.use_simd,
            "batch_size": cfg.batch_size,
        }
        self._seed = seed
        self._use_simd = use_simd
        self._batch_size = batch_size
        self._cfg = cfg

    def __enter__(self) -> "Config":
        if self._seed is not None:
            self._cfg.set_seed(self._seed)
        if self._use_simd is not None:
            self._cfg.set_use_simd(self._use_simd)
        if self._batch_size is not None:
            self._cfg.set_batch_size(self._batch_size)
        return self._cfg

    def __exit__(self, exc_type, exc, tb) -> None:
        self._cfg._random_seed = self._prev["seed"]  # type: ignore[attr-defined]
        self._cfg._key = self._prev["key"]  # type: ignore[attr-defined]
        self._cfg.set_use_simd(self._prev["use_simd"])
        self._cfg.set_batch_size(self._prev["batch_size"])
