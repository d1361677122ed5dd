"""
Batch scheduling and per-batch scratch allocation.

`BatchPlan` splits a buffer into `(offset, length)` chunks; it is purely an
execution-order device and carries no semantic weight. `ScratchArena` scopes
temporary arrays to one batch and releases them together on exit.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, List, Tuple

import numpy as np

from reduct_kernels.reduct_kernels import Config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchPlan:
    length: int
    chunk_size: int
    batches: Tuple[Tuple[int, int], ...]

    def __iter__(self) -> Iterator[Tuple[int, int]]:
        return iter(self.batches)

    def __len__(self) -> int:
        return len(self.batches)


def build_plan(length: int, chunk_size: int | None = None) -> BatchPlan:
    """
    Cover `[0, length)` with consecutive chunks of at most `chunk_size`.

    Parameters
    ----------
    length : int
        Number of elements in the buffer.
    chunk_size : int | None
        Maximum elements per batch; defaults to ``Config().batch_size``.

    Returns
    -------
    BatchPlan
        Plan whose batches have no gaps or overlaps.
    """
    if chunk_size is None:
        chunk_size = Config().batch_size
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    if length < 0:
        raise ValueError(f"length must be non-negative, got {length}")
    batches = tuple(
        (offset, min(chunk_size, length - offset))
        for offset in range(0, length, chunk_size)
    )
    return BatchPlan(length=length, chunk_size=chunk_size, batches=batches)


class ScratchArena:
    """
    Short-lived allocation scope for one batch.

    Example:
        with ScratchArena() as arena:
            values = arena.alloc(128)
            ...
    Arrays handed out by the arena must not escape the `with` block.
    """

    def __init__(self) -> None:
        self._blocks: List[np.ndarray] = []
        self._released = False

    def __enter__(self) -> "ScratchArena":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    @property
    def allocated(self) -> int:
        return len(self._blocks)

    @property
    def released(self) -> bool:
        return self._released

    def _check_live(self) -> None:
        if self._released:
            raise RuntimeError("ScratchArena used after release")

    def alloc(
        self, length: int, dtype: type = np.float64, fill: float = 0
    ) -> np.ndarray:
        self._check_live()
        block = np.full(length, fill, dtype=dtype)
        self._blocks.append(block)
        return block

    def load(
        self,
        buffer: np.ndarray,
        offset: int,
        length: int,
        pad_to: int | None = None,
    ) -> Tuple[np.ndarray, np.ndarray]:
        """
        Copy `buffer[offset:offset + length]` into arena storage.

        When `pad_to` is given the copy is zero-padded to that width so lane
        kernels see a static shape. Returns (values, mask) where mask marks
        the real elements.
        """
        width = length if pad_to is None else max(pad_to, length)
        values = self.alloc(width, dtype=buffer.dtype)
        values[:length] = buffer[offset : offset + length]
        mask = self.alloc(width, dtype=np.bool_, fill=False)
        mask[:length] = True
        return values, mask

    def release(self) -> None:
        if not self._released:
            self._blocks.clear()
            self._released = True


def iter_batches(
    buffer: np.ndarray, chunk_size: int | None = None
) -> Iterator[Tuple[int, np.ndarray]]:
    """
    Yield `(offset, values)` for each batch, each loaded through its own arena.
    """
    plan = build_plan(buffer.shape[0], chunk_size)
    logger.debug(
        "Streaming %d elements in %d batches of %d",
        plan.length,
        len(plan),
        plan.chunk_size,
    )
    for offset, length in plan:
        with ScratchArena() as arena:
            values, _ = arena.load(buffer, offset, length)
            yield offset, values
