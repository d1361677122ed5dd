"""
Benchmarks: scalar (numba) path vs vectorized (jax) path.

Scenarios:
1) Plain sum over a large buffer.
2) Variance, which needs a batched mean and batched centered powers.
3) Pearson correlation over paired buffers.
4) Linear regression (cross moments, affine map and squared error).

Each scenario is timed with `use_simd` off and on, averaged over `RUNS`
calls after a warm-up that triggers compilation, and the timings and
speedups are plotted.
"""

from __future__ import annotations

import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Tuple

os.environ.setdefault("JAX_PLATFORMS", "cpu")

import matplotlib.pyplot as plt
import numpy as np

# Ensure we import the in-repo version
import sys

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from reduct_kernels.logging import setup_logging
from reduct_kernels.ml.regression import linear_regression_f64
from reduct_kernels.reduct_kernels import Session
from reduct_kernels.stats.descriptive import (
    numeric_correlation_f64,
    numeric_variance_f64,
)
from reduct_kernels.stats.numeric import numeric_sum_f64

RUNS = 20
SIZE = 1_000_000
SAVE_DIR = Path("benchmarks")


def _time_runs(fn: Callable[[], object], runs: int = RUNS) -> float:
    """Run fn `runs` times and return average duration in seconds."""
    # Warm-up
    fn()
    start = time.perf_counter()
    for _ in range(runs):
        fn()
    duration = time.perf_counter() - start
    return duration / runs


def _scenarios(x: np.ndarray, y: np.ndarray) -> Tuple[Tuple[str, Callable], ...]:
    return (
        ("sum", lambda: numeric_sum_f64(x)),
        ("variance", lambda: numeric_variance_f64(x)),
        ("correlation", lambda: numeric_correlation_f64(x, y)),
        ("regression", lambda: linear_regression_f64(x, y)),
    )


@dataclass
class BenchmarkResult:
    label: str
    scalar_avg: float
    simd_avg: float

    @property
    def speedup(self) -> float:
        return self.scalar_avg / self.simd_avg if self.simd_avg > 0 else 0.0


def run_benchmarks(batch_size: int) -> Tuple[BenchmarkResult, ...]:
    rng = np.random.default_rng(0)
    x = rng.normal(size=SIZE)
    y = 0.5 * x + rng.normal(scale=0.1, size=SIZE)
    results = []
    for label, fn in _scenarios(x, y):
        with Session(use_simd=False, batch_size=batch_size):
            scalar_avg = _time_runs(fn)
        with Session(use_simd=True, batch_size=batch_size):
            simd_avg = _time_runs(fn)
        results.append(BenchmarkResult(label, scalar_avg, simd_avg))
    return tuple(results)


def plot_results(results: Tuple[BenchmarkResult, ...]) -> None:
    labels = [r.label for r in results]
    scalar = [r.scalar_avg for r in results]
    simd = [r.simd_avg for r in results]
    speedups = [r.speedup for r in results]

    x = np.arange(len(labels))
    width = 0.35

    fig, axes = plt.subplots(1, 2, figsize=(12, 5))

    ax0 = axes[0]
    ax0.bar(x - width / 2, scalar, width, label="scalar")
    ax0.bar(x + width / 2, simd, width, label="vectorized")
    ax0.set_ylabel("Avg runtime (s)")
    ax0.set_xticks(x)
    ax0.set_xticklabels(labels, rotation=10)
    ax0.legend()
    ax0.set_title(f"Average of {RUNS} runs over {SIZE} elements")

    ax1 = axes[1]
    ax1.bar(labels, speedups, color="#4caf50")
    ax1.set_ylabel("Speedup (scalar / vectorized)")
    ax1.set_title("Speedup")
    for idx, val in enumerate(speedups):
        ax1.text(idx, val + 0.02, f"{val:.2f}x", ha="center", va="bottom")

    fig.tight_layout()
    SAVE_DIR.mkdir(parents=True, exist_ok=True)
    out_path = SAVE_DIR / "simd_vs_scalar.png"
    plt.savefig(out_path, dpi=180)
    print(f"Saved plot to {out_path}")


def main() -> None:
    setup_logging()
    results = run_benchmarks(batch_size=65536)
    for r in results:
        print(
            f"{r.label:>12}: scalar {r.scalar_avg:.4f}s, "
            f"vectorized {r.simd_avg:.4f}s, speedup {r.speedup:.2f}x"
        )
    plot_results(results)


if __name__ == "__main__":
    main()
