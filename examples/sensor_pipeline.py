"""
Sensor pipeline
---------------
Cleans a noisy, gappy sensor trace and summarizes it with the
reduct_kernels statistics: missing samples are interpolated, spikes are
flagged by z-score, the trace is smoothed with a moving average and a
linear trend is fitted. The cleaned and smoothed traces are plotted.
"""
from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

import matplotlib.pyplot as plt
import numpy as np

from reduct_kernels.logging import setup_logging
from reduct_kernels.ml.regression import (
    linear_regression_f64,
    linear_regression_predict_f64,
)
from reduct_kernels.reduct_kernels import Config
from reduct_kernels.stats.descriptive import (
    numeric_median_f64,
    numeric_quantiles_f64,
    numeric_std_dev_f64,
)
from reduct_kernels.stats.time_series import (
    numeric_autocorrelation_f64,
    numeric_detect_outliers_f64,
    numeric_interpolate_missing_f64,
    numeric_moving_average_f64,
)

SAMPLES = 512
WINDOW = 16


def build_trace(seed: int = 0) -> np.ndarray:
    """Linear drift plus a daily cycle, noise, a few spikes and gaps."""
    rng = np.random.default_rng(seed)
    t = np.arange(SAMPLES, dtype=np.float64)
    trace = 0.01 * t + np.sin(2 * np.pi * t / 64) + rng.normal(scale=0.2, size=SAMPLES)
    trace[rng.choice(SAMPLES, size=6, replace=False)] += 8.0
    trace[rng.choice(SAMPLES, size=20, replace=False)] = np.nan
    return trace


if __name__ == "__main__":
    setup_logging()
    Config().set_seed(0)
    raw = build_trace()
    filled = numeric_interpolate_missing_f64(raw)
    spikes = numeric_detect_outliers_f64(filled, 3.0)
    cleaned = filled.copy()
    cleaned[spikes] = np.nan
    cleaned = numeric_interpolate_missing_f64(cleaned)
    smooth = numeric_moving_average_f64(cleaned, WINDOW)

    t = np.arange(SAMPLES, dtype=np.float64)
    fit = linear_regression_f64(t, cleaned)
    q1, q3 = numeric_quantiles_f64(cleaned, [0.25, 0.75])
    print(f"missing samples   {int(np.isnan(raw).sum())}")
    print(f"flagged spikes    {int(spikes.sum())}")
    print(f"median            {numeric_median_f64(cleaned):.4f}")
    print(f"std dev           {numeric_std_dev_f64(cleaned):.4f}")
    print(f"IQR               {q3 - q1:.4f}")
    print(f"lag-64 autocorr   {numeric_autocorrelation_f64(cleaned, 64):.4f}")
    print(f"trend             {fit.slope:.5f} * t + {fit.intercept:.4f} (r2={fit.r_squared:.3f})")

    plt.plot(t, cleaned, ".", markersize=3, label="cleaned")
    plt.plot(t[WINDOW - 1 :], smooth, label=f"moving average ({WINDOW})")
    plt.plot(t, linear_regression_predict_f64(t, fit.slope, fit.intercept), label="trend")
    plt.xlabel("Sample")
    plt.ylabel("Reading")
    plt.title("Sensor trace")
    plt.legend()
    plt.grid(True)
    plt.tight_layout()
    plt.show()
