import gc
import time

import numpy as np
import psutil
from memory_profiler import profile

from reduct_kernels.reduct_kernels import Session
from reduct_kernels.stats.descriptive import numeric_variance_f64
from reduct_kernels.stats.numeric import numeric_map_f64

process = psutil.Process()
SIZE = 2_000_000
BATCH_SIZES = (1024, 16384, 262144)


@profile
def run_variance(data, batch_size):
    with Session(batch_size=batch_size):
        return numeric_variance_f64(data)


@profile
def run_map(data):
    return numeric_map_f64(data[:200_000], lambda value, index: value * 2.0)


def main():
    data = np.random.default_rng(0).normal(size=SIZE)
    for batch_size in BATCH_SIZES:
        before = process.memory_info().rss
        start = time.time()
        run_variance(data, batch_size)
        elapsed = time.time() - start
        after = process.memory_info().rss
        print(
            f"batch {batch_size:>7d}: {elapsed:.3f}s, "
            f"rss delta {(after - before) / 2**20:.1f} MiB"
        )
        gc.collect()
    run_map(data)


main()
