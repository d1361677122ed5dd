import math

import numpy as np
import pytest

from reduct_kernels.reduct_kernels import Config
from reduct_kernels.stats import numeric


@pytest.mark.parametrize("use_simd", [False, True])
def test_sum_and_average(use_simd):
    Config().set_use_simd(use_simd)
    data = [1.0, 2.0, 3.0, 4.0, 5.0]
    assert numeric.numeric_sum_f64(data) == 15.0
    assert numeric.numeric_average_f64(data) == 3.0
    assert numeric.numeric_mean_f64 is numeric.numeric_average_f64


@pytest.mark.parametrize("use_simd", [False, True])
def test_sum_spanning_many_batches(use_simd):
    Config().set_use_simd(use_simd)
    Config().set_batch_size(16)
    data = np.arange(1, 1001, dtype=np.float64)
    assert numeric.numeric_sum_f64(data) == 500500.0


def test_empty_aggregates():
    assert numeric.numeric_sum_f64([]) == 0.0
    assert math.isnan(numeric.numeric_average_f64([]))
    assert math.isnan(numeric.numeric_min_f64([]))
    assert math.isnan(numeric.numeric_max_f64([]))


def test_min_max():
    data = [3.0, -7.5, 12.0, 0.0]
    assert numeric.numeric_min_f64(data) == -7.5
    assert numeric.numeric_max_f64(data) == 12.0


def test_map_passes_global_index():
    data = np.zeros(2500)
    out = numeric.numeric_map_f64(data, lambda v, i: v + i)
    assert np.array_equal(out, np.arange(2500, dtype=np.float64))


def test_filter_keeps_order():
    out = numeric.numeric_filter_f64([1.0, 6.0, 2.0, 8.0], lambda v, i: v > 3.0)
    assert out.tolist() == [6.0, 8.0]


def test_filter_can_use_index():
    out = numeric.numeric_filter_f64([10.0, 20.0, 30.0, 40.0], lambda v, i: i % 2 == 0)
    assert out.tolist() == [10.0, 30.0]


def test_reduce_left_fold():
    out = numeric.numeric_reduce_f64([1.0, 2.0, 3.0], lambda acc, v, i: acc * 10 + v, 0.0)
    assert out == 123.0


def test_reduce_empty_returns_initial():
    sentinel = object()
    assert numeric.numeric_reduce_f64([], lambda acc, v, i: acc, sentinel) is sentinel


def test_map_filter_filters_mapped_values():
    out = numeric.numeric_map_filter_f64(
        [1.0, 2.0, 3.0, 4.0], lambda v, i: v * v, lambda v, i: v > 5.0
    )
    assert out.tolist() == [9.0, 16.0]


def test_callback_errors_propagate():
    def boom(v, i):
        raise ZeroDivisionError("callback failed")

    with pytest.raises(ZeroDivisionError):
        numeric.numeric_map_f64([1.0], boom)


def test_map_reduce_folds_mapped_values():
    out = numeric.numeric_map_reduce_f64(
        [1.0, 2.0, 3.0], lambda v, i: v * v, lambda acc, v, i: acc + v, 0.0
    )
    assert out == 14.0


def test_filter_reduce_skips_rejected_values():
    out = numeric.numeric_filter_reduce_f64(
        [1.0, 2.0, 3.0], lambda v, i: v > 1.0, lambda acc, v, i: acc + v, 0.0
    )
    assert out == 5.0


def test_map_filter_reduce_filters_mapped_values():
    out = numeric.numeric_map_filter_reduce_f64(
        [1.0, 2.0, 3.0],
        lambda v, i: v * v,
        lambda v, i: v > 3.0,
        lambda acc, v, i: acc + v,
        0.0,
    )
    assert out == 13.0


def test_fused_reducers_on_empty_input_return_initial():
    sentinel = object()

    def keep(acc, v, i):
        return acc

    assert numeric.numeric_map_reduce_f64([], lambda v, i: v, keep, sentinel) is sentinel
    assert numeric.numeric_filter_reduce_f64([], lambda v, i: True, keep, sentinel) is sentinel
    assert (
        numeric.numeric_map_filter_reduce_f64(
            [], lambda v, i: v, lambda v, i: True, keep, sentinel
        )
        is sentinel
    )


def test_fused_reducers_pass_global_index():
    data = np.zeros(2500)
    indices = numeric.numeric_map_reduce_f64(
        data, lambda v, i: v + i, lambda acc, v, i: acc + [(v, i)], []
    )
    assert indices == [(float(i), i) for i in range(2500)]
    odd_total = numeric.numeric_map_filter_reduce_f64(
        data,
        lambda v, i: v + i,
        lambda v, i: i % 2 == 1,
        lambda acc, v, i: acc + v,
        0.0,
    )
    assert odd_total == float(sum(range(1, 2500, 2)))
