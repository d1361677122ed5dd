import math

import numpy as np
import pytest

from reduct_kernels.core.errors import PreconditionError
from reduct_kernels.reduct_kernels import Config
from reduct_kernels.stats import time_series as ts


def test_moving_average():
    out = ts.numeric_moving_average_f64([1.0, 2.0, 3.0, 4.0, 5.0], 3)
    assert np.allclose(out, [2.0, 3.0, 4.0])
    full = ts.numeric_moving_average_f64([1.0, 2.0, 3.0], 3)
    assert np.allclose(full, [2.0])


@pytest.mark.parametrize("window", [0, 4, -1])
def test_moving_average_rejects_bad_window(window):
    with pytest.raises(PreconditionError):
        ts.numeric_moving_average_f64([1.0, 2.0, 3.0], window)


def test_weighted_moving_average():
    out = ts.numeric_weighted_moving_average_f64([1.0, 2.0, 3.0], 2)
    assert np.allclose(out, [5.0 / 3.0, 8.0 / 3.0])
    with pytest.raises(PreconditionError):
        ts.numeric_weighted_moving_average_f64([1.0], 2)


def test_exponential_moving_average():
    out = ts.numeric_exponential_moving_average_f64([1.0, 2.0, 3.0], 0.5)
    assert np.allclose(out, [1.0, 1.5, 2.25])
    assert np.allclose(ts.numeric_exponential_moving_average_f64([4.0, 9.0], 1.0), [4.0, 9.0])
    assert ts.numeric_exponential_moving_average_f64([], 0.3).shape == (0,)


@pytest.mark.parametrize("alpha", [0.0, -0.1, 1.5])
def test_exponential_moving_average_rejects_alpha(alpha):
    with pytest.raises(PreconditionError):
        ts.numeric_exponential_moving_average_f64([1.0, 2.0], alpha)


@pytest.mark.parametrize("use_simd", [False, True])
def test_detect_outliers(use_simd):
    Config().set_use_simd(use_simd)
    data = [1.0] * 9 + [100.0]
    flags = ts.numeric_detect_outliers_f64(data, 2.0)
    assert flags.dtype == np.bool_
    assert flags.tolist() == [False] * 9 + [True]


def test_detect_outliers_edge_cases():
    assert not ts.numeric_detect_outliers_f64([3.0, 3.0, 3.0], 1.0).any()
    assert ts.numeric_detect_outliers_f64([], 1.0).shape == (0,)
    with pytest.raises(PreconditionError):
        ts.numeric_detect_outliers_f64([1.0, 2.0], 0.0)


def test_interpolate_missing():
    nan = math.nan
    out = ts.numeric_interpolate_missing_f64([nan, 1.0, nan, 3.0, nan, nan])
    assert np.allclose(out, [1.0, 1.0, 2.0, 3.0, 3.0, 3.0])


def test_interpolate_missing_long_gap_and_no_gaps():
    nan = math.nan
    out = ts.numeric_interpolate_missing_f64([0.0, nan, nan, nan, 4.0])
    assert np.allclose(out, [0.0, 1.0, 2.0, 3.0, 4.0])
    assert ts.numeric_interpolate_missing_f64([1.0, 2.0]).tolist() == [1.0, 2.0]


def test_interpolate_all_missing_is_unchanged():
    out = ts.numeric_interpolate_missing_f64([math.nan, math.nan])
    assert np.isnan(out).all()


@pytest.mark.parametrize("use_simd", [False, True])
def test_autocorrelation(use_simd):
    Config().set_use_simd(use_simd)
    data = [1.0, 2.0, 3.0, 4.0]
    assert math.isclose(ts.numeric_autocorrelation_f64(data, 1), 0.25)
    assert math.isclose(ts.numeric_autocorrelation_f64(data, 0), 1.0)


def test_autocorrelation_edge_cases():
    assert math.isnan(ts.numeric_autocorrelation_f64([1.0, 2.0], 2))
    assert ts.numeric_autocorrelation_f64([5.0, 5.0, 5.0], 1) == 0.0
    with pytest.raises(PreconditionError):
        ts.numeric_autocorrelation_f64([1.0, 2.0], -1)
