import numpy as np
import pytest

from reduct_kernels.core.errors import DimensionMismatchError
from reduct_kernels.ml.matrix import matrix_multiply_f64
from reduct_kernels.reduct_kernels import Config


@pytest.mark.parametrize("use_simd", [False, True])
def test_square_product(use_simd):
    Config().set_use_simd(use_simd)
    out = matrix_multiply_f64([1.0, 2.0, 3.0, 4.0], [5.0, 6.0, 7.0, 8.0], 2, 2, 2, 2)
    assert out.tolist() == [19.0, 22.0, 43.0, 50.0]


@pytest.mark.parametrize("use_simd", [False, True])
def test_rectangular_product_matches_numpy(use_simd):
    Config().set_use_simd(use_simd)
    rng = np.random.default_rng(3)
    a = rng.normal(size=(3, 5))
    b = rng.normal(size=(5, 2))
    out = matrix_multiply_f64(a.reshape(-1), b.reshape(-1), 3, 5, 5, 2)
    assert out.shape == (6,)
    assert np.allclose(out, (a @ b).reshape(-1))


def test_result_is_writable():
    out = matrix_multiply_f64([1.0], [2.0], 1, 1, 1, 1)
    out[0] = 0.0
    assert out.tolist() == [0.0]


def test_dimension_errors():
    with pytest.raises(DimensionMismatchError):
        matrix_multiply_f64([1.0, 2.0], [1.0, 2.0], 1, 2, 1, 2)
    with pytest.raises(DimensionMismatchError):
        matrix_multiply_f64([1.0, 2.0, 3.0], [1.0, 2.0], 1, 2, 2, 1)
