import numpy as np
import pytest

from reduct_kernels.core.errors import DimensionMismatchError, PreconditionError
from reduct_kernels.reduct_kernels import Config
from reduct_kernels.signal import transforms


def _complex(interleaved):
    return interleaved[0::2] + 1j * interleaved[1::2]


def test_fft_of_impulse_is_flat():
    out = transforms.fft_f64([1.0, 0.0, 0.0, 0.0])
    assert np.allclose(out, [1.0, 0.0] * 4)


def test_fft_matches_numpy():
    signal = np.random.default_rng(5).normal(size=16)
    out = transforms.fft_f64(signal)
    assert out.shape == (32,)
    assert np.allclose(_complex(out), np.fft.fft(signal))


def test_fft_single_sample():
    assert transforms.fft_f64([3.5]).tolist() == [3.5, 0.0]


@pytest.mark.parametrize("n", [0, 3, 6, 12])
def test_fft_rejects_non_power_of_two(n):
    with pytest.raises(PreconditionError):
        transforms.fft_f64(np.ones(n))


def test_ifft_round_trip():
    signal = np.random.default_rng(9).normal(size=8)
    restored = transforms.ifft_f64(transforms.fft_f64(signal))
    assert np.allclose(restored[0::2], signal)
    assert np.allclose(restored[1::2], 0.0)


def test_ifft_rejects_odd_or_bad_lengths():
    with pytest.raises(PreconditionError):
        transforms.ifft_f64([1.0, 0.0, 2.0])
    with pytest.raises(PreconditionError):
        transforms.ifft_f64(np.zeros(6))


@pytest.mark.parametrize("use_simd", [False, True])
def test_convolve(use_simd):
    Config().set_use_simd(use_simd)
    out = transforms.convolve_f64([1.0, 2.0, 3.0], [0.0, 1.0, 0.5], 3, 3)
    assert np.allclose(out, [0.0, 1.0, 2.5, 4.0, 1.5])


def test_convolve_paths_agree_exactly_on_integers():
    rng = np.random.default_rng(1)
    s1 = rng.integers(-50, 50, size=37).astype(np.float64)
    s2 = rng.integers(-50, 50, size=11).astype(np.float64)
    Config().set_use_simd(True)
    vectorized = transforms.convolve_f64(s1, s2, 37, 11)
    Config().set_use_simd(False)
    scalar = transforms.convolve_f64(s1, s2, 37, 11)
    assert np.array_equal(vectorized, scalar)
    assert np.array_equal(scalar, np.convolve(s1, s2))


def test_convolve_paths_agree_on_reals():
    rng = np.random.default_rng(2)
    s1 = rng.normal(size=20)
    s2 = rng.normal(size=7)
    Config().set_use_simd(True)
    vectorized = transforms.convolve_f64(s1, s2, 20, 7)
    Config().set_use_simd(False)
    scalar = transforms.convolve_f64(s1, s2, 20, 7)
    assert np.array_equal(vectorized, scalar)


def test_convolve_validates_dimensions():
    with pytest.raises(DimensionMismatchError):
        transforms.convolve_f64([1.0, 2.0], [1.0], 3, 1)
    with pytest.raises(PreconditionError):
        transforms.convolve_f64([], [1.0], 0, 1)
