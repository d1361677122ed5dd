import math

import jax
import numpy as np
import pytest

from reduct_kernels.core.errors import DimensionMismatchError, PreconditionError
from reduct_kernels.ml import neural_network as nn
from reduct_kernels.ml.neural_network import Activation
from reduct_kernels.reduct_kernels import Config


@pytest.mark.parametrize("use_simd", [False, True])
def test_forward_relu(use_simd):
    Config().set_use_simd(use_simd)
    out = nn.neural_network_forward_f64([1.0, 1.0], [1.0, 2.0, 3.0, 4.0], [0.0, -10.0], "relu")
    assert np.allclose(out, [3.0, 0.0])


@pytest.mark.parametrize(
    "activation,expected",
    [
        (Activation.SIGMOID, 0.5),
        (Activation.TANH, 0.0),
        (Activation.RELU, 0.0),
        (Activation.LEAKY_RELU, 0.0),
    ],
)
def test_forward_zero_weights(activation, expected):
    out = nn.neural_network_forward_f64([1.0, 2.0], [0.0, 0.0], [0.0], activation)
    assert np.allclose(out, [expected])


def test_leaky_relu_slope():
    out = nn.neural_network_forward_f64([1.0], [-2.0], [0.0], "leaky_relu")
    assert np.allclose(out, [-0.02])


def test_forward_rejects_bad_shapes_and_activation():
    with pytest.raises(DimensionMismatchError):
        nn.neural_network_forward_f64([1.0, 2.0], [1.0, 2.0, 3.0], [0.0, 0.0], "relu")
    with pytest.raises(PreconditionError):
        nn.neural_network_forward_f64([1.0], [1.0], [0.0], "softmax")


@pytest.mark.parametrize("use_simd", [False, True])
def test_forward_multi_layer(use_simd):
    Config().set_use_simd(use_simd)
    out = nn.neural_network_forward_multi_layer_f64(
        [1.0, 2.0],
        [[1.0, 1.0, 1.0, -1.0], [2.0, 1.0]],
        [[0.0, 0.0], [0.5]],
        ["relu", "relu"],
    )
    # hidden = relu([3, -1]) = [3, 0]; output = relu(6 + 0.5)
    assert np.allclose(out, [6.5])


def test_forward_multi_layer_counts_must_agree():
    with pytest.raises(DimensionMismatchError):
        nn.neural_network_forward_multi_layer_f64([1.0], [[1.0]], [[0.0], [0.0]], ["relu"])


@pytest.mark.parametrize("use_simd", [False, True])
def test_backprop_single_step(use_simd):
    Config().set_use_simd(use_simd)
    weights = np.array([0.5])
    biases = np.array([0.0])
    result = nn.neural_network_backprop_f64([1.0], weights, biases, [1.0], 0.1, "relu")
    assert np.allclose(result.biases, [0.05])
    assert np.allclose(result.weights, [0.55])
    assert weights.tolist() == [0.5]
    assert biases.tolist() == [0.0]


def test_backprop_reduces_loss():
    inputs = [0.5, -0.25, 1.0]
    targets = [0.2, 0.9]
    weights = nn.neural_network_init_weights_xavier_f64(3, 2, key=jax.random.PRNGKey(0))
    biases = nn.neural_network_init_biases_zero_f64(2)
    before = nn.neural_network_mse_loss_f64(
        nn.neural_network_forward_f64(inputs, weights, biases, "sigmoid"), targets
    )
    for _ in range(50):
        step = nn.neural_network_backprop_f64(inputs, weights, biases, targets, 0.5, "sigmoid")
        weights, biases = step.weights, step.biases
    after = nn.neural_network_mse_loss_f64(
        nn.neural_network_forward_f64(inputs, weights, biases, "sigmoid"), targets
    )
    assert after < before


def test_backprop_target_length_must_match():
    with pytest.raises(DimensionMismatchError):
        nn.neural_network_backprop_f64([1.0], [1.0], [0.0], [1.0, 0.0], 0.1, "tanh")


def test_losses():
    assert nn.neural_network_mse_loss_f64([1.0, 2.0], [1.0, 4.0]) == 2.0
    assert math.isclose(nn.neural_network_binary_cross_entropy_loss_f64([0.5], [1.0]), math.log(2.0))
    assert nn.neural_network_mse_loss_f64([], []) == 0.0
    assert nn.neural_network_binary_cross_entropy_loss_f64([], []) == 0.0


def test_binary_cross_entropy_clamps_predictions():
    loss = nn.neural_network_binary_cross_entropy_loss_f64([0.0, 1.0], [1.0, 0.0])
    assert math.isfinite(loss)
    expected = -(math.log(1e-15) + math.log(1.0 - (1.0 - 1e-15))) / 2.0
    assert math.isclose(loss, expected, rel_tol=1e-12)


def test_xavier_initialization():
    weights = nn.neural_network_init_weights_xavier_f64(100, 100, key=jax.random.PRNGKey(7))
    assert weights.shape == (10000,)
    assert np.all(np.isfinite(weights))
    assert abs(float(np.mean(weights))) < 0.01
    assert math.isclose(float(np.std(weights)), 0.1, rel_tol=0.1)


def test_xavier_is_reproducible_with_seed():
    first = nn.neural_network_init_weights_xavier_f64(4, 3, key=jax.random.PRNGKey(1))
    second = nn.neural_network_init_weights_xavier_f64(4, 3, key=jax.random.PRNGKey(1))
    assert np.array_equal(first, second)
    Config().set_seed(12)
    third = nn.neural_network_init_weights_xavier_f64(4, 3)
    Config().set_seed(12)
    fourth = nn.neural_network_init_weights_xavier_f64(4, 3)
    assert np.array_equal(third, fourth)


def test_zero_biases():
    assert nn.neural_network_init_biases_zero_f64(3).tolist() == [0.0, 0.0, 0.0]
    with pytest.raises(PreconditionError):
        nn.neural_network_init_biases_zero_f64(0)
