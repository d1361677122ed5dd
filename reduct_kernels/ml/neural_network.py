"""
Dense-layer primitives: activations, forward passes, a single-layer gradient
step, losses and weight initialization.

Weights are flat, row-major ``(output, feature)``: the weight connecting
feature ``f`` to output ``o`` sits at ``o * features + f``.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Sequence

import jax
import jax.numpy as jnp
import numpy as np

from reduct_kernels.constants import BCE_EPSILON, LEAKY_RELU_SLOPE
from reduct_kernels.core.buffers import (
    as_f64_buffer,
    require_count,
    require_length,
    require_nonempty,
)
from reduct_kernels.core.dispatch import select_kernel
from reduct_kernels.core.errors import DimensionMismatchError, PreconditionError
from reduct_kernels.core.reductions import batched_squared_error
from reduct_kernels.core.rng import borrow_key, resolve_key

logger = logging.getLogger(__name__)


class Activation(Enum):
    SIGMOID = "sigmoid"
    RELU = "relu"
    TANH = "tanh"
    LEAKY_RELU = "leaky_relu"

    @classmethod
    def parse(cls, value: "Activation | str") -> "Activation":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise PreconditionError(
                f"Invalid activation function {value!r}"
            ) from None


@dataclass(frozen=True)
class BackpropResult:
    weights: np.ndarray
    biases: np.ndarray


def _activate(z: np.ndarray, activation: Activation) -> np.ndarray:
    if activation is Activation.SIGMOID:
        return 1.0 / (1.0 + np.exp(-z))
    if activation is Activation.RELU:
        return np.where(z > 0.0, z, 0.0)
    if activation is Activation.TANH:
        return np.tanh(z)
    return np.where(z > 0.0, z, LEAKY_RELU_SLOPE * z)


def _derivative(
    z: np.ndarray, outputs: np.ndarray, activation: Activation
) -> np.ndarray:
    if activation is Activation.SIGMOID:
        return outputs * (1.0 - outputs)
    if activation is Activation.RELU:
        return np.where(z > 0.0, 1.0, 0.0)
    if activation is Activation.TANH:
        return 1.0 - outputs * outputs
    return np.where(z > 0.0, 1.0, LEAKY_RELU_SLOPE)


def _layer(inputs: Any, weights: Any, biases: Any):
    x = as_f64_buffer(inputs, "inputs")
    w = as_f64_buffer(weights, "weights")
    b = as_f64_buffer(biases, "biases")
    require_nonempty(x, "inputs")
    require_nonempty(b, "biases")
    if w.shape[0] != x.shape[0] * b.shape[0]:
        raise DimensionMismatchError(
            f"weights has length {w.shape[0]}, expected "
            f"{x.shape[0]} inputs x {b.shape[0]} outputs = {x.shape[0] * b.shape[0]}"
        )
    return x, w.reshape((b.shape[0], x.shape[0])), b


def _pre_activation(x: np.ndarray, w: np.ndarray, b: np.ndarray) -> np.ndarray:
    return np.array(select_kernel("dense_forward")(w, x, b), dtype=np.float64)


def neural_network_forward_f64(
    inputs: Any, weights: Any, biases: Any, activation: Activation | str
) -> np.ndarray:
    """
    Forward pass of one dense layer.

    Parameters
    ----------
    inputs : Any
        Feature vector.
    weights : Any
        Flat row-major weights, ``len(inputs) * len(biases)`` values.
    biases : Any
        One bias per output.
    activation : Activation | str
        Activation applied to every pre-activation.

    Returns
    -------
    np.ndarray
        ``len(biases)`` activated outputs.
    """
    activation = Activation.parse(activation)
    x, w, b = _layer(inputs, weights, biases)
    return _activate(_pre_activation(x, w, b), activation)


def neural_network_forward_multi_layer_f64(
    inputs: Any,
    weights: Sequence[Any],
    biases: Sequence[Any],
    activations: Sequence[Activation | str],
) -> np.ndarray:
    """
    Chain dense layers, feeding each layer's output into the next.
    """
    if not len(weights) == len(biases) == len(activations):
        raise DimensionMismatchError(
            "Inconsistent number of layers: "
            f"{len(weights)} weights, {len(biases)} biases, "
            f"{len(activations)} activations"
        )
    parsed = [Activation.parse(a) for a in activations]
    current = as_f64_buffer(inputs, "inputs")
    for layer_w, layer_b, activation in zip(weights, biases, parsed):
        current = neural_network_forward_f64(current, layer_w, layer_b, activation)
    logger.debug("Forward pass through %d layers", len(parsed))
    return current


def neural_network_backprop_f64(
    inputs: Any,
    weights: Any,
    biases: Any,
    targets: Any,
    learning_rate: float,
    activation: Activation | str,
) -> BackpropResult:
    """
    One gradient-descent step for a single dense layer under squared error.

    ``delta = (output - target) * activation'(z)`` per output; biases move by
    ``-learning_rate * delta`` and weights by ``-learning_rate * delta * input``.
    The inputs are never mutated; new buffers are returned.
    """
    activation = Activation.parse(activation)
    x, w, b = _layer(inputs, weights, biases)
    t = as_f64_buffer(targets, "targets")
    require_length(t, b.shape[0], "targets")
    z = _pre_activation(x, w, b)
    outputs = _activate(z, activation)
    delta = (outputs - t) * _derivative(z, outputs, activation)
    new_biases = b - learning_rate * delta
    new_weights = w - learning_rate * np.outer(delta, x)
    return BackpropResult(weights=new_weights.reshape(-1), biases=new_biases)


def _paired_losses(predictions: Any, targets: Any):
    p = as_f64_buffer(predictions, "predictions")
    t = as_f64_buffer(targets, "targets")
    n = min(p.shape[0], t.shape[0])
    return p[:n], t[:n], n


def neural_network_mse_loss_f64(predictions: Any, targets: Any) -> float:
    """Mean squared error over the common prefix; 0 when empty."""
    p, t, n = _paired_losses(predictions, targets)
    if n == 0:
        return 0.0
    return batched_squared_error(p, t) / n


def neural_network_binary_cross_entropy_loss_f64(
    predictions: Any, targets: Any
) -> float:
    """
    Binary cross-entropy with predictions clamped to [1e-15, 1 - 1e-15].
    """
    p, t, n = _paired_losses(predictions, targets)
    if n == 0:
        return 0.0
    p = np.clip(p, BCE_EPSILON, 1.0 - BCE_EPSILON)
    total = np.sum(t * np.log(p) + (1.0 - t) * np.log(1.0 - p))
    return float(-total / n)


def neural_network_init_weights_xavier_f64(
    input_size: int, output_size: int, key: Optional[jnp.ndarray] = None
) -> np.ndarray:
    """
    Xavier/Glorot normal initialization.

    Standard normals from the Box-Muller transform, scaled by
    ``sqrt(2 / (input_size + output_size))``.
    """
    input_size = require_count(input_size, "input_size", minimum=1)
    output_size = require_count(output_size, "output_size", minimum=1)
    count = input_size * output_size
    use_key, _ = borrow_key(resolve_key(key))
    u = np.asarray(
        jax.random.uniform(use_key, shape=(2, count), dtype=jnp.float64)
    )
    u1 = 1.0 - u[0]
    u2 = u[1]
    z0 = np.sqrt(-2.0 * np.log(u1)) * np.cos(2.0 * math.pi * u2)
    std_dev = math.sqrt(2.0 / (input_size + output_size))
    return z0 * std_dev


def neural_network_init_biases_zero_f64(output_size: int) -> np.ndarray:
    output_size = require_count(output_size, "output_size", minimum=1)
    return np.zeros(output_size, dtype=np.float64)
