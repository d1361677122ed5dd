"""
Machine-learning primitives: regression, clustering, PCA, dense layers and
matrix multiplication.
"""

from reduct_kernels.ml.clustering import KMeansResult, kmeans_clustering_f64
from reduct_kernels.ml.matrix import matrix_multiply_f64
from reduct_kernels.ml.neural_network import (
    Activation,
    BackpropResult,
    neural_network_backprop_f64,
    neural_network_binary_cross_entropy_loss_f64,
    neural_network_forward_f64,
    neural_network_forward_multi_layer_f64,
    neural_network_init_biases_zero_f64,
    neural_network_init_weights_xavier_f64,
    neural_network_mse_loss_f64,
)
from reduct_kernels.ml.pca import PCAResult, pca_f64
from reduct_kernels.ml.regression import (
    RegressionResult,
    linear_regression_f64,
    linear_regression_predict_f64,
)

__all__ = [
    "Activation",
    "BackpropResult",
    "KMeansResult",
    "PCAResult",
    "RegressionResult",
    "kmeans_clustering_f64",
    "linear_regression_f64",
    "linear_regression_predict_f64",
    "matrix_multiply_f64",
    "neural_network_backprop_f64",
    "neural_network_binary_cross_entropy_loss_f64",
    "neural_network_forward_f64",
    "neural_network_forward_multi_layer_f64",
    "neural_network_init_biases_zero_f64",
    "neural_network_init_weights_xavier_f64",
    "neural_network_mse_loss_f64",
    "pca_f64",
]
