"""
Statistics engine: aggregates, moments, order statistics and time series.
"""

from reduct_kernels.stats.descriptive import (
    numeric_correlation_f64,
    numeric_covariance_f64,
    numeric_kurtosis_f64,
    numeric_median_f64,
    numeric_percentile_f64,
    numeric_quantiles_f64,
    numeric_skewness_f64,
    numeric_std_dev_f64,
    numeric_variance_f64,
)
from reduct_kernels.stats.numeric import (
    numeric_average_f64,
    numeric_filter_f64,
    numeric_map_f64,
    numeric_filter_reduce_f64,
    numeric_map_filter_f64,
    numeric_map_filter_reduce_f64,
    numeric_map_reduce_f64,
    numeric_max_f64,
    numeric_mean_f64,
    numeric_min_f64,
    numeric_reduce_f64,
    numeric_sum_f64,
)
from reduct_kernels.stats.time_series import (
    numeric_autocorrelation_f64,
    numeric_detect_outliers_f64,
    numeric_exponential_moving_average_f64,
    numeric_interpolate_missing_f64,
    numeric_moving_average_f64,
    numeric_weighted_moving_average_f64,
)

__all__ = [
    "numeric_autocorrelation_f64",
    "numeric_average_f64",
    "numeric_correlation_f64",
    "numeric_covariance_f64",
    "numeric_detect_outliers_f64",
    "numeric_exponential_moving_average_f64",
    "numeric_filter_f64",
    "numeric_filter_reduce_f64",
    "numeric_interpolate_missing_f64",
    "numeric_kurtosis_f64",
    "numeric_map_f64",
    "numeric_map_filter_f64",
    "numeric_map_filter_reduce_f64",
    "numeric_map_reduce_f64",
    "numeric_max_f64",
    "numeric_mean_f64",
    "numeric_median_f64",
    "numeric_min_f64",
    "numeric_moving_average_f64",
    "numeric_percentile_f64",
    "numeric_quantiles_f64",
    "numeric_reduce_f64",
    "numeric_skewness_f64",
    "numeric_std_dev_f64",
    "numeric_sum_f64",
    "numeric_variance_f64",
    "numeric_weighted_moving_average_f64",
]
