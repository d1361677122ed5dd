from reduct_kernels.algorithms.sorting import (
    KeyType,
    SortStrategy,
    adaptive_sort,
    counting_sort_u8,
    numeric_sort_f64,
    radix_sort_u32,
    select_sort_strategy,
    specialized_sort_f64,
)

__all__ = [
    "KeyType",
    "SortStrategy",
    "adaptive_sort",
    "counting_sort_u8",
    "numeric_sort_f64",
    "radix_sort_u32",
    "select_sort_strategy",
    "specialized_sort_f64",
]
