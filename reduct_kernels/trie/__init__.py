from reduct_kernels.trie.hamt import (
    hamt_append,
    hamt_append_multiple,
    hamt_clear_bit,
    hamt_concat,
    hamt_find_path,
    hamt_get_index,
    hamt_insert,
    hamt_prepend,
    hamt_prepend_multiple,
    hamt_remove,
    hamt_set_bit,
)

__all__ = [
    "hamt_append",
    "hamt_append_multiple",
    "hamt_clear_bit",
    "hamt_concat",
    "hamt_find_path",
    "hamt_get_index",
    "hamt_insert",
    "hamt_prepend",
    "hamt_prepend_multiple",
    "hamt_remove",
    "hamt_set_bit",
]
