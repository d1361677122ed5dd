import numpy as np
import pytest

from reduct_kernels.core.errors import PreconditionError
from reduct_kernels.trie import hamt


def test_find_path():
    assert hamt.hamt_find_path(40, 1).tolist() == [1, 8]
    assert hamt.hamt_find_path(0, 2).tolist() == [0, 0, 0]
    path = hamt.hamt_find_path(32767, 2, size=40000)
    assert path.dtype == np.int32
    assert path.tolist() == [31, 31, 31]


def test_find_path_handles_indices_past_int64():
    path = hamt.hamt_find_path(2**63, 13)
    assert path.tolist() == [0, 8] + [0] * 12
    assert hamt.hamt_find_path(2**64 - 1, 13).tolist() == [0, 15] + [31] * 12


def test_get_index_counts_lower_bits():
    assert hamt.hamt_get_index(0b1011, 3) == 2
    assert hamt.hamt_get_index(0b1011, 0) == 0
    assert hamt.hamt_get_index(0xFFFFFFFF, 31) == 31


def test_set_and_clear_bit():
    bitmap = hamt.hamt_set_bit(0, 31)
    assert bitmap == 1 << 31
    assert hamt.hamt_set_bit(bitmap, 31) == bitmap
    assert hamt.hamt_clear_bit(bitmap, 31) == 0
    assert hamt.hamt_clear_bit(0b101, 1) == 0b101


@pytest.mark.parametrize("bitmap,position", [(0, 32), (0, -1), (1 << 32, 0)])
def test_bit_arguments_are_validated(bitmap, position):
    with pytest.raises(PreconditionError):
        hamt.hamt_set_bit(bitmap, position)


def test_leaf_edits_return_new_buffers():
    data = np.array([1.0, 2.0, 3.0])
    assert hamt.hamt_append(data, 4.0).tolist() == [1.0, 2.0, 3.0, 4.0]
    assert hamt.hamt_prepend(data, 0.0).tolist() == [0.0, 1.0, 2.0, 3.0]
    assert hamt.hamt_insert(data, 1, 9.0).tolist() == [1.0, 9.0, 2.0, 3.0]
    assert hamt.hamt_insert(data, 3, 9.0).tolist() == [1.0, 2.0, 3.0, 9.0]
    assert hamt.hamt_remove(data, 0).tolist() == [2.0, 3.0]
    assert data.tolist() == [1.0, 2.0, 3.0]


def test_leaf_edit_bounds():
    with pytest.raises(PreconditionError):
        hamt.hamt_insert([1.0], 2, 0.0)
    with pytest.raises(PreconditionError):
        hamt.hamt_remove([1.0], 1)
    with pytest.raises(PreconditionError):
        hamt.hamt_remove([], 0)


def test_bulk_edits():
    assert hamt.hamt_append_multiple([1.0], [2.0, 3.0]).tolist() == [1.0, 2.0, 3.0]
    assert hamt.hamt_prepend_multiple([3.0], [1.0, 2.0]).tolist() == [1.0, 2.0, 3.0]
    assert hamt.hamt_concat([1.0, 2.0], []).tolist() == [1.0, 2.0]
