import hypothesis.strategies as st
import pytest
from hypothesis import given, settings

from reduct_kernels.compression import huffman
from reduct_kernels.core.errors import DecodeError


def test_two_symbol_layout():
    out = huffman.huffman_compress("aab")
    assert list(out) == [2, 97, 0, 0, 0, 2, 98, 0, 0, 0, 1, 0xC0]


def test_tie_break_is_fixed():
    out = huffman.huffman_compress("abc")
    header = [3, 97, 0, 0, 0, 1, 98, 0, 0, 0, 1, 99, 0, 0, 0, 1]
    assert list(out) == header + [0xB0]
    codes = huffman.build_codes(huffman.build_tree({97: 1, 98: 1, 99: 1}))
    assert codes == {99: "0", 97: "10", 98: "11"}


def test_codes_are_prefix_free():
    codes = huffman.build_codes(huffman.build_tree({1: 5, 2: 9, 3: 12, 4: 13, 5: 16, 6: 45}))
    words = list(codes.values())
    for a in words:
        for b in words:
            if a != b:
                assert not b.startswith(a)
    assert len(codes[6]) == 1


def test_single_symbol_uses_one_bit_per_byte():
    out = huffman.huffman_compress("zzzz")
    assert list(out) == [1, 122, 0, 0, 0, 4, 0x00]
    assert huffman.huffman_decompress(out) == "zzzz"


def test_empty_round_trip():
    assert huffman.huffman_compress("") == b""
    assert huffman.huffman_decompress(b"") == ""


def test_all_byte_values_header_count_wraps():
    data = bytes(range(256)) * 2
    out = huffman.huffman_compress(data)
    assert out[0] == 0
    assert huffman.huffman_decompress_bytes(out) == data


def test_unicode_round_trip():
    text = "naïve café, 東京"
    assert huffman.huffman_decompress(huffman.huffman_compress(text)) == text


@settings(max_examples=80, deadline=None)
@given(st.binary(max_size=400))
def test_round_trip_bytes(data):
    assert huffman.huffman_decompress_bytes(huffman.huffman_compress(data)) == data


@pytest.mark.parametrize(
    "payload",
    [
        [2, 97, 0, 0],
        [2, 97, 0, 0, 0, 2, 98, 0, 0, 0, 1],
        [2, 97, 0, 0, 0, 2, 97, 0, 0, 0, 1, 0xC0],
        [1, 97, 0, 0, 0, 0],
    ],
)
def test_malformed_payloads(payload):
    with pytest.raises(DecodeError):
        huffman.huffman_decompress_bytes(payload)


def test_invalid_utf8_is_a_decode_error():
    with pytest.raises(DecodeError):
        huffman.huffman_decompress(huffman.huffman_compress(b"\xff\xfe"))
