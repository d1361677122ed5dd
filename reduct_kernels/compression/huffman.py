"""
Static Huffman codec.

Wire format::

    count            1 byte, number of distinct symbols (256 is written as 0)
    count x entry    symbol byte + 4-byte big-endian frequency, ascending symbol
    payload          concatenated codes, MSB first, last byte zero-padded

The tree is rebuilt from the header on decode, so the tie-break below is part
of the format: heap entries are ordered by ``(frequency, sequence)``; leaves
are numbered in ascending symbol order and every merged node takes the next
number. The first node popped becomes the left (``0``) child.
"""

from __future__ import annotations

import heapq
import logging
from collections import Counter
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

import numpy as np

from reduct_kernels.constants import BYTE_VALUES, HUFFMAN_FREQUENCY_BYTES
from reduct_kernels.core.buffers import as_byte_string, as_u8_buffer
from reduct_kernels.core.errors import DecodeError, PreconditionError

logger = logging.getLogger(__name__)

_MAX_FREQUENCY = (1 << (8 * HUFFMAN_FREQUENCY_BYTES)) - 1
_ENTRY_SIZE = 1 + HUFFMAN_FREQUENCY_BYTES


@dataclass
class HuffmanNode:
    freq: int
    symbol: Optional[int] = None
    left: Optional["HuffmanNode"] = None
    right: Optional["HuffmanNode"] = None

    @property
    def is_leaf(self) -> bool:
        return self.symbol is not None


def build_tree(frequencies: Mapping[int, int]) -> HuffmanNode:
    """
    Build the Huffman tree for a symbol -> frequency table.

    Parameters
    ----------
    frequencies : Mapping[int, int]
        Non-empty table of byte symbols and their counts.

    Returns
    -------
    HuffmanNode
        Root of the tree; a leaf when only one symbol occurs.
    """
    heap: List[Tuple[int, int, HuffmanNode]] = []
    for seq, symbol in enumerate(sorted(frequencies)):
        heap.append((frequencies[symbol], seq, HuffmanNode(frequencies[symbol], symbol)))
    heapq.heapify(heap)
    seq = len(heap)
    while len(heap) > 1:
        left_freq, _, left = heapq.heappop(heap)
        right_freq, _, right = heapq.heappop(heap)
        parent = HuffmanNode(left_freq + right_freq, left=left, right=right)
        heapq.heappush(heap, (parent.freq, seq, parent))
        seq += 1
    return heap[0][2]


def build_codes(root: HuffmanNode) -> Dict[int, str]:
    """Map every symbol to its bit string (left = ``0``, right = ``1``)."""
    if root.is_leaf:
        # single-symbol alphabet
        return {root.symbol: "0"}
    codes: Dict[int, str] = {}
    stack = [(root, "")]
    while stack:
        node, prefix = stack.pop()
        if node.is_leaf:
            codes[node.symbol] = prefix
            continue
        stack.append((node.right, prefix + "1"))
        stack.append((node.left, prefix + "0"))
    return codes


def _encode_header(frequencies: Mapping[int, int]) -> bytes:
    header = bytearray([len(frequencies) % BYTE_VALUES])
    for symbol in sorted(frequencies):
        header.append(symbol)
        header += frequencies[symbol].to_bytes(HUFFMAN_FREQUENCY_BYTES, "big")
    return bytes(header)


def _decode_header(payload: bytes) -> Tuple[Dict[int, int], int]:
    count = payload[0] or BYTE_VALUES
    end = 1 + count * _ENTRY_SIZE
    if len(payload) < end:
        raise DecodeError(
            f"Truncated Huffman header: need {end} bytes for {count} symbols, "
            f"got {len(payload)}"
        )
    frequencies: Dict[int, int] = {}
    for offset in range(1, end, _ENTRY_SIZE):
        symbol = payload[offset]
        freq = int.from_bytes(payload[offset + 1 : offset + _ENTRY_SIZE], "big")
        if symbol in frequencies:
            raise DecodeError(f"Duplicate symbol {symbol} in Huffman header")
        if freq == 0:
            raise DecodeError(f"Zero frequency for symbol {symbol} in Huffman header")
        frequencies[symbol] = freq
    return frequencies, end


def huffman_compress(data: str | bytes) -> bytes:
    """
    Huffman-encode text (as UTF-8) or raw bytes.

    Empty input encodes to empty output.
    """
    raw = as_byte_string(data)
    if not raw:
        return b""
    frequencies = dict(Counter(raw))
    if max(frequencies.values()) > _MAX_FREQUENCY:
        raise PreconditionError("Input too large for 32-bit Huffman frequencies")
    codes = build_codes(build_tree(frequencies))
    bits = "".join(codes[b] for b in raw)
    packed = np.packbits(np.frombuffer(bits.encode("ascii"), dtype=np.uint8) - ord("0"))
    header = _encode_header(frequencies)
    logger.debug(
        "Huffman: %d bytes, %d symbols -> %d header + %d payload bytes",
        len(raw),
        len(frequencies),
        len(header),
        packed.shape[0],
    )
    return header + packed.tobytes()


def huffman_decompress_bytes(data: Any) -> bytes:
    """
    Decode a Huffman payload back to the original bytes.

    Decoding stops once the total frequency recorded in the header has been
    emitted, so padding bits are ignored.

    Raises
    ------
    DecodeError
        If the header or the payload is truncated or malformed.
    """
    payload = as_u8_buffer(data, "data").tobytes()
    if not payload:
        return b""
    frequencies, start = _decode_header(payload)
    total = sum(frequencies.values())
    root = build_tree(frequencies)
    bits = np.unpackbits(np.frombuffer(payload[start:], dtype=np.uint8))

    if root.is_leaf:
        if bits.shape[0] < total:
            raise DecodeError("Truncated Huffman payload")
        return bytes([root.symbol]) * total

    out = bytearray()
    node = root
    for bit in bits:
        node = node.right if bit else node.left
        if node.is_leaf:
            out.append(node.symbol)
            if len(out) == total:
                return bytes(out)
            node = root
    raise DecodeError(
        f"Truncated Huffman payload: decoded {len(out)} of {total} symbols"
    )


def huffman_decompress(data: Any) -> str:
    """Decode a Huffman payload to text; the bytes must be valid UTF-8."""
    raw = huffman_decompress_bytes(data)
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecodeError(f"Failed to convert decoded bytes to string: {exc}") from exc
