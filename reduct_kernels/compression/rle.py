"""
Byte-level run-length codec: a flat sequence of ``(count, byte)`` pairs with
``1 <= count <= 255``. Longer runs are split.
"""

from __future__ import annotations

import logging
from typing import Any

from reduct_kernels.constants import RLE_MAX_RUN
from reduct_kernels.core.buffers import as_byte_string, as_u8_buffer
from reduct_kernels.core.errors import DecodeError

logger = logging.getLogger(__name__)


def rle_compress(data: str | bytes) -> bytes:
    raw = as_byte_string(data)
    out = bytearray()
    i = 0
    n = len(raw)
    while i < n:
        current = raw[i]
        run = 1
        while i + run < n and raw[i + run] == current and run < RLE_MAX_RUN:
            run += 1
        out.append(run)
        out.append(current)
        i += run
    logger.debug("RLE: %d bytes -> %d bytes", n, len(out))
    return bytes(out)


def rle_decompress_bytes(data: Any) -> bytes:
    """
    Expand ``(count, byte)`` pairs.

    Raises
    ------
    DecodeError
        On an odd-length payload or a zero count.
    """
    payload = as_u8_buffer(data, "data").tobytes()
    if len(payload) % 2 != 0:
        raise DecodeError(
            f"RLE payload must have an even length, got {len(payload)}"
        )
    out = bytearray()
    for offset in range(0, len(payload), 2):
        count = payload[offset]
        if count == 0:
            raise DecodeError(f"Zero run length at offset {offset}")
        out += bytes([payload[offset + 1]]) * count
    return bytes(out)


def rle_decompress(data: Any) -> str:
    raw = rle_decompress_bytes(data)
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecodeError(
            f"Failed to convert decompressed bytes to string: {exc}"
        ) from exc
