"""
gzip / raw deflate / zlib stream compression of text.
"""

from __future__ import annotations

import logging
import zlib
from enum import Enum
from typing import Any

from reduct_kernels.core.buffers import as_byte_string, as_u8_buffer
from reduct_kernels.core.errors import DecodeError

logger = logging.getLogger(__name__)


class CompressionAlgorithm(Enum):
    GZIP = "gzip"
    DEFLATE = "deflate"
    ZLIB = "zlib"

    @property
    def wbits(self) -> int:
        return _WBITS[self]


class CompressionLevel(Enum):
    NONE = 0
    FAST = 1
    DEFAULT = 6
    BEST = 9


# window bits select the container: gzip header, no header, zlib header
_WBITS = {
    CompressionAlgorithm.GZIP: 16 + zlib.MAX_WBITS,
    CompressionAlgorithm.DEFLATE: -zlib.MAX_WBITS,
    CompressionAlgorithm.ZLIB: zlib.MAX_WBITS,
}


def compress_text(
    text: str | bytes,
    algorithm: CompressionAlgorithm = CompressionAlgorithm.GZIP,
    level: CompressionLevel = CompressionLevel.DEFAULT,
) -> bytes:
    """
    Compress text (encoded as UTF-8) with the chosen container and level.
    """
    raw = as_byte_string(text, "text")
    compressor = zlib.compressobj(level.value, zlib.DEFLATED, algorithm.wbits)
    out = compressor.compress(raw) + compressor.flush()
    logger.debug(
        "%s level %s: %d bytes -> %d bytes",
        algorithm.value,
        level.name.lower(),
        len(raw),
        len(out),
    )
    return out


def decompress_bytes(
    data: Any, algorithm: CompressionAlgorithm = CompressionAlgorithm.GZIP
) -> str:
    """
    Decompress a stream produced by `compress_text` back to text.

    Raises
    ------
    DecodeError
        If the stream is corrupt, truncated or not valid UTF-8.
    """
    payload = as_u8_buffer(data, "data").tobytes()
    decompressor = zlib.decompressobj(algorithm.wbits)
    try:
        raw = decompressor.decompress(payload) + decompressor.flush()
    except zlib.error as exc:
        raise DecodeError(f"Invalid {algorithm.value} stream: {exc}") from exc
    if not decompressor.eof:
        raise DecodeError(f"Truncated {algorithm.value} stream")
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecodeError(
            f"Failed to convert decompressed bytes to string: {exc}"
        ) from exc


def compression_ratio(original_size: int, compressed_size: int) -> float:
    """
    Fraction of space saved: ``1 - compressed / original``; 0 for empty input.
    """
    if original_size == 0:
        return 0.0
    return 1.0 - compressed_size / original_size
