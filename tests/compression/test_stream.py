import pytest

from reduct_kernels.compression.stream import (
    CompressionAlgorithm,
    CompressionLevel,
    compress_text,
    compression_ratio,
    decompress_bytes,
)
from reduct_kernels.core.errors import DecodeError

TEXT = "the quick brown fox jumps over the lazy dog " * 20


@pytest.mark.parametrize("algorithm", list(CompressionAlgorithm))
@pytest.mark.parametrize("level", list(CompressionLevel))
def test_round_trip(algorithm, level):
    compressed = compress_text(TEXT, algorithm, level)
    assert decompress_bytes(compressed, algorithm) == TEXT


def test_container_headers():
    assert compress_text(TEXT, CompressionAlgorithm.GZIP)[:2] == b"\x1f\x8b"
    assert compress_text(TEXT, CompressionAlgorithm.ZLIB)[0] == 0x78


def test_repetitive_text_shrinks():
    compressed = compress_text(TEXT, level=CompressionLevel.BEST)
    assert len(compressed) < len(TEXT)
    assert compression_ratio(len(TEXT), len(compressed)) > 0.5


def test_empty_text_round_trip():
    for algorithm in CompressionAlgorithm:
        assert decompress_bytes(compress_text("", algorithm), algorithm) == ""


def test_truncated_stream():
    compressed = compress_text(TEXT)
    with pytest.raises(DecodeError):
        decompress_bytes(compressed[: len(compressed) // 2])


def test_garbage_and_wrong_container():
    with pytest.raises(DecodeError):
        decompress_bytes(b"not compressed at all")
    with pytest.raises(DecodeError):
        decompress_bytes(compress_text(TEXT, CompressionAlgorithm.ZLIB), CompressionAlgorithm.GZIP)


def test_compression_ratio():
    assert compression_ratio(0, 10) == 0.0
    assert compression_ratio(100, 25) == 0.75
    assert compression_ratio(10, 20) == -1.0
