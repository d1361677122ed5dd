"""
Codec comparison
----------------
Compresses a few kinds of text with every codec shipped in
reduct_kernels.compression, checks that each one round-trips, and prints
the space saved.
"""
from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from reduct_kernels.compression import (
    CompressionAlgorithm,
    CompressionLevel,
    compress_text,
    compression_ratio,
    decompress_bytes,
    huffman_compress,
    huffman_decompress,
    rle_compress,
    rle_decompress,
)
from reduct_kernels.logging import setup_logging

SAMPLES = {
    "runs": "a" * 400 + "b" * 300 + "c" * 10,
    "prose": "It was the best of times, it was the worst of times, " * 8,
    "unicode": "Zürich → 東京 → São Paulo; " * 12,
}


def codecs():
    yield "rle", rle_compress, rle_decompress
    yield "huffman", huffman_compress, huffman_decompress
    for algorithm in CompressionAlgorithm:
        yield (
            algorithm.value,
            lambda text, a=algorithm: compress_text(text, a, CompressionLevel.BEST),
            lambda data, a=algorithm: decompress_bytes(data, a),
        )


if __name__ == "__main__":
    setup_logging()
    for name, text in SAMPLES.items():
        original = len(text.encode("utf-8"))
        print(f"{name} ({original} bytes)")
        for codec, compress, decompress in codecs():
            packed = compress(text)
            assert decompress(packed) == text
            ratio = compression_ratio(original, len(packed))
            print(f"  {codec:>8}: {len(packed):>5d} bytes, saved {ratio:6.1%}")
