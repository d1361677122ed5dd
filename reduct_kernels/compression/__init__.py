from reduct_kernels.compression.huffman import (
    HuffmanNode,
    huffman_compress,
    huffman_decompress,
    huffman_decompress_bytes,
)
from reduct_kernels.compression.rle import (
    rle_compress,
    rle_decompress,
    rle_decompress_bytes,
)
from reduct_kernels.compression.stream import (
    CompressionAlgorithm,
    CompressionLevel,
    compress_text,
    compression_ratio,
    decompress_bytes,
)

__all__ = [
    "CompressionAlgorithm",
    "CompressionLevel",
    "HuffmanNode",
    "compress_text",
    "compression_ratio",
    "decompress_bytes",
    "huffman_compress",
    "huffman_decompress",
    "huffman_decompress_bytes",
    "rle_compress",
    "rle_decompress",
    "rle_decompress_bytes",
]
