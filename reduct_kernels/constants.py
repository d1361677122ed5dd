"""
Named thresholds and sizes shared by the kernels.

Sort dispatch boundaries are exposed here so tests can target them directly.
"""

# Batch scheduler
DEFAULT_BATCH_SIZE = 4096
CALLBACK_BATCH_SIZE = 1024
SIMD_LANES = 4

# Sort family
INSERTION_SORT_LIMIT = 20
MERGE_SORT_THRESHOLD = 1000
RADIX_BITS = 8
RADIX_BUCKETS = 1 << RADIX_BITS
RADIX_PASSES = 32 // RADIX_BITS
BYTE_VALUES = 256

# Neural network
LEAKY_RELU_SLOPE = 0.01
BCE_EPSILON = 1e-15

# Huffman / RLE
RLE_MAX_RUN = 255
HUFFMAN_FREQUENCY_BYTES = 4

# Hashed-array-mapped trie
BITS_PER_LEVEL = 5
BRANCH_SIZE = 1 << BITS_PER_LEVEL
LEVEL_MASK = BRANCH_SIZE - 1
BITMAP_WIDTH = 32
