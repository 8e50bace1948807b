"""
Configuration constants for the pseudocoder translation engine.

Defines buffer sizes, integer limits, and the defaults used by the
command-line front end.
"""

# ============================================================
# Output Buffers
# ============================================================

# Default capacity (terminator included) of a translation buffer
DEFAULT_BUFFER_CAPACITY = 256

# Upper bound the CLI grows a buffer to before giving up
MAX_BUFFER_CAPACITY = 4096

# Text encoding of the output buffer; every emitted string is ASCII
OUTPUT_ENCODING = "ascii"

# ============================================================
# 64-bit Integer Limits
# ============================================================

UINT64_MASK = 0xFFFFFFFFFFFFFFFF
UINT64_MAX = UINT64_MASK
INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1

# ============================================================
# Translation
# ============================================================

# Intrinsic name emitted for a vector operation with no known name
UNKNOWN_INTRINSIC = "_mm_??_"

# Fallback text emitted by the CLI when a mnemonic has no translation
FALLBACK_COMMENT = "// "

# ============================================================
# Command Line Defaults
# ============================================================

DEFAULT_ARCH = "x86_64"
DEFAULT_BASE_ADDRESS = 0x00400000
