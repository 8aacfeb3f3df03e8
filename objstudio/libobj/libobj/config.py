"""
Constants
=========
Shared limits, file suffixes and defaults used across libobj.

Behaviour switches (triangulation, extensions, texture components) are plain
function arguments; the CLI maps its flags onto them.
"""

# Records with more tokens than this are rejected instead of truncated.
MAX_TOKENS: int = 1024

# Binary dump header, stored as little-endian uint32.
BIN_MAGIC: int = 0xAF45E782

BIN_SUFFIX: str = ".objbin"
MTL_SUFFIX: str = ".mtl"

DEFAULT_UP = (0.0, 1.0, 0.0)

# Decoded 8-bit color channels are linearized with this exponent.
GAMMA: float = 2.2
