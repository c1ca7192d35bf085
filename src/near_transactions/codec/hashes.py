"""
Hash Functions

NEAR identifies transactions by the SHA-256 of their Borsh encoding;
signatures are made over that 32-byte digest.
"""

import hashlib
from typing import Tuple

from .writer import encode


def sha256_bytes(input_bytes: bytes) -> bytes:
    """
    Compute SHA-256 hash of input bytes.

    Args:
        input_bytes: Input bytes to hash

    Returns:
        SHA-256 hash as bytes (32 bytes)
    """
    return hashlib.sha256(input_bytes).digest()


def hash_and_size(value) -> Tuple[bytes, int]:
    """
    Borsh encode ``value`` and hash the encoding.

    Args:
        value: Object exposing ``serialize(writer)``

    Returns:
        Tuple of (SHA-256 digest, encoded length in bytes)
    """
    data = encode(value)
    return sha256_bytes(data), len(data)
