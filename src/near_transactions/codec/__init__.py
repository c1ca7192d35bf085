"""
Borsh codec for NEAR transactions.

Key components:
- writer.py: Borsh encoder for integers, byte strings, options and sequences
- reader.py: matching Borsh decoder
- hashes.py: SHA-256 helpers used for transaction hashes
"""

from .hashes import sha256_bytes, hash_and_size
from .reader import BorshReader
from .writer import BorshWriter, encode

__all__ = [
    "BorshReader",
    "BorshWriter",
    "encode",
    "hash_and_size",
    "sha256_bytes",
]
