"""
Cryptographic primitives for NEAR transactions.

Provides Ed25519 and secp256k1 keys plus the tagged ``PublicKey`` and
``Signature`` types carried inside transactions.
"""

from .ed25519 import Ed25519PrivateKey
from .secp256k1 import Secp256k1PrivateKey
from .keys import (
    KeyType,
    PublicKey,
    Signature,
    SecretKey,
    PUBLIC_KEY_LENGTHS,
    SIGNATURE_LENGTHS,
    split_key_string,
)

__all__ = [
    "Ed25519PrivateKey",
    "Secp256k1PrivateKey",
    "KeyType",
    "PublicKey",
    "Signature",
    "SecretKey",
    "PUBLIC_KEY_LENGTHS",
    "SIGNATURE_LENGTHS",
    "split_key_string",
]
