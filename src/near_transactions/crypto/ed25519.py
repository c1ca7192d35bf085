r"""
Ed25519 cryptographic operations.

Provides Ed25519 key generation, signing and verification on top of
``cryptography``. NEAR stores ed25519 secret keys as 64 bytes
(32-byte seed followed by the 32-byte public key).
"""

from __future__ import annotations

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey as CryptoEd25519PrivateKey,
    Ed25519PublicKey as CryptoEd25519PublicKey,
)

from ..runtime.errors import InvalidKeyError

SEED_LENGTH = 32
PUBLIC_KEY_LENGTH = 32
SECRET_KEY_LENGTH = 64
SIGNATURE_LENGTH = 64


def _raw_public_bytes(public_key: CryptoEd25519PublicKey) -> bytes:
    return public_key.public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    )


class Ed25519PrivateKey:
    """
    Ed25519 private key.

    Provides signing operations and public key derivation.
    """

    def __init__(self, seed: bytes):
        """
        Initialize from 32-byte private key seed.

        Args:
            seed: 32-byte Ed25519 private key seed

        Raises:
            InvalidKeyError: If the seed has the wrong length
        """
        if len(seed) != SEED_LENGTH:
            raise InvalidKeyError(f"Ed25519 seed must be {SEED_LENGTH} bytes, got {len(seed)}")

        self._seed = bytes(seed)
        self._crypto_key = CryptoEd25519PrivateKey.from_private_bytes(self._seed)
        self._public_key = _raw_public_bytes(self._crypto_key.public_key())

    @classmethod
    def generate(cls) -> Ed25519PrivateKey:
        """Generate a new random Ed25519 private key."""
        crypto_key = CryptoEd25519PrivateKey.generate()
        seed = crypto_key.private_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PrivateFormat.Raw,
            encryption_algorithm=serialization.NoEncryption(),
        )
        return cls(seed)

    @classmethod
    def from_bytes(cls, key_bytes: bytes) -> Ed25519PrivateKey:
        """
        Create a private key from a 32-byte seed or a 64-byte NEAR secret key.

        Raises:
            InvalidKeyError: If the length is wrong or the embedded public
                key does not match the seed
        """
        if len(key_bytes) == SEED_LENGTH:
            return cls(key_bytes)
        if len(key_bytes) == SECRET_KEY_LENGTH:
            key = cls(key_bytes[:SEED_LENGTH])
            if key.public_key() != key_bytes[SEED_LENGTH:]:
                raise InvalidKeyError("Ed25519 secret key public half does not match its seed")
            return key
        raise InvalidKeyError(
            f"Ed25519 secret key must be {SEED_LENGTH} or {SECRET_KEY_LENGTH} bytes, got {len(key_bytes)}"
        )

    def to_bytes(self) -> bytes:
        """Get the 64-byte NEAR secret key (seed followed by public key)."""
        return self._seed + self._public_key

    @property
    def seed(self) -> bytes:
        """Get the 32-byte private key seed."""
        return self._seed

    def public_key(self) -> bytes:
        """Get the 32-byte public key."""
        return self._public_key

    def sign(self, message: bytes) -> bytes:
        """
        Sign a message.

        Args:
            message: Message to sign

        Returns:
            64-byte Ed25519 signature
        """
        return self._crypto_key.sign(message)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Ed25519PrivateKey):
            return NotImplemented
        return self._seed == other._seed

    def __repr__(self) -> str:
        return f"Ed25519PrivateKey(public_key={self._public_key.hex()})"


def verify(public_key: bytes, signature: bytes, message: bytes) -> bool:
    """
    Verify an Ed25519 signature.

    Args:
        public_key: 32-byte public key
        signature: 64-byte signature
        message: Message that was signed

    Returns:
        True if signature is valid
    """
    if len(public_key) != PUBLIC_KEY_LENGTH or len(signature) != SIGNATURE_LENGTH:
        return False
    try:
        CryptoEd25519PublicKey.from_public_bytes(public_key).verify(signature, message)
    except (InvalidSignature, ValueError):
        return False
    return True
