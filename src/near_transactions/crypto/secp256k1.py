"""
SECP256K1 cryptographic operations.

NEAR secp256k1 keys are 64 bytes (uncompressed point without the 0x04
prefix) and signatures are 65 bytes: ``r || s || recovery_id``. The
signed message is always a 32-byte digest.
"""

from __future__ import annotations
import hashlib

from ecdsa import BadSignatureError, MalformedPointError, SECP256k1, SigningKey, VerifyingKey
from ecdsa.numbertheory import SquareRootError
from ecdsa.util import sigdecode_string, sigencode_string_canonize

from ..runtime.errors import InvalidKeyError

SECRET_KEY_LENGTH = 32
PUBLIC_KEY_LENGTH = 64
SIGNATURE_LENGTH = 65
DIGEST_LENGTH = 32
# Recovery ids 2 and 3 (x coordinate above the group order) are rejected
MAX_RECOVERY_ID = 1


def _check_digest(digest: bytes) -> None:
    if len(digest) != DIGEST_LENGTH:
        raise InvalidKeyError(f"secp256k1 signs {DIGEST_LENGTH}-byte digests, got {len(digest)} bytes")


def _recover(rs: bytes, digest: bytes):
    return VerifyingKey.from_public_key_recovery_with_digest(
        rs, digest, SECP256k1, hashfunc=hashlib.sha256, sigdecode=sigdecode_string
    )


class Secp256k1PrivateKey:
    """SECP256K1 private key producing recoverable signatures."""

    def __init__(self, secret: bytes):
        """
        Initialize from a 32-byte secret scalar.

        Raises:
            InvalidKeyError: If the secret has the wrong length or is not a
                valid scalar for the curve
        """
        if len(secret) != SECRET_KEY_LENGTH:
            raise InvalidKeyError(
                f"secp256k1 secret key must be {SECRET_KEY_LENGTH} bytes, got {len(secret)}"
            )
        try:
            self._sk = SigningKey.from_string(bytes(secret), curve=SECP256k1)
        except (MalformedPointError, ValueError) as e:
            raise InvalidKeyError(f"Invalid secp256k1 secret key: {e}", cause=e)
        self._secret = bytes(secret)
        self._public_key = self._sk.get_verifying_key().to_string()

    @classmethod
    def generate(cls) -> Secp256k1PrivateKey:
        """Generate a new random secp256k1 private key."""
        return cls(SigningKey.generate(curve=SECP256k1).to_string())

    @classmethod
    def from_bytes(cls, key_bytes: bytes) -> Secp256k1PrivateKey:
        return cls(key_bytes)

    def to_bytes(self) -> bytes:
        """Get the 32-byte secret scalar."""
        return self._secret

    def public_key(self) -> bytes:
        """Get the 64-byte uncompressed public key (x || y)."""
        return self._public_key

    def sign(self, digest: bytes) -> bytes:
        """
        Sign a 32-byte digest.

        Args:
            digest: Hash to sign

        Returns:
            65-byte signature ``r || s || recovery_id`` with low-s normalization
        """
        _check_digest(digest)
        rs = self._sk.sign_digest_deterministic(
            digest, hashfunc=hashlib.sha256, sigencode=sigencode_string_canonize
        )
        return rs + bytes([self._recovery_id(rs, digest)])

    def _recovery_id(self, rs: bytes, digest: bytes) -> int:
        for recid, candidate in enumerate(_recover(rs, digest)[:MAX_RECOVERY_ID + 1]):
            if candidate.to_string() == self._public_key:
                return recid
        raise InvalidKeyError("Could not derive secp256k1 recovery id")

    def __eq__(self, other) -> bool:
        if not isinstance(other, Secp256k1PrivateKey):
            return NotImplemented
        return self._secret == other._secret

    def __repr__(self) -> str:
        return f"Secp256k1PrivateKey(public_key={self._public_key.hex()})"


def verify(public_key: bytes, signature: bytes, digest: bytes) -> bool:
    """
    Verify a 65-byte recoverable signature over a 32-byte digest.

    The recovery byte must select ``public_key`` among the keys recovered
    from ``r || s``.

    Returns:
        True if signature is valid
    """
    if len(public_key) != PUBLIC_KEY_LENGTH or len(signature) != SIGNATURE_LENGTH:
        return False
    recid = signature[64]
    if len(digest) != DIGEST_LENGTH or recid > MAX_RECOVERY_ID:
        return False
    try:
        vk = VerifyingKey.from_string(public_key, curve=SECP256k1)
        if not vk.verify_digest(signature[:64], digest, sigdecode=sigdecode_string):
            return False
        candidates = _recover(signature[:64], digest)
    except (BadSignatureError, MalformedPointError, SquareRootError):
        return False
    return recid < len(candidates) and candidates[recid].to_string() == public_key
