"""
NEAR key and signature types.

``PublicKey`` and ``Signature`` are frozen pydantic models holding a
``KeyType`` tag and the raw key/signature bytes. Both round-trip through
the NEAR string form ``<curve>:<base58>`` and through Borsh (one tag
byte followed by fixed-length data).
"""

from __future__ import annotations
from enum import IntEnum
from typing import Any, ClassVar, Dict, Tuple, Union

import base58
from pydantic import BaseModel, ConfigDict, model_validator

from ..runtime.errors import DecodingError, ErrorCode, InvalidKeyError
from . import ed25519, secp256k1


class KeyType(IntEnum):
    """Curve tag, also the Borsh enum variant index."""

    ED25519 = 0
    SECP256K1 = 1

    @property
    def curve_name(self) -> str:
        return self.name.lower()

    @classmethod
    def from_curve_name(cls, name: str) -> KeyType:
        try:
            return cls[name.upper()]
        except KeyError:
            raise InvalidKeyError(f"Unknown key type: {name!r}", ErrorCode.UNSUPPORTED_KEY_TYPE)


PUBLIC_KEY_LENGTHS: Dict[KeyType, int] = {
    KeyType.ED25519: ed25519.PUBLIC_KEY_LENGTH,
    KeyType.SECP256K1: secp256k1.PUBLIC_KEY_LENGTH,
}

SIGNATURE_LENGTHS: Dict[KeyType, int] = {
    KeyType.ED25519: ed25519.SIGNATURE_LENGTH,
    KeyType.SECP256K1: secp256k1.SIGNATURE_LENGTH,
}


def split_key_string(value: str) -> Tuple[KeyType, bytes]:
    """
    Split ``"<curve>:<base58>"`` into ``(KeyType, raw bytes)``.

    A string without a curve prefix is treated as ed25519.

    Raises:
        InvalidKeyError: On an unknown curve or invalid base58
    """
    if ":" in value:
        curve, encoded = value.split(":", 1)
        key_type = KeyType.from_curve_name(curve)
    else:
        key_type, encoded = KeyType.ED25519, value
    try:
        data = base58.b58decode(encoded)
    except ValueError as e:
        raise InvalidKeyError(f"Invalid base58 data: {e}", cause=e)
    return key_type, data


def _check_length(kind: str, key_type: KeyType, data: bytes, lengths: Dict[KeyType, int]) -> None:
    expected = lengths[key_type]
    if len(data) != expected:
        raise InvalidKeyError(
            f"{key_type.curve_name} {kind} must be {expected} bytes, got {len(data)}",
            details={"expected": expected, "actual": len(data)},
        )


class _TaggedBytes(BaseModel):
    """Shared shape of ``PublicKey`` and ``Signature``."""

    key_type: KeyType
    data: bytes

    model_config = ConfigDict(frozen=True)

    KIND: ClassVar[str] = "key"
    LENGTHS: ClassVar[Dict[KeyType, int]] = {}

    @model_validator(mode="before")
    @classmethod
    def _coerce(cls, value: Any) -> Any:
        if isinstance(value, str):
            key_type, data = split_key_string(value)
            return {"key_type": key_type, "data": data}
        return value

    @model_validator(mode="after")
    def _check(self):
        _check_length(self.KIND, self.key_type, self.data, self.LENGTHS)
        return self

    @classmethod
    def from_string(cls, value: str):
        """
        Parse the NEAR string form.

        Raises:
            InvalidKeyError: On an unknown curve, bad base58 or wrong length
        """
        key_type, data = split_key_string(value)
        _check_length(cls.KIND, key_type, data, cls.LENGTHS)
        return cls(key_type=key_type, data=data)

    @classmethod
    def deserialize(cls, reader):
        """Read the Borsh form: tag byte, then fixed-length data."""
        tag = reader.u8()
        try:
            key_type = KeyType(tag)
        except ValueError:
            raise DecodingError(f"Unknown key type tag: {tag}", ErrorCode.UNKNOWN_VARIANT)
        return cls(key_type=key_type, data=reader.fixed_bytes(cls.LENGTHS[key_type]))

    def serialize(self, writer) -> None:
        writer.u8(int(self.key_type))
        writer.fixed_bytes(self.data, self.LENGTHS[self.key_type])

    def __str__(self) -> str:
        return f"{self.key_type.curve_name}:{base58.b58encode(self.data).decode('ascii')}"


class PublicKey(_TaggedBytes):
    """Public key authorizing a transaction or registered as an access key."""

    KIND: ClassVar[str] = "public key"
    LENGTHS: ClassVar[Dict[KeyType, int]] = PUBLIC_KEY_LENGTHS

    def verify(self, data: bytes, signature: Signature) -> bool:
        """
        Verify ``signature`` over ``data`` with this key.

        Returns False when the curves differ.
        """
        if signature.key_type != self.key_type:
            return False
        if self.key_type == KeyType.ED25519:
            return ed25519.verify(self.data, signature.data, data)
        return secp256k1.verify(self.data, signature.data, data)

    def __repr__(self) -> str:
        return f"PublicKey('{self}')"


class Signature(_TaggedBytes):
    """Signature over a transaction hash."""

    KIND: ClassVar[str] = "signature"
    LENGTHS: ClassVar[Dict[KeyType, int]] = SIGNATURE_LENGTHS

    def __repr__(self) -> str:
        return f"Signature('{self}')"


class SecretKey:
    """
    Private key of either curve.

    Not a pydantic model: secret material stays out of ``model_dump`` and
    reprs.
    """

    def __init__(self, key: Union[ed25519.Ed25519PrivateKey, secp256k1.Secp256k1PrivateKey]):
        if isinstance(key, ed25519.Ed25519PrivateKey):
            self.key_type = KeyType.ED25519
        elif isinstance(key, secp256k1.Secp256k1PrivateKey):
            self.key_type = KeyType.SECP256K1
        else:
            raise InvalidKeyError(f"Unsupported private key: {type(key).__name__}",
                                  ErrorCode.UNSUPPORTED_KEY_TYPE)
        self._key = key

    @classmethod
    def generate(cls, key_type: KeyType = KeyType.ED25519) -> SecretKey:
        """Generate a new random secret key."""
        if key_type == KeyType.ED25519:
            return cls(ed25519.Ed25519PrivateKey.generate())
        return cls(secp256k1.Secp256k1PrivateKey.generate())

    @classmethod
    def from_seed(cls, key_type: KeyType, seed: Union[str, bytes]) -> SecretKey:
        """
        Derive a deterministic test key from a seed phrase.

        The seed is truncated or padded with spaces to 32 bytes and used
        directly as the secret. For ed25519 this gives the same key as
        NEAR test tooling; secp256k1 keys derived this way are not
        compatible with NEAR seed derivation.
        """
        if isinstance(seed, str):
            seed = seed.encode("utf-8")
        secret = seed[:32].ljust(32, b" ")
        if key_type == KeyType.ED25519:
            return cls(ed25519.Ed25519PrivateKey(secret))
        return cls(secp256k1.Secp256k1PrivateKey(secret))

    @classmethod
    def from_string(cls, value: str) -> SecretKey:
        """
        Parse ``ed25519:<base58>`` (64-byte NEAR form or 32-byte seed) or
        ``secp256k1:<base58>`` (32-byte scalar).
        """
        key_type, data = split_key_string(value)
        if key_type == KeyType.ED25519:
            return cls(ed25519.Ed25519PrivateKey.from_bytes(data))
        return cls(secp256k1.Secp256k1PrivateKey.from_bytes(data))

    def public_key(self) -> PublicKey:
        return PublicKey(key_type=self.key_type, data=self._key.public_key())

    def sign(self, data: bytes) -> Signature:
        """Sign ``data`` and tag the result with this key's curve."""
        return Signature(key_type=self.key_type, data=self._key.sign(data))

    def to_bytes(self) -> bytes:
        return self._key.to_bytes()

    def to_string(self) -> str:
        return f"{self.key_type.curve_name}:{base58.b58encode(self.to_bytes()).decode('ascii')}"

    def __eq__(self, other) -> bool:
        if not isinstance(other, SecretKey):
            return NotImplemented
        return self.key_type == other.key_type and self.to_bytes() == other.to_bytes()

    def __repr__(self) -> str:
        return f"SecretKey(public_key='{self.public_key()}')"
