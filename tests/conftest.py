"""
Shared fixtures: deterministic keys and signers, a fixed block hash and a
stub signer whose output is a pure function of its input.
"""
import hashlib

import pytest

from near_transactions.crypto.keys import KeyType, PublicKey, Signature
from near_transactions.signers import InMemorySigner, Signer
from near_transactions.tx.builder import TransactionBuilder


class StubSigner(Signer):
    """Signs by hashing the input with SHA-512; records every call."""

    def __init__(self):
        self.calls = []
        self._public_key = PublicKey(key_type=KeyType.ED25519, data=bytes(32))

    @property
    def public_key(self) -> PublicKey:
        return self._public_key

    def sign(self, data: bytes) -> Signature:
        self.calls.append(data)
        return Signature(key_type=KeyType.ED25519, data=hashlib.sha512(data).digest())


@pytest.fixture
def block_hash():
    """A fixed 32-byte block hash."""
    return bytes(range(32))


@pytest.fixture
def alice_signer():
    """Deterministic ed25519 signer for alice.test."""
    return InMemorySigner.from_seed("alice.test", KeyType.ED25519, "alice.test")


@pytest.fixture
def bob_signer():
    """Deterministic ed25519 signer for bob.test."""
    return InMemorySigner.from_seed("bob.test", KeyType.ED25519, "bob.test")


@pytest.fixture
def secp_signer():
    """Deterministic secp256k1 signer for carol.test."""
    return InMemorySigner.from_seed("carol.test", KeyType.SECP256K1, "carol.test")


@pytest.fixture
def stub_signer():
    return StubSigner()


@pytest.fixture
def make_builder(alice_signer, block_hash):
    """Factory for alice.test -> bob.test builders with nonce 1."""
    def _make(nonce=1, receiver_id="bob.test"):
        return TransactionBuilder(
            "alice.test",
            alice_signer.public_key,
            receiver_id,
            nonce,
            block_hash,
        )
    return _make
