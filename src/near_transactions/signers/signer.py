r"""
Base signer interface.

A signer turns a transaction hash into a ``Signature``. Key storage and the
signature scheme are left to implementations, so tests can substitute
deterministic stubs without real key material.
"""

from __future__ import annotations
from abc import ABC, abstractmethod

from ..crypto.keys import PublicKey, Signature


class Signer(ABC):
    """
    Base signer interface.

    ``TransactionBuilder.sign_transaction`` only calls ``sign``; any
    exception it raises reaches the caller unchanged.
    """

    @property
    @abstractmethod
    def public_key(self) -> PublicKey:
        """Public key matching the signatures this signer produces."""
        pass

    @abstractmethod
    def sign(self, data: bytes) -> Signature:
        """
        Sign data.

        Args:
            data: Bytes to sign, the 32-byte transaction hash when called by
                the transaction builder

        Returns:
            Signature tagged with this signer's key type
        """
        pass

    def verify(self, data: bytes, signature: Signature) -> bool:
        """
        Verify a signature against data with this signer's public key.

        Returns:
            True if signature is valid
        """
        return self.public_key.verify(data, signature)

    def __str__(self) -> str:
        return f"{self.__class__.__name__}({self.public_key})"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(public_key='{self.public_key}')"


__all__ = ["Signer"]
