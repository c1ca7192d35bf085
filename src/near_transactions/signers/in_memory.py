"""
In-memory signer holding an account's secret key.

Supports NEAR credential files, the JSON documents written by the NEAR CLI
under ``~/.near-credentials/<network>/<account>.json``.
"""

from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Optional, Union

from pydantic import AliasChoices, BaseModel, Field, ValidationError

from ..crypto.keys import KeyType, PublicKey, SecretKey, Signature
from ..runtime.account_id import AccountId
from ..runtime.errors import CredentialsError, InvalidKeyError
from .signer import Signer

logger = logging.getLogger(__name__)


class KeyFile(BaseModel):
    """Credential file contents. ``private_key`` is accepted as an alias of ``secret_key``."""
    account_id: AccountId
    public_key: PublicKey
    secret_key: str = Field(validation_alias=AliasChoices("secret_key", "private_key"))

    model_config = {"populate_by_name": True}


class InMemorySigner(Signer):
    """Signer backed by a ``SecretKey`` held in process memory."""

    def __init__(self, account_id: Union[str, AccountId], secret_key: SecretKey):
        """
        Initialize the signer.

        Args:
            account_id: Account the key belongs to
            secret_key: Key used for signing
        """
        self.account_id = AccountId(account_id)
        self.secret_key = secret_key
        self._public_key = secret_key.public_key()

    @classmethod
    def from_random(cls, account_id: Union[str, AccountId],
                    key_type: KeyType = KeyType.ED25519) -> InMemorySigner:
        """Create a signer with a freshly generated key."""
        return cls(account_id, SecretKey.generate(key_type))

    @classmethod
    def from_seed(cls, account_id: Union[str, AccountId], key_type: KeyType,
                  seed: Union[str, bytes]) -> InMemorySigner:
        """
        Create a signer with a deterministic key derived from ``seed``.

        For tests and local networks only.
        """
        return cls(account_id, SecretKey.from_seed(key_type, seed))

    @classmethod
    def from_secret_key(cls, account_id: Union[str, AccountId],
                        secret_key: Union[str, SecretKey]) -> InMemorySigner:
        """Create a signer from a ``SecretKey`` or its ``<curve>:<base58>`` string."""
        if isinstance(secret_key, str):
            secret_key = SecretKey.from_string(secret_key)
        return cls(account_id, secret_key)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> InMemorySigner:
        """
        Load a signer from a NEAR credential file.

        Raises:
            FileNotFoundError: If the file does not exist
            CredentialsError: If the file is malformed or its public key does
                not match its secret key
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Credential file not found: {path}")

        try:
            key_file = KeyFile.model_validate_json(path.read_text(encoding="utf-8"))
            secret_key = SecretKey.from_string(key_file.secret_key)
        except (ValidationError, InvalidKeyError) as e:
            raise CredentialsError(f"Invalid credential file {path}: {e}", cause=e)

        if secret_key.public_key() != key_file.public_key:
            raise CredentialsError(
                f"Public key in {path} does not match its secret key",
                details={"public_key": str(key_file.public_key)},
            )

        logger.debug("Loaded credentials for %s from %s", key_file.account_id, path)
        return cls(key_file.account_id, secret_key)

    def write_to_file(self, path: Union[str, Path]) -> None:
        """Write the signer as a NEAR credential file."""
        path = Path(path)
        data = {
            "account_id": str(self.account_id),
            "public_key": str(self.public_key),
            "secret_key": self.secret_key.to_string(),
        }
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        logger.debug("Wrote credentials for %s to %s", self.account_id, path)

    @property
    def public_key(self) -> PublicKey:
        return self._public_key

    @property
    def key_type(self) -> KeyType:
        return self.secret_key.key_type

    def sign(self, data: bytes) -> Signature:
        return self.secret_key.sign(data)

    def __repr__(self) -> str:
        return f"InMemorySigner(account_id='{self.account_id}', public_key='{self.public_key}')"


def credentials_path(account_id: str, network: str = "testnet",
                     home: Optional[Union[str, Path]] = None) -> Path:
    """Default NEAR CLI location of ``account_id``'s credential file."""
    base = Path(home) if home is not None else Path.home()
    return base / ".near-credentials" / network / f"{account_id}.json"


__all__ = ["InMemorySigner", "KeyFile", "credentials_path"]
