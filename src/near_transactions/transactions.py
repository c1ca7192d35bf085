# Transaction type definitions for the NEAR protocol
# Field order in each serialize() follows the Borsh layout of near-primitives
# TransactionV0, so encodings and hashes match the network byte for byte.

from __future__ import annotations
import base64
import json
from typing import Annotated, Any, ClassVar, Dict, Literal, Optional, Tuple, Type, Union

import base58
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .codec.hashes import hash_and_size
from .codec.reader import BorshReader
from .codec.writer import BorshWriter, encode
from .crypto.keys import PublicKey, Signature
from .runtime.account_id import AccountId
from .runtime.errors import DecodingError, ErrorCode

CRYPTO_HASH_LENGTH = 32


def _coerce_crypto_hash(value: Any) -> Any:
    if isinstance(value, str):
        try:
            value = base58.b58decode(value)
        except ValueError as e:
            raise ValueError(f"Invalid base58 hash: {e}")
    if isinstance(value, (bytes, bytearray)) and len(value) != CRYPTO_HASH_LENGTH:
        raise ValueError(f"Hash must be {CRYPTO_HASH_LENGTH} bytes, got {len(value)}")
    return value


def encode_args(args: Any) -> bytes:
    """
    Normalize function call arguments to bytes.

    Bytes pass through unchanged; dicts and lists are encoded as compact
    JSON, the convention NEAR contracts expect; strings are UTF-8 encoded.
    """
    if isinstance(args, (bytes, bytearray)):
        return bytes(args)
    if isinstance(args, str):
        return args.encode("utf-8")
    if isinstance(args, (dict, list)):
        return json.dumps(args, separators=(",", ":")).encode("utf-8")
    raise TypeError(f"Unsupported function call args type: {type(args).__name__}")


# =============================================================================
# Access Keys
# =============================================================================

class FunctionCallPermission(BaseModel):
    """Access key restricted to calling methods on one contract."""
    type: Literal["FunctionCall"] = "FunctionCall"
    allowance: Optional[int] = None
    receiver_id: str
    method_names: Tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True)

    VARIANT_INDEX: ClassVar[int] = 0

    def serialize(self, writer: BorshWriter) -> None:
        writer.u8(self.VARIANT_INDEX)
        writer.option(self.allowance, BorshWriter.u128)
        writer.string(self.receiver_id)
        writer.sequence(self.method_names, BorshWriter.string)

    @classmethod
    def _read_fields(cls, reader: BorshReader) -> Dict[str, Any]:
        return {
            "allowance": reader.option(BorshReader.u128),
            "receiver_id": reader.string(),
            "method_names": tuple(reader.sequence(BorshReader.string)),
        }


class FullAccessPermission(BaseModel):
    """Access key allowed to sign any transaction for the account."""
    type: Literal["FullAccess"] = "FullAccess"

    model_config = ConfigDict(frozen=True)

    VARIANT_INDEX: ClassVar[int] = 1

    def serialize(self, writer: BorshWriter) -> None:
        writer.u8(self.VARIANT_INDEX)

    @classmethod
    def _read_fields(cls, reader: BorshReader) -> Dict[str, Any]:
        return {}


AccessKeyPermission = Annotated[
    Union[FunctionCallPermission, FullAccessPermission],
    Field(discriminator="type"),
]

_PERMISSION_TYPES: Dict[int, Type[BaseModel]] = {
    FunctionCallPermission.VARIANT_INDEX: FunctionCallPermission,
    FullAccessPermission.VARIANT_INDEX: FullAccessPermission,
}


class AccessKey(BaseModel):
    """Permission descriptor attached to a public key by ``AddKeyAction``."""
    nonce: int = 0
    permission: AccessKeyPermission = Field(default_factory=FullAccessPermission)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def full_access(cls) -> AccessKey:
        return cls(permission=FullAccessPermission())

    @classmethod
    def function_call_access(
        cls,
        receiver_id: str,
        method_names: Tuple[str, ...] = (),
        allowance: Optional[int] = None,
    ) -> AccessKey:
        """
        Key limited to ``method_names`` on ``receiver_id`` (empty means any
        method), spending at most ``allowance`` yoctoNEAR on gas (None means
        unlimited).
        """
        return cls(permission=FunctionCallPermission(
            allowance=allowance,
            receiver_id=receiver_id,
            method_names=tuple(method_names),
        ))

    @property
    def is_full_access(self) -> bool:
        return isinstance(self.permission, FullAccessPermission)

    def serialize(self, writer: BorshWriter) -> None:
        writer.u64(self.nonce)
        self.permission.serialize(writer)

    @classmethod
    def deserialize(cls, reader: BorshReader) -> AccessKey:
        nonce = reader.u64()
        tag = reader.u8()
        permission_cls = _PERMISSION_TYPES.get(tag)
        if permission_cls is None:
            raise DecodingError(f"Unknown access key permission tag: {tag}", ErrorCode.UNKNOWN_VARIANT)
        return cls(nonce=nonce, permission=permission_cls(**permission_cls._read_fields(reader)))


# =============================================================================
# Actions
# =============================================================================

class ActionBase(BaseModel):
    """
    Base class for transaction actions.

    ``ACTION_INDEX`` is the Borsh enum variant index of the action in
    near-primitives and must not be changed.
    """

    model_config = ConfigDict(frozen=True)

    ACTION_INDEX: ClassVar[int]

    def serialize(self, writer: BorshWriter) -> None:
        writer.u8(self.ACTION_INDEX)
        self._write_fields(writer)

    def _write_fields(self, writer: BorshWriter) -> None:
        pass

    @classmethod
    def _read_fields(cls, reader: BorshReader) -> Dict[str, Any]:
        return {}


class CreateAccountAction(ActionBase):
    """Create the receiver account. Carries no payload."""
    type: Literal["CreateAccount"] = "CreateAccount"

    ACTION_INDEX: ClassVar[int] = 0


class DeployContractAction(ActionBase):
    """Deploy WebAssembly code to the receiver account."""
    type: Literal["DeployContract"] = "DeployContract"
    code: bytes

    ACTION_INDEX: ClassVar[int] = 1

    def _write_fields(self, writer: BorshWriter) -> None:
        writer.bytes(self.code)

    @classmethod
    def _read_fields(cls, reader: BorshReader) -> Dict[str, Any]:
        return {"code": reader.bytes()}


class FunctionCallAction(ActionBase):
    """Call ``method_name`` on the receiver contract."""
    type: Literal["FunctionCall"] = "FunctionCall"
    method_name: str
    args: bytes = b""
    gas: int
    deposit: int

    ACTION_INDEX: ClassVar[int] = 2

    @field_validator("args", mode="before")
    @classmethod
    def _encode_args(cls, v: Any) -> Any:
        if isinstance(v, (dict, list, bytearray)):
            return encode_args(v)
        return v

    def _write_fields(self, writer: BorshWriter) -> None:
        writer.string(self.method_name)
        writer.bytes(self.args)
        writer.u64(self.gas)
        writer.u128(self.deposit)

    @classmethod
    def _read_fields(cls, reader: BorshReader) -> Dict[str, Any]:
        return {
            "method_name": reader.string(),
            "args": reader.bytes(),
            "gas": reader.u64(),
            "deposit": reader.u128(),
        }


class TransferAction(ActionBase):
    """Transfer ``deposit`` yoctoNEAR to the receiver."""
    type: Literal["Transfer"] = "Transfer"
    deposit: int

    ACTION_INDEX: ClassVar[int] = 3

    def _write_fields(self, writer: BorshWriter) -> None:
        writer.u128(self.deposit)

    @classmethod
    def _read_fields(cls, reader: BorshReader) -> Dict[str, Any]:
        return {"deposit": reader.u128()}


class StakeAction(ActionBase):
    """Lock ``stake`` yoctoNEAR for validation with ``public_key``."""
    type: Literal["Stake"] = "Stake"
    stake: int
    public_key: PublicKey

    ACTION_INDEX: ClassVar[int] = 4

    def _write_fields(self, writer: BorshWriter) -> None:
        writer.u128(self.stake)
        self.public_key.serialize(writer)

    @classmethod
    def _read_fields(cls, reader: BorshReader) -> Dict[str, Any]:
        return {"stake": reader.u128(), "public_key": PublicKey.deserialize(reader)}


class AddKeyAction(ActionBase):
    """Register ``public_key`` on the receiver account with ``access_key``."""
    type: Literal["AddKey"] = "AddKey"
    public_key: PublicKey
    access_key: AccessKey

    ACTION_INDEX: ClassVar[int] = 5

    def _write_fields(self, writer: BorshWriter) -> None:
        self.public_key.serialize(writer)
        self.access_key.serialize(writer)

    @classmethod
    def _read_fields(cls, reader: BorshReader) -> Dict[str, Any]:
        return {"public_key": PublicKey.deserialize(reader), "access_key": AccessKey.deserialize(reader)}


class DeleteKeyAction(ActionBase):
    """Remove ``public_key`` from the receiver account."""
    type: Literal["DeleteKey"] = "DeleteKey"
    public_key: PublicKey

    ACTION_INDEX: ClassVar[int] = 6

    def _write_fields(self, writer: BorshWriter) -> None:
        self.public_key.serialize(writer)

    @classmethod
    def _read_fields(cls, reader: BorshReader) -> Dict[str, Any]:
        return {"public_key": PublicKey.deserialize(reader)}


class DeleteAccountAction(ActionBase):
    """Delete the receiver account, sending the remaining balance to ``beneficiary_id``."""
    type: Literal["DeleteAccount"] = "DeleteAccount"
    beneficiary_id: AccountId

    ACTION_INDEX: ClassVar[int] = 7

    def _write_fields(self, writer: BorshWriter) -> None:
        writer.string(self.beneficiary_id)

    @classmethod
    def _read_fields(cls, reader: BorshReader) -> Dict[str, Any]:
        return {"beneficiary_id": reader.string()}


Action = Annotated[
    Union[
        CreateAccountAction,
        DeployContractAction,
        FunctionCallAction,
        TransferAction,
        StakeAction,
        AddKeyAction,
        DeleteKeyAction,
        DeleteAccountAction,
    ],
    Field(discriminator="type"),
]

ACTION_TYPES: Dict[int, Type[ActionBase]] = {
    cls.ACTION_INDEX: cls
    for cls in (
        CreateAccountAction,
        DeployContractAction,
        FunctionCallAction,
        TransferAction,
        StakeAction,
        AddKeyAction,
        DeleteKeyAction,
        DeleteAccountAction,
    )
}


def read_action(reader: BorshReader) -> ActionBase:
    """Decode one Borsh-encoded action."""
    tag = reader.u8()
    action_cls = ACTION_TYPES.get(tag)
    if action_cls is None:
        raise DecodingError(f"Unknown action tag: {tag}", ErrorCode.UNKNOWN_VARIANT)
    return action_cls(**action_cls._read_fields(reader))


# =============================================================================
# Transactions
# =============================================================================

class Transaction(BaseModel):
    """
    Unsigned NEAR transaction (``TransactionV0``).

    Immutable once created. ``actions`` keeps the order in which actions
    were added; it is the order the network executes them in.
    """
    signer_id: AccountId
    public_key: PublicKey
    nonce: int
    receiver_id: AccountId
    block_hash: bytes
    actions: Tuple[Action, ...] = ()

    model_config = ConfigDict(frozen=True)

    @field_validator("block_hash", mode="before")
    @classmethod
    def _parse_block_hash(cls, v: Any) -> Any:
        return _coerce_crypto_hash(v)

    def serialize(self, writer: BorshWriter) -> None:
        writer.string(self.signer_id)
        self.public_key.serialize(writer)
        writer.u64(self.nonce)
        writer.string(self.receiver_id)
        writer.fixed_bytes(self.block_hash, CRYPTO_HASH_LENGTH)
        writer.sequence(self.actions, BorshWriter.struct)

    @classmethod
    def deserialize(cls, reader: BorshReader) -> Transaction:
        """
        Read a Borsh-encoded transaction.

        Raises:
            DecodingError: On malformed bytes, or on fields such as account
                ids that decode but fail validation
        """
        try:
            return cls(
                signer_id=reader.string(),
                public_key=PublicKey.deserialize(reader),
                nonce=reader.u64(),
                receiver_id=reader.string(),
                block_hash=reader.fixed_bytes(CRYPTO_HASH_LENGTH),
                actions=tuple(reader.sequence(read_action)),
            )
        except ValidationError as e:
            raise DecodingError(f"Invalid transaction field: {e}", cause=e)

    def to_bytes(self) -> bytes:
        """Borsh encoding of the transaction."""
        return encode(self)

    @classmethod
    def from_bytes(cls, data: bytes) -> Transaction:
        """
        Decode a Borsh-encoded transaction.

        Raises:
            DecodingError: On truncated input, unknown tags or trailing bytes
        """
        reader = BorshReader(data)
        tx = cls.deserialize(reader)
        reader.expect_eof()
        return tx

    def get_hash_and_size(self) -> Tuple[bytes, int]:
        """Return the SHA-256 of the Borsh encoding and the encoding length."""
        return hash_and_size(self)

    def get_hash(self) -> bytes:
        return self.get_hash_and_size()[0]

    @property
    def block_hash_b58(self) -> str:
        return base58.b58encode(self.block_hash).decode("ascii")


class SignedTransaction(BaseModel):
    """Transaction paired with a signature over its hash."""
    transaction: Transaction
    signature: Signature

    model_config = ConfigDict(frozen=True)

    @property
    def hash(self) -> bytes:
        """The transaction hash (the signed digest), as used by explorers and RPC."""
        return self.transaction.get_hash()

    @property
    def hash_b58(self) -> str:
        return base58.b58encode(self.hash).decode("ascii")

    @property
    def size(self) -> int:
        return len(self.to_bytes())

    def serialize(self, writer: BorshWriter) -> None:
        self.transaction.serialize(writer)
        self.signature.serialize(writer)

    @classmethod
    def deserialize(cls, reader: BorshReader) -> SignedTransaction:
        transaction = Transaction.deserialize(reader)
        return cls(transaction=transaction, signature=Signature.deserialize(reader))

    def to_bytes(self) -> bytes:
        """Borsh encoding: transaction followed by signature."""
        return encode(self)

    @classmethod
    def from_bytes(cls, data: bytes) -> SignedTransaction:
        reader = BorshReader(data)
        signed = cls.deserialize(reader)
        reader.expect_eof()
        return signed

    def to_base64(self) -> str:
        """Base64 of the Borsh encoding, the form RPC ``broadcast_tx_*`` methods take."""
        return base64.b64encode(self.to_bytes()).decode("ascii")

    @classmethod
    def from_base64(cls, data: str) -> SignedTransaction:
        return cls.from_bytes(base64.b64decode(data))

    def verify(self) -> bool:
        """Check the signature against the transaction's own public key."""
        return self.transaction.public_key.verify(self.hash, self.signature)


__all__ = [
    "AccessKey",
    "AccessKeyPermission",
    "FunctionCallPermission",
    "FullAccessPermission",
    "ActionBase",
    "Action",
    "ACTION_TYPES",
    "CreateAccountAction",
    "DeployContractAction",
    "FunctionCallAction",
    "TransferAction",
    "StakeAction",
    "AddKeyAction",
    "DeleteKeyAction",
    "DeleteAccountAction",
    "Transaction",
    "SignedTransaction",
    "encode_args",
    "read_action",
    "CRYPTO_HASH_LENGTH",
]
