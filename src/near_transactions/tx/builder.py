"""
Fluent transaction builder.

Collects actions for a single transaction and produces either the unsigned
``Transaction`` or a ``SignedTransaction``.

Example:
    >>> signed = (
    ...     TransactionBuilder("alice.testnet", signer.public_key, "bob.testnet", nonce, block_hash)
    ...     .transfer(parse_near_amount("1"))
    ...     .sign_transaction(signer)
    ... )
"""

from __future__ import annotations
import logging
from typing import Any, List, Optional, Sequence, Tuple, Union

from ..crypto.keys import PublicKey
from ..runtime.account_id import AccountId
from ..signers.signer import Signer
from ..transactions import (
    AccessKey,
    ActionBase,
    AddKeyAction,
    CreateAccountAction,
    DeleteAccountAction,
    DeleteKeyAction,
    DeployContractAction,
    FunctionCallAction,
    SignedTransaction,
    StakeAction,
    Transaction,
    TransferAction,
    encode_args,
)

logger = logging.getLogger(__name__)

AccountLike = Union[str, AccountId]
PublicKeyLike = Union[str, PublicKey]


def _public_key(value: PublicKeyLike) -> PublicKey:
    if isinstance(value, PublicKey):
        return value
    return PublicKey.from_string(value)


class TransactionBuilder:
    """
    Builds and signs a NEAR transaction.

    Every action method appends one action and returns the builder itself,
    so calls can be chained. Action values are not validated; gas, deposit
    and method name checks happen on the network.
    """

    def __init__(
        self,
        signer_id: AccountLike,
        public_key: PublicKeyLike,
        receiver_id: AccountLike,
        nonce: int,
        block_hash: Union[bytes, str],
    ):
        """
        Initialize the builder.

        Args:
            signer_id: Account signing and paying for the transaction
            public_key: Access key of ``signer_id`` that will sign
            receiver_id: Account the actions apply to
            nonce: Access key nonce; must exceed the last nonce used by the key
            block_hash: Recent block hash, as 32 bytes or base58

        Raises:
            InvalidAccountIdError: If an account id string is malformed
            InvalidKeyError: If a public key string is malformed
        """
        self._transaction = Transaction(
            signer_id=AccountId(signer_id),
            public_key=_public_key(public_key),
            nonce=nonce,
            receiver_id=AccountId(receiver_id),
            block_hash=block_hash,
        )
        self._actions: List[ActionBase] = []

    @property
    def signer_id(self) -> AccountId:
        return self._transaction.signer_id

    @property
    def public_key(self) -> PublicKey:
        return self._transaction.public_key

    @property
    def receiver_id(self) -> AccountId:
        return self._transaction.receiver_id

    @property
    def nonce(self) -> int:
        return self._transaction.nonce

    @property
    def block_hash(self) -> bytes:
        return self._transaction.block_hash

    @property
    def actions(self) -> Tuple[ActionBase, ...]:
        """Actions added so far, in order."""
        return tuple(self._actions)

    def add_action(self, action: ActionBase) -> TransactionBuilder:
        """
        Append a prebuilt action (chainable).

        Args:
            action: Action to append

        Returns:
            Self for chaining
        """
        self._actions.append(action)
        return self

    def create_account(self) -> TransactionBuilder:
        """Create ``receiver_id`` as a new account."""
        return self.add_action(CreateAccountAction())

    def deploy_contract(self, code: bytes) -> TransactionBuilder:
        """Deploy Wasm ``code`` to ``receiver_id``."""
        return self.add_action(DeployContractAction(code=bytes(code)))

    def function_call(
        self,
        method_name: str,
        args: Any,
        gas: int,
        deposit: int,
    ) -> TransactionBuilder:
        """
        Call a contract method on ``receiver_id``.

        Args:
            method_name: Method to call
            args: Raw argument bytes, or a dict/list sent as compact JSON
            gas: Gas to attach
            deposit: yoctoNEAR to attach
        """
        return self.add_action(FunctionCallAction(
            method_name=method_name,
            args=encode_args(args),
            gas=gas,
            deposit=deposit,
        ))

    def transfer(self, deposit: int) -> TransactionBuilder:
        """Send ``deposit`` yoctoNEAR to ``receiver_id``."""
        return self.add_action(TransferAction(deposit=deposit))

    def stake(self, stake: int, public_key: PublicKeyLike) -> TransactionBuilder:
        """Stake ``stake`` yoctoNEAR with validator key ``public_key``."""
        return self.add_action(StakeAction(stake=stake, public_key=_public_key(public_key)))

    def add_key(self, public_key: PublicKeyLike, access_key: AccessKey) -> TransactionBuilder:
        """Add ``public_key`` to ``receiver_id`` with the given permission."""
        return self.add_action(AddKeyAction(public_key=_public_key(public_key), access_key=access_key))

    def add_full_access_key(self, public_key: PublicKeyLike) -> TransactionBuilder:
        return self.add_key(public_key, AccessKey.full_access())

    def add_function_call_key(
        self,
        public_key: PublicKeyLike,
        receiver_id: str,
        method_names: Sequence[str] = (),
        allowance: Optional[int] = None,
    ) -> TransactionBuilder:
        """Add a key that may only call ``method_names`` on ``receiver_id``."""
        access_key = AccessKey.function_call_access(receiver_id, tuple(method_names), allowance)
        return self.add_key(public_key, access_key)

    def delete_key(self, public_key: PublicKeyLike) -> TransactionBuilder:
        """Remove ``public_key`` from ``receiver_id``."""
        return self.add_action(DeleteKeyAction(public_key=_public_key(public_key)))

    def delete_account(self, beneficiary_id: AccountLike) -> TransactionBuilder:
        """Delete ``receiver_id`` and send its balance to ``beneficiary_id``."""
        return self.add_action(DeleteAccountAction(beneficiary_id=AccountId(beneficiary_id)))

    def build(self) -> Transaction:
        """
        Return the transaction with every action added so far.

        The result is an immutable snapshot; adding more actions afterwards
        does not change it.
        """
        return self._transaction.model_copy(update={"actions": tuple(self._actions)})

    def sign_transaction(self, signer: Signer) -> SignedTransaction:
        """
        Hash the current transaction and sign the hash with ``signer``.

        The builder is left untouched, so it can be signed again later,
        including after further actions are added.

        Args:
            signer: Signer whose ``sign`` receives the 32-byte transaction hash

        Returns:
            Signed transaction wrapping a snapshot of the current state

        Raises:
            Exception: Whatever ``signer.sign`` raises, unchanged
        """
        transaction = self.build()
        tx_hash, size = transaction.get_hash_and_size()
        signature = signer.sign(tx_hash)

        logger.debug(
            "Signed transaction %s: %d actions, %d bytes, signer=%s",
            tx_hash.hex()[:16],
            len(transaction.actions),
            size,
            transaction.signer_id,
        )

        return SignedTransaction(transaction=transaction, signature=signature)

    def clone(self) -> TransactionBuilder:
        """
        Create a copy of this builder.

        Returns:
            New builder with the same header and actions
        """
        cloned = self.__class__.__new__(self.__class__)
        cloned._transaction = self._transaction
        cloned._actions = list(self._actions)
        return cloned

    def __len__(self) -> int:
        return len(self._actions)

    def __str__(self) -> str:
        return f"{self.__class__.__name__}({self.signer_id} -> {self.receiver_id}, {len(self._actions)} actions)"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(signer_id='{self.signer_id}', receiver_id='{self.receiver_id}', "
            f"nonce={self.nonce}, actions={[type(a).__name__ for a in self._actions]})"
        )


__all__ = ["TransactionBuilder"]
