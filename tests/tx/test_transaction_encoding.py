"""
Borsh encoding of transactions, actions and access keys.

The reference vector is the transfer transaction published by near-api-js.
"""

import hashlib

import pytest
from pydantic import ValidationError

from near_transactions.crypto.keys import KeyType, PublicKey, Signature
from near_transactions.runtime.errors import DecodingError, ErrorCode
from near_transactions.transactions import (
    AccessKey,
    AddKeyAction,
    CreateAccountAction,
    DeleteAccountAction,
    FunctionCallAction,
    SignedTransaction,
    Transaction,
    TransferAction,
    encode_args,
)
from near_transactions.tx.builder import TransactionBuilder

REFERENCE_KEY = bytes.fromhex("917b3d268d4b58f7fec1b150bd68d69be3ee5d4cc39855e341538465bb77860d")
REFERENCE_BLOCK_HASH = bytes.fromhex("0fa473fd26901df296be6adc4cc4df34d040efa2435224b6986910e630c2fef6")
REFERENCE_TX_HEX = (
    "09000000746573742e6e656172"
    "00917b3d268d4b58f7fec1b150bd68d69be3ee5d4cc39855e341538465bb77860d"
    "0100000000000000"
    "0d00000077686174657665722e6e656172"
    "0fa473fd26901df296be6adc4cc4df34d040efa2435224b6986910e630c2fef6"
    "01000000"
    "0301000000000000000000000000000000"
)
REFERENCE_TX_HASH = "eea6e680f3ea51a7f667e9a801d0bfadf66e03d41ed54975b3c6006351461b32"


@pytest.fixture
def reference_builder():
    public_key = PublicKey(key_type=KeyType.ED25519, data=REFERENCE_KEY)
    return TransactionBuilder("test.near", public_key, "whatever.near", 1, REFERENCE_BLOCK_HASH)


class TestReferenceVector:
    """Encoding matches the bytes produced by other NEAR clients."""

    def test_transfer_bytes(self, reference_builder):
        tx = reference_builder.transfer(1).build()

        assert tx.to_bytes().hex() == REFERENCE_TX_HEX

    def test_transfer_hash(self, reference_builder):
        tx = reference_builder.transfer(1).build()
        tx_hash, size = tx.get_hash_and_size()

        assert tx_hash.hex() == REFERENCE_TX_HASH
        assert size == len(REFERENCE_TX_HEX) // 2

    def test_decode_reference(self):
        tx = Transaction.from_bytes(bytes.fromhex(REFERENCE_TX_HEX))

        assert tx.signer_id == "test.near"
        assert tx.receiver_id == "whatever.near"
        assert tx.public_key.data == REFERENCE_KEY
        assert tx.block_hash == REFERENCE_BLOCK_HASH
        assert tx.actions == (TransferAction(deposit=1),)


class TestActionEncoding:
    """Per-action Borsh layout."""

    def _action_bytes(self, builder):
        # Everything from the u32 action count onwards.
        tx = builder.build()
        header = tx.model_copy(update={"actions": ()}).to_bytes()
        return tx.to_bytes()[len(header) - 4:]

    def test_create_account(self, reference_builder):
        assert self._action_bytes(reference_builder.create_account()) == bytes.fromhex("01000000" "00")

    def test_deploy_contract(self, reference_builder):
        encoded = self._action_bytes(reference_builder.deploy_contract(b"\x00asm"))

        assert encoded == bytes.fromhex("01000000" "01" "04000000") + b"\x00asm"

    def test_function_call(self, reference_builder):
        encoded = self._action_bytes(reference_builder.function_call("go", b"{}", 30, 2))

        expected = (
            bytes.fromhex("01000000" "02")
            + bytes.fromhex("02000000") + b"go"
            + bytes.fromhex("02000000") + b"{}"
            + (30).to_bytes(8, "little")
            + (2).to_bytes(16, "little")
        )
        assert encoded == expected

    def test_delete_account(self, reference_builder):
        encoded = self._action_bytes(reference_builder.delete_account("bob.near"))

        assert encoded == bytes.fromhex("01000000" "07" "08000000") + b"bob.near"

    def test_action_count_prefix(self, reference_builder):
        tx = reference_builder.create_account().create_account().create_account().build()

        assert tx.to_bytes()[-7:] == bytes.fromhex("03000000" "000000")

    def test_max_u128_deposit(self, reference_builder):
        encoded = self._action_bytes(reference_builder.transfer(2**128 - 1))

        assert encoded == bytes.fromhex("01000000" "03") + b"\xff" * 16


class TestAccessKeyEncoding:
    """AccessKey nonce and permission layout."""

    def test_full_access(self, reference_builder):
        pk = PublicKey(key_type=KeyType.ED25519, data=REFERENCE_KEY)
        tx = reference_builder.add_full_access_key(pk).build()

        expected_tail = bytes([0]) + REFERENCE_KEY + bytes(8) + bytes([1])
        assert tx.to_bytes().endswith(expected_tail)

    def test_function_call_without_allowance(self, reference_builder):
        pk = PublicKey(key_type=KeyType.ED25519, data=REFERENCE_KEY)
        tx = reference_builder.add_function_call_key(pk, "app.near", ["a"]).build()

        expected_tail = (
            bytes(8)
            + bytes([0])
            + bytes([0])
            + bytes.fromhex("08000000") + b"app.near"
            + bytes.fromhex("01000000") + bytes.fromhex("01000000") + b"a"
        )
        assert tx.to_bytes().endswith(expected_tail)

    def test_function_call_with_allowance(self):
        access_key = AccessKey.function_call_access("app.near", (), allowance=5)
        pk = PublicKey(key_type=KeyType.ED25519, data=REFERENCE_KEY)
        tx = Transaction(
            signer_id="test.near",
            public_key=pk,
            nonce=1,
            receiver_id="test.near",
            block_hash=REFERENCE_BLOCK_HASH,
            actions=(AddKeyAction(public_key=pk, access_key=access_key),),
        )

        expected_tail = (
            bytes(8)
            + bytes([0])
            + bytes([1]) + (5).to_bytes(16, "little")
            + bytes.fromhex("08000000") + b"app.near"
            + bytes.fromhex("00000000")
        )
        assert tx.to_bytes().endswith(expected_tail)
        assert Transaction.from_bytes(tx.to_bytes()) == tx


class TestSignedTransaction:
    """SignedTransaction encoding and decoding."""

    def test_signature_appended_after_transaction(self, make_builder, alice_signer):
        builder = make_builder().create_account().transfer(10)
        signed = builder.sign_transaction(alice_signer)

        encoded = signed.to_bytes()
        tx_bytes = builder.build().to_bytes()
        assert encoded[:len(tx_bytes)] == tx_bytes
        assert encoded[len(tx_bytes)] == KeyType.ED25519
        assert encoded[len(tx_bytes) + 1:] == signed.signature.data
        assert signed.size == len(tx_bytes) + 65

    def test_decode_signed(self, make_builder, bob_signer, alice_signer):
        signed = (
            make_builder()
            .function_call("set", {"value": 1}, 10**13, 0)
            .add_function_call_key(bob_signer.public_key, "app.test", ["set"], allowance=10**24)
            .delete_account("carol.test")
            .sign_transaction(alice_signer)
        )

        assert SignedTransaction.from_bytes(signed.to_bytes()) == signed
        assert SignedTransaction.from_base64(signed.to_base64()) == signed

    def test_decode_secp256k1_signed(self, secp_signer, block_hash):
        signed = (
            TransactionBuilder("carol.test", secp_signer.public_key, "bob.test", 9, block_hash)
            .stake(10, secp_signer.public_key)
            .sign_transaction(secp_signer)
        )

        decoded = SignedTransaction.from_bytes(signed.to_bytes())
        assert decoded == signed
        assert decoded.verify()

    def test_hash_is_sha256_of_transaction(self, make_builder, stub_signer):
        signed = make_builder().transfer(3).sign_transaction(stub_signer)

        assert signed.hash == hashlib.sha256(signed.transaction.to_bytes()).digest()
        assert len(signed.hash_b58) > 0


class TestDecodingErrors:
    """Malformed input is rejected with DecodingError."""

    def test_trailing_bytes(self):
        with pytest.raises(DecodingError) as excinfo:
            Transaction.from_bytes(bytes.fromhex(REFERENCE_TX_HEX) + b"\x00")

        assert excinfo.value.code == ErrorCode.TRAILING_BYTES

    def test_truncated(self):
        with pytest.raises(DecodingError) as excinfo:
            Transaction.from_bytes(bytes.fromhex(REFERENCE_TX_HEX)[:-3])

        assert excinfo.value.code == ErrorCode.UNEXPECTED_EOF

    def test_unknown_action_tag(self):
        data = bytearray.fromhex(REFERENCE_TX_HEX)
        data[-17] = 0x63

        with pytest.raises(DecodingError) as excinfo:
            Transaction.from_bytes(bytes(data))

        assert excinfo.value.code == ErrorCode.UNKNOWN_VARIANT

    def test_unknown_key_type(self):
        data = bytearray.fromhex(REFERENCE_TX_HEX)
        data[13] = 0x05

        with pytest.raises(DecodingError):
            Transaction.from_bytes(bytes(data))

    def test_invalid_signer_id(self):
        data = bytes.fromhex(REFERENCE_TX_HEX).replace(b"test.near", b"TEST.near")

        with pytest.raises(DecodingError) as excinfo:
            Transaction.from_bytes(data)

        assert isinstance(excinfo.value.cause, ValidationError)

    def test_invalid_beneficiary_in_signed_transaction(self, make_builder, alice_signer):
        signed = make_builder().delete_account("carol.test").sign_transaction(alice_signer)
        data = signed.to_bytes().replace(b"carol.test", b"CAROL.test")

        with pytest.raises(DecodingError):
            SignedTransaction.from_bytes(data)


class TestArgs:
    def test_bytes_pass_through(self):
        assert encode_args(b"\x01\x02") == b"\x01\x02"

    def test_json_is_compact(self):
        assert encode_args({"a": [1, 2]}) == b'{"a":[1,2]}'

    def test_string_is_utf8(self):
        assert encode_args("héllo") == "héllo".encode("utf-8")

    def test_unsupported_type(self):
        with pytest.raises(TypeError):
            encode_args(3.5)

    def test_model_accepts_dict_args(self):
        action = FunctionCallAction(method_name="m", args={"k": "v"}, gas=1, deposit=0)

        assert action.args == b'{"k":"v"}'

    def test_actions_are_frozen(self):
        action = CreateAccountAction()

        with pytest.raises(ValidationError):
            action.type = "Transfer"

    def test_delete_account_validates_beneficiary(self):
        with pytest.raises(ValidationError):
            DeleteAccountAction(beneficiary_id="NOT VALID")


def test_signature_length_enforced():
    with pytest.raises(ValidationError):
        Signature(key_type=KeyType.ED25519, data=bytes(10))
