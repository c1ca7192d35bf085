"""
NEAR transactions - Python SDK

Builds NEAR transactions action by action, encodes them with Borsh and signs
their hash with a pluggable signer.
"""

from .runtime import *
from .crypto import *
from .transactions import *
from .signers import *
from .tx import TransactionBuilder
from .utils import Units, parse_near_amount, format_near_amount, tgas

__version__ = "0.2.0"
__all__ = [
    "TransactionBuilder",

    # Transaction types
    "Transaction",
    "SignedTransaction",
    "AccessKey",
    "FunctionCallPermission",
    "FullAccessPermission",
    "Action",
    "CreateAccountAction",
    "DeployContractAction",
    "FunctionCallAction",
    "TransferAction",
    "StakeAction",
    "AddKeyAction",
    "DeleteKeyAction",
    "DeleteAccountAction",

    # Keys and signing
    "KeyType",
    "PublicKey",
    "Signature",
    "SecretKey",
    "Signer",
    "InMemorySigner",

    # Runtime
    "AccountId",
    "ErrorCode",
    "NearError",
    "EncodingError",
    "DecodingError",
    "InvalidKeyError",
    "InvalidAccountIdError",
    "CredentialsError",

    # Units
    "Units",
    "parse_near_amount",
    "format_near_amount",
    "tgas",
]
