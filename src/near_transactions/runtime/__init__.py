"""Runtime helpers for the NEAR transaction library"""

from .account_id import AccountId
from .errors import (
    ErrorCode,
    NearError,
    EncodingError,
    DecodingError,
    InvalidKeyError,
    InvalidAccountIdError,
    CredentialsError,
)

__all__ = [
    "AccountId",
    "ErrorCode",
    "NearError",
    "EncodingError",
    "DecodingError",
    "InvalidKeyError",
    "InvalidAccountIdError",
    "CredentialsError",
]
