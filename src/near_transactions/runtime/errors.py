"""
NEAR transaction error model.

Structured errors raised by the codec, key parsing and account id parsing
layers. Errors raised by a caller-supplied signer are never wrapped in
these types.
"""

from __future__ import annotations
from typing import Optional, Dict, Any
from enum import IntEnum


class ErrorCode(IntEnum):
    """Error codes for the transaction library."""

    OK = 0

    # General errors (1-99)
    UNKNOWN = 1
    INTERNAL = 2

    # Encoding errors (100-199)
    ENCODING_ERROR = 100
    INTEGER_OUT_OF_RANGE = 101
    DECODING_ERROR = 102
    UNEXPECTED_EOF = 103
    UNKNOWN_VARIANT = 104
    TRAILING_BYTES = 105

    # Key/Account errors (700-799)
    INVALID_KEY = 700
    INVALID_SIGNATURE = 701
    UNSUPPORTED_KEY_TYPE = 702
    INVALID_ACCOUNT_ID = 710
    INVALID_CREDENTIALS = 720


class NearError(Exception):
    """
    Base class for all library errors.

    Carries a code, optional details and the underlying cause.
    """

    def __init__(self, message: str, code: ErrorCode = ErrorCode.UNKNOWN,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        """
        Initialize an error.

        Args:
            message: Error message
            code: Error code
            details: Additional error details
            cause: Underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        parts = [f"[{self.code.name}] {self.message}"]
        if self.details:
            parts.append(f"Details: {self.details}")
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        result = {
            "code": self.code.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.cause:
            result["cause"] = str(self.cause)
        return result


class EncodingError(NearError):
    """Value cannot be Borsh encoded."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.ENCODING_ERROR,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, code, details, cause)


class DecodingError(NearError):
    """Bytes cannot be Borsh decoded."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.DECODING_ERROR,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, code, details, cause)


class InvalidKeyError(NearError, ValueError):
    """Malformed public key, secret key or signature."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.INVALID_KEY,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, code, details, cause)


class InvalidAccountIdError(NearError, ValueError):
    """Account id does not follow NEAR naming rules."""

    def __init__(self, message: str = "Invalid account id",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.INVALID_ACCOUNT_ID, details, cause)


class CredentialsError(NearError):
    """Credential file is missing fields or inconsistent."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None,
                 cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.INVALID_CREDENTIALS, details, cause)


__all__ = [
    "ErrorCode",
    "NearError",
    "EncodingError",
    "DecodingError",
    "InvalidKeyError",
    "InvalidAccountIdError",
    "CredentialsError",
]
