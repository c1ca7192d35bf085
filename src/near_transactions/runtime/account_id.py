"""
AccountId Pydantic custom type for NEAR account identifiers.
"""

from __future__ import annotations
import re
from typing import Any

from pydantic import GetCoreSchemaHandler
from pydantic_core import CoreSchema, core_schema

from .errors import InvalidAccountIdError

MIN_ACCOUNT_ID_LEN = 2
MAX_ACCOUNT_ID_LEN = 64

# Lowercase alphanumeric runs joined by a single '-', '_' or '.'
_ACCOUNT_ID_RE = re.compile(r"^(([a-z\d]+[\-_])*[a-z\d]+\.)*([a-z\d]+[\-_])*[a-z\d]+$")


class AccountId(str):
    """
    NEAR account identifier.

    A ``str`` subclass, so it compares, hashes and serializes as the
    plain account name. Construction validates the name.
    """

    def __new__(cls, value: str) -> AccountId:
        if isinstance(value, AccountId):
            return value
        if not isinstance(value, str):
            raise InvalidAccountIdError(
                f"AccountId must be a string, got {type(value).__name__}"
            )
        cls.validate(value)
        return super().__new__(cls, value)

    @staticmethod
    def validate(value: str) -> None:
        """
        Check NEAR account id rules.

        Raises:
            InvalidAccountIdError: If the name is too short, too long or
                contains characters or separators that are not allowed
        """
        if len(value) < MIN_ACCOUNT_ID_LEN:
            raise InvalidAccountIdError(
                f"Account id too short: {value!r}", details={"min": MIN_ACCOUNT_ID_LEN}
            )
        if len(value) > MAX_ACCOUNT_ID_LEN:
            raise InvalidAccountIdError(
                f"Account id too long: {len(value)} characters", details={"max": MAX_ACCOUNT_ID_LEN}
            )
        if not _ACCOUNT_ID_RE.fullmatch(value):
            raise InvalidAccountIdError(f"Account id has invalid characters or separators: {value!r}")

    @classmethod
    def is_valid(cls, value: str) -> bool:
        """Return True if ``value`` is a valid account id."""
        try:
            cls.validate(value)
        except InvalidAccountIdError:
            return False
        return True

    @property
    def is_top_level(self) -> bool:
        """Top-level accounts contain no '.' separator."""
        return "." not in self

    @property
    def is_implicit(self) -> bool:
        """Implicit accounts are the 64-character hex of an ed25519 public key."""
        return len(self) == 64 and all(c in "0123456789abcdef" for c in self)

    def is_sub_account_of(self, parent: str) -> bool:
        """Check whether this account is a direct sub-account of ``parent``."""
        prefix, sep, rest = self.partition(".")
        return bool(sep) and bool(prefix) and rest == parent

    def __repr__(self) -> str:
        return f"AccountId('{str.__str__(self)}')"

    @classmethod
    def __get_pydantic_core_schema__(
        cls,
        source_type: Any,
        handler: GetCoreSchemaHandler,
    ) -> CoreSchema:
        """Return a Pydantic CoreSchema that validates the AccountId."""
        return core_schema.no_info_before_validator_function(
            cls._validate,
            core_schema.is_instance_schema(cls),
            serialization=core_schema.plain_serializer_function_ser_schema(str),
        )

    @classmethod
    def _validate(cls, value: Any) -> AccountId:
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls(value)
        raise ValueError(f"Invalid AccountId: {value!r}")


__all__ = ["AccountId", "MIN_ACCOUNT_ID_LEN", "MAX_ACCOUNT_ID_LEN"]
