"""
Borsh Writer

Implements the Borsh binary encoding used by NEAR for transactions and
signatures: little-endian fixed-width integers, u32 length prefixes for
dynamic byte strings, strings and sequences, and a single tag byte for
options and enum variants.
"""

from __future__ import annotations

import struct
from typing import Callable, Iterable, Optional, TypeVar

from ..runtime.errors import EncodingError, ErrorCode

T = TypeVar("T")

U8_MAX = 0xFF
U32_MAX = 0xFFFFFFFF
U64_MAX = 0xFFFFFFFFFFFFFFFF
U128_MAX = (1 << 128) - 1


def _check_range(name: str, v: int, maximum: int) -> None:
    if not isinstance(v, int) or isinstance(v, bool):
        raise EncodingError(
            f"{name} requires an int, got {type(v).__name__}",
            ErrorCode.INTEGER_OUT_OF_RANGE,
        )
    if v < 0 or v > maximum:
        raise EncodingError(
            f"{name} value out of range: {v}",
            ErrorCode.INTEGER_OUT_OF_RANGE,
            details={"max": maximum},
        )


class BorshWriter:
    """
    Append-only Borsh encoder.

    Each ``write`` method appends to an internal buffer; ``to_bytes``
    returns the accumulated encoding.
    """

    def __init__(self):
        """Initialize writer with empty byte buffer."""
        self._bb = bytearray()

    def u8(self, v: int) -> None:
        """Write unsigned 8-bit integer."""
        _check_range("u8", v, U8_MAX)
        self._bb.append(v)

    def u32(self, v: int) -> None:
        """Write unsigned 32-bit integer in little-endian format."""
        _check_range("u32", v, U32_MAX)
        self._bb.extend(struct.pack("<I", v))

    def u64(self, v: int) -> None:
        """Write unsigned 64-bit integer in little-endian format."""
        _check_range("u64", v, U64_MAX)
        self._bb.extend(struct.pack("<Q", v))

    def u128(self, v: int) -> None:
        """
        Write unsigned 128-bit integer in little-endian format.

        Used for NEAR balances (yoctoNEAR amounts).
        """
        _check_range("u128", v, U128_MAX)
        self._bb.extend(v.to_bytes(16, "little"))

    def bool(self, v: bool) -> None:
        """Write a boolean as a single 0/1 byte."""
        self._bb.append(1 if v else 0)

    def fixed_bytes(self, v: bytes, length: Optional[int] = None) -> None:
        """
        Write raw bytes without length prefix.

        Args:
            v: Bytes to write directly
            length: Expected length; checked when given

        Raises:
            EncodingError: If ``length`` is given and does not match
        """
        if length is not None and len(v) != length:
            raise EncodingError(
                f"Expected {length} bytes, got {len(v)}",
                details={"expected": length, "actual": len(v)},
            )
        self._bb.extend(v)

    def bytes(self, v: bytes) -> None:
        """Write bytes with a u32 length prefix (Borsh ``Vec<u8>``)."""
        self.u32(len(v))
        self._bb.extend(v)

    def string(self, s: str) -> None:
        """Write a UTF-8 string with a u32 byte-length prefix."""
        self.bytes(s.encode("utf-8"))

    def option(self, v: Optional[T], write_value: Callable[["BorshWriter", T], None]) -> None:
        """
        Write an ``Option<T>``: tag 0 for None, tag 1 followed by the value.

        Args:
            v: Value or None
            write_value: Callable that writes a present value
        """
        if v is None:
            self.u8(0)
        else:
            self.u8(1)
            write_value(self, v)

    def sequence(self, items: Iterable[T], write_item: Callable[["BorshWriter", T], None]) -> None:
        """
        Write a ``Vec<T>``: u32 element count followed by each element.

        Args:
            items: Elements to write
            write_item: Callable that writes one element
        """
        items = list(items)
        self.u32(len(items))
        for item in items:
            write_item(self, item)

    def struct(self, value) -> None:
        """Write any object exposing ``serialize(writer)``."""
        value.serialize(self)

    def __len__(self) -> int:
        return len(self._bb)

    def to_bytes(self) -> bytes:
        """Return accumulated bytes as immutable bytes object."""
        return bytes(self._bb)


def encode(value) -> bytes:
    """Borsh encode an object exposing ``serialize(writer)``."""
    writer = BorshWriter()
    value.serialize(writer)
    return writer.to_bytes()


__all__ = ["BorshWriter", "encode", "U8_MAX", "U32_MAX", "U64_MAX", "U128_MAX"]
