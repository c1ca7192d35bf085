"""
Borsh Reader

Decodes the Borsh binary encoding produced by ``BorshWriter``.
"""

from __future__ import annotations

import builtins
import struct
from typing import Callable, List, Optional, TypeVar

from ..runtime.errors import DecodingError, ErrorCode

T = TypeVar("T")


class BorshReader:
    """
    Sequential Borsh decoder over an immutable byte buffer.

    Every read advances the offset; reading past the end raises
    ``DecodingError`` with code ``UNEXPECTED_EOF``.
    """

    def __init__(self, buf: builtins.bytes):
        self._buf = builtins.bytes(buf)
        self._off = 0

    @property
    def eof(self) -> builtins.bool:
        """True once every byte has been consumed."""
        return self._off >= len(self._buf)

    @property
    def offset(self) -> int:
        return self._off

    @property
    def remaining(self) -> int:
        return len(self._buf) - self._off

    def _take(self, n: int) -> builtins.bytes:
        if n < 0 or self._off + n > len(self._buf):
            raise DecodingError(
                f"Unexpected end of input: need {n} bytes at offset {self._off}, "
                f"{self.remaining} available",
                ErrorCode.UNEXPECTED_EOF,
            )
        out = self._buf[self._off : self._off + n]
        self._off += n
        return out

    def u8(self) -> int:
        """Read unsigned 8-bit integer."""
        return self._take(1)[0]

    def u32(self) -> int:
        """Read unsigned 32-bit integer in little-endian format."""
        return struct.unpack("<I", self._take(4))[0]

    def u64(self) -> int:
        """Read unsigned 64-bit integer in little-endian format."""
        return struct.unpack("<Q", self._take(8))[0]

    def u128(self) -> int:
        """Read unsigned 128-bit integer in little-endian format."""
        return int.from_bytes(self._take(16), "little")

    def bool(self) -> builtins.bool:
        """Read a 0/1 byte as a boolean."""
        v = self.u8()
        if v not in (0, 1):
            raise DecodingError(f"Invalid bool byte: {v}", ErrorCode.UNKNOWN_VARIANT)
        return v == 1

    def fixed_bytes(self, n: int) -> builtins.bytes:
        """Read exactly ``n`` raw bytes."""
        return self._take(n)

    def bytes(self) -> builtins.bytes:
        """Read a u32 length-prefixed byte string."""
        n = self.u32()
        return self._take(n)

    def string(self) -> str:
        """Read a u32 length-prefixed UTF-8 string."""
        raw = self.bytes()
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodingError(f"Invalid UTF-8 string: {e}", cause=e)

    def option(self, read_value: Callable[[BorshReader], T]) -> Optional[T]:
        """Read an ``Option<T>``."""
        tag = self.u8()
        if tag == 0:
            return None
        if tag == 1:
            return read_value(self)
        raise DecodingError(f"Invalid option tag: {tag}", ErrorCode.UNKNOWN_VARIANT)

    def sequence(self, read_item: Callable[[BorshReader], T]) -> List[T]:
        """Read a ``Vec<T>``."""
        count = self.u32()
        return [read_item(self) for _ in range(count)]

    def expect_eof(self) -> None:
        """
        Assert the whole buffer was consumed.

        Raises:
            DecodingError: If unread bytes remain
        """
        if not self.eof:
            raise DecodingError(
                f"{self.remaining} trailing bytes after offset {self._off}",
                ErrorCode.TRAILING_BYTES,
            )


__all__ = ["BorshReader"]
