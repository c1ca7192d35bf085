"""
Tests for BorshWriter and BorshReader primitives.
"""

import struct

import pytest

from near_transactions.codec import BorshReader, BorshWriter, encode, hash_and_size, sha256_bytes
from near_transactions.codec.writer import U64_MAX, U128_MAX
from near_transactions.runtime.errors import DecodingError, EncodingError, ErrorCode


class TestWriterIntegers:
    """Fixed-width little-endian integers."""

    def test_matches_struct_pack(self):
        w = BorshWriter()
        w.u8(0xAB)
        w.u32(0x01020304)
        w.u64(U64_MAX - 1)

        assert w.to_bytes() == struct.pack("<BIQ", 0xAB, 0x01020304, U64_MAX - 1)

    def test_u128_little_endian(self):
        w = BorshWriter()
        w.u128(1)
        w.u128(U128_MAX)

        assert w.to_bytes() == b"\x01" + bytes(15) + b"\xff" * 16

    @pytest.mark.parametrize("method,value", [
        ("u8", 256),
        ("u32", 2**32),
        ("u64", 2**64),
        ("u128", 2**128),
        ("u64", -1),
    ])
    def test_out_of_range(self, method, value):
        with pytest.raises(EncodingError) as excinfo:
            getattr(BorshWriter(), method)(value)

        assert excinfo.value.code == ErrorCode.INTEGER_OUT_OF_RANGE

    def test_rejects_non_int(self):
        with pytest.raises(EncodingError):
            BorshWriter().u64("1")

        with pytest.raises(EncodingError):
            BorshWriter().u8(True)


class TestWriterCompound:
    """Length-prefixed and composite values."""

    def test_string_prefix_counts_utf8_bytes(self):
        w = BorshWriter()
        w.string("né")

        assert w.to_bytes() == b"\x03\x00\x00\x00n\xc3\xa9"

    def test_fixed_bytes_length_checked(self):
        with pytest.raises(EncodingError):
            BorshWriter().fixed_bytes(b"abc", 32)

    def test_option_and_sequence(self):
        w = BorshWriter()
        w.option(None, BorshWriter.u8)
        w.option(7, BorshWriter.u8)
        w.sequence(["a", "b"], BorshWriter.string)

        assert w.to_bytes() == (
            b"\x00" + b"\x01\x07"
            + b"\x02\x00\x00\x00" + b"\x01\x00\x00\x00a" + b"\x01\x00\x00\x00b"
        )
        assert len(w) == 3 + 4 + 10

    def test_encode_uses_serialize(self):
        class Point:
            def serialize(self, writer):
                writer.u8(1)
                writer.u8(2)

        assert encode(Point()) == b"\x01\x02"
        tx_hash, size = hash_and_size(Point())
        assert tx_hash == sha256_bytes(b"\x01\x02")
        assert size == 2


class TestReader:
    """Decoding mirrors the writer."""

    def test_reads_back_written_values(self):
        w = BorshWriter()
        w.u8(1)
        w.u32(70000)
        w.u64(U64_MAX)
        w.u128(10**24)
        w.bool(True)
        w.bytes(b"xyz")
        w.string("hello")
        w.option(5, BorshWriter.u128)
        w.sequence([1, 2, 3], BorshWriter.u32)

        r = BorshReader(w.to_bytes())
        assert r.u8() == 1
        assert r.u32() == 70000
        assert r.u64() == U64_MAX
        assert r.u128() == 10**24
        assert r.bool() is True
        assert r.bytes() == b"xyz"
        assert r.string() == "hello"
        assert r.option(BorshReader.u128) == 5
        assert r.sequence(BorshReader.u32) == [1, 2, 3]
        assert r.eof
        r.expect_eof()

    def test_unexpected_eof(self):
        r = BorshReader(b"\x01\x02")

        with pytest.raises(DecodingError) as excinfo:
            r.u32()

        assert excinfo.value.code == ErrorCode.UNEXPECTED_EOF

    def test_length_prefix_past_end(self):
        with pytest.raises(DecodingError):
            BorshReader(b"\xff\x00\x00\x00ab").bytes()

    def test_trailing_bytes(self):
        r = BorshReader(b"\x01\x02")
        r.u8()

        assert r.remaining == 1
        assert r.offset == 1
        with pytest.raises(DecodingError) as excinfo:
            r.expect_eof()
        assert excinfo.value.code == ErrorCode.TRAILING_BYTES

    def test_invalid_option_tag(self):
        with pytest.raises(DecodingError) as excinfo:
            BorshReader(b"\x02").option(BorshReader.u8)

        assert excinfo.value.code == ErrorCode.UNKNOWN_VARIANT

    def test_invalid_bool(self):
        with pytest.raises(DecodingError):
            BorshReader(b"\x02").bool()

    def test_invalid_utf8(self):
        with pytest.raises(DecodingError):
            BorshReader(b"\x01\x00\x00\x00\xff").string()
