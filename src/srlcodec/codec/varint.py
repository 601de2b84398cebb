"""Byte-level writing and reading primitives.

This module provides the varint, zigzag and fixed-width primitives the tagged
body is built from. Varints carry 7 data bits per byte, least significant
group first, with the high bit of each byte set while more bytes follow.
"""

from __future__ import annotations

import struct

from ..exceptions import FormatError

MAX_VARINT_VALUE = (1 << 64) - 1
MAX_VARINT_LENGTH = 10  # ceil(64 / 7)

_DOUBLE = struct.Struct("<d")
_FLOAT = struct.Struct("<f")


def varint_length(value: int) -> int:
    """Return the number of bytes ``value`` occupies as a varint.

    Example:
        >>> varint_length(127)
        1
        >>> varint_length(128)
        2
    """
    if value < 0:
        raise ValueError(f"varint_length requires non-negative value, got {value}")
    return max(1, (value.bit_length() + 6) // 7)


def encode_varint(value: int) -> bytes:
    """Encode a non-negative integer as a varint.

    Raises:
        ValueError: If value is negative or does not fit in 64 bits
    """
    if value < 0:
        raise ValueError(f"encode_varint requires non-negative value, got {value}")
    if value > MAX_VARINT_VALUE:
        raise ValueError(f"Value {value} does not fit in a 64-bit varint")

    out = bytearray()
    while value >= 0x80:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def zigzag_encode(value: int) -> int:
    """Map a signed integer onto the non-negative integers (0, -1, 1, -2, ...)."""
    return (value << 1) if value >= 0 else ((-value) << 1) - 1


def zigzag_decode(value: int) -> int:
    """Invert zigzag_encode."""
    return (value >> 1) ^ -(value & 1)


class ByteWriter:
    """Appends primitives to a growing byte buffer.

    Example:
        >>> writer = ByteWriter()
        >>> writer.write_byte(0x20)
        >>> writer.write_varint(300)
        >>> writer.to_bytes()
        b' \\xac\\x02'
    """

    def __init__(self) -> None:
        self._buf = bytearray()

    @property
    def position(self) -> int:
        """Offset at which the next byte will be written."""
        return len(self._buf)

    def write_byte(self, byte: int) -> None:
        self._buf.append(byte)

    def write_varint(self, value: int) -> None:
        """Write a non-negative integer as a varint.

        Raises:
            ValueError: If value is negative or does not fit in 64 bits
        """
        self._buf.extend(encode_varint(value))

    def write_zigzag(self, value: int) -> None:
        self.write_varint(zigzag_encode(value))

    def write_double(self, value: float) -> None:
        self._buf.extend(_DOUBLE.pack(value))

    def write_bytes(self, data: bytes) -> None:
        self._buf.extend(data)

    def set_bits(self, offset: int, mask: int) -> None:
        """OR ``mask`` into a byte that has already been written."""
        self._buf[offset] |= mask

    def to_bytes(self) -> bytes:
        return bytes(self._buf)

    def __len__(self) -> int:
        return len(self._buf)


class ByteReader:
    """Consumes primitives from a byte buffer, strictly left to right.

    Every read that would run past the end raises FormatError.
    """

    def __init__(self, data: bytes) -> None:
        self._data = memoryview(data)
        self._position = 0

    @property
    def position(self) -> int:
        """Offset of the next unread byte."""
        return self._position

    def remaining(self) -> int:
        """Return the number of unread bytes."""
        return len(self._data) - self._position

    def at_end(self) -> bool:
        return self._position >= len(self._data)

    def peek_byte(self) -> int:
        if self._position >= len(self._data):
            raise FormatError(f"Truncated data: expected a byte at offset {self._position}")
        return self._data[self._position]

    def read_byte(self) -> int:
        byte = self.peek_byte()
        self._position += 1
        return byte

    def read_varint(self, max_length: int = MAX_VARINT_LENGTH) -> int:
        """Read a varint of at most ``max_length`` bytes.

        Raises:
            FormatError: If the data ends mid-varint, continuation bits run
                past ``max_length`` bytes, or the value exceeds 64 bits
        """
        start = self._position
        value = 0
        shift = 0
        for _ in range(max_length):
            if self._position >= len(self._data):
                raise FormatError(f"Truncated data: varint at offset {start} is incomplete")
            byte = self._data[self._position]
            self._position += 1
            value |= (byte & 0x7F) << shift
            if not byte & 0x80:
                if value > MAX_VARINT_VALUE:
                    raise FormatError(f"Varint at offset {start} overflows 64 bits")
                return value
            shift += 7
        raise FormatError(f"Varint at offset {start} is longer than {max_length} bytes")

    def read_zigzag(self) -> int:
        return zigzag_decode(self.read_varint())

    def read_bytes(self, num_bytes: int) -> bytes:
        """Read exactly ``num_bytes`` raw bytes.

        Raises:
            FormatError: If fewer bytes remain
        """
        if num_bytes > self.remaining():
            raise FormatError(
                f"Truncated data: need {num_bytes} bytes at offset {self._position}, "
                f"have {self.remaining()}"
            )
        end = self._position + num_bytes
        chunk = self._data[self._position:end].tobytes()
        self._position = end
        return chunk

    def read_double(self) -> float:
        return float(_DOUBLE.unpack(self.read_bytes(_DOUBLE.size))[0])

    def read_float(self) -> float:
        return float(_FLOAT.unpack(self.read_bytes(_FLOAT.size))[0])

    def read_rest(self) -> bytes:
        """Read every remaining byte."""
        return self.read_bytes(self.remaining())
