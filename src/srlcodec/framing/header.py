"""Document header layout.

The header structure is:
- [Magic (1 byte)] [Version (1 byte)] [Flags (1 byte)]
- [User data length (varint) + user data body, if flagged]
- [Uncompressed body length (varint), if compressed]

followed by the body, compressed or not as the flags say.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..codec.tags import features_for
from ..codec.varint import ByteReader, ByteWriter
from ..config import CompressionType
from ..exceptions import FormatError, FramingError

logger = logging.getLogger(__name__)

MAGIC = 0x3D  # '='
HEADER_SIZE = 3

FLAG_COMPRESSION_MASK = 0x03
FLAG_USER_DATA = 0x04
FLAG_KNOWN_BITS = FLAG_COMPRESSION_MASK | FLAG_USER_DATA


@dataclass(frozen=True)
class Header:
    """Parsed document header.

    Attributes:
        version: Protocol version of the document
        compression: Compression applied to the body
        user_data: Raw tagged body of the user-data section, if present
        uncompressed_length: Body length before compression (compressed only)
        body_offset: Position of the (possibly compressed) body in the document
    """

    version: int
    compression: CompressionType
    user_data: Optional[bytes]
    uncompressed_length: Optional[int]
    body_offset: int

    @property
    def has_user_data(self) -> bool:
        return self.user_data is not None


def write_header(
    version: int,
    compression: CompressionType,
    *,
    user_data: Optional[bytes] = None,
    uncompressed_length: Optional[int] = None,
) -> bytes:
    """Build the header bytes for a document.

    Args:
        version: Protocol version
        compression: Compression applied to the body
        user_data: Encoded user-data body to embed, or None
        uncompressed_length: Original body length (required when compressed)

    Returns:
        Header bytes, to be followed directly by the body

    Example:
        >>> write_header(3, CompressionType.NONE)
        b'=\\x03\\x00'
    """
    flags = int(compression)
    if user_data is not None:
        flags |= FLAG_USER_DATA

    writer = ByteWriter()
    writer.write_byte(MAGIC)
    writer.write_byte(version)
    writer.write_byte(flags)

    if user_data is not None:
        writer.write_varint(len(user_data))
        writer.write_bytes(user_data)

    if compression is not CompressionType.NONE:
        if uncompressed_length is None:
            raise ValueError("Compressed documents need the uncompressed body length")
        writer.write_varint(uncompressed_length)

    return writer.to_bytes()


def read_header(data: bytes) -> Header:
    """Parse and validate the header at the start of a document.

    Args:
        data: Complete document

    Returns:
        Parsed header; the body starts at ``header.body_offset``

    Raises:
        FramingError: If the magic, version or flags are invalid or the header
            is truncated
    """
    if not data:
        raise FramingError("Cannot decode empty data")

    reader = ByteReader(data)
    try:
        magic = reader.read_byte()
        if magic != MAGIC:
            raise FramingError(f"Bad magic byte 0x{magic:02X}, expected 0x{MAGIC:02X}")

        version = reader.read_byte()
        try:
            features = features_for(version)
        except FormatError as e:
            raise FramingError(str(e)) from e

        flags = reader.read_byte()
        if flags & ~FLAG_KNOWN_BITS:
            raise FramingError(f"Unknown header flags 0x{flags:02X}")
        try:
            compression = CompressionType(flags & FLAG_COMPRESSION_MASK)
        except ValueError as e:
            raise FramingError(f"Unknown compression type {flags & FLAG_COMPRESSION_MASK}") from e

        user_data: Optional[bytes] = None
        if flags & FLAG_USER_DATA:
            if not features.user_data:
                raise FramingError(f"Protocol version {version} cannot carry user data")
            user_data = reader.read_bytes(reader.read_varint())

        uncompressed_length: Optional[int] = None
        if compression is not CompressionType.NONE:
            uncompressed_length = reader.read_varint()
    except FramingError:
        raise
    except FormatError as e:
        raise FramingError(f"Truncated header: {e}") from e

    header = Header(
        version=version,
        compression=compression,
        user_data=user_data,
        uncompressed_length=uncompressed_length,
        body_offset=reader.position,
    )
    logger.debug(
        "Parsed header: version=%d compression=%s user_data=%s body_offset=%d",
        version,
        compression.name,
        user_data is not None,
        header.body_offset,
    )
    return header
