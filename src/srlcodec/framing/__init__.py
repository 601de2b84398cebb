"""Document framing for srlcodec.

This module wraps encoded bodies in the document header, compressing them
when configured, and reverses the process on decode.
"""

from __future__ import annotations

from typing import Optional

from ..config import CompressionType, DecoderConfig, EncoderConfig
from ..exceptions import FramingError
from .compression import compress_body, decompress_body
from .header import HEADER_SIZE, MAGIC, Header, read_header, write_header


def frame_document(
    body: bytes,
    config: EncoderConfig,
    *,
    user_data: Optional[bytes] = None,
) -> bytes:
    """Wrap an encoded body in a document header.

    Args:
        body: Encoded tagged body
        config: Encoder configuration (version and compression settings)
        user_data: Encoded user-data body to embed in the header, or None

    Returns:
        Complete document
    """
    compression, payload = compress_body(body, config)
    header = write_header(
        config.protocol_version,
        compression,
        user_data=user_data,
        uncompressed_length=len(body) if compression is not CompressionType.NONE else None,
    )
    return header + payload


def unframe_document(data: bytes, config: DecoderConfig) -> tuple[Header, bytes]:
    """Parse the header of a document and return its uncompressed body.

    Args:
        data: Complete document
        config: Decoder configuration (compression limits and refusals)

    Returns:
        Tuple of (header, uncompressed body)

    Raises:
        FramingError: If the header or compression envelope is invalid
    """
    header = read_header(data)
    payload = bytes(data[header.body_offset:])

    if header.compression is CompressionType.NONE:
        return header, payload

    if header.uncompressed_length is None:
        raise FramingError("Compressed document without an uncompressed length")
    body = decompress_body(header.compression, payload, header.uncompressed_length, config)
    return header, body


__all__ = [
    "frame_document",
    "unframe_document",
    "compress_body",
    "decompress_body",
    "read_header",
    "write_header",
    "Header",
    "MAGIC",
    "HEADER_SIZE",
]
